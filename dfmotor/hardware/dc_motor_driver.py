"""
DFRobot dual-channel DC motor board driver.

Talks to the board's register file over I2C:
- PID/VID identity check
- DC mode reset sequence on connect
- Per-channel movement (direction + PWM duty cycle) and stop
- PWM frequency selection
- Quadrature encoder enable, reduction ratio and signed speed read
- Slave address reassignment (effective after a board reboot)
- Address-space discovery

A controller owns its bus handle exclusively and is meant for single-thread
use; callers sharing a board across threads must serialize access.
"""

import time
import logging
from typing import Iterable, List, Optional

from .errors import BoardConnectionError, DeviceNotFound, TransportError
from .i2c_bus import I2CBus
from .result import CommandResult
from .registers import (
    MotorChannel,
    Direction,
    REG_SLAVE_ADDR,
    REG_PID,
    REG_VID,
    REG_CTRL_MODE,
    PID_EXPECTED,
    VID_EXPECTED,
    CTRL_MODE_DC,
    ADDRESS_MIN,
    ADDRESS_MAX,
    PWM_SETTLE_TIME_S,
    encoder_enable_register,
    encoder_speed_register,
    encoder_ratio_register,
    motor_orientation_register,
    motor_speed_register,
    encode_duty_cycle,
    decode_duty_cycle,
    encode_pwm_frequency,
    decode_speed,
)
from dfmotor.utils.error_handling import handle_errors
from dfmotor.utils.validation import Validator, ValidationResult

DEFAULT_LOGGER_NAME = "dfmotor.board"


def check_board(bus: I2CBus, handle: int, logger: Optional[logging.Logger] = None) -> bool:
    """
    Verify that the device behind ``handle`` is a DC motor board.

    Reads PID then VID. Any transfer failure or mismatch yields False;
    this function never raises for bus errors.
    """
    log = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
    try:
        pid = bus.read_byte(handle, REG_PID)
        vid = bus.read_byte(handle, REG_VID)
    except TransportError as e:
        log.debug(f"Identity read failed: {e}")
        return False

    log.debug(f"pid:0x{pid:02X} vid:0x{vid:02X}")
    return pid == PID_EXPECTED and vid == VID_EXPECTED


def detect_boards(
    bus: I2CBus,
    addresses: Optional[Iterable[int]] = None,
    logger: Optional[logging.Logger] = None
) -> List[int]:
    """
    Scan bus addresses for DC motor boards.

    Each address gets a transient handle that is always closed before the
    next one is tried. Addresses that cannot be opened are skipped.

    Args:
        bus: I2C bus to scan
        addresses: Addresses to scan (default: 1-127)
        logger: Logger for scan progress

    Returns:
        Ascending list of addresses answering with the expected PID/VID
    """
    log = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
    if addresses is None:
        candidates = range(ADDRESS_MIN, ADDRESS_MAX + 1)
    else:
        addresses = list(addresses)
        for address in addresses:
            Validator.validate_address(address).raise_if_invalid()
        candidates = sorted({int(address) for address in addresses})

    found = []
    for address in candidates:
        try:
            handle = bus.open(address)
        except BoardConnectionError:
            continue
        try:
            if check_board(bus, handle, log):
                found.append(address)
        finally:
            bus.close(handle)

    log.info(f"Board scan found {len(found)} board(s): {[f'0x{a:02X}' for a in found]}")
    return found


class DCMotorController:
    """
    Driver for one DC motor board at a fixed I2C address.

    Construction opens the handle, checks the board identity and brings the
    board to an idle state (DC mode, both motors stopped, both encoders
    disabled). It raises instead of returning a half-initialized driver.

    Every command returns a CommandResult; out-of-range input is rejected
    with a ValidationError result before any register is touched.

    Usage:
        with DCMotorController(PigpioI2CBus(1), 0x10) as board:
            board.set_motor_pwm_frequency(3000)
            board.motor_movement(MotorChannel.M1, Direction.CW, 50.0)
    """

    def __init__(
        self,
        bus: I2CBus,
        address: int = 0x10,
        logger: Optional[logging.Logger] = None
    ):
        """
        Connect to the board.

        Args:
            bus: I2C transport
            address: Board address (1-127, factory default 0x10)
            logger: Logger for this board (default: "dfmotor.board")

        Raises:
            ValidationError: address outside 1-127
            BoardConnectionError: handle could not be opened
            DeviceNotFound: identity check failed
        """
        self._handle: Optional[int] = None
        self._bus = bus
        self._address = address
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

        # Commands sent, not board state read back
        self._directions = {ch: Direction.STOP for ch in MotorChannel}
        self._speed_words = {ch: 0 for ch in MotorChannel}
        self._encoders_enabled = {ch: False for ch in MotorChannel}
        self._reduction_ratios = {ch: None for ch in MotorChannel}
        self._pwm_frequency: Optional[int] = None
        self._pending_address: Optional[int] = None

        Validator.validate_address(address).raise_if_invalid()
        address = self._address = int(address)

        handle = bus.open(address)
        if not check_board(bus, handle, self.logger):
            bus.close(handle)
            self.logger.error(f"Device not detected at 0x{address:02X}")
            raise DeviceNotFound(f"No DC motor board at 0x{address:02X}", address=address)

        self._handle = handle
        self._reset()
        self.logger.info(f"DC motor board initialized at 0x{address:02X}")

    def _reset(self):
        """Best-effort idle state; failed steps are logged and skipped."""
        steps = [
            ("Set DC motor mode", lambda: self._write_byte(REG_CTRL_MODE, CTRL_MODE_DC)),
            ("Stop M1", lambda: self._write_stop(MotorChannel.M1)),
            ("Stop M2", lambda: self._write_stop(MotorChannel.M2)),
            ("Disable encoder 1", lambda: self._write_encoder_enable(MotorChannel.M1, False)),
            ("Disable encoder 2", lambda: self._write_encoder_enable(MotorChannel.M2, False)),
        ]
        for name, step in steps:
            with handle_errors(name, log=self.logger):
                step()

    # ------------------------------------------------------------------
    # Register access
    # ------------------------------------------------------------------

    def _require_handle(self) -> int:
        if self._handle is None:
            raise TransportError(f"Board 0x{self._address:02X} connection closed")
        return self._handle

    def _write_byte(self, register: int, value: int):
        self._bus.write_byte(self._require_handle(), register, value)

    def _write_u16(self, register: int, value: int):
        self._bus.write_u16_be(self._require_handle(), register, value)

    def _read_u16(self, register: int) -> int:
        return self._bus.read_u16_be(self._require_handle(), register)

    def _write_stop(self, channel: MotorChannel):
        self._write_byte(motor_orientation_register(channel), Direction.STOP)
        self._directions[channel] = Direction.STOP
        self._speed_words[channel] = 0

    def _write_encoder_enable(self, channel: MotorChannel, enabled: bool):
        self._write_byte(encoder_enable_register(channel), 0x01 if enabled else 0x00)
        self._encoders_enabled[channel] = enabled

    def _execute(self, description: str, action) -> CommandResult:
        try:
            value = action()
        except TransportError as e:
            self.logger.error(
                f"{description} failed: {e}",
                extra={'board_address': self._address, 'register': e.register},
            )
            return CommandResult.failure(e)
        return CommandResult.success(True if value is None else value)

    def _reject(self, description: str, validation: ValidationResult) -> CommandResult:
        error = validation.to_exception()
        self.logger.error(f"{description} rejected: {error}")
        return CommandResult.failure(error)

    # ------------------------------------------------------------------
    # Motors
    # ------------------------------------------------------------------

    def motor_movement(self, channel: MotorChannel, direction: Direction, duty_cycle: float) -> CommandResult:
        """
        Drive a motor.

        Args:
            channel: M1 or M2
            direction: CW or CCW (STOP is rejected, use motor_stop)
            duty_cycle: PWM duty cycle percentage, 0-100 (one decimal kept)

        Returns:
            CommandResult; a failed orientation write skips the speed write
        """
        validation = Validator.validate_multiple(
            Validator.validate_channel(channel),
            Validator.validate_direction(direction),
            Validator.validate_duty_cycle(duty_cycle),
        )
        if not validation.is_valid:
            return self._reject("Motor movement", validation)

        channel = MotorChannel(channel)
        direction = Direction(direction)
        speed = encode_duty_cycle(duty_cycle)

        def action():
            self._write_byte(motor_orientation_register(channel), direction)
            self._directions[channel] = direction
            self._write_u16(motor_speed_register(channel), speed)
            self._speed_words[channel] = speed

        result = self._execute(f"M{channel} movement", action)
        if result:
            self.logger.debug(
                f"M{channel} movement Dir:{direction.name}, Speed:{duty_cycle} (0x{speed:04X})"
            )
        return result

    def motor_stop(self, channel: MotorChannel) -> CommandResult:
        """Stop a motor by writing STOP to its orientation register."""
        validation = Validator.validate_channel(channel)
        if not validation.is_valid:
            return self._reject("Motor stop", validation)
        channel = MotorChannel(channel)

        result = self._execute(f"M{channel} stop", lambda: self._write_stop(channel))
        if result:
            self.logger.debug(f"M{channel} stop")
        return result

    def set_motor_pwm_frequency(self, frequency: int) -> CommandResult:
        """
        Set the PWM frequency shared by both motors.

        Blocks for PWM_SETTLE_TIME_S after the write while the board
        re-locks its PWM timer.

        Args:
            frequency: 100-12750 Hz, 50 Hz resolution
        """
        validation = Validator.validate_pwm_frequency(frequency)
        if not validation.is_valid:
            return self._reject("PWM frequency", validation)
        for warning in validation.warnings:
            self.logger.warning(warning.message)

        value = encode_pwm_frequency(frequency)
        result = self._execute("Set PWM frequency", lambda: self._write_byte(REG_CTRL_MODE, value))
        if result:
            self._pwm_frequency = value * 50
            self.logger.debug(f"Set motors PWM: {frequency} Hz")
            time.sleep(PWM_SETTLE_TIME_S)
        return result

    # ------------------------------------------------------------------
    # Encoders
    # ------------------------------------------------------------------

    def _set_encoder(self, channel: MotorChannel, enabled: bool) -> CommandResult:
        validation = Validator.validate_channel(channel)
        if not validation.is_valid:
            return self._reject("Encoder enable", validation)
        channel = MotorChannel(channel)

        result = self._execute(
            f"M{channel} encoder {'enable' if enabled else 'disable'}",
            lambda: self._write_encoder_enable(channel, enabled),
        )
        if result:
            self.logger.debug(f"M{channel} encoder {'enable' if enabled else 'disable'}")
        return result

    def set_encoder_enable(self, channel: MotorChannel) -> CommandResult:
        """Enable the quadrature encoder of a channel."""
        return self._set_encoder(channel, True)

    def set_encoder_disable(self, channel: MotorChannel) -> CommandResult:
        """Disable the quadrature encoder of a channel."""
        return self._set_encoder(channel, False)

    def set_encoder_reduction_ratio(self, channel: MotorChannel, reduction_ratio: int) -> CommandResult:
        """
        Set the gearbox reduction ratio used to scale encoder pulses.

        Args:
            channel: M1 or M2
            reduction_ratio: 1-2000
        """
        validation = Validator.validate_multiple(
            Validator.validate_channel(channel),
            Validator.validate_reduction_ratio(reduction_ratio),
        )
        if not validation.is_valid:
            return self._reject("Reduction ratio", validation)
        channel = MotorChannel(channel)
        ratio = int(reduction_ratio)

        result = self._execute(
            f"M{channel} set reduction ratio",
            lambda: self._write_u16(encoder_ratio_register(channel), ratio),
        )
        if result:
            self._reduction_ratios[channel] = ratio
            self.logger.debug(f"M{channel} set reduction ratio: {ratio}")
        return result

    def get_encoder_speed(self, channel: MotorChannel) -> CommandResult:
        """
        Read the signed encoder speed of a channel.

        Returns:
            CommandResult whose value is the speed (negative when turning
            counter-clockwise); a failed read is an error result, not 0
        """
        validation = Validator.validate_channel(channel)
        if not validation.is_valid:
            return self._reject("Encoder speed", validation)
        channel = MotorChannel(channel)

        return self._execute(
            f"M{channel} encoder speed read",
            lambda: decode_speed(self._read_u16(encoder_speed_register(channel))),
        )

    # ------------------------------------------------------------------
    # Board
    # ------------------------------------------------------------------

    def set_address(self, address: int) -> CommandResult:
        """
        Store a new I2C address on the board.

        Takes effect after the board is power cycled. This controller stays
        bound to the current address.

        Args:
            address: New address, 1-127
        """
        validation = Validator.validate_address(address)
        if not validation.is_valid:
            return self._reject("Set address", validation)
        address = int(address)

        result = self._execute("Set address", lambda: self._write_byte(REG_SLAVE_ADDR, address))
        if result:
            self._pending_address = address
            self.logger.info(
                f"Board 0x{self._address:02X} new address 0x{address:02X} (reboot board to apply)"
            )
        return result

    @property
    def address(self) -> int:
        return self._address

    def is_connected(self) -> bool:
        """Check if the bus handle is open."""
        return self._handle is not None

    def get_state(self) -> dict:
        """
        Snapshot of the commands sent to the board.

        Returns:
            Dictionary with the last commanded settings
        """
        return {
            "address": self._address,
            "connected": self.is_connected(),
            "pending_address": self._pending_address,
            "pwm_frequency_hz": self._pwm_frequency,
            "motors": {
                ch.name: {
                    "direction": self._directions[ch].name,
                    "duty_cycle": decode_duty_cycle(self._speed_words[ch]),
                }
                for ch in MotorChannel
            },
            "encoders": {
                ch.name: {
                    "enabled": self._encoders_enabled[ch],
                    "reduction_ratio": self._reduction_ratios[ch],
                }
                for ch in MotorChannel
            },
        }

    def close(self):
        """Stop both motors and release the bus handle."""
        if self._handle is None:
            return

        self.logger.info(f"Closing DC motor board 0x{self._address:02X}")
        for channel in MotorChannel:
            with handle_errors(f"Stop M{channel} on close", log=self.logger):
                self._write_stop(channel)

        handle, self._handle = self._handle, None
        self._bus.close(handle)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __del__(self):
        if getattr(self, "_handle", None) is not None:
            self.close()

    def __repr__(self):
        return f"DCMotorController(address=0x{self._address:02X}, connected={self.is_connected()})"
