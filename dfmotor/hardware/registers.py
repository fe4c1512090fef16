"""
Register map and value encodings for the DFRobot dual-channel DC motor board.

The board exposes a flat 8-bit register file over I2C. Encoder and motor
registers are laid out once per channel at a fixed stride from the channel 1
base address:

- encoder registers: +5 per channel
- motor registers:   +3 per channel

16-bit registers are big-endian on the wire.
"""

from enum import IntEnum

from .errors import ValidationError


# Register addresses
REG_SLAVE_ADDR = 0x00
REG_PID = 0x01
REG_VID = 0x02
REG_CTRL_MODE = 0x03
REG_ENCODER1_EN = 0x04
REG_ENCODER1_SPEED = 0x05
REG_ENCODER1_REDUCTION_RATIO = 0x07
REG_ENCODER2_EN = 0x09
REG_ENCODER2_SPEED = 0x0A
REG_ENCODER2_REDUCTION_RATIO = 0x0C
REG_MOTOR_PWM = 0x0E  # reserved, never written by the driver
REG_MOTOR1_ORIENTATION = 0x0F
REG_MOTOR1_SPEED = 0x10
REG_MOTOR2_ORIENTATION = 0x12
REG_MOTOR2_SPEED = 0x13

# Identity constants burned into the board
PID_EXPECTED = 0xDF
VID_EXPECTED = 0x10

ENCODER_STRIDE = 5
MOTOR_STRIDE = 3

# CTRL_MODE value selecting DC motor mode
CTRL_MODE_DC = 0x00

# Valid ranges (inclusive)
ADDRESS_MIN, ADDRESS_MAX = 1, 127
DUTY_CYCLE_MIN, DUTY_CYCLE_MAX = 0.0, 100.0
REDUCTION_RATIO_MIN, REDUCTION_RATIO_MAX = 1, 2000
PWM_FREQUENCY_MIN, PWM_FREQUENCY_MAX = 100, 12750
PWM_FREQUENCY_STEP = 50

# Board PWM timer re-lock time after a frequency change
PWM_SETTLE_TIME_S = 0.1


class MotorChannel(IntEnum):
    """Motor/encoder output of the board."""
    M1 = 1
    M2 = 2


class Direction(IntEnum):
    """Values of the orientation register."""
    CW = 0x01
    CCW = 0x02
    STOP = 0x05


# Static description of the register file: name -> (address, width in bits)
REGISTER_MAP = {
    "SLAVE_ADDR": (REG_SLAVE_ADDR, 8),
    "PID": (REG_PID, 8),
    "VID": (REG_VID, 8),
    "CTRL_MODE": (REG_CTRL_MODE, 8),
    "ENCODER1_EN": (REG_ENCODER1_EN, 8),
    "ENCODER1_SPEED": (REG_ENCODER1_SPEED, 16),
    "ENCODER1_RATIO": (REG_ENCODER1_REDUCTION_RATIO, 16),
    "ENCODER2_EN": (REG_ENCODER2_EN, 8),
    "ENCODER2_SPEED": (REG_ENCODER2_SPEED, 16),
    "ENCODER2_RATIO": (REG_ENCODER2_REDUCTION_RATIO, 16),
    "MOTOR_PWM": (REG_MOTOR_PWM, 8),
    "MOTOR1_ORIENTATION": (REG_MOTOR1_ORIENTATION, 8),
    "MOTOR1_SPEED": (REG_MOTOR1_SPEED, 16),
    "MOTOR2_ORIENTATION": (REG_MOTOR2_ORIENTATION, 8),
    "MOTOR2_SPEED": (REG_MOTOR2_SPEED, 16),
}


def register_for(base: int, channel: MotorChannel, stride: int) -> int:
    """
    Compute the register address of a channel-indexed register.

    Args:
        base: Channel 1 register address
        channel: Target channel
        stride: Distance between consecutive channels (5 encoder, 3 motor)

    Returns:
        Register address for the channel
    """
    return base + stride * (int(channel) - 1)


def encoder_enable_register(channel: MotorChannel) -> int:
    return register_for(REG_ENCODER1_EN, channel, ENCODER_STRIDE)


def encoder_speed_register(channel: MotorChannel) -> int:
    return register_for(REG_ENCODER1_SPEED, channel, ENCODER_STRIDE)


def encoder_ratio_register(channel: MotorChannel) -> int:
    return register_for(REG_ENCODER1_REDUCTION_RATIO, channel, ENCODER_STRIDE)


def motor_orientation_register(channel: MotorChannel) -> int:
    return register_for(REG_MOTOR1_ORIENTATION, channel, MOTOR_STRIDE)


def motor_speed_register(channel: MotorChannel) -> int:
    # speed register sits right after the orientation register
    return motor_orientation_register(channel) + 1


def encode_duty_cycle(duty_cycle: float) -> int:
    """
    Encode a PWM duty cycle percentage into the motor speed register value.

    High byte is the integer part, low byte the first decimal digit
    (truncated). 50.0 -> 0x3200, 12.34 -> 0x0C03.

    Raises:
        ValidationError: duty cycle outside [0, 100]
    """
    if not DUTY_CYCLE_MIN <= duty_cycle <= DUTY_CYCLE_MAX:
        raise ValidationError(
            f"duty cycle out of range {DUTY_CYCLE_MIN:g}-{DUTY_CYCLE_MAX:g}: {duty_cycle}"
        )
    integer = int(duty_cycle)
    decimal = int(duty_cycle * 10) % 10
    return (integer << 8) | decimal


def decode_duty_cycle(raw: int) -> float:
    """Inverse of encode_duty_cycle (one decimal digit of precision)."""
    return ((raw >> 8) & 0xFF) + (raw & 0xFF) / 10.0


def decode_speed(raw: int) -> int:
    """Interpret a 16-bit encoder speed register as two's complement."""
    raw &= 0xFFFF
    if raw & 0x8000:
        return -(0x10000 - raw)
    return raw


def encode_speed(value: int) -> int:
    """Two's complement 16-bit representation of a signed encoder speed."""
    if not -0x8000 <= value <= 0x7FFF:
        raise ValidationError(f"encoder speed out of 16-bit range: {value}")
    return value & 0xFFFF


def encode_pwm_frequency(frequency: int) -> int:
    """
    Encode a PWM frequency in Hz into the CTRL_MODE byte (frequency / 50).

    Raises:
        ValidationError: frequency outside [100, 12750]
    """
    if not PWM_FREQUENCY_MIN <= frequency <= PWM_FREQUENCY_MAX:
        raise ValidationError(
            f"frequency out of range {PWM_FREQUENCY_MIN}-{PWM_FREQUENCY_MAX}: {frequency}"
        )
    return int(frequency) // PWM_FREQUENCY_STEP


__all__ = [
    "MotorChannel",
    "Direction",
    "REGISTER_MAP",
    "PID_EXPECTED",
    "VID_EXPECTED",
    "register_for",
    "encode_duty_cycle",
    "decode_duty_cycle",
    "decode_speed",
    "encode_speed",
    "encode_pwm_frequency",
]
