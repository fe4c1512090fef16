"""
I2C transport for the motor board driver.

The driver only needs a handful of register primitives bound to a per-address
handle. I2CBus describes that contract; PigpioI2CBus implements it on top of
the pigpio daemon, which must be running on the target host (sudo pigpiod).

Every primitive either returns a value or raises a single error; retries are
left to the caller.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

import pigpio

from .errors import BoardConnectionError, TransportError


class I2CBus(ABC):
    """Register-level access to devices on one I2C bus."""

    @abstractmethod
    def open(self, address: int) -> int:
        """
        Open a handle bound to a device address.

        Raises:
            BoardConnectionError: handle could not be opened
        """

    @abstractmethod
    def close(self, handle: int) -> None:
        """Release a handle returned by open()."""

    @abstractmethod
    def read_byte(self, handle: int, register: int) -> int:
        """Read an 8-bit register. Raises TransportError."""

    @abstractmethod
    def write_byte(self, handle: int, register: int, value: int) -> None:
        """Write an 8-bit register. Raises TransportError."""

    @abstractmethod
    def read_u16_be(self, handle: int, register: int) -> int:
        """Read a big-endian 16-bit register. Raises TransportError."""

    @abstractmethod
    def write_u16_be(self, handle: int, register: int, value: int) -> None:
        """Write a big-endian 16-bit register. Raises TransportError."""


class PigpioI2CBus(I2CBus):
    """
    I2C bus driven through the pigpio daemon.

    Args:
        bus: I2C bus number (1 on every Raspberry Pi since rev 2)
        host: pigpiod host (default: PIGPIO_ADDR or localhost)
        port: pigpiod port (default: PIGPIO_PORT or 8888)
    """

    def __init__(self, bus: int = 1, host: Optional[str] = None, port: Optional[int] = None):
        self.bus = bus
        self.logger = logging.getLogger("dfmotor.i2c")

        kwargs = {}
        if host:
            kwargs["host"] = host
        if port:
            kwargs["port"] = port

        self._pi = pigpio.pi(**kwargs)
        if not self._pi.connected:
            self._pi = None
            raise BoardConnectionError("Cannot connect to pigpiod daemon")

        # pigpio commands share one socket
        self._lock = threading.Lock()
        self.logger.info(f"pigpio I2C bus {bus} ready")

    def _require_pi(self):
        if self._pi is None:
            raise TransportError("pigpio connection closed")
        return self._pi

    def open(self, address: int) -> int:
        try:
            with self._lock:
                handle = self._require_pi().i2c_open(self.bus, address)
        except (pigpio.error, TransportError) as e:
            raise BoardConnectionError(
                f"i2c_open({self.bus}, 0x{address:02X}) failed: {e}", address=address
            ) from e
        self.logger.debug(f"Opened handle {handle} for 0x{address:02X}")
        return handle

    def close(self, handle: int) -> None:
        if self._pi is None:
            return
        try:
            with self._lock:
                self._pi.i2c_close(handle)
        except pigpio.error as e:
            self.logger.warning(f"i2c_close({handle}) failed: {e}")

    def read_byte(self, handle: int, register: int) -> int:
        try:
            with self._lock:
                return self._require_pi().i2c_read_byte_data(handle, register) & 0xFF
        except pigpio.error as e:
            raise TransportError(f"read reg 0x{register:02X} failed: {e}", register=register) from e

    def write_byte(self, handle: int, register: int, value: int) -> None:
        try:
            with self._lock:
                self._require_pi().i2c_write_byte_data(handle, register, value & 0xFF)
        except pigpio.error as e:
            raise TransportError(f"write reg 0x{register:02X} failed: {e}", register=register) from e

    def read_u16_be(self, handle: int, register: int) -> int:
        try:
            with self._lock:
                count, data = self._require_pi().i2c_read_i2c_block_data(handle, register, 2)
        except pigpio.error as e:
            raise TransportError(f"read reg 0x{register:02X} failed: {e}", register=register) from e
        if count != 2:
            raise TransportError(
                f"read reg 0x{register:02X}: expected 2 bytes, got {count}", register=register
            )
        return (data[0] << 8) | data[1]

    def write_u16_be(self, handle: int, register: int, value: int) -> None:
        payload = [(value >> 8) & 0xFF, value & 0xFF]
        try:
            with self._lock:
                self._require_pi().i2c_write_i2c_block_data(handle, register, payload)
        except pigpio.error as e:
            raise TransportError(f"write reg 0x{register:02X} failed: {e}", register=register) from e

    def stop(self):
        """Release the pigpiod connection."""
        if self._pi is not None:
            self._pi.stop()
            self._pi = None
            self.logger.info(f"pigpio I2C bus {self.bus} released")
