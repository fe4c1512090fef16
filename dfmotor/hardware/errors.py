"""
Error kinds raised or reported by the motor board driver.

- ValidationError: input outside its documented range, detected before any
  bus transaction
- BoardConnectionError: the I2C handle could not be opened
- DeviceNotFound: the identity check failed, the peripheral is not this board
- TransportError: a register read/write failed on an open handle
"""


class DCMotorError(Exception):
    """Base class for motor board errors."""


class ValidationError(DCMotorError, ValueError):
    """Input value outside the accepted range."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


class BoardConnectionError(DCMotorError, ConnectionError):
    """Opening the bus handle for a board address failed."""

    def __init__(self, message: str, address: int = None):
        super().__init__(message)
        self.address = address


class DeviceNotFound(DCMotorError):
    """No board with the expected PID/VID answered at the address."""

    def __init__(self, message: str, address: int = None):
        super().__init__(message)
        self.address = address


class TransportError(DCMotorError, IOError):
    """A register transfer failed on an already open handle."""

    def __init__(self, message: str, register: int = None):
        super().__init__(message)
        self.register = register
