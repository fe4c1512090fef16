"""Driver for the DFRobot dual-channel DC motor board over I2C."""

from .hardware import (
    DCMotorController,
    check_board,
    detect_boards,
    I2CBus,
    PigpioI2CBus,
    MotorChannel,
    Direction,
    CommandResult,
    DCMotorError,
    ValidationError,
    BoardConnectionError,
    DeviceNotFound,
    TransportError,
)

__version__ = "1.0.0"

__all__ = [
    "DCMotorController",
    "check_board",
    "detect_boards",
    "I2CBus",
    "PigpioI2CBus",
    "MotorChannel",
    "Direction",
    "CommandResult",
    "DCMotorError",
    "ValidationError",
    "BoardConnectionError",
    "DeviceNotFound",
    "TransportError",
]
