"""
Hardware layer for the DFRobot dual-channel DC motor board.

This package provides:
- DCMotorController: register-level board driver
- detect_boards / check_board: address-space discovery and identity check
- PigpioI2CBus: I2C transport over the pigpio daemon
"""

from .errors import (
    DCMotorError,
    ValidationError,
    BoardConnectionError,
    DeviceNotFound,
    TransportError,
)
from .registers import MotorChannel, Direction
from .result import CommandResult
from .i2c_bus import I2CBus, PigpioI2CBus
from .dc_motor_driver import DCMotorController, check_board, detect_boards

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
