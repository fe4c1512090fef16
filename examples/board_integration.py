"""
Example integration of the DC motor board driver.

Shows how to discover boards, handle construction errors and check the
result of each command.
"""

import time

from dfmotor.hardware import (
    DCMotorController,
    DCMotorError,
    Direction,
    MotorChannel,
    PigpioI2CBus,
    detect_boards,
)
from dfmotor.utils.logger import get_logger, setup_logging_from_settings

logger = get_logger(__name__)


# Example 1: Find boards on the bus
def example_scan(bus):
    addresses = detect_boards(bus)
    if not addresses:
        logger.warning("No DC motor board found")
    return addresses


# Example 2: Connect and check every command
def example_drive(bus, address):
    try:
        board = DCMotorController(bus, address)
    except DCMotorError as e:
        logger.error(f"Cannot use board 0x{address:02X}: {e}")
        return

    with board:
        board.set_encoder_enable(MotorChannel.M1)

        result = board.motor_movement(MotorChannel.M1, Direction.CW, 35.5)
        if not result:
            logger.error(f"Movement refused: {result.error}")
            return

        time.sleep(1.0)
        speed = board.get_encoder_speed(MotorChannel.M1)
        if speed.ok:
            logger.info(f"M1 encoder speed: {speed.value}")
        else:
            # a failed read is never reported as speed 0
            logger.error(f"Speed read failed: {speed.error}")


if __name__ == "__main__":
    setup_logging_from_settings()
    bus = PigpioI2CBus(bus=1)
    try:
        for address in example_scan(bus):
            example_drive(bus, address)
    finally:
        bus.stop()
