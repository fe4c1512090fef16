"""Build buses and board controllers from the settings file."""

import logging
from typing import Any, Dict, Optional

from .dc_motor_driver import DCMotorController
from .errors import DCMotorError
from .i2c_bus import I2CBus, PigpioI2CBus
from .registers import MotorChannel
from dfmotor.utils.settings import load_settings

_log = logging.getLogger(__name__)


def build_bus(settings: Optional[Dict[str, Any]] = None) -> PigpioI2CBus:
    board = (settings or load_settings())['board']
    return PigpioI2CBus(
        bus=board['i2c_bus'],
        host=board.get('pigpio_host'),
        port=board.get('pigpio_port'),
    )


def build_controller(
    settings: Optional[Dict[str, Any]] = None,
    bus: Optional[I2CBus] = None,
    logger: Optional[logging.Logger] = None
) -> DCMotorController:
    """
    Connect to the configured board and apply the configured motor defaults.

    A bus built here is released again if the board cannot be connected;
    a bus passed in stays with the caller.

    Args:
        settings: Settings dict (default: load_settings())
        bus: Transport to use (default: pigpio bus from settings)
        logger: Logger injected into the controller

    Raises:
        DCMotorError: board could not be connected
    """
    settings = settings or load_settings()
    owns_bus = bus is None
    if owns_bus:
        bus = build_bus(settings)

    try:
        controller = DCMotorController(bus, settings['board']['address'], logger=logger)
    except DCMotorError:
        if owns_bus:
            bus.stop()
        raise

    motors = settings.get('motors', {})
    frequency = motors.get('pwm_frequency_hz')
    if frequency:
        _check_default("pwm_frequency_hz", controller.set_motor_pwm_frequency(frequency))
    ratio = motors.get('reduction_ratio')
    if ratio:
        for channel in MotorChannel:
            _check_default(
                f"reduction_ratio M{channel}",
                controller.set_encoder_reduction_ratio(channel, ratio),
            )
    return controller


def _check_default(name, result):
    if not result:
        _log.warning(
            f"Default {name} not applied: {result.error}",
            extra={'extra_data': {'setting': name, 'error_type': type(result.error).__name__}}
        )
