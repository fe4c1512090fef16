"""
Pytest configuration and shared fixtures.

Provides:
- Mock I2C bus with a board at the factory address
- Connected controller
- Patched settle delay
- Temporary settings file
"""

import pytest

from tests.mocks.mock_i2c_bus import MockBoard, MockI2CBus

BOARD_ADDRESS = 0x10


@pytest.fixture
def board():
    """Simulated board with the expected identity."""
    return MockBoard()


@pytest.fixture
def bus(board):
    """Mock bus with one board at 0x10."""
    return MockI2CBus({BOARD_ADDRESS: board})


@pytest.fixture
def no_sleep(monkeypatch):
    """Record settle delays instead of sleeping."""
    delays = []
    monkeypatch.setattr("dfmotor.hardware.dc_motor_driver.time.sleep", delays.append)
    return delays


@pytest.fixture
def controller(bus, no_sleep):
    """Controller connected to the mock board, write log cleared."""
    from dfmotor.hardware.dc_motor_driver import DCMotorController
    ctrl = DCMotorController(bus, BOARD_ADDRESS)
    bus.writes.clear()
    yield ctrl
    ctrl.close()


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    """Point the settings module at a temporary file."""
    path = tmp_path / 'settings.json'
    monkeypatch.setenv('DFMOTOR_SETTINGS', str(path))
    return path
