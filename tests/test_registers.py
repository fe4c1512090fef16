"""
Unit tests for the register map and value encodings.
"""

import pytest

from dfmotor.hardware.errors import ValidationError
from dfmotor.hardware.registers import (
    MotorChannel,
    Direction,
    REGISTER_MAP,
    ENCODER_STRIDE,
    MOTOR_STRIDE,
    REG_ENCODER1_EN,
    register_for,
    encoder_enable_register,
    encoder_speed_register,
    encoder_ratio_register,
    motor_orientation_register,
    motor_speed_register,
    encode_duty_cycle,
    decode_duty_cycle,
    decode_speed,
    encode_speed,
    encode_pwm_frequency,
)


def test_register_map_addresses():
    """Test register addresses match the board datasheet."""
    expected = {
        "SLAVE_ADDR": 0x00, "PID": 0x01, "VID": 0x02, "CTRL_MODE": 0x03,
        "ENCODER1_EN": 0x04, "ENCODER1_SPEED": 0x05, "ENCODER1_RATIO": 0x07,
        "ENCODER2_EN": 0x09, "ENCODER2_SPEED": 0x0A, "ENCODER2_RATIO": 0x0C,
        "MOTOR1_ORIENTATION": 0x0F, "MOTOR1_SPEED": 0x10,
        "MOTOR2_ORIENTATION": 0x12, "MOTOR2_SPEED": 0x13,
    }
    for name, address in expected.items():
        assert REGISTER_MAP[name][0] == address, name


def test_direction_wire_values():
    """Test orientation register values."""
    assert Direction.CW == 0x01
    assert Direction.CCW == 0x02
    assert Direction.STOP == 0x05


def test_register_for_stride():
    """Test channel offset arithmetic."""
    assert register_for(REG_ENCODER1_EN, MotorChannel.M1, ENCODER_STRIDE) == 0x04
    assert register_for(REG_ENCODER1_EN, MotorChannel.M2, ENCODER_STRIDE) == 0x09
    assert register_for(0x0F, MotorChannel.M2, MOTOR_STRIDE) == 0x12


def test_channel_registers_match_map():
    """Test per-channel helpers land on the mapped registers."""
    for channel in MotorChannel:
        n = int(channel)
        assert encoder_enable_register(channel) == REGISTER_MAP[f"ENCODER{n}_EN"][0]
        assert encoder_speed_register(channel) == REGISTER_MAP[f"ENCODER{n}_SPEED"][0]
        assert encoder_ratio_register(channel) == REGISTER_MAP[f"ENCODER{n}_RATIO"][0]
        assert motor_orientation_register(channel) == REGISTER_MAP[f"MOTOR{n}_ORIENTATION"][0]
        assert motor_speed_register(channel) == REGISTER_MAP[f"MOTOR{n}_SPEED"][0]


@pytest.mark.parametrize("duty, raw", [
    (0.0, 0x0000),
    (50.0, 0x3200),
    (100.0, 0x6400),
    (12.5, 0x0C05),
    (99.9, 0x6309),
    (33.25, 0x2102),
])
def test_encode_duty_cycle(duty, raw):
    """Test duty cycle encoding: integer part high byte, first decimal low byte."""
    assert encode_duty_cycle(duty) == raw


@pytest.mark.parametrize("duty", [-0.1, 100.1, 150, -5])
def test_encode_duty_cycle_out_of_range(duty):
    """Test duty cycle outside 0-100 is rejected."""
    with pytest.raises(ValidationError):
        encode_duty_cycle(duty)


def test_decode_duty_cycle():
    """Test duty cycle decoding keeps one decimal."""
    assert decode_duty_cycle(0x3200) == 50.0
    assert decode_duty_cycle(0x0C05) == pytest.approx(12.5)


@pytest.mark.parametrize("raw, speed", [
    (0x0000, 0),
    (0x0001, 1),
    (0x7FFF, 32767),
    (0x8000, -32768),
    (0xFFFF, -1),
    (0xFF38, -200),
])
def test_decode_speed(raw, speed):
    """Test two's complement decoding of encoder speed."""
    assert decode_speed(raw) == speed


def test_speed_round_trip_extremes():
    """Test decode(encode(x)) == x at the range limits."""
    for value in (-32768, -1, 0, 1, 32767):
        assert decode_speed(encode_speed(value)) == value


def test_encode_speed_out_of_range():
    """Test encoding a speed outside 16-bit signed range fails."""
    with pytest.raises(ValidationError):
        encode_speed(32768)


def test_encode_pwm_frequency():
    """Test PWM frequency is stored as frequency / 50."""
    assert encode_pwm_frequency(100) == 2
    assert encode_pwm_frequency(3000) == 60
    assert encode_pwm_frequency(12750) == 255
    assert encode_pwm_frequency(1025) == 20


@pytest.mark.parametrize("frequency", [99, 12751, 0])
def test_encode_pwm_frequency_out_of_range(frequency):
    """Test PWM frequency outside 100-12750 Hz is rejected."""
    with pytest.raises(ValidationError):
        encode_pwm_frequency(frequency)
