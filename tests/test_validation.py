"""
Unit tests for input validation.
"""

import pytest

from dfmotor.hardware.errors import ValidationError
from dfmotor.hardware.registers import Direction, MotorChannel
from dfmotor.utils.validation import (
    ValidationIssue,
    ValidationResult,
    Validator
)


def test_validation_result_is_valid_empty():
    """Test ValidationResult.is_valid with no errors."""
    assert ValidationResult().is_valid


def test_validation_result_warnings_only_is_valid():
    """Test ValidationResult.is_valid with warnings only (should be valid)."""
    result = ValidationResult()
    result.add_warning("field", "Warning message", "WARNING_CODE")
    assert result.is_valid
    assert result.warnings[0] == ValidationIssue("field", "Warning message", "WARNING_CODE", "warning")


def test_raise_if_invalid():
    """Test invalid results raise ValidationError carrying the field."""
    result = ValidationResult()
    result.add_error("duty_cycle", "Error 1", "CODE1")
    result.add_error("channel", "Error 2", "CODE2")

    assert result.get_error_messages() == ["Error 1", "Error 2"]
    with pytest.raises(ValidationError, match="Error 1; Error 2") as exc_info:
        result.raise_if_invalid()
    assert exc_info.value.field == "duty_cycle"


def test_validate_range_rejects_non_numbers():
    for value in ("10", None, True):
        result = Validator.validate_range(value, 0, 100, "value")
        assert result.errors[0].code == "NOT_A_NUMBER"


@pytest.mark.parametrize("value, valid", [(0, True), (0.0, True), (100, True), (55.5, True),
                                          (-0.01, False), (100.01, False)])
def test_validate_duty_cycle(value, valid):
    assert Validator.validate_duty_cycle(value).is_valid is valid


@pytest.mark.parametrize("value, valid", [(1, True), (2000, True), (0, False), (2001, False), (10.5, False)])
def test_validate_reduction_ratio(value, valid):
    assert Validator.validate_reduction_ratio(value).is_valid is valid


@pytest.mark.parametrize("value, valid", [(100, True), (12750, True), (99, False), (12751, False)])
def test_validate_pwm_frequency(value, valid):
    assert Validator.validate_pwm_frequency(value).is_valid is valid


def test_validate_pwm_frequency_warns_on_rounding():
    """Test frequencies off the 50 Hz grid are accepted with a warning."""
    result = Validator.validate_pwm_frequency(1025)
    assert result.is_valid
    assert result.warnings[0].code == "FREQUENCY_ROUNDED"


@pytest.mark.parametrize("value, valid", [(1, True), (127, True), (0, False), (128, False)])
def test_validate_address(value, valid):
    assert Validator.validate_address(value).is_valid is valid


def test_validate_channel():
    assert Validator.validate_channel(MotorChannel.M1).is_valid
    assert Validator.validate_channel(2).is_valid
    assert not Validator.validate_channel(3).is_valid
    assert not Validator.validate_channel("M1").is_valid


def test_validate_direction():
    """Test only CW/CCW are movement directions."""
    assert Validator.validate_direction(Direction.CW).is_valid
    assert Validator.validate_direction(Direction.CCW).is_valid
    assert Validator.validate_direction(0x02).is_valid
    assert not Validator.validate_direction(Direction.STOP).is_valid
    assert not Validator.validate_direction(None).is_valid
    assert not Validator.validate_direction(True).is_valid


def test_validate_multiple():
    """Test combining results collects every error."""
    combined = Validator.validate_multiple(
        Validator.validate_channel(5),
        Validator.validate_duty_cycle(120),
        Validator.validate_pwm_frequency(1025),
    )
    assert not combined.is_valid
    assert [e.field for e in combined.errors] == ["channel", "duty_cycle"]
    assert len(combined.warnings) == 1


def test_validate_range_rejects_nan_and_infinity():
    assert Validator.validate_duty_cycle(float('nan')).errors[0].code == "NOT_A_NUMBER"
    assert not Validator.validate_duty_cycle(float('inf')).is_valid
    assert Validator.validate_reduction_ratio(float('inf')).errors[0].code == "NOT_AN_INTEGER"
