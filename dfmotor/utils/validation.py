"""
Input validation for motor board commands.

Provides validators for:
- Channel and direction values
- Duty cycle, reduction ratio and PWM frequency ranges
- Board addresses

Validators never touch the bus; the driver runs them before issuing any
register transaction.
"""

from typing import List
from dataclasses import dataclass
import logging
import math

from dfmotor.hardware.errors import ValidationError
from dfmotor.hardware.registers import (
    MotorChannel,
    Direction,
    ADDRESS_MIN,
    ADDRESS_MAX,
    DUTY_CYCLE_MIN,
    DUTY_CYCLE_MAX,
    REDUCTION_RATIO_MIN,
    REDUCTION_RATIO_MAX,
    PWM_FREQUENCY_MIN,
    PWM_FREQUENCY_MAX,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationIssue:
    """Validation error details"""
    field: str
    message: str
    code: str
    severity: str = "error"  # error, warning


class ValidationResult:
    """Result of validation operation"""

    def __init__(self):
        self.errors: List[ValidationIssue] = []
        self.warnings: List[ValidationIssue] = []

    @property
    def is_valid(self) -> bool:
        """Check if validation passed (no errors)"""
        return len(self.errors) == 0

    def add_error(self, field: str, message: str, code: str):
        """Add error to result"""
        self.errors.append(ValidationIssue(field, message, code, "error"))

    def add_warning(self, field: str, message: str, code: str):
        """Add warning to result"""
        self.warnings.append(ValidationIssue(field, message, code, "warning"))

    def get_error_messages(self) -> List[str]:
        """Get list of error messages"""
        return [e.message for e in self.errors]

    def to_exception(self) -> ValidationError:
        """First error as a ValidationError (result must be invalid)."""
        first = self.errors[0]
        return ValidationError("; ".join(self.get_error_messages()), field=first.field)

    def raise_if_invalid(self):
        if not self.is_valid:
            raise self.to_exception()


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Validator:
    """Input validation helpers"""

    @staticmethod
    def validate_range(
        value,
        min_value,
        max_value,
        field_name: str,
        integer: bool = False
    ) -> ValidationResult:
        """
        Validate a numeric value against an inclusive range.

        Args:
            value: Value to check
            min_value: Minimum allowed value
            max_value: Maximum allowed value
            field_name: Field name for error messages
            integer: Reject non-integer values

        Returns:
            ValidationResult with errors if any
        """
        result = ValidationResult()

        if not _is_number(value):
            result.add_error(
                field_name,
                f"{field_name} must be a number (got {value!r})",
                "NOT_A_NUMBER"
            )
            return result

        if math.isnan(value):
            result.add_error(field_name, f"{field_name} is not a number (NaN)", "NOT_A_NUMBER")
            return result

        if integer and not float(value).is_integer():
            result.add_error(
                field_name,
                f"{field_name} must be an integer (got {value})",
                "NOT_AN_INTEGER"
            )
            return result

        if value < min_value or value > max_value:
            result.add_error(
                field_name,
                f"{field_name} out of range {min_value}-{max_value} (got {value})",
                "OUT_OF_RANGE"
            )

        return result

    @staticmethod
    def validate_duty_cycle(value: float) -> ValidationResult:
        """Validate PWM duty cycle percentage [0, 100]."""
        return Validator.validate_range(value, DUTY_CYCLE_MIN, DUTY_CYCLE_MAX, "duty_cycle")

    @staticmethod
    def validate_reduction_ratio(value: int) -> ValidationResult:
        """Validate encoder reduction ratio [1, 2000]."""
        return Validator.validate_range(
            value, REDUCTION_RATIO_MIN, REDUCTION_RATIO_MAX, "reduction_ratio", integer=True
        )

    @staticmethod
    def validate_pwm_frequency(value: int) -> ValidationResult:
        """Validate PWM frequency in Hz [100, 12750]."""
        result = Validator.validate_range(
            value, PWM_FREQUENCY_MIN, PWM_FREQUENCY_MAX, "pwm_frequency", integer=True
        )
        if result.is_valid and value % 50:
            # board resolution is 50 Hz, the remainder is dropped
            result.add_warning(
                "pwm_frequency",
                f"pwm_frequency {value} rounded down to {value - value % 50}",
                "FREQUENCY_ROUNDED"
            )
        return result

    @staticmethod
    def validate_address(value: int) -> ValidationResult:
        """Validate 7-bit board address [1, 127]."""
        return Validator.validate_range(value, ADDRESS_MIN, ADDRESS_MAX, "address", integer=True)

    @staticmethod
    def validate_channel(value) -> ValidationResult:
        """Validate motor channel (MotorChannel or 1/2)."""
        result = ValidationResult()
        try:
            MotorChannel(value)
        except ValueError:
            result.add_error("channel", f"invalid motor channel {value!r}", "INVALID_CHANNEL")
        return result

    @staticmethod
    def validate_direction(value) -> ValidationResult:
        """Validate a movement direction (CW or CCW; STOP is not a movement)."""
        result = ValidationResult()
        if value not in (Direction.CW, Direction.CCW) or isinstance(value, bool):
            result.add_error(
                "direction",
                f"direction must be CW or CCW (got {value!r})",
                "INVALID_DIRECTION"
            )
        return result

    @staticmethod
    def validate_multiple(*results: ValidationResult) -> ValidationResult:
        """Combine multiple validation results"""
        combined = ValidationResult()
        for result in results:
            combined.errors.extend(result.errors)
            combined.warnings.extend(result.warnings)
        return combined
