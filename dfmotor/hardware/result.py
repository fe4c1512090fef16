"""
Explicit outcome of a driver operation.

Operations on an open board never return a bare sentinel: a failed encoder
read and a valid zero reading are different results.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .errors import DCMotorError


@dataclass(frozen=True)
class CommandResult:
    """Value or error of a single board operation."""
    value: Any = None
    error: Optional[DCMotorError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> Any:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: Any = True) -> "CommandResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DCMotorError) -> "CommandResult":
        return cls(error=error)
