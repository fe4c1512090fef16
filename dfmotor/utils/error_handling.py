"""
Error handling utilities for the motor board driver.

Provides:
- A context manager for best-effort steps (reset sequence, teardown stops)
  whose failure is logged and does not abort the surrounding operation
"""

from contextlib import contextmanager
import logging
from typing import Optional, Tuple, Type

from dfmotor.hardware.errors import TransportError

logger = logging.getLogger(__name__)


class ErrorOutcome:
    """Collects the exception swallowed by handle_errors, if any."""

    def __init__(self):
        self.error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@contextmanager
def handle_errors(
    operation_name: str,
    catch: Tuple[Type[BaseException], ...] = (TransportError,),
    critical: bool = False,
    log: Optional[logging.Logger] = None
):
    """
    Context manager for consistent error handling.

    Usage:
        with handle_errors("Stop M1 on close") as outcome:
            board.motor_stop(MotorChannel.M1).unwrap()
        if outcome.failed:
            ...

    Only exceptions listed in ``catch`` are swallowed; anything else
    propagates.

    Args:
        operation_name: Human-readable operation description
        catch: Exception types treated as recoverable
        critical: Log at CRITICAL instead of WARNING
        log: Logger to report to (default: this module's logger)
    """
    outcome = ErrorOutcome()
    target = log or logger
    try:
        yield outcome
    except catch as e:
        outcome.error = e
        log_method = target.critical if critical else target.warning
        log_method(
            f"Error in {operation_name}: {e}",
            extra={'extra_data': {
                'operation': operation_name,
                'error_type': type(e).__name__,
                'critical': critical
            }}
        )
