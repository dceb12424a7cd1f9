"""
Centralized error definitions and validation helpers.
"""

from typing import Any, Optional

from catchery import log_warning


class WeaponSimError(Exception):
    """Base class for every error raised by the simulator."""


class InvalidDiceExpression(WeaponSimError):
    """A dice expression is malformed or has an unsupported shape."""


class InvalidBonusDescriptor(WeaponSimError):
    """A bonus or enchantment descriptor is missing its type or its value."""


class InvalidCritRange(WeaponSimError):
    """A critical range cannot be reduced to a usable minimum."""


class RandomUnavailable(WeaponSimError):
    """The underlying byte source cannot supply random bytes."""


# ==============================================================================
# VALIDATION HELPERS
# ==============================================================================
# Every helper logs the offending value with its context before raising, so
# the failure is visible even when the caller only reports the exception.


def fail(
    error_class: type[WeaponSimError],
    message: str,
    context: Optional[dict[str, Any]] = None,
) -> WeaponSimError:
    """
    Logs a warning and builds the error to raise.

    Args:
        error_class: The exception class to instantiate
        message: Human-readable description of the problem
        context: Additional context for logging

    Returns:
        WeaponSimError: The exception, ready to be raised by the caller
    """
    log_warning(
        message,
        {key: _loggable(value) for key, value in (context or {}).items()},
    )
    return error_class(message)


def _loggable(value: Any) -> Any:
    """Keeps scalars as they are and turns anything else into its repr."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


def require_non_empty_string(
    value: Any,
    param_name: str,
    error_class: type[WeaponSimError],
    context: Optional[dict[str, Any]] = None,
) -> str:
    """
    Validates that a value is a non-empty string.

    Args:
        value: The value to validate
        param_name: Human-readable parameter name for error messages
        error_class: The exception class raised on failure
        context: Additional context for logging

    Returns:
        str: The validated string value, stripped of surrounding whitespace

    Raises:
        WeaponSimError: If validation fails
    """
    if not isinstance(value, str) or not value.strip():
        raise fail(
            error_class,
            f"{param_name} must be a non-empty string, got: {value!r}",
            {
                **(context or {}),
                "param_name": param_name,
                "value": value,
                "type": type(value).__name__,
            },
        )
    return value.strip()


def require_int_in_range(
    value: Any,
    param_name: str,
    error_class: type[WeaponSimError],
    min_val: int,
    max_val: Optional[int] = None,
    context: Optional[dict[str, Any]] = None,
) -> int:
    """
    Validates that a value is an integer within the specified range.

    Integral floats (e.g. ``18.0``) are accepted and converted.

    Args:
        value: The value to validate
        param_name: Human-readable parameter name for error messages
        error_class: The exception class raised on failure
        min_val: Inclusive lower bound
        max_val: Inclusive upper bound, unbounded when None
        context: Additional context for logging

    Returns:
        int: The validated integer

    Raises:
        WeaponSimError: If validation fails
    """
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    in_range = (
        isinstance(value, int)
        and not isinstance(value, bool)
        and value >= min_val
        and (max_val is None or value <= max_val)
    )
    if not in_range:
        bounds = f"[{min_val}, {max_val}]" if max_val is not None else f">= {min_val}"
        raise fail(
            error_class,
            f"{param_name} must be an integer {bounds}, got: {value!r}",
            {
                **(context or {}),
                "param_name": param_name,
                "value": value,
                "min": min_val,
                "max": max_val,
            },
        )
    return value
