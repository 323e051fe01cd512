"""Error handling utilities.

The numeric core never raises on bad numbers; it encodes problems in its
outputs. Exceptions here cover configuration mistakes and the network-bound
quote lookup.
"""

import math
import time
from typing import TypeVar, Callable, Type, Tuple
from functools import wraps
import logging

logger = logging.getLogger("option_economics.error_handling")

T = TypeVar('T')


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    logger_func: Callable[[str], None] | None = None
):
    """Decorator to retry function with exponential backoff.

    Args:
        max_retries: Maximum number of attempts
        backoff_factor: Multiplier for exponential backoff (wait time = backoff_factor ** attempt)
        exceptions: Tuple of exception types to catch and retry
        logger_func: Optional logging function (defaults to logger.warning)

    Returns:
        Decorated function with retry logic

    Example:
        >>> @retry_with_backoff(max_retries=3, exceptions=(ConnectionError, TimeoutError))
        >>> def fetch_quote():
        >>>     return lookup.get_quote("AAPL")

    Raises:
        The original exception if all retries are exhausted
    """
    log_func = logger_func or logger.warning

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_retries - 1:
                        logger.error(
                            "Function %s failed after %d attempts: %s",
                            func.__name__, max_retries, e
                        )
                        raise

                    wait_time = backoff_factor ** attempt
                    log_func(
                        f"Attempt {attempt + 1}/{max_retries} failed for {func.__name__}: {e}. "
                        f"Retrying in {wait_time:.1f}s..."
                    )
                    time.sleep(wait_time)

            raise RuntimeError(f"Unexpected state in retry logic for {func.__name__}")

        return wrapper
    return decorator


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics instead of raising.

    Python raises ZeroDivisionError on float division by zero. Ratios such
    as leverage and ROI instead surface the non-finite result so callers
    can format it.

    Args:
        numerator: Numerator value
        denominator: Denominator value

    Returns:
        numerator / denominator, ``±inf`` for x/0 and ``nan`` for 0/0

    Example:
        >>> ieee_divide(15000, 1500)
        10.0
        >>> ieee_divide(15000, 0)
        inf
        >>> ieee_divide(0, 0)
        nan
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        # Signed zero in the denominator flips the infinity like IEEE does
        sign = math.copysign(1.0, numerator) * math.copysign(1.0, denominator)
        logger.debug("Division by zero: %s/%s", numerator, denominator)
        return math.copysign(math.inf, sign)
    return numerator / denominator


def coerce_number(value, name: str, integer: bool = False) -> float:
    """Convert a config value to a number.

    Args:
        value: Raw value (e.g. from YAML, so possibly a string)
        name: Field name used in the error message
        integer: Require a whole number and return an int

    Returns:
        The value as a float, or as an int when ``integer`` is set

    Raises:
        DataValidationError: If the value is not numeric (booleans included)
            or is not whole when ``integer`` is set

    Example:
        >>> coerce_number("150.5", "spot")
        150.5
    """
    if isinstance(value, bool):
        raise DataValidationError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise DataValidationError(f"{name} must be a number, got {value!r}") from e

    if integer:
        if not number.is_integer():
            raise DataValidationError(f"{name} must be a whole number, got {value!r}")
        return int(number)
    return number


class CalculatorError(Exception):
    """Base exception for option calculator errors."""
    pass


class DataValidationError(ValueError, CalculatorError):
    """Raised when external data (config files, quotes) is malformed.

    Inherits from ValueError so callers can catch either.
    """
    pass


class QuoteNotFoundError(CalculatorError):
    """Raised when a ticker has no usable price."""

    def __init__(self, symbol: str, detail: str = ""):
        self.symbol = symbol
        message = f"Could not find stock: {symbol}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ConfigurationError(CalculatorError):
    """Raised when configuration is invalid."""
    pass
