"""Sanity checks for calculator inputs.

The engine accepts any numbers and encodes trouble in its outputs, so these
checks never reject input. They return warnings for the caller to show next
to the form while the user finishes typing.
"""

import logging
import math
from typing import List

from ..analytics.calculator import CalculatorInputs

logger = logging.getLogger("option_economics.validators")

MAX_VOLATILITY_PCT = 500.0


def validate_calculator_inputs(inputs: CalculatorInputs) -> List[str]:
    """Collect warnings about inputs the engine will treat as degenerate.

    Args:
        inputs: Calculator inputs to check

    Returns:
        List of warning messages (empty if inputs look sane)

    Example:
        >>> warnings = validate_calculator_inputs(CalculatorInputs(contracts=0))
        >>> warnings
        ['Contract count is 0: leverage and ROI will be undefined']
    """
    warnings: List[str] = []

    numeric_fields = {
        'spot': inputs.spot,
        'strike': inputs.strike,
        'premium': inputs.premium,
        'days_to_expiry': inputs.days_to_expiry,
        'target_price': inputs.target_price,
        'volatility_pct': inputs.volatility_pct,
        'rate_pct': inputs.rate_pct,
    }
    for name, value in numeric_fields.items():
        if not math.isfinite(value):
            warnings.append(f"{name} is not a finite number: {value}")

    if inputs.spot <= 0:
        warnings.append(f"Stock price must be positive, got {inputs.spot}")

    if inputs.strike <= 0:
        warnings.append(f"Strike price must be positive, got {inputs.strike}")

    if inputs.premium <= 0:
        warnings.append(f"Option premium must be positive, got {inputs.premium}")

    if inputs.contracts <= 0:
        warnings.append(f"Contract count is {inputs.contracts}: leverage and ROI will be undefined")

    if inputs.multiplier <= 0:
        warnings.append(f"Contract multiplier must be positive, got {inputs.multiplier}")

    if inputs.days_to_expiry <= 0:
        warnings.append("Option is at or past expiration: Greeks fall back to stock-like values")

    if inputs.volatility_pct <= 0:
        warnings.append("Implied volatility must be positive: Greeks fall back to stock-like values")
    elif inputs.volatility_pct > MAX_VOLATILITY_PCT:
        warnings.append(f"Implied volatility {inputs.volatility_pct}% looks unrealistic")

    if inputs.target_price < 0:
        warnings.append(f"Target price cannot be negative, got {inputs.target_price}")

    for warning in warnings:
        logger.warning("Input check: %s", warning)

    return warnings
