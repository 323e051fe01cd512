"""Expiration profit/loss curve for stock versus option."""

import logging
import math
from typing import Tuple

import numpy as np

from ..models.comparison import PositionComparison
from ..models.contract import OptionContract
from ..models.payoff import PayoffCurve, PayoffCurvePoint
from .comparison import DEFAULT_MULTIPLIER

logger = logging.getLogger("option_economics.payoff")

DEFAULT_SAMPLE_COUNT = 51
DEFAULT_BAND = (0.7, 1.3)


def generate_curve(
    contract: OptionContract,
    premium: float,
    multiplier: int = DEFAULT_MULTIPLIER,
    contract_count: int = 1,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
    band: Tuple[float, float] = DEFAULT_BAND,
) -> PayoffCurve:
    """Sample stock and option P/L at expiration around spot.

    Args:
        contract: Option being considered
        premium: Option premium per share
        multiplier: Shares per contract
        contract_count: Number of contracts
        sample_count: Number of prices sampled, endpoints included
        band: (low, high) multiples of spot to sample between

    Returns:
        PayoffCurve ascending by price. Empty when spot is negative or
        not finite.

    Raises:
        ValueError: If sample_count < 2 or the band is inverted

    Note:
        Option P/L uses intrinsic value only (no model price), so the
        curve crosses zero exactly at the breakeven.
    """
    if sample_count < 2:
        raise ValueError(f"sample_count must be at least 2, got {sample_count}")
    low_mult, high_mult = band
    if low_mult > high_mult:
        raise ValueError(f"Invalid band {band}: low multiple above high multiple")

    breakeven = contract.strike + premium if contract.is_call else contract.strike - premium

    spot = contract.spot
    if not math.isfinite(spot) or spot < 0:
        logger.debug("Cannot sample payoff curve around spot %s", spot)
        return PayoffCurve(points=(), spot=spot, breakeven=breakeven)

    shares_equivalent = multiplier * contract_count
    option_capital = premium * contract_count * multiplier

    prices = np.linspace(max(0.0, spot * low_mult), spot * high_mult, sample_count)

    if contract.is_call:
        intrinsic = np.maximum(0.0, prices - contract.strike)
        stock_pl = (prices - spot) * shares_equivalent
    else:
        intrinsic = np.maximum(0.0, contract.strike - prices)
        stock_pl = (spot - prices) * shares_equivalent
    option_pl = intrinsic * shares_equivalent - option_capital

    points = tuple(
        PayoffCurvePoint(price=float(p), stock_pl=float(s), option_pl=float(o))
        for p, s, o in zip(prices, stock_pl, option_pl)
    )

    logger.debug("Generated %d payoff points for %r", len(points), contract)

    return PayoffCurve(points=points, spot=spot, breakeven=breakeven)


def curve_for(comparison: PositionComparison, sample_count: int = DEFAULT_SAMPLE_COUNT) -> PayoffCurve:
    """Generate the payoff curve matching a comparison's position."""
    return generate_curve(
        contract=comparison.contract,
        premium=comparison.premium,
        multiplier=comparison.multiplier,
        contract_count=comparison.contracts,
        sample_count=sample_count,
    )
