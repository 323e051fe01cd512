"""Greeks calculation using the Black-Scholes-Merton model.

European exercise, no dividends. The kernel is total: any input that would
make the closed form blow up (expired contract, zero volatility, overflow,
non-finite results) returns a fixed fallback instead of raising, so it can be
called on every keystroke while a user edits inputs.
"""

import logging
import math
from dataclasses import replace
from typing import Tuple

from scipy.optimize import brentq

from ..models.contract import DAYS_PER_YEAR, Greeks, OptionContract

logger = logging.getLogger("option_economics.greeks")

# Abramowitz & Stegun 7.1.26 coefficients (|error| < 1.5e-7)
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911

_SQRT_2 = math.sqrt(2.0)
_SQRT_2PI = math.sqrt(2.0 * math.pi)

# Volatility search range for the implied volatility solver (0.1% to 500%)
IV_SEARCH_BOUNDS = (0.001, 5.0)


def norm_cdf(x: float) -> float:
    """Standard normal cumulative distribution function.

    Uses the Abramowitz-Stegun rational approximation of erf rather than
    a library call, accurate to about 1e-7.

    Args:
        x: Point at which to evaluate

    Returns:
        P(Z <= x) for Z ~ N(0, 1)

    Example:
        >>> round(norm_cdf(0.0), 6)
        0.5
    """
    sign = -1.0 if x < 0 else 1.0
    z = abs(x) / _SQRT_2
    t = 1.0 / (1.0 + _P * z)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-z * z)
    return 0.5 * (1.0 + sign * y)


def norm_pdf(x: float) -> float:
    """Standard normal probability density."""
    return math.exp(-x * x / 2.0) / _SQRT_2PI


def d1_d2(
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    vol: float
) -> Tuple[float, float]:
    """Calculate the d1 and d2 terms of the Black-Scholes formula.

    Callers are expected to have checked that spot, strike, vol and time
    are positive; arithmetic errors propagate.
    """
    sqrt_t = math.sqrt(time_to_expiry)
    d1 = (math.log(spot / strike) + (rate + vol * vol / 2.0) * time_to_expiry) / (vol * sqrt_t)
    return d1, d1 - vol * sqrt_t


def _is_degenerate(spot: float, strike: float, time_to_expiry: float, vol: float) -> bool:
    if not all(math.isfinite(v) for v in (spot, strike, time_to_expiry, vol)):
        return True
    return time_to_expiry <= 0 or spot <= 0 or strike <= 0 or vol <= 0


def compute_greeks(
    spot: float,
    strike: float,
    time_to_expiry: float,
    rate: float,
    volatility: float,
    is_call: bool
) -> Greeks:
    """Calculate delta, gamma, theta, vega and rho.

    Args:
        spot: Current underlying price
        strike: Strike price
        time_to_expiry: Time to expiration in years
        rate: Risk-free interest rate (annualized, decimal)
        volatility: Implied volatility (annualized, decimal)
        is_call: True for a call, False for a put

    Returns:
        Greeks with theta per calendar day and vega/rho per 1 percentage
        point. Degenerate inputs return ``Greeks.fallback(is_call)``:
        delta of +1/-1 and every other Greek zero.

    Example:
        >>> g = compute_greeks(150, 140, 45 / 365, 0.05, 0.30, is_call=True)
        >>> # g.delta ~0.76 for a call $10 in the money
    """
    if _is_degenerate(spot, strike, time_to_expiry, volatility):
        logger.debug(
            "Degenerate inputs (S=%s K=%s T=%s vol=%s), using fallback Greeks",
            spot, strike, time_to_expiry, volatility
        )
        return Greeks.fallback(is_call)

    try:
        d1, d2 = d1_d2(spot, strike, time_to_expiry, rate, volatility)
        if not (math.isfinite(d1) and math.isfinite(d2)):
            logger.debug("Non-finite d1/d2 (%s, %s), using fallback Greeks", d1, d2)
            return Greeks.fallback(is_call)

        sqrt_t = math.sqrt(time_to_expiry)
        nprime = norm_pdf(d1)
        discounted_strike = strike * math.exp(-rate * time_to_expiry)

        if is_call:
            delta = norm_cdf(d1)
        else:
            delta = norm_cdf(d1) - 1.0

        gamma = nprime / (spot * volatility * sqrt_t)

        decay = -(spot * nprime * volatility) / (2.0 * sqrt_t)
        if is_call:
            theta = (decay - rate * discounted_strike * norm_cdf(d2)) / DAYS_PER_YEAR
        else:
            theta = (decay + rate * discounted_strike * norm_cdf(-d2)) / DAYS_PER_YEAR

        vega = spot * nprime * sqrt_t / 100.0

        if is_call:
            rho = time_to_expiry * discounted_strike * norm_cdf(d2) / 100.0
        else:
            rho = -time_to_expiry * discounted_strike * norm_cdf(-d2) / 100.0
    except (ArithmeticError, ValueError) as e:
        # OverflowError from exp() with extreme rates, ZeroDivisionError on underflow
        logger.debug("Greeks arithmetic failed (%s), using fallback Greeks", e)
        return Greeks.fallback(is_call)

    greeks = Greeks(delta=delta, gamma=gamma, theta=theta, vega=vega, rho=rho)
    if not all(math.isfinite(v) for v in (delta, gamma, theta, vega, rho)):
        logger.debug("Non-finite Greeks %r, using fallback", greeks)
        return Greeks.fallback(is_call)

    return greeks


def greeks_for(contract: OptionContract) -> Greeks:
    """Calculate Greeks for an OptionContract."""
    return compute_greeks(
        spot=contract.spot,
        strike=contract.strike,
        time_to_expiry=contract.time_to_expiry,
        rate=contract.rate,
        volatility=contract.volatility,
        is_call=contract.is_call,
    )


def theoretical_price(contract: OptionContract) -> float:
    """Closed-form European option price.

    Args:
        contract: Option to price

    Returns:
        Black-Scholes value per share. Falls back to intrinsic value when
        the model is undefined (expired, zero vol, non-finite results).
    """
    spot, strike = contract.spot, contract.strike
    t, rate, vol = contract.time_to_expiry, contract.rate, contract.volatility

    if _is_degenerate(spot, strike, t, vol):
        return contract.intrinsic_value

    try:
        d1, d2 = d1_d2(spot, strike, t, rate, vol)
        discounted_strike = strike * math.exp(-rate * t)
        if contract.is_call:
            price = spot * norm_cdf(d1) - discounted_strike * norm_cdf(d2)
        else:
            price = discounted_strike * norm_cdf(-d2) - spot * norm_cdf(-d1)
    except (ArithmeticError, ValueError) as e:
        logger.debug("Pricing arithmetic failed (%s), using intrinsic value", e)
        return contract.intrinsic_value

    if not math.isfinite(price):
        return contract.intrinsic_value
    # The CDF approximation can leave a tiny negative value for far OTM options
    return max(0.0, price)


def implied_volatility(
    contract: OptionContract,
    premium: float,
    bounds: Tuple[float, float] = IV_SEARCH_BOUNDS
) -> float:
    """Solve for the volatility at which the model price equals the premium.

    The contract's own volatility is ignored.

    Args:
        contract: Option being priced
        premium: Quoted premium per share
        bounds: (low, high) volatility search range, decimal

    Returns:
        Implied volatility as a decimal, or NaN when no volatility inside
        ``bounds`` reproduces the premium (premium under the no-arbitrage
        floor, expired contract, non-positive inputs).
    """
    if not math.isfinite(premium) or premium <= 0:
        return math.nan
    if _is_degenerate(contract.spot, contract.strike, contract.time_to_expiry, 1.0):
        return math.nan

    def objective(vol: float) -> float:
        return theoretical_price(replace(contract, volatility=vol)) - premium

    low, high = bounds
    f_low, f_high = objective(low), objective(high)
    # Price is increasing in volatility, so a root exists only if the ends bracket zero
    if not (f_low <= 0.0 <= f_high):
        logger.debug(
            "Premium %s not reachable for vol in [%s, %s] (%r)", premium, low, high, contract
        )
        return math.nan

    return brentq(objective, low, high, xtol=1e-10)


def validate_greeks(greeks: Greeks, option_type: str, tolerance: float = 0.05) -> Tuple[bool, str]:
    """Check that Greeks are within the ranges a long option can produce.

    Args:
        greeks: Greeks to validate
        option_type: 'call' or 'put'
        tolerance: Slack for each range check

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> is_valid, error = validate_greeks(greeks, 'call')
        >>> if not is_valid:
        >>>     logger.warning("Invalid Greeks: %s", error)
    """
    if abs(greeks.delta) > 1.0 + tolerance:
        return False, f"Delta {greeks.delta:.3f} outside valid range [-1, 1]"

    if option_type == 'call' and greeks.delta < -tolerance:
        return False, f"Call option has negative delta: {greeks.delta:.3f}"

    if option_type == 'put' and greeks.delta > tolerance:
        return False, f"Put option has positive delta: {greeks.delta:.3f}"

    if greeks.gamma < -tolerance:
        return False, f"Gamma should be non-negative, got: {greeks.gamma:.3f}"

    if greeks.vega < -tolerance:
        return False, f"Vega should be non-negative, got: {greeks.vega:.3f}"

    if option_type == 'call' and greeks.rho < -tolerance:
        return False, f"Call option has negative rho: {greeks.rho:.3f}"

    if option_type == 'put' and greeks.rho > tolerance:
        return False, f"Put option has positive rho: {greeks.rho:.3f}"

    return True, ""
