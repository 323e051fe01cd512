"""Plain-language reading of Greeks and premium composition."""

from dataclasses import dataclass

from ..models.comparison import PositionComparison
from ..models.contract import Greeks

SHORT_EXPIRY_DAYS = 21


@dataclass(frozen=True)
class GreeksInterpretation:
    """Narrative notes shown next to the raw Greeks."""

    delta_analysis: str
    daily_theta_cost: float
    time_decay_note: str
    time_value_assessment: str


def delta_analysis(greeks: Greeks) -> str:
    """Describe how closely the option tracks the stock."""
    delta_pct = abs(greeks.delta) * 100
    if abs(greeks.delta) > 0.7:
        return (f"High delta ({delta_pct:.0f}%) - This deep ITM option moves nearly "
                f"dollar-for-dollar with the stock. Great for stock replacement strategy.")
    if abs(greeks.delta) > 0.4:
        return (f"Moderate delta ({delta_pct:.0f}%) - Option moves about {delta_pct:.0f} "
                f"cents for every $1 stock move.")
    return (f"Low delta ({delta_pct:.0f}%) - This option has limited stock price tracking. "
            f"Consider a deeper ITM strike.")


def daily_theta_cost(greeks: Greeks, contracts: int, multiplier: int = 100) -> float:
    """Dollars lost to time decay per day across the whole position."""
    return abs(greeks.theta * multiplier * contracts)


def time_decay_note(days_to_expiry: float) -> str:
    if days_to_expiry < SHORT_EXPIRY_DAYS:
        return "⚠️ Decay accelerates in the final 3 weeks!"
    return "Decay is manageable with this time to expiry."


def time_value_assessment(comparison: PositionComparison) -> str:
    """Judge how much of the premium is paid for time.

    Args:
        comparison: Comparison holding premium, intrinsic and time value

    Returns:
        Sentence describing the split and whether it is reasonable
    """
    ratio = comparison.time_value_ratio
    summary = (f"Of your ${comparison.premium:g} premium, ${comparison.intrinsic_value:.2f} is "
               f"intrinsic value and ${comparison.time_value:.2f} is time value ({ratio * 100:.0f}%).")

    if ratio < 0.2:
        verdict = "Excellent - minimal time premium being paid."
    elif ratio < 0.35:
        verdict = "Reasonable time premium for this expiry."
    else:
        # Also reached when the ratio is nan (zero premium)
        verdict = "Consider a deeper ITM option to reduce time value cost."

    return f"{summary} {verdict}"


def interpret(comparison: PositionComparison) -> GreeksInterpretation:
    """Build every narrative note for a comparison."""
    return GreeksInterpretation(
        delta_analysis=delta_analysis(comparison.greeks),
        daily_theta_cost=daily_theta_cost(comparison.greeks, comparison.contracts, comparison.multiplier),
        time_decay_note=time_decay_note(comparison.contract.days_to_expiry),
        time_value_assessment=time_value_assessment(comparison),
    )
