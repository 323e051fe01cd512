"""Console output formatter for calculator results."""

import math
from typing import List

from ..analytics.calculator import CalculatorResult
from ..models.comparison import PositionComparison
from ..models.contract import Greeks
from ..models.payoff import PayoffCurve


def format_currency(value: float) -> str:
    """Format dollars with no decimals, e.g. ``-$1,500``.

    Non-finite values render as ``N/A``.
    """
    if not math.isfinite(value):
        return "N/A"
    sign = "-" if round(value) < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def format_percent(value: float) -> str:
    """Format a percentage with an explicit sign, e.g. ``+66.7%``."""
    if not math.isfinite(value):
        return "N/A"
    return f"{'+' if value >= 0 else ''}{value:.1f}%"


def print_header(result: CalculatorResult):
    """Print calculator session header.

    Args:
        result: Evaluated calculator result
    """
    contract = result.contract
    title = result.inputs.ticker or "ITM OPTION"
    print("\n" + "=" * 80)
    print(f"  ITM OPTION vs STOCK - {title}")
    print(f"  {contract.option_type.upper()} {contract.strike:g} | Spot ${contract.spot:.2f} | "
          f"{contract.days_to_expiry:g} DTE | {contract.moneyness_label}")
    print("=" * 80)


def print_comparison(comparison: PositionComparison):
    """Print capital, returns and the recommendation.

    Args:
        comparison: PositionComparison to display
    """
    print(f"\nValue Breakdown (per share):")
    print(f"  Premium:          ${comparison.premium:.2f}")
    print(f"  Intrinsic Value:  ${comparison.intrinsic_value:.2f}")
    print(f"  Time Value:       ${comparison.time_value:.2f}")
    print(f"  Breakeven:        ${comparison.breakeven:.2f}")

    leverage = f"{comparison.leverage:.1f}x" if math.isfinite(comparison.leverage) else "N/A"

    print(f"\n{'':20} {'Stock':>14} {'Option':>14}")
    print("-" * 50)
    print(f"{'Capital Required':20} {format_currency(comparison.stock_capital):>14} "
          f"{format_currency(comparison.option_capital):>14}")
    print(f"{'Max Loss':20} {format_currency(comparison.max_loss_stock):>14} "
          f"{format_currency(comparison.max_loss_option):>14}")
    print(f"{f'Profit at ${comparison.target_price:g}':20} {format_currency(comparison.profit_stock):>14} "
          f"{format_currency(comparison.profit_option):>14}")
    print(f"{'ROI':20} {format_percent(comparison.roi_stock):>14} "
          f"{format_percent(comparison.roi_option):>14}")
    print(f"{'Leverage':20} {'':>14} {leverage:>14}")

    print(f"\nRecommendation: {comparison.recommendation_label}")
    for reason in comparison.reasons:
        print(f"  {reason}")


def print_greeks(greeks: Greeks, result: CalculatorResult):
    """Print Greeks with their interpretation.

    Args:
        greeks: Greeks to display
        result: Calculator result holding the interpretation
    """
    interpretation = result.interpretation

    print(f"\nGreeks:")
    print(f"  Delta:  {greeks.delta:8.4f}   Price sensitivity")
    print(f"  Gamma:  {greeks.gamma:8.4f}   Delta change rate")
    print(f"  Theta:  {greeks.theta:8.4f}   Daily decay")
    print(f"  Vega:   {greeks.vega:8.4f}   Per 1% IV change")
    print(f"  Rho:    {greeks.rho:8.4f}   Per 1% rate change")
    print(f"  Model price: ${result.model_price:.2f} "
          f"(premium {'above' if result.premium_vs_model > 0 else 'at or below'} model "
          f"by ${abs(result.premium_vs_model):.2f})")
    implied = f"{result.implied_vol_pct:.1f}%" if math.isfinite(result.implied_vol) else "N/A"
    print(f"  Implied volatility from premium: {implied} (input {result.inputs.volatility_pct:g}%)")

    print(f"\nGreeks Interpretation:")
    print(f"  {interpretation.delta_analysis}")
    print(f"  You're losing approximately {format_currency(interpretation.daily_theta_cost)} "
          f"per day to theta decay. {interpretation.time_decay_note}")
    print(f"  {interpretation.time_value_assessment}")


def print_payoff_table(curve: PayoffCurve, every: int = 5):
    """Print a thinned table of the payoff curve.

    Args:
        curve: PayoffCurve to display
        every: Print one row out of this many (the last point is always shown)
    """
    if not len(curve):
        print("No payoff curve available for these inputs.")
        return

    low, high = curve.pl_range()
    print(f"\nP/L at Expiration (range {format_currency(low)} to {format_currency(high)}):")
    print("-" * 50)
    print(f"{'Stock Price':>14} {'Stock P/L':>16} {'Option P/L':>16}")
    print("-" * 50)

    last = len(curve) - 1
    rows: List[str] = []
    for i, point in enumerate(curve):
        if i % every and i != last:
            continue
        rows.append(f"{f'${point.price:.2f}':>14} {format_currency(point.stock_pl):>16} "
                    f"{format_currency(point.option_pl):>16}")
    print("\n".join(rows))

    crossings = curve.breakeven_crossings()
    if crossings:
        print(f"\nOption breakeven on curve: " + ", ".join(f"${c:.2f}" for c in crossings))
