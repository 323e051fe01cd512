"""Stock-versus-option comparison data model."""

from dataclasses import dataclass
from typing import Literal, Tuple

from .contract import Greeks, OptionContract

Recommendation = Literal["stock", "option", "neutral"]

RECOMMENDATION_LABELS = {
    "option": "Consider ITM Option",
    "stock": "Consider Stock",
    "neutral": "Evaluate Both",
}


@dataclass(frozen=True)
class PositionComparison:
    """Economics of buying an option versus the equivalent shares.

    Recomputed from scratch on every input change, never mutated.
    Monetary values in dollars, ROI in percent (10.0 = 10%).
    Ratios are not guarded: zero capital yields ``inf``/``nan``.
    """

    contract: OptionContract
    greeks: Greeks

    # Position inputs
    premium: float
    multiplier: int
    contracts: int
    target_price: float

    # Capital
    stock_capital: float
    option_capital: float

    # Premium breakdown (per share)
    intrinsic_value: float
    time_value: float

    breakeven: float
    leverage: float                # stock_capital / option_capital

    # Worst case for each leg
    max_loss_stock: float
    max_loss_option: float

    # At target price
    profit_stock: float
    profit_option: float
    roi_stock: float
    roi_option: float

    recommendation: Recommendation
    reasons: Tuple[str, ...]

    @property
    def shares_equivalent(self) -> int:
        return self.multiplier * self.contracts

    @property
    def time_value_ratio(self) -> float:
        """Share of the premium that is time value (0.33 = 33%)."""
        if self.premium == 0:
            return float('nan')
        return self.time_value / self.premium

    @property
    def recommendation_label(self) -> str:
        return RECOMMENDATION_LABELS[self.recommendation]

    def __repr__(self) -> str:
        return (f"PositionComparison({self.contract.strike:g}{self.contract.option_type[0].upper()} "
                f"lev={self.leverage:.1f}x ROI stock={self.roi_stock:.1f}% "
                f"option={self.roi_option:.1f}% -> {self.recommendation})")
