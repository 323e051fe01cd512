"""Stock versus ITM option comparison.

Derives capital, breakeven, leverage and target-price returns for buying an
option against buying the equivalent shares, then runs an ordered rule chain
that produces a recommendation and the reasons behind it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.comparison import PositionComparison, Recommendation
from ..models.contract import Greeks, OptionContract
from ..utils.error_handling import coerce_number, ieee_divide
from .greeks import greeks_for

logger = logging.getLogger("option_economics.comparison")

DEFAULT_MULTIPLIER = 100


class RecommendationConfig:
    """Thresholds for the recommendation rule chain."""

    def __init__(
        self,
        short_expiry_days: float = 21.0,
        deep_itm_intrinsic_ratio: float = 0.8,
        high_time_value_ratio: float = 0.3,
        high_leverage: float = 5.0,
        high_delta: float = 0.7,
        low_delta: float = 0.4,
        roi_advantage_multiple: float = 2.0,
        high_volatility: float = 0.40,
    ):
        """Initialize recommendation thresholds.

        Args:
            short_expiry_days: Below this many days, theta decay favors stock
            deep_itm_intrinsic_ratio: Intrinsic/premium above this counts as deep ITM
            high_time_value_ratio: Time value/premium above this is flagged as expensive
            high_leverage: Leverage above this favors the option
            high_delta: |delta| above this tracks the stock closely
            low_delta: |delta| below this is flagged as unresponsive
            roi_advantage_multiple: Option ROI must exceed stock ROI by this factor
            high_volatility: Implied volatility (decimal) above this is flagged
        """
        self.short_expiry_days = short_expiry_days
        self.deep_itm_intrinsic_ratio = deep_itm_intrinsic_ratio
        self.high_time_value_ratio = high_time_value_ratio
        self.high_leverage = high_leverage
        self.high_delta = high_delta
        self.low_delta = low_delta
        self.roi_advantage_multiple = roi_advantage_multiple
        self.high_volatility = high_volatility

        if low_delta > high_delta:
            logger.warning(
                "low_delta %.2f is above high_delta %.2f; delta notes will never trigger low",
                low_delta, high_delta
            )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "RecommendationConfig":
        """Create RecommendationConfig from a dictionary (e.g., from YAML).

        Args:
            config: Dictionary with threshold overrides; missing keys keep defaults

        Returns:
            RecommendationConfig instance

        Raises:
            DataValidationError: If a threshold is not a number
        """
        defaults = cls()
        return cls(**{
            key: coerce_number(config[key], key) if key in config else getattr(defaults, key)
            for key in (
                'short_expiry_days',
                'deep_itm_intrinsic_ratio',
                'high_time_value_ratio',
                'high_leverage',
                'high_delta',
                'low_delta',
                'roi_advantage_multiple',
                'high_volatility',
            )
        })


@dataclass(frozen=True)
class RuleContext:
    """Everything a recommendation rule may look at."""

    contract: OptionContract
    greeks: Greeks
    premium: float
    intrinsic_value: float
    time_value: float
    leverage: float
    roi_stock: float
    roi_option: float
    config: RecommendationConfig


# (recommendation, reasons) threaded through the chain
RuleState = Tuple[Recommendation, Tuple[str, ...]]


@dataclass(frozen=True)
class RecommendationRule:
    """One step of the recommendation chain.

    ``applies`` decides whether the rule fires. ``apply`` returns the
    reason to append and the new recommendation, or None to leave the
    current recommendation alone.
    """

    name: str
    applies: Callable[[RuleContext, Recommendation], bool]
    apply: Callable[[RuleContext, Recommendation], Tuple[str, Optional[Recommendation]]]


def _delta_pct(ctx: RuleContext) -> str:
    return f"{abs(ctx.greeks.delta) * 100:.0f}%"


def _leverage_label(ctx: RuleContext) -> str:
    return f"{ctx.leverage:.1f}x" if math.isfinite(ctx.leverage) else "N/A"


def _option_roi_dominates(ctx: RuleContext) -> bool:
    return ctx.roi_option > ctx.roi_stock * ctx.config.roi_advantage_multiple


def _high_delta(ctx: RuleContext) -> bool:
    return abs(ctx.greeks.delta) > ctx.config.high_delta


RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        name="short_expiry",
        applies=lambda ctx, rec: ctx.contract.days_to_expiry < ctx.config.short_expiry_days,
        apply=lambda ctx, rec: ("⚠️ Short time to expiry - theta decay accelerates", "stock"),
    ),
    RecommendationRule(
        name="deep_itm",
        applies=lambda ctx, rec: (
            ctx.contract.is_itm
            and ieee_divide(ctx.intrinsic_value, ctx.premium) > ctx.config.deep_itm_intrinsic_ratio
        ),
        apply=lambda ctx, rec: ("✅ Deep ITM - option behaves like leveraged stock", "option"),
    ),
    RecommendationRule(
        name="high_time_value",
        applies=lambda ctx, rec: (
            ieee_divide(ctx.time_value, ctx.premium) > ctx.config.high_time_value_ratio
        ),
        apply=lambda ctx, rec: ("⚠️ High time value - paying significant premium for time", None),
    ),
    RecommendationRule(
        name="high_leverage",
        applies=lambda ctx, rec: ctx.leverage > ctx.config.high_leverage,
        # Short-expiry "stock" call wins over leverage
        apply=lambda ctx, rec: (
            f"✅ High leverage ({_leverage_label(ctx)}) - efficient capital use",
            None if rec == "stock" else "option",
        ),
    ),
    RecommendationRule(
        name="high_delta",
        applies=lambda ctx, rec: _high_delta(ctx),
        apply=lambda ctx, rec: (f"✅ High delta ({_delta_pct(ctx)}) - moves closely with stock", None),
    ),
    RecommendationRule(
        name="low_delta",
        applies=lambda ctx, rec: not _high_delta(ctx) and abs(ctx.greeks.delta) < ctx.config.low_delta,
        apply=lambda ctx, rec: (f"⚠️ Low delta ({_delta_pct(ctx)}) - less responsive to stock movement", None),
    ),
    RecommendationRule(
        name="option_roi_advantage",
        applies=lambda ctx, rec: _option_roi_dominates(ctx),
        apply=lambda ctx, rec: (
            "✅ Option ROI significantly higher at target price",
            "option" if rec == "neutral" else None,
        ),
    ),
    RecommendationRule(
        name="stock_roi_advantage",
        applies=lambda ctx, rec: not _option_roi_dominates(ctx) and ctx.roi_stock > ctx.roi_option,
        apply=lambda ctx, rec: ("⚠️ Stock ROI higher - consider stock purchase", "stock"),
    ),
    RecommendationRule(
        name="high_volatility",
        applies=lambda ctx, rec: ctx.contract.volatility > ctx.config.high_volatility,
        apply=lambda ctx, rec: ("⚠️ High volatility - options more expensive", None),
    ),
)


def run_rules(ctx: RuleContext, rules: Tuple[RecommendationRule, ...] = RULES) -> RuleState:
    """Reduce the rule chain into a recommendation and its reasons.

    Rules run in order; a later rule may overwrite the recommendation set
    by an earlier one, subject to its own side conditions.

    Args:
        ctx: Derived comparison figures
        rules: Ordered rules (defaults to the standard chain)

    Returns:
        Tuple of (recommendation, reasons)
    """
    recommendation: Recommendation = "neutral"
    reasons: List[str] = []

    for rule in rules:
        if not rule.applies(ctx, recommendation):
            continue
        reason, new_recommendation = rule.apply(ctx, recommendation)
        reasons.append(reason)
        if new_recommendation is not None:
            recommendation = new_recommendation
        logger.debug("Rule %s fired -> %s", rule.name, recommendation)

    return recommendation, tuple(reasons)


def compare(
    contract: OptionContract,
    premium: float,
    multiplier: int = DEFAULT_MULTIPLIER,
    contract_count: int = 1,
    target_price: Optional[float] = None,
    config: Optional[RecommendationConfig] = None,
) -> PositionComparison:
    """Compare buying an option with buying the equivalent shares.

    Args:
        contract: Option being considered
        premium: Quoted option premium per share
        multiplier: Shares per contract (conventionally 100)
        contract_count: Number of contracts
        target_price: Underlying price to evaluate profit at (defaults to spot)
        config: Recommendation thresholds (defaults reproduce the standard rules)

    Returns:
        PositionComparison with capital, breakeven, leverage, returns at
        target and a recommendation. Zero capital yields non-finite ratios
        rather than an exception.

    Example:
        >>> contract = OptionContract.from_calculator_inputs(150, 140, 45, 30, 5, 'call')
        >>> result = compare(contract, premium=15, target_price=165)
        >>> result.breakeven, result.leverage
        (155, 10.0)
    """
    config = config or RecommendationConfig()
    if target_price is None:
        target_price = contract.spot

    greeks = greeks_for(contract)

    shares_equivalent = multiplier * contract_count
    stock_capital = contract.spot * shares_equivalent
    option_capital = premium * contract_count * multiplier

    intrinsic_value = contract.intrinsic_value
    time_value = premium - intrinsic_value

    if contract.is_call:
        breakeven = contract.strike + premium
    else:
        breakeven = contract.strike - premium

    leverage = ieee_divide(stock_capital, option_capital)

    # Put framing mirrors the stock leg so both legs profit in the same direction
    if contract.is_call:
        profit_stock = (target_price - contract.spot) * shares_equivalent
        value_at_target = max(0.0, target_price - contract.strike)
    else:
        profit_stock = (contract.spot - target_price) * shares_equivalent
        value_at_target = max(0.0, contract.strike - target_price)
    profit_option = value_at_target * shares_equivalent - option_capital

    roi_stock = ieee_divide(profit_stock, stock_capital) * 100
    roi_option = ieee_divide(profit_option, option_capital) * 100

    ctx = RuleContext(
        contract=contract,
        greeks=greeks,
        premium=premium,
        intrinsic_value=intrinsic_value,
        time_value=time_value,
        leverage=leverage,
        roi_stock=roi_stock,
        roi_option=roi_option,
        config=config,
    )
    recommendation, reasons = run_rules(ctx)

    logger.debug(
        "Compared %r premium=%s x%d: leverage=%.2f ROI stock=%.1f%% option=%.1f%% -> %s",
        contract, premium, contract_count, leverage, roi_stock, roi_option, recommendation
    )

    return PositionComparison(
        contract=contract,
        greeks=greeks,
        premium=premium,
        multiplier=multiplier,
        contracts=contract_count,
        target_price=target_price,
        stock_capital=stock_capital,
        option_capital=option_capital,
        intrinsic_value=intrinsic_value,
        time_value=time_value,
        breakeven=breakeven,
        leverage=leverage,
        max_loss_stock=stock_capital,
        max_loss_option=option_capital,
        profit_stock=profit_stock,
        profit_option=profit_option,
        roi_stock=roi_stock,
        roi_option=roi_option,
        recommendation=recommendation,
        reasons=reasons,
    )
