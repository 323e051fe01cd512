"""Calculator orchestrator.

Turns one set of form inputs into every figure the calculator shows.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ..models.comparison import PositionComparison
from ..models.contract import Greeks, OptionContract, OptionType
from ..models.payoff import PayoffCurve
from .comparison import DEFAULT_MULTIPLIER, RecommendationConfig, compare
from .greeks import implied_volatility, theoretical_price
from .interpretation import GreeksInterpretation, interpret
from .payoff import DEFAULT_SAMPLE_COUNT, curve_for
from ..utils.error_handling import coerce_number


@dataclass(frozen=True)
class CalculatorInputs:
    """Raw calculator inputs in user-facing units.

    Volatility and rate are percentages, expiry is in calendar days.
    Defaults describe a $10 ITM call on a $150 stock.
    """

    spot: float = 150.0
    strike: float = 140.0
    premium: float = 15.0
    days_to_expiry: float = 45
    contracts: int = 1
    target_price: float = 165.0
    volatility_pct: float = 30.0
    rate_pct: float = 5.0
    option_type: OptionType = "call"
    multiplier: int = DEFAULT_MULTIPLIER
    ticker: Optional[str] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "CalculatorInputs":
        """Create CalculatorInputs from a dictionary (e.g., from YAML).

        Args:
            config: Dictionary of input values; missing keys keep defaults

        Returns:
            CalculatorInputs instance

        Raises:
            DataValidationError: If a numeric field is not a number
        """
        defaults = cls()

        def number(key: str, integer: bool = False):
            if key not in config:
                return getattr(defaults, key)
            return coerce_number(config[key], key, integer=integer)

        ticker = config.get('ticker', defaults.ticker)
        return cls(
            spot=number('spot'),
            strike=number('strike'),
            premium=number('premium'),
            days_to_expiry=number('days_to_expiry'),
            contracts=number('contracts', integer=True),
            target_price=number('target_price'),
            volatility_pct=number('volatility_pct'),
            rate_pct=number('rate_pct'),
            option_type=config.get('option_type', defaults.option_type),
            multiplier=number('multiplier', integer=True),
            ticker=None if ticker is None else str(ticker),
        )

    def with_updates(self, **changes: Any) -> "CalculatorInputs":
        """Copy with some fields replaced, skipping ``None`` values."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_contract(self) -> OptionContract:
        return OptionContract.from_calculator_inputs(
            spot=self.spot,
            strike=self.strike,
            days_to_expiry=self.days_to_expiry,
            volatility_pct=self.volatility_pct,
            rate_pct=self.rate_pct,
            option_type=self.option_type,
        )


@dataclass(frozen=True)
class CalculatorResult:
    """Everything derived from one set of inputs."""

    inputs: CalculatorInputs
    contract: OptionContract
    comparison: PositionComparison
    curve: PayoffCurve
    interpretation: GreeksInterpretation
    model_price: float
    implied_vol: float

    @property
    def greeks(self) -> Greeks:
        return self.comparison.greeks

    @property
    def premium_vs_model(self) -> float:
        """Quoted premium minus the Black-Scholes value (positive = paying up)."""
        return self.inputs.premium - self.model_price

    @property
    def implied_vol_pct(self) -> float:
        """Volatility implied by the quoted premium, in percent (NaN if none)."""
        return self.implied_vol * 100.0


def evaluate(
    inputs: CalculatorInputs,
    config: Optional[RecommendationConfig] = None,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
) -> CalculatorResult:
    """Run the full comparison for a set of calculator inputs.

    Args:
        inputs: Calculator inputs in user-facing units
        config: Recommendation thresholds
        sample_count: Points in the payoff curve

    Returns:
        CalculatorResult with comparison, payoff curve and interpretation
    """
    contract = inputs.to_contract()
    comparison = compare(
        contract,
        premium=inputs.premium,
        multiplier=inputs.multiplier,
        contract_count=inputs.contracts,
        target_price=inputs.target_price,
        config=config,
    )

    return CalculatorResult(
        inputs=inputs,
        contract=contract,
        comparison=comparison,
        curve=curve_for(comparison, sample_count=sample_count),
        interpretation=interpret(comparison),
        model_price=theoretical_price(contract),
        implied_vol=implied_volatility(contract, inputs.premium),
    )
