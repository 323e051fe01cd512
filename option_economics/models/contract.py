"""Option contract and Greeks value objects."""

from dataclasses import dataclass, asdict
from typing import Dict, Literal

DAYS_PER_YEAR = 365.0

OptionType = Literal["call", "put"]


@dataclass(frozen=True)
class OptionContract:
    """Model inputs for a single European option.

    Immutable, so a contract can be shared between the kernel, the
    comparison engine and the payoff generator without copies.
    Rate and volatility are decimals (0.05 = 5%), time in years.

    Numeric fields are deliberately not validated here: a user may be
    halfway through typing a value, and the pricing kernel maps
    degenerate inputs to a fixed fallback instead of failing.
    """

    spot: float
    strike: float
    time_to_expiry: float
    rate: float
    volatility: float
    option_type: OptionType

    def __post_init__(self) -> None:
        if self.option_type not in ("call", "put"):
            raise ValueError(f"Invalid option_type: {self.option_type}")

    @classmethod
    def from_calculator_inputs(
        cls,
        spot: float,
        strike: float,
        days_to_expiry: float,
        volatility_pct: float,
        rate_pct: float,
        option_type: OptionType = "call",
    ) -> "OptionContract":
        """Build a contract from calculator units.

        Args:
            spot: Current underlying price
            strike: Strike price
            days_to_expiry: Calendar days until expiration
            volatility_pct: Implied volatility in percent (30 = 30%)
            rate_pct: Risk-free rate in percent (5 = 5%)
            option_type: 'call' or 'put'

        Returns:
            OptionContract with time in years and decimal rate/vol
        """
        return cls(
            spot=spot,
            strike=strike,
            time_to_expiry=days_to_expiry / DAYS_PER_YEAR,
            rate=rate_pct / 100.0,
            volatility=volatility_pct / 100.0,
            option_type=option_type,
        )

    @property
    def is_call(self) -> bool:
        return self.option_type == "call"

    @property
    def days_to_expiry(self) -> float:
        """Calendar days to expiration (rounded to drop float noise)."""
        return round(self.time_to_expiry * DAYS_PER_YEAR, 6)

    @property
    def is_itm(self) -> bool:
        """True when exercising now would pay something."""
        if self.is_call:
            return self.spot > self.strike
        return self.spot < self.strike

    @property
    def intrinsic_value(self) -> float:
        """Payoff per share if exercised immediately."""
        if self.is_call:
            return max(0.0, self.spot - self.strike)
        return max(0.0, self.strike - self.spot)

    @property
    def moneyness_label(self) -> str:
        return "In The Money" if self.is_itm else "Out of The Money"

    def __repr__(self) -> str:
        return (f"OptionContract({self.strike:g}{self.option_type[0].upper()} "
                f"S={self.spot:g} DTE={self.days_to_expiry:g} "
                f"IV={self.volatility:.2%} r={self.rate:.2%})")


@dataclass(frozen=True)
class Greeks:
    """Option risk sensitivities.

    Units:
        delta: change in option price per $1 in the underlying
        gamma: change in delta per $1 in the underlying
        theta: change in option price per calendar day
        vega:  change in option price per 1 percentage point of IV
        rho:   change in option price per 1 percentage point of rate
    """

    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    @classmethod
    def fallback(cls, is_call: bool) -> "Greeks":
        """Degenerate-input result: the option behaves like the underlying."""
        return cls(delta=1.0 if is_call else -1.0, gamma=0.0, theta=0.0, vega=0.0, rho=0.0)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def __repr__(self) -> str:
        return (f"Greeks(Δ={self.delta:.4f} Γ={self.gamma:.4f} Θ={self.theta:.4f} "
                f"V={self.vega:.4f} ρ={self.rho:.4f})")
