"""Value objects for the option economics engine."""

from .comparison import PositionComparison
from .contract import Greeks, OptionContract
from .payoff import PayoffCurve, PayoffCurvePoint

__all__ = ["OptionContract", "Greeks", "PositionComparison", "PayoffCurve", "PayoffCurvePoint"]
