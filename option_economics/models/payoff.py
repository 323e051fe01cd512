"""Profit/loss curve data model."""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class PayoffCurvePoint:
    """Stock and option P/L at expiration for one underlying price."""

    price: float
    stock_pl: float
    option_pl: float


@dataclass(frozen=True)
class PayoffCurve:
    """Expiration P/L across a band of underlying prices.

    Points are ascending by price and fully materialized; charting needs
    the whole curve for axis scaling and breakeven lookups.
    """

    points: Tuple[PayoffCurvePoint, ...]
    spot: float
    breakeven: float

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PayoffCurvePoint]:
        return iter(self.points)

    @property
    def prices(self) -> List[float]:
        return [p.price for p in self.points]

    @property
    def stock_pls(self) -> List[float]:
        return [p.stock_pl for p in self.points]

    @property
    def option_pls(self) -> List[float]:
        return [p.option_pl for p in self.points]

    def pl_range(self) -> Tuple[float, float]:
        """Lowest and highest P/L across both legs.

        Returns:
            (min, max), or (0.0, 0.0) for an empty curve
        """
        if not self.points:
            return 0.0, 0.0
        values = self.stock_pls + self.option_pls
        return min(values), max(values)

    def breakeven_crossings(self) -> List[float]:
        """Prices where the option P/L crosses zero.

        Interpolates linearly between adjacent samples. A sample that
        lands exactly on zero is reported as-is.

        Returns:
            Ascending list of crossing prices
        """
        crossings: List[float] = []
        for left, right in zip(self.points, self.points[1:]):
            if left.option_pl == 0:
                crossings.append(left.price)
            elif (left.option_pl < 0) != (right.option_pl < 0) and right.option_pl != 0:
                fraction = -left.option_pl / (right.option_pl - left.option_pl)
                crossings.append(left.price + fraction * (right.price - left.price))
        if self.points and self.points[-1].option_pl == 0:
            crossings.append(self.points[-1].price)
        return crossings

    def nearest_point(self, price: float) -> Optional[PayoffCurvePoint]:
        """Sample closest to ``price``, or None for an empty curve."""
        if not self.points:
            return None
        return min(self.points, key=lambda p: abs(p.price - price))

    def to_frame(self) -> pd.DataFrame:
        """Curve as a DataFrame with ``price``, ``stock_pl`` and ``option_pl`` columns."""
        return pd.DataFrame(
            {
                'price': self.prices,
                'stock_pl': self.stock_pls,
                'option_pl': self.option_pls,
            },
            columns=['price', 'stock_pl', 'option_pl'],
        )

    def __repr__(self) -> str:
        if not self.points:
            return "PayoffCurve(empty)"
        return (f"PayoffCurve({len(self.points)} pts "
                f"${self.points[0].price:.2f}-${self.points[-1].price:.2f} "
                f"BE=${self.breakeven:.2f})")
