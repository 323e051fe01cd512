"""Quote lookup used to pre-populate calculator inputs.

Kept outside the pricing core: the engine never fetches prices itself. A
failed lookup only means the user types the numbers in by hand.
"""

import logging
import math
from dataclasses import dataclass
from typing import Protocol

import requests
import yfinance as yf

from ..analytics.calculator import CalculatorInputs
from ..utils.error_handling import QuoteNotFoundError, retry_with_backoff

logger = logging.getLogger("option_economics.quotes")

# Strike a little in the money, target a 10% move
DEFAULT_STRIKE_FACTOR = 0.95
DEFAULT_TARGET_FACTOR = 1.10


@dataclass(frozen=True)
class Quote:
    """Current price and display name for a ticker."""

    symbol: str
    price: float
    name: str


class QuoteLookup(Protocol):
    """Anything that can turn a ticker into a Quote."""

    def get_quote(self, symbol: str) -> Quote:
        ...


class YahooQuoteLookup:
    """Quote lookup backed by Yahoo Finance via yfinance."""

    @staticmethod
    def normalize_symbol(symbol: str) -> str:
        return symbol.strip().upper()

    def get_quote(self, symbol: str) -> Quote:
        """Fetch the latest price for a ticker.

        Args:
            symbol: Ticker symbol (case and surrounding whitespace ignored)

        Returns:
            Quote with price and display name

        Raises:
            QuoteNotFoundError: If the symbol is empty or has no positive price
        """
        symbol = self.normalize_symbol(symbol)
        if not symbol:
            raise QuoteNotFoundError(symbol, "empty ticker symbol")

        logger.info("Fetching quote for %s", symbol)
        price, name = self._fetch(symbol)

        if price is None or not price > 0:
            logger.warning("No price data available for %s", symbol)
            raise QuoteNotFoundError(symbol, "no price data available")

        return Quote(symbol=symbol, price=float(price), name=name or symbol)

    @retry_with_backoff(
        max_retries=3,
        exceptions=(requests.exceptions.RequestException, ConnectionError, TimeoutError),
    )
    def _fetch(self, symbol: str) -> tuple[float | None, str | None]:
        ticker = yf.Ticker(symbol)
        history = ticker.history(period="5d")
        if history.empty:
            return None, None
        price = float(history['Close'].iloc[-1])

        try:
            info = ticker.info or {}
        except (KeyError, ValueError, requests.exceptions.RequestException) as e:
            # Name is cosmetic; the price is all the calculator needs
            logger.debug("No info for %s: %s", symbol, e)
            info = {}
        name = info.get('shortName') or info.get('longName')

        return price, name


def round_to_increment(value: float, increment: float = 0.5) -> float:
    """Round to the nearest strike increment (ties round up)."""
    # floor(x + 0.5) rather than round(), which rounds half to even
    return math.floor(value / increment + 0.5) * increment


def inputs_from_quote(quote: Quote, base: CalculatorInputs | None = None) -> CalculatorInputs:
    """Pre-populate calculator inputs from a quote.

    Sets spot to the price (cents), strike 5% below it and target 10%
    above it, both on $0.50 increments. Everything else comes from ``base``.

    Args:
        quote: Fetched quote
        base: Inputs to start from (defaults to CalculatorInputs())

    Returns:
        New CalculatorInputs
    """
    base = base or CalculatorInputs()
    return base.with_updates(
        ticker=quote.symbol,
        spot=round(quote.price, 2),
        strike=round_to_increment(quote.price * DEFAULT_STRIKE_FACTOR),
        target_price=round_to_increment(quote.price * DEFAULT_TARGET_FACTOR),
    )
