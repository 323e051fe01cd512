"""Tests for the quote lookup collaborator.

yfinance is replaced with a stub ticker so no network access is needed.
"""

import pytest

import pandas as pd
import requests

from option_economics.analytics.calculator import CalculatorInputs
from option_economics.data import quotes
from option_economics.data.quotes import (
    Quote,
    YahooQuoteLookup,
    inputs_from_quote,
    round_to_increment,
)
from option_economics.utils import error_handling
from option_economics.utils.error_handling import QuoteNotFoundError


class FakeTicker:
    """Minimal stand-in for yfinance.Ticker."""

    def __init__(self, closes, info=None, info_error=None):
        self._closes = closes
        self._info = info or {}
        self._info_error = info_error

    def history(self, period="5d"):
        return pd.DataFrame({'Close': self._closes})

    @property
    def info(self):
        if self._info_error:
            raise self._info_error
        return self._info


@pytest.fixture
def patch_ticker(monkeypatch):
    """Route yf.Ticker to a FakeTicker and record requested symbols."""
    requested = []

    def install(ticker):
        def factory(symbol):
            requested.append(symbol)
            return ticker
        monkeypatch.setattr(quotes.yf, "Ticker", factory)
        return requested

    monkeypatch.setattr(error_handling.time, "sleep", lambda _: None)
    return install


class TestYahooQuoteLookup:
    """Test suite for YahooQuoteLookup."""

    def test_returns_last_close_and_name(self, patch_ticker):
        requested = patch_ticker(FakeTicker([180.0, 182.5], info={'shortName': 'Apple Inc.'}))

        quote = YahooQuoteLookup().get_quote("  aapl ")

        assert requested == ["AAPL"]
        assert quote == Quote(symbol="AAPL", price=182.5, name="Apple Inc.")

    def test_name_falls_back_to_symbol(self, patch_ticker):
        patch_ticker(FakeTicker([50.0], info_error=requests.exceptions.HTTPError("404")))
        assert YahooQuoteLookup().get_quote("xyz").name == "XYZ"

    def test_empty_history_not_found(self, patch_ticker):
        patch_ticker(FakeTicker([]))
        with pytest.raises(QuoteNotFoundError, match="no price data"):
            YahooQuoteLookup().get_quote("NOPE")

    def test_zero_price_not_found(self, patch_ticker):
        patch_ticker(FakeTicker([0.0]))
        with pytest.raises(QuoteNotFoundError):
            YahooQuoteLookup().get_quote("ZERO")

    def test_blank_symbol(self):
        with pytest.raises(QuoteNotFoundError, match="empty ticker"):
            YahooQuoteLookup().get_quote("   ")

    def test_network_errors_are_retried(self, monkeypatch):
        attempts = []

        def factory(symbol):
            attempts.append(symbol)
            if len(attempts) < 2:
                raise requests.exceptions.ConnectionError("reset")
            return FakeTicker([99.0])

        monkeypatch.setattr(quotes.yf, "Ticker", factory)
        monkeypatch.setattr(error_handling.time, "sleep", lambda _: None)

        assert YahooQuoteLookup().get_quote("MSFT").price == 99.0
        assert len(attempts) == 2


class TestInputsFromQuote:
    """Test suite for pre-populating inputs."""

    def test_round_to_increment(self):
        assert round_to_increment(142.375) == 142.5
        assert round_to_increment(142.2) == 142.0
        assert round_to_increment(142.25) == 142.5
        assert round_to_increment(7.3, increment=1.0) == 7.0

    def test_defaults_from_price(self):
        quote = Quote(symbol="AAPL", price=182.4567, name="Apple Inc.")
        inputs = inputs_from_quote(quote)

        assert inputs.ticker == "AAPL"
        assert inputs.spot == 182.46
        assert inputs.strike == 173.5     # 182.4567 * 0.95 = 173.33
        assert inputs.target_price == 200.5  # 182.4567 * 1.10 = 200.70

    def test_keeps_other_base_fields(self):
        base = CalculatorInputs(premium=9.0, days_to_expiry=90, option_type='put')
        inputs = inputs_from_quote(Quote("SPY", 500.0, "SPDR S&P 500"), base)

        assert inputs.premium == 9.0
        assert inputs.days_to_expiry == 90
        assert inputs.option_type == 'put'
        assert inputs.strike == 475.0
        assert inputs.target_price == 550.0
