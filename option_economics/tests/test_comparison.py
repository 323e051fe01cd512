"""Tests for the stock-versus-option comparison engine and its rule chain."""

import pytest
import math

from option_economics.analytics.comparison import (
    RULES,
    RecommendationConfig,
    RecommendationRule,
    RuleContext,
    compare,
    run_rules,
)
from option_economics.models.contract import Greeks, OptionContract


def make_contract(spot=150.0, strike=140.0, days=45, iv=30.0, rate=5.0, option_type='call'):
    return OptionContract.from_calculator_inputs(spot, strike, days, iv, rate, option_type)


def make_context(**overrides):
    """RuleContext where no rule fires unless overridden."""
    values = dict(
        contract=make_contract(spot=100.0, strike=100.0, days=60, iv=30.0),
        greeks=Greeks(0.55, 0.02, -0.05, 0.15, 0.08),
        premium=5.0,
        intrinsic_value=0.0,
        time_value=1.0,
        leverage=3.0,
        roi_stock=10.0,
        roi_option=15.0,
        config=RecommendationConfig(),
    )
    values.update(overrides)
    return RuleContext(**values)


class TestCompareFigures:
    """Capital, breakeven, leverage and target-price returns."""

    @pytest.fixture
    def itm_call_comparison(self):
        return compare(make_contract(), premium=15.0, multiplier=100, contract_count=1, target_price=165.0)

    def test_reference_scenario(self, itm_call_comparison):
        """$150 stock, 140 call at $15, target $165."""
        c = itm_call_comparison

        assert c.intrinsic_value == 10.0
        assert c.time_value == 5.0
        assert c.breakeven == 155.0
        assert c.stock_capital == 15000.0
        assert c.option_capital == 1500.0
        assert c.leverage == 10.0
        assert c.profit_stock == 1500.0
        assert c.roi_stock == pytest.approx(10.0)
        assert c.profit_option == 1000.0
        assert c.roi_option == pytest.approx(66.667, abs=1e-3)

    def test_max_loss_per_leg(self, itm_call_comparison):
        assert itm_call_comparison.max_loss_stock == 15000.0
        assert itm_call_comparison.max_loss_option == 1500.0

    def test_reference_scenario_recommendation(self, itm_call_comparison):
        c = itm_call_comparison
        assert c.recommendation == 'option'
        assert c.recommendation_label == "Consider ITM Option"
        assert c.reasons == (
            "⚠️ High time value - paying significant premium for time",
            "✅ High leverage (10.0x) - efficient capital use",
            f"✅ High delta ({abs(c.greeks.delta) * 100:.0f}%) - moves closely with stock",
            "✅ Option ROI significantly higher at target price",
        )

    def test_put_breakeven_and_profit(self):
        c = compare(make_contract(spot=100.0, strike=110.0, option_type='put'),
                    premium=12.0, target_price=90.0)

        assert c.breakeven == 98.0
        assert c.intrinsic_value == 10.0
        assert c.time_value == 2.0
        # Put framing: stock leg gains as the price falls
        assert c.profit_stock == (100.0 - 90.0) * 100
        assert c.profit_option == (110.0 - 90.0) * 100 - 1200.0

    def test_call_breakeven_literal(self):
        c = compare(make_contract(strike=140.0), premium=15.0, target_price=150.0)
        assert c.breakeven == 155.0

    def test_otm_call_expires_worthless_at_target(self):
        c = compare(make_contract(spot=100.0, strike=110.0), premium=2.0, target_price=105.0)
        assert c.profit_option == -200.0
        assert c.roi_option == pytest.approx(-100.0)

    def test_leverage_scale_invariant_in_contracts(self):
        one = compare(make_contract(), premium=15.0, contract_count=1, target_price=165.0)
        two = compare(make_contract(), premium=15.0, contract_count=2, target_price=165.0)

        assert two.stock_capital == 2 * one.stock_capital
        assert two.option_capital == 2 * one.option_capital
        assert two.leverage == one.leverage
        assert two.roi_option == pytest.approx(one.roi_option)

    def test_custom_multiplier(self):
        c = compare(make_contract(), premium=15.0, multiplier=10, contract_count=3, target_price=165.0)
        assert c.shares_equivalent == 30
        assert c.stock_capital == 150.0 * 30
        assert c.option_capital == 15.0 * 30

    def test_target_defaults_to_spot(self):
        c = compare(make_contract(), premium=15.0)
        assert c.target_price == 150.0
        assert c.profit_stock == 0.0

    def test_negative_time_value_is_surfaced(self):
        """A stale premium below intrinsic is passed through as-is."""
        c = compare(make_contract(), premium=8.0, target_price=160.0)
        assert c.time_value == -2.0

    def test_comparison_carries_greeks(self):
        c = compare(make_contract(), premium=15.0, target_price=165.0)
        assert 0.7 < c.greeks.delta < 1.0

    def test_repeatable(self):
        """Identical inputs give identical outputs."""
        a = compare(make_contract(), premium=15.0, target_price=165.0)
        b = compare(make_contract(), premium=15.0, target_price=165.0)
        assert a == b


class TestZeroCapital:
    """Zero capital produces non-finite ratios instead of exceptions."""

    def test_zero_contracts(self):
        c = compare(make_contract(), premium=15.0, contract_count=0, target_price=165.0)

        assert c.stock_capital == 0.0
        assert c.option_capital == 0.0
        assert math.isnan(c.leverage)
        assert math.isnan(c.roi_stock)
        assert math.isnan(c.roi_option)

    def test_zero_premium(self):
        c = compare(make_contract(), premium=0.0, target_price=165.0)

        assert c.leverage == math.inf
        assert c.roi_option == math.inf
        # intrinsic/premium is infinite, so the deep ITM rule fires
        assert "✅ Deep ITM - option behaves like leveraged stock" in c.reasons
        assert "✅ High leverage (N/A) - efficient capital use" in c.reasons


class TestRecommendationRules:
    """Ordering and precedence of the recommendation chain."""

    def test_no_rule_fires_stays_neutral(self):
        assert run_rules(make_context()) == ('neutral', ())

    def test_short_expiry_forces_stock(self):
        """Under 21 days the recommendation is stock despite favorable signals."""
        c = compare(make_contract(days=10), premium=15.0, target_price=165.0)

        assert c.recommendation == 'stock'
        assert c.reasons[0] == "⚠️ Short time to expiry - theta decay accelerates"
        assert any("High leverage" in r for r in c.reasons)
        assert "✅ Option ROI significantly higher at target price" in c.reasons

    def test_exactly_21_days_is_not_short(self):
        c = compare(make_contract(days=21), premium=15.0, target_price=165.0)
        assert "⚠️ Short time to expiry - theta decay accelerates" not in c.reasons

    def test_deep_itm_overrides_short_expiry(self):
        ctx = make_context(
            contract=make_contract(spot=150.0, strike=100.0, days=10),
            premium=52.0,
            intrinsic_value=50.0,
            time_value=2.0,
        )
        recommendation, reasons = run_rules(ctx)

        assert recommendation == 'option'
        assert reasons == (
            "⚠️ Short time to expiry - theta decay accelerates",
            "✅ Deep ITM - option behaves like leveraged stock",
        )

    def test_deep_itm_requires_itm(self):
        """OTM contract never triggers the deep ITM rule."""
        ctx = make_context(
            contract=make_contract(spot=100.0, strike=110.0),
            intrinsic_value=5.0,
            premium=5.0,
        )
        assert run_rules(ctx) == ('neutral', ())

    def test_high_time_value_is_warning_only(self):
        recommendation, reasons = run_rules(make_context(time_value=2.0))
        assert recommendation == 'neutral'
        assert reasons == ("⚠️ High time value - paying significant premium for time",)

    def test_leverage_does_not_override_short_expiry(self):
        ctx = make_context(contract=make_contract(spot=100.0, strike=100.0, days=5), leverage=8.0)
        recommendation, reasons = run_rules(ctx)

        assert recommendation == 'stock'
        assert "✅ High leverage (8.0x) - efficient capital use" in reasons

    def test_leverage_sets_option(self):
        recommendation, reasons = run_rules(make_context(leverage=6.25))
        assert recommendation == 'option'
        assert reasons == ("✅ High leverage (6.2x) - efficient capital use",)

    def test_delta_notes_do_not_change_recommendation(self):
        high = run_rules(make_context(greeks=Greeks(-0.85, 0.01, -0.02, 0.1, -0.1)))
        low = run_rules(make_context(greeks=Greeks(0.25, 0.01, -0.02, 0.1, 0.1)))

        assert high == ('neutral', ("✅ High delta (85%) - moves closely with stock",))
        assert low == ('neutral', ("⚠️ Low delta (25%) - less responsive to stock movement",))

    def test_option_roi_only_sets_option_from_neutral(self):
        neutral_ctx = make_context(roi_option=50.0)
        assert run_rules(neutral_ctx) == (
            'option', ("✅ Option ROI significantly higher at target price",)
        )

        stock_ctx = make_context(contract=make_contract(spot=100.0, strike=100.0, days=5), roi_option=50.0)
        recommendation, reasons = run_rules(stock_ctx)
        assert recommendation == 'stock'
        assert reasons[-1] == "✅ Option ROI significantly higher at target price"

    def test_stock_roi_forces_stock_over_option(self):
        ctx = make_context(leverage=10.0, roi_stock=10.0, roi_option=5.0)
        recommendation, reasons = run_rules(ctx)

        assert recommendation == 'stock'
        assert reasons == (
            "✅ High leverage (10.0x) - efficient capital use",
            "⚠️ Stock ROI higher - consider stock purchase",
        )

    def test_roi_rules_are_exclusive(self):
        """With negative returns both comparisons can hold; only the first fires."""
        ctx = make_context(roi_stock=-10.0, roi_option=-15.0)
        recommendation, reasons = run_rules(ctx)

        assert recommendation == 'option'
        assert reasons == ("✅ Option ROI significantly higher at target price",)

    def test_high_volatility_warning(self):
        ctx = make_context(contract=make_contract(spot=100.0, strike=100.0, iv=55.0))
        assert run_rules(ctx) == ('neutral', ("⚠️ High volatility - options more expensive",))

    def test_forty_percent_volatility_not_flagged(self):
        ctx = make_context(contract=make_contract(spot=100.0, strike=100.0, iv=40.0))
        assert run_rules(ctx) == ('neutral', ())

    def test_rule_order(self):
        assert [rule.name for rule in RULES] == [
            'short_expiry',
            'deep_itm',
            'high_time_value',
            'high_leverage',
            'high_delta',
            'low_delta',
            'option_roi_advantage',
            'stock_roi_advantage',
            'high_volatility',
        ]

    def test_custom_rule_chain(self):
        always = RecommendationRule(
            name='always',
            applies=lambda ctx, rec: True,
            apply=lambda ctx, rec: ("custom", 'stock'),
        )
        assert run_rules(make_context(), rules=(always,)) == ('stock', ("custom",))


class TestRecommendationConfig:
    """Test suite for configurable thresholds."""

    def test_defaults(self):
        config = RecommendationConfig()
        assert config.short_expiry_days == 21.0
        assert config.high_leverage == 5.0
        assert config.high_volatility == 0.40

    def test_from_dict_partial(self):
        config = RecommendationConfig.from_dict({'high_leverage': 12.0, 'short_expiry_days': 30})
        assert config.high_leverage == 12.0
        assert config.short_expiry_days == 30
        assert config.low_delta == 0.4

    def test_config_changes_outcome(self):
        strict = RecommendationConfig(high_leverage=20.0, roi_advantage_multiple=10.0)
        c = compare(make_contract(), premium=15.0, target_price=165.0, config=strict)

        assert c.recommendation == 'neutral'
        assert not any("High leverage" in r for r in c.reasons)
