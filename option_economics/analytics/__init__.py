"""Pricing kernel, comparison engine and payoff curve generator."""

from option_economics.analytics.greeks import (
    compute_greeks,
    greeks_for,
    implied_volatility,
    norm_cdf,
    theoretical_price,
)
from option_economics.analytics.comparison import RecommendationConfig, compare
from option_economics.analytics.payoff import generate_curve, curve_for
from option_economics.analytics.calculator import CalculatorInputs, CalculatorResult, evaluate

__all__ = [
    'compute_greeks',
    'greeks_for',
    'implied_volatility',
    'norm_cdf',
    'theoretical_price',
    'RecommendationConfig',
    'compare',
    'generate_curve',
    'curve_for',
    'CalculatorInputs',
    'CalculatorResult',
    'evaluate',
]
