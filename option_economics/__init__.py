"""Option economics engine: Greeks, stock-vs-option comparison and payoff curves."""

__version__ = "0.1.0"
