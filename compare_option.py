#!/usr/bin/env python3
"""Compare buying an ITM option with buying the stock outright.

Usage:
    python3 compare_option.py
    python3 compare_option.py --spot 150 --strike 140 --premium 15 --days 45 --target 165
    python3 compare_option.py --ticker AAPL --premium 12.5
    python3 compare_option.py --type put --spot 100 --strike 110 --premium 12 --target 90
"""

import argparse
import sys

from option_economics.analytics.calculator import evaluate
from option_economics.analytics.greeks import validate_greeks
from option_economics.data.config import load_config
from option_economics.data.quotes import YahooQuoteLookup, inputs_from_quote
from option_economics.data.validators import validate_calculator_inputs
from option_economics.output.console import (
    print_header,
    print_comparison,
    print_greeks,
    print_payoff_table,
)
from option_economics.utils.error_handling import ConfigurationError, QuoteNotFoundError
from option_economics.utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Compare an ITM option against buying the underlying stock',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default scenario ($150 stock, 140 call at $15, target $165)
  python3 compare_option.py

  # Pre-populate spot, strike and target from a live quote
  python3 compare_option.py --ticker MSFT --premium 20

  # Put framing with custom thresholds
  python3 compare_option.py --type put --strike 110 --premium 12 --config my_params.yaml
        """
    )

    parser.add_argument('--ticker', help='Look up spot price for this ticker')
    parser.add_argument('--spot', type=float, help='Stock price')
    parser.add_argument('--strike', type=float, help='Strike price')
    parser.add_argument('--premium', type=float, help='Option premium per share')
    parser.add_argument('--days', type=float, help='Days to expiry')
    parser.add_argument('--contracts', type=int, help='Number of contracts')
    parser.add_argument('--target', type=float, help='Target stock price')
    parser.add_argument('--iv', type=float, help='Implied volatility in percent (e.g. 30)')
    parser.add_argument('--rate', type=float, help='Risk-free rate in percent (e.g. 5)')
    parser.add_argument('--type', dest='option_type', choices=['call', 'put'],
                        help='Option type (default: from config, else call)')
    parser.add_argument('--config', help='YAML file with inputs and recommendation thresholds')
    parser.add_argument('--samples', type=int, help='Points in the payoff curve')
    parser.add_argument('--log-level', default='WARNING', help='Logging level (default: WARNING)')
    parser.add_argument('--log-file', help='Optional log file path')

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logger = setup_logging(log_level=args.log_level, log_file=args.log_file)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"❌ Error: {e}")
        return 1
    except ConfigurationError as e:
        print(f"❌ Invalid config: {e}")
        return 1

    inputs = config.inputs

    if args.ticker:
        print(f"🔎 Looking up {args.ticker.upper()}...")
        try:
            quote = YahooQuoteLookup().get_quote(args.ticker)
        except QuoteNotFoundError as e:
            print(f"❌ {e}")
            return 1
        except Exception as e:
            logger.error("Quote lookup failed for %s: %s", args.ticker, e)
            print("❌ Failed to fetch stock price. Please try again.")
            return 1
        inputs = inputs_from_quote(quote, inputs)
        print(f"✅ Loaded {quote.name} ({quote.symbol}) at ${quote.price:.2f}")

    inputs = inputs.with_updates(
        spot=args.spot,
        strike=args.strike,
        premium=args.premium,
        days_to_expiry=args.days,
        contracts=args.contracts,
        target_price=args.target,
        volatility_pct=args.iv,
        rate_pct=args.rate,
        option_type=args.option_type,
    )

    for warning in validate_calculator_inputs(inputs):
        print(f"⚠️  {warning}")

    sample_count = args.samples or config.sample_count
    if sample_count < 2:
        print("❌ --samples must be at least 2")
        return 1

    result = evaluate(inputs, config=config.recommendation, sample_count=sample_count)

    is_valid, error = validate_greeks(result.greeks, result.contract.option_type)
    if not is_valid:
        logger.warning("Greeks failed sanity check: %s", error)

    print_header(result)
    print_comparison(result.comparison)
    print_greeks(result.greeks, result)
    print_payoff_table(result.curve)

    return 0


if __name__ == '__main__':
    sys.exit(main())
