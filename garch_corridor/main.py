"""Command-line entry point for volatility corridors on a candle CSV file.

Examples:
    garch-corridor predict candles.csv --interval 4h
    garch-corridor range candles.csv --interval 1h --steps 24 --confidence 0.95
    garch-corridor backtest candles.csv --interval 4h --required-percent 68
    garch-corridor multi candles_1h.csv --interval 1h --secondary candles_4h.csv --secondary-interval 4h
"""

from __future__ import annotations

import argparse
from dataclasses import asdict
import sys
from typing import Any

from garch_corridor.config_logging import get_logger, setup_logging
from garch_corridor.constants import BACKTEST_REQUIRED_PERCENT, DEFAULT_CONFIDENCE
from garch_corridor.forecast import (
    INTERVALS,
    PredictionResult,
    predict,
    predict_multi_timeframe,
    predict_range,
    run_backtest,
)
from garch_corridor.utils import load_candles_csv, save_json_pretty

logger = get_logger(__name__)

COMMANDS = ("predict", "range", "backtest", "multi")


def _log_prediction(title: str, result: PredictionResult) -> None:
    logger.info("=" * 60)
    logger.info(title)
    logger.info("=" * 60)
    logger.info("Model: %s", result.model_type)
    logger.info("Current price: %.6f", result.current_price)
    logger.info("Sigma: %.6f", result.sigma)
    logger.info("Upper price: %.6f", result.upper_price)
    logger.info("Lower price: %.6f", result.lower_price)
    logger.info("Move: %.6f", result.move)
    logger.info("Reliable: %s", result.reliable)
    logger.info("=" * 60)


def run_predict(args: argparse.Namespace) -> dict[str, Any]:
    """One-step corridor for the next candle."""
    candles = load_candles_csv(args.csv)
    result = predict(candles, args.interval, args.price, confidence=args.confidence)
    _log_prediction(f"NEXT-CANDLE CORRIDOR ({args.interval})", result)
    return result.to_dict()


def run_range(args: argparse.Namespace) -> dict[str, Any]:
    """Cumulative corridor over ``--steps`` candles."""
    candles = load_candles_csv(args.csv)
    result = predict_range(
        candles, args.interval, args.steps, args.price, confidence=args.confidence
    )
    _log_prediction(f"{args.steps}-CANDLE CORRIDOR ({args.interval})", result)
    return {**result.to_dict(), "steps": args.steps}


def run_backtest_command(args: argparse.Namespace) -> dict[str, Any]:
    """Walk-forward backtest of the one-step corridor."""
    candles = load_candles_csv(args.csv)
    report = run_backtest(
        candles, args.interval, args.required_percent, confidence=args.confidence
    )
    logger.info("=" * 60)
    logger.info("BACKTEST SUMMARY (%s)", args.interval)
    logger.info("=" * 60)
    logger.info("Model: %s", report.model_type)
    logger.info("Fitting window: %d candles", report.window)
    logger.info("Hits: %d / %d (%.2f%%)", report.hits, report.total, report.hit_rate)
    logger.info("Required: %.2f%%", report.required_percent)
    logger.info("Passed: %s", report.passed)
    logger.info("=" * 60)
    return {**asdict(report), "hit_rate": report.hit_rate, "passed": report.passed}


def run_multi(args: argparse.Namespace) -> dict[str, Any]:
    """Compare hourly-normalized volatility across two timeframes."""
    if args.secondary is None:
        msg = "--secondary is required for the multi command"
        raise ValueError(msg)
    result = predict_multi_timeframe(
        load_candles_csv(args.csv),
        args.interval,
        load_candles_csv(args.secondary),
        args.secondary_interval,
        args.price,
        confidence=args.confidence,
    )
    _log_prediction(f"PRIMARY CORRIDOR ({args.interval})", result.primary)
    _log_prediction(f"SECONDARY CORRIDOR ({args.secondary_interval})", result.secondary)
    logger.info("Divergence: %s", result.divergence)
    return {
        "primary": result.primary.to_dict(),
        "secondary": result.secondary.to_dict(),
        "divergence": result.divergence,
    }


RUNNERS = {
    "predict": run_predict,
    "range": run_range,
    "backtest": run_backtest_command,
    "multi": run_multi,
}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Volatility forecasting and price corridors from OHLC candles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("command", choices=COMMANDS, help="What to compute")
    parser.add_argument("csv", help="CSV file with open/high/low/close columns")
    parser.add_argument("--interval", default="1h", choices=INTERVALS, help="Candle interval")
    parser.add_argument(
        "--confidence",
        type=float,
        default=DEFAULT_CONFIDENCE,
        help="Two-sided corridor coverage in (0, 1) (default: %(default)s)",
    )
    parser.add_argument("--price", type=float, default=None, help="Override the current price")
    parser.add_argument("--steps", type=int, default=1, help="Horizon for 'range' (default: 1)")
    parser.add_argument(
        "--required-percent",
        type=float,
        default=BACKTEST_REQUIRED_PERCENT,
        help="Hit rate needed to pass 'backtest' (default: %(default)s)",
    )
    parser.add_argument("--secondary", default=None, help="Second CSV for 'multi'")
    parser.add_argument(
        "--secondary-interval", default="4h", choices=INTERVALS, help="Interval of --secondary"
    )
    parser.add_argument("--output", default=None, help="Write the result as JSON to this path")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the garch-corridor CLI."""
    args = create_parser().parse_args(argv)
    setup_logging(args.log_level, force=True)

    try:
        result = RUNNERS[args.command](args)
        if args.output:
            save_json_pretty(result, args.output)
            logger.info("Result written to %s", args.output)
    except KeyboardInterrupt:
        logger.info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("Command failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
