"""Tests for the command-line entry point."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pandas as pd
import pytest

_script_dir = Path(__file__).parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from garch_corridor.main import RUNNERS, create_parser, main
from garch_corridor.utils.returns import Candle


@pytest.fixture(scope="module")
def candles_csv(tmp_path_factory: pytest.TempPathFactory, garch_candles: list[Candle]) -> Path:
    path = tmp_path_factory.mktemp("data") / "candles.csv"
    pd.DataFrame(
        {
            "timestamp": [c.timestamp for c in garch_candles],
            "open": [c.open for c in garch_candles],
            "high": [c.high for c in garch_candles],
            "low": [c.low for c in garch_candles],
            "close": [c.close for c in garch_candles],
            "volume": [c.volume for c in garch_candles],
        }
    ).to_csv(path, index=False)
    return path


# ==================== Parser Tests ====================


def test_create_parser_defaults() -> None:
    """Test default option values."""
    args = create_parser().parse_args(["predict", "candles.csv"])
    assert args.command == "predict"
    assert args.interval == "1h"
    assert args.confidence == pytest.approx(0.6827)
    assert args.price is None
    assert args.steps == 1
    assert args.required_percent == 68.0
    assert args.output is None


def test_create_parser_rejects_unknown_interval() -> None:
    """Test argparse rejects an interval outside the enumeration."""
    with pytest.raises(SystemExit):
        create_parser().parse_args(["predict", "candles.csv", "--interval", "1d"])


def test_runners_cover_commands() -> None:
    """Test each command has a runner."""
    assert set(RUNNERS) == {"predict", "range", "backtest", "multi"}


# ==================== Command Tests ====================


def test_main_predict_writes_json(candles_csv: Path, tmp_path: Path) -> None:
    """Test the predict command writes the corridor as JSON."""
    output = tmp_path / "out" / "predict.json"
    main(["predict", str(candles_csv), "--interval", "4h", "--output", str(output)])
    data = json.loads(output.read_text())
    assert data["sigma"] > 0.0
    assert data["lower_price"] < data["current_price"] < data["upper_price"]


def test_main_range_reports_steps(candles_csv: Path, tmp_path: Path) -> None:
    """Test the range command records the horizon."""
    output = tmp_path / "range.json"
    main(["range", str(candles_csv), "--interval", "4h", "--steps", "12", "--output", str(output)])
    data = json.loads(output.read_text())
    assert data["steps"] == 12
    assert data["sigma"] > 0.0


def test_main_backtest_writes_summary(candles_csv: Path, tmp_path: Path) -> None:
    """Test the backtest command writes hit statistics."""
    output = tmp_path / "backtest.json"
    main(
        [
            "backtest",
            str(candles_csv),
            "--interval",
            "4h",
            "--required-percent",
            "0",
            "--output",
            str(output),
        ]
    )
    data = json.loads(output.read_text())
    assert data["total"] == 125
    assert data["passed"] is True


def test_main_multi_requires_secondary(candles_csv: Path) -> None:
    """Test a missing --secondary exits with status 1."""
    with pytest.raises(SystemExit) as exc_info:
        main(["multi", str(candles_csv), "--interval", "4h"])
    assert exc_info.value.code == 1


def test_main_missing_file_exits(tmp_path: Path) -> None:
    """Test a missing CSV exits with status 1."""
    with pytest.raises(SystemExit) as exc_info:
        main(["predict", str(tmp_path / "missing.csv")])
    assert exc_info.value.code == 1
