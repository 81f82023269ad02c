"""Tests for price-corridor prediction."""

from __future__ import annotations

import math
import sys
from pathlib import Path
from typing import Callable

import pandas as pd
import pytest

_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from garch_corridor.forecast.predict import (
    PredictionResult,
    hourly_sigma,
    predict,
    predict_multi_timeframe,
    predict_range,
    price_corridor,
    validate_request,
)
from garch_corridor.models import ModelType
from garch_corridor.utils.returns import Candle

VALID_MODEL_TYPES = {m.value for m in ModelType}
SCENARIO_SEEDS = range(7)
MIN_RELIABLE_SEEDS = 4


@pytest.fixture(scope="module")
def prediction(garch_candles: list[Candle]) -> PredictionResult:
    return predict(garch_candles, "4h")


@pytest.fixture(scope="module")
def range_sigmas(garch_candles: list[Candle]) -> dict[int, float]:
    return {k: predict_range(garch_candles, "4h", k).sigma for k in (1, 20, 50)}


# ==================== Corridor Tests ====================


def test_price_corridor_log_symmetric() -> None:
    """Test the corridor is symmetric in log space and wider above."""
    move, upper, lower = price_corridor(100.0, 0.02, 0.95)
    z = 1.959964
    assert upper == pytest.approx(100.0 * math.exp(z * 0.02), rel=1e-6)
    assert lower == pytest.approx(100.0 * math.exp(-z * 0.02), rel=1e-6)
    assert move == pytest.approx(upper - 100.0)
    assert upper - 100.0 > 100.0 - lower
    assert upper * lower == pytest.approx(100.0 * 100.0)


def test_price_corridor_width_increases_with_confidence() -> None:
    """Test wider coverage gives a wider corridor."""
    widths = []
    for confidence in (0.68, 0.90, 0.95, 0.99):
        _, upper, lower = price_corridor(100.0, 0.01, confidence)
        widths.append(upper - lower)
    assert widths == sorted(widths)
    assert len(set(widths)) == 4


def test_price_corridor_invalid_confidence() -> None:
    """Test confidence outside (0, 1) raises."""
    with pytest.raises(ValueError, match="Confidence"):
        price_corridor(100.0, 0.01, 1.0)


# ==================== Validation Tests ====================


def test_validate_request_too_few_candles(garch_candles: list[Candle]) -> None:
    """Test the interval minimum is enforced before fitting."""
    with pytest.raises(ValueError, match="Need at least 500 candles for interval 1m, got 499"):
        validate_request(garch_candles[:499], "1m")


def test_validate_request_invalid_candle(garch_candles: list[Candle]) -> None:
    """Test an invalid candle is rejected with its index."""
    candles = list(garch_candles[:250])
    candles[7] = Candle(open=1.0, high=1.0, low=-1.0, close=1.0)
    with pytest.raises(ValueError, match="Invalid low price at index 7"):
        predict(candles, "4h")


def test_validate_request_invalid_price(garch_candles: list[Candle]) -> None:
    """Test a non-positive current price is rejected."""
    with pytest.raises(ValueError, match="Invalid current price"):
        validate_request(garch_candles, "4h", 0.0)


def test_predict_unknown_interval(garch_candles: list[Candle]) -> None:
    """Test an unknown interval is rejected."""
    with pytest.raises(ValueError, match="Unknown interval"):
        predict(garch_candles, "1d")


def test_predict_range_invalid_steps(garch_candles: list[Candle]) -> None:
    """Test zero steps raise before fitting."""
    with pytest.raises(ValueError, match="positive integer"):
        predict_range(garch_candles, "4h", 0)


def test_validate_request_accepts_dataframe(garch_candles: list[Candle]) -> None:
    """Test an OHLC DataFrame is accepted as input."""
    df = pd.DataFrame(
        {
            "open": [c.open for c in garch_candles],
            "high": [c.high for c in garch_candles],
            "low": [c.low for c in garch_candles],
            "close": [c.close for c in garch_candles],
        }
    )
    candles = validate_request(df, "4h")
    assert len(candles) == len(garch_candles)
    assert candles[-1].close == garch_candles[-1].close


# ==================== Prediction Tests ====================


def test_predict_simulated_garch_scenario(make_garch_candles: Callable[..., list[Candle]]) -> None:
    """Test 4h predictions on simulated GARCH candles are mostly reliable and positive."""
    results = [predict(make_garch_candles(500, seed=seed), "4h") for seed in SCENARIO_SEEDS]
    for result in results:
        assert result.model_type in VALID_MODEL_TYPES
        assert result.sigma > 0.0
        assert math.isfinite(result.sigma)
    assert sum(result.reliable for result in results) >= MIN_RELIABLE_SEEDS


def test_predict_uses_last_close(prediction: PredictionResult, garch_candles: list[Candle]) -> None:
    """Test the default price is the last close and the corridor brackets it."""
    assert prediction.current_price == garch_candles[-1].close
    assert prediction.lower_price < prediction.current_price < prediction.upper_price
    assert prediction.move == pytest.approx(prediction.upper_price - prediction.current_price)


def test_predict_deterministic(prediction: PredictionResult, garch_candles: list[Candle]) -> None:
    """Test identical inputs give identical results."""
    assert predict(garch_candles, "4h") == prediction


def test_predict_confidence_changes_width_not_sigma(
    prediction: PredictionResult, garch_candles: list[Candle]
) -> None:
    """Test sigma is independent of confidence while the corridor widens."""
    wide = predict(garch_candles, "4h", confidence=0.99)
    assert wide.sigma == prediction.sigma
    assert wide.upper_price - wide.lower_price > prediction.upper_price - prediction.lower_price


def test_predict_price_override(prediction: PredictionResult, garch_candles: list[Candle]) -> None:
    """Test an explicit price recenters the corridor with the same sigma."""
    result = predict(garch_candles, "4h", 250.0)
    assert result.current_price == 250.0
    assert result.sigma == prediction.sigma
    assert result.upper_price == pytest.approx(250.0 * math.exp(result.sigma), rel=1e-3)


def test_predict_does_not_mutate_input(garch_candles: list[Candle]) -> None:
    """Test the caller's candle list is unchanged."""
    candles = list(garch_candles[:300])
    snapshot = list(candles)
    predict(candles, "4h")
    assert candles == snapshot


def test_predict_constant_candles(constant_candles: list[Candle]) -> None:
    """Test flat candles do not raise and give a finite corridor."""
    result = predict(constant_candles, "4h")
    assert math.isfinite(result.sigma)
    assert result.sigma > 0.0
    assert result.current_price == 100.0
    assert not result.reliable or result.sigma < 1e-4


def test_prediction_to_dict(prediction: PredictionResult) -> None:
    """Test the result serializes to a flat dictionary."""
    data = prediction.to_dict()
    assert set(data) == {
        "current_price",
        "sigma",
        "move",
        "upper_price",
        "lower_price",
        "model_type",
        "reliable",
    }


# ==================== Range Prediction Tests ====================


def test_predict_range_one_step_equals_predict(
    prediction: PredictionResult, range_sigmas: dict[int, float]
) -> None:
    """Test a one-step range matches the one-step prediction."""
    assert range_sigmas[1] == pytest.approx(prediction.sigma, abs=1e-10)


def test_predict_range_sigma_increasing_sublinear(range_sigmas: dict[int, float]) -> None:
    """Test cumulative sigma grows with the horizon but sub-linearly."""
    assert range_sigmas[1] < range_sigmas[20] < range_sigmas[50]
    assert range_sigmas[50] / range_sigmas[20] < range_sigmas[20] / range_sigmas[1]


# ==================== Multi-Timeframe Tests ====================


def test_hourly_sigma() -> None:
    """Test per-candle sigma is rescaled to one hour."""
    assert hourly_sigma(0.02, "4h") == pytest.approx(0.01)
    assert hourly_sigma(0.01, "1h") == pytest.approx(0.01)


def test_predict_multi_timeframe_consistent(garch_candles: list[Candle]) -> None:
    """Test two views of the same data do not diverge."""
    result = predict_multi_timeframe(garch_candles, "4h", garch_candles[:400], "4h")
    assert result.primary.sigma > 0.0
    assert result.secondary.sigma > 0.0
    assert not result.divergence


def test_predict_multi_timeframe_divergence(garch_candles: list[Candle]) -> None:
    """Test a large hourly-sigma mismatch is flagged."""
    result = predict_multi_timeframe(garch_candles, "1h", garch_candles, "8h")
    assert result.primary.sigma == pytest.approx(result.secondary.sigma)
    assert result.divergence
