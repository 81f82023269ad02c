"""Unit tests for the GJR-GARCH(1,1) model."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from garch_corridor.models import CalibrationResult, GjrGarch, GjrGarchParams, calibrate_gjr_garch
from garch_corridor.models.gjr_garch import gjr_persistence
from garch_corridor.utils.returns import Candle


@pytest.fixture(scope="module")
def gjr_model(garch_candles: list[Candle]) -> GjrGarch:
    return GjrGarch(garch_candles, periods_per_year=2190)


@pytest.fixture(scope="module")
def gjr_fit(gjr_model: GjrGarch) -> CalibrationResult[GjrGarchParams]:
    return gjr_model.fit()


# ==================== Estimation Tests ====================


def test_gjr_persistence_counts_half_gamma() -> None:
    """Test persistence = alpha + gamma / 2 + beta."""
    assert gjr_persistence(0.05, 0.1, 0.85) == pytest.approx(0.95)


def test_gjr_fit_constraints(gjr_fit: CalibrationResult[GjrGarchParams]) -> None:
    """Test fitted parameters respect positivity and stationarity."""
    params = gjr_fit.params
    assert params.omega > 0.0
    assert params.alpha >= 0.0
    assert params.gamma >= 0.0
    assert params.beta >= 0.0
    assert params.persistence == pytest.approx(gjr_persistence(params.alpha, params.gamma, params.beta))
    assert params.persistence < 1.0
    assert params.leverage_effect == params.gamma
    assert params.unconditional_variance > 0.0


def test_gjr_fit_diagnostics(gjr_fit: CalibrationResult[GjrGarchParams]) -> None:
    """Test the AIC counts five parameters."""
    diagnostics = gjr_fit.diagnostics
    assert diagnostics.aic == pytest.approx(10.0 - 2.0 * diagnostics.log_likelihood)


def test_gjr_fit_deterministic(gjr_model: GjrGarch, gjr_fit: CalibrationResult[GjrGarchParams]) -> None:
    """Test refitting gives identical results."""
    assert gjr_model.fit().params == gjr_fit.params


def test_calibrate_gjr_garch_prices(garch_prices: list[float]) -> None:
    """Test calibration on bare prices."""
    result = calibrate_gjr_garch(garch_prices)
    assert result.params.persistence < 1.0


# ==================== Variance and Forecast Tests ====================


def test_gjr_variance_series_positive(
    gjr_model: GjrGarch, gjr_fit: CalibrationResult[GjrGarchParams]
) -> None:
    """Test variances are positive and aligned with returns."""
    series = gjr_model.variance_series(gjr_fit.params)
    assert series.size == gjr_model.returns().size
    assert np.all(series > 0.0)


def test_gjr_forecast_converges(
    gjr_model: GjrGarch, gjr_fit: CalibrationResult[GjrGarchParams]
) -> None:
    """Test long-horizon forecasts approach the unconditional variance."""
    params = gjr_fit.params
    steps = int(np.ceil(np.log(1e-4) / np.log(params.persistence))) + 2
    variance = gjr_model.forecast(params, steps).variance
    assert np.all(variance > 0.0)
    assert variance[-1] == pytest.approx(params.unconditional_variance, rel=1e-2)


def test_gjr_forecast_invalid_steps(
    gjr_model: GjrGarch, gjr_fit: CalibrationResult[GjrGarchParams]
) -> None:
    """Test negative steps raise."""
    with pytest.raises(ValueError):
        gjr_model.forecast(gjr_fit.params, -3)
