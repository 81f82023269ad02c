"""Unit tests for the reliability assessment."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable

import pytest

_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from garch_corridor.forecast.reliability import assess_reliability, is_reliable
from garch_corridor.forecast.selection import FittedModel
from garch_corridor.models import CalibrationResult, Garch
from garch_corridor.utils.returns import Candle


@pytest.fixture(scope="module")
def fitted_garch(garch_candles: list[Candle]) -> FittedModel:
    model = Garch(garch_candles, periods_per_year=2190)
    return FittedModel(model=model, calibration=model.fit())


def _with(fitted: FittedModel, *, converged: bool | None = None, persistence: float | None = None) -> FittedModel:
    calibration = fitted.calibration
    params = calibration.params
    diagnostics = calibration.diagnostics
    if converged is not None:
        diagnostics = replace(diagnostics, converged=converged)
    if persistence is not None:
        params = replace(params, persistence=persistence)
    return FittedModel(model=fitted.model, calibration=CalibrationResult(params=params, diagnostics=diagnostics))


def test_assess_reliability_report_fields(fitted_garch: FittedModel) -> None:
    """Test the report exposes each check and combines them."""
    report = assess_reliability(fitted_garch)
    assert report.persistence == fitted_garch.params.persistence
    assert 0.0 <= report.ljung_box.p_value <= 1.0
    assert report.reliable == (report.converged and report.persistence_ok and report.residuals_ok)
    assert is_reliable(fitted_garch) == report.reliable


def test_simulated_garch_fit_is_reliable(make_garch_candles: Callable[..., list[Candle]]) -> None:
    """Test GARCH fits on GARCH data are stationary and mostly pass every check."""
    reports = []
    for seed in range(7):
        model = Garch(make_garch_candles(500, seed=seed), periods_per_year=2190)
        reports.append(assess_reliability(FittedModel(model=model, calibration=model.fit())))
    assert all(report.persistence_ok for report in reports)
    assert sum(report.reliable for report in reports) >= 4


def test_unconverged_fit_unreliable(fitted_garch: FittedModel) -> None:
    """Test non-convergence alone makes the fit unreliable."""
    assert not is_reliable(_with(fitted_garch, converged=False))


@pytest.mark.parametrize("persistence", [0.999, 0.9995, float("nan")])
def test_high_persistence_unreliable(fitted_garch: FittedModel, persistence: float) -> None:
    """Test persistence at or above 0.999 makes the fit unreliable."""
    report = assess_reliability(_with(fitted_garch, persistence=persistence))
    assert not report.persistence_ok
    assert not report.reliable
