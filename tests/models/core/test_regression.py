"""Unit tests for the Gaussian-elimination OLS solver."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from garch_corridor.models.core.regression import ols, solve_linear_system


# ==================== Linear System Tests ====================


def test_solve_linear_system_matches_numpy(rng: np.random.Generator) -> None:
    """Test the solution agrees with numpy.linalg.solve."""
    a = rng.normal(size=(4, 4)) + 4.0 * np.eye(4)
    b = rng.normal(size=4)
    np.testing.assert_allclose(solve_linear_system(a, b), np.linalg.solve(a, b), rtol=1e-10)


def test_solve_linear_system_needs_pivoting() -> None:
    """Test a zero leading entry is handled by row exchange."""
    a = np.array([[0.0, 1.0], [1.0, 0.0]])
    np.testing.assert_allclose(solve_linear_system(a, np.array([2.0, 3.0])), [3.0, 2.0])


def test_solve_linear_system_does_not_modify_inputs() -> None:
    """Test the inputs are left untouched."""
    a = np.array([[2.0, 1.0], [1.0, 3.0]])
    b = np.array([1.0, 2.0])
    solve_linear_system(a, b)
    np.testing.assert_array_equal(a, [[2.0, 1.0], [1.0, 3.0]])
    np.testing.assert_array_equal(b, [1.0, 2.0])


def test_solve_linear_system_singular() -> None:
    """Test a singular matrix raises with the context label."""
    a = np.array([[1.0, 2.0], [2.0, 4.0]])
    with pytest.raises(ValueError, match="Singular matrix in HAR-RV OLS"):
        solve_linear_system(a, np.array([1.0, 2.0]), context="HAR-RV OLS")


# ==================== OLS Tests ====================


def test_ols_recovers_coefficients(rng: np.random.Generator) -> None:
    """Test exact linear data is fitted perfectly."""
    x = np.column_stack((np.ones(50), rng.normal(size=50), rng.normal(size=50)))
    y = x @ np.array([0.5, -1.0, 2.0])
    result = ols(x, y)
    np.testing.assert_allclose(result.beta, [0.5, -1.0, 2.0], atol=1e-10)
    assert result.r2 == pytest.approx(1.0)
    assert result.rss == pytest.approx(0.0, abs=1e-18)


def test_ols_noisy_r2_between_zero_and_one(rng: np.random.Generator) -> None:
    """Test R^2 on noisy data and its relation to RSS/TSS."""
    x = np.column_stack((np.ones(200), rng.normal(size=200)))
    y = 1.0 + 0.5 * x[:, 1] + rng.normal(size=200)
    result = ols(x, y)
    assert 0.0 < result.r2 < 1.0
    assert result.r2 == pytest.approx(1.0 - result.rss / result.tss)
    np.testing.assert_allclose(result.residuals, y - x @ result.beta)


def test_ols_constant_regressor_singular() -> None:
    """Test duplicated columns raise a singular-matrix error."""
    x = np.column_stack((np.ones(10), np.ones(10)))
    with pytest.raises(ValueError, match="Singular matrix in OLS"):
        ols(x, np.arange(10.0))
