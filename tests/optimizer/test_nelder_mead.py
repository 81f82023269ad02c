"""Unit tests for the Nelder-Mead optimizer."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

_script_dir = Path(__file__).parent
_project_root = _script_dir.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from garch_corridor.constants import PENALTY_VALUE
from garch_corridor.optimizer import (
    OptimizerResult,
    nelder_mead,
    nelder_mead_multi_start,
    perturbed_start,
)


def rosenbrock(x: np.ndarray) -> float:
    return float((1.0 - x[0]) ** 2 + 100.0 * (x[1] - x[0] ** 2) ** 2)


def quadratic(x: np.ndarray) -> float:
    return float(np.sum((x - np.array([1.0, -2.0, 3.0])) ** 2))


def skewed_bowl(x: np.ndarray, center: float) -> float:
    """Asymmetric 1-D bowl with its minimum at ``center``.

    A symmetric bowl lets the spread rule stop on a simplex that straddles the
    minimum with equal values on both sides.
    """
    d = float(x[0]) - center
    return float(np.exp(d) - d)


# ==================== Convergence Tests ====================


def test_nelder_mead_quadratic_minimum() -> None:
    """Test a convex quadratic is minimized at its center."""
    result = nelder_mead(quadratic, [0.0, 0.0, 0.0], max_iter=2000, tol=1e-12)
    assert isinstance(result, OptimizerResult)
    assert result.converged
    np.testing.assert_allclose(result.x, [1.0, -2.0, 3.0], atol=1e-4)
    assert result.fx < 1e-8


def test_nelder_mead_rosenbrock() -> None:
    """Test the Rosenbrock valley is followed to (1, 1)."""
    result = nelder_mead(rosenbrock, [-1.2, 1.0], max_iter=5000, tol=1e-14)
    np.testing.assert_allclose(result.x, [1.0, 1.0], atol=1e-3)


def test_nelder_mead_not_converged_within_budget() -> None:
    """Test that a tiny iteration budget reports non-convergence instead of raising."""
    result = nelder_mead(rosenbrock, [-1.2, 1.0], max_iter=3, tol=1e-14)
    assert not result.converged
    assert result.iterations == 3
    assert np.isfinite(result.fx)


def test_nelder_mead_penalty_region_avoided() -> None:
    """Test that penalized vertices are ranked last and the feasible optimum is found."""

    def objective(x: np.ndarray) -> float:
        if x[0] <= 0.0:
            return PENALTY_VALUE
        return skewed_bowl(x, 0.5)

    result = nelder_mead(objective, [2.0], max_iter=500, tol=1e-12)
    assert result.x[0] > 0.0
    assert result.x[0] == pytest.approx(0.5, abs=1e-3)


def test_nelder_mead_zero_coordinate_start() -> None:
    """Test the simplex still spans a zero coordinate."""
    result = nelder_mead(lambda x: skewed_bowl(x, 0.01), [0.0], tol=1e-14)
    assert result.x[0] == pytest.approx(0.01, abs=1e-4)


def test_nelder_mead_empty_start() -> None:
    """Test an empty start returns immediately."""
    result = nelder_mead(lambda x: 7.0, [])
    assert result.iterations == 0
    assert result.converged
    assert result.fx == 7.0


# ==================== Determinism and Immutability Tests ====================


def test_nelder_mead_deterministic() -> None:
    """Test identical inputs give identical outputs."""
    first = nelder_mead(rosenbrock, [-1.2, 1.0])
    second = nelder_mead(rosenbrock, [-1.2, 1.0])
    np.testing.assert_array_equal(first.x, second.x)
    assert first.fx == second.fx
    assert first.iterations == second.iterations


def test_nelder_mead_does_not_mutate_start() -> None:
    """Test the caller's starting array is left unchanged and not aliased."""
    x0 = np.array([0.0, 0.0, 0.0])
    result = nelder_mead(quadratic, x0)
    np.testing.assert_array_equal(x0, [0.0, 0.0, 0.0])
    result.x[0] = 99.0
    assert x0[0] == 0.0


# ==================== Multi-Start Tests ====================


def test_perturbed_start_deterministic() -> None:
    """Test golden-ratio perturbations are reproducible and distinct per restart."""
    x0 = np.array([0.5, 0.0, 5.0])
    first = perturbed_start(x0, 1)
    assert np.array_equal(first, perturbed_start(x0, 1))
    assert not np.array_equal(first, perturbed_start(x0, 2))
    np.testing.assert_array_equal(x0, [0.5, 0.0, 5.0])


def test_perturbed_start_bounded_relative_change() -> None:
    """Test non-zero coordinates move by at most half their magnitude."""
    x0 = np.array([1.0, 2.0, 4.0, 8.0])
    for restart in range(1, 5):
        perturbed = perturbed_start(x0, restart)
        assert np.all(np.abs(perturbed / x0 - 1.0) <= 0.5)


def test_multi_start_not_worse_than_single() -> None:
    """Test multi-start keeps the best run and sums iterations."""
    single = nelder_mead(rosenbrock, [-1.2, 1.0], max_iter=200)
    multi = nelder_mead_multi_start(rosenbrock, [-1.2, 1.0], restarts=3, max_iter=200)
    assert multi.fx <= single.fx
    assert multi.iterations >= single.iterations


def test_multi_start_zero_restarts_matches_single() -> None:
    """Test zero restarts reduces to a single run."""
    single = nelder_mead(quadratic, [0.0, 0.0, 0.0])
    multi = nelder_mead_multi_start(quadratic, [0.0, 0.0, 0.0], restarts=0)
    np.testing.assert_array_equal(single.x, multi.x)
    assert single.iterations == multi.iterations
