"""Derivative-free Nelder-Mead simplex minimizer.

The optimizer is domain-agnostic: objectives signal infeasible regions by
returning a large finite penalty (see ``PENALTY_VALUE``) instead of raising,
so the simplex simply ranks those vertices last and contracts away from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    GOLDEN_RATIO,
    NM_CONTRACTION,
    NM_EXPANSION,
    NM_MAX_ITER,
    NM_REFLECTION,
    NM_RELATIVE_STEP,
    NM_RESTART_ZERO_SCALE,
    NM_RESTARTS,
    NM_SHRINK,
    NM_TOLERANCE,
    NM_ZERO_STEP,
)

logger = get_logger(__name__)

Objective = Callable[[np.ndarray], float]


@dataclass(frozen=True)
class OptimizerResult:
    """Outcome of a single optimization call.

    Attributes:
        x: Best point found (fresh array, never aliases the caller's ``x0``).
        fx: Objective value at ``x``.
        iterations: Number of simplex iterations performed.
        converged: True when the simplex spread fell below the tolerance.
    """

    x: np.ndarray
    fx: float
    iterations: int
    converged: bool


def _initial_simplex(x0: np.ndarray) -> np.ndarray:
    """Build the n+1 starting vertices around ``x0``."""
    n = x0.size
    simplex = np.tile(x0, (n + 1, 1))
    for i in range(n):
        delta = NM_ZERO_STEP if x0[i] == 0.0 else NM_RELATIVE_STEP * x0[i]
        simplex[i + 1, i] = x0[i] + delta
    return simplex


def _shrink(simplex: np.ndarray, values: np.ndarray, fn: Objective, sigma: float) -> None:
    """Contract every vertex toward the best one, in place."""
    best = simplex[0]
    for i in range(1, simplex.shape[0]):
        simplex[i] = best + sigma * (simplex[i] - best)
        values[i] = fn(simplex[i])


def nelder_mead(
    fn: Objective,
    x0: Sequence[float] | np.ndarray,
    *,
    max_iter: int = NM_MAX_ITER,
    tol: float = NM_TOLERANCE,
    alpha: float = NM_REFLECTION,
    gamma: float = NM_EXPANSION,
    rho: float = NM_CONTRACTION,
    sigma: float = NM_SHRINK,
) -> OptimizerResult:
    """Minimize ``fn`` starting from ``x0`` with the Nelder-Mead simplex.

    Args:
        fn: Objective mapping a 1-D array to a float.
        x0: Starting point. Copied; the caller's sequence is never mutated.
        max_iter: Maximum number of iterations.
        tol: Convergence threshold on the spread of objective values.
        alpha: Reflection coefficient.
        gamma: Expansion coefficient.
        rho: Contraction coefficient.
        sigma: Shrink coefficient.

    Returns:
        OptimizerResult with the best vertex found.
    """
    start = np.array(x0, dtype=float).ravel()
    n = start.size
    if n == 0:
        return OptimizerResult(x=start, fx=float(fn(start.copy())), iterations=0, converged=True)

    simplex = _initial_simplex(start)
    values = np.array([float(fn(vertex)) for vertex in simplex])

    iterations = 0
    converged = False
    while iterations < max_iter:
        order = np.argsort(values, kind="stable")
        simplex = simplex[order]
        values = values[order]

        if values[n] - values[0] < tol:
            converged = True
            break

        iterations += 1
        centroid = simplex[:n].mean(axis=0)
        worst = simplex[n]

        reflected = centroid + alpha * (centroid - worst)
        f_reflected = float(fn(reflected))

        if f_reflected < values[0]:
            expanded = centroid + gamma * (reflected - centroid)
            f_expanded = float(fn(expanded))
            if f_expanded < f_reflected:
                simplex[n], values[n] = expanded, f_expanded
            else:
                simplex[n], values[n] = reflected, f_reflected
        elif f_reflected < values[n - 1]:
            simplex[n], values[n] = reflected, f_reflected
        elif f_reflected < values[n]:
            outside = centroid + rho * (reflected - centroid)
            f_outside = float(fn(outside))
            if f_outside <= f_reflected:
                simplex[n], values[n] = outside, f_outside
            else:
                _shrink(simplex, values, fn, sigma)
        else:
            inside = centroid + rho * (worst - centroid)
            f_inside = float(fn(inside))
            if f_inside < values[n]:
                simplex[n], values[n] = inside, f_inside
            else:
                _shrink(simplex, values, fn, sigma)

    best = int(np.argmin(values))
    if not converged:
        logger.debug("Nelder-Mead stopped after %d iterations without converging", iterations)
    return OptimizerResult(
        x=simplex[best].copy(),
        fx=float(values[best]),
        iterations=iterations,
        converged=converged,
    )


def perturbed_start(x0: np.ndarray, restart: int) -> np.ndarray:
    """Return a deterministic golden-ratio perturbation of ``x0``.

    Args:
        x0: Base starting point.
        restart: Restart number (1-based).

    Returns:
        Perturbed copy of ``x0``.
    """
    perturbed = np.empty_like(x0)
    for i, value in enumerate(x0):
        scale = ((restart * (i + 1) * GOLDEN_RATIO) % 1.0) - 0.5
        perturbed[i] = NM_RESTART_ZERO_SCALE * scale if value == 0.0 else value * (1.0 + scale)
    return perturbed


def nelder_mead_multi_start(
    fn: Objective,
    x0: Sequence[float] | np.ndarray,
    *,
    restarts: int = NM_RESTARTS,
    **options: float,
) -> OptimizerResult:
    """Run Nelder-Mead from ``x0`` and from ``restarts`` perturbed starts.

    Used where the likelihood surface has poor local optima, e.g. Student-t
    degrees of freedom fitted jointly with variance weights.

    Args:
        fn: Objective mapping a 1-D array to a float.
        x0: Base starting point (not mutated).
        restarts: Number of additional perturbed runs.
        **options: Forwarded to :func:`nelder_mead`.

    Returns:
        The best OptimizerResult; ``iterations`` is summed over all runs.
    """
    start = np.array(x0, dtype=float).ravel()
    best = nelder_mead(fn, start, **options)  # type: ignore[arg-type]
    total_iterations = best.iterations

    for restart in range(1, restarts + 1):
        candidate = nelder_mead(fn, perturbed_start(start, restart), **options)  # type: ignore[arg-type]
        total_iterations += candidate.iterations
        if candidate.fx < best.fx:
            best = candidate

    return OptimizerResult(
        x=best.x,
        fx=best.fx,
        iterations=total_iterations,
        converged=best.converged,
    )
