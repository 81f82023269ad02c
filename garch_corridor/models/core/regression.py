"""Ordinary least squares via Gaussian elimination on the normal equations."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from garch_corridor.constants import HAR_SINGULAR_PIVOT


@dataclass(frozen=True)
class OlsResult:
    """Least-squares fit of y on X."""

    beta: np.ndarray
    residuals: np.ndarray
    rss: float
    tss: float
    r2: float


def solve_linear_system(a: np.ndarray, b: np.ndarray, *, context: str = "OLS") -> np.ndarray:
    """Solve ``a @ x = b`` by Gaussian elimination with partial pivoting.

    Args:
        a: Square coefficient matrix (not modified).
        b: Right-hand side (not modified).
        context: Label used in the singular-matrix error message.

    Returns:
        Solution vector.

    Raises:
        ValueError: If a pivot falls below ``HAR_SINGULAR_PIVOT`` in absolute value.
    """
    n = a.shape[0]
    m = np.column_stack((np.array(a, dtype=float), np.array(b, dtype=float)))

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(m[col:, col])))
        if pivot_row != col:
            m[[col, pivot_row]] = m[[pivot_row, col]]
        if abs(m[col, col]) < HAR_SINGULAR_PIVOT:
            msg = f"Singular matrix in {context}"
            raise ValueError(msg)
        factors = m[col + 1 :, col] / m[col, col]
        m[col + 1 :, col:] -= np.outer(factors, m[col, col:])

    x = np.zeros(n, dtype=float)
    for i in range(n - 1, -1, -1):
        x[i] = (m[i, n] - float(np.dot(m[i, i + 1 : n], x[i + 1 :]))) / m[i, i]
    return x


def ols(x: np.ndarray, y: np.ndarray, *, context: str = "OLS") -> OlsResult:
    """Fit y = X beta + e by least squares.

    Args:
        x: Design matrix (n x p), including any intercept column.
        y: Target vector (n).
        context: Label used in the singular-matrix error message.

    Returns:
        OlsResult with coefficients, residuals, RSS, TSS and R^2
        (R^2 is 0 when the target has no variation).

    Raises:
        ValueError: If X'X is singular.
    """
    beta = solve_linear_system(x.T @ x, x.T @ y, context=context)
    residuals = y - x @ beta
    rss = float(np.sum(residuals * residuals))
    centered = y - float(np.mean(y))
    tss = float(np.sum(centered * centered))
    r2 = 1.0 - rss / tss if tss > 0.0 else 0.0
    return OlsResult(beta=beta, residuals=residuals, rss=rss, tss=tss, r2=r2)
