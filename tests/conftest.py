"""Pytest configuration and shared synthetic-market fixtures.

Candles are simulated from a GARCH(1,1) process with Gaussian shocks. Each
candle is built from intra-candle sub-steps so that high/low behave like a
sampled Brownian path and range estimators are consistent with the variance.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from garch_corridor.utils.returns import Candle

GARCH_OMEGA = 5e-6
GARCH_ALPHA = 0.08
GARCH_BETA = 0.85
SUB_STEPS = 8


def simulate_garch_candles(
    n: int,
    seed: int = 42,
    *,
    omega: float = GARCH_OMEGA,
    alpha: float = GARCH_ALPHA,
    beta: float = GARCH_BETA,
    start_price: float = 100.0,
) -> list[Candle]:
    """Simulate ``n`` OHLC candles whose close-to-close returns follow GARCH(1,1)."""
    rng = np.random.default_rng(seed)
    variance = omega / (1.0 - alpha - beta)
    prev_return = 0.0
    price = start_price
    candles = []
    for t in range(n):
        if t > 0:
            variance = omega + alpha * prev_return**2 + beta * variance
        steps = rng.normal(0.0, np.sqrt(variance / SUB_STEPS), size=SUB_STEPS)
        path = price * np.exp(np.cumsum(steps))
        open_ = price
        close = float(path[-1])
        high = float(max(open_, path.max()))
        low = float(min(open_, path.min()))
        candles.append(Candle(open=open_, high=high, low=low, close=close, volume=1.0, timestamp=float(t)))
        prev_return = float(np.log(close / price))
        price = close
    return candles


@pytest.fixture
def make_garch_candles() -> Callable[..., list[Candle]]:
    """Factory for simulated GARCH candles."""
    return simulate_garch_candles


@pytest.fixture(scope="session")
def garch_candles() -> list[Candle]:
    """500 candles from GARCH(1,1) with omega=5e-6, alpha=0.08, beta=0.85."""
    return simulate_garch_candles(500, seed=42)


@pytest.fixture(scope="session")
def garch_prices(garch_candles: list[Candle]) -> list[float]:
    """Close prices of the simulated candles."""
    return [c.close for c in garch_candles]


@pytest.fixture
def constant_candles() -> list[Candle]:
    """300 candles with open = high = low = close = 100."""
    return [Candle(open=100.0, high=100.0, low=100.0, close=100.0, volume=1.0) for _ in range(300)]


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(123)
