"""Derivative-free optimization used by every model fit."""

from __future__ import annotations

from garch_corridor.optimizer.nelder_mead import (
    OptimizerResult,
    nelder_mead,
    nelder_mead_multi_start,
    perturbed_start,
)

__all__ = [
    "OptimizerResult",
    "nelder_mead",
    "nelder_mead_multi_start",
    "perturbed_start",
]
