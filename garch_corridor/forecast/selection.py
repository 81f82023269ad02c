"""Model selection by leverage asymmetry and AIC.

Strong asymmetry between down-move and up-move volatility restricts the
candidates to the asymmetric family (EGARCH, GJR-GARCH); otherwise all five
models compete. Every candidate is fitted and the lowest AIC wins. Candidates
that cannot be built or fitted on the data (insufficient history, singular
regression) are skipped and reported rather than aborting the selection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Sequence

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import LEVERAGE_RATIO_THRESHOLD
from garch_corridor.models import MODELS, CalibrationResult, ModelType, SeriesModel, create_model
from garch_corridor.utils.returns import (
    Candle,
    LeverageStats,
    calculate_returns,
    check_leverage_effect,
)

logger = get_logger(__name__)

ASYMMETRIC_CANDIDATES: tuple[ModelType, ...] = (ModelType.EGARCH, ModelType.GJR_GARCH)
ALL_CANDIDATES: tuple[ModelType, ...] = tuple(MODELS)


@dataclass(frozen=True)
class FittedModel:
    """A model instance together with its calibration."""

    model: SeriesModel
    calibration: CalibrationResult

    @property
    def model_type(self) -> ModelType:
        return self.model.model_type

    @property
    def params(self):
        return self.calibration.params


@dataclass(frozen=True)
class SelectionReport:
    """What was tried during selection and why the winner won."""

    leverage: LeverageStats
    candidates: tuple[ModelType, ...]
    chosen: ModelType
    aic: dict[ModelType, float] = field(default_factory=dict)
    skipped: dict[ModelType, str] = field(default_factory=dict)


def candidate_models(leverage: LeverageStats) -> tuple[ModelType, ...]:
    """Candidate set implied by the leverage ratio."""
    if leverage.ratio > LEVERAGE_RATIO_THRESHOLD:
        return ASYMMETRIC_CANDIDATES
    return ALL_CANDIDATES


def select_and_fit(
    candles: Sequence[Candle], periods_per_year: float
) -> tuple[FittedModel, SelectionReport]:
    """Fit every candidate model and keep the one with the lowest AIC.

    Ties keep the earlier candidate in registry order.

    Args:
        candles: Validated candles.
        periods_per_year: Annualization factor for the interval.

    Returns:
        Tuple of (winning FittedModel, SelectionReport).

    Raises:
        RuntimeError: If no candidate could be fitted.
    """
    leverage = check_leverage_effect(calculate_returns(candles))
    candidates = candidate_models(leverage)
    logger.info(
        "Leverage ratio %.3f -> candidates: %s",
        leverage.ratio,
        ", ".join(c.value for c in candidates),
    )

    best: FittedModel | None = None
    scores: dict[ModelType, float] = {}
    skipped: dict[ModelType, str] = {}

    for model_type in candidates:
        try:
            model = create_model(model_type, candles, periods_per_year=periods_per_year)
            calibration = model.fit()
        except ValueError as ex:
            logger.warning("Skipping %s: %s", model_type.value, ex)
            skipped[model_type] = str(ex)
            continue

        score = calibration.diagnostics.aic
        if not math.isfinite(score):
            logger.warning("Skipping %s: non-finite AIC", model_type.value)
            skipped[model_type] = "non-finite AIC"
            continue
        scores[model_type] = score
        if best is None or score < best.calibration.diagnostics.aic:
            best = FittedModel(model=model, calibration=calibration)

    if best is None:
        msg = f"No candidate model could be fitted: {skipped}"
        raise RuntimeError(msg)

    logger.info("Selected %s (AIC=%.2f)", best.model_type.value, scores[best.model_type])
    report = SelectionReport(
        leverage=leverage,
        candidates=candidates,
        chosen=best.model_type,
        aic=scores,
        skipped=skipped,
    )
    return best, report
