"""Conditional-variance models sharing the fit / variance_series / forecast contract."""

from __future__ import annotations

from garch_corridor.models.base import (
    CalibrationResult,
    Diagnostics,
    InnovationSource,
    ModelInput,
    ModelParams,
    ModelType,
    SeriesModel,
    VolatilityForecast,
    VolatilityModel,
)
from garch_corridor.models.egarch import Egarch, EgarchParams, calibrate_egarch
from garch_corridor.models.garch import Garch, GarchParams, calibrate_garch
from garch_corridor.models.gjr_garch import GjrGarch, GjrGarchParams, calibrate_gjr_garch
from garch_corridor.models.har_rv import HarRv, HarRvParams, calibrate_har_rv
from garch_corridor.models.novas import Novas, NovasParams, calibrate_novas

# Registry used by model selection; order is the tie-break order on equal AIC
MODELS: dict[ModelType, type[SeriesModel]] = {
    ModelType.GARCH: Garch,
    ModelType.EGARCH: Egarch,
    ModelType.GJR_GARCH: GjrGarch,
    ModelType.HAR_RV: HarRv,
    ModelType.NOVAS: Novas,
}


def create_model(model_type: ModelType | str, data: ModelInput, **options: float) -> SeriesModel:
    """Instantiate the model registered under ``model_type``.

    Raises:
        ValueError: If ``model_type`` is unknown or the data is insufficient.
    """
    try:
        key = ModelType(model_type)
    except ValueError as ex:
        valid = ", ".join(m.value for m in ModelType)
        msg = f"Unknown model type: {model_type}. Must be one of: {valid}"
        raise ValueError(msg) from ex
    return MODELS[key](data, **options)


__all__ = [
    "MODELS",
    "CalibrationResult",
    "Diagnostics",
    "Egarch",
    "EgarchParams",
    "Garch",
    "GarchParams",
    "GjrGarch",
    "GjrGarchParams",
    "HarRv",
    "HarRvParams",
    "InnovationSource",
    "ModelInput",
    "ModelParams",
    "ModelType",
    "Novas",
    "NovasParams",
    "SeriesModel",
    "VolatilityForecast",
    "VolatilityModel",
    "calibrate_egarch",
    "calibrate_garch",
    "calibrate_gjr_garch",
    "calibrate_har_rv",
    "calibrate_novas",
    "create_model",
]
