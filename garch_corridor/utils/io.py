"""I/O utilities for candle CSV files and JSON reports."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from garch_corridor.config_logging import get_logger
from garch_corridor.utils.returns import Candle, candles_from_frame

__all__ = [
    "load_candles_csv",
    "load_csv_file",
    "save_json_pretty",
]


def load_csv_file(csv_path: Path) -> pd.DataFrame:
    """Load a CSV file into a DataFrame.

    Column names are lower-cased and stripped so that ``Open``/``CLOSE``
    headers are accepted.

    Raises:
        FileNotFoundError: If file does not exist.
        ValueError: If the file is empty.
    """
    logger = get_logger(__name__)

    if not csv_path.exists():
        raise FileNotFoundError(f"Candle file not found: {csv_path}")

    logger.info("Loading candles from %s", csv_path)
    try:
        df = pd.read_csv(csv_path)
    except pd.errors.EmptyDataError as e:
        raise ValueError(f"Candle file is empty: {csv_path}") from e
    if df.empty:
        raise ValueError(f"Candle file is empty: {csv_path}")
    df.columns = [str(col).strip().lower() for col in df.columns]
    return df


def load_candles_csv(csv_path: Path | str) -> list[Candle]:
    """Load an OHLC CSV file as a list of candles.

    Args:
        csv_path: Path to a CSV with open/high/low/close columns and optional
            volume/timestamp columns.

    Returns:
        Candles in file order.

    Raises:
        FileNotFoundError: If file does not exist.
        ValueError: If the file is empty.
        KeyError: If an OHLC column is missing.
    """
    df = load_csv_file(Path(csv_path))
    candles = candles_from_frame(df)
    get_logger(__name__).info("Loaded %d candles", len(candles))
    return candles


def save_json_pretty(
    data: dict[str, Any] | list[Any],
    output_path: Path | str,
    *,
    indent: int = 2,
    sort_keys: bool = False,
) -> None:
    """Save JSON with pretty formatting, creating parent directories.

    Args:
        data: Dictionary or list to save as JSON.
        output_path: Destination file.
        indent: Indentation level for pretty printing.
        sort_keys: If True, sort dictionary keys alphabetically.
    """
    path_obj = Path(output_path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)

    with open(path_obj, "w") as f:
        json.dump(data, f, indent=indent, sort_keys=sort_keys)
