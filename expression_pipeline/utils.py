"""Utility helpers."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Type

import pandas as pd


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def require_columns(table: pd.DataFrame, columns: Iterable[str], error: Type[Exception] = ValueError) -> None:
    missing = [column for column in columns if column not in table.columns]
    if missing:
        raise error(f"Table is missing required columns {missing}; has {list(table.columns)}")
