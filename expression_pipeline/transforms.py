"""Row filtering and per-row derived fields."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import numpy as np
import pandas as pd

from .data_models import ADJUSTED_P_VALUE, DIRECTION, DOWN_REGULATED, LOG2_FOLD_CHANGE, UP_REGULATED, FilterResult
from .utils import require_columns

logger = logging.getLogger(__name__)


def filter_rows(table: pd.DataFrame, column: str, predicate: Callable[[pd.Series], pd.Series]) -> FilterResult:
    """Keep rows whose ``column`` value satisfies ``predicate``.

    ``predicate`` receives the non-missing values of ``column`` as a Series and
    returns a boolean Series. Rows where the value is missing never reach the
    predicate; they are excluded and counted as undefined, separately from
    rows the predicate rejected.
    """
    require_columns(table, [column])
    defined = table[column].notna().to_numpy()
    passed = np.zeros(len(table), dtype=bool)
    if defined.any():
        passed[defined] = np.asarray(predicate(table[column][defined]), dtype=bool)
    n_passed = int(passed.sum())
    n_undefined = int((~defined).sum())
    n_failed = len(table) - n_passed - n_undefined
    logger.info(
        "Filter on '%s': %d passed, %d failed, %d excluded for missing values",
        column,
        n_passed,
        n_failed,
        n_undefined,
    )
    return FilterResult(table=table[passed].copy(), n_passed=n_passed, n_failed=n_failed, n_undefined=n_undefined)


def filter_significant(table: pd.DataFrame, column: str = ADJUSTED_P_VALUE, alpha: float = 0.05) -> FilterResult:
    """Keep rows with ``column < alpha`` (strict)."""
    if not 0 < alpha <= 1:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")
    return filter_rows(table, column, lambda values: values < alpha)


def derive(table: pd.DataFrame, new_field: str, fn: Callable[[pd.Series], Any]) -> pd.DataFrame:
    """Return a copy of ``table`` with ``new_field`` computed from each row."""
    if new_field in table.columns:
        raise ValueError(f"Column '{new_field}' already exists")
    out = table.copy()
    if out.empty:
        out[new_field] = pd.Series(index=out.index, dtype=object)
        return out
    out[new_field] = out.apply(fn, axis=1)
    return out


def classify_direction(log2_fold_change: Optional[float]) -> Optional[str]:
    """``up-regulated`` for a strictly positive fold change, else ``down-regulated``.

    A fold change of exactly zero is down-regulated. A missing fold change has
    no direction.
    """
    if log2_fold_change is None or pd.isna(log2_fold_change):
        return None
    return UP_REGULATED if log2_fold_change > 0 else DOWN_REGULATED


def add_direction(table: pd.DataFrame, column: str = LOG2_FOLD_CHANGE) -> pd.DataFrame:
    require_columns(table, [column])
    return derive(table, DIRECTION, lambda row: classify_direction(row[column]))
