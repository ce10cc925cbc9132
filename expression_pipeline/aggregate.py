"""Group-by and per-group reductions."""
from __future__ import annotations

from typing import Callable, Optional, Sequence, Union

import pandas as pd
from pandas.core.groupby import DataFrameGroupBy

from .data_models import COUNT, MEAN_COUNT
from .utils import require_columns

Reduction = Union[str, Callable[[pd.Series], float]]


def group_by(table: pd.DataFrame, keys: Sequence[str]) -> DataFrameGroupBy:
    """Partition rows on ``keys``; rows with a missing key form their own group."""
    keys = list(keys)
    if not keys:
        raise ValueError("group_by needs at least one key column")
    require_columns(table, keys)
    return table.groupby(keys, dropna=False, sort=False, observed=True)


def aggregate(groups: DataFrameGroupBy, column: str, reduction: Reduction = "mean", name: Optional[str] = None) -> pd.DataFrame:
    """Reduce every group to one row holding ``reduction`` of ``column``."""
    label = name or f"{reduction if isinstance(reduction, str) else reduction.__name__}_{column}"
    reduced = groups[column].agg(reduction)
    return reduced.rename(label).reset_index()


def summarize_mean(table: pd.DataFrame, keys: Sequence[str], column: str = COUNT, name: str = MEAN_COUNT) -> pd.DataFrame:
    require_columns(table, [column])
    return aggregate(group_by(table, keys), column, "mean", name=name)
