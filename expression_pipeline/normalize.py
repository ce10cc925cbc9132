"""Per-group z-score scaling."""
from __future__ import annotations

import logging
from typing import List, Literal

import numpy as np
import pandas as pd
from scipy import stats

from .data_models import COUNT, GENE_ID, NormalizationResult
from .errors import DegenerateGroup
from .utils import require_columns

logger = logging.getLogger(__name__)

DegeneratePolicy = Literal["skip", "abort"]
POLICIES = ("skip", "abort")


def _check_group(key, values: pd.Series) -> None:
    n = int(values.notna().sum())
    if n < 2:
        raise DegenerateGroup(key, "fewer than 2 values", n)
    if values.dropna().nunique() < 2:
        raise DegenerateGroup(key, "zero variance", n)


def zscore(
    table: pd.DataFrame,
    group_column: str = GENE_ID,
    value: str = COUNT,
    policy: DegeneratePolicy = "skip",
) -> NormalizationResult:
    """Replace ``value`` by ``(x - mean) / sd`` within each ``group_column`` group.

    The standard deviation is the sample one (``ddof=1``). Missing values are
    left missing and do not count towards the group size. A group with fewer
    than two values or zero variance is degenerate: ``policy="abort"`` raises
    :class:`DegenerateGroup`, ``policy="skip"`` drops that group's rows and
    reports it on the result.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown degenerate-group policy {policy!r}; expected one of {POLICIES}")
    require_columns(table, [group_column, value])
    table = table.reset_index(drop=True)

    scaled = pd.Series(np.nan, index=table.index, dtype=float)
    keep = pd.Series(True, index=table.index)
    degenerate: List[DegenerateGroup] = []
    for key, group in table.groupby(group_column, dropna=False, sort=False, observed=True):
        values = group[value].astype(float)
        try:
            _check_group(key, values)
        except DegenerateGroup as exc:
            if policy == "abort":
                raise
            logger.warning("Skipping group: %s", exc)
            degenerate.append(exc)
            keep.loc[group.index] = False
            continue
        scaled.loc[group.index] = stats.zscore(values.to_numpy(), ddof=1, nan_policy="omit")

    out = table.copy()
    out[value] = scaled
    out = out.loc[keep].reset_index(drop=True)
    if degenerate:
        logger.info("z-scored %d rows; skipped %d degenerate groups", len(out), len(degenerate))
    return NormalizationResult(table=out, degenerate=degenerate)
