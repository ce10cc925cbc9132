"""Display order for categorical axes.

Orders only ever annotate a column with its level list; rows are never
reordered, dropped or duplicated.
"""
from __future__ import annotations

from typing import Any, Hashable, List, Sequence

import pandas as pd

from .data_models import GENE_ID, LOG2_FOLD_CHANGE, SAMPLE_ID, TREATMENT
from .utils import require_columns


def derive_order(values: Sequence[Hashable], keys: Sequence[Any]) -> List[Hashable]:
    """Distinct ``values`` sorted by their first key in ascending-key order.

    The sort is stable, so equal keys keep their original positions.

    >>> derive_order(["a", "b", "a", "c"], [3, 1, 3, 2])
    ['b', 'c', 'a']
    """
    values = list(values)
    keys = list(keys)
    if len(values) != len(keys):
        raise ValueError(f"derive_order got {len(values)} values but {len(keys)} keys")
    pairs = pd.DataFrame({"value": values, "key": keys})
    ordered = pairs.sort_values("key", kind="stable", na_position="last")["value"]
    return ordered.drop_duplicates().tolist()


def apply_order(table: pd.DataFrame, column: str, levels: Sequence[Hashable]) -> pd.DataFrame:
    """Return a copy of ``table`` whose ``column`` is ordered categorical."""
    require_columns(table, [column])
    levels = list(levels)
    unknown = set(table[column].dropna()) - set(levels)
    if unknown:
        raise ValueError(f"Column '{column}' has values outside the level list: {sorted(map(str, unknown))}")
    out = table.copy()
    out[column] = pd.Categorical(out[column], categories=levels, ordered=True)
    return out


def sample_order(samples: pd.DataFrame, treatment: str = TREATMENT, key: str = SAMPLE_ID) -> List[Hashable]:
    """Samples grouped by ascending treatment, original order within a treatment."""
    require_columns(samples, [key, treatment])
    return derive_order(samples[key], samples[treatment])


def gene_order(results: pd.DataFrame, column: str = LOG2_FOLD_CHANGE, key: str = GENE_ID) -> List[Hashable]:
    """Genes by ascending fold change."""
    require_columns(results, [key, column])
    return derive_order(results[key], results[column])
