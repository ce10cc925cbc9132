"""Relational joins between tidy tables.

Keys may be named differently on each side, e.g. ``("sample_id", "sample")``,
and may be composite (a list of such pairs). Fields that have no match on the
other side are left missing (``NaN``/``None``), never zero or empty.
"""
from __future__ import annotations

import collections.abc
import logging
from typing import List, Literal, Mapping, Sequence, Tuple, Union

import pandas as pd

from .errors import KeyMismatch

logger = logging.getLogger(__name__)

KeyPair = Tuple[str, str]
KeyMapping = Union[str, KeyPair, Sequence[Union[str, KeyPair]], Mapping[str, str]]

_LEFT_POS = "__left_pos"
_RIGHT_POS = "__right_pos"
_MERGE = "_merge"


def key_pairs(key_mapping: KeyMapping) -> List[KeyPair]:
    """Normalise every accepted key spelling to a list of (left, right) pairs."""
    if isinstance(key_mapping, str):
        return [(key_mapping, key_mapping)]
    if isinstance(key_mapping, collections.abc.Mapping):
        return [(left, right) for left, right in key_mapping.items()]
    if isinstance(key_mapping, tuple) and len(key_mapping) == 2 and all(isinstance(k, str) for k in key_mapping):
        return [key_mapping]
    pairs: List[KeyPair] = []
    for item in key_mapping:
        if isinstance(item, str):
            pairs.append((item, item))
        elif len(item) == 2:
            pairs.append((item[0], item[1]))
        else:
            raise KeyMismatch(f"Join key entries must be a name or a (left, right) pair, got {item!r}")
    if not pairs:
        raise KeyMismatch("At least one join key is required")
    return pairs


def _check_keys(left: pd.DataFrame, right: pd.DataFrame, pairs: List[KeyPair]) -> None:
    for left_key, right_key in pairs:
        if left_key not in left.columns:
            raise KeyMismatch(f"Left table has no key column '{left_key}'")
        if right_key not in right.columns:
            raise KeyMismatch(f"Right table has no key column '{right_key}'")
        if left.empty or right.empty:
            continue
        left_numeric = pd.api.types.is_numeric_dtype(left[left_key])
        right_numeric = pd.api.types.is_numeric_dtype(right[right_key])
        if left_numeric != right_numeric:
            raise KeyMismatch(
                f"Key columns '{left_key}' ({left[left_key].dtype}) and "
                f"'{right_key}' ({right[right_key].dtype}) are not comparable"
            )


def _merge(left: pd.DataFrame, right: pd.DataFrame, pairs: List[KeyPair], how: str) -> pd.DataFrame:
    _check_keys(left, right, pairs)
    key_dtypes = {left_key: left[left_key].dtype for left_key, _ in pairs}
    left = left.assign(**{_LEFT_POS: range(len(left))})
    right = right.assign(**{_RIGHT_POS: range(len(right))})
    merged = left.merge(
        right,
        how=how,
        left_on=[l for l, _ in pairs],
        right_on=[r for _, r in pairs],
        suffixes=("", "_right"),
        indicator=_MERGE,
    )
    # Left rows keep their order; right-only rows follow in right order.
    merged = merged.sort_values([_LEFT_POS, _RIGHT_POS], na_position="last", kind="stable")
    for left_key, right_key in pairs:
        if left_key == right_key:
            continue
        # Rows that only exist on the right still need a value under the left key name.
        filled = merged[left_key].combine_first(merged[right_key])
        if filled.notna().all() and filled.dtype != key_dtypes[left_key]:
            # Unmatched rows widened the key (e.g. int to float); restore the left dtype when lossless.
            restored = filled.astype(key_dtypes[left_key])
            if (restored == filled).all():
                filled = restored
        merged[left_key] = filled
        merged = merged.drop(columns=right_key)
    return merged.drop(columns=[_LEFT_POS, _RIGHT_POS]).reset_index(drop=True)


def _log_merge(kind: str, pairs: List[KeyPair], merged: pd.DataFrame) -> None:
    counts = merged[_MERGE].value_counts()
    logger.info(
        "%s join on %s: %d matched, %d left-only, %d right-only rows",
        kind,
        pairs,
        int(counts.get("both", 0)),
        int(counts.get("left_only", 0)),
        int(counts.get("right_only", 0)),
    )


def outer_join(left: pd.DataFrame, right: pd.DataFrame, key_mapping: KeyMapping, indicator: bool = False) -> pd.DataFrame:
    """Full outer join: every row of both tables appears in the result.

    With ``indicator=True`` a ``_merge`` column records whether each row
    matched (``both``) or came from one side only.
    """
    pairs = key_pairs(key_mapping)
    merged = _merge(left, right, pairs, how="outer")
    _log_merge("Outer", pairs, merged)
    if (merged[_MERGE] != "both").any():
        logger.warning(
            "Outer join on %s left %d unmatched rows; inspect them before trusting downstream summaries",
            pairs,
            int((merged[_MERGE] != "both").sum()),
        )
    if not indicator:
        merged = merged.drop(columns=_MERGE)
    return merged


def inner_join(
    left: pd.DataFrame,
    right: pd.DataFrame,
    key_mapping: KeyMapping,
    how: Literal["inner", "right"] = "inner",
) -> pd.DataFrame:
    """Keep only rows whose key exists on the right side.

    ``how="right"`` also keeps right rows that have no left match, with the
    left fields missing.
    """
    if how not in ("inner", "right"):
        raise ValueError(f"inner_join supports how='inner' or 'right', got {how!r}")
    pairs = key_pairs(key_mapping)
    merged = _merge(left, right, pairs, how=how)
    logger.info(
        "%s join on %s kept %d rows (%d left rows in, %d right keys)",
        how.capitalize(),
        pairs,
        len(merged),
        len(left),
        len(right),
    )
    return merged.drop(columns=_MERGE)
