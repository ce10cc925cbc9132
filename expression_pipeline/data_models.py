"""Common data structures used across pipeline modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import DegenerateGroup, MissingIdentifiers

GENE_ID = "gene_id"
SAMPLE_ID = "sample_id"
COUNT = "count"
TREATMENT = "treatment"
LOG2_FOLD_CHANGE = "log2_fold_change"
ADJUSTED_P_VALUE = "adjusted_p_value"
DIRECTION = "direction"
MEAN_COUNT = "mean_count"

UP_REGULATED = "up-regulated"
DOWN_REGULATED = "down-regulated"


def _check_labels(labels: Sequence, axis: str, expected: int) -> List:
    if labels is None:
        raise MissingIdentifiers(f"No {axis} identifiers supplied")
    labels = list(labels)
    if len(labels) != expected:
        raise MissingIdentifiers(f"Expected {expected} {axis} identifiers, got {len(labels)}")
    if any(pd.isna(label) for label in labels):
        raise MissingIdentifiers(f"{axis} identifiers contain missing values")
    if len(set(labels)) != len(labels):
        raise ValueError(f"{axis} identifiers must be unique")
    return labels


@dataclass(frozen=True, eq=False)
class ExpressionMatrix:
    """Normalized counts indexed by gene (rows) and sample (columns)."""
    values: np.ndarray
    gene_ids: List[str]
    sample_ids: List[str]

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=float)
        if values.ndim != 2:
            raise ValueError(f"Expression matrix must be 2-D, got shape {values.shape}")
        n_genes, n_samples = values.shape
        object.__setattr__(self, "gene_ids", _check_labels(self.gene_ids, "gene", n_genes))
        object.__setattr__(self, "sample_ids", _check_labels(self.sample_ids, "sample", n_samples))
        if np.isnan(values).any():
            raise ValueError("Expression matrix contains missing counts")
        if np.any(values < 0):
            raise ValueError("Expression counts must be non-negative")
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def shape(self):
        return self.values.shape

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "ExpressionMatrix":
        """Build a matrix from a genes x samples frame.

        Positional (default ``RangeIndex``) labels on either axis are rejected,
        because they mean the gene or sample names were lost upstream.
        """
        for axis, labels in (("gene", frame.index), ("sample", frame.columns)):
            if isinstance(labels, pd.RangeIndex):
                raise MissingIdentifiers(
                    f"Matrix {axis} axis only has positional labels; supply {axis} identifiers explicitly"
                )
        return cls(values=frame.to_numpy(dtype=float), gene_ids=list(frame.index), sample_ids=list(frame.columns))

    def to_frame(self) -> pd.DataFrame:
        frame = pd.DataFrame(self.values, index=self.gene_ids, columns=self.sample_ids)
        frame.index.name = GENE_ID
        frame.columns.name = SAMPLE_ID
        return frame

    def equals(self, other: "ExpressionMatrix") -> bool:
        return (
            self.gene_ids == other.gene_ids
            and self.sample_ids == other.sample_ids
            and np.array_equal(self.values, other.values)
        )


class LongExpressionRow(NamedTuple):
    gene_id: str
    sample_id: str
    count: float


@dataclass
class SampleRecord:
    """Per-sample metadata; ``attributes`` holds anything beyond treatment."""
    sample_id: str
    treatment: str
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass
class TestResultRecord:
    """Outcome of a differential test for one gene."""
    __test__ = False

    gene_id: str
    log2_fold_change: float
    adjusted_p_value: Optional[float] = None


def samples_to_dataframe(records: List[SampleRecord], key: str = SAMPLE_ID) -> pd.DataFrame:
    rows = []
    for record in records:
        row = {key: record.sample_id, TREATMENT: record.treatment}
        row.update(record.attributes)
        rows.append(row)
    if not rows:
        return pd.DataFrame(columns=[key, TREATMENT])
    return pd.DataFrame(rows)


def results_to_dataframe(records: List[TestResultRecord]) -> pd.DataFrame:
    rows = [
        {
            GENE_ID: record.gene_id,
            LOG2_FOLD_CHANGE: record.log2_fold_change,
            ADJUSTED_P_VALUE: np.nan if record.adjusted_p_value is None else record.adjusted_p_value,
        }
        for record in records
    ]
    frame = pd.DataFrame(rows, columns=[GENE_ID, LOG2_FOLD_CHANGE, ADJUSTED_P_VALUE])
    if frame[GENE_ID].duplicated().any():
        dupes = sorted(frame.loc[frame[GENE_ID].duplicated(), GENE_ID].unique())
        raise ValueError(f"Test results contain more than one row for genes: {dupes}")
    return frame


@dataclass
class FilterResult:
    """Rows kept by a filter plus how the others were excluded."""
    table: pd.DataFrame
    n_passed: int
    n_failed: int
    n_undefined: int


@dataclass
class NormalizationResult:
    """z-scored rows and the groups that could not be scaled."""
    table: pd.DataFrame
    degenerate: List[DegenerateGroup] = field(default_factory=list)


@dataclass
class PipelineResult:
    """Every intermediate table produced by one pipeline run."""
    long: pd.DataFrame
    joined: pd.DataFrame
    significant: FilterResult
    annotated: pd.DataFrame
    summary: pd.DataFrame
    scaled: NormalizationResult
    sample_order: List[str]
    gene_order: List[str]
    heatmap: pd.DataFrame
