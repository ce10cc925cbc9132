"""Conversion between the gene x sample matrix and the long (tidy) table."""
from __future__ import annotations

import logging
from typing import Generator, Optional, Sequence

import numpy as np
import pandas as pd

from .data_models import COUNT, GENE_ID, SAMPLE_ID, ExpressionMatrix, LongExpressionRow
from .utils import require_columns

logger = logging.getLogger(__name__)


def iter_long_rows(matrix: ExpressionMatrix) -> Generator[LongExpressionRow, None, None]:
    """Yield one row per (gene, sample) cell, row-major."""
    for i, gene_id in enumerate(matrix.gene_ids):
        for j, sample_id in enumerate(matrix.sample_ids):
            yield LongExpressionRow(gene_id, sample_id, float(matrix.values[i, j]))


def unpivot(matrix: ExpressionMatrix) -> pd.DataFrame:
    n_genes, n_samples = matrix.shape
    # Gene-major order: every sample of the first gene, then the next gene.
    long = pd.DataFrame({
        GENE_ID: np.repeat(np.asarray(matrix.gene_ids, dtype=object), n_samples),
        SAMPLE_ID: np.tile(np.asarray(matrix.sample_ids, dtype=object), n_genes),
        COUNT: matrix.values.ravel(),
    })
    logger.debug("Unpivoted %d x %d matrix into %d rows", n_genes, n_samples, len(long))
    return long


def pivot(long: pd.DataFrame, value: str = COUNT) -> ExpressionMatrix:
    """Inverse of :func:`unpivot`; axes keep their first-occurrence order."""
    require_columns(long, [GENE_ID, SAMPLE_ID, value])
    if long.duplicated([GENE_ID, SAMPLE_ID]).any():
        raise ValueError("Cannot pivot: duplicate (gene_id, sample_id) pairs")
    wide = long.pivot(index=GENE_ID, columns=SAMPLE_ID, values=value)
    wide = wide.reindex(index=pd.unique(long[GENE_ID]), columns=pd.unique(long[SAMPLE_ID]))
    return ExpressionMatrix.from_frame(wide)


def to_wide(
    table: pd.DataFrame,
    value: str,
    gene_order: Optional[Sequence[str]] = None,
    sample_order: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Spread a long table to genes x samples, laid out in display order.

    Cells with no row in ``table`` stay missing.
    """
    require_columns(table, [GENE_ID, SAMPLE_ID, value])
    frame = table[[GENE_ID, SAMPLE_ID, value]].astype({GENE_ID: object, SAMPLE_ID: object})
    if frame.duplicated([GENE_ID, SAMPLE_ID]).any():
        raise ValueError("Cannot spread: duplicate (gene_id, sample_id) pairs")
    wide = frame.set_index([GENE_ID, SAMPLE_ID])[value].unstack()
    genes = list(gene_order) if gene_order is not None else list(pd.unique(frame[GENE_ID]))
    samples = list(sample_order) if sample_order is not None else list(pd.unique(frame[SAMPLE_ID]))
    wide = wide.reindex(index=[g for g in genes if g in wide.index], columns=[s for s in samples if s in wide.columns])
    wide.columns.name = SAMPLE_ID
    return wide
