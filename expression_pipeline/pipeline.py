"""End-to-end orchestration of the reshape, join, annotate and scale steps."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .aggregate import summarize_mean
from .config import PipelineConfig
from .data_models import (
    ADJUSTED_P_VALUE,
    COUNT,
    DIRECTION,
    GENE_ID,
    LOG2_FOLD_CHANGE,
    SAMPLE_ID,
    ExpressionMatrix,
    PipelineResult,
)
from .errors import DuplicateEntries, KeyMismatch, PipelineError
from .io import load_inputs, write_result
from .joins import inner_join, outer_join
from .normalize import zscore
from .ordering import apply_order, gene_order, sample_order
from .reshape import to_wide, unpivot
from .transforms import add_direction, filter_significant
from .utils import require_columns

logger = logging.getLogger(__name__)


def _require_unique(table: pd.DataFrame, key: str, what: str) -> None:
    dupes = table.loc[table[key].duplicated(), key]
    if not dupes.empty:
        raise DuplicateEntries(f"{what} must have one row per '{key}'; duplicated: {sorted(map(str, dupes.unique()))}")


class ExpressionPipeline:
    """Turn a count matrix plus sample and test tables into tidy display tables.

    Steps, in order: unpivot the matrix, outer-join sample metadata, keep
    significant genes and label their direction, restrict the long table to
    those genes, average counts per gene/treatment/direction, attach display
    orders and z-score each gene.
    """

    def __init__(self, config: PipelineConfig) -> None:
        self.config = config

    def run(self, matrix: ExpressionMatrix, samples: pd.DataFrame, results: pd.DataFrame) -> PipelineResult:
        joins = self.config.joins
        analysis = self.config.analysis
        treatment = analysis.treatment_column
        require_columns(samples, [joins.sample_key], KeyMismatch)
        require_columns(results, [joins.gene_key], KeyMismatch)
        require_columns(samples, [treatment], PipelineError)
        require_columns(results, [LOG2_FOLD_CHANGE, ADJUSTED_P_VALUE], PipelineError)
        _require_unique(samples, joins.sample_key, "Sample info")
        _require_unique(results, joins.gene_key, "Test results")

        long = unpivot(matrix)
        joined = outer_join(long, samples, (SAMPLE_ID, joins.sample_key))

        if joins.gene_key != GENE_ID:
            results = results.rename(columns={joins.gene_key: GENE_ID})
        significant = filter_significant(results, alpha=analysis.alpha)
        labelled = add_direction(significant.table)
        logger.info("%d of %d genes pass adjusted p < %s", len(labelled), len(results), analysis.alpha)

        annotated = inner_join(joined, labelled, GENE_ID)
        summary = summarize_mean(annotated, [GENE_ID, treatment, DIRECTION])

        samples_in_order = self._sample_order(joined, samples, treatment)
        genes_in_order = gene_order(labelled)
        annotated = apply_order(annotated, SAMPLE_ID, samples_in_order)
        annotated = apply_order(annotated, GENE_ID, genes_in_order)
        summary = apply_order(summary, GENE_ID, genes_in_order)

        scaled = zscore(annotated, GENE_ID, COUNT, policy=analysis.degenerate_policy)
        present = set(scaled.table[GENE_ID])
        scaled_genes = [g for g in genes_in_order if g in present]
        heatmap = to_wide(scaled.table, COUNT, scaled_genes, samples_in_order)

        return PipelineResult(
            long=long,
            joined=joined,
            significant=significant,
            annotated=annotated,
            summary=summary,
            scaled=scaled,
            sample_order=samples_in_order,
            gene_order=genes_in_order,
            heatmap=heatmap,
        )

    def _sample_order(self, joined: pd.DataFrame, samples: pd.DataFrame, treatment: str) -> List:
        ordered = sample_order(samples, treatment, self.config.joins.sample_key)
        # Matrix samples missing from the metadata still need a level, after the known ones.
        extra = [s for s in pd.unique(joined[SAMPLE_ID]) if s not in set(ordered) and not pd.isna(s)]
        if extra:
            logger.warning("Samples without metadata placed last in display order: %s", extra)
        return ordered + extra

    def run_from_config(self, output_dir: Optional[Path] = None) -> Dict[str, Path]:
        if self.config.inputs is None:
            raise ValueError("Configuration has no 'inputs' section to load tables from")
        matrix, samples, results = load_inputs(self.config.inputs, self.config.joins)
        result = self.run(matrix, samples, results)
        return write_result(result, output_dir or self.config.output_dir)
