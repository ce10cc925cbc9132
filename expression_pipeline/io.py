"""Reading pipeline inputs and writing its tidy outputs as CSV."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .config import InputConfig, JoinConfig
from .data_models import ExpressionMatrix, PipelineResult
from .errors import MissingIdentifiers
from .utils import ensure_dir

logger = logging.getLogger(__name__)


def load_matrix(path: Path, gene_column: str = "gene_id") -> ExpressionMatrix:
    """Read a genes x samples CSV whose ``gene_column`` holds the gene ids."""
    header = pd.read_csv(path, nrows=0)
    if gene_column not in header.columns:
        raise MissingIdentifiers(f"{path} has no gene identifier column '{gene_column}'")
    # Ids are labels, not numbers; read them as text so they join with the other tables.
    frame = pd.read_csv(path, index_col=gene_column, dtype={gene_column: str})
    frame.columns = frame.columns.astype(str)
    logger.info("Loaded %s: %d genes, %d samples", path.name, *frame.shape)
    return ExpressionMatrix.from_frame(frame)


def load_table(path: Path, key: Optional[str] = None) -> pd.DataFrame:
    """Read a CSV table; the ``key`` column, when present, is kept as text."""
    if not path.exists():
        raise FileNotFoundError(f"Missing input table at {path}")
    header = pd.read_csv(path, nrows=0)
    dtype = {key: str} if key is not None and key in header.columns else None
    table = pd.read_csv(path, dtype=dtype)
    logger.info("Loaded %s: %d rows", path.name, len(table))
    return table


def load_inputs(inputs: InputConfig, joins: JoinConfig):
    return (
        load_matrix(inputs.matrix, inputs.gene_column),
        load_table(inputs.sample_info, joins.sample_key),
        load_table(inputs.test_results, joins.gene_key),
    )


def write_result(result: PipelineResult, output_dir: Path) -> Dict[str, Path]:
    ensure_dir(output_dir)
    tables = {
        "long": result.long,
        "joined": result.joined,
        "significant": result.significant.table,
        "annotated": result.annotated,
        "summary": result.summary,
        "scaled": result.scaled.table,
    }
    paths: Dict[str, Path] = {}
    for name, table in tables.items():
        output = output_dir / f"{name}.csv"
        table.to_csv(output, index=False)
        paths[name] = output
    heatmap_path = output_dir / "heatmap.csv"
    result.heatmap.to_csv(heatmap_path)
    paths["heatmap"] = heatmap_path
    # Display orders travel next to the tables, one level per line.
    for name, levels in (("sample_order", result.sample_order), ("gene_order", result.gene_order)):
        output = output_dir / f"{name}.txt"
        output.write_text("".join(f"{level}\n" for level in levels), encoding="utf-8")
        paths[name] = output
    logger.info("Wrote %d files to %s", len(paths), output_dir)
    return paths
