"""Configuration loading utilities for the expression pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .normalize import POLICIES


@dataclass
class InputConfig:
    """CSV files holding the three pipeline inputs."""
    matrix: Path
    sample_info: Path
    test_results: Path
    gene_column: str = "gene_id"


@dataclass
class JoinConfig:
    """Key column names on the metadata and test-result side of each join."""
    sample_key: str = "sample_id"
    gene_key: str = "gene_id"


@dataclass
class AnalysisConfig:
    """Parameters for filtering, ordering and scaling."""
    alpha: float = 0.05
    treatment_column: str = "treatment"
    degenerate_policy: str = "skip"

    def __post_init__(self) -> None:
        if self.degenerate_policy not in POLICIES:
            raise ValueError(f"degenerate_policy must be one of {POLICIES}, got {self.degenerate_policy!r}")
        if not 0 < self.alpha <= 1:
            raise ValueError(f"alpha must be in (0, 1], got {self.alpha}")


@dataclass
class PipelineConfig:
    """Top-level container aggregating all pipeline configuration sections."""
    output_dir: Path
    inputs: Optional[InputConfig] = None
    joins: JoinConfig = field(default_factory=JoinConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)


def _resolve(base: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base / path


def load_config(path: Path) -> PipelineConfig:
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if "output_dir" not in data:
        raise ValueError(f"{path}: 'output_dir' is required")

    base = path.parent
    inputs = None
    if data.get("inputs"):
        raw = dict(data["inputs"])
        for key in ("matrix", "sample_info", "test_results"):
            if key not in raw:
                raise ValueError(f"{path}: inputs.{key} is required")
            raw[key] = _resolve(base, raw[key])
        inputs = InputConfig(**raw)

    return PipelineConfig(
        output_dir=_resolve(base, data["output_dir"]),
        inputs=inputs,
        joins=JoinConfig(**(data.get("joins") or {})),
        analysis=AnalysisConfig(**(data.get("analysis") or {})),
    )
