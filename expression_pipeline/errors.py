"""Error kinds raised by the pipeline stages."""
from __future__ import annotations

from typing import Any


class PipelineError(ValueError):
    """Base class for conditions reported by a pipeline stage."""


class MissingIdentifiers(PipelineError):
    """The matrix has no gene or sample labels to unpivot with."""


class KeyMismatch(PipelineError):
    """Join key columns are missing from one side or are not comparable."""


class DuplicateEntries(PipelineError):
    """An input table has more than one row for an id that must be unique."""


class DegenerateGroup(PipelineError):
    """A normalization group has fewer than two values or zero variance."""

    def __init__(self, key: Any, reason: str, size: int) -> None:
        super().__init__(f"Cannot z-score group {key!r}: {reason} (n={size})")
        self.key = key
        self.reason = reason
        self.size = size
