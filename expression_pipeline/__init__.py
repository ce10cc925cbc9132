"""Reshape, join, annotate and normalize gene-expression tables."""
from __future__ import annotations

from .errors import DegenerateGroup, DuplicateEntries, KeyMismatch, MissingIdentifiers, PipelineError

__all__ = ["DegenerateGroup", "DuplicateEntries", "KeyMismatch", "MissingIdentifiers", "PipelineError"]
