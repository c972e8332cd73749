"""Export pipeline for trimmed audio."""

from __future__ import annotations

from audiocutter.export.job import ExportJob, ExportOutcome, ExportState, build_job, read_cut_window
from audiocutter.export.pipeline import ExportCollaborators, ExportPipeline

__all__ = [
    "ExportCollaborators",
    "ExportJob",
    "ExportOutcome",
    "ExportPipeline",
    "ExportState",
    "build_job",
    "read_cut_window",
]
