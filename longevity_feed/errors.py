"""Fatal pipeline errors.

Source-fetch failures never raise past their adapter; they are reported
through SourceResult instead. Everything here terminates the run before the
corpus is written.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for failures that abort an ingestion run."""


class EnrichmentError(PipelineError):
    """The generation service returned a non-success status or an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CorpusError(PipelineError):
    """The corpus file could not be read or written."""
