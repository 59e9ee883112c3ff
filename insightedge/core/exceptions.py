"""
Error types raised across the analysis engine boundary.

Every public entry point collapses internal failures into one of these
coarse-grained errors. The message is user-presentable; the original
exception is chained for logs only.
"""

from typing import Optional


class InsightEdgeError(Exception):
    """Base class for all errors surfaced by the analysis engine."""

    default_message = "Analysis engine failure"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class AnalysisError(InsightEdgeError):
    """Raised when the full analysis pipeline cannot complete."""

    default_message = "Failed to analyze business data"


class QueryError(InsightEdgeError):
    """Raised when a natural-language query cannot be answered."""

    default_message = "Failed to process query"


class IngestionError(InsightEdgeError):
    """Raised when an uploaded file cannot be turned into a dataset."""

    default_message = "Failed to read uploaded file"
