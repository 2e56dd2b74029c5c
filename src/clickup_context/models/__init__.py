"""
ClickUp Context Data Models.

This package provides the Pydantic models that flow through the context
pipeline. Every instance is request-scoped.

Models:
    - NormalizedEntry: Uniform view of one raw item
    - FetchSuccess / FetchFailure: Per-kind fetch outcome
    - RenderedSection: Text block for one kind
    - CombinedDocument: Merged multi-kind response
"""

from clickup_context.models.context import (
    CombinedDocument,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    NormalizedEntry,
    RenderedSection,
)

__all__ = [
    "NormalizedEntry",
    "FetchSuccess",
    "FetchFailure",
    "FetchOutcome",
    "RenderedSection",
    "CombinedDocument",
]
