"""
ClickUp Context Provider - ClickUp workspace data as AI-consumable text.

This package fetches tasks, spaces, lists, folders and comments from the
ClickUp v2 API, normalizes the loosely-typed JSON, and renders it into plain
text for a conversational AI's context window.

Architecture:
    MCP Tools Layer
         │
         ▼
    Context Aggregator (concurrent fan-out, per-kind isolation)
         │
    ┌────┴──────────┐
    ▼               ▼
  ClickUp        Formatters ──► Renderer
  Client
"""

__version__ = "0.1.0"
__author__ = "ClickUp Context Contributors"

from clickup_context.exceptions import (
    ClickUpContextError,
    InvalidTokenError,
    MalformedPayloadError,
    TokenResolutionError,
    UnsupportedKindError,
    UpstreamError,
)

__all__ = [
    "__version__",
    "ClickUpContextError",
    "UpstreamError",
    "TokenResolutionError",
    "InvalidTokenError",
    "MalformedPayloadError",
    "UnsupportedKindError",
]
