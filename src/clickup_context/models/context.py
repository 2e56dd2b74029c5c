"""
Request-scoped context models.

These models carry data from the formatters through the renderer to the
combined document. None of them is cached or persisted.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field

from clickup_context.constants import UNKNOWN_ID


class NormalizedEntry(BaseModel):
    """Uniform view of one raw ClickUp item."""

    kind: str
    id: str = UNKNOWN_ID
    primary_label: str
    status_label: str | None = None
    details: dict[str, str] = Field(default_factory=dict)
    links: list[str] = Field(default_factory=list)
    error: str | None = None

    @property
    def is_degraded(self) -> bool:
        return self.error is not None


class FetchSuccess(BaseModel):
    """A kind whose fetch and formatting completed."""

    kind: str
    entries: list[NormalizedEntry] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True


class FetchFailure(BaseModel):
    """A kind whose fetch failed; terminal for this request."""

    kind: str
    error: str

    @property
    def ok(self) -> bool:
        return False


FetchOutcome = Union[FetchSuccess, FetchFailure]


class RenderedSection(BaseModel):
    """Rendered text for one kind, or its inline error line."""

    kind: str
    text: str
    body: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CombinedDocument(BaseModel):
    """The merged response for a multi-kind request."""

    text: str
    kinds: list[str] = Field(default_factory=list)
    failed_kinds: list[str] = Field(default_factory=list)
