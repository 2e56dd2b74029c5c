"""
Plain-text rendering of normalized entries.

Output is deterministic for equal input: the only values that appear are the
ones already carried by the entries, laid out in a fixed per-kind order.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from clickup_context.constants import ResourceKind, kind_name, kind_spec
from clickup_context.models import NormalizedEntry

INDENT = "   "


def empty_text(kind: str | ResourceKind) -> str:
    return f"No {kind_name(kind)} found."


def heading(kind: str | ResourceKind) -> str:
    name = kind_name(kind)
    return f"ClickUp {name[:1].upper()}{name[1:]}:"


def _ordered_details(kind: str | ResourceKind, entry: NormalizedEntry) -> Iterable[tuple[str, str]]:
    order = kind_spec(kind).field_order
    for label in order:
        if label in entry.details:
            yield label, entry.details[label]
    for label, value in entry.details.items():
        if label not in order:
            yield label, value


def render_entry(kind: str | ResourceKind, index: int, entry: NormalizedEntry) -> str:
    """Render one numbered entry block (no trailing blank line)."""
    lines = [
        f"{index}. {kind_spec(kind).label}: {entry.primary_label}",
        f"{INDENT}ID: {entry.id}",
    ]
    if entry.status_label:
        lines.append(f"{INDENT}Status: {entry.status_label}")
    for label, value in _ordered_details(kind, entry):
        lines.append(f"{INDENT}{label}: {value}")
    for link in entry.links:
        lines.append(f"{INDENT}URL: {link}")
    if entry.error:
        lines.append(f"{INDENT}Error: {entry.error}")
    return "\n".join(lines)


def render_body(kind: str | ResourceKind, entries: Sequence[NormalizedEntry]) -> str:
    """Render the numbered list without its heading line."""
    if not entries:
        return empty_text(kind)
    return "\n\n".join(render_entry(kind, i, entry) for i, entry in enumerate(entries, start=1))


def render(kind: str | ResourceKind, entries: Sequence[NormalizedEntry]) -> str:
    """
    Render entries as a text block.

    Empty input gives "No <kind> found."; otherwise a "ClickUp <Kind>:" heading,
    a blank line, and one numbered block per entry separated by blank lines.
    """
    if not entries:
        return empty_text(kind)
    return f"{heading(kind)}\n\n{render_body(kind, entries)}"


def render_error(kind: str | ResourceKind, message: str) -> str:
    """Single-line error text for a kind that could not be fetched."""
    return f"Error fetching {kind_name(kind)}: {message}"
