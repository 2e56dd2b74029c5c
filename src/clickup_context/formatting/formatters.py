"""
Resource formatters.

One pure function per resource kind maps a raw ClickUp payload to a list of
NormalizedEntry objects. Formatting never raises: a payload of the wrong
shape yields an empty list and an item that cannot be read yields a degraded
entry carrying only its id, a best-effort label, and an error marker.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from clickup_context.constants import (
    UNKNOWN_ID,
    KindSpec,
    ResourceKind,
    kind_name,
    kind_spec,
)
from clickup_context.exceptions import MalformedPayloadError
from clickup_context.formatting.payload import (
    clean_text,
    safe_get,
    safe_list,
    safe_str,
    to_iso_date,
)
from clickup_context.models import NormalizedEntry

logger = logging.getLogger(__name__)

EntryFormatter = Callable[[str, KindSpec, dict[str, Any]], NormalizedEntry]


# =============================================================================
# Payload Unwrapping
# =============================================================================


def extract_items(payload: Any, container_key: str) -> list[Any]:
    """
    Return the item list from a payload.

    ClickUp wraps lists under a kind-specific key ({"tasks": [...]}), but
    flattened or pre-extracted payloads arrive as bare lists. Both are
    accepted; any other shape yields [].
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and container_key:
        items = payload.get(container_key)
        if isinstance(items, list):
            return items
    return []


def _require_mapping(item: Any) -> dict[str, Any]:
    if not isinstance(item, dict):
        raise MalformedPayloadError(f"Expected a JSON object, got {type(item).__name__}")
    return item


def _yes_no(value: Any) -> str | None:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return None


def _base_entry(kind: str, spec: KindSpec, item: dict[str, Any]) -> NormalizedEntry:
    return NormalizedEntry(
        kind=kind,
        id=safe_str(item, "id", UNKNOWN_ID),
        primary_label=safe_str(item, "name", spec.placeholder_name),
    )


def _put(entry: NormalizedEntry, label: str, value: str | None) -> None:
    if value:
        entry.details[label] = value


# =============================================================================
# Per-Kind Entry Formatters
# =============================================================================


def _assignee_name(assignee: Any) -> str:
    return (
        safe_str(assignee, "username")
        or safe_str(assignee, "email")
        or "Unknown user"
    )


def _tag_name(tag: Any) -> str | None:
    if isinstance(tag, str):
        return tag.strip() or None
    return safe_str(tag, "name")


def _format_task(kind: str, spec: KindSpec, item: dict[str, Any]) -> NormalizedEntry:
    entry = _base_entry(kind, spec, item)
    entry.status_label = safe_str(item, "status.status")

    _put(entry, "Priority", safe_str(item, "priority.priority"))
    _put(entry, "Due", to_iso_date(safe_get(item, "due_date")))
    _put(entry, "Start", to_iso_date(safe_get(item, "start_date")))
    _put(entry, "Description", clean_text(safe_get(item, "description") or safe_get(item, "text_content")))

    assignees = [_assignee_name(a) for a in safe_list(item, "assignees")]
    _put(entry, "Assigned to", ", ".join(assignees))

    tags = [name for name in (_tag_name(t) for t in safe_list(item, "tags")) if name]
    _put(entry, "Tags", ", ".join(tags))

    estimate = safe_get(item, "time_estimate")
    if isinstance(estimate, (int, float)) and not isinstance(estimate, bool) and estimate > 0:
        _put(entry, "Time Estimate", f"{round(estimate / 60000)} min")
    _put(entry, "List", safe_str(item, "list.name"))

    url = safe_str(item, "url")
    if url:
        entry.links.append(url)
    return entry


def _format_space(kind: str, spec: KindSpec, item: dict[str, Any]) -> NormalizedEntry:
    entry = _base_entry(kind, spec, item)

    statuses = [
        safe_str(s, "status") or safe_str(s, "name")
        for s in safe_list(item, "statuses")
    ]
    _put(entry, "Statuses", ", ".join(s for s in statuses if s))
    _put(entry, "Private", _yes_no(safe_get(item, "private")))
    if safe_get(item, "archived") is True:
        _put(entry, "Archived", "Yes")
    return entry


def _format_list(kind: str, spec: KindSpec, item: dict[str, Any]) -> NormalizedEntry:
    entry = _base_entry(kind, spec, item)

    status = safe_get(item, "status")
    if isinstance(status, dict):
        entry.status_label = safe_str(status, "status")
    else:
        entry.status_label = safe_str(item, "status")

    _put(entry, "Due", to_iso_date(safe_get(item, "due_date")))
    _put(entry, "Task Count", safe_str(item, "task_count"))
    folder = safe_str(item, "folder.name")
    # Folderless lists sit in a hidden folder ClickUp names "hidden"
    if folder and not safe_get(item, "folder.hidden", False):
        _put(entry, "Folder", folder)
    _put(entry, "Space", safe_str(item, "space.name"))
    return entry


def _format_folder(kind: str, spec: KindSpec, item: dict[str, Any]) -> NormalizedEntry:
    entry = _base_entry(kind, spec, item)

    lists = safe_list(item, "lists")
    if lists:
        _put(entry, "Lists", str(len(lists)))
    _put(entry, "Task Count", safe_str(item, "task_count"))
    _put(entry, "Space", safe_str(item, "space.name"))
    if safe_get(item, "hidden") is True:
        _put(entry, "Hidden", "Yes")
    return entry


def _format_comment(kind: str, spec: KindSpec, item: dict[str, Any]) -> NormalizedEntry:
    entry = NormalizedEntry(
        kind=kind,
        id=safe_str(item, "id", UNKNOWN_ID),
        primary_label=(
            safe_str(item, "user.username")
            or safe_str(item, "user.email")
            or spec.placeholder_name
        ),
    )
    _put(entry, "Date", to_iso_date(safe_get(item, "date")))
    _put(entry, "Text", clean_text(safe_get(item, "comment_text")))
    if safe_get(item, "resolved") is True:
        _put(entry, "Resolved", "Yes")
    return entry


def _format_generic(kind: str, spec: KindSpec, item: dict[str, Any]) -> NormalizedEntry:
    return NormalizedEntry(
        kind=kind,
        id=safe_str(item, "id", UNKNOWN_ID),
        primary_label=safe_str(item, "name") or safe_str(item, "title") or spec.placeholder_name,
    )


_ENTRY_FORMATTERS: dict[ResourceKind, EntryFormatter] = {
    ResourceKind.TASKS: _format_task,
    ResourceKind.SPACES: _format_space,
    ResourceKind.LISTS: _format_list,
    ResourceKind.FOLDERS: _format_folder,
    ResourceKind.COMMENTS: _format_comment,
}


# =============================================================================
# Public API
# =============================================================================


def degraded_entry(kind: str, item: Any) -> NormalizedEntry:
    """Minimal placeholder for an item that could not be formatted."""
    spec = kind_spec(kind)
    return NormalizedEntry(
        kind=kind,
        id=safe_str(item, "id", UNKNOWN_ID),
        primary_label=safe_str(item, "name", spec.placeholder_name),
        error=f"Error formatting {kind} data",
    )


def format_entries(kind: str | ResourceKind, payload: Any) -> list[NormalizedEntry]:
    """
    Map a raw payload to normalized entries.

    Args:
        kind: Resource kind; unknown kinds use the generic formatter and look
            for items under a key named after the kind
        payload: Raw JSON from ClickUp, wrapped or a bare list

    Returns:
        One entry per raw item, in payload order
    """
    name = kind_name(kind)
    resource_kind = ResourceKind.parse(kind)
    spec = kind_spec(kind)
    formatter = _ENTRY_FORMATTERS.get(resource_kind, _format_generic)
    container_key = spec.container_key or name

    if payload is not None and not isinstance(payload, (dict, list)):
        logger.warning("%s payload is not in expected format: %s", name, type(payload).__name__)

    items = extract_items(payload, container_key)
    logger.debug("Formatting %d %s items", len(items), name)

    entries: list[NormalizedEntry] = []
    for item in items:
        try:
            entries.append(formatter(name, spec, _require_mapping(item)))
        except Exception as e:
            logger.warning("Error formatting %s item %s: %s", name, safe_str(item, "id", UNKNOWN_ID), e)
            entries.append(degraded_entry(name, item))
    return entries
