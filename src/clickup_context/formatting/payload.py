"""
Null-safe helpers for reading raw ClickUp payloads.

ClickUp responses are only partially documented: any field may be absent or
null. Formatters read every nested value through safe_get so that a missing
node yields a default instead of an exception.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from clickup_context.constants import ELLIPSIS, TEXT_MAX_LENGTH

_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_HEADING_RE = re.compile(r"^[ \t]{0,3}#{1,6}[ \t]?", re.MULTILINE)
_EMPHASIS_RE = re.compile(r"\*\*|\*")
_NEWLINES_RE = re.compile(r"[ \t]*(\r?\n)+[ \t]*")


def safe_get(obj: Any, path: str, default: Any = None) -> Any:
    """
    Read a dotted path from a JSON tree.

    Dict keys and list indexes are both supported ("assignees.0.email").
    Returns default when any node along the path is missing or null.
    """
    current = obj
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.lstrip("-").isdigit():
            index = int(part)
            current = current[index] if -len(current) <= index < len(current) else None
        else:
            return default
        if current is None:
            return default
    return current


def safe_list(obj: Any, path: str) -> list[Any]:
    """Read a path that should hold a list; anything else becomes []."""
    value = safe_get(obj, path)
    return value if isinstance(value, list) else []


def safe_str(obj: Any, path: str, default: str | None = None) -> str | None:
    """Read a scalar path as a string; containers and blanks become default."""
    value = safe_get(obj, path)
    if value is None or isinstance(value, (dict, list)):
        return default
    text = str(value).strip()
    return text or default


def to_iso_date(value: Any) -> str | None:
    """
    Normalize a ClickUp timestamp to ISO-8601 UTC.

    Accepts epoch milliseconds (int, float or numeric string, which is what
    ClickUp sends) and ISO-8601 strings. Returns None when unparsable.
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, (int, float)):
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            if _NUMERIC_RE.match(text):
                dt = datetime.fromtimestamp(float(text) / 1000, tz=timezone.utc)
            else:
                dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
        else:
            return None
    except (ValueError, OverflowError, OSError):
        return None

    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def strip_markup(text: str) -> str:
    """Remove lightweight markdown: emphasis, headings, and link targets."""
    text = _LINK_RE.sub(r"\1", text)
    text = _HEADING_RE.sub("", text)
    text = _EMPHASIS_RE.sub("", text)
    text = _NEWLINES_RE.sub(" ", text)
    return text.strip()


def truncate(text: str, max_length: int = TEXT_MAX_LENGTH) -> str:
    """Cut text to max_length characters, marking the cut with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


def clean_text(value: Any, max_length: int = TEXT_MAX_LENGTH) -> str | None:
    """Strip markup and truncate a free-text field; blank input becomes None."""
    if value is None or isinstance(value, (dict, list)):
        return None
    cleaned = strip_markup(str(value))
    if not cleaned:
        return None
    return truncate(cleaned, max_length)
