"""
Constants and resource-kind registry for the ClickUp context provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CLICKUP_API_V2 = "https://api.clickup.com/api/v2"

# Free-text fields (descriptions, comment bodies) are cut to this length
TEXT_MAX_LENGTH = 100
ELLIPSIS = "..."

UNKNOWN_ID = "unknown-id"

DOCUMENT_HEADER = "ClickUp Workspace Overview:"
NO_DATA_TEXT = "No data available."


class ResourceKind(str, Enum):
    """Category of upstream entity being fetched."""

    TASKS = "tasks"
    SPACES = "spaces"
    LISTS = "lists"
    FOLDERS = "folders"
    COMMENTS = "comments"
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, value: str | ResourceKind) -> ResourceKind:
        """Map a raw kind string to a member, UNSUPPORTED when unknown."""
        if isinstance(value, ResourceKind):
            return value
        try:
            kind = cls(str(value).strip().lower())
        except ValueError:
            return cls.UNSUPPORTED
        return kind

    @property
    def is_supported(self) -> bool:
        return self is not ResourceKind.UNSUPPORTED


@dataclass(frozen=True)
class KindSpec:
    """Static description of how one resource kind is presented."""

    label: str
    placeholder_name: str
    container_key: str
    field_order: tuple[str, ...]


KIND_SPECS: dict[ResourceKind, KindSpec] = {
    ResourceKind.TASKS: KindSpec(
        label="Task",
        placeholder_name="Unnamed Task",
        container_key="tasks",
        field_order=(
            "Priority",
            "Due",
            "Start",
            "Description",
            "Assigned to",
            "Tags",
            "Time Estimate",
            "List",
        ),
    ),
    ResourceKind.SPACES: KindSpec(
        label="Space",
        placeholder_name="Unnamed Space",
        container_key="spaces",
        field_order=("Statuses", "Private", "Archived"),
    ),
    ResourceKind.LISTS: KindSpec(
        label="List",
        placeholder_name="Unnamed List",
        container_key="lists",
        field_order=("Due", "Task Count", "Folder", "Space"),
    ),
    ResourceKind.FOLDERS: KindSpec(
        label="Folder",
        placeholder_name="Unnamed Folder",
        container_key="folders",
        field_order=("Lists", "Task Count", "Space", "Hidden"),
    ),
    ResourceKind.COMMENTS: KindSpec(
        label="Comment by",
        placeholder_name="Unknown",
        container_key="comments",
        field_order=("Date", "Text", "Resolved"),
    ),
}

GENERIC_SPEC = KindSpec(
    label="Item",
    placeholder_name="Unknown",
    container_key="",
    field_order=(),
)


def kind_spec(kind: str | ResourceKind) -> KindSpec:
    """Registry entry for a kind; unknown kinds get the generic spec."""
    return KIND_SPECS.get(ResourceKind.parse(kind), GENERIC_SPEC)


def kind_name(kind: str | ResourceKind) -> str:
    """Plain string name of a kind as the caller spelled it."""
    if isinstance(kind, ResourceKind):
        return kind.value
    return str(kind).strip().lower()
