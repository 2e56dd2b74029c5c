"""
Pydantic Input Models for ClickUp Context MCP Tools.

This module defines all input validation models used by MCP tools.
Each model includes proper field constraints, descriptions, and examples.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clickup_context.constants import ResourceKind


class BaseMCPInput(BaseModel):
    """Base input model with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


class WorkspaceScopedInput(BaseMCPInput):
    """Fields shared by every workspace-level request."""

    workspace_id: Optional[str] = Field(
        default=None,
        description="ClickUp workspace (team) ID. Falls back to the configured default workspace.",
        pattern=r"^\d+$",
    )
    user_id: Optional[str] = Field(
        default=None,
        description="User whose registered ClickUp token is used. Falls back to the default user.",
        min_length=1,
        max_length=200,
    )
    limit: Optional[int] = Field(
        default=None,
        description="Maximum tasks returned, or spaces visited for lists/folders (defaults to the configured limit)",
        ge=0,
        le=100,
    )
    query: Optional[str] = Field(
        default=None,
        description="Free-text filter applied to tasks (e.g., the user's last message)",
        max_length=1000,
    )
    task_id: Optional[str] = Field(
        default=None,
        description="Task ID whose comments are fetched (required for 'comments')",
        min_length=1,
        max_length=64,
    )
    list_id: Optional[str] = Field(
        default=None,
        description="List ID; when set, 'tasks' come from this list instead of the whole workspace",
        min_length=1,
        max_length=64,
    )


# =============================================================================
# Context Input Models
# =============================================================================


class ContextInput(WorkspaceScopedInput):
    """Input for fetching a single resource kind."""

    kind: str = Field(
        default=ResourceKind.TASKS.value,
        description="Resource kind: 'tasks', 'spaces', 'lists', 'folders', or 'comments'",
    )

    @field_validator("kind")
    @classmethod
    def normalize_kind(cls, v: str) -> str:
        return v.strip().lower()


class OverviewInput(WorkspaceScopedInput):
    """Input for the combined workspace overview."""

    kinds: List[str] = Field(
        default_factory=lambda: [ResourceKind.TASKS.value, ResourceKind.SPACES.value, ResourceKind.LISTS.value],
        description="Resource kinds in display order (e.g., ['tasks', 'spaces', 'lists'])",
        min_length=1,
        max_length=20,
    )

    @field_validator("kinds")
    @classmethod
    def normalize_kinds(cls, v: List[str]) -> List[str]:
        return [kind.strip().lower() for kind in v]


class TaskDetailInput(BaseMCPInput):
    """Input for fetching a single task."""

    task_id: str = Field(
        ...,
        description="ClickUp task ID (e.g., '86a1b2c3')",
        min_length=1,
        max_length=64,
    )
    user_id: Optional[str] = Field(
        default=None,
        description="User whose registered ClickUp token is used",
        min_length=1,
        max_length=200,
    )


class WorkspacesInput(BaseMCPInput):
    """Input for listing the workspaces a token can access."""

    user_id: Optional[str] = Field(
        default=None,
        description="User whose registered ClickUp token is used",
        min_length=1,
        max_length=200,
    )


class RegisterTokenInput(BaseMCPInput):
    """Input for registering a user's ClickUp personal API token."""

    user_id: str = Field(
        ...,
        description="User identifier the token is stored under",
        min_length=1,
        max_length=200,
    )
    token: str = Field(
        ...,
        description="ClickUp personal API token (starts with 'pk_')",
        min_length=6,
        max_length=200,
    )
