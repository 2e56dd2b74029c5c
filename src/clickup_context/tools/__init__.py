"""
ClickUp Context MCP Tools Package.

This package provides the input models for the MCP tools exposed by the
server:
    - Context tools (single kind, workspace overview)
    - Workspace discovery
    - Token registration
"""

from clickup_context.tools.inputs import (
    ContextInput,
    OverviewInput,
    RegisterTokenInput,
    TaskDetailInput,
    WorkspacesInput,
)

__all__ = [
    "ContextInput",
    "OverviewInput",
    "TaskDetailInput",
    "WorkspacesInput",
    "RegisterTokenInput",
]
