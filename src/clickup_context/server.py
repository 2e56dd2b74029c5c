#!/usr/bin/env python3
"""
ClickUp Context MCP Server.

This server exposes ClickUp workspace data as AI-consumable text. Each tool
resolves the caller's ClickUp token, fetches the requested resources
concurrently and returns a plain-text document suitable for grounding a
conversation.

Features:
    - Single-kind context (tasks, spaces, lists, folders, comments)
    - Single task details
    - Combined workspace overview with per-kind error isolation
    - Workspace discovery
    - Per-user token registration

Environment Variables:
    CLICKUP_API_TOKEN       Personal token registered for DEFAULT_USER_ID
    DEFAULT_USER_ID         Identity used when a tool call names no user
    DEFAULT_WORKSPACE_ID    Workspace used when a tool call names none
    REQUEST_TIMEOUT         ClickUp HTTP timeout in seconds
    LOG_LEVEL               Logging level
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from mcp.server.fastmcp import Context, FastMCP

from clickup_context.aggregator import ContextAggregator
from clickup_context.client import ClickUpClient
from clickup_context.exceptions import (
    ClickUpContextError,
    InvalidTokenError,
    TokenResolutionError,
    UnsupportedKindError,
    UpstreamError,
)
from clickup_context.formatting import format_entries, render
from clickup_context.settings import Settings, get_settings
from clickup_context.tokens import TokenStore
from clickup_context.tools.inputs import (
    ContextInput,
    OverviewInput,
    RegisterTokenInput,
    TaskDetailInput,
    WorkspacesInput,
)

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Management
# =============================================================================


def build_state(settings: Settings, client: ClickUpClient) -> dict[str, Any]:
    """Wire the token store and aggregator around a client."""
    tokens = TokenStore()
    if settings.clickup_api_token:
        tokens.store_token(settings.default_user_id, settings.clickup_api_token)
    return {
        "settings": settings,
        "client": client,
        "tokens": tokens,
        "aggregator": ContextAggregator(client=client, tokens=tokens),
    }


@asynccontextmanager
async def lifespan(mcp: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """
    Manage the ClickUp client lifecycle.

    Creates the HTTP client and token store on startup and closes the client
    on shutdown.
    """
    logger.info("Initializing ClickUp Context MCP Server...")
    settings = get_settings()
    client = ClickUpClient(
        base_url=settings.clickup_api_base_url,
        timeout=settings.request_timeout,
    )
    try:
        state = build_state(settings, client)
        logger.info("Registered tokens at startup: %d", len(state["tokens"]))
        yield state
    finally:
        await client.close()
        logger.info("ClickUp client closed")


# Initialize FastMCP server
mcp = FastMCP(
    "clickup_context",
    lifespan=lifespan,
)


def get_state(ctx: Context) -> dict[str, Any]:
    """Get the lifespan state from context."""
    return ctx.request_context.lifespan_context


def _resolve_ids(
    params: ContextInput | OverviewInput | TaskDetailInput | WorkspacesInput,
    settings: Settings,
) -> tuple[str, str]:
    workspace_id = getattr(params, "workspace_id", None) or settings.default_workspace_id
    user_id = params.user_id or settings.default_user_id
    return workspace_id, user_id


def _resolve_limit(params: ContextInput | OverviewInput, settings: Settings) -> int:
    return params.limit if params.limit is not None else settings.default_limit


# =============================================================================
# Error Handling
# =============================================================================


def error_message(message: str, hint: str | None = None) -> str:
    text = f"Error: {message}"
    if hint:
        text += f"\n\nSuggestion: {hint}"
    return text


def success_message(message: str) -> str:
    return f"Success: {message}"


def handle_error(e: Exception, operation: str) -> str:
    """Handle exceptions and return user-friendly error messages."""
    logger.exception("Error in %s: %s", operation, e)

    if isinstance(e, TokenResolutionError):
        return error_message(
            str(e),
            "Register a token with clickup_register_token or set CLICKUP_API_TOKEN.",
        )
    elif isinstance(e, InvalidTokenError):
        return error_message(f"Invalid token: {e}")
    elif isinstance(e, UnsupportedKindError):
        return error_message(
            str(e),
            "Use one of: tasks, spaces, lists, folders, comments.",
        )
    elif isinstance(e, UpstreamError):
        return error_message(f"ClickUp API error: {e}")
    elif isinstance(e, (ClickUpContextError, ValueError)):
        return error_message(f"Invalid input: {e}")
    else:
        return error_message(f"Unexpected error: {e}")


# =============================================================================
# Context Tools
# =============================================================================


@mcp.tool(
    name="clickup_get_context",
    annotations={
        "title": "Get ClickUp Context",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def clickup_get_context(params: ContextInput, ctx: Context) -> str:
    """
    Get one kind of ClickUp data as AI-readable text.

    Args:
        params: Request parameters including:
            - kind (str): 'tasks', 'spaces', 'lists', 'folders', or 'comments'
            - workspace_id (str): Workspace to read (defaults to configured)
            - user_id (str): Whose token to use (defaults to configured)
            - limit (int): Max tasks, or spaces visited for lists/folders
            - query (str): Free-text task filter
            - task_id (str): Task whose comments to fetch
            - list_id (str): Read tasks from this list instead of the workspace

    Returns:
        Numbered list of items, a "No <kind> found." sentence, an inline
        error line if ClickUp failed, or an error message.

    Examples:
        - Recent tasks: kind="tasks", limit=5
        - Lists of the first two spaces: kind="lists", limit=2
        - Comments: kind="comments", task_id="86a1b2c3"
        - Tasks of one list: kind="tasks", list_id="901234"
    """
    try:
        state = get_state(ctx)
        workspace_id, user_id = _resolve_ids(params, state["settings"])
        if not workspace_id:
            raise ValueError("workspace_id is required (or set DEFAULT_WORKSPACE_ID)")

        logger.info("Context requested: kind=%s workspace=%s user=%s", params.kind, workspace_id, user_id)
        section = await state["aggregator"].aggregate_one(
            workspace_id,
            user_id,
            params.kind,
            limit=_resolve_limit(params, state["settings"]),
            query=params.query,
            task_id=params.task_id,
            list_id=params.list_id,
        )
        return section.text

    except Exception as e:
        return handle_error(e, "get_context")


@mcp.tool(
    name="clickup_workspace_overview",
    annotations={
        "title": "ClickUp Workspace Overview",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def clickup_workspace_overview(params: OverviewInput, ctx: Context) -> str:
    """
    Get several kinds of ClickUp data merged into one overview.

    Kinds are fetched concurrently. A kind that fails shows an inline error
    line while the others render normally; unknown kinds are skipped.

    Args:
        params: Request parameters including:
            - kinds (list): Kinds in display order (default tasks, spaces, lists)
            - workspace_id, user_id, limit, query, task_id, list_id: as for clickup_get_context

    Returns:
        Combined overview text, or "No data available." if nothing could be
        retrieved.
    """
    try:
        state = get_state(ctx)
        workspace_id, user_id = _resolve_ids(params, state["settings"])
        if not workspace_id:
            raise ValueError("workspace_id is required (or set DEFAULT_WORKSPACE_ID)")

        logger.info("Overview requested: kinds=%s workspace=%s user=%s", params.kinds, workspace_id, user_id)
        document = await state["aggregator"].aggregate_many(
            workspace_id,
            user_id,
            params.kinds,
            limit=_resolve_limit(params, state["settings"]),
            query=params.query,
            task_id=params.task_id,
            list_id=params.list_id,
        )
        return document.text

    except Exception as e:
        return handle_error(e, "workspace_overview")


@mcp.tool(
    name="clickup_get_task",
    annotations={
        "title": "Get ClickUp Task",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def clickup_get_task(params: TaskDetailInput, ctx: Context) -> str:
    """
    Get one ClickUp task by ID as AI-readable text.

    Args:
        params: Request parameters including:
            - task_id (str): Task to fetch
            - user_id (str): Whose token to use (defaults to configured)

    Returns:
        The task block, an inline error line if ClickUp failed, or an error
        message.
    """
    try:
        state = get_state(ctx)
        _, user_id = _resolve_ids(params, state["settings"])

        logger.info("Task requested: task=%s user=%s", params.task_id, user_id)
        section = await state["aggregator"].task_detail(user_id, params.task_id)
        return section.text

    except Exception as e:
        return handle_error(e, "get_task")


# =============================================================================
# Workspace Tools
# =============================================================================


@mcp.tool(
    name="clickup_list_workspaces",
    annotations={
        "title": "List ClickUp Workspaces",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def clickup_list_workspaces(params: WorkspacesInput, ctx: Context) -> str:
    """
    List the workspaces (teams) the user's token can access.

    Use this to discover the workspace_id for the context tools.
    """
    try:
        state = get_state(ctx)
        _, user_id = _resolve_ids(params, state["settings"])
        token = state["tokens"].resolve(user_id)

        payload = await state["client"].fetch("/team", token=token)
        return render("teams", format_entries("teams", payload))

    except Exception as e:
        return handle_error(e, "list_workspaces")


@mcp.tool(
    name="clickup_register_token",
    annotations={
        "title": "Register ClickUp Token",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def clickup_register_token(params: RegisterTokenInput, ctx: Context) -> str:
    """
    Register a ClickUp personal API token for a user.

    The token is kept in memory for the lifetime of the server and replaces
    any token previously stored for the same user.
    """
    try:
        state = get_state(ctx)
        state["tokens"].store_token(params.user_id, params.token)
        return success_message(f"ClickUp token registered for user '{params.user_id}'")

    except Exception as e:
        return handle_error(e, "register_token")


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Main entry point for the ClickUp Context MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
