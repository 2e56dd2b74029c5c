"""
Context aggregation.

This module provides the ContextAggregator class, which turns a request for
one or several resource kinds into rendered text. Each kind is fetched,
formatted and rendered independently; in multi-kind mode the kinds run
concurrently and a failure stays inside its own section.

    aggregate_many (kinds run concurrently, combined in the caller's order)
         │
         ├── tasks ───► fetch ──► format ──► render
         ├── spaces ──► fetch ──► format ──► render
         └── lists ───► spaces ─┬► space 1 ─┬► folderless lists
                                │           └► folders ─► folder lists
                                └► space 2 ─► ...
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Iterable, Sequence, TypeVar

from clickup_context.client import UpstreamClient
from clickup_context.constants import (
    DOCUMENT_HEADER,
    NO_DATA_TEXT,
    ResourceKind,
    kind_name,
)
from clickup_context.exceptions import (
    ClickUpContextError,
    UnsupportedKindError,
    UpstreamError,
)
from clickup_context.formatting import (
    extract_items,
    format_entries,
    render,
    render_body,
    render_error,
    safe_get,
)
from clickup_context.models import (
    CombinedDocument,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    NormalizedEntry,
    RenderedSection,
)
from clickup_context.tokens import TokenStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUMMARY_FOOTER = "Use this information as context for your responses about ClickUp projects and tasks."

# Kinds fetched per space after listing the workspace's spaces
_SPACE_CHILDREN = frozenset({ResourceKind.LISTS, ResourceKind.FOLDERS})

_NOT_ARCHIVED = {"archived": "false"}


# =============================================================================
# Fan-out Primitives
# =============================================================================


async def gather_settled(aws: Iterable[Awaitable[T]]) -> list[T | Exception]:
    """
    Run awaitables concurrently and return every result in input order.

    An Exception raised by one unit is returned in its slot instead of
    propagating; the other units are unaffected. Cancellation and other
    BaseExceptions still propagate.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
    return list(results)


def describe_error(error: Exception) -> str:
    """Text for a failed kind."""
    if isinstance(error, ClickUpContextError):
        return str(error)
    return f"Unexpected error: {error}" if str(error) else f"Unexpected error: {type(error).__name__}"


def render_outcome(outcome: FetchOutcome) -> RenderedSection:
    """Render a fetch outcome into its section."""
    if isinstance(outcome, FetchFailure):
        line = render_error(outcome.kind, outcome.error)
        return RenderedSection(kind=outcome.kind, text=line, body=line, error=outcome.error)
    return RenderedSection(
        kind=outcome.kind,
        text=render(outcome.kind, outcome.entries),
        body=render_body(outcome.kind, outcome.entries),
    )


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def combine_sections(sections: Sequence[RenderedSection]) -> CombinedDocument:
    """
    Merge rendered sections into one document.

    Sections appear in the given order under an upper-cased kind heading,
    followed by a summary naming the kinds that were and were not retrieved.
    When no section succeeded the text is NO_DATA_TEXT.
    """
    included = _unique(s.kind for s in sections if s.ok)
    failed = _unique(s.kind for s in sections if not s.ok)

    if not included:
        return CombinedDocument(text=NO_DATA_TEXT, failed_kinds=failed)

    lines = [DOCUMENT_HEADER, ""]
    for section in sections:
        lines.extend([f"== {section.kind.upper()} ==", "", section.body, ""])

    lines.extend(["== SUMMARY ==", "", f"This overview includes information from {', '.join(included)}."])
    if failed:
        lines.append(f"Could not retrieve: {', '.join(failed)}.")
    lines.append(SUMMARY_FOOTER)

    return CombinedDocument(text="\n".join(lines) + "\n", kinds=included, failed_kinds=failed)


# =============================================================================
# Aggregator
# =============================================================================


class ContextAggregator:
    """
    Fetch, format and render ClickUp resources for AI context.

    Both collaborators are injected so tests can substitute fakes.

    Usage:
        aggregator = ContextAggregator(client=ClickUpClient(), tokens=TokenStore())

        section = await aggregator.aggregate_one("9001", "alice", "tasks", limit=5)
        document = await aggregator.aggregate_many(
            "9001", "alice", ["tasks", "spaces", "lists"], limit=5,
        )
        detail = await aggregator.task_detail("alice", "86a1b2c3")
    """

    def __init__(self, client: UpstreamClient, tokens: TokenStore) -> None:
        self._client = client
        self._tokens = tokens

    # =========================================================================
    # Upstream Fetching
    # =========================================================================

    async def _space_folders(self, space_id: str, token: str) -> list[Any]:
        payload = await self._client.fetch(f"/space/{space_id}/folder", token=token, params=_NOT_ARCHIVED)
        return extract_items(payload, "folders")

    async def _space_lists(self, space_id: str, token: str) -> list[Any]:
        """
        Fetch every list of a space: folderless lists first, then the lists
        of each folder in folder order.

        A failing folder is skipped. The space fails only when neither its
        folderless lists nor its folders could be read.
        """
        folderless, folders = await gather_settled([
            self._client.fetch(f"/space/{space_id}/list", token=token, params=_NOT_ARCHIVED),
            self._space_folders(space_id, token),
        ])
        if isinstance(folderless, Exception) and isinstance(folders, Exception):
            raise folderless

        items: list[Any] = []
        if isinstance(folderless, Exception):
            logger.warning("Failed to fetch folderless lists for space %s: %s", space_id, folderless)
        else:
            items.extend(extract_items(folderless, "lists"))

        if isinstance(folders, Exception):
            logger.warning("Failed to fetch folders for space %s: %s", space_id, folders)
            return items

        folder_ids = [str(folder_id) for folder_id in (safe_get(f, "id") for f in folders) if folder_id is not None]
        results = await gather_settled(
            self._client.fetch(f"/folder/{folder_id}/list", token=token, params=_NOT_ARCHIVED)
            for folder_id in folder_ids
        )
        for folder_id, result in zip(folder_ids, results):
            if isinstance(result, Exception):
                logger.warning("Failed to fetch lists for folder %s: %s", folder_id, result)
                continue
            items.extend(extract_items(result, "lists"))
        return items

    async def _fetch_space_children(
        self,
        workspace_id: str,
        kind: ResourceKind,
        token: str,
        limit: int,
    ) -> list[Any]:
        """Fetch spaces, then the lists or folders of the first `limit` spaces."""
        spaces_payload = await self._client.fetch(
            f"/team/{workspace_id}/space",
            token=token,
            params=_NOT_ARCHIVED,
        )
        space_ids = [
            str(space_id)
            for space_id in (safe_get(s, "id") for s in extract_items(spaces_payload, "spaces")[:limit])
            if space_id is not None
        ]
        if not space_ids:
            return []

        fetch_children = self._space_lists if kind is ResourceKind.LISTS else self._space_folders
        logger.debug("Fetching %s for %d spaces", kind.value, len(space_ids))
        results = await gather_settled(fetch_children(space_id, token) for space_id in space_ids)

        items: list[Any] = []
        errors: list[Exception] = []
        for space_id, result in zip(space_ids, results):
            if isinstance(result, Exception):
                logger.warning("Failed to fetch %s for space %s: %s", kind.value, space_id, result)
                errors.append(result)
                continue
            items.extend(result)

        if len(errors) == len(space_ids):
            raise errors[0]
        return items

    async def fetch_raw(
        self,
        workspace_id: str,
        kind: ResourceKind,
        token: str,
        limit: int,
        query: str | None = None,
        task_id: str | None = None,
        list_id: str | None = None,
    ) -> Any:
        """
        Fetch the raw payload for one kind.

        Tasks come from the workspace's recently updated tasks, or from a
        single list when list_id is given (query is not applied there).

        Raises:
            UpstreamError: If the ClickUp call fails
            ClickUpContextError: If comments are requested without a task id
            UnsupportedKindError: For the unsupported variant
        """
        if kind is ResourceKind.TASKS:
            params: dict[str, Any] = {"page": 0, "order_by": "updated", "reverse": "true"}
            if list_id:
                return await self._client.fetch(f"/list/{list_id}/task", token=token, params=params)
            if query:
                params["search"] = query
            return await self._client.fetch(f"/team/{workspace_id}/task", token=token, params=params)

        if kind is ResourceKind.SPACES:
            return await self._client.fetch(
                f"/team/{workspace_id}/space",
                token=token,
                params=_NOT_ARCHIVED,
            )

        if kind in _SPACE_CHILDREN:
            return await self._fetch_space_children(workspace_id, kind, token, limit)

        if kind is ResourceKind.COMMENTS:
            if not task_id:
                raise ClickUpContextError("A task_id is required to fetch comments")
            return await self._client.fetch(f"/task/{task_id}/comment", token=token)

        raise UnsupportedKindError(kind.value)

    async def fetch_entries(
        self,
        workspace_id: str,
        user_id: str,
        kind: ResourceKind,
        limit: int,
        query: str | None = None,
        task_id: str | None = None,
        list_id: str | None = None,
    ) -> list[NormalizedEntry]:
        """Resolve the user's token, fetch one kind and format it."""
        token = self._tokens.resolve(user_id)
        raw = await self.fetch_raw(
            workspace_id, kind, token, limit, query=query, task_id=task_id, list_id=list_id
        )
        entries = format_entries(kind, raw)
        if kind is ResourceKind.TASKS:
            entries = entries[:limit]
        logger.debug("Fetched %d %s for workspace %s", len(entries), kind.value, workspace_id)
        return entries

    async def _collect(
        self,
        workspace_id: str,
        user_id: str,
        kind: ResourceKind,
        limit: int,
        query: str | None,
        task_id: str | None,
        list_id: str | None = None,
    ) -> FetchOutcome:
        entries = await self.fetch_entries(
            workspace_id, user_id, kind, limit, query=query, task_id=task_id, list_id=list_id
        )
        return FetchSuccess(kind=kind.value, entries=entries)

    # =========================================================================
    # Public Operations
    # =========================================================================

    async def aggregate_one(
        self,
        workspace_id: str,
        user_id: str,
        kind: str | ResourceKind,
        limit: int = 10,
        query: str | None = None,
        task_id: str | None = None,
        list_id: str | None = None,
    ) -> RenderedSection:
        """
        Fetch, format and render a single kind.

        Args:
            workspace_id: ClickUp workspace (team) id
            user_id: Identity whose token is used
            kind: Resource kind
            limit: Maximum tasks, or spaces visited for lists/folders
            query: Free-text filter for tasks
            task_id: Task whose comments are fetched
            list_id: List whose tasks are fetched instead of the workspace's

        Returns:
            The rendered section; an upstream failure is rendered as a single
            error line instead of raising.

        Raises:
            UnsupportedKindError: If the kind is not supported
            TokenResolutionError: If the user has no token
        """
        _check_limit(limit)
        resource_kind = ResourceKind.parse(kind)
        if not resource_kind.is_supported:
            raise UnsupportedKindError(kind_name(kind))

        try:
            outcome = await self._collect(workspace_id, user_id, resource_kind, limit, query, task_id, list_id)
        except UpstreamError as e:
            logger.error("Error fetching %s from ClickUp: %s", resource_kind.value, e)
            outcome = FetchFailure(kind=resource_kind.value, error=describe_error(e))

        return render_outcome(outcome)

    async def aggregate_many(
        self,
        workspace_id: str,
        user_id: str,
        kinds: Sequence[str | ResourceKind],
        limit: int = 10,
        query: str | None = None,
        task_id: str | None = None,
        list_id: str | None = None,
    ) -> CombinedDocument:
        """
        Fetch several kinds concurrently and merge them into one document.

        Unsupported kinds are skipped with a warning. Every other kind yields
        a section, either its rendered entries or an inline error line, in
        the order requested. Duplicated kinds are fetched and rendered twice.
        """
        _check_limit(limit)
        requested: list[ResourceKind] = []
        for kind in kinds:
            resource_kind = ResourceKind.parse(kind)
            if not resource_kind.is_supported:
                logger.warning("Skipping unsupported resource kind: %s", kind_name(kind))
                continue
            requested.append(resource_kind)

        results = await gather_settled(
            self._collect(workspace_id, user_id, kind, limit, query, task_id, list_id) for kind in requested
        )

        outcomes: list[FetchOutcome] = []
        for kind, result in zip(requested, results):
            if isinstance(result, Exception):
                logger.error("Error fetching %s from ClickUp: %s", kind.value, result)
                outcomes.append(FetchFailure(kind=kind.value, error=describe_error(result)))
            else:
                outcomes.append(result)

        document = combine_sections([render_outcome(o) for o in outcomes])
        logger.info(
            "Combined %d kinds for workspace %s (%d failed)",
            len(outcomes),
            workspace_id,
            len(document.failed_kinds),
        )
        return document

    async def task_detail(self, user_id: str, task_id: str) -> RenderedSection:
        """
        Fetch and render one task by id.

        An upstream failure (including an unknown task) is rendered as a
        single error line, as in aggregate_one.

        Raises:
            TokenResolutionError: If the user has no token
        """
        token = self._tokens.resolve(user_id)
        kind = ResourceKind.TASKS.value
        try:
            payload = await self._client.fetch(f"/task/{task_id}", token=token)
        except UpstreamError as e:
            logger.error("Error fetching task %s from ClickUp: %s", task_id, e)
            return render_outcome(FetchFailure(kind=kind, error=describe_error(e)))

        entries = format_entries(kind, [payload])
        logger.debug("Fetched task %s", task_id)
        return render_outcome(FetchSuccess(kind=kind, entries=entries))


def _check_limit(limit: int) -> None:
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
