"""
Pytest Configuration and Fixtures for ClickUp Context Tests.

This module provides fixtures, raw-payload factories, and a recording fake of
the ClickUp upstream client.

Architecture:
    - MockClickUpAPI: Async fake for ClickUpClient.fetch
    - Factories: Generate raw ClickUp JSON (tasks, spaces, lists, ...)
    - Fixtures: Provide token store, aggregator and seeded fakes
    - Markers: Custom pytest markers for test categorization
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from clickup_context.aggregator import ContextAggregator
from clickup_context.exceptions import UpstreamError
from clickup_context.tokens import TokenStore

WORKSPACE_ID = "9001"
USER_ID = "alice"
TOKEN = "pk_alice_token"


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "formatting: Formatter and renderer tests")
    config.addinivalue_line("markers", "aggregation: Aggregator tests")
    config.addinivalue_line("markers", "client: HTTP client tests")
    config.addinivalue_line("markers", "server: MCP tool tests")
    config.addinivalue_line("markers", "errors: Error handling tests")


# =============================================================================
# ID Generators
# =============================================================================


class IDGenerator:
    """Sequential ID generator for test objects."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        """Reset counter (call in fixtures)."""
        cls._counter = 0

    @classmethod
    def next_id(cls, prefix: str = "") -> str:
        """Generate next unique ID."""
        cls._counter += 1
        return f"{prefix}{cls._counter}"

    @classmethod
    def task_id(cls) -> str:
        """ClickUp task ids are short alphanumerics."""
        return cls.next_id("86a")

    @classmethod
    def numeric_id(cls) -> str:
        """Spaces, lists and folders use numeric ids."""
        return cls.next_id("90")


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop unset keys so payloads mimic ClickUp omitting fields."""
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# Raw Payload Factories
# =============================================================================


class RawTaskFactory:
    """Factory for raw ClickUp task JSON."""

    @staticmethod
    def create(
        id: str | None = None,
        name: str | None = "Test Task",
        status: str | None = "open",
        priority: str | None = None,
        description: str | None = None,
        due_date: str | None = None,
        start_date: str | None = None,
        assignees: list[dict[str, Any]] | None = None,
        tags: list[Any] | None = None,
        url: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Create a raw task; unset optional fields are omitted."""
        return _compact({
            "id": id or IDGenerator.task_id(),
            "name": name,
            "status": {"status": status, "color": "#d3d3d3", "type": "open"} if status else None,
            "priority": {"priority": priority, "color": "#f50000"} if priority else None,
            "description": description,
            "due_date": due_date,
            "start_date": start_date,
            "assignees": assignees,
            "tags": tags,
            "url": url,
            **kwargs,
        })

    @staticmethod
    def create_minimal(**kwargs: Any) -> dict[str, Any]:
        """Create a task with only id and name."""
        return RawTaskFactory.create(status=None, **kwargs)

    @staticmethod
    def create_full(**kwargs: Any) -> dict[str, Any]:
        """Create a task with every rendered field populated."""
        defaults: dict[str, Any] = {
            "status": "in progress",
            "priority": "high",
            "description": "Ship the **quarterly** report",
            "due_date": "1508369194377",
            "assignees": [{"id": 1, "username": "alice", "email": "alice@example.com"}],
            "tags": [{"name": "finance"}, {"name": "q3"}],
            "url": "https://app.clickup.com/t/86a1",
        }
        defaults.update(kwargs)
        return RawTaskFactory.create(**defaults)

    @staticmethod
    def create_batch(count: int, **kwargs: Any) -> list[dict[str, Any]]:
        """Create multiple tasks."""
        return [RawTaskFactory.create(name=f"Task {i+1}", **kwargs) for i in range(count)]


class RawSpaceFactory:
    """Factory for raw ClickUp space JSON."""

    @staticmethod
    def create(
        id: str | None = None,
        name: str | None = "Test Space",
        statuses: list[str] | None = None,
        private: bool | None = False,
        **kwargs: Any,
    ) -> dict[str, Any]:
        return _compact({
            "id": id or IDGenerator.numeric_id(),
            "name": name,
            "private": private,
            "statuses": [{"status": s, "type": "custom"} for s in statuses] if statuses else None,
            **kwargs,
        })

    @staticmethod
    def create_batch(count: int, **kwargs: Any) -> list[dict[str, Any]]:
        return [RawSpaceFactory.create(name=f"Space {i+1}", **kwargs) for i in range(count)]


class RawListFactory:
    """Factory for raw ClickUp list JSON."""

    @staticmethod
    def create(
        id: str | None = None,
        name: str | None = "Test List",
        task_count: int | None = None,
        space_name: str | None = None,
        folder_name: str | None = None,
        status: Any = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        return _compact({
            "id": id or IDGenerator.numeric_id(),
            "name": name,
            "task_count": task_count,
            "status": status,
            "space": {"id": "1", "name": space_name} if space_name else None,
            "folder": {"id": "2", "name": folder_name, "hidden": False} if folder_name else None,
            **kwargs,
        })


class RawFolderFactory:
    """Factory for raw ClickUp folder JSON."""

    @staticmethod
    def create(
        id: str | None = None,
        name: str | None = "Test Folder",
        list_count: int = 0,
        **kwargs: Any,
    ) -> dict[str, Any]:
        return _compact({
            "id": id or IDGenerator.numeric_id(),
            "name": name,
            "lists": [RawListFactory.create() for _ in range(list_count)],
            **kwargs,
        })


class RawCommentFactory:
    """Factory for raw ClickUp comment JSON."""

    @staticmethod
    def create(
        id: str | None = None,
        username: str | None = "bob",
        comment_text: str | None = "Looks good to me",
        date: str | None = "1508369194377",
        **kwargs: Any,
    ) -> dict[str, Any]:
        return _compact({
            "id": id or IDGenerator.numeric_id(),
            "user": {"id": 7, "username": username} if username else None,
            "comment_text": comment_text,
            "date": date,
            **kwargs,
        })


# =============================================================================
# Mock API Classes
# =============================================================================


class MockClickUpAPI:
    """
    Recording fake for ClickUpClient.

    Responses are keyed by resource path. Paths may be configured to fail
    (should_fail) or to respond after a delay (delays). Unconfigured paths
    return an empty object.
    """

    def __init__(self):
        self.responses: dict[str, Any] = {}
        self.should_fail: dict[str, Exception] = {}
        self.delays: dict[str, float] = {}

        # Track calls for verification
        self.call_history: list[dict[str, Any]] = []
        self.completed: list[str] = []

    async def fetch(
        self,
        path: str,
        method: str = "GET",
        *,
        token: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Mock fetch."""
        self.call_history.append(
            {"path": path, "method": method, "token": token, "body": body, "params": params}
        )
        if path in self.delays:
            await asyncio.sleep(self.delays[path])
        self.completed.append(path)
        if path in self.should_fail:
            raise self.should_fail[path]
        return self.responses.get(path, {})

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def seed_tasks(self, tasks: list[dict[str, Any]], workspace_id: str = WORKSPACE_ID) -> None:
        self.responses[f"/team/{workspace_id}/task"] = {"tasks": tasks}

    def seed_spaces(self, spaces: list[dict[str, Any]], workspace_id: str = WORKSPACE_ID) -> None:
        self.responses[f"/team/{workspace_id}/space"] = {"spaces": spaces}

    def seed_lists(self, space_id: str, lists: list[dict[str, Any]]) -> None:
        self.responses[f"/space/{space_id}/list"] = {"lists": lists}

    def seed_folders(self, space_id: str, folders: list[dict[str, Any]]) -> None:
        self.responses[f"/space/{space_id}/folder"] = {"folders": folders}

    def seed_folder_lists(self, folder_id: str, lists: list[dict[str, Any]]) -> None:
        self.responses[f"/folder/{folder_id}/list"] = {"lists": lists}

    def seed_comments(self, task_id: str, comments: list[dict[str, Any]]) -> None:
        self.responses[f"/task/{task_id}/comment"] = {"comments": comments}

    def fail(self, path: str, message: str = "Internal Server Error", status_code: int = 500) -> None:
        self.should_fail[path] = UpstreamError(message, status_code=status_code)

    # -------------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------------

    def paths(self) -> list[str]:
        """All fetched paths in call order."""
        return [call["path"] for call in self.call_history]

    def get_calls(self, path: str) -> list[dict[str, Any]]:
        return [call for call in self.call_history if call["path"] == path]

    def assert_called(self, path: str, times: int | None = None) -> None:
        """Assert a path was fetched (optionally a specific number of times)."""
        calls = self.get_calls(path)
        if times is not None:
            assert len(calls) == times, f"Expected {path} to be fetched {times} times, got {len(calls)}"
        else:
            assert len(calls) > 0, f"Expected {path} to be fetched at least once"

    def assert_not_called(self, path: str) -> None:
        calls = self.get_calls(path)
        assert len(calls) == 0, f"Expected {path} not to be fetched, but was fetched {len(calls)} times"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def id_generator():
    """Reset and provide ID generator."""
    IDGenerator.reset()
    return IDGenerator


@pytest.fixture
def mock_api() -> MockClickUpAPI:
    """Create a fresh fake upstream."""
    return MockClickUpAPI()


@pytest.fixture
def tokens() -> TokenStore:
    """Token store with one registered user."""
    return TokenStore({USER_ID: TOKEN})


@pytest.fixture
def aggregator(mock_api: MockClickUpAPI, tokens: TokenStore) -> ContextAggregator:
    """Aggregator wired to the fake upstream."""
    return ContextAggregator(client=mock_api, tokens=tokens)


@pytest.fixture
def seeded_api(mock_api: MockClickUpAPI) -> MockClickUpAPI:
    """Fake upstream with a small workspace: 3 tasks, 3 spaces, lists and folders."""
    mock_api.seed_tasks([
        RawTaskFactory.create_full(id="t1", name="Write report"),
        RawTaskFactory.create(id="t2", name="Review PR", status="review"),
        RawTaskFactory.create_minimal(id="t3", name="Plan sprint"),
    ])
    mock_api.seed_spaces([
        RawSpaceFactory.create(id="s1", name="Engineering", statuses=["open", "closed"]),
        RawSpaceFactory.create(id="s2", name="Marketing"),
        RawSpaceFactory.create(id="s3", name="Sales"),
    ])
    mock_api.seed_lists("s1", [RawListFactory.create(id="l1", name="Backlog", task_count=12)])
    mock_api.seed_lists("s2", [RawListFactory.create(id="l2", name="Campaigns")])
    mock_api.seed_lists("s3", [RawListFactory.create(id="l3", name="Leads")])
    mock_api.seed_folders("s1", [RawFolderFactory.create(id="f1", name="Q3", list_count=2)])
    mock_api.seed_folders("s2", [RawFolderFactory.create(id="f2", name="Launches")])
    mock_api.seed_folders("s3", [])
    mock_api.seed_comments("t1", [RawCommentFactory.create(id="c1")])
    return mock_api


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def task_factory() -> type[RawTaskFactory]:
    return RawTaskFactory


@pytest.fixture
def space_factory() -> type[RawSpaceFactory]:
    return RawSpaceFactory


@pytest.fixture
def list_factory() -> type[RawListFactory]:
    return RawListFactory


@pytest.fixture
def folder_factory() -> type[RawFolderFactory]:
    return RawFolderFactory


@pytest.fixture
def comment_factory() -> type[RawCommentFactory]:
    return RawCommentFactory
