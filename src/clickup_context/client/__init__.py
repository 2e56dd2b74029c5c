"""ClickUp upstream HTTP client."""

from clickup_context.client.client import ClickUpClient, UpstreamClient

__all__ = ["ClickUpClient", "UpstreamClient"]
