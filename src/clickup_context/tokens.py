"""
Per-user ClickUp token storage.

Tokens are held in memory only; the store is created by the server lifespan
and handed to the aggregator, never reached through module globals.
"""

from __future__ import annotations

import logging

from clickup_context.exceptions import InvalidTokenError, TokenResolutionError

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "pk_"


class TokenStore:
    """In-memory map of user id to ClickUp personal API token."""

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        self._tokens: dict[str, str] = dict(tokens or {})

    @staticmethod
    def is_valid_token_format(token: str | None) -> bool:
        """Check that a token looks like a ClickUp personal token."""
        return bool(token) and token.startswith(TOKEN_PREFIX) and len(token) > len(TOKEN_PREFIX) + 2

    def store_token(self, user_id: str, token: str) -> None:
        """Register (or replace) a user's token."""
        if not user_id:
            raise InvalidTokenError("User ID is required")
        if not self.is_valid_token_format(token):
            raise InvalidTokenError(
                f'Invalid ClickUp token format. Token should start with "{TOKEN_PREFIX}"'
            )
        self._tokens[user_id] = token
        logger.info("Stored ClickUp token for user %s", user_id)

    def get_token(self, user_id: str | None) -> str | None:
        if not user_id:
            return None
        return self._tokens.get(user_id)

    def has_token(self, user_id: str) -> bool:
        return user_id in self._tokens

    def remove_token(self, user_id: str | None) -> bool:
        if not user_id:
            return False
        return self._tokens.pop(user_id, None) is not None

    def resolve(self, user_id: str | None) -> str:
        """
        Return the token for a user.

        Raises:
            TokenResolutionError: If no token is registered for the user.
        """
        token = self.get_token(user_id)
        if token is None:
            raise TokenResolutionError(user_id)
        return token

    def __len__(self) -> int:
        return len(self._tokens)
