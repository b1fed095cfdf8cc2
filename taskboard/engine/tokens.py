"""
Request tokens — discard responses superseded by a newer request.

Each mutating action (refresh, submit, ...) takes a token before awaiting
the backend. When the response arrives, the caller checks the token; only
the most recently issued token for that action is current.
"""

from __future__ import annotations

import logging
from typing import Dict

from taskboard.engine.errors import TaskboardStaleResponseError

logger = logging.getLogger("taskboard.engine.tokens")


class RequestTokens:
    """Monotonically increasing tokens, tracked per action key."""

    def __init__(self) -> None:
        self._counter = 0
        self._latest: Dict[str, int] = {}

    def issue(self, action: str) -> int:
        """Issue a new token for *action*; it supersedes all earlier ones."""
        self._counter += 1
        self._latest[action] = self._counter
        return self._counter

    def is_current(self, action: str, token: int) -> bool:
        return self._latest.get(action) == token

    def ensure_current(self, action: str, token: int) -> None:
        """Raise TaskboardStaleResponseError if *token* has been superseded."""
        if not self.is_current(action, token):
            logger.debug(f"Discarding stale response for '{action}' (token {token})")
            raise TaskboardStaleResponseError(
                f"Response for '{action}' superseded by a newer request",
                action=action,
                token=token,
            )
