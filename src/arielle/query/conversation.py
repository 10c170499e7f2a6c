"""Bounded conversation history for one query session."""

from __future__ import annotations

from collections import deque
from typing import Literal

from arielle.models import ConversationMessage

DEFAULT_MAX_LENGTH = 10


class ConversationState:
    """Sliding window over the most recent conversation messages.

    Appending beyond ``max_length`` drops the oldest message. The history is
    only readable through :meth:`last`, which returns an immutable snapshot.

    Args:
        max_length: Number of messages retained.
    """

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        if max_length < 1:
            raise ValueError(f"max_length must be positive, got {max_length}")
        self._messages: deque[ConversationMessage] = deque(maxlen=max_length)

    @property
    def max_length(self) -> int:
        return self._messages.maxlen or 0

    def append(self, role: Literal["user", "assistant"], content: str) -> ConversationMessage:
        """Record one message and return it."""
        message = ConversationMessage(role=role, content=content)
        self._messages.append(message)
        return message

    def last(self, count: int) -> tuple[ConversationMessage, ...]:
        """Return the *count* most recent messages, oldest first."""
        if count <= 0:
            return ()
        return tuple(self._messages)[-count:]

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)
