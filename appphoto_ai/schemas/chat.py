"""Pydantic schemas for chat messages."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "model"]


class ChatMessage(BaseModel):
    """One turn in a conversation. Instances are never mutated."""

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str = ""


def append_message(
    messages: tuple[ChatMessage, ...], message: ChatMessage
) -> tuple[ChatMessage, ...]:
    """Return a new history with ``message`` at the end."""
    return (*messages, message)


def replace_last(messages: tuple[ChatMessage, ...], text: str) -> tuple[ChatMessage, ...]:
    """Return a new history whose last message carries ``text``.

    Raises:
        IndexError: If the history is empty
    """
    if not messages:
        raise IndexError("cannot replace the last message of an empty history")
    return (*messages[:-1], messages[-1].model_copy(update={"text": text}))


def drop_last(messages: tuple[ChatMessage, ...]) -> tuple[ChatMessage, ...]:
    """Return a new history without its last message."""
    return messages[:-1]
