"""Helpers for reading text out of LangChain message content."""

from typing import Any


def message_text(message: Any) -> str:
    """Return the plain text of a message or message chunk.

    Content may be a string or a list of content blocks; only text blocks are
    kept, in order.
    """
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content

    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
