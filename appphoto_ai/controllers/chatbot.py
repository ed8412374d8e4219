"""Chatbot view controller.

Per pending turn: READY -> SENDING -> READY | ERROR_SHOWN. The user's message
is committed optimistically; the model reply streams into a placeholder that is
dropped again if the stream fails.
"""

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import Enum
from typing import Any, Protocol

from appphoto_ai.schemas.chat import ChatMessage, append_message, drop_last, replace_last

logger = logging.getLogger(__name__)

GREETING = "Hello! How can I help you today?"
STREAM_FAILED_MESSAGE = "An error occurred while fetching the response. Please try again."


class ChatbotState(str, Enum):
    READY = "ready"
    SENDING = "sending"
    ERROR_SHOWN = "error_shown"


class SessionClient(Protocol):
    def create_session(self) -> Any: ...

    def send_turn(self, session: Any, user_text: str) -> AsyncIterator[str]: ...


UpdateCallback = Callable[[tuple[ChatMessage, ...]], Awaitable[None] | None]


class ChatbotController:
    """Drive one chatbot view over a single chat session."""

    def __init__(self, client: SessionClient, greeting: str = GREETING):
        self.client = client
        self.greeting = greeting
        self.session: Any = None
        self.messages: tuple[ChatMessage, ...] = ()
        self.state = ChatbotState.READY
        self.error: str | None = None
        self._sending = False

    @property
    def is_sending(self) -> bool:
        return self._sending

    def mount(self) -> None:
        """Start a fresh session seeded with the greeting."""
        self.session = self.client.create_session()
        self.messages = (ChatMessage(role="model", text=self.greeting),)
        self.state = ChatbotState.READY
        self.error = None

    def can_send(self, text: str) -> bool:
        return bool(text.strip()) and self.session is not None and not self._sending

    def begin_turn(self, text: str) -> AsyncIterator[str] | None:
        """Claim the view for a user turn and return its reply stream.

        The guard is checked and the user message plus the empty placeholder
        are appended before this returns, so a second caller is refused at
        once. The returned iterator must be consumed (or closed) to release
        the view.

        Returns:
            Iterator of reply fragments, or None if the guard refuses the turn
        """
        if not self.can_send(text):
            return None

        self._sending = True
        self.state = ChatbotState.SENDING
        self.error = None
        self.messages = append_message(self.messages, ChatMessage(role="user", text=text))
        self.messages = append_message(self.messages, ChatMessage(role="model", text=""))
        return self._run_turn(text)

    async def _run_turn(self, text: str) -> AsyncIterator[str]:
        reply = ""
        completed = False
        try:
            async for fragment in self.client.send_turn(self.session, text):
                reply += fragment
                self.messages = replace_last(self.messages, reply)
                yield fragment
            completed = True
        except Exception:
            logger.exception("Chat stream failed")
            self.messages = drop_last(self.messages)
            self.error = STREAM_FAILED_MESSAGE
            self.state = ChatbotState.ERROR_SHOWN
        finally:
            if self.state is ChatbotState.SENDING:
                if not completed:
                    # Closed early: the session never saw this reply
                    self.messages = drop_last(self.messages)
                self.state = ChatbotState.READY
            self._sending = False

    async def stream(self, text: str) -> AsyncIterator[str]:
        """Send a user turn, yielding each reply fragment as it is shown.

        Yields nothing when the guard refuses the turn. The history is updated
        before every fragment is yielded, so ``messages`` always matches what
        has been surfaced. Closing the iterator early drops the partial reply.
        """
        turn = self.begin_turn(text)
        if turn is None:
            return
        try:
            async for fragment in turn:
                yield fragment
        finally:
            await turn.aclose()

    async def send(self, text: str, on_update: UpdateCallback | None = None) -> bool:
        """Send a user turn and consume the whole reply.

        Args:
            text: The user's message
            on_update: Optional callback receiving the history after each fragment

        Returns:
            True if the turn was accepted (whatever its outcome)
        """
        turn = self.begin_turn(text)
        if turn is None:
            return False

        async for _ in turn:
            if on_update is not None:
                result = on_update(self.messages)
                if inspect.isawaitable(result):
                    await result
        return True

    def dismiss_error(self) -> None:
        """Hide the error banner."""
        self.error = None
        if self.state is ChatbotState.ERROR_SHOWN:
            self.state = ChatbotState.READY

    def to_view(self) -> dict[str, Any]:
        """Snapshot of the view state for rendering."""
        return {
            "state": self.state.value,
            "is_sending": self._sending,
            "messages": [message.model_dump() for message in self.messages],
            "error": self.error,
        }
