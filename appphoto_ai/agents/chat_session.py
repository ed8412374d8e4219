"""Streaming chat sessions.

A session is client-tracked: it holds the system instruction and the turns
committed so far. Each turn streams the model reply fragment by fragment and is
committed to the session only once the stream has completed.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from pathlib import Path

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import SecretStr

from appphoto_ai.agents._content import message_text
from appphoto_ai.config import Settings, get_settings

logger = logging.getLogger(__name__)

PROMPT_PATH = Path(__file__).parent.parent / "prompts" / "chat.md"


@dataclass
class ChatSession:
    """Conversation context owned by a single chatbot view."""

    system_instruction: str
    history: list[BaseMessage] = field(default_factory=list)

    def messages_for(self, user_text: str) -> list[BaseMessage]:
        """Build the full prompt for a new user turn."""
        return [
            SystemMessage(content=self.system_instruction),
            *self.history,
            HumanMessage(content=user_text),
        ]

    def commit(self, user_text: str, reply: str) -> None:
        """Record a completed exchange."""
        self.history.extend([HumanMessage(content=user_text), AIMessage(content=reply)])


class ChatSessionManager:
    """Create chat sessions and stream replies for them."""

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        settings: Settings | None = None,
        model_name: str | None = None,
    ):
        """Initialize the session manager.

        Args:
            llm: Optional pre-built chat model (used as is)
            settings: Optional settings (defaults to the process-wide settings)
            model_name: Optional model name override
        """
        with PROMPT_PATH.open(encoding="utf-8") as f:
            self.system_instruction = f.read().strip()

        if llm is None:
            settings = settings or get_settings()
            llm = ChatOpenAI(
                model=model_name or settings.chat_model,
                temperature=settings.chat_temperature,
                api_key=SecretStr(settings.get_api_key()),
                streaming=True,
            )
        self.llm = llm

    def create_session(self) -> ChatSession:
        """Create a fresh session with no prior turns. Performs no I/O."""
        return ChatSession(system_instruction=self.system_instruction)

    async def send_turn(self, session: ChatSession, user_text: str) -> AsyncIterator[str]:
        """Send a user turn and stream the reply.

        Fragments are yielded in the order the model produces them. The
        iterator is single-pass. Errors raised by the transport end the
        iteration and propagate to the caller; fragments already yielded
        cannot be taken back here.

        Args:
            session: Session to continue
            user_text: The user's message

        Yields:
            Text fragments of the model reply
        """
        fragments: list[str] = []
        async for chunk in self.llm.astream(session.messages_for(user_text)):
            text = message_text(chunk)
            if not text:
                continue
            fragments.append(text)
            yield text

        reply = "".join(fragments)
        session.commit(user_text, reply)
        logger.debug("Committed turn (%d fragments, %d chars)", len(fragments), len(reply))
