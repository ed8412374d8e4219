"""Model clients for document analysis and chat."""

from appphoto_ai.agents.analyze_document import DocumentAnalyzer, parse_records
from appphoto_ai.agents.chat_session import ChatSession, ChatSessionManager

__all__ = ["DocumentAnalyzer", "parse_records", "ChatSession", "ChatSessionManager"]
