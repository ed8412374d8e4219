"""API blueprints."""

from appphoto_ai.web.api.analyzer import analyzer_bp
from appphoto_ai.web.api.chat import chat_bp

__all__ = ["analyzer_bp", "chat_bp"]
