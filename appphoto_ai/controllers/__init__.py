"""View-state controllers driving the analyzer and chatbot views."""

from appphoto_ai.controllers.analyzer import AnalyzerController, AnalyzerState, SelectedImage
from appphoto_ai.controllers.chatbot import ChatbotController, ChatbotState

__all__ = [
    "AnalyzerController",
    "AnalyzerState",
    "SelectedImage",
    "ChatbotController",
    "ChatbotState",
]
