from .oracle import ChatMessage, ClaudeOracle, Sender, TextOracle
from .chatbot import ChatSession, FALLBACK_REPLY, GREETING

__all__ = [
    "ChatMessage",
    "ClaudeOracle",
    "Sender",
    "TextOracle",
    "ChatSession",
    "FALLBACK_REPLY",
    "GREETING",
]
