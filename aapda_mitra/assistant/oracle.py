"""Text-generation oracle backed by the Claude API."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import anthropic

from aapda_mitra.config import (
    ANTHROPIC_API_KEY,
    CLAUDE_MODEL,
    CLAUDE_MAX_TOKENS,
    CHAT_TEMPERATURE,
)
from aapda_mitra.database.schema import DisasterType
from aapda_mitra.errors import GenerationError

logger = logging.getLogger(__name__)


CHAT_SYSTEM_PROMPT = (
    "You are 'Aapda Mitra', an AI assistant focused on disaster preparedness "
    "and response. Your goal is to provide clear, concise, and helpful "
    "information. You must not provide medical advice. If asked for medical "
    "advice, you must direct the user to consult a medical professional or "
    "contact emergency services."
)


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


@dataclass
class ChatMessage:
    """One line of chat history."""
    sender: Sender
    text: str

    def to_dict(self) -> dict:
        return {"sender": self.sender.value, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        return cls(sender=Sender(data["sender"]), text=data["text"])


def build_guide_prompt(disaster_type: DisasterType) -> str:
    name = DisasterType(disaster_type).value
    return (
        f"Generate a comprehensive survival guide for a {name}. The guide should "
        "be practical, easy to understand, and provide actionable steps for "
        "before, during, and after the disaster. Use markdown formatting with "
        f"headings (e.g., ### Before the {name}), and bullet points for lists."
    )


def build_chat_transcript(history: list[ChatMessage], new_message: str) -> str:
    lines = [f"{msg.sender.value}: {msg.text}" for msg in history]
    lines.append(f"user: {new_message}")
    return "\n".join(lines)


class TextOracle(ABC):
    """Opaque text generator used for survival guides and chat replies."""

    @abstractmethod
    def generate_survival_guide(self, disaster_type: DisasterType) -> str:
        """
        Generate a markdown survival guide.

        Raises:
            GenerationError: if no text could be produced
        """

    @abstractmethod
    def get_chatbot_response(self, history: list[ChatMessage], new_message: str) -> str:
        """
        Reply to ``new_message`` given the prior conversation.

        Raises:
            GenerationError: if no text could be produced
        """


class ClaudeOracle(TextOracle):
    """TextOracle that calls the Anthropic Messages API."""

    def __init__(
        self,
        anthropic_api_key: str | None = None,
        model: str = CLAUDE_MODEL,
        max_tokens: int = CLAUDE_MAX_TOKENS,
    ):
        self.api_key = anthropic_api_key or ANTHROPIC_API_KEY or os.getenv("ANTHROPIC_API_KEY")
        self.model = model
        self.max_tokens = max_tokens

        self.client: anthropic.Anthropic | None = None
        if self.api_key:
            try:
                self.client = anthropic.Anthropic(api_key=self.api_key)
                logger.info("Claude API client initialized successfully")
            except Exception as e:
                logger.warning("Failed to initialize Claude client: %s", e)

    def _complete(self, content: str, **kwargs) -> str:
        if self.client is None:
            raise GenerationError("Claude API client is not configured")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": content}],
                **kwargs,
            )
            text = "".join(
                block.text for block in response.content if getattr(block, "text", None)
            ).strip()
        except anthropic.AnthropicError as e:
            raise GenerationError(f"Claude request failed: {e}") from e

        if not text:
            raise GenerationError("Claude returned an empty response")
        return text

    def generate_survival_guide(self, disaster_type: DisasterType) -> str:
        try:
            return self._complete(build_guide_prompt(disaster_type))
        except GenerationError as e:
            logger.error("Error generating survival guide: %s", e)
            raise

    def get_chatbot_response(self, history: list[ChatMessage], new_message: str) -> str:
        try:
            return self._complete(
                build_chat_transcript(history, new_message),
                system=CHAT_SYSTEM_PROMPT,
                temperature=CHAT_TEMPERATURE,
            )
        except GenerationError as e:
            logger.error("Error getting chatbot response: %s", e)
            raise
