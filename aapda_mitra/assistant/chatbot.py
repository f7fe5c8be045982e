"""Conversation state for the assistant chat window."""

import logging

from aapda_mitra.errors import GenerationError
from .oracle import ChatMessage, Sender, TextOracle

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I am Aapda Mitra. How can I help you today regarding disaster "
    "safety and preparedness?"
)
FALLBACK_REPLY = "Sorry, I'm having trouble connecting. Please try again later."


class ChatSession:
    """A single chat conversation, seeded with the assistant greeting."""

    def __init__(self, oracle: TextOracle, history: list[ChatMessage] | None = None):
        self.oracle = oracle
        self.history: list[ChatMessage] = (
            list(history) if history else [ChatMessage(Sender.BOT, GREETING)]
        )

    def send(self, message: str) -> ChatMessage | None:
        """
        Append the user's message and the assistant's reply.

        Blank messages are ignored. Oracle failures produce an apology reply
        instead of an error.
        """
        text = message.strip()
        if not text:
            return None

        user_message = ChatMessage(Sender.USER, text)
        self.history.append(user_message)

        try:
            reply_text = self.oracle.get_chatbot_response(self.history, text)
        except GenerationError as e:
            logger.error("Failed to get chatbot response: %s", e)
            reply_text = FALLBACK_REPLY

        reply = ChatMessage(Sender.BOT, reply_text)
        self.history.append(reply)
        return reply

    def to_dict(self) -> dict:
        return {"history": [msg.to_dict() for msg in self.history]}
