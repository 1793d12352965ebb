"""
Chat Service for the "debate your AI" coach.

Wraps a generative-text capability behind ``TextGenerator.generate_text``
so the provider can be swapped or mocked. Replies never fail: any provider
error is logged and answered with a fixed apology.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..config.chat_config import (
    DEBATE_SYSTEM_PROMPT,
    FALLBACK_REPLY,
    GEMINI_API_KEY,
    GEMINI_MODEL,
)
from ..exceptions import ChatServiceError

logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    """Abstract generative-text capability"""

    @abstractmethod
    def generate_text(self, system_prompt: str, user_text: str) -> str:
        """Return generated text. Raises ChatServiceError on failure."""
        pass


class GeminiTextGenerator(TextGenerator):
    """Google Gemini via google-generativeai"""

    def __init__(self, api_key: str = GEMINI_API_KEY, model_name: str = GEMINI_MODEL):
        if not api_key:
            raise ChatServiceError("GEMINI_API_KEY is not configured")

        import google.generativeai as genai

        genai.configure(api_key=api_key)
        self.model_name = model_name
        self._model = genai.GenerativeModel(model_name=model_name)

    def generate_text(self, system_prompt: str, user_text: str) -> str:
        try:
            response = self._model.generate_content([system_prompt, user_text])
            text = response.text
        except Exception as e:
            raise ChatServiceError(original_error=e)

        if not text or not text.strip():
            raise ChatServiceError("Empty response from text generator")
        return text.strip()


class ChatService:
    """Debate replies backed by a TextGenerator"""

    def __init__(self, generator: Optional[TextGenerator] = None,
                 system_prompt: str = DEBATE_SYSTEM_PROMPT,
                 fallback_reply: str = FALLBACK_REPLY) -> None:
        self._generator = generator
        self.system_prompt = system_prompt
        self.fallback_reply = fallback_reply

    @property
    def configured(self) -> bool:
        return self._generator is not None or bool(GEMINI_API_KEY)

    def _get_generator(self) -> TextGenerator:
        if self._generator is None:
            self._generator = GeminiTextGenerator()
        return self._generator

    def reply(self, question: str) -> str:
        """Answer a user's argument, or the fallback reply on any failure."""
        try:
            return self._get_generator().generate_text(self.system_prompt, question)
        except Exception as e:
            logger.error("Chat generation failed: %s", e)
            return self.fallback_reply

    async def reply_async(self, question: str) -> str:
        return await asyncio.to_thread(self.reply, question)


# Module-level singleton
_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get the global ChatService singleton (creates one if not set)."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service


def set_chat_service(instance: Optional[ChatService]) -> None:
    """Set the global ChatService singleton (called in tests)."""
    global _chat_service
    _chat_service = instance
