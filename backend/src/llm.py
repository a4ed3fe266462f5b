"""
LLM module for handling AI model interactions
"""

from typing import List

import openai

from src.chat import ChatSession
from src.logger import get_logger
from src.models import AiChatResponse
from src.normalizer import normalize
from src.prompt import system_prompt
import config

logger = get_logger(__name__)


class LLMError(Exception):
    """The model could not be called"""


class LLMClient:
    """Thin wrapper over the OpenRouter chat completions API"""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ):
        api_key = api_key or config.OPENROUTER_API_KEY
        self.model = model or config.OPENROUTER_MODEL
        self.max_tokens = max_tokens or config.MAX_TOKENS
        self._client = (
            openai.OpenAI(base_url=base_url or config.OPENROUTER_BASE_URL, api_key=api_key)
            if api_key
            else None
        )

    @property
    def configured(self) -> bool:
        return self._client is not None

    def complete(self, messages: List[dict]) -> str:
        """Send chat messages and return the raw text of the reply"""
        if self._client is None:
            logger.error("OpenRouter client not initialized")
            raise LLMError("OpenRouter client not initialized. Check OPENROUTER_API_KEY.")

        logger.info(f"Calling OpenRouter API with model: {self.model}")
        response = self._client.chat.completions.create(
            model=self.model, messages=messages, max_tokens=self.max_tokens
        )
        text = response.choices[0].message.content if response.choices else None
        if not text:
            logger.warning("Empty response from OpenRouter")
            return "{}"

        logger.info(f"Received response from OpenRouter: {text[:200]}...")
        return text


def build_messages(session: ChatSession, user_prompt: str) -> List[dict]:
    """System prompt, then the replayed transcript, then the new request"""
    return [
        {"role": "system", "content": system_prompt},
        *session.to_model_context(),
        {"role": "user", "content": user_prompt},
    ]


def forward(client: LLMClient, messages: List[dict], strict: bool = False) -> AiChatResponse:
    """Call the model and normalize whatever it returns"""
    text = client.complete(messages)
    return normalize(text, strict=strict)
