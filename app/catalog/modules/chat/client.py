from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from openai import OpenAI, OpenAIError

from app.catalog.constants import Messages
from app.catalog.errors import ChatUnavailableError, ChatUpstreamError
from app.catalog.modules.chat.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatClient:
    api_key: str
    model: str
    base_url: str = ""
    timeout_seconds: float = 30.0
    system_prompt: str = SYSTEM_PROMPT

    def _client(self) -> OpenAI:
        return OpenAI(
            api_key=self.api_key,
            base_url=self.base_url or None,
            timeout=self.timeout_seconds,
            max_retries=0,
        )

    def complete(self, messages: list[dict[str, str]]) -> str:
        """Send the conversation (without system prompt) and return the reply text."""
        payload: list[dict[str, Any]] = [{"role": "system", "content": self.system_prompt}, *messages]
        try:
            resp = self._client().chat.completions.create(model=self.model, messages=payload)
        except OpenAIError as e:
            logger.error("Chat upstream error (model=%s): %s", self.model, e)
            raise ChatUpstreamError(Messages.CHAT_UPSTREAM_FAILED) from e
        if not resp.choices:
            raise ChatUpstreamError(Messages.CHAT_UPSTREAM_FAILED)
        return resp.choices[0].message.content or ""


def chat_client_from_config(config: dict) -> ChatClient:
    api_key = (config.get("OPENAI_API_KEY") or "").strip()
    if not api_key:
        raise ChatUnavailableError(Messages.CHAT_UNAVAILABLE)
    return ChatClient(
        api_key=api_key,
        model=config.get("CHAT_MODEL") or "gpt-4.1-nano",
        base_url=config.get("OPENAI_BASE_URL") or "",
        timeout_seconds=float(config.get("CHAT_TIMEOUT_SECONDS") or 30),
    )
