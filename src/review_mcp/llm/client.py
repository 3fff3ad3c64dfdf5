"""ChatCompletionClient — one chat completion against an Azure OpenAI deployment.

Wraps LiteLLM so AI-backed tools only deal with plain message dicts and a
text answer. Every failure mode (provider error, timeout, empty or malformed
response) surfaces as :class:`~review_mcp.protocol.errors.ExternalServiceError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import litellm

from review_mcp.protocol.errors import ExternalServiceError

if TYPE_CHECKING:
    from review_mcp.config import AIServiceConfig

logger = logging.getLogger(__name__)

_SERVICE = "Azure AI"


class ChatCompletionClient:
    """Async client for a single chat-completion deployment.

    Usage::

        client = ChatCompletionClient(config.ai)
        text = await client.complete([
            {"role": "system", "content": "You are a reviewer."},
            {"role": "user", "content": "Review this code..."},
        ])
    """

    def __init__(self, config: AIServiceConfig) -> None:
        self.config = config

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Send *messages* and return the assistant's text.

        Raises:
            ExternalServiceError: The service is not configured, the call
                failed, or the response carried no text.
        """
        if not self.is_configured:
            raise ExternalServiceError(_SERVICE, "endpoint or API key not configured")

        call_kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "api_base": self.config.endpoint,
            "api_key": self.config.api_key,
            "api_version": self.config.api_version,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "top_p": self.config.top_p,
            "timeout": self.config.timeout,
        }

        try:
            response = await litellm.acompletion(**call_kwargs)  # pyright: ignore[reportUnknownMemberType]
        except Exception as exc:
            raise ExternalServiceError(_SERVICE, str(exc)) from exc

        return self._extract_text(response)

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Pull ``choices[0].message.content`` out of an OpenAI-shaped response."""
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise ExternalServiceError(_SERVICE, "malformed completion response") from exc

        if not isinstance(content, str) or not content.strip():
            raise ExternalServiceError(_SERVICE, "empty completion")
        return content
