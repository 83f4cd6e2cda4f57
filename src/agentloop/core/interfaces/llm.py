"""
LLM Provider Protocol

The reasoning backend consumed by the ReAct loop.
"""

from typing import Protocol

from agentloop.core.domain.models import ChatMessage, LlmResponse


class LLMProviderProtocol(Protocol):
    """Protocol for chat-style reasoning backends."""

    async def chat(self, messages: list[ChatMessage]) -> LlmResponse:
        """
        Send the ordered message view and return the reply with token usage.

        Args:
            messages: Ordered messages (system, user, assistant)

        Returns:
            LlmResponse with raw content and prompt/completion token counts

        Raises:
            Exception: Provider failures propagate and abort the loop
        """
        ...
