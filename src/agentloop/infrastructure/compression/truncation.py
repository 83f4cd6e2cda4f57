"""
Truncation Compressor

Default context compressor. Estimates tokens with a character ratio and, once
the estimate crosses the configured trigger, drops the middle of the
conversation: leading system messages and the most recent messages are kept,
everything in between is replaced by a single marker message.
"""

import structlog

from agentloop.core.domain.models import ChatMessage
from agentloop.core.interfaces.compression import CompressionConfig, CompressionResult


def estimate_tokens(text: str, chars_per_token: int = 4) -> int:
    return len(text) // chars_per_token + 1


def estimate_messages_tokens(messages: list[ChatMessage], chars_per_token: int = 4) -> int:
    return sum(estimate_tokens(message.content, chars_per_token) for message in messages)


class TruncationCompressor:
    """Context compressor that folds the middle of the conversation away."""

    def __init__(self):
        self.logger = structlog.get_logger().bind(component="truncation_compressor")

    def _split(
        self, messages: list[ChatMessage], config: CompressionConfig
    ) -> tuple[list[ChatMessage], list[ChatMessage], list[ChatMessage]]:
        head_len = 0
        if config.preserve_system:
            while head_len < len(messages) and messages[head_len].role == "system":
                head_len += 1

        head = messages[:head_len]
        body = messages[head_len:]
        keep = max(config.keep_recent, 0)
        if len(body) <= keep:
            return head, [], body
        cut = len(body) - keep
        return head, body[:cut], body[cut:]

    def needs_compression(
        self, messages: list[ChatMessage], config: CompressionConfig
    ) -> bool:
        _, folded, _ = self._split(messages, config)
        if not folded:
            return False
        return estimate_messages_tokens(messages, config.chars_per_token) > config.trigger_tokens

    async def compress(
        self, messages: list[ChatMessage], config: CompressionConfig
    ) -> CompressionResult:
        head, folded, tail = self._split(messages, config)
        if not folded:
            return CompressionResult(
                messages=list(messages),
                messages_compressed=0,
                estimated_tokens=estimate_messages_tokens(messages, config.chars_per_token),
            )

        marker = ChatMessage(
            role="system",
            content=f"[Context compressed: {len(folded)} earlier messages omitted]",
        )
        compressed = [*head, marker, *tail]
        estimated = estimate_messages_tokens(compressed, config.chars_per_token)

        self.logger.debug(
            "messages_truncated",
            original_count=len(messages),
            folded=len(folded),
            estimated_tokens=estimated,
        )
        return CompressionResult(
            messages=compressed,
            messages_compressed=len(folded),
            estimated_tokens=estimated,
        )
