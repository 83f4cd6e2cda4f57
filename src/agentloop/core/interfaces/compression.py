"""
Context Compression Protocol

Defines the compression capability and the value types it exchanges with the
controller.
"""

from dataclasses import dataclass, field
from typing import Protocol

from agentloop.core.domain.models import ChatMessage


@dataclass
class CompressionConfig:
    """
    Thresholds for context compression.

    Attributes:
        max_context_tokens: Context window the reasoning backend accepts
        trigger_ratio: Fraction of max_context_tokens that triggers compression
        keep_recent: Number of most recent messages always kept verbatim
        preserve_system: Keep leading system messages untouched
        chars_per_token: Character-to-token ratio for estimates
    """

    max_context_tokens: int = 16_000
    trigger_ratio: float = 0.8
    keep_recent: int = 10
    preserve_system: bool = True
    chars_per_token: int = 4

    @property
    def trigger_tokens(self) -> int:
        return int(self.max_context_tokens * self.trigger_ratio)


@dataclass
class CompressionResult:
    """
    Replacement message view.

    Attributes:
        messages: Ordered replacement view
        messages_compressed: Number of original messages folded away
        estimated_tokens: Estimated token count of the replacement view
    """

    messages: list[ChatMessage] = field(default_factory=list)
    messages_compressed: int = 0
    estimated_tokens: int = 0


class ContextCompressorProtocol(Protocol):
    """Protocol for shrinking the message view sent to the reasoning backend."""

    def needs_compression(
        self, messages: list[ChatMessage], config: CompressionConfig
    ) -> bool:
        """Decide synchronously whether compress() should run."""
        ...

    async def compress(
        self, messages: list[ChatMessage], config: CompressionConfig
    ) -> CompressionResult:
        """
        Produce a compressed replacement view.

        Raises:
            Exception: Any failure aborts the current iteration
        """
        ...
