"""
Context Compression Trigger

Builds the message view for a single reasoning call and, when the bound
compressor says so, replaces that view with a compressed one. Only the
transient view is replaced; session history is never rewritten.
"""

import structlog

from agentloop.core.domain.models import ChatMessage
from agentloop.core.domain.session import Session
from agentloop.core.interfaces.compression import (
    CompressionConfig,
    ContextCompressorProtocol,
)

logger = structlog.get_logger()


async def prepare_messages(
    session: Session,
    compressor: ContextCompressorProtocol | None,
    config: CompressionConfig,
) -> list[ChatMessage]:
    """
    Return the message view for the next reasoning call.

    needs_compression() is a plain synchronous check; only compress() is
    awaited. Compression errors propagate to the caller, there is no
    fallback to the uncompressed view.
    """
    messages = session.build_messages()
    if compressor is None:
        return messages

    if not compressor.needs_compression(messages, config):
        return messages

    logger.info(
        "context_compression_triggered",
        session_id=session.id,
        message_count=len(messages),
    )
    result = await compressor.compress(messages, config)
    logger.info(
        "context_compressed",
        session_id=session.id,
        messages_compressed=result.messages_compressed,
        estimated_tokens=result.estimated_tokens,
    )
    return result.messages
