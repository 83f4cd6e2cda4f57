"""Unit tests for the compression trigger."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from agentloop.core.domain.context import prepare_messages
from agentloop.core.domain.models import ChatMessage
from agentloop.core.domain.session import Session
from agentloop.core.interfaces.compression import CompressionConfig, CompressionResult


@pytest.fixture
def session():
    session = Session.create(goal="Summarize", budget=1000)
    session.append("user", "context")
    return session


@pytest.fixture
def mock_compressor():
    """needs_compression is synchronous, compress is awaited."""
    compressor = MagicMock()
    compressor.needs_compression = MagicMock(return_value=True)
    compressor.compress = AsyncMock(
        return_value=CompressionResult(
            messages=[ChatMessage(role="system", content="compressed")],
            messages_compressed=1,
            estimated_tokens=3,
        )
    )
    return compressor


class TestPrepareMessages:
    @pytest.mark.asyncio
    async def test_without_compressor_returns_full_view(self, session):
        messages = await prepare_messages(session, None, CompressionConfig())
        assert len(messages) == 2
        assert messages[1].content == "context"

    @pytest.mark.asyncio
    async def test_compressor_not_triggered(self, session, mock_compressor):
        mock_compressor.needs_compression.return_value = False

        messages = await prepare_messages(session, mock_compressor, CompressionConfig())

        assert len(messages) == 2
        mock_compressor.compress.assert_not_called()

    @pytest.mark.asyncio
    async def test_compressed_view_replaces_messages_only(self, session, mock_compressor):
        config = CompressionConfig(max_context_tokens=10)

        messages = await prepare_messages(session, mock_compressor, config)

        assert [m.content for m in messages] == ["compressed"]
        assert len(session.history) == 2
        mock_compressor.needs_compression.assert_called_once()
        args = mock_compressor.compress.await_args.args
        assert len(args[0]) == 2
        assert args[1] is config

    @pytest.mark.asyncio
    async def test_compression_failure_propagates(self, session, mock_compressor):
        mock_compressor.compress.side_effect = RuntimeError("compressor down")

        with pytest.raises(RuntimeError, match="compressor down"):
            await prepare_messages(session, mock_compressor, CompressionConfig())
