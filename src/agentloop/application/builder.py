"""
Application Layer - ReAct Builder

Fluent assembly of a ReActController from optional capability bindings.
build() validates the capability combination for every entry path the caller
declares as required, so a controller that cannot serve those paths is never
handed out.

Example:
    >>> controller = (
    ...     ReActBuilder()
    ...     .with_llm(llm)
    ...     .with_tools(registry)
    ...     .with_session_store(InMemorySessionStore())
    ...     .require(EntryPath.FAST, EntryPath.COMPLEX)
    ...     .build()
    ... )
"""

import structlog

from agentloop.core.domain.controller import EntryPath, ReActConfig, ReActController
from agentloop.core.domain.errors import MisconfigurationError
from agentloop.core.interfaces.artifacts import ArtifactStoreProtocol
from agentloop.core.interfaces.compression import CompressionConfig, ContextCompressorProtocol
from agentloop.core.interfaces.delegation import DelegatorProtocol
from agentloop.core.interfaces.llm import LLMProviderProtocol
from agentloop.core.interfaces.state import SessionStoreProtocol
from agentloop.core.interfaces.tools import ToolRegistryProtocol
from agentloop.infrastructure.compression.truncation import TruncationCompressor


class ReActBuilder:
    """Builder for ReActController with per-entry-path validation."""

    def __init__(self, config: ReActConfig | None = None):
        self._config = config or ReActConfig()
        self._llm: LLMProviderProtocol | None = None
        self._tools: ToolRegistryProtocol | None = None
        self._artifact_store: ArtifactStoreProtocol | None = None
        self._session_store: SessionStoreProtocol | None = None
        self._compressor: ContextCompressorProtocol | None = TruncationCompressor()
        self._compression_config = CompressionConfig()
        self._delegator: DelegatorProtocol | None = None
        self._required: set[EntryPath] = set()
        self.logger = structlog.get_logger().bind(component="react_builder")

    def with_config(self, config: ReActConfig) -> "ReActBuilder":
        self._config = config
        return self

    def with_llm(self, llm: LLMProviderProtocol) -> "ReActBuilder":
        self._llm = llm
        return self

    def with_tools(self, tools: ToolRegistryProtocol) -> "ReActBuilder":
        self._tools = tools
        return self

    def with_artifact_store(self, store: ArtifactStoreProtocol) -> "ReActBuilder":
        self._artifact_store = store
        return self

    def with_session_store(self, session_store: SessionStoreProtocol) -> "ReActBuilder":
        self._session_store = session_store
        return self

    def with_compressor(self, compressor: ContextCompressorProtocol) -> "ReActBuilder":
        self._compressor = compressor
        return self

    def without_compressor(self) -> "ReActBuilder":
        self._compressor = None
        return self

    def with_compression_config(self, config: CompressionConfig) -> "ReActBuilder":
        self._compression_config = config
        return self

    def with_delegator(self, delegator: DelegatorProtocol) -> "ReActBuilder":
        self._delegator = delegator
        return self

    def require(self, *paths: EntryPath) -> "ReActBuilder":
        """Declare entry paths that must be fully served (no degraded mode)."""
        self._required.update(paths)
        return self

    def build(self) -> ReActController:
        """
        Build the controller.

        Raises:
            MisconfigurationError: If a required entry path lacks a capability
        """
        controller = ReActController(
            self._config,
            llm=self._llm,
            tools=self._tools,
            artifact_store=self._artifact_store,
            session_store=self._session_store,
            compressor=self._compressor,
            compression_config=self._compression_config,
            delegator=self._delegator,
            required_paths=frozenset(self._required),
        )

        for path in sorted(self._required, key=lambda p: p.value):
            missing = controller.missing_capabilities(path)
            if missing:
                raise MisconfigurationError(path.value, missing)

        self.logger.debug(
            "controller_built",
            has_llm=self._llm is not None,
            has_tools=self._tools is not None,
            has_session_store=self._session_store is not None,
            has_compressor=self._compressor is not None,
            has_delegator=self._delegator is not None,
            required_paths=sorted(p.value for p in self._required),
        )
        return controller
