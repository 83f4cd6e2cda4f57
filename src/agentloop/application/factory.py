"""
Application Layer - Controller Factory

This module wires ReActController instances from YAML configuration profiles.

Key Responsibilities:
- Load configuration profiles (configs/<profile>.yaml)
- Translate profile sections into ReActConfig and CompressionConfig
- Instantiate infrastructure adapters (session store, reasoning backend,
  tool registry, delegator)
- Declare which entry paths must be fully served by the built controller
"""

from pathlib import Path
from typing import Any

import structlog
import yaml

from agentloop.application.builder import ReActBuilder
from agentloop.core.domain.controller import EntryPath, ReActConfig, ReActController
from agentloop.core.interfaces.compression import CompressionConfig
from agentloop.core.interfaces.llm import LLMProviderProtocol
from agentloop.core.interfaces.state import SessionStoreProtocol
from agentloop.core.interfaces.tools import ToolRegistryProtocol
from agentloop.infrastructure.delegation.child_controller import ChildControllerDelegator
from agentloop.infrastructure.llm.litellm_provider import LiteLLMProvider, RetryPolicy
from agentloop.infrastructure.persistence.file_session_store import FileSessionStore
from agentloop.infrastructure.persistence.memory_session_store import InMemorySessionStore
from agentloop.infrastructure.tools.builtin import BUILTIN_TOOLS
from agentloop.infrastructure.tools.registry import InMemoryToolRegistry


class ControllerFactory:
    """
    Factory for creating controllers with dependency injection.

    Session stores are cached per profile so that every controller built for
    a profile (and the CLI/API session views) share one store.

    Example:
        >>> factory = ControllerFactory(config_dir="configs")
        >>> controller = factory.create_controller(profile="dev")
        >>> result = await controller.execute(ComplexMission(goal="Add 5 and 3"))
    """

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)
        self._session_stores: dict[str, SessionStoreProtocol] = {}
        self.logger = structlog.get_logger().bind(component="controller_factory")

    def create_controller(
        self,
        profile: str = "dev",
        llm: LLMProviderProtocol | None = None,
        tools: ToolRegistryProtocol | None = None,
        session_store: SessionStoreProtocol | None = None,
    ) -> ReActController:
        """
        Create a controller for a configuration profile.

        Explicit llm/tools/session_store arguments override what the profile
        would instantiate.

        Raises:
            FileNotFoundError: If the profile YAML does not exist
            ValueError: If the profile contains unknown providers, tools or paths
            MisconfigurationError: If a required entry path lacks a capability
        """
        config = self._load_profile(profile)
        if session_store is None:
            session_store = self.get_session_store(profile, config)
        return self.build_from_config(config, llm=llm, tools=tools, session_store=session_store)

    def build_from_config(
        self,
        config: dict[str, Any],
        llm: LLMProviderProtocol | None = None,
        tools: ToolRegistryProtocol | None = None,
        session_store: SessionStoreProtocol | None = None,
    ) -> ReActController:
        react_config = self._build_react_config(config)
        compression_config = self._build_compression_config(config)
        llm = llm or self._create_llm_provider(config, react_config)
        tools = tools or self._create_tool_registry(config)
        if session_store is None:
            session_store = self._create_session_store(config)

        self.logger.info(
            "creating_controller",
            profile=config.get("profile", "unknown"),
            max_iterations=react_config.max_iterations,
            budget=react_config.default_budget,
            has_llm=llm is not None,
            has_tools=tools is not None,
        )

        def assemble(delegator: ChildControllerDelegator | None, required: list[EntryPath]) -> ReActController:
            builder = (
                ReActBuilder(react_config)
                .with_compression_config(compression_config)
                .with_session_store(session_store)
                .require(*required)
            )
            if not config.get("compression", {}).get("enabled", True):
                builder.without_compressor()
            if llm is not None:
                builder.with_llm(llm)
            if tools is not None:
                builder.with_tools(tools)
            if delegator is not None:
                builder.with_delegator(delegator)
            return builder.build()

        delegator = self._create_delegator(config, lambda child: assemble(child, []))
        return assemble(delegator, self._required_paths(config))

    def get_session_store(
        self, profile: str, config: dict[str, Any] | None = None
    ) -> SessionStoreProtocol:
        if profile not in self._session_stores:
            config = config if config is not None else self._load_profile(profile)
            self._session_stores[profile] = self._create_session_store(config)
        return self._session_stores[profile]

    def _load_profile(self, profile: str) -> dict[str, Any]:
        """
        Load configuration profile from YAML file.

        Raises:
            FileNotFoundError: If profile file doesn't exist
        """
        profile_path = self.config_dir / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile_path}")

        with open(profile_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        self.logger.debug("profile_loaded", profile=profile, config_keys=list(config.keys()))
        return config

    def _build_react_config(self, config: dict[str, Any]) -> ReActConfig:
        section = config.get("controller", {})
        defaults = ReActConfig()
        return ReActConfig(
            max_iterations=int(section.get("max_iterations", defaults.max_iterations)),
            default_budget=int(section.get("default_budget", defaults.default_budget)),
            persist_state=bool(section.get("persist_state", defaults.persist_state)),
            temperature=float(section.get("temperature", defaults.temperature)),
            honor_cancellation=bool(section.get("honor_cancellation", defaults.honor_cancellation)),
        )

    def _build_compression_config(self, config: dict[str, Any]) -> CompressionConfig:
        section = config.get("compression", {})
        defaults = CompressionConfig()
        return CompressionConfig(
            max_context_tokens=int(section.get("max_context_tokens", defaults.max_context_tokens)),
            trigger_ratio=float(section.get("trigger_ratio", defaults.trigger_ratio)),
            keep_recent=int(section.get("keep_recent", defaults.keep_recent)),
            preserve_system=bool(section.get("preserve_system", defaults.preserve_system)),
            chars_per_token=int(section.get("chars_per_token", defaults.chars_per_token)),
        )

    def _create_session_store(self, config: dict[str, Any]) -> SessionStoreProtocol:
        persistence = config.get("persistence", {})
        persistence_type = persistence.get("type", "memory")

        if persistence_type == "memory":
            return InMemorySessionStore()
        if persistence_type == "file":
            return FileSessionStore(work_dir=persistence.get("work_dir", ".agentloop"))
        raise ValueError(f"Unknown persistence type: {persistence_type}")

    def _create_llm_provider(
        self, config: dict[str, Any], react_config: ReActConfig
    ) -> LLMProviderProtocol | None:
        llm_config = config.get("llm", {})
        provider = llm_config.get("provider", "none")

        if provider in (None, "none"):
            self.logger.info("llm_not_configured", hint="Complex missions run in mock mode")
            return None
        if provider == "litellm":
            retry = llm_config.get("retry_policy", {})
            return LiteLLMProvider(
                model=llm_config.get("model", "gpt-4o-mini"),
                temperature=float(llm_config.get("temperature", react_config.temperature)),
                api_key_env=llm_config.get("api_key_env", "OPENAI_API_KEY"),
                retry_policy=RetryPolicy(
                    max_attempts=retry.get("max_attempts", 3),
                    backoff_multiplier=retry.get("backoff_multiplier", 2.0),
                    timeout=retry.get("timeout", 30),
                    retry_on_errors=retry.get("retry_on_errors", []),
                ),
            )
        raise ValueError(f"Unknown LLM provider: {provider}")

    def _create_tool_registry(self, config: dict[str, Any]) -> ToolRegistryProtocol | None:
        tool_names = config.get("tools")
        if tool_names is None:
            return None

        registry = InMemoryToolRegistry()
        for name in tool_names:
            if name not in BUILTIN_TOOLS:
                raise ValueError(f"Unknown builtin tool: {name}")
            registry.register(BUILTIN_TOOLS[name]())
        return registry

    def _create_delegator(self, config: dict[str, Any], build_child) -> ChildControllerDelegator | None:
        delegation = config.get("delegation", {})
        if not delegation.get("enabled", False):
            return None
        return ChildControllerDelegator(build_child, max_depth=int(delegation.get("max_depth", 1)))

    def _required_paths(self, config: dict[str, Any]) -> list[EntryPath]:
        try:
            return [EntryPath(path) for path in config.get("require", [])]
        except ValueError as e:
            raise ValueError(f"Unknown entry path in 'require': {e}") from e
