"""
LiteLLM Provider

Reasoning backend adapter implementing LLMProviderProtocol on top of
litellm.acompletion, with a provider-side timeout and retry policy.
"""

import asyncio
import os
import time
from dataclasses import dataclass, field
from typing import Any

import litellm
import structlog

from agentloop.core.domain.models import ChatMessage, LlmResponse, LlmUsage


@dataclass
class RetryPolicy:
    """Retry policy configuration."""

    max_attempts: int = 3
    backoff_multiplier: float = 2.0
    timeout: int = 30
    retry_on_errors: list[str] = field(default_factory=list)


def _usage_value(usage: Any, key: str) -> int:
    if isinstance(usage, dict):
        return int(usage.get(key) or 0)
    return int(getattr(usage, key, 0) or 0)


class LiteLLMProvider:
    """
    Chat backend backed by LiteLLM.

    Any provider LiteLLM supports can be addressed through `model`
    (e.g. "gpt-4o-mini", "azure/my-deployment", "ollama/llama3").
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        api_key_env: str | None = "OPENAI_API_KEY",
        retry_policy: RetryPolicy | None = None,
        **params: Any,
    ):
        self.model = model
        self.temperature = temperature
        self.retry_policy = retry_policy or RetryPolicy()
        self.params = params
        self.logger = structlog.get_logger().bind(component="litellm_provider")

        self.api_key = os.getenv(api_key_env) if api_key_env else None
        if api_key_env and not self.api_key:
            self.logger.warning(
                "llm_api_key_missing",
                env_var=api_key_env,
                hint="Set environment variable for API access",
            )

    async def chat(self, messages: list[ChatMessage]) -> LlmResponse:
        """
        Perform a chat completion with retries.

        Raises:
            Exception: The last provider error once retries are exhausted
        """
        payload = [message.to_dict() for message in messages]
        params: dict[str, Any] = {"temperature": self.temperature, **self.params}
        if self.api_key:
            params["api_key"] = self.api_key

        for attempt in range(self.retry_policy.max_attempts):
            try:
                start_time = time.time()
                self.logger.info(
                    "llm_completion_started",
                    model=self.model,
                    attempt=attempt + 1,
                    message_count=len(payload),
                )

                response = await litellm.acompletion(
                    model=self.model,
                    messages=payload,
                    timeout=self.retry_policy.timeout,
                    **params,
                )

                content = response.choices[0].message.content or ""
                usage = getattr(response, "usage", None) or {}
                latency_ms = int((time.time() - start_time) * 1000)

                result = LlmResponse(
                    content=content,
                    usage=LlmUsage(
                        prompt_tokens=_usage_value(usage, "prompt_tokens"),
                        completion_tokens=_usage_value(usage, "completion_tokens"),
                    ),
                )
                self.logger.info(
                    "llm_completion_success",
                    model=self.model,
                    tokens=result.usage.prompt_tokens + result.usage.completion_tokens,
                    latency_ms=latency_ms,
                )
                return result

            except Exception as e:
                error_type = type(e).__name__
                error_msg = str(e)

                should_retry = attempt < self.retry_policy.max_attempts - 1 and any(
                    err_type in error_type or err_type in error_msg
                    for err_type in self.retry_policy.retry_on_errors
                )
                if not should_retry:
                    self.logger.error(
                        "llm_completion_failed",
                        model=self.model,
                        error_type=error_type,
                        error=error_msg[:200],
                        attempts=attempt + 1,
                    )
                    raise

                backoff_time = self.retry_policy.backoff_multiplier**attempt
                self.logger.warning(
                    "llm_completion_retry",
                    model=self.model,
                    error_type=error_type,
                    attempt=attempt + 1,
                    backoff_seconds=backoff_time,
                )
                await asyncio.sleep(backoff_time)

        raise RuntimeError("LLM retry loop exited without a result")
