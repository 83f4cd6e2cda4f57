"""
Session Store Protocol

Durable persistence for sessions. The controller only calls save(); load()
and list_sessions() serve the CLI/API and a future resume.
"""

from typing import Protocol

from agentloop.core.domain.session import Session


class SessionStoreProtocol(Protocol):
    async def save(self, session: Session) -> None:
        """Persist a snapshot of the session. Failures are logged by the caller."""
        ...

    async def load(self, session_id: str) -> Session | None:
        """Return the stored session, or None if unknown."""
        ...

    async def list_sessions(self) -> list[str]:
        ...
