"""In-memory session store holding deep-copied snapshots."""

import copy

import structlog

from agentloop.core.domain.session import Session


class InMemorySessionStore:
    """
    Session store keeping one snapshot per session id.

    save() copies the session, so later in-place mutation by a running loop
    does not alter what was stored.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self.logger = structlog.get_logger().bind(component="memory_session_store")

    async def save(self, session: Session) -> None:
        self._sessions[session.id] = copy.deepcopy(session)
        self.logger.debug(
            "session_saved",
            session_id=session.id,
            status=session.status.value,
            history_len=len(session.history),
        )

    async def load(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        return copy.deepcopy(session) if session is not None else None

    async def list_sessions(self) -> list[str]:
        return list(self._sessions)

    async def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None
