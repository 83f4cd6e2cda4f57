"""
File-Based Session Store
========================

Persists sessions as JSON documents under `{work_dir}/sessions/{session_id}.json`.

Responsibilities:
- Async file I/O via aiofiles
- Per-session asyncio locks so concurrent saves of one session serialize
- Atomic writes (temp file + rename)
- Graceful handling of missing or corrupt session files
- Rejection of session ids that would escape the sessions directory
"""

import asyncio
import json
from pathlib import Path

import aiofiles
import structlog

from agentloop.core.domain.session import Session

logger = structlog.get_logger()


class FileSessionStore:
    """
    JSON-file session store.

    Example:
        >>> store = FileSessionStore(work_dir=".agentloop")
        >>> await store.save(session)
        >>> restored = await store.load(session.id)
    """

    def __init__(self, work_dir: str = ".agentloop"):
        self.work_dir = Path(work_dir)
        self.sessions_dir = self.work_dir / "sessions"
        self.sessions_dir.mkdir(parents=True, exist_ok=True)
        self.locks: dict[str, asyncio.Lock] = {}
        self.logger = logger.bind(component="file_session_store")

    def _get_lock(self, session_id: str) -> asyncio.Lock:
        if session_id not in self.locks:
            self.locks[session_id] = asyncio.Lock()
        return self.locks[session_id]

    def _get_session_path(self, session_id: str) -> Path:
        """
        Map a session id to its JSON file.

        Raises:
            ValueError: If the id is empty, contains a path separator or "..",
                or would resolve outside sessions_dir
        """
        if not session_id or "/" in session_id or "\\" in session_id or ".." in session_id:
            raise ValueError(f"Invalid session id: {session_id!r}")
        path = self.sessions_dir / f"{session_id}.json"
        if path.resolve().parent != self.sessions_dir.resolve():
            raise ValueError(f"Invalid session id: {session_id!r}")
        return path

    async def save(self, session: Session) -> None:
        """
        Write the session atomically.

        Raises:
            ValueError: If the session id is not a safe file name
            OSError: If the file cannot be written
        """
        path = self._get_session_path(session.id)
        temp_path = path.with_suffix(".json.tmp")
        payload = json.dumps(session.to_dict(), indent=2, ensure_ascii=False, default=str)

        async with self._get_lock(session.id):
            try:
                async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                    await f.write(payload)
                temp_path.replace(path)
            except Exception:
                if temp_path.exists():
                    temp_path.unlink()
                raise

        self.logger.debug(
            "session.json.written",
            session_id=session.id,
            status=session.status.value,
            history_len=len(session.history),
        )

    async def load(self, session_id: str) -> Session | None:
        path = self._get_session_path(session_id)
        if not path.exists():
            return None

        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()

        try:
            return Session.from_dict(json.loads(content))
        except (ValueError, KeyError) as e:
            self.logger.warning(
                "session.json.corrupt", session_id=session_id, error=str(e)
            )
            return None

    async def list_sessions(self) -> list[str]:
        return sorted(path.stem for path in self.sessions_dir.glob("*.json"))

    async def delete(self, session_id: str) -> bool:
        path = self._get_session_path(session_id)
        if not path.exists():
            return False
        path.unlink()
        return True
