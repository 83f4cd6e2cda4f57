from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from agentloop.api.dependencies import get_executor
from agentloop.application.executor import ControllerExecutor
from agentloop.core.domain.errors import SessionNotFoundError

router = APIRouter()


@router.get("/sessions")
async def list_sessions(
    profile: str = "dev",
    executor: ControllerExecutor = Depends(get_executor),
) -> dict[str, Any]:
    """List persisted session ids for a profile."""
    return {"sessions": await executor.list_sessions(profile)}


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    profile: str = "dev",
    executor: ControllerExecutor = Depends(get_executor),
) -> dict[str, Any]:
    """Get a persisted session with its full history."""
    try:
        session = await executor.get_session(session_id, profile)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session.to_dict()


@router.post("/sessions/{session_id}/cancel")
async def cancel_session(
    session_id: str,
    profile: str = "dev",
    executor: ControllerExecutor = Depends(get_executor),
) -> dict[str, Any]:
    """Request cancellation; honored between iterations when the profile enables it."""
    await executor.cancel(session_id, profile)
    return {"session_id": session_id, "acknowledged": True}
