from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from agentloop.api.dependencies import get_executor
from agentloop.application.executor import ControllerExecutor
from agentloop.core.domain.models import intent_from_dict

router = APIRouter()


class ExecuteIntentRequest(BaseModel):
    """Request to execute an intent.

    Example:
        {"type": "fast_action",
         "payload": {"tool_name": "calculator",
                     "args": {"operation": "add", "a": 5, "b": 3}},
         "profile": "dev"}
    """
    type: str
    payload: dict[str, Any]
    profile: str = "dev"


class ExecuteIntentResponse(BaseModel):
    """Response from intent execution."""
    status: str
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    session_id: Optional[str] = None


@router.post("/execute", response_model=ExecuteIntentResponse)
async def execute_intent(
    request: ExecuteIntentRequest,
    executor: ControllerExecutor = Depends(get_executor),
):
    """Execute a fast action or a complex mission synchronously."""
    try:
        intent = intent_from_dict({"type": request.type, "payload": request.payload})
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        outcome = await executor.execute_intent(intent, profile=request.profile)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ExecuteIntentResponse(**outcome.to_dict())
