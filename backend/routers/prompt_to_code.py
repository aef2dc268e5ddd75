"""Prompt-to-code API endpoints"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from sse_starlette.sse import EventSourceResponse

from models.prompt_to_code import ModifyCodeRequest, SnapshotEvent, StopRequest
from services.errors import ConfigurationError
from services.prompt_to_code_service import PromptToCodeService

logger = logging.getLogger(__name__)

router = APIRouter()

# One service per plugin session; a new request replaces the running one
sessions: dict[str, PromptToCodeService] = {}


def get_service(session_id: str) -> PromptToCodeService:
    if session_id not in sessions:
        sessions[session_id] = PromptToCodeService()
    return sessions[session_id]


@router.post("/modify")
async def modify_code(request: ModifyCodeRequest):
    """Rewrite the selection and stream (code, description) snapshots (SSE)"""
    service = get_service(request.session_id)

    try:
        snapshots = await service.modify_code(
            code=request.code,
            requirement=request.requirement,
            source=request.source,
            is_detached=request.is_detached,
            extra_system_prompt=request.extra_system_prompt,
            generate_description=request.generate_description,
            editor=request.editor,
        )
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    chat_service = service.chat_service

    async def event_generator():
        try:
            async for snapshot in snapshots:
                event = SnapshotEvent(type="snapshot", code=snapshot.code, description=snapshot.description)
                yield {"event": "message", "data": event.model_dump_json()}
        except Exception as e:
            logger.error("Prompt-to-code stream failed: %s", e)
            event = SnapshotEvent(type="error", error=str(e))
            yield {"event": "message", "data": event.model_dump_json()}
            return

        event = SnapshotEvent(type="cancelled" if chat_service.stopped else "done")
        yield {"event": "message", "data": event.model_dump_json()}

    return EventSourceResponse(event_generator())


@router.post("/stop")
async def stop_responding(request: StopRequest) -> dict[str, bool]:
    """Stop the in-flight request of a session"""
    service = sessions.get(request.session_id)
    stopped = service.stop_responding() if service else False
    return {"stopped": stopped}
