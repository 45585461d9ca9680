# -*- coding: utf-8 -*-
"""Coach endpoint: evaluate a learner turn or reply to small talk."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.evaluators.offline import Verdict
from app.models import CoachRequest, CoachResponse
from app.services.coach_service import CoachService, MissingFieldsError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["coach"])

MISSING_FIELDS_REPLY = "Missing task/target/user_input."
SERVER_ERROR_REPLY = "I couldn’t reach the AI right now, try again."


def get_coach_service(request: Request) -> CoachService:
    return request.app.state.coach_service


def _error_response(status_code: int, assistant: str, explanation: str = "") -> JSONResponse:
    body = CoachResponse(assistant=assistant, verdict=Verdict.UNSURE, explanation=explanation)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.post("/coach", response_model=CoachResponse)
async def coach(payload: CoachRequest, service: CoachService = Depends(get_coach_service)):
    logger.info(
        "Coach turn received (mode=%s, task=%s)",
        payload.mode.value,
        payload.task.value if payload.task else None,
    )
    try:
        return await run_in_threadpool(service.respond, payload)
    except MissingFieldsError as exc:
        logger.warning("Rejecting coach turn: %s", exc)
        return _error_response(400, MISSING_FIELDS_REPLY)
    except Exception:
        logger.exception("Unexpected error while answering coach turn")
        return _error_response(500, SERVER_ERROR_REPLY, "Server error.")
