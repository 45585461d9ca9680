# -*- coding: utf-8 -*-
"""Orchestration of a single coach turn: remote model first, offline fallback second."""

from __future__ import annotations

import logging
from typing import List, Optional

from app.analyzers.llm_coach import LLMCoach
from app.config import CoachSettings
from app.evaluators.offline import EvaluationResult, Verdict, evaluate, segue_line
from app.models import CoachMode, CoachRequest, CoachResponse

logger = logging.getLogger(__name__)

GENERAL_OFFLINE_REPLY = "Hi! (general chat is offline on this deployment.)"
GENERAL_UNAVAILABLE_REPLY = "Sorry, general chat is unavailable right now."


class MissingFieldsError(ValueError):
    """Raised when an eval or chat turn lacks task, target or user input."""

    def __init__(self, fields: List[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class CoachService:
    """Answer learner turns using the configured LLM, or the offline evaluator."""

    def __init__(self, settings: CoachSettings, coach: Optional[LLMCoach] = None) -> None:
        self.settings = settings
        self.coach = coach or LLMCoach(
            provider=settings.llm_provider,
            api_key=settings.api_key,
            model=settings.model,
            temperature=settings.temperature,
            history_window=settings.history_window,
        )

    @property
    def llm_configured(self) -> bool:
        return self.coach.is_configured

    @staticmethod
    def offline_reply(request: CoachRequest) -> EvaluationResult:
        if request.mode is CoachMode.CHAT:
            return EvaluationResult(
                assistant=segue_line(request.target, request.task),
                verdict=Verdict.UNSURE,
            )
        return evaluate(
            request.task,
            request.target,
            request.definition,
            request.user_input,
            request.alternatives,
        )

    def _general_reply(self, request: CoachRequest) -> EvaluationResult:
        if not self.llm_configured:
            return EvaluationResult(assistant=GENERAL_OFFLINE_REPLY, verdict=Verdict.CHAT)
        try:
            return self.coach.general_chat(request)
        except RuntimeError as exc:
            logger.warning("General chat request failed: %s", exc)
            return EvaluationResult(assistant=GENERAL_UNAVAILABLE_REPLY, verdict=Verdict.CHAT)

    def respond(self, request: CoachRequest) -> CoachResponse:
        """Produce the reply for one learner turn.

        Raises :class:`MissingFieldsError` when an eval/chat turn is incomplete.
        Remote failures never propagate: the offline evaluator answers instead.
        """

        if request.mode is CoachMode.GENERAL:
            return CoachResponse.from_result(self._general_reply(request))

        missing = request.missing_fields()
        if missing:
            raise MissingFieldsError(missing)

        if not self.llm_configured:
            logger.debug("LLM not configured, answering %s turn offline", request.mode.value)
            return CoachResponse.from_result(self.offline_reply(request))

        try:
            result = self.coach.evaluate(request)
        except RuntimeError as exc:
            logger.warning("LLM evaluation failed, using offline evaluator: %s", exc)
            result = self.offline_reply(request)
        return CoachResponse.from_result(result)


__all__ = ["CoachService", "MissingFieldsError"]
