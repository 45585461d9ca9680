"""Pydantic request and response schemas for the coach endpoint."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.evaluators.offline import EvaluationResult, TaskKind, Verdict


class CoachMode(str, Enum):
    EVAL = "eval"
    CHAT = "chat"
    GENERAL = "general"


class HistoryMessage(BaseModel):
    """One earlier turn of the conversation."""

    role: Literal["user", "assistant"] = "user"
    content: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value: Any) -> str:
        return "assistant" if value == "assistant" else "user"

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> str:
        return "" if value is None else str(value)


class CoachRequest(BaseModel):
    """Learner turn sent by the practice UI."""

    model_config = ConfigDict(populate_by_name=True)

    mode: CoachMode = CoachMode.EVAL
    task: Optional[TaskKind] = None
    target: Optional[str] = None
    definition: Optional[str] = None
    user_input: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("user_input", "userInput"),
    )
    alternatives: List[str] = Field(default_factory=list)
    history: List[HistoryMessage] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict)
    system: Optional[str] = None

    @field_validator("alternatives", mode="before")
    @classmethod
    def _coerce_alternatives(cls, value: Any) -> List[str]:
        if not isinstance(value, (list, tuple)):
            return []
        return [str(item) for item in value if item is not None]

    @field_validator("history", mode="before")
    @classmethod
    def _coerce_history(cls, value: Any) -> List[Any]:
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, dict)]

    @field_validator("meta", mode="before")
    @classmethod
    def _coerce_meta(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    def missing_fields(self) -> List[str]:
        """Names of the fields an eval/chat turn needs but did not receive."""

        missing = []
        if self.task is None:
            missing.append("task")
        if not self.target:
            missing.append("target")
        if not self.user_input:
            missing.append("user_input")
        return missing


class CoachResponse(BaseModel):
    """Reply envelope returned to the UI."""

    assistant: str
    verdict: Verdict
    explanation: str = ""

    @classmethod
    def from_result(cls, result: EvaluationResult) -> "CoachResponse":
        return cls(
            assistant=result.assistant,
            verdict=result.verdict,
            explanation=result.explanation,
        )


__all__ = ["CoachMode", "CoachRequest", "CoachResponse", "HistoryMessage"]
