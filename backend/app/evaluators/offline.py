# -*- coding: utf-8 -*-
"""Rule based answer checking used when the LLM is unavailable.

The evaluator is deliberately crude: multi-word targets are accepted when the
phrase appears anywhere in the learner's sentence, single words must appear as
a whole token (optionally with a regular ``-s``/``-ed``/``-ing`` ending), and
``name`` answers must match the target or one of its alternatives exactly
after normalisation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from app.evaluators.normalizer import contains_word_form, normalize, word_count


class TaskKind(str, Enum):
    SENTENCE = "sentence"
    NAME = "name"


class Verdict(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNSURE = "unsure"
    CHAT = "chat"


@dataclass(frozen=True)
class EvaluationResult:
    """Reply produced for a single learner turn."""

    assistant: str
    verdict: Verdict
    explanation: str = ""


# Wordings are tried in order; the first one that does not spell out the
# target is used. The last entry of each tuple is the barest fallback.
_HINT_TEMPLATES = (
    "Hint: starts with “{letter}”, {count} word(s).",
    "Clue: first letter “{letter}”, {count} in total.",
    "“{letter}…” ({count})",
)
_SENTENCE_RETRY_TEMPLATES = (
    "Almost! Try working it in directly. {hint} Another try?",
    "Close! Use the word as is. {hint} Once more?",
    "Not yet. {hint}",
    "{hint}",
)
_NAME_RETRY_TEMPLATES = (
    "Not quite. {hint} Another guess?",
    "Close! {hint} Once more?",
    "{hint}",
)
_SENTENCE_EXPLANATIONS = ("Target not clearly used.", "Not used clearly enough.", "No match.", "")
_NAME_EXPLANATIONS = ("Doesn’t match the expected answer or its alternatives.", "No match found.", "")


def _without_target(target: str, templates: Tuple[str, ...], **fields: Any) -> str:
    """Render the first template whose fixed wording does not contain ``target``.

    Only the template text is checked, placeholders are blanked for the test.
    Single-character targets cannot be kept out and use the first template.
    """

    needle = target.strip().lower()
    for template in templates:
        skeleton = template.format(**{name: "" for name in fields})
        if len(needle) < 2 or needle not in skeleton.lower():
            return template.format(**fields)
    return templates[-1].format(**fields)


def build_hint(target: Optional[str]) -> str:
    """Return the micro-hint: first letter and word count, never the full target."""

    text = (target or "").strip()
    return _without_target(text, _HINT_TEMPLATES, letter=text[:1], count=word_count(text))


def segue_line(target: Optional[str], task: Any) -> str:
    """Small-talk reply that steers the learner back to the current exercise."""

    if _task_value(task) == TaskKind.SENTENCE.value:
        nudge = f"Let’s keep going: try using “{target or ''}” in a natural sentence."
    else:
        nudge = "Your turn: which word matches the definition?"
    return f"Happy to chat! {nudge}"


def _task_value(task: Any) -> str:
    if isinstance(task, Enum):
        return str(task.value)
    return str(task or "")


def _normalised_alternatives(alternatives: Any) -> set[str]:
    if not isinstance(alternatives, (list, tuple)):
        return set()
    normalised = {normalize(str(item)) for item in alternatives if item is not None}
    normalised.discard("")
    return normalised


def _sentence_uses_target(target: str, user_input: str) -> bool:
    normalised_target = normalize(target)
    if " " in normalised_target:
        return normalised_target in normalize(user_input)
    return contains_word_form(user_input, target)


def evaluate(
    task: Any,
    target: Optional[str],
    definition: Optional[str],
    user_input: Optional[str],
    alternatives: Optional[Iterable[str]] = None,
) -> EvaluationResult:
    """Judge ``user_input`` against ``target`` without calling any remote service.

    ``definition`` is accepted for signature parity with the LLM path but is
    not used for matching. Any task other than ``sentence`` is treated as a
    ``name`` task.
    """

    target = target or ""
    user_input = user_input or ""
    hint = build_hint(target)

    if _task_value(task) == TaskKind.SENTENCE.value:
        if _sentence_uses_target(target, user_input):
            return EvaluationResult(
                assistant="Nice, that sounds natural. Ready for the next one?",
                verdict=Verdict.CORRECT,
            )
        return EvaluationResult(
            assistant=_without_target(target, _SENTENCE_RETRY_TEMPLATES, hint=hint),
            verdict=Verdict.INCORRECT,
            explanation=_without_target(target, _SENTENCE_EXPLANATIONS),
        )

    guess = normalize(user_input)
    if guess == normalize(target) or guess in _normalised_alternatives(alternatives):
        return EvaluationResult(
            assistant=f"Great, it’s “{target}”. Want to put it in a sentence?",
            verdict=Verdict.CORRECT,
        )
    return EvaluationResult(
        assistant=_without_target(target, _NAME_RETRY_TEMPLATES, hint=hint),
        verdict=Verdict.INCORRECT,
        explanation=_without_target(target, _NAME_EXPLANATIONS),
    )


__all__ = [
    "EvaluationResult",
    "TaskKind",
    "Verdict",
    "build_hint",
    "evaluate",
    "segue_line",
]
