"""Offline answer evaluation for vocabulary practice."""

from .normalizer import contains_word_form, normalize, word_count, word_forms
from .offline import EvaluationResult, TaskKind, Verdict, build_hint, evaluate, segue_line

__all__ = [
    "EvaluationResult",
    "TaskKind",
    "Verdict",
    "build_hint",
    "contains_word_form",
    "evaluate",
    "normalize",
    "segue_line",
    "word_count",
    "word_forms",
]
