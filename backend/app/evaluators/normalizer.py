# -*- coding: utf-8 -*-
"""Text canonicalisation helpers used by the offline evaluator."""

from __future__ import annotations

import re
from typing import Optional, Tuple

_DISALLOWED_CHARS = re.compile(r"[^\w\s-]", flags=re.ASCII)
_WHITESPACE = re.compile(r"\s+")

_INFLECTION_SUFFIXES: Tuple[str, ...] = ("", "s", "ed", "ing")
_VOWELS = "aeiou"


def normalize(text: Optional[str]) -> str:
    """Lower-case ``text`` and reduce it to words, hyphens and single spaces.

    Anything other than ASCII letters, digits, underscores, whitespace and
    hyphens becomes a space, whitespace runs collapse to one space and the
    result is trimmed. ``None`` and empty input give ``""``.
    """

    if not text:
        return ""
    lowered = str(text).lower()
    spaced = _DISALLOWED_CHARS.sub(" ", lowered)
    return _WHITESPACE.sub(" ", spaced).strip()


def word_count(text: Optional[str]) -> int:
    """Return the number of whitespace separated tokens in ``text``."""

    if not text:
        return 0
    return len(str(text).split())


def word_forms(base_word: Optional[str]) -> Tuple[str, ...]:
    """Return the naive inflection set ``base, base+s, base+ed, base+ing``.

    Words ending in consonant + ``e`` also get ``base+d`` and ``base-e+ing``
    so that ``consume`` matches ``consumed`` and ``consuming``. ``see``,
    ``be`` and ``free`` keep the plain four forms (no ``seed``/``bed``).
    """

    base = normalize(base_word)
    forms = [base + suffix for suffix in _INFLECTION_SUFFIXES]
    if len(base) > 2 and base.endswith("e") and base[-2] not in _VOWELS:
        forms.extend((base + "d", base[:-1] + "ing"))
    return tuple(forms)


def contains_word_form(haystack: Optional[str], base_word: Optional[str]) -> bool:
    """Return True when ``haystack`` holds ``base_word`` or a regular inflection of it.

    Matching is done on whole tokens, so ``"cat"`` does not match inside
    ``"category"``. Irregular forms (``"went"`` for ``"go"``) are not detected.
    """

    padded = f" {normalize(haystack)} "
    return any(f" {form} " in padded for form in word_forms(base_word))


__all__ = ["normalize", "word_count", "word_forms", "contains_word_form"]
