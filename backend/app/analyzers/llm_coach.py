# -*- coding: utf-8 -*-
"""LLM backed reply generation for the vocabulary coach."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Literal, Optional

from anthropic import Anthropic
from anthropic import APIConnectionError as AnthropicConnectionError
from anthropic import APIError as AnthropicAPIError
from openai import APIConnectionError as OpenAIConnectionError
from openai import APIError as OpenAIAPIError
from openai import OpenAI

from app.evaluators.normalizer import word_count
from app.evaluators.offline import EvaluationResult, Verdict, segue_line
from app.models import CoachRequest
from app.prompts.coach_prompt import (
    COACH_SYSTEM_PROMPT,
    FEW_SHOT_EXAMPLES,
    GENERAL_SYSTEM_PROMPT,
    PAYLOAD_INSTRUCTION,
)

logger = logging.getLogger(__name__)

_EVAL_VERDICTS = {Verdict.CORRECT.value, Verdict.INCORRECT.value, Verdict.UNSURE.value}


class LLMCoach:
    """Send learner turns to OpenAI or Claude and shape the JSON reply."""

    def __init__(
        self,
        provider: Literal["openai", "claude"] = "openai",
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        history_window: int = 6,
        max_tokens: int = 512,
    ) -> None:
        self.provider = provider
        self.model = model
        self.temperature = temperature
        self.history_window = history_window
        self.max_tokens = max_tokens
        self.client: Any = None

        api_key_present = bool(api_key)
        if provider == "claude":
            logger.info("Creating Anthropic client (api_key_present=%s)", api_key_present)
            if api_key_present:
                self.client = Anthropic(api_key=api_key)
        else:
            logger.info("Creating OpenAI client (api_key_present=%s)", api_key_present)
            if api_key_present:
                self.client = OpenAI(api_key=api_key)

        if not api_key_present:
            logger.warning("No API key for provider %s, offline evaluation will be used.", provider)

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    # ------------------------------------------------------------------
    # Reply parsing
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_json_payload(raw_text: str) -> Dict[str, Any]:
        """Extract a JSON object from an LLM response.

        Tries the whole text first, then a fenced code block, then the first
        brace balanced object in the text.
        """
        if not raw_text or not raw_text.strip():
            raise ValueError("LLM response payload is empty.")

        raw_text = raw_text.strip()

        try:
            payload = json.loads(raw_text)
            if isinstance(payload, dict):
                return payload
        except json.JSONDecodeError as exc:
            logger.debug("Failed to parse entire response as JSON: %s", exc)

        code_block_match = re.search(r"```(?:json)?\s*(.+?)\s*```", raw_text, flags=re.DOTALL)
        if code_block_match:
            try:
                payload = json.loads(code_block_match.group(1))
                if isinstance(payload, dict):
                    logger.debug("Parsed JSON from markdown code block")
                    return payload
            except json.JSONDecodeError as exc:
                logger.warning("Found markdown code block but JSON parsing failed: %s", exc)

        first_brace = raw_text.find("{")
        if first_brace == -1:
            raise ValueError("Unable to locate JSON object in LLM response.")

        depth = 0
        in_string = False
        escape_next = False
        for index in range(first_brace, len(raw_text)):
            char = raw_text[index]
            if escape_next:
                escape_next = False
                continue
            if char == "\\":
                escape_next = True
                continue
            if char == '"':
                in_string = not in_string
                continue
            if in_string:
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    try:
                        payload = json.loads(raw_text[first_brace : index + 1])
                    except json.JSONDecodeError as exc:
                        raise ValueError(f"Unable to parse JSON from LLM response: {exc}") from exc
                    if isinstance(payload, dict):
                        return payload
                    break

        raise ValueError("Unable to parse JSON from LLM response.")

    @staticmethod
    def _parse_reply(raw_text: str) -> Optional[Dict[str, Any]]:
        try:
            return LLMCoach._extract_json_payload(raw_text)
        except ValueError as exc:
            logger.warning("LLM reply was not valid JSON: %s", exc)
            return None

    # ------------------------------------------------------------------
    # Prompt assembly
    # ------------------------------------------------------------------

    def _build_user_payload(self, request: CoachRequest) -> Dict[str, Any]:
        target = request.target or ""
        history = request.history[-self.history_window :] if self.history_window > 0 else []
        return {
            "instruction": PAYLOAD_INSTRUCTION,
            "mode": request.mode.value,
            "task": request.task.value if request.task else None,
            "target": request.target,
            "definition": request.definition,
            "user_input": request.user_input,
            "alternatives": list(request.alternatives),
            "history": [message.model_dump() for message in history],
            "meta": {
                "wordCount": word_count(target),
                "firstLetter": target[:1],
                **request.meta,
            },
        }

    def build_messages(self, request: CoachRequest) -> List[Dict[str, str]]:
        """Return the chat transcript for an eval or chat turn, system prompt first."""

        system_prompt = (request.system or COACH_SYSTEM_PROMPT).strip()
        messages: List[Dict[str, str]] = [{"role": "system", "content": system_prompt}]
        for example_user, example_assistant in FEW_SHOT_EXAMPLES:
            messages.append({"role": "user", "content": json.dumps(example_user, ensure_ascii=False)})
            messages.append(
                {"role": "assistant", "content": json.dumps(example_assistant, ensure_ascii=False)}
            )
        messages.append(
            {
                "role": "user",
                "content": json.dumps(self._build_user_payload(request), ensure_ascii=False),
            }
        )
        return messages

    @staticmethod
    def build_general_messages(request: CoachRequest) -> List[Dict[str, str]]:
        messages: List[Dict[str, str]] = [{"role": "system", "content": GENERAL_SYSTEM_PROMPT}]
        messages.extend({"role": turn.role, "content": turn.content} for turn in request.history)
        messages.append({"role": "user", "content": request.user_input or ""})
        return messages

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def evaluate(self, request: CoachRequest) -> EvaluationResult:
        """Ask the model to judge an eval or chat turn.

        Raises ``RuntimeError`` when the provider is not configured or the
        request fails; the caller decides how to fall back.
        """

        messages = self.build_messages(request)
        logger.debug(
            "Coach prompt prepared (provider=%s, messages=%d)",
            self.provider,
            len(messages),
        )
        raw_text = self._complete(messages)
        parsed = self._parse_reply(raw_text) or {}

        assistant = str(parsed.get("assistant") or "").strip()
        if not assistant:
            assistant = segue_line(request.target, request.task)

        verdict_value = str(parsed.get("verdict") or "").strip().lower()
        verdict = Verdict(verdict_value) if verdict_value in _EVAL_VERDICTS else Verdict.UNSURE

        explanation = parsed.get("explanation")
        return EvaluationResult(
            assistant=assistant,
            verdict=verdict,
            explanation=str(explanation).strip() if explanation else "",
        )

    def general_chat(self, request: CoachRequest) -> EvaluationResult:
        """Free-form assistant reply for ``general`` mode."""

        raw_text = self._complete(self.build_general_messages(request))
        parsed = self._parse_reply(raw_text)
        if parsed is None:
            return EvaluationResult(assistant=raw_text.strip() or "Thanks!", verdict=Verdict.CHAT)

        explanation = parsed.get("explanation")
        return EvaluationResult(
            assistant=str(parsed.get("assistant") or raw_text.strip() or "Thanks!"),
            verdict=Verdict.CHAT,
            explanation=str(explanation).strip() if explanation else "",
        )

    # ------------------------------------------------------------------
    # Provider calls
    # ------------------------------------------------------------------

    def _complete(self, messages: List[Dict[str, str]]) -> str:
        if not self.is_configured:
            raise RuntimeError(f"{self.provider} API key is not configured.")
        if self.provider == "claude":
            return self._complete_with_claude(messages)
        return self._complete_with_gpt(messages)

    def _complete_with_gpt(self, messages: List[Dict[str, str]]) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                response_format={"type": "json_object"},
                messages=messages,
            )
        except (TimeoutError, OpenAIConnectionError, OpenAIAPIError) as exc:
            logger.exception("OpenAI request failed")
            raise RuntimeError(f"OpenAI request failed: {exc}") from exc

        raw_text = ""
        choices = getattr(response, "choices", None) or []
        if choices:
            message = getattr(choices[0], "message", None)
            raw_text = (getattr(message, "content", "") or "").strip()

        usage = getattr(response, "usage", None)
        logger.debug(
            "OpenAI reply received (length=%s chars, tokens=%s)",
            len(raw_text),
            getattr(usage, "total_tokens", "N/A"),
        )
        return raw_text

    def _complete_with_claude(self, messages: List[Dict[str, str]]) -> str:
        system_parts = [message["content"] for message in messages if message["role"] == "system"]
        conversation = [message for message in messages if message["role"] != "system"]

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system="\n\n".join(system_parts),
                messages=conversation,
            )
        except (TimeoutError, AnthropicConnectionError, AnthropicAPIError) as exc:
            logger.exception("Claude request failed")
            raise RuntimeError(f"Claude request failed: {exc}") from exc

        text_chunks = []
        for block in getattr(response, "content", None) or []:
            if getattr(block, "type", "") == "text":
                text_chunks.append(getattr(block, "text", ""))
        raw_text = "".join(text_chunks).strip()

        usage_info: Dict[str, int] = {}
        usage = getattr(response, "usage", None)
        if usage is not None:
            for key in ("input_tokens", "output_tokens"):
                if hasattr(usage, key):
                    usage_info[key] = getattr(usage, key)
        logger.debug(
            "Claude reply received (length=%s chars, tokens=%s)",
            len(raw_text),
            sum(usage_info.values()) if usage_info else "N/A",
        )
        return raw_text


__all__ = ["LLMCoach"]
