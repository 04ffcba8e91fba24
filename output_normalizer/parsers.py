from __future__ import annotations  # Parser chain turning untrusted model text into display text

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar, Union

T = TypeVar("T")

DEFAULT_PROMPT = "Tell me more about your experience."

_LEADING_FENCE = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?```\s*$")
_ANY_FENCE = re.compile(r"```[A-Za-z0-9_-]*")
_FEEDBACK_KEYS = ("feedback", "feeedback")


@dataclass(frozen=True)
class Ok(Generic[T]):  # Successful strategy result
    value: T


@dataclass(frozen=True)
class Fail:  # Failed strategy result with reason
    reason: str


ParseResult = Union[Ok[T], Fail]
Strategy = Callable[[str], "ParseResult[Any]"]


def strip_fences(text: str) -> str:  # Remove one leading fence (with optional language tag) and one trailing fence
    cleaned = _LEADING_FENCE.sub("", text, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def strip_all_fences(text: str) -> str:  # Remove every fence marker and keep the remaining prose
    return _ANY_FENCE.sub("", text).strip()


def _load_object(text: str) -> ParseResult[dict]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        return Fail(f"invalid json: {exc.msg if isinstance(exc, json.JSONDecodeError) else exc}")
    if not isinstance(data, dict):
        return Fail(f"json is {type(data).__name__}, expected object")
    return Ok(data)


def _text_field(data: dict, keys: Sequence[str]) -> str:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def compose_reply(data: dict) -> str:  # Join feedback and next question with a single space
    parts = [_text_field(data, _FEEDBACK_KEYS), _text_field(data, ("next_question",))]
    joined = " ".join(part for part in parts if part)
    return joined or DEFAULT_PROMPT


def parse_fenced_json(text: str) -> ParseResult[dict]:  # Strategy: fenced JSON object
    return _load_object(strip_fences(text))


def parse_raw_json(text: str) -> ParseResult[dict]:  # Strategy: bare JSON object
    return _load_object(text.strip())


def parse_prose(text: str) -> ParseResult[str]:  # Strategy: prose with fence markers removed
    remainder = strip_all_fences(text)
    if not remainder:
        return Fail("empty after stripping fences")
    return Ok(remainder)


def run_chain(text: str, strategies: Iterable[Strategy]) -> ParseResult[Any]:  # First Ok wins, otherwise the last Fail
    reasons: List[str] = []
    for strategy in strategies:
        result = strategy(text)
        if isinstance(result, Ok):
            return result
        reasons.append(f"{getattr(strategy, '__name__', 'strategy')}: {result.reason}")
    return Fail("; ".join(reasons) or "no strategies")


def parse_json_object(text: Optional[str]) -> ParseResult[dict]:  # Fenced then raw JSON object
    if not text:
        return Fail("empty model output")
    return run_chain(text, (parse_fenced_json, parse_raw_json))


def normalize_reply(text: Optional[str]) -> str:  # Display text for the candidate; never raises, never empty
    if not text or not text.strip():
        return DEFAULT_PROMPT
    parsed = parse_json_object(text)
    if isinstance(parsed, Ok):
        return compose_reply(parsed.value)
    prose = parse_prose(text)
    if isinstance(prose, Ok):
        return prose.value
    return DEFAULT_PROMPT


def to_flat_string(text: Optional[str]) -> str:  # Join string values of a JSON object; other text passes through
    if text is None:
        return ""
    parsed = parse_json_object(text)
    if isinstance(parsed, Fail):
        return text
    values = [value.strip() for value in parsed.value.values() if isinstance(value, str) and value.strip()]
    return " ".join(values)


__all__ = [
    "DEFAULT_PROMPT",
    "Fail",
    "Ok",
    "ParseResult",
    "compose_reply",
    "normalize_reply",
    "parse_fenced_json",
    "parse_json_object",
    "parse_prose",
    "parse_raw_json",
    "run_chain",
    "strip_all_fences",
    "strip_fences",
    "to_flat_string",
]
