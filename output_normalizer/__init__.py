"""Normalization of untrusted language-model output."""
from .parsers import (
    DEFAULT_PROMPT,
    Fail,
    Ok,
    ParseResult,
    compose_reply,
    normalize_reply,
    parse_fenced_json,
    parse_json_object,
    parse_prose,
    parse_raw_json,
    run_chain,
    strip_all_fences,
    strip_fences,
    to_flat_string,
)

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
