"""
Tolerant JSON extraction for LLM replies.

Replies may wrap the JSON in prose or markdown fences, so the first balanced
``{...}`` span is located and decoded. Failures come back as a ``ParseError``
value instead of an exception so callers can decide what the default is.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ParseError:
    """Why a reply could not be turned into a JSON object."""
    reason: str
    snippet: str = ""


@dataclass(frozen=True)
class ParseResult:
    """Either a decoded JSON object or a ParseError."""
    value: Optional[Dict[str, Any]] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: Dict[str, Any]) -> Dict[str, Any]:
        return self.value if self.ok else default


def find_balanced_object(text: str) -> Optional[str]:
    """Return the first balanced {...} substring, honouring JSON string literals."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    # Opened but never closed; any later brace sits inside this span too
    return None


def parse_json_object(text: Optional[str]) -> ParseResult:
    """Extract the first balanced brace span of an LLM reply and decode it."""
    if not text or not text.strip():
        return ParseResult(error=ParseError("empty response"))

    candidate = find_balanced_object(text)
    if candidate is None:
        reason = "unbalanced braces" if "{" in text else "no JSON object in response"
        return ParseResult(error=ParseError(reason, text[:200]))

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        return ParseResult(error=ParseError(f"invalid JSON: {e.msg}", candidate[:200]))

    return ParseResult(value=data)
