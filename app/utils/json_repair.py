"""Lenient JSON parsing for model output.

Even with a schema-constrained format, local models occasionally wrap the
JSON in markdown fences or prose, leave a trailing comma, or stop before the
closing brackets when they hit the token limit. The repairs below cover those
cases; anything else is reported as a decode error.
"""

import json
import re
import logging
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|```\s*$", flags=re.MULTILINE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def repair_json(raw: str) -> Tuple[Any, bool]:
    """Parse JSON, applying repairs if the direct parse fails.

    Returns:
        Tuple of (parsed value, was_repaired)

    Raises:
        json.JSONDecodeError: If the text cannot be parsed even after repairs
    """
    try:
        return json.loads(raw), False
    except json.JSONDecodeError:
        pass

    repaired = _extract_json_block(raw)
    repaired = _TRAILING_COMMA_RE.sub(r"\1", repaired)
    repaired = _balance_brackets(repaired)
    repaired = _TRAILING_COMMA_RE.sub(r"\1", repaired)

    try:
        return json.loads(repaired), True
    except json.JSONDecodeError:
        logger.warning(f"JSON repair failed. Original: {raw[:200]}... Repaired: {repaired[:200]}...")
        raise


def _extract_json_block(text: str) -> str:
    """Strip markdown fences and any prose around the outermost object or array."""
    text = _FENCE_RE.sub("", text).strip()

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return text
    start = min(starts)
    end = _matching_close(text, start)
    if end is None:
        # Truncated output: keep everything from the opening bracket
        return text[start:]
    return text[start:end + 1]


def _matching_close(text: str, start: int) -> Optional[int]:
    """Index of the bracket closing the one at ``start``, ignoring string contents."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if escaped:
            escaped = False
        elif char == "\\" and in_string:
            escaped = True
        elif char == '"':
            in_string = not in_string
        elif in_string:
            continue
        elif char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return index
    return None


def _balance_brackets(text: str) -> str:
    """Close an unterminated string and any brackets left open."""
    stack = []
    in_string = False
    escaped = False

    for char in text:
        if escaped:
            escaped = False
            continue
        if char == "\\" and in_string:
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char in "{[":
            stack.append("}" if char == "{" else "]")
        elif char in "}]" and stack and stack[-1] == char:
            stack.pop()

    if in_string:
        text += '"'
    return text + "".join(reversed(stack))


def parse_llm_json(raw: str, component_name: str = "unknown") -> Any:
    """Parse JSON from a model response with automatic repair.

    Raises:
        json.JSONDecodeError: If JSON cannot be parsed even after repairs
    """
    if not raw or not raw.strip():
        raise json.JSONDecodeError("Empty response", raw or "", 0)

    logger.debug(f"[{component_name}] RAW LLM OUTPUT:\n{raw[:1000]}{'...' if len(raw) > 1000 else ''}")

    try:
        result, was_repaired = repair_json(raw)
    except json.JSONDecodeError as e:
        logger.error(f"[{component_name}] Failed to parse JSON even after repair: {e}")
        raise
    if was_repaired:
        logger.info(f"[{component_name}] JSON was repaired before parsing")
    return result
