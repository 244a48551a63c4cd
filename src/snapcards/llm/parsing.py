"""Tolerant JSON extraction from LLM replies.

Models asked for "JSON only" still wrap replies in markdown fences or prose
("Here is the list: [...]"). Parsing runs in two stages:

1. strip code-fence markers;
2. parse the whole text, or failing that, scan for the first balanced
   array/object substring of the expected type and parse that.

Everything here is pure and side-effect free.
"""

import json
import re
from typing import Any

from snapcards.errors import MalformedResponseError

_FENCE_RE = re.compile(r"```(?:json|JSON)?")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")

_OPENERS = {list: "[", dict: "{"}
_CLOSERS = {"[": "]", "{": "}"}


def strip_code_fences(content: str) -> str:
    """Remove markdown code-fence markers (```json / ```) and surrounding whitespace."""
    return _FENCE_RE.sub("", content).strip()


def find_balanced(content: str, opener: str, start: int = 0) -> tuple[int, int] | None:
    """Find the first balanced `opener ... closer` span at or after `start`.

    Brackets inside JSON strings (including escaped quotes) are ignored.

    Returns:
        (start, end) slice bounds, or None if no balanced span exists.
    """
    closer = _CLOSERS[opener]
    begin = content.find(opener, start)
    while begin != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(begin, len(content)):
            ch = content[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == opener:
                depth += 1
            elif ch == closer:
                depth -= 1
                if depth == 0:
                    return begin, i + 1
        # Unbalanced from this opener; try the next one
        begin = content.find(opener, begin + 1)
    return None


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return json.loads(_TRAILING_COMMA_RE.sub(r"\1", text))


def extract_json(content: str | None, expect: type = dict) -> Any:
    """Extract the first JSON value of type `expect` from an LLM reply.

    Args:
        content: Raw reply text.
        expect: `list` for arrays, `dict` for objects.

    Returns:
        Parsed JSON value of the expected type.

    Raises:
        MalformedResponseError: If nothing parseable of the expected type is found.
    """
    if expect not in _OPENERS:
        raise ValueError(f"expect must be list or dict, got {expect!r}")
    if not content or not content.strip():
        raise MalformedResponseError("Empty response content")

    cleaned = strip_code_fences(content)

    try:
        parsed = _loads(cleaned)
    except json.JSONDecodeError:
        parsed = None
    else:
        if isinstance(parsed, expect):
            return parsed

    opener = _OPENERS[expect]
    position = 0
    while True:
        span = find_balanced(cleaned, opener, position)
        if span is None:
            break
        start, end = span
        try:
            candidate = _loads(cleaned[start:end])
        except json.JSONDecodeError:
            position = start + 1
            continue
        if isinstance(candidate, expect):
            return candidate
        position = start + 1

    kind = "array" if expect is list else "object"
    if parsed is not None:
        raise MalformedResponseError(
            f"Expected JSON {kind}, got {type(parsed).__name__}. Content preview: {content[:200]}"
        )
    raise MalformedResponseError(f"No JSON {kind} found. Content preview: {content[:200]}")
