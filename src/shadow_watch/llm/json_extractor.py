"""
Extraction of JSON values from free-form LLM output.

Models frequently wrap JSON in prose or markdown fences, so the extractor
tries, in order: the whole text, the first fenced code block, the first
decodable object and finally the first decodable array.
"""

import json
import re
from typing import Any, Optional

_CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*([\[{][\s\S]*?[\]}])\s*```")

_decoder = json.JSONDecoder()


def _decode_from(text: str, opener: str) -> Optional[Any]:
    """Decode the first value starting at any ``opener`` character."""
    start = text.find(opener)
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
            return value
        except json.JSONDecodeError:
            start = text.find(opener, start + 1)
    return None


def extract_json(content: Optional[str]) -> Optional[Any]:
    """
    Extract a JSON object or array from text.

    Args:
        content: Raw text returned by a model

    Returns:
        The decoded value, or None if no JSON could be found
    """
    if not content or not content.strip():
        return None

    trimmed = content.strip()
    if trimmed[0] in "{[":
        try:
            return json.loads(trimmed)
        except json.JSONDecodeError:
            pass

    match = _CODE_BLOCK_RE.search(content)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            block = match.group(1)
            value = _decode_from(block, "{")
            if value is not None:
                return value

    value = _decode_from(content, "{")
    if value is not None:
        return value

    return _decode_from(content, "[")
