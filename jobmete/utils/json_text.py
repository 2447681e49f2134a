"""
Parsing of JSON text returned by the language model.
"""

import json
import re
from typing import Any, Dict


class AIResponseParseError(ValueError):
    """Model output is not a JSON object. Carries the offending text."""

    def __init__(self, raw_text: str, reason: str = "not valid JSON"):
        super().__init__(f"Failed to parse model response ({reason}): {raw_text}")
        self.raw_text = raw_text
        self.reason = reason


_CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_REPEATED_COMMA = re.compile(r",\s*,+")


def repair_json_text(text: str) -> str:
    """
    Fix the syntax slips models commonly make.

    Removes a surrounding markdown code fence, collapses doubled commas and
    drops trailing commas before a closing bracket.
    """
    repaired = _CODE_FENCE.sub("", text.strip())
    repaired = _REPEATED_COMMA.sub(",", repaired)
    repaired = _TRAILING_COMMA.sub(r"\1", repaired)
    return repaired


def parse_json_object(text: str, repair: bool = False) -> Dict[str, Any]:
    """
    Parse model output into a dict.

    Args:
        text: Raw response text
        repair: Try ``repair_json_text`` once if the first parse fails

    Raises:
        AIResponseParseError: If the text (after optional repair) is not a JSON object
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        if not repair:
            raise AIResponseParseError(text)
        try:
            payload = json.loads(repair_json_text(text))
        except json.JSONDecodeError:
            raise AIResponseParseError(text, "not valid JSON even after repair")

    if not isinstance(payload, dict):
        raise AIResponseParseError(text, "expected a JSON object")
    return payload
