"""
Input validation and sanitization.

Guards free-text fields that end up in HTML views or in LLM prompts against
markup/script injection and prompt-injection phrasing.
"""

import re
from typing import Optional

from jobmete.errors import InvalidArgumentError


class InputLimits:
    """Maximum (and minimum) field lengths."""
    COMPANY_NAME = 100
    EVENT_TITLE = 100
    JOB_POSITION = 100
    MEMO = 1000
    FEEDBACK = 1000
    LOCATION = 200
    DISPLAY_NAME = 100
    PASSWORD_MIN = 8
    PASSWORD_MAX = 128


DANGEROUS_PATTERNS = (
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<iframe[^>]*>.*?</iframe>", re.IGNORECASE | re.DOTALL),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<img[^>]*src[^>]*onerror[^>]*>", re.IGNORECASE),
    re.compile(r"eval\s*\(", re.IGNORECASE),
    re.compile(r"expression\s*\(", re.IGNORECASE),
    re.compile(r"import\s+", re.IGNORECASE),
    re.compile(r"<!--.*?-->", re.DOTALL),
)

PROMPT_INJECTION_PATTERNS = (
    re.compile(r"ignore\s+(previous|above|all)\s+(instructions|prompts?|commands?)", re.IGNORECASE),
    re.compile(r"disregard\s+(previous|above|all)\s+(instructions|prompts?|commands?)", re.IGNORECASE),
    re.compile(r"forget\s+(previous|above|all)\s+(instructions|prompts?|commands?)", re.IGNORECASE),
    re.compile(r"system\s*:", re.IGNORECASE),
    re.compile(r"assistant\s*:", re.IGNORECASE),
    re.compile(r"user\s*:", re.IGNORECASE),
    re.compile(r"\[INST\]", re.IGNORECASE),
    re.compile(r"\[/INST\]", re.IGNORECASE),
    re.compile(r"<\|.*?\|>"),
)

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_HTML_TAG = re.compile(r"<[^>]*>")
_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")
_WHITESPACE_RUN = re.compile(r"\s+")


def contains_dangerous_pattern(value: str) -> bool:
    """Return True if the value contains markup/script patterns."""
    return any(pattern.search(value) for pattern in DANGEROUS_PATTERNS)


def contains_prompt_injection(value: str) -> bool:
    """Return True if the value looks like an instruction aimed at the model."""
    return any(pattern.search(value) for pattern in PROMPT_INJECTION_PATTERNS)


def sanitize_input(value: str) -> str:
    """Strip script blocks, HTML tags and control characters; collapse whitespace."""
    sanitized = _SCRIPT_BLOCK.sub("", value)
    sanitized = _HTML_TAG.sub("", sanitized)
    sanitized = _CONTROL_CHARS.sub("", sanitized)
    sanitized = _WHITESPACE_RUN.sub(" ", sanitized)
    return sanitized.strip()


def validate_length(value: str, field: str, max_length: int, min_length: int = 0) -> None:
    length = len(value.strip())
    if length < min_length:
        raise InvalidArgumentError(f"{field} must be at least {min_length} characters")
    if length > max_length:
        raise InvalidArgumentError(f"{field} must be at most {max_length} characters")


def _validate_text(
    value: Optional[str],
    field: str,
    max_length: int,
    *,
    required: bool,
    check_prompt_injection: bool,
) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        if required:
            raise InvalidArgumentError(f"{field} is required")
        return ""

    validate_length(value, field, max_length, 1 if required else 0)

    if contains_dangerous_pattern(value):
        raise InvalidArgumentError(f"{field} contains characters that are not allowed")
    if check_prompt_injection and contains_prompt_injection(value):
        raise InvalidArgumentError(f"{field} contains a disallowed text pattern")

    return sanitize_input(value)


def validate_company_name(company_name: Optional[str]) -> str:
    """
    Validate a company name and return its sanitized form.

    Company names are interpolated into LLM prompts, so prompt-injection
    phrasing is rejected as well as markup.

    Raises:
        InvalidArgumentError: If the name is empty, longer than 100 characters
            or contains unsafe patterns
    """
    return _validate_text(
        company_name,
        "companyName",
        InputLimits.COMPANY_NAME,
        required=True,
        check_prompt_injection=True,
    )


def validate_memo(memo: Optional[str], field: str = "memo", max_length: int = InputLimits.MEMO) -> str:
    """Validate optional free text (memos, review feedback). Empty is allowed."""
    return _validate_text(memo, field, max_length, required=False, check_prompt_injection=True)


def validate_short_text(value: Optional[str], field: str, max_length: int) -> str:
    """Validate optional short text such as a location or job position."""
    return _validate_text(value, field, max_length, required=False, check_prompt_injection=False)


def validate_password(password: Optional[str]) -> None:
    """Password must be 8-128 characters and contain both letters and digits."""
    if not password:
        raise InvalidArgumentError("password is required")
    if len(password) < InputLimits.PASSWORD_MIN:
        raise InvalidArgumentError(f"password must be at least {InputLimits.PASSWORD_MIN} characters")
    if len(password) > InputLimits.PASSWORD_MAX:
        raise InvalidArgumentError(f"password must be at most {InputLimits.PASSWORD_MAX} characters")
    if not re.search(r"[a-zA-Z]", password) or not re.search(r"[0-9]", password):
        raise InvalidArgumentError("password must contain both letters and digits")
