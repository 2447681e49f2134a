"""
Company name normalization.

Produces the canonical key used to detect duplicate company records.
"""

import re


# Corporate entity-type markers (kanji, hiragana reading and the enclosed ㈱ glyph)
ENTITY_TYPE_TOKENS = (
    "株式会社",
    "かぶしきがいしゃ",
    "㈱",
    "有限会社",
    "ゆうげんがいしゃ",
    "合同会社",
    "ごうどうがいしゃ",
)

_ENTITY_TYPE_PATTERN = re.compile("|".join(re.escape(token) for token in ENTITY_TYPE_TOKENS))

# \s is unicode-aware, so this also covers the full-width space (U+3000)
_WHITESPACE_PATTERN = re.compile(r"\s+")

_SEPARATOR_PATTERN = re.compile(r"[.,、。・]")


def normalize_company_name(name: str) -> str:
    """
    Normalize a company name into a lowercase dedup key.

    Whitespace and separator glyphs are stripped before the entity-type
    tokens so that "株式 会社" is recognised as a token, and tokens are removed
    until none remain. Both rules keep the function idempotent.

    Examples:
        normalize_company_name("株式会社コドモン")  # => "コドモン"
        normalize_company_name("コドモン株式会社")  # => "コドモン"
        normalize_company_name("㈱コドモン")        # => "コドモン"
        normalize_company_name("株式会社")          # => ""
    """
    if not name:
        return ""

    normalized = name.lower()
    normalized = _WHITESPACE_PATTERN.sub("", normalized)
    normalized = _SEPARATOR_PATTERN.sub("", normalized)

    while True:
        stripped = _ENTITY_TYPE_PATTERN.sub("", normalized)
        if stripped == normalized:
            return stripped
        normalized = stripped
