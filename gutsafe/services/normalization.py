"""Text normalization shared by the catalog, matcher and pattern analyzer."""

import re
from typing import List

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
E_NUMBER_PATTERN = re.compile(r"\be\d{3}")


def normalize_text(text: str) -> str:
    """Normalize label text for matching.

    - Lowercase
    - Replace punctuation with spaces
    - Collapse whitespace
    """
    text = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def find_e_numbers(normalized: str) -> List[str]:
    return E_NUMBER_PATTERN.findall(normalized)


def contains_token(normalized: str, token: str) -> bool:
    """True if token occurs in normalized text as a whole word sequence."""
    if not token:
        return False
    return re.search(rf"(?<!\w){re.escape(token)}(?!\w)", normalized) is not None
