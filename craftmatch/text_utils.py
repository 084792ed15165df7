from __future__ import annotations

import re
from typing import List, Optional

_WORD_SEP = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]+")


def normalize_text(raw: Optional[str]) -> str:
    if not raw:
        return ""
    return _NON_ALNUM.sub("", raw.lower()).strip()


def tokenize(normalized: str) -> List[str]:
    return [token for token in _WORD_SEP.split(normalized) if token]


def extract_keywords(text: str, limit: int = 20) -> List[str]:
    tokens = [token for token in tokenize(normalize_text(text)) if len(token) > 2]
    return tokens[:limit]


def is_numeric(token: str) -> bool:
    return bool(token) and token.isdigit()
