from __future__ import annotations

import re
from typing import List, Sequence

from .text_utils import is_numeric

MAX_ITEMS = 20
MAX_ITEM_LENGTH = 50

_ITEM_SEP = re.compile(r"[,\n]+")
_NUMERIC_ONLY = re.compile(r"^[\d\s]+$")
_INJECTION_CHARS = re.compile(r"[<>{}\[\]]")


def _keep(item: str) -> bool:
    if not item or len(item) >= MAX_ITEM_LENGTH:
        return False
    if _NUMERIC_ONLY.match(item):
        return False
    return not _INJECTION_CHARS.search(item)


def parse_items(raw: str) -> List[str]:
    """Split free text into a clean, deduplicated item list.

    Entries are separated by commas and/or newlines, trimmed and lowercased.
    Empty, overlong, number-only and markup-looking entries are dropped
    silently, the first ``MAX_ITEMS`` survivors are kept and duplicates are
    removed keeping the first occurrence.
    """
    if not raw:
        return []
    pieces = (piece.strip().lower() for piece in _ITEM_SEP.split(raw))
    kept = [piece for piece in pieces if _keep(piece)][:MAX_ITEMS]
    return list(dict.fromkeys(kept))


def is_valid_input(items: Sequence[str]) -> bool:
    if not items or len(items) > MAX_ITEMS:
        return False
    return any(len(item.lower()) >= 2 and not is_numeric(item.lower()) for item in items)
