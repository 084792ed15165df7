"""Helpers around DIY video records.

Nothing here talks to the network: provider search hits arrive as decoded JSON
and are turned into :class:`Video` models, search queries are built for an
external fetcher, and difficulty is estimated from the text we already have.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence

from .catalog import Difficulty, Video, VideoSource

ADVANCED_KEYWORDS = ("advanced", "complex", "professional", "expert", "difficult")
INTERMEDIATE_KEYWORDS = ("intermediate", "medium", "skilled")
BEGINNER_KEYWORDS = ("beginner", "easy", "simple", "quick", "diy for kids", "no sew")

THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

_VIEW_DIGITS = re.compile(r"[\d.,]+")
_LEADING_INT = re.compile(r"^\s*(\d+)")


def build_search_queries(items: Sequence[str]) -> List[str]:
    if not items:
        return []
    joined = " ".join(items[:3])
    queries = [f"DIY craft using {joined}", f"DIY projects with {joined}"]
    for item in items[:2]:
        queries.append(f"DIY {item} craft")
        queries.append(f"{item} craft tutorial")
    if len(items) > 1:
        queries.append(f"creative DIY with {items[0]} and {items[1]}")
    return list(dict.fromkeys(queries))


def format_duration(seconds: int | str) -> str:
    total = int(seconds)
    if total < 60:
        return f"{total}s"
    minutes, secs = divmod(total, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"


def parse_view_count(text: Optional[str]) -> int:
    """``"1.2M views"`` -> 12000000.

    Separators are dropped before the magnitude suffix is applied, so
    fractional counts scale from their digits rather than their value.
    """
    if not text:
        return 0
    match = _VIEW_DIGITS.search(text)
    if not match:
        return 0
    digits = match.group(0).replace(".", "").replace(",", "")
    if not digits:
        return 0
    if "M" in text:
        digits += "000000"
    elif "K" in text:
        digits += "000"
    return int(digits)


def video_from_provider(payload: Dict[str, Any]) -> Video:
    video_id = str(payload["videoId"])
    try:
        duration = format_duration(int(payload["lengthSeconds"]))
    except (KeyError, TypeError, ValueError):
        duration = None
    return Video(
        id=video_id,
        title=payload.get("title") or "",
        description=payload.get("description") or "",
        thumbnail=THUMBNAIL_URL.format(video_id=video_id),
        url=WATCH_URL.format(video_id=video_id),
        source=VideoSource.YOUTUBE,
        duration=duration,
        views=parse_view_count(payload.get("viewCountText")),
        channel=payload.get("author"),
    )


def estimate_difficulty(video: Video) -> Difficulty:
    content = f"{video.title} {video.description}".lower()
    if any(keyword in content for keyword in ADVANCED_KEYWORDS):
        return Difficulty.ADVANCED
    if any(keyword in content for keyword in INTERMEDIATE_KEYWORDS):
        return Difficulty.INTERMEDIATE
    if any(keyword in content for keyword in BEGINNER_KEYWORDS):
        return Difficulty.BEGINNER
    duration = video.duration or ""
    if "m" in duration and "h" not in duration:
        leading = _LEADING_INT.match(duration)
        if leading:
            minutes = int(leading.group(1))
            if minutes < 15:
                return Difficulty.BEGINNER
            if minutes < 45:
                return Difficulty.INTERMEDIATE
    return Difficulty.INTERMEDIATE
