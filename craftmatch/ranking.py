from __future__ import annotations

from typing import Iterable, List, Sequence

from .catalog import MatchType, ProjectMatch, VideoMatch

MIN_VIDEO_PERCENTAGE = 30
MIN_VIDEO_RELEVANCE = 0.4


def rank_projects(records: Iterable[ProjectMatch]) -> List[ProjectMatch]:
    return sorted(
        records,
        key=lambda record: (-record.match_score, len(record.suggested_materials)),
    )


def keep_video(record: VideoMatch) -> bool:
    return (
        record.match_percentage > MIN_VIDEO_PERCENTAGE
        or record.match_type is MatchType.EXACT
        or record.relevance_score > MIN_VIDEO_RELEVANCE
    )


def rank_videos(records: Iterable[VideoMatch]) -> List[VideoMatch]:
    # sorted() is stable, so ties keep catalog order
    return sorted(
        (record for record in records if keep_video(record)),
        key=lambda record: (
            -record.match_type.rank,
            -record.match_percentage,
            -record.relevance_score,
            len(record.suggested_items),
        ),
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def project_results_message(results: Sequence[ProjectMatch], item_count: int) -> str:
    if item_count == 0:
        return "Add some items you have at home to discover DIY projects!"
    if not results:
        return "No projects match those items yet. Try adding common craft supplies like scissors, glue, paper, or tape!"
    complete = sum(1 for result in results if result.match_score >= 1.0)
    if complete:
        return f"Found {_plural(complete, 'project')} you can make with what you have!"
    return f"Found {_plural(len(results), 'project')} you're close to making!"


def video_results_message(results: Sequence[VideoMatch], item_count: int) -> str:
    if not results:
        if item_count == 0:
            return "Add some items you have at home to discover DIY projects!"
        return (
            "We couldn't find DIY videos matching those items right now. "
            "Try adding common craft supplies like scissors, glue, paper, or tape!"
        )
    exact = sum(1 for result in results if result.match_type is MatchType.EXACT)
    if exact:
        return f"Found {_plural(exact, 'video')} where you have everything needed!"
    partial = sum(1 for result in results if result.match_type is MatchType.PARTIAL)
    if partial:
        return f"Found {_plural(partial, 'project')} you're almost ready to make!"
    return f"Found {_plural(len(results), 'creative option')} you can explore!"
