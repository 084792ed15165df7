from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .aliases import AliasResolver, AliasTable
from .catalog import (
    Candidate,
    MatchType,
    Project,
    ProjectMatch,
    Video,
    VideoMatch,
    round_percentage,
)
from .ranking import rank_projects, rank_videos
from .similarity import OverlapMode, SimilarityScorer
from .text_utils import extract_keywords, normalize_text

DIY_KEYWORDS = ("diy", "craft", "tutorial", "how to", "make", "project")
RELEVANCE_BONUS = 0.2
PARTIAL_MATCH_PERCENTAGE = 70

Expansion = Tuple[str, FrozenSet[str]]


@dataclass(frozen=True)
class MatchingOptions:
    overlap_mode: OverlapMode = OverlapMode.PROPORTIONAL
    project_alias_threshold: float = 0.6
    video_alias_threshold: float = 0.7
    match_threshold: float = 0.5
    keyword_limit: int = 20

    def scorer(self) -> SimilarityScorer:
        return SimilarityScorer(self.overlap_mode)

    def project_resolver(self, aliases: AliasTable) -> AliasResolver:
        return AliasResolver(aliases, self.scorer(), self.project_alias_threshold)

    def video_resolver(self, aliases: AliasTable) -> AliasResolver:
        return AliasResolver(aliases, self.scorer(), self.video_alias_threshold)


DEFAULT_OPTIONS = MatchingOptions()


def _first_owner(
    expanded: Sequence[Expansion],
    targets: Iterable[str],
    scorer: SimilarityScorer,
    threshold: float,
) -> Optional[str]:
    targets = tuple(targets)
    for raw_item, variants in expanded:
        for variant in variants:
            if any(scorer.similarity(variant, target) > threshold for target in targets):
                return raw_item
    return None


def _match_project(
    expanded: Sequence[Expansion],
    project: Project,
    resolver: AliasResolver,
    options: MatchingOptions,
) -> ProjectMatch:
    matched: List[str] = []
    suggested: List[str] = []
    for material in project.materials:
        targets = resolver.expand(material) | {normalize_text(material)}
        owner = _first_owner(expanded, targets, resolver.scorer, options.match_threshold)
        if owner is None:
            suggested.append(material)
        elif owner not in matched:
            matched.append(owner)
    # projects without materials are scored 0 and dropped by the caller
    score = len(matched) / len(project.materials) if project.materials else 0.0
    return ProjectMatch(
        project=project,
        matched_materials=tuple(matched),
        suggested_materials=tuple(suggested),
        match_score=score,
    )


def match_project(
    items: Sequence[str],
    project: Project,
    aliases: AliasTable,
    options: MatchingOptions = DEFAULT_OPTIONS,
) -> ProjectMatch:
    resolver = options.project_resolver(aliases)
    return _match_project(resolver.expand_all(items), project, resolver, options)


def find_matching_projects(
    items: Sequence[str],
    projects: Iterable[Project],
    aliases: AliasTable,
    options: MatchingOptions = DEFAULT_OPTIONS,
) -> List[ProjectMatch]:
    if not items:
        return []
    resolver = options.project_resolver(aliases)
    expanded = resolver.expand_all(items)
    records = (_match_project(expanded, project, resolver, options) for project in projects)
    return rank_projects(record for record in records if record.match_score > 0)


def _classify(percentage: int) -> MatchType:
    if percentage == 100:
        return MatchType.EXACT
    if percentage >= PARTIAL_MATCH_PERCENTAGE:
        return MatchType.PARTIAL
    return MatchType.SUGGESTED


def _empty_video_match(video: Video) -> VideoMatch:
    return VideoMatch(
        video=video,
        matched_items=(),
        suggested_items=(),
        match_score=0.0,
        match_percentage=0,
        match_type=MatchType.SUGGESTED,
        relevance_score=0.0,
    )


def _match_video(
    expanded: Sequence[Expansion],
    video: Video,
    scorer: SimilarityScorer,
    options: MatchingOptions,
) -> VideoMatch:
    if not expanded:
        return _empty_video_match(video)
    content = f"{video.title} {video.description}".lower()
    keywords = extract_keywords(content, options.keyword_limit)
    matched: List[str] = []
    best_scores: List[float] = []
    for raw_item, variants in expanded:
        best = max(
            (scorer.similarity(variant, keyword) for variant in variants for keyword in keywords),
            default=0.0,
        )
        best = max(best, scorer.similarity(raw_item, video.title))
        if best > options.match_threshold:
            matched.append(raw_item)
            best_scores.append(best)
    score = len(matched) / len(expanded)
    percentage = round_percentage(score)
    average = sum(best_scores) / len(best_scores) if best_scores else 0.0
    bonus = RELEVANCE_BONUS if any(keyword in content for keyword in DIY_KEYWORDS) else 0.0
    return VideoMatch(
        video=video,
        matched_items=tuple(matched),
        suggested_items=tuple(raw_item for raw_item, _ in expanded if raw_item not in matched),
        match_score=score,
        match_percentage=percentage,
        match_type=_classify(percentage),
        relevance_score=min(average + bonus, 1.0),
    )


def match_video(
    items: Sequence[str],
    video: Video,
    aliases: AliasTable,
    options: MatchingOptions = DEFAULT_OPTIONS,
) -> VideoMatch:
    resolver = options.video_resolver(aliases)
    return _match_video(resolver.expand_all(items), video, resolver.scorer, options)


def score_and_rank_videos(
    videos: Iterable[Video],
    items: Sequence[str],
    aliases: AliasTable,
    options: MatchingOptions = DEFAULT_OPTIONS,
) -> List[VideoMatch]:
    if not items:
        return []
    resolver = options.video_resolver(aliases)
    expanded = resolver.expand_all(items)
    return rank_videos(_match_video(expanded, video, resolver.scorer, options) for video in videos)


def match_candidates(
    items: Sequence[str],
    candidates: Iterable[Candidate],
    aliases: AliasTable,
    options: MatchingOptions = DEFAULT_OPTIONS,
) -> Tuple[List[ProjectMatch], List[VideoMatch]]:
    """Split a mixed candidate list by kind and rank each kind separately."""
    projects: List[Project] = []
    videos: List[Video] = []
    for candidate in candidates:
        if isinstance(candidate, Project):
            projects.append(candidate)
        else:
            videos.append(candidate)
    return (
        find_matching_projects(items, projects, aliases, options),
        score_and_rank_videos(videos, items, aliases, options),
    )
