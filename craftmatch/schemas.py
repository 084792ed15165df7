from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .catalog import Candidate, Difficulty, MatchType, Project, ProjectMatch, Video, VideoMatch
from .items import parse_items
from .videos import estimate_difficulty


class ItemsRequest(BaseModel):
    """Either free ``text`` or a pre-split ``items`` list.

    Both forms go through the same parser so stored items always satisfy the
    item invariants.
    """

    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None
    items: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            raise ValueError("Body must be an object")
        raw_items = value.get("items")
        if isinstance(raw_items, str):
            value = {**value, "text": raw_items, "items": []}
        return value

    def parsed_items(self) -> List[str]:
        pieces: List[str] = []
        if self.text:
            pieces.append(self.text)
        pieces.extend(str(item) for item in self.items)
        return parse_items("\n".join(pieces))


class ParseResponse(BaseModel):
    items: List[str]
    valid: bool


class VideoMatchRequest(ItemsRequest):
    videos: List[Video] = Field(default_factory=list)


class CandidateMatchRequest(ItemsRequest):
    candidates: List[Candidate] = Field(default_factory=list)


class ProjectMatchOut(BaseModel):
    project: Project
    matched_materials: List[str]
    suggested_materials: List[str]
    match_score: float
    match_percentage: int

    @classmethod
    def from_record(cls, record: ProjectMatch) -> "ProjectMatchOut":
        return cls(
            project=record.project,
            matched_materials=list(record.matched_materials),
            suggested_materials=list(record.suggested_materials),
            match_score=round(record.match_score, 4),
            match_percentage=record.match_percentage,
        )


class VideoMatchOut(BaseModel):
    video: Video
    matched_items: List[str]
    suggested_items: List[str]
    match_score: float
    match_percentage: int
    match_type: MatchType
    is_exact_match: bool
    relevance_score: float
    difficulty: Difficulty

    @classmethod
    def from_record(cls, record: VideoMatch) -> "VideoMatchOut":
        return cls(
            video=record.video,
            matched_items=list(record.matched_items),
            suggested_items=list(record.suggested_items),
            match_score=round(record.match_score, 4),
            match_percentage=record.match_percentage,
            match_type=record.match_type,
            is_exact_match=record.is_exact_match,
            relevance_score=round(record.relevance_score, 4),
            difficulty=estimate_difficulty(record.video),
        )


class ProjectResultsResponse(BaseModel):
    items: List[str]
    message: str
    results: List[ProjectMatchOut]


class VideoResultsResponse(BaseModel):
    items: List[str]
    message: str
    search_queries: List[str] = Field(default_factory=list)
    results: List[VideoMatchOut]


class CandidateResultsResponse(BaseModel):
    items: List[str]
    projects: ProjectResultsResponse
    videos: VideoResultsResponse


class HealthResponse(BaseModel):
    status: str
    version: str
    overlap_mode: str
    aliases_hash: str
    projects_hash: str
    counts: Dict[str, int]
