from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Dict, Iterable, Iterator, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class VideoSource(str, Enum):
    YOUTUBE = "youtube"
    DAILYMOTION = "dailymotion"
    VIMEO = "vimeo"


class Project(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    kind: Literal["project"] = "project"
    id: str
    title: str
    difficulty: Difficulty = Difficulty.BEGINNER
    time_estimate: str = Field(default="", alias="timeEstimate")
    description: str = ""
    materials: Tuple[str, ...] = ()
    tutorial_url: Optional[str] = Field(default=None, alias="tutorialUrl")

    @field_validator("materials", mode="before")
    @classmethod
    def clean_materials(cls, value: object) -> Tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            raise ValueError("materials must be a list of strings")
        return tuple(str(material).strip() for material in value if str(material).strip())


class Video(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["video"] = "video"
    id: str
    title: str
    description: str = ""
    thumbnail: str = ""
    url: str
    source: VideoSource = VideoSource.YOUTUBE
    duration: Optional[str] = None
    views: Optional[int] = Field(default=None, ge=0)
    channel: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value: object) -> str:
        return "" if value is None else str(value)


Candidate = Annotated[Union[Project, Video], Field(discriminator="kind")]


class MatchType(str, Enum):
    EXACT = "exact"
    PARTIAL = "partial"
    SUGGESTED = "suggested"

    @property
    def rank(self) -> int:
        return _MATCH_TYPE_RANK[self]


_MATCH_TYPE_RANK = {MatchType.EXACT: 3, MatchType.PARTIAL: 2, MatchType.SUGGESTED: 1}


def round_percentage(score: float) -> int:
    return math.floor(score * 100 + 0.5)


@dataclass(frozen=True)
class ProjectMatch:
    project: Project
    matched_materials: Tuple[str, ...]
    suggested_materials: Tuple[str, ...]
    match_score: float

    @property
    def match_percentage(self) -> int:
        return round_percentage(self.match_score)


@dataclass(frozen=True)
class VideoMatch:
    video: Video
    matched_items: Tuple[str, ...]
    suggested_items: Tuple[str, ...]
    match_score: float
    match_percentage: int
    match_type: MatchType
    relevance_score: float

    @property
    def is_exact_match(self) -> bool:
        return self.match_type is MatchType.EXACT


class ProjectCatalog:
    """Read-only, ordered collection of craft projects."""

    def __init__(self, projects: Iterable[Project]):
        self._projects: Tuple[Project, ...] = tuple(projects)
        self._by_id: Dict[str, Project] = {}
        for project in self._projects:
            if project.id in self._by_id:
                raise ValueError(f"Duplicate project id in catalog: {project.id}")
            self._by_id[project.id] = project

    @classmethod
    def from_json(cls, path: str | Path) -> "ProjectCatalog":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Project catalog not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            raw_projects = list(json.load(fh))
        return cls(Project.model_validate(obj) for obj in raw_projects)

    def get(self, project_id: str) -> Optional[Project]:
        return self._by_id.get(project_id)

    @property
    def projects(self) -> Tuple[Project, ...]:
        return self._projects

    def __iter__(self) -> Iterator[Project]:
        return iter(self._projects)

    def __len__(self) -> int:
        return len(self._projects)
