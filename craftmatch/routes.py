from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from .aliases import AliasTable
from .catalog import ProjectCatalog
from .items import is_valid_input
from .matching import (
    MatchingOptions,
    find_matching_projects,
    match_candidates,
    score_and_rank_videos,
)
from .observability import hash_items, record_invalid_input, record_match, span, structured_log
from .ranking import project_results_message, video_results_message
from .schemas import (
    CandidateMatchRequest,
    CandidateResultsResponse,
    ItemsRequest,
    ParseResponse,
    ProjectMatchOut,
    ProjectResultsResponse,
    VideoMatchOut,
    VideoMatchRequest,
    VideoResultsResponse,
)
from .videos import build_search_queries

router = APIRouter()

INVALID_INPUT_DETAIL = "Add at least one real item (two or more characters, not just numbers), up to 20 items."


@dataclass(frozen=True)
class MatchContext:
    aliases: AliasTable
    projects: ProjectCatalog
    options: MatchingOptions = field(default_factory=MatchingOptions)


def get_context(request: Request) -> MatchContext:
    return request.app.state.match_context


def _validated_items(payload: ItemsRequest, kind: str) -> List[str]:
    with span("parse_items"):
        items = payload.parsed_items()
    if not is_valid_input(items):
        record_invalid_input(kind)
        raise HTTPException(status_code=422, detail=INVALID_INPUT_DETAIL)
    return items


def _project_response(items: List[str], context: MatchContext) -> ProjectResultsResponse:
    with span("match_projects", candidates=len(context.projects)):
        records = find_matching_projects(items, context.projects, context.aliases, context.options)
    return ProjectResultsResponse(
        items=items,
        message=project_results_message(records, len(items)),
        results=[ProjectMatchOut.from_record(record) for record in records],
    )


@router.post("/items/parse", response_model=ParseResponse)
async def parse(payload: ItemsRequest):
    items = payload.parsed_items()
    return ParseResponse(items=items, valid=is_valid_input(items))


@router.post("/match/projects", response_model=ProjectResultsResponse)
async def match_projects(payload: ItemsRequest, context: MatchContext = Depends(get_context)):
    started = time.perf_counter()
    items = _validated_items(payload, "project")
    response = _project_response(items, context)
    latency_ms = (time.perf_counter() - started) * 1000
    record_match("project", latency_ms, len(response.results))
    structured_log(
        "match.projects",
        hashed_items=hash_items(items),
        item_count=len(items),
        results=len(response.results),
        overlap_mode=context.options.overlap_mode.value,
    )
    return response


@router.post("/match/videos", response_model=VideoResultsResponse)
async def match_videos(payload: VideoMatchRequest, context: MatchContext = Depends(get_context)):
    started = time.perf_counter()
    items = _validated_items(payload, "video")
    with span("match_videos", candidates=len(payload.videos)):
        records = score_and_rank_videos(payload.videos, items, context.aliases, context.options)
    response = VideoResultsResponse(
        items=items,
        message=video_results_message(records, len(items)),
        search_queries=build_search_queries(items),
        results=[VideoMatchOut.from_record(record) for record in records],
    )
    latency_ms = (time.perf_counter() - started) * 1000
    record_match("video", latency_ms, len(response.results))
    structured_log(
        "match.videos",
        hashed_items=hash_items(items),
        item_count=len(items),
        videos=len(payload.videos),
        results=len(response.results),
    )
    return response


@router.post("/match", response_model=CandidateResultsResponse)
async def match_all(payload: CandidateMatchRequest, context: MatchContext = Depends(get_context)):
    """Rank a mixed list of projects and videos.

    An empty candidate list falls back to the configured project catalog.
    """
    started = time.perf_counter()
    items = _validated_items(payload, "mixed")
    if not payload.candidates:
        project_response = _project_response(items, context)
        video_records = []
    else:
        with span("match_candidates", candidates=len(payload.candidates)):
            project_records, video_records = match_candidates(
                items, payload.candidates, context.aliases, context.options
            )
        project_response = ProjectResultsResponse(
            items=items,
            message=project_results_message(project_records, len(items)),
            results=[ProjectMatchOut.from_record(record) for record in project_records],
        )
    video_response = VideoResultsResponse(
        items=items,
        message=video_results_message(video_records, len(items)),
        search_queries=build_search_queries(items),
        results=[VideoMatchOut.from_record(record) for record in video_records],
    )
    latency_ms = (time.perf_counter() - started) * 1000
    record_match("mixed", latency_ms, len(project_response.results) + len(video_response.results))
    structured_log(
        "match.mixed",
        hashed_items=hash_items(items),
        item_count=len(items),
        projects=len(project_response.results),
        videos=len(video_response.results),
    )
    return CandidateResultsResponse(items=items, projects=project_response, videos=video_response)
