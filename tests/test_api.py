import asyncio

import pytest
from fastapi import HTTPException

from conftest import ALIASES_PATH, PROJECTS_PATH
from craftmatch.main import create_app, load_options
from craftmatch.metrics import generate_latest
from craftmatch.routes import get_context, match_all, match_projects, match_videos, parse
from craftmatch.schemas import CandidateMatchRequest, ItemsRequest, VideoMatchRequest
from craftmatch.similarity import OverlapMode

CRAFT_VIDEO = {
    "id": "v1",
    "title": "DIY cardboard box craft tutorial",
    "url": "https://www.youtube.com/watch?v=v1",
}


def _endpoint(app, path: str):
    return next(route.endpoint for route in app.routes if getattr(route, "path", None) == path)


def test_parse_endpoint():
    data = asyncio.run(parse(ItemsRequest(text="Scissors, glue\n123")))
    assert data.items == ["scissors", "glue"]
    assert data.valid is True


def test_items_request_accepts_string_items():
    payload = ItemsRequest.model_validate({"items": "glue, tape"})
    assert payload.parsed_items() == ["glue", "tape"]
    combined = ItemsRequest(text="glue", items=["Tape", "glue"])
    assert combined.parsed_items() == ["glue", "tape"]


def test_match_projects_endpoint(context):
    data = asyncio.run(match_projects(ItemsRequest(text="scissors, glue"), context))
    assert data.items == ["scissors", "glue"]
    assert [result.project.id for result in data.results] == ["scissors-only", "scissors-glue", "three-part"]
    assert data.results[0].match_percentage == 100
    assert data.message == "Found 2 projects you can make with what you have!"


def test_match_projects_rejects_unusable_input(context):
    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(match_projects(ItemsRequest(text="123, 5"), context))
    assert excinfo.value.status_code == 422


def test_match_videos_endpoint(context):
    payload = VideoMatchRequest(items=["cardboard", "glue"], videos=[CRAFT_VIDEO])
    data = asyncio.run(match_videos(payload, context))
    assert len(data.results) == 1
    result = data.results[0]
    assert result.match_type.value == "exact"
    assert result.is_exact_match is True
    assert result.difficulty.value == "Intermediate"
    assert data.search_queries[0] == "DIY craft using cardboard glue"
    assert data.message == "Found 1 video where you have everything needed!"


def test_match_videos_without_candidates(context):
    data = asyncio.run(match_videos(VideoMatchRequest(items=["glue"]), context))
    assert data.results == []
    assert data.message.startswith("We couldn't find DIY videos")


def test_match_all_endpoint(context):
    payload = CandidateMatchRequest.model_validate(
        {
            "text": "scissors\nglue",
            "candidates": [
                {"kind": "project", "id": "p", "title": "P", "materials": ["scissors", "glue"]},
                {"kind": "video", **CRAFT_VIDEO},
            ],
        }
    )
    data = asyncio.run(match_all(payload, context))
    assert [result.project.id for result in data.projects.results] == ["p"]
    assert [result.video.id for result in data.videos.results] == ["v1"]


def test_match_all_falls_back_to_catalog(context):
    data = asyncio.run(match_all(CandidateMatchRequest(text="scissors"), context))
    assert [result.project.id for result in data.projects.results] == ["scissors-only", "scissors-glue", "three-part"]
    assert data.videos.results == []


def test_app_wiring(request_for):
    app = create_app(ALIASES_PATH, PROJECTS_PATH, load_options("binary"))
    context = get_context(request_for(app))
    assert context.options.overlap_mode is OverlapMode.BINARY
    assert len(context.projects) == 12
    health = _endpoint(app, "/healthz")()
    assert health.status == "ok"
    assert health.overlap_mode == "binary"
    assert health.counts == {"aliases": 14, "projects": 12}


def test_metrics_exposed_after_match(context):
    asyncio.run(match_projects(ItemsRequest(text="glue"), context))
    body = generate_latest().decode("utf-8")
    assert 'match_requests_total{kind="project"}' in body
    assert "# TYPE match_latency_ms histogram" in body


def test_load_options_validates_mode(monkeypatch):
    monkeypatch.setenv("CRAFTMATCH_OVERLAP_MODE", "Binary")
    assert load_options().overlap_mode is OverlapMode.BINARY
    monkeypatch.delenv("CRAFTMATCH_OVERLAP_MODE")
    assert load_options().overlap_mode is OverlapMode.PROPORTIONAL
    with pytest.raises(ValueError):
        load_options("levenshtein")
