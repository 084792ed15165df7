import sys
from pathlib import Path
from typing import Sequence

import pytest
from starlette.requests import Request

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from craftmatch.aliases import AliasTable  # noqa: E402
from craftmatch.catalog import Project, ProjectCatalog, Video  # noqa: E402
from craftmatch.routes import MatchContext  # noqa: E402

DATA_DIR = PROJECT_ROOT / "data"
ALIASES_PATH = DATA_DIR / "material_aliases.json"
PROJECTS_PATH = DATA_DIR / "projects.json"


@pytest.fixture(scope="session")
def aliases() -> AliasTable:
    return AliasTable.from_json(ALIASES_PATH)


@pytest.fixture
def make_project():
    def _make(project_id: str, materials: Sequence[str], title: str = "") -> Project:
        return Project(id=project_id, title=title or project_id, materials=list(materials))

    return _make


@pytest.fixture
def make_video():
    def _make(video_id: str, title: str, description: str = "", duration: str | None = None) -> Video:
        return Video(
            id=video_id,
            title=title,
            description=description,
            url=f"https://www.youtube.com/watch?v={video_id}",
            duration=duration,
        )

    return _make


@pytest.fixture
def fixture_catalog(make_project) -> ProjectCatalog:
    return ProjectCatalog(
        [
            make_project("three-part", ["scissors", "glue", "paint"]),
            make_project("scissors-only", ["scissors"]),
            make_project("scissors-glue", ["scissors", "glue"]),
            make_project("wood-only", ["wood"]),
        ]
    )


@pytest.fixture
def context(aliases, fixture_catalog) -> MatchContext:
    return MatchContext(aliases=aliases, projects=fixture_catalog)


@pytest.fixture
def request_for():
    def _build(app) -> Request:
        scope = {
            "type": "http",
            "method": "POST",
            "path": "/",
            "headers": [],
            "query_string": b"",
            "app": app,
        }
        return Request(scope)

    return _build
