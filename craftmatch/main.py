from __future__ import annotations

import hashlib
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Response

from .aliases import AliasTable
from .catalog import ProjectCatalog
from .matching import MatchingOptions
from .metrics import CONTENT_TYPE_LATEST, generate_latest
from .observability import structured_log
from .routes import MatchContext, router as match_router
from .schemas import HealthResponse
from .similarity import OverlapMode

APP_VERSION = datetime.now(timezone.utc).strftime("%Y-%m-%d")
BASE_DIR = Path(__file__).resolve().parent.parent
ALIASES_PATH = Path(os.getenv("CRAFTMATCH_ALIASES_PATH", BASE_DIR / "data" / "material_aliases.json"))
PROJECTS_PATH = Path(os.getenv("CRAFTMATCH_PROJECTS_PATH", BASE_DIR / "data" / "projects.json"))


def _hash_file(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()[:16]


def load_options(overlap_mode: Optional[str] = None) -> MatchingOptions:
    raw_mode = (overlap_mode or os.getenv("CRAFTMATCH_OVERLAP_MODE") or OverlapMode.PROPORTIONAL.value).lower()
    try:
        mode = OverlapMode(raw_mode)
    except ValueError as exc:
        valid = ", ".join(member.value for member in OverlapMode)
        raise ValueError(f"CRAFTMATCH_OVERLAP_MODE must be one of: {valid}") from exc
    return MatchingOptions(overlap_mode=mode)


def create_app(
    aliases_path: Path = ALIASES_PATH,
    projects_path: Path = PROJECTS_PATH,
    options: Optional[MatchingOptions] = None,
) -> FastAPI:
    context = MatchContext(
        aliases=AliasTable.from_json(aliases_path),
        projects=ProjectCatalog.from_json(projects_path),
        options=options or load_options(),
    )
    application = FastAPI(title="Craft Match", version=APP_VERSION)
    application.state.match_context = context
    application.include_router(match_router)

    @application.get("/healthz", include_in_schema=False, response_model=HealthResponse)
    def healthz():
        return HealthResponse(
            status="ok",
            version=APP_VERSION,
            overlap_mode=context.options.overlap_mode.value,
            aliases_hash=_hash_file(aliases_path),
            projects_hash=_hash_file(projects_path),
            counts={"aliases": len(context.aliases), "projects": len(context.projects)},
        )

    @application.get("/metrics", include_in_schema=False)
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    structured_log(
        "app.started",
        version=APP_VERSION,
        aliases=len(context.aliases),
        projects=len(context.projects),
        overlap_mode=context.options.overlap_mode.value,
    )
    return application


app = create_app()
