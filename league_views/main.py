"""
League Views - Main FastAPI Application
Read-optimized match, standings and content views over the league document store
"""
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response

from config.settings import settings
from league_views.cache import CacheManager, CacheSweeper, ttl_config_from_settings
from league_views.crud import SqlDocumentStore
from league_views.db import SessionLocal, init_db
from league_views.errors import BackingStoreError
from league_views.match_view import (
    build_events_view,
    build_match_summary,
    build_match_view,
    build_score_view,
    render_score_xml,
)
from league_views.orchestrator import QueryOrchestrator
from league_views.schemas import CacheStats, MatchListResponse, StandingsResponse
from league_views.utils.helpers import utc_now_iso

logging.basicConfig(
    level=settings.log_level.upper(),
    format=settings.log_format or logging.BASIC_FORMAT,
)
logger = logging.getLogger("api")

# Version tracking
APP_VERSION = "v0.1.0"
APP_NAME = "League Views"

# Process-local wiring; the cache is passed explicitly to the orchestrator
cache = CacheManager(ttl_config=ttl_config_from_settings(settings))
store = SqlDocumentStore(SessionLocal)
orchestrator = QueryOrchestrator(store, cache, settings=settings)
sweeper = CacheSweeper(cache, interval_seconds=settings.cache_sweep_interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.cache_sweep_enabled:
        sweeper.start()
    yield
    sweeper.stop()


app = FastAPI(
    title=APP_NAME,
    description="Live scores, match views and standings for league tournaments",
    version=APP_VERSION,
    lifespan=lifespan,
)


def get_orchestrator() -> QueryOrchestrator:
    """Dependency hook; tests override it with an orchestrator over a test store."""
    return orchestrator


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "lastUpdated": utc_now_iso()},
        headers=getattr(exc, "headers", None),
    )


@contextmanager
def translate_errors(context: str):
    """Map failures inside an endpoint to HTTP 500, letting HTTP errors through."""
    try:
        yield
    except HTTPException:
        raise
    except BackingStoreError as e:
        logger.error(f"{context}: {e}")
        raise HTTPException(status_code=500, detail="Backing store unavailable")
    except Exception as e:
        logger.error(f"{context}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


def require_id(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail=f"{label} is required")
    return value


def stamped(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Add the response-build timestamp."""
    return {**payload, "lastUpdated": utc_now_iso()}


def load_fixture(orch: QueryOrchestrator, match_id: str) -> Dict[str, Any]:
    match_id = require_id(match_id, "Match ID")
    fixture = orch.get_fixture(match_id)
    if fixture is None:
        raise HTTPException(status_code=404, detail="No match data found")
    return fixture


def require_tournament(orch: QueryOrchestrator, tournament_id: str) -> str:
    tournament_id = require_id(tournament_id, "Tournament ID")
    if orch.get_tournament(tournament_id) is None:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return tournament_id


# =============================================================================
# DIAGNOSTICS
# =============================================================================

@app.get("/health")
def health_check():
    """Health check endpoint."""
    return stamped({"status": "ok", "version": APP_VERSION})


@app.get("/cache/stats", response_model=CacheStats)
def cache_stats(orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Get cache statistics."""
    return stamped(orch.get_cache_stats())


# =============================================================================
# MATCHES
# =============================================================================

@app.get("/match/{match_id}")
def get_match(match_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Full match view: teams, nominal players, raw scores, serve, logs and media."""
    with translate_errors(f"Match view error for match_id={match_id}"):
        fixture = load_fixture(orch, match_id)
        teams = orch.get_team_lookup(fixture)
        return stamped(build_match_view(fixture, teams))


@app.get("/match/{match_id}/score")
def get_match_score(match_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Simplified score table with substitution-aware player names."""
    with translate_errors(f"Score view error for match_id={match_id}"):
        fixture = load_fixture(orch, match_id)
        teams = orch.get_team_lookup(fixture)
        return stamped(build_score_view(fixture, teams))


@app.get("/match/{match_id}/score.xml")
def get_match_score_xml(match_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Score view as XML for broadcast overlays."""
    with translate_errors(f"Score XML error for match_id={match_id}"):
        fixture = load_fixture(orch, match_id)
        teams = orch.get_team_lookup(fixture)
        xml = render_score_xml(build_score_view(fixture, teams), last_updated=utc_now_iso())
        return Response(content=xml, media_type="application/xml")


@app.get("/match/{match_id}/events")
def get_match_events(match_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Event and substitution logs, timeout/review counters and serve changes."""
    with translate_errors(f"Events view error for match_id={match_id}"):
        fixture = load_fixture(orch, match_id)
        return stamped(build_events_view(fixture))


@app.get("/basic-score/{match_file}")
def get_basic_score(match_file: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Legacy score feed at /basic-score/MATCH_ID.json."""
    match_id = match_file[:-5] if match_file.endswith(".json") else match_file
    return get_match_score(match_id, orch)


@app.get("/matches", response_model=MatchListResponse)
def list_matches(
    tournament: Optional[str] = Query(None, description="Tournament ID"),
    status: Optional[str] = Query(None, description="scheduled | live | in-progress | completed"),
    date: Optional[str] = Query(None, description="Match date as stored on the fixture"),
    limit: int = Query(default=settings.matches_default_limit, ge=1, le=200, description="Max results"),
    offset: int = Query(default=0, ge=0, description="Results to skip"),
    orch: QueryOrchestrator = Depends(get_orchestrator),
):
    """Match list with each side's current aggregated score."""
    with translate_errors("Match list error"):
        fixtures = orch.list_fixtures(
            tournament_id=tournament,
            status=status,
            date=date,
            limit=limit,
            offset=offset,
        )
        matches = [build_match_summary(f) for f in fixtures]
        return stamped({
            "matches": matches,
            "count": len(matches),
            "filters": {
                "tournament": tournament,
                "status": status,
                "date": date,
                "limit": limit,
                "offset": offset,
            },
        })


# =============================================================================
# TOURNAMENTS
# =============================================================================

@app.get("/tournaments")
def list_tournaments(orch: QueryOrchestrator = Depends(get_orchestrator)):
    """All tournaments."""
    with translate_errors("Tournament list error"):
        tournaments = orch.get_tournaments()
        return stamped({"tournaments": tournaments, "count": len(tournaments)})


@app.get("/tournaments/{tournament_id}")
def get_tournament(tournament_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Tournament with its live matches and most recent results."""
    with translate_errors(f"Tournament error for tournament_id={tournament_id}"):
        tournament_id = require_id(tournament_id, "Tournament ID")
        bundle = orch.get_tournament_bundle(tournament_id)
        if bundle.get("tournament") is None:
            raise HTTPException(status_code=404, detail="Tournament not found")
        return stamped(bundle)


@app.get("/tournaments/{tournament_id}/live")
def get_tournament_live(tournament_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Live and in-progress matches, with aggregated scores."""
    with translate_errors(f"Live matches error for tournament_id={tournament_id}"):
        tournament_id = require_tournament(orch, tournament_id)
        live = orch.get_live_matches(tournament_id)
        return stamped({
            "tournamentId": tournament_id,
            "matches": [build_match_summary(f) for f in live],
            "count": len(live),
        })


@app.get("/tournaments/{tournament_id}/teams")
def get_tournament_teams(tournament_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Teams and players registered for a tournament."""
    with translate_errors(f"Teams error for tournament_id={tournament_id}"):
        tournament_id = require_tournament(orch, tournament_id)
        data = orch.get_teams_and_players(tournament_id)
        return stamped({"tournamentId": tournament_id, **data})


@app.get("/tournaments/{tournament_id}/standings", response_model=StandingsResponse)
def get_tournament_standings(tournament_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Ranked standings from completed matches."""
    with translate_errors(f"Standings error for tournament_id={tournament_id}"):
        tournament_id = require_tournament(orch, tournament_id)
        return stamped({"tournamentId": tournament_id, **orch.get_standings(tournament_id)})


@app.delete("/tournaments/{tournament_id}/cache")
def clear_tournament_cache(tournament_id: str, orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Invalidate cached views of a tournament after its records changed."""
    tournament_id = require_id(tournament_id, "Tournament ID")
    cleared = orch.clear_tournament_cache(tournament_id)
    return stamped({"tournamentId": tournament_id, "cleared": cleared})


# =============================================================================
# CONTENT
# =============================================================================

@app.get("/home")
def home_content(orch: QueryOrchestrator = Depends(get_orchestrator)):
    """Home page videos and news."""
    with translate_errors("Home content error"):
        return stamped(orch.get_home_content())


@app.get("/videos")
def list_videos(
    limit: int = Query(default=12, ge=1, le=50, description="Max results"),
    orch: QueryOrchestrator = Depends(get_orchestrator),
):
    """Featured videos, newest first."""
    with translate_errors("Video list error"):
        videos = orch.get_videos(limit=limit)
        return stamped({"videos": videos, "count": len(videos)})
