"""
Match view derivation: current roster, score totals, serve markers and
filtered events, computed from a raw fixture record without touching the store.
"""
from .models import (
    DEFAULT_GAMES_COUNT,
    MAX_GAMES_COUNT,
    SERVE_CHANGE_TYPES,
    Roster,
    ServeMarkers,
    SideRoster,
    Substitution,
)
from .deriver import (
    aggregate_scores,
    build_events_view,
    build_match_summary,
    build_match_view,
    build_score_view,
    filter_serve_changes,
    games_count,
    is_doubles,
    project_serve,
    resolve_roster,
    team_logo,
    team_name,
)
from .xml_feed import render_score_xml

__all__ = [
    # Models
    "DEFAULT_GAMES_COUNT",
    "MAX_GAMES_COUNT",
    "SERVE_CHANGE_TYPES",
    "Roster",
    "ServeMarkers",
    "SideRoster",
    "Substitution",
    # Derivation
    "aggregate_scores",
    "build_events_view",
    "build_match_summary",
    "build_match_view",
    "build_score_view",
    "filter_serve_changes",
    "games_count",
    "is_doubles",
    "project_serve",
    "resolve_roster",
    "team_logo",
    "team_name",
    # Rendering
    "render_score_xml",
]
