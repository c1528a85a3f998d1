"""
Match View Deriver.

Pure functions that turn one raw fixture record plus a team lookup
({"team1": team_doc, "team2": team_doc}) into read-optimized views.
Nothing here performs I/O, and nothing raises for missing or malformed
optional fields: every read goes through `read()` with an explicit default.
The caller must check that the fixture itself exists.
"""
from functools import reduce
from typing import Any, Dict, List, Mapping, Optional, Tuple

from league_views.utils.helpers import (
    json_safe,
    numeric_or_zero,
    read,
    read_list,
    read_mapping,
    safe_int,
    safe_str,
)
from .models import (
    DEFAULT_GAMES_COUNT,
    MAX_GAMES_COUNT,
    SERVE_CHANGE_TYPES,
    SIDES,
    Roster,
    ServeMarkers,
    Substitution,
)

TeamLookup = Mapping[str, Mapping[str, Any]]


# =============================================================================
# BUILDING BLOCKS
# =============================================================================

def games_count(fixture: Any) -> int:
    """Configured number of games; unset, non-positive or above 15 falls back to 3."""
    count = safe_int(read(fixture, "gamesCount"), 0)
    return count if 0 < count <= MAX_GAMES_COUNT else DEFAULT_GAMES_COUNT


def is_doubles(fixture: Any) -> bool:
    """Doubles iff both nominal player2 slots are populated on the fixture."""
    return bool(read(fixture, "player2Team1")) and bool(read(fixture, "player2Team2"))


def substitution_log(fixture: Any) -> List[Substitution]:
    """The substitution log in stored order. Never re-sorted by timestamp."""
    return [Substitution.from_raw(raw) for raw in read_list(fixture, "substitutions")]


def resolve_roster(fixture: Any) -> Roster:
    """
    Current roster after replaying every logged substitution.

    Substitutions are folded in array order. An entry whose outgoing
    player is in neither slot of its side is skipped without error.

    Args:
        fixture: Raw fixture record

    Returns:
        Roster reflecting all substitutions in the log
    """
    return reduce(Roster.apply, substitution_log(fixture), Roster.nominal(fixture))


def aggregate_scores(fixture: Any) -> Tuple[float, float]:
    """
    Sum each side's game scores over games 1..gamesCount.

    Missing or non-numeric game scores contribute 0.

    Returns:
        (team1Total, team2Total)
    """
    team1_total = 0
    team2_total = 0
    for game in range(1, games_count(fixture) + 1):
        team1_total += numeric_or_zero(read(fixture, f"scores.player1.game{game}"))
        team2_total += numeric_or_zero(read(fixture, f"scores.player2.game{game}"))
    return team1_total, team2_total


def project_serve(fixture: Any) -> ServeMarkers:
    """
    Serve markers for both sides.

    Doubles: the serving side shows "1" (first server, teamServeCount 0)
    or "2" (second server). Singles: the serving side shows "1". Any
    servingPlayer other than "player1"/"player2" leaves both markers empty.
    """
    serving = read(fixture, "servingPlayer")
    if is_doubles(fixture):
        marker = "1" if safe_int(read(fixture, "teamServeCount"), 0) == 0 else "2"
    else:
        marker = "1"

    if serving == "player1":
        return ServeMarkers(team1=marker)
    if serving == "player2":
        return ServeMarkers(team2=marker)
    return ServeMarkers()


def filter_serve_changes(fixture: Any) -> List[Dict[str, Any]]:
    """Events of type serve_change / serve_sequence_change, in original order."""
    return [
        json_safe(event)
        for event in read_list(fixture, "events")
        if read(event, "type") in SERVE_CHANGE_TYPES
    ]


def team_logo(team: Optional[Mapping[str, Any]]) -> str:
    """Logo URL of a team document; logo may be a plain URL or {"url": ...}."""
    logo = read(team, "logo", "")
    if isinstance(logo, Mapping):
        return safe_str(read(logo, "url"))
    return safe_str(logo)


def team_name(fixture: Any, teams: Optional[TeamLookup], side: str) -> str:
    """Display name: fixture's denormalized name, then the team document, then "Team N"."""
    fallback = "Team 1" if side == "team1" else "Team 2"
    return safe_str(
        read(fixture, f"{side}Name") or read(teams, f"{side}.name"),
        fallback,
    )


def _side_counters(fixture: Any, field: str, default: int) -> Dict[str, int]:
    return {side: safe_int(read(fixture, f"{field}.{side}"), default) for side in SIDES}


def _format_substitutions(fixture: Any, teams: Optional[TeamLookup]) -> List[Dict[str, Any]]:
    formatted = []
    for sub in substitution_log(fixture):
        formatted.append({
            "team": sub.team,
            "teamName": team_name(fixture, teams, sub.team) if sub.team in SIDES else "",
            "playerOut": sub.player_out,
            "playerIn": sub.player_in,
            "timestamp": json_safe(sub.timestamp),
            "game": json_safe(sub.game),
            "score": json_safe(sub.score),
        })
    return formatted


# =============================================================================
# VIEWS
# =============================================================================

def build_match_view(fixture: Any, teams: Optional[TeamLookup] = None) -> Dict[str, Any]:
    """
    Full match view.

    Player slots are the nominal ones from the fixture; substitutions are
    reported raw, not applied. Every field has a default.

    Args:
        fixture: Raw fixture record
        teams: {"team1": team_doc, "team2": team_doc}; missing sides allowed

    Returns:
        JSON-serializable dict
    """
    teams = teams or {}
    nominal = Roster.nominal(fixture)
    markers = project_serve(fixture)

    def side_block(side: str) -> Dict[str, Any]:
        slots = nominal.side(side)
        return {
            "id": safe_str(read(fixture, side)),
            "name": team_name(fixture, teams, side),
            "logo": team_logo(read(teams, side)),
            "player1": slots.player1,
            "player2": slots.player2,
        }

    return {
        "matchId": safe_str(read(fixture, "id")),
        "tournamentId": safe_str(read(fixture, "tournamentId")),
        "fixtureGroupId": safe_str(read(fixture, "fixtureGroupId")),
        "matchType": safe_str(read(fixture, "matchType")),
        "matchTypeLabel": safe_str(read(fixture, "matchTypeLabel")),
        "round": safe_str(read(fixture, "round")),
        "court": safe_str(read(fixture, "court")),
        "date": safe_str(read(fixture, "date")),
        "time": safe_str(read(fixture, "time")),
        "status": safe_str(read(fixture, "status"), "scheduled"),
        "gamesCount": games_count(fixture),
        "isDoubles": is_doubles(fixture),
        "team1": side_block("team1"),
        "team2": side_block("team2"),
        "scores": {
            "player1": json_safe(read_mapping(fixture, "scores.player1")),
            "player2": json_safe(read_mapping(fixture, "scores.player2")),
        },
        "currentGame": safe_int(read(fixture, "currentGame"), 1),
        "serve": {
            "servingPlayer": safe_str(read(fixture, "servingPlayer")),
            "teamServeCount": safe_int(read(fixture, "teamServeCount"), 0),
            "team1": markers.team1,
            "team2": markers.team2,
        },
        "events": json_safe(read_list(fixture, "events")),
        "substitutions": json_safe(read_list(fixture, "substitutions")),
        "timeoutsUsed": _side_counters(fixture, "timeoutsUsed", 0),
        "drsReviewsLeft": _side_counters(fixture, "drsReviewsLeft", 1),
        "winner": safe_str(read(fixture, "winner")),
        "media": {
            "youtubeLink": safe_str(read(fixture, "youtubeLink")),
            "drsVideoUrl": safe_str(read(fixture, "drsVideoUrl")),
        },
    }


def build_score_view(fixture: Any, teams: Optional[TeamLookup] = None) -> Dict[str, Any]:
    """
    Simplified score view: one row per side with substitution-resolved names.

    Doubles rows name both players as "A/ B"; singles rows name player1,
    falling back to the fixture's team name.
    """
    teams = teams or {}
    roster = resolve_roster(fixture)
    team1_total, team2_total = aggregate_scores(fixture)
    markers = project_serve(fixture)
    doubles = is_doubles(fixture)

    def player_label(side: str) -> str:
        slots = roster.side(side)
        if doubles:
            first, second = ("Player 1", "Player 2") if side == "team1" else ("Player 3", "Player 4")
            return f"{slots.player1 or first}/ {slots.player2 or second}"
        fallback = "Player 1" if side == "team1" else "Player 2"
        return slots.player1 or safe_str(read(fixture, f"{side}Name"), fallback)

    totals = {"team1": team1_total, "team2": team2_total}
    serve = {"team1": markers.team1, "team2": markers.team2}
    table_data = [
        {
            "side": side,
            "playerName": player_label(side),
            "teamName": team_name(fixture, teams, side),
            "teamLogoUrl": team_logo(read(teams, side)),
            "points": totals[side],
            "serve": serve[side],
        }
        for side in SIDES
    ]

    substitutions = _format_substitutions(fixture, teams)
    return {
        "matchId": safe_str(read(fixture, "id")),
        "matchStatus": safe_str(read(fixture, "status"), "active"),
        "isDoubles": doubles,
        "gamesCount": games_count(fixture),
        "tableData": table_data,
        "substitutions": substitutions,
        "substitutionCount": len(substitutions),
    }


def build_events_view(fixture: Any) -> Dict[str, Any]:
    """Raw event/substitution logs, per-side counters and the serve-change subset."""
    events = json_safe(read_list(fixture, "events"))
    return {
        "matchId": safe_str(read(fixture, "id")),
        "events": events,
        "eventCount": len(events),
        "substitutions": json_safe(read_list(fixture, "substitutions")),
        "timeoutsUsed": _side_counters(fixture, "timeoutsUsed", 0),
        "drsReviewsLeft": _side_counters(fixture, "drsReviewsLeft", 1),
        "serveChanges": filter_serve_changes(fixture),
    }


def build_match_summary(fixture: Any) -> Dict[str, Any]:
    """One row of a match list, with each side's current aggregated score."""
    team1_total, team2_total = aggregate_scores(fixture)
    totals = {"team1": team1_total, "team2": team2_total}
    return {
        "matchId": safe_str(read(fixture, "id")),
        "tournamentId": safe_str(read(fixture, "tournamentId")),
        "status": safe_str(read(fixture, "status"), "scheduled"),
        "date": safe_str(read(fixture, "date")),
        "time": safe_str(read(fixture, "time")),
        "court": safe_str(read(fixture, "court")),
        "round": safe_str(read(fixture, "round")),
        "matchTypeLabel": safe_str(read(fixture, "matchTypeLabel")),
        "isDoubles": is_doubles(fixture),
        **{
            side: {
                "id": safe_str(read(fixture, side)),
                "name": team_name(fixture, None, side),
                "score": totals[side],
            }
            for side in SIDES
        },
    }
