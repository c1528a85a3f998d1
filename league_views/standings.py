"""
Standings Aggregator
Ranks a tournament's teams from its completed matches.

Scoring per match:
- A game goes to the side with the strictly higher score (ties credit neither)
- The match goes to the side with more game wins (equal game wins: no result)
- 3 points for a match win
- 1 consolation point for a loss in which at least one game was won
- 0 points for a shutout loss or an undecided match

Ranking: points, then match wins, then game difference, all descending.
Teams still level keep their input order.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence

from league_views.match_view import games_count
from league_views.utils.helpers import read, safe_int, safe_str

WIN_POINTS = 3
CONSOLATION_POINTS = 1


@dataclass
class TeamRecord:
    """Running totals for one team."""
    game_wins: int = 0
    game_losses: int = 0
    battle_wins: int = 0
    battle_losses: int = 0
    points: int = 0
    points_won: int = 0
    points_lost: int = 0

    @property
    def games_difference(self) -> int:
        return self.game_wins - self.game_losses

    @property
    def points_difference(self) -> int:
        return self.points_won - self.points_lost

    def to_dict(self) -> Dict[str, int]:
        return {
            "gameWins": self.game_wins,
            "gameLosses": self.game_losses,
            "battleWins": self.battle_wins,
            "battleLosses": self.battle_losses,
            "points": self.points,
            "gamesDifference": self.games_difference,
            "pointsWon": self.points_won,
            "pointsLost": self.points_lost,
            "pointsDifference": self.points_difference,
        }


@dataclass
class MatchOutcome:
    """Game-level result of one completed match, from side 1's perspective."""
    team1_games: int
    team2_games: int
    team1_points: int
    team2_points: int

    @classmethod
    def from_fixture(cls, fixture: Mapping[str, Any]) -> "MatchOutcome":
        team1_games = team2_games = 0
        team1_points = team2_points = 0
        for game in range(1, games_count(fixture) + 1):
            score1 = safe_int(read(fixture, f"scores.player1.game{game}"), 0)
            score2 = safe_int(read(fixture, f"scores.player2.game{game}"), 0)
            team1_points += score1
            team2_points += score2
            if score1 > score2:
                team1_games += 1
            elif score2 > score1:
                team2_games += 1
        return cls(team1_games, team2_games, team1_points, team2_points)


def is_completed(fixture: Mapping[str, Any]) -> bool:
    return read(fixture, "status") == "completed"


def _credit(record: TeamRecord, games_for: int, games_against: int,
            points_for: int, points_against: int) -> None:
    record.game_wins += games_for
    record.game_losses += games_against
    record.points_won += points_for
    record.points_lost += points_against

    if games_for > games_against:
        record.battle_wins += 1
        record.points += WIN_POINTS
    elif games_for < games_against:
        record.battle_losses += 1
        if games_for > 0:
            record.points += CONSOLATION_POINTS


def compute_standings(
    teams: Sequence[Mapping[str, Any]],
    matches: Sequence[Mapping[str, Any]],
) -> Dict[str, Any]:
    """
    Compute ranked standings.

    Args:
        teams: Team documents (each with an "id")
        matches: Fixture records; only status == "completed" ones count

    Returns:
        {"teams": [team + counters, ...] in rank order,
         "totalMatches": completed matches considered,
         "totalTeams": len(teams)}
    """
    records: Dict[str, TeamRecord] = {
        safe_str(read(team, "id")): TeamRecord() for team in teams
    }

    completed = [m for m in matches if is_completed(m)]
    for fixture in completed:
        side1 = safe_str(read(fixture, "team1"))
        side2 = safe_str(read(fixture, "team2"))
        outcome = MatchOutcome.from_fixture(fixture)

        if side1 in records:
            _credit(records[side1], outcome.team1_games, outcome.team2_games,
                    outcome.team1_points, outcome.team2_points)
        if side2 in records:
            _credit(records[side2], outcome.team2_games, outcome.team1_games,
                    outcome.team2_points, outcome.team1_points)

    ranked: List[Dict[str, Any]] = [
        {**dict(team), **records[safe_str(read(team, "id"))].to_dict()}
        for team in teams
    ]
    # sorted() is stable: teams level on every key keep their input order
    ranked = sorted(
        ranked,
        key=lambda t: (-t["points"], -t["battleWins"], -t["gamesDifference"]),
    )

    return {
        "teams": ranked,
        "totalMatches": len(completed),
        "totalTeams": len(teams),
    }
