"""
Data models for match view derivation.

Frozen dataclasses so roster state can be folded over the substitution
log without mutating anything the caller passed in.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple

from league_views.utils.helpers import read, safe_str


SIDES = ("team1", "team2")

# Event types that mark a change of server
SERVE_CHANGE_TYPES = ("serve_change", "serve_sequence_change")

DEFAULT_GAMES_COUNT = 3
MAX_GAMES_COUNT = 15


@dataclass(frozen=True)
class Substitution:
    """One entry of a fixture's substitution log."""
    team: str
    player_out: str
    player_in: str
    timestamp: Any = ""
    game: Any = ""
    score: Any = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "Substitution":
        return cls(
            team=safe_str(read(raw, "team")),
            player_out=safe_str(read(raw, "playerOut")),
            player_in=safe_str(read(raw, "playerIn")),
            timestamp=read(raw, "timestamp", ""),
            game=read(raw, "game", ""),
            score=read(raw, "score", ""),
        )


@dataclass(frozen=True)
class SideRoster:
    """The two player slots of one side; player2 is "" for singles."""
    player1: str = ""
    player2: str = ""

    def substitute(self, player_out: str, player_in: str) -> "SideRoster":
        """Replace player1 if it matches, else player2; unmatched or blank names are ignored."""
        if not player_out:
            return self
        if self.player1 == player_out:
            return replace(self, player1=player_in)
        if self.player2 == player_out:
            return replace(self, player2=player_in)
        return self

    def to_dict(self) -> Dict[str, str]:
        return {"player1": self.player1, "player2": self.player2}


@dataclass(frozen=True)
class Roster:
    """Player slots for both sides of a fixture."""
    team1: SideRoster
    team2: SideRoster

    @classmethod
    def nominal(cls, fixture: Any) -> "Roster":
        """Roster as scheduled, before any substitution."""
        return cls(
            team1=SideRoster(
                player1=safe_str(read(fixture, "player1Team1")),
                player2=safe_str(read(fixture, "player2Team1")),
            ),
            team2=SideRoster(
                player1=safe_str(read(fixture, "player1Team2")),
                player2=safe_str(read(fixture, "player2Team2")),
            ),
        )

    def side(self, team: str) -> SideRoster:
        return self.team1 if team == "team1" else self.team2

    def apply(self, sub: Substitution) -> "Roster":
        if sub.team == "team1":
            return replace(self, team1=self.team1.substitute(sub.player_out, sub.player_in))
        if sub.team == "team2":
            return replace(self, team2=self.team2.substitute(sub.player_out, sub.player_in))
        return self

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {"team1": self.team1.to_dict(), "team2": self.team2.to_dict()}


@dataclass(frozen=True)
class ServeMarkers:
    """Serve indicator per side: "1" first server, "2" second server, "" not serving."""
    team1: str = ""
    team2: str = ""

    def as_tuple(self) -> Tuple[str, str]:
        return (self.team1, self.team2)
