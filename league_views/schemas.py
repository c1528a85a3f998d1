"""
Pydantic schemas for API response models
Typed shapes for list, standings and diagnostic responses
"""
from pydantic import BaseModel
from typing import Dict, List, Optional, Union

Number = Union[int, float]


# ===== MATCH LIST SCHEMAS =====

class MatchSide(BaseModel):
    """One side of a match summary"""
    id: str
    name: str
    score: Number


class MatchSummary(BaseModel):
    """A row of the match list, with current aggregated scores"""
    matchId: str
    tournamentId: str
    status: str
    date: str
    time: str
    court: str
    round: str
    matchTypeLabel: str
    isDoubles: bool
    team1: MatchSide
    team2: MatchSide


class MatchFilters(BaseModel):
    """Echo of the filters applied to a match list"""
    tournament: Optional[str] = None
    status: Optional[str] = None
    date: Optional[str] = None
    limit: int
    offset: int


class MatchListResponse(BaseModel):
    """Paginated match list"""
    matches: List[MatchSummary]
    count: int
    filters: MatchFilters
    lastUpdated: str


# ===== STANDINGS SCHEMAS =====

class StandingRow(BaseModel):
    """Team with its aggregated record; team document fields pass through"""
    id: str
    gameWins: int
    gameLosses: int
    battleWins: int
    battleLosses: int
    points: int
    gamesDifference: int
    pointsWon: int
    pointsLost: int
    pointsDifference: int

    class Config:
        extra = "allow"


class StandingsResponse(BaseModel):
    """Ranked standings for a tournament"""
    tournamentId: str
    teams: List[StandingRow]
    totalMatches: int
    totalTeams: int
    lastUpdated: str


# ===== DIAGNOSTICS =====

class CacheStats(BaseModel):
    """Cache diagnostic snapshot"""
    size: int
    entries: List[str]
    types: Dict[str, int]
    hits: int
    misses: int
    lastUpdated: str
