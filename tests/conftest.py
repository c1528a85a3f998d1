"""
Shared test fixtures: a SQLite-backed document store and a controllable clock.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from league_views.crud import SqlDocumentStore
from league_views.db import init_db


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    """Empty document store on a throwaway SQLite file."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'league_test.db'}",
        connect_args={"check_same_thread": False},
    )
    init_db(bind=engine)
    yield SqlDocumentStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture
def seeded_store(store):
    """
    One tournament, three teams, fixtures in every status, players and content.

    Standings for t1 (completed matches only):
      m1: A beats B 2-1 in games  -> A 3 pts, B 1 pt (consolation)
      m2: C beats A 2-0 in games  -> C 3 pts, A 0 pts (shutout)
    """
    store.put("tournaments", "t1", {"name": "Spring League"})
    store.put("tournaments", "t2", {"name": "Empty Cup"})

    store.put("teams", "A", {"name": "Aces", "logo": {"url": "https://cdn/a.png"}, "tournamentId": "t1"})
    store.put("teams", "B", {"name": "Blasters", "logo": "https://cdn/b.png", "tournamentId": "t1"})
    store.put("teams", "C", {"name": "Chargers", "tournamentId": "t1"})

    store.put("players", "p1", {"name": "Ann", "tournamentId": "t1"})
    store.put("players", "p2", {"name": "Ben", "tournamentId": "t1"})

    store.put("fixtures", "m1", {
        "tournamentId": "t1", "team1": "A", "team2": "B",
        "team1Name": "Aces", "team2Name": "Blasters",
        "player1Team1": "Ann", "player1Team2": "Ben",
        "status": "completed", "date": "2026-03-01", "time": "10:00",
        "gamesCount": 3,
        "scores": {"player1": {"game1": 11, "game2": 5, "game3": 11},
                   "player2": {"game1": 4, "game2": 11, "game3": 9}},
        "updatedAt": "2026-03-01T11:00:00Z",
    })
    store.put("fixtures", "m2", {
        "tournamentId": "t1", "team1": "A", "team2": "C",
        "status": "completed", "date": "2026-03-02", "time": "10:00",
        "gamesCount": 3,
        "scores": {"player1": {"game1": 3, "game2": 6},
                   "player2": {"game1": 11, "game2": 11}},
        "updatedAt": "2026-03-02T11:00:00Z",
    })
    store.put("fixtures", "m3", {
        "tournamentId": "t1", "team1": "B", "team2": "C",
        "team1Name": "Blasters", "team2Name": "Chargers",
        "player1Team1": "Ben", "player2Team1": "Bo",
        "player1Team2": "Cy", "player2Team2": "Cal",
        "status": "live", "date": "2026-03-03", "time": "09:00",
        "gamesCount": 3,
        "scores": {"player1": {"game1": 11, "game2": 9}, "player2": {"game1": 7, "game2": 11}},
        "servingPlayer": "player1", "teamServeCount": 0,
        "youtubeLink": "https://youtu.be/m3",
    })
    store.put("fixtures", "m4", {
        "tournamentId": "t1", "team1": "A", "team2": "B",
        "status": "scheduled", "date": "2026-03-04", "time": "09:00",
    })

    store.put("news", "n1", {"title": "Opening day", "publishDate": "2026-02-01", "featured": True})
    store.put("news", "n2", {"title": "Week 1 recap", "publishDate": "2026-03-02", "featured": False})
    store.put("news", "n3", {"title": "Preview", "publishDate": "2026-02-20"})
    return store
