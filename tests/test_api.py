"""
API tests: match, tournament, content and diagnostic endpoints
"""
import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from league_views.cache import CacheManager
from league_views.errors import StoreError
from league_views.main import app, get_orchestrator
from league_views.orchestrator import QueryOrchestrator


class BrokenStore:
    """Every read fails."""

    def get(self, collection, doc_id):
        raise StoreError("connection refused")

    def query(self, collection, filters=(), order_by=(), limit=None):
        raise StoreError("connection refused")


@pytest.fixture
def orchestrator(seeded_store, clock):
    return QueryOrchestrator(seeded_store, CacheManager(clock=clock), settings=Settings())


@pytest.fixture
def client(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client(clock):
    broken = QueryOrchestrator(BrokenStore(), CacheManager(clock=clock), settings=Settings())
    app.dependency_overrides[get_orchestrator] = lambda: broken
    yield TestClient(app)
    app.dependency_overrides.clear()


# ===== DIAGNOSTICS =====

def test_health_endpoint_returns_ok(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["lastUpdated"].endswith("Z")


def test_cache_stats(client):
    client.get("/tournaments")
    client.get("/tournaments")

    stats = client.get("/cache/stats").json()
    assert stats["size"] == 1
    assert stats["entries"] == ["all_tournaments"]
    assert stats["hits"] == 1
    assert stats["lastUpdated"].endswith("Z")


# ===== MATCHES =====

def test_match_view(client):
    response = client.get("/match/m3")
    assert response.status_code == 200
    data = response.json()
    assert data["matchId"] == "m3"
    assert data["isDoubles"] is True
    assert data["team1"]["logo"] == "https://cdn/b.png"
    assert data["team1"]["player2"] == "Bo"
    assert data["media"]["youtubeLink"] == "https://youtu.be/m3"
    assert "lastUpdated" in data


def test_match_not_found(client):
    response = client.get("/match/nope")
    assert response.status_code == 404
    data = response.json()
    assert data["detail"] == "No match data found"
    assert "lastUpdated" in data


def test_blank_match_id_is_rejected(client):
    response = client.get("/match/%20")
    assert response.status_code == 400
    assert response.json()["detail"] == "Match ID is required"


def test_score_view(client):
    response = client.get("/match/m3/score")
    assert response.status_code == 200
    data = response.json()
    team1_row, team2_row = data["tableData"]
    assert team1_row["playerName"] == "Ben/ Bo"
    assert team1_row["points"] == 20
    assert team1_row["serve"] == "1"
    assert team2_row["points"] == 18
    assert team2_row["serve"] == ""


def test_score_xml(client):
    response = client.get("/match/m3/score.xml")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert "<matchId>m3</matchId>" in response.text
    assert "<playerName>Ben/ Bo</playerName>" in response.text


def test_basic_score_legacy_path(client):
    legacy = client.get("/basic-score/m3.json").json()
    current = client.get("/match/m3/score").json()
    assert legacy["tableData"] == current["tableData"]

    assert client.get("/basic-score/nope.json").status_code == 404


def test_malformed_numbers_still_render(client, seeded_store):
    seeded_store.put("fixtures", "odd", {
        "tournamentId": "t1",
        "gamesCount": "inf",
        "teamServeCount": float("inf"),
        "currentGame": 1e999,
        "scores": {"player1": {"game1": float("inf"), "game2": 5}},
    })

    response = client.get("/match/odd")
    assert response.status_code == 200
    assert response.json()["gamesCount"] == 3
    assert response.json()["scores"]["player1"]["game1"] is None

    score = client.get("/match/odd/score").json()
    assert score["tableData"][0]["points"] == 5


def test_events_view(client):
    data = client.get("/match/m1/events").json()
    assert data["matchId"] == "m1"
    assert data["events"] == []
    assert data["drsReviewsLeft"] == {"team1": 1, "team2": 1}


def test_match_list(client):
    response = client.get("/matches", params={"tournament": "t1", "status": "completed"})
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert [m["matchId"] for m in data["matches"]] == ["m2", "m1"]
    m1 = data["matches"][1]
    assert m1["team1"] == {"id": "A", "name": "Aces", "score": 27}
    assert m1["team2"] == {"id": "B", "name": "Blasters", "score": 24}
    assert data["filters"]["status"] == "completed"


def test_match_list_validates_limit(client):
    assert client.get("/matches", params={"limit": 0}).status_code == 422
    assert client.get("/matches", params={"limit": 201}).status_code == 422


# ===== TOURNAMENTS =====

def test_tournament_list(client):
    data = client.get("/tournaments").json()
    assert data["count"] == 2


def test_tournament_bundle(client):
    response = client.get("/tournaments/t1")
    assert response.status_code == 200
    data = response.json()
    assert data["tournament"]["name"] == "Spring League"
    assert [m["id"] for m in data["liveMatches"]] == ["m3"]
    assert [m["id"] for m in data["recentMatches"]] == ["m2", "m1"]


def test_unknown_tournament_is_404(client):
    assert client.get("/tournaments/nope").status_code == 404
    assert client.get("/tournaments/nope/live").status_code == 404
    assert client.get("/tournaments/nope/teams").status_code == 404
    assert client.get("/tournaments/nope/standings").status_code == 404


def test_tournament_live(client):
    data = client.get("/tournaments/t1/live").json()
    assert data["count"] == 1
    assert data["matches"][0]["team1"]["score"] == 20


def test_tournament_teams(client):
    data = client.get("/tournaments/t1/teams").json()
    assert [t["id"] for t in data["teams"]] == ["A", "B", "C"]
    assert len(data["players"]) == 2


def test_standings(client):
    response = client.get("/tournaments/t1/standings")
    assert response.status_code == 200
    data = response.json()
    assert [t["id"] for t in data["teams"]] == ["C", "A", "B"]
    assert [t["points"] for t in data["teams"]] == [3, 3, 1]
    assert data["teams"][0]["name"] == "Chargers"
    assert data["totalMatches"] == 2
    assert data["totalTeams"] == 3


def test_clear_tournament_cache(client):
    client.get("/tournaments/t1")
    client.get("/tournaments/t1/standings")

    response = client.delete("/tournaments/t1/cache")
    assert response.status_code == 200
    assert response.json()["cleared"] == 3


# ===== CONTENT =====

def test_home_content(client):
    data = client.get("/home").json()
    assert [a["id"] for a in data["featuredArticles"]] == ["n1"]
    assert [a["id"] for a in data["news"]] == ["n2", "n3"]
    assert [v["id"] for v in data["fallbackVideos"]] == ["m3"]


def test_videos(client):
    data = client.get("/videos").json()
    assert data == {"videos": [], "count": 0, "lastUpdated": data["lastUpdated"]}


# ===== FAILURES =====

def test_store_failure_returns_500(broken_client):
    for path in ("/tournaments", "/match/m1", "/home", "/tournaments/t1/standings"):
        response = broken_client.get(path)
        assert response.status_code == 500, path
        assert "lastUpdated" in response.json()


def test_store_failure_detail(broken_client):
    response = broken_client.get("/tournaments")
    assert response.json()["detail"] == "Backing store unavailable"
