"""
Unit tests for the standings aggregator.
"""
from league_views.standings import compute_standings


def _match(team1, team2, games1, games2, status="completed", games_count=3):
    return {
        "team1": team1,
        "team2": team2,
        "status": status,
        "gamesCount": games_count,
        "scores": {
            "player1": {f"game{i}": s for i, s in enumerate(games1, start=1)},
            "player2": {f"game{i}": s for i, s in enumerate(games2, start=1)},
        },
    }


def _by_id(result):
    return {team["id"]: team for team in result["teams"]}


def test_two_one_win_gives_winner_three_and_loser_one():
    result = compute_standings(
        [{"id": "X"}, {"id": "Y"}],
        [_match("X", "Y", [11, 5, 11], [4, 11, 9])],
    )
    teams = _by_id(result)

    assert teams["X"]["points"] == 3
    assert teams["X"]["battleWins"] == 1
    assert teams["X"]["gameWins"] == 2
    assert teams["X"]["gameLosses"] == 1
    assert teams["Y"]["points"] == 1
    assert teams["Y"]["battleLosses"] == 1
    assert teams["Y"]["gamesDifference"] == -1


def test_shutout_loss_gives_no_consolation_point():
    result = compute_standings(
        [{"id": "X"}, {"id": "Y"}],
        [_match("X", "Y", [11, 11], [3, 6])],
    )
    teams = _by_id(result)

    assert teams["X"]["points"] == 3
    assert teams["Y"]["points"] == 0
    assert teams["Y"]["gameWins"] == 0


def test_level_game_wins_is_no_result():
    # One game each, third game tied at 0-0 so nobody wins it
    result = compute_standings(
        [{"id": "X"}, {"id": "Y"}],
        [_match("X", "Y", [11, 4], [6, 11])],
    )
    teams = _by_id(result)

    for team_id in ("X", "Y"):
        assert teams[team_id]["points"] == 0
        assert teams[team_id]["battleWins"] == 0
        assert teams[team_id]["battleLosses"] == 0
        assert teams[team_id]["gameWins"] == 1


def test_only_completed_matches_count():
    result = compute_standings(
        [{"id": "X"}, {"id": "Y"}],
        [
            _match("X", "Y", [11, 11], [3, 6], status="live"),
            _match("X", "Y", [11, 11], [3, 6], status="scheduled"),
        ],
    )

    assert result["totalMatches"] == 0
    assert all(team["points"] == 0 for team in result["teams"])


def test_rally_points_are_reported():
    result = compute_standings(
        [{"id": "X"}, {"id": "Y"}],
        [_match("X", "Y", [11, "9"], [7, 11])],
    )
    teams = _by_id(result)

    assert teams["X"]["pointsWon"] == 20
    assert teams["X"]["pointsLost"] == 18
    assert teams["X"]["pointsDifference"] == 2
    assert teams["Y"]["pointsDifference"] == -2


def test_ranking_order():
    teams = [{"id": "A"}, {"id": "B"}, {"id": "C"}]
    matches = [
        _match("A", "B", [11, 5, 11], [4, 11, 9]),   # A 3, B 1
        _match("A", "C", [3, 6], [11, 11]),          # C 3, A 0
    ]
    result = compute_standings(teams, matches)

    # A and C level on points and wins; C has the better game difference
    assert [t["id"] for t in result["teams"]] == ["C", "A", "B"]
    assert result["totalMatches"] == 2
    assert result["totalTeams"] == 3


def test_ranking_is_stable_for_tied_teams():
    teams = [{"id": "D", "name": "Delta"}, {"id": "E"}, {"id": "F"}]
    result = compute_standings(teams, [])

    assert [t["id"] for t in result["teams"]] == ["D", "E", "F"]
    assert result["teams"][0]["name"] == "Delta"
    assert result["totalMatches"] == 0


def test_matches_against_unknown_teams_credit_known_side_only():
    result = compute_standings(
        [{"id": "X"}],
        [_match("X", "GHOST", [11, 11], [2, 2])],
    )

    assert result["teams"] == [{
        "id": "X",
        "gameWins": 2,
        "gameLosses": 0,
        "battleWins": 1,
        "battleLosses": 0,
        "points": 3,
        "gamesDifference": 2,
        "pointsWon": 22,
        "pointsLost": 4,
        "pointsDifference": 18,
    }]


def test_input_team_documents_are_not_mutated():
    teams = [{"id": "X", "name": "Xenon"}]
    compute_standings(teams, [_match("X", "Y", [11, 11], [1, 1])])
    assert teams == [{"id": "X", "name": "Xenon"}]


def test_non_finite_game_scores_count_as_zero():
    result = compute_standings(
        [{"id": "X"}, {"id": "Y"}],
        [_match("X", "Y", ["1e999", 11], [float("inf"), 4])],
    )
    teams = _by_id(result)

    # Game 1 is 0-0 for both sides; X takes game 2 only
    assert teams["X"]["gameWins"] == 1
    assert teams["X"]["points"] == 3
    assert teams["X"]["pointsWon"] == 11
    assert teams["Y"]["pointsWon"] == 4
    assert teams["Y"]["points"] == 0


def test_unusable_games_count_uses_default():
    match = _match("X", "Y", [11, 11, 11], [1, 1, 1], games_count="inf")
    teams = _by_id(compute_standings([{"id": "X"}, {"id": "Y"}], [match]))

    assert teams["X"]["gameWins"] == 3
    assert teams["X"]["battleWins"] == 1
