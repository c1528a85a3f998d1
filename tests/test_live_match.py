"""
Tests for the live score feed, driven by a fake change subscription.
"""
import pytest

from config.settings import Settings
from league_views.cache import CacheManager
from league_views.live_match import LiveScoreFeed
from league_views.orchestrator import QueryOrchestrator


class FakeSubscription:
    """In-process stand-in for a snapshot-listener transport."""

    def __init__(self, initial=None):
        self.initial = initial or {}
        self.document_callbacks = {}
        self.query_callbacks = {}
        self.subscribe_count = 0
        self.unsubscribed = []

    def subscribe_document(self, collection, doc_id, callback):
        self.subscribe_count += 1
        self.document_callbacks[doc_id] = callback
        # Real transports deliver the current snapshot straight away
        if doc_id in self.initial:
            callback(self.initial[doc_id])
        return lambda: self.unsubscribed.append(doc_id)

    def subscribe_query(self, collection, filters, callback):
        self.subscribe_count += 1
        tournament_id = next(f.value for f in filters if f.field == "tournamentId")
        self.query_callbacks[tournament_id] = callback
        return lambda: self.unsubscribed.append(tournament_id)

    def push(self, doc_id, snapshot):
        self.document_callbacks[doc_id](snapshot)

    def push_query(self, tournament_id, records):
        self.query_callbacks[tournament_id](records)


@pytest.fixture
def orchestrator(seeded_store, clock):
    return QueryOrchestrator(seeded_store, CacheManager(clock=clock), settings=Settings())


@pytest.fixture
def live_fixture(seeded_store):
    return seeded_store.get("fixtures", "m3")


def test_initial_snapshot_is_derived(orchestrator, live_fixture):
    subscription = FakeSubscription(initial={"m3": live_fixture})
    feed = LiveScoreFeed(subscription, orchestrator)

    feed.start_listening("m3")

    view = feed.get_score_view("m3")
    assert view["matchId"] == "m3"
    assert [row["points"] for row in view["tableData"]] == [20, 18]
    assert view["tableData"][0]["teamLogoUrl"] == "https://cdn/b.png"
    assert feed.active_matches == ["m3"]


def test_push_updates_view_and_notifies_listeners(orchestrator, live_fixture):
    subscription = FakeSubscription()
    feed = LiveScoreFeed(subscription, orchestrator)
    received = []
    feed.add_listener(lambda match_id, view: received.append((match_id, view)))
    feed.start_listening("m3")
    assert feed.get_score_view("m3") is None

    live_fixture["scores"]["player1"]["game3"] = 4
    live_fixture["substitutions"] = [{"team": "team2", "playerOut": "Cy", "playerIn": "Cole"}]
    subscription.push("m3", live_fixture)

    view = feed.get_score_view("m3")
    assert view["tableData"][0]["points"] == 24
    assert view["tableData"][1]["playerName"] == "Cole/ Cal"
    assert received == [("m3", view)]


def test_deleted_snapshot_keeps_last_view(orchestrator, live_fixture):
    subscription = FakeSubscription(initial={"m3": live_fixture})
    feed = LiveScoreFeed(subscription, orchestrator)
    feed.start_listening("m3")

    subscription.push("m3", None)

    assert feed.get_score_view("m3")["matchId"] == "m3"


def test_listening_twice_subscribes_once(orchestrator):
    subscription = FakeSubscription()
    feed = LiveScoreFeed(subscription, orchestrator)

    feed.start_listening("m3")
    feed.start_listening("m3")

    assert subscription.subscribe_count == 1


def test_stop_listening_unsubscribes_and_ignores_late_pushes(orchestrator, live_fixture):
    subscription = FakeSubscription(initial={"m3": live_fixture})
    feed = LiveScoreFeed(subscription, orchestrator)
    feed.start_listening("m3")

    feed.stop_listening("m3")
    subscription.push("m3", live_fixture)

    assert subscription.unsubscribed == ["m3"]
    assert feed.get_score_view("m3") is None
    assert feed.active_matches == []


def test_failing_listener_does_not_block_others(orchestrator, live_fixture):
    subscription = FakeSubscription()
    feed = LiveScoreFeed(subscription, orchestrator)
    received = []

    def broken(match_id, view):
        raise RuntimeError("overlay offline")

    feed.add_listener(broken)
    feed.add_listener(lambda match_id, view: received.append(match_id))
    feed.start_listening("m3")
    subscription.push("m3", live_fixture)

    assert received == ["m3"]


def test_watch_tournament_mirrors_pushes_into_cache(orchestrator):
    subscription = FakeSubscription()
    feed = LiveScoreFeed(subscription, orchestrator)
    feed.watch_tournament("t1")

    subscription.push_query("t1", [{"id": "m7", "status": "in-progress"}])

    assert orchestrator.get_live_matches("t1") == [{"id": "m7", "status": "in-progress"}]

    feed.unwatch_tournament("t1")
    assert subscription.unsubscribed == ["t1"]


def test_cleanup_unsubscribes_everything(orchestrator, live_fixture):
    subscription = FakeSubscription(initial={"m3": live_fixture})
    feed = LiveScoreFeed(subscription, orchestrator)
    feed.start_listening("m3")
    feed.start_listening("m1")
    feed.watch_tournament("t1")

    feed.cleanup()

    assert sorted(subscription.unsubscribed) == ["m1", "m3", "t1"]
    assert feed.active_matches == []
    assert feed.get_score_view("m3") is None
