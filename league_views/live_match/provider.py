"""
Live score feed driven by a real-time change subscription.

The subscription transport (e.g. a Firestore-style snapshot listener) is
external; it pushes the full current snapshot of a document or of a filtered
query whenever anything in it changes. The feed re-runs derivation on every
push instead of re-querying the store for the fixture.
"""
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from league_views.match_view import build_score_view
from league_views.orchestrator import FIXTURES, LIVE_STATUSES, QueryOrchestrator
from league_views.store import Filter

logger = logging.getLogger("live_match.feed")

Unsubscribe = Callable[[], None]
ScoreListener = Callable[[str, Dict[str, Any]], None]


def _noop() -> None:
    pass


class ChangeSubscription(Protocol):
    """
    Interface for the external change-notification transport.

    Callbacks run on the transport's thread and receive the full snapshot:
    the document (or None once deleted), or the full list of matching records.
    """

    def subscribe_document(
        self,
        collection: str,
        doc_id: str,
        callback: Callable[[Optional[Dict[str, Any]]], None],
    ) -> Unsubscribe:
        ...

    def subscribe_query(
        self,
        collection: str,
        filters: Sequence[Filter],
        callback: Callable[[List[Dict[str, Any]]], None],
    ) -> Unsubscribe:
        ...


class LiveScoreFeed:
    """
    Keeps an up-to-date score view for every match being listened to, and
    keeps tournaments' live-matches cache entries in sync with pushes.

    Usage:
        feed = LiveScoreFeed(subscription, orchestrator)
        feed.add_listener(lambda match_id, view: publish(match_id, view))
        feed.start_listening("match-1")
    """

    def __init__(self, subscription: ChangeSubscription, orchestrator: QueryOrchestrator):
        self._subscription = subscription
        self._orchestrator = orchestrator
        self._lock = threading.Lock()
        self._match_listeners: Dict[str, Unsubscribe] = {}
        self._tournament_watchers: Dict[str, Unsubscribe] = {}
        self._score_data: Dict[str, Dict[str, Any]] = {}
        self._listeners: List[ScoreListener] = []

    # =========================================================================
    # SINGLE MATCH
    # =========================================================================

    def start_listening(self, match_id: str) -> None:
        """Subscribe to one fixture. Listening twice to the same match is a no-op."""
        with self._lock:
            if match_id in self._match_listeners:
                return
            # Registered before subscribing: transports may push the first snapshot synchronously
            self._match_listeners[match_id] = _noop

        unsubscribe = self._subscription.subscribe_document(
            FIXTURES,
            match_id,
            lambda snapshot: self._on_fixture_snapshot(match_id, snapshot),
        )
        self._register(self._match_listeners, match_id, unsubscribe)
        logger.info(f"Listening to match {match_id}")

    def _register(self, registry: Dict[str, Unsubscribe], key: str, unsubscribe: Unsubscribe) -> None:
        with self._lock:
            stopped = key not in registry
            if not stopped:
                registry[key] = unsubscribe
        if stopped:
            unsubscribe()

    def stop_listening(self, match_id: str) -> None:
        with self._lock:
            unsubscribe = self._match_listeners.pop(match_id, None)
            self._score_data.pop(match_id, None)
        if unsubscribe is not None:
            unsubscribe()
            logger.info(f"Stopped listening to match {match_id}")

    def _on_fixture_snapshot(self, match_id: str, snapshot: Optional[Dict[str, Any]]) -> None:
        if not snapshot:
            return
        try:
            fixture = dict(snapshot)
            fixture.setdefault("id", match_id)
            teams = self._orchestrator.get_team_lookup(fixture)
            score_view = build_score_view(fixture, teams)
        except Exception as e:
            logger.error(f"Error processing snapshot for match {match_id}: {e}", exc_info=True)
            return

        with self._lock:
            if match_id not in self._match_listeners:
                return
            self._score_data[match_id] = score_view
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(match_id, score_view)
            except Exception as e:
                logger.warning(f"Score listener failed for match {match_id}: {e}")

    def get_score_view(self, match_id: str) -> Optional[Dict[str, Any]]:
        """Latest derived score view for a listened-to match, if any push arrived."""
        with self._lock:
            return self._score_data.get(match_id)

    def add_listener(self, listener: ScoreListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    # =========================================================================
    # TOURNAMENT LIVE MATCHES
    # =========================================================================

    def watch_tournament(self, tournament_id: str) -> None:
        """Mirror a tournament's live/in-progress fixtures into the cache on every push."""
        with self._lock:
            if tournament_id in self._tournament_watchers:
                return
            self._tournament_watchers[tournament_id] = _noop

        unsubscribe = self._subscription.subscribe_query(
            FIXTURES,
            [
                Filter("tournamentId", "==", tournament_id),
                Filter("status", "in", LIVE_STATUSES),
            ],
            lambda fixtures: self._orchestrator.apply_live_snapshot(tournament_id, fixtures),
        )
        self._register(self._tournament_watchers, tournament_id, unsubscribe)
        logger.info(f"Watching live matches of tournament {tournament_id}")

    def unwatch_tournament(self, tournament_id: str) -> None:
        with self._lock:
            unsubscribe = self._tournament_watchers.pop(tournament_id, None)
        if unsubscribe is not None:
            unsubscribe()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def active_matches(self) -> List[str]:
        with self._lock:
            return list(self._match_listeners)

    def cleanup(self) -> None:
        """Unsubscribe everything and drop all held views."""
        with self._lock:
            unsubscribers = list(self._match_listeners.values()) + list(self._tournament_watchers.values())
            self._match_listeners.clear()
            self._tournament_watchers.clear()
            self._score_data.clear()
        for unsubscribe in unsubscribers:
            unsubscribe()
