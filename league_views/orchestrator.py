"""
Query Orchestrator
The only component that reads the backing store. Every logical query is a
read-through: compute a key, try the cache, on a miss run the smallest set of
store queries (independent reads in parallel), cache under the query's
category TTL and return.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence

from config.settings import Settings, settings as default_settings
from league_views.cache import CacheManager, DataCategory, RequestCoalescer
from league_views.errors import BackingStoreError, StoreError
from league_views.standings import compute_standings
from league_views.store import DocumentStore, Filter
from league_views.utils.helpers import read, safe_str

logger = logging.getLogger("orchestrator")

LIVE_STATUSES = ["live", "in-progress"]

FIXTURES = "fixtures"
TEAMS = "teams"
PLAYERS = "players"
TOURNAMENTS = "tournaments"
NEWS = "news"
FEATURED_VIDEOS = "featuredVideos"


def tournament_cache_keys(tournament_id: str) -> List[str]:
    """Every cache key derived from one tournament's records."""
    return [
        f"tournament_{tournament_id}",
        f"tournament_minimal_{tournament_id}",
        f"live_matches_{tournament_id}",
        f"teams_players_{tournament_id}",
        f"tournament_stats_{tournament_id}",
    ]


class QueryOrchestrator:
    """
    Cached, minimal-read access to tournaments, fixtures, teams and content.

    Usage:
        orchestrator = QueryOrchestrator(store, cache)
        bundle = orchestrator.get_tournament_bundle("t1")
    """

    def __init__(
        self,
        store: DocumentStore,
        cache: CacheManager,
        settings: Optional[Settings] = None,
        coalescer: Optional[RequestCoalescer] = None,
    ):
        self._store = store
        self._cache = cache
        self._settings = settings or default_settings
        self._coalescer = coalescer or RequestCoalescer()

    @property
    def cache(self) -> CacheManager:
        return self._cache

    # =========================================================================
    # PLUMBING
    # =========================================================================

    def _read_through(
        self,
        key: str,
        category: DataCategory,
        fetch_fn: Callable[[], Any],
    ) -> Any:
        cached = self._cache.get(key, category)
        if cached is not None:
            return cached

        try:
            data = self._coalescer.get_or_fetch(key, fetch_fn)
        except StoreError as e:
            logger.error(f"Store read failed for {key}: {e}", exc_info=True)
            raise BackingStoreError(key, e) from e

        if data is not None:
            self._cache.set(key, data, category)
        return data

    def _parallel(self, *calls: Callable[[], Any]) -> List[Any]:
        """Run independent store reads concurrently and join them in order."""
        workers = max(1, min(len(calls), self._settings.store_max_workers))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="store-read") as executor:
            futures = [executor.submit(call) for call in calls]
            return [future.result() for future in futures]

    # =========================================================================
    # FIXTURES AND TEAMS
    # =========================================================================

    def get_fixture(self, match_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch one fixture straight from the store (never cached, scores move).

        Returns:
            The fixture record, or None if it does not exist
        """
        try:
            return self._store.get(FIXTURES, match_id)
        except StoreError as e:
            logger.error(f"Store read failed for fixture {match_id}: {e}", exc_info=True)
            raise BackingStoreError(f"fixture_{match_id}", e) from e

    def _get_team(self, team_id: str) -> Optional[Dict[str, Any]]:
        return self._read_through(
            f"team_{team_id}",
            DataCategory.TOURNAMENT_DATA,
            lambda: self._store.get(TEAMS, team_id),
        )

    def get_team_lookup(self, fixture: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """
        Fetch both team documents of a fixture in parallel.

        A side whose read fails or whose team is missing degrades to {} so
        the match can still render (without that side's logo).

        Returns:
            {"team1": team_doc_or_{}, "team2": team_doc_or_{}}
        """
        def fetch_side(side: str) -> Dict[str, Any]:
            team_id = safe_str(read(fixture, side))
            if not team_id:
                return {}
            try:
                return self._get_team(team_id) or {}
            except BackingStoreError as e:
                logger.warning(f"Team lookup failed for {side}={team_id}: {e}")
                return {}

        team1, team2 = self._parallel(lambda: fetch_side("team1"), lambda: fetch_side("team2"))
        return {"team1": team1, "team2": team2}

    def list_fixtures(
        self,
        tournament_id: Optional[str] = None,
        status: Optional[str] = None,
        date: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Fixtures filtered by tournament/status/date, newest date first.

        Args:
            tournament_id: Restrict to one tournament
            status: Exact status, e.g. "live"
            date: Exact date string as stored on the fixture
            limit: Page size (defaults to settings.matches_default_limit)
            offset: Records to skip

        Returns:
            One page of raw fixture records
        """
        limit = limit or self._settings.matches_default_limit
        offset = max(offset, 0)

        filters: List[Filter] = []
        if tournament_id:
            filters.append(Filter("tournamentId", "==", tournament_id))
        if status:
            filters.append(Filter("status", "==", status))
        if date:
            filters.append(Filter("date", "==", date))

        key = f"matches_{(tournament_id or None, status or None, date or None, offset, limit)!r}"

        def fetch() -> List[Dict[str, Any]]:
            records = self._store.query(
                FIXTURES,
                filters=filters,
                order_by=[("date", "desc"), ("time", "desc")],
                limit=offset + limit,
            )
            return records[offset:]

        return self._read_through(key, DataCategory.LIVE_MATCHES, fetch)

    # =========================================================================
    # TOURNAMENTS
    # =========================================================================

    def get_tournaments(self) -> List[Dict[str, Any]]:
        """All tournaments."""
        return self._read_through(
            "all_tournaments",
            DataCategory.TOURNAMENTS,
            lambda: self._store.query(TOURNAMENTS),
        )

    def get_tournament(self, tournament_id: str) -> Optional[Dict[str, Any]]:
        """One tournament document, or None."""
        return self._read_through(
            f"tournament_{tournament_id}",
            DataCategory.TOURNAMENTS,
            lambda: self._store.get(TOURNAMENTS, tournament_id),
        )

    def get_tournament_bundle(self, tournament_id: str) -> Dict[str, Any]:
        """
        Minimal data for a tournament page: the tournament, its live matches
        and its most recently completed matches (not the full history).

        Returns:
            {"tournament": doc_or_None, "liveMatches": [...], "recentMatches": [...]}
        """
        def fetch() -> Dict[str, Any]:
            tournament, live, recent = self._parallel(
                lambda: self._store.get(TOURNAMENTS, tournament_id),
                lambda: self._store.query(
                    FIXTURES,
                    filters=[
                        Filter("tournamentId", "==", tournament_id),
                        Filter("status", "in", LIVE_STATUSES),
                    ],
                    limit=self._settings.bundle_live_limit,
                ),
                lambda: self._store.query(
                    FIXTURES,
                    filters=[
                        Filter("tournamentId", "==", tournament_id),
                        Filter("status", "==", "completed"),
                    ],
                    order_by=[("updatedAt", "desc")],
                    limit=self._settings.bundle_recent_limit,
                ),
            )
            return {"tournament": tournament, "liveMatches": live, "recentMatches": recent}

        return self._read_through(
            f"tournament_minimal_{tournament_id}",
            DataCategory.TOURNAMENT_DATA,
            fetch,
        )

    def get_live_matches(self, tournament_id: str) -> List[Dict[str, Any]]:
        """A tournament's live and in-progress fixtures."""
        return self._read_through(
            f"live_matches_{tournament_id}",
            DataCategory.LIVE_MATCHES,
            lambda: self._store.query(
                FIXTURES,
                filters=[
                    Filter("tournamentId", "==", tournament_id),
                    Filter("status", "in", LIVE_STATUSES),
                ],
            ),
        )

    def apply_live_snapshot(self, tournament_id: str, fixtures: Sequence[Dict[str, Any]]) -> None:
        """
        Replace the cached live-matches entry with a pushed snapshot, so
        polling readers see it without another store query.
        """
        self._cache.set(f"live_matches_{tournament_id}", list(fixtures), DataCategory.LIVE_MATCHES)

    def get_teams_and_players(self, tournament_id: str) -> Dict[str, Any]:
        """Teams and players registered for a tournament."""
        def fetch() -> Dict[str, Any]:
            teams, players = self._parallel(
                lambda: self._store.query(TEAMS, filters=[Filter("tournamentId", "==", tournament_id)]),
                lambda: self._store.query(PLAYERS, filters=[Filter("tournamentId", "==", tournament_id)]),
            )
            return {"teams": teams, "players": players}

        return self._read_through(
            f"teams_players_{tournament_id}",
            DataCategory.TOURNAMENT_DATA,
            fetch,
        )

    def get_standings(self, tournament_id: str) -> Dict[str, Any]:
        """Ranked standings computed from the tournament's completed matches."""
        def fetch() -> Dict[str, Any]:
            teams, completed = self._parallel(
                lambda: self._store.query(TEAMS, filters=[Filter("tournamentId", "==", tournament_id)]),
                lambda: self._store.query(
                    FIXTURES,
                    filters=[
                        Filter("tournamentId", "==", tournament_id),
                        Filter("status", "==", "completed"),
                    ],
                ),
            )
            return compute_standings(teams, completed)

        return self._read_through(
            f"tournament_stats_{tournament_id}",
            DataCategory.TOURNAMENT_DATA,
            fetch,
        )

    def clear_tournament_cache(self, tournament_id: str) -> int:
        """
        Drop every cached query for a tournament, after a write elsewhere.

        Returns:
            Number of entries removed
        """
        cleared = sum(1 for key in tournament_cache_keys(tournament_id) if self._cache.clear(key))
        logger.info(f"Cleared {cleared} cache entries for tournament {tournament_id}")
        return cleared

    # =========================================================================
    # CONTENT
    # =========================================================================

    def _fallback_videos(self) -> List[Dict[str, Any]]:
        try:
            return self._store.query(
                FIXTURES,
                filters=[Filter("youtubeLink", "!=", "")],
                order_by=[("createdAt", "desc")],
                limit=self._settings.home_videos_limit,
            )
        except StoreError as e:
            logger.warning(f"Could not fetch fallback videos: {e}")
            return []

    def get_home_content(self) -> Dict[str, Any]:
        """
        Home page content: featured videos, up to 2 featured articles and
        up to 6 regular news items. When no videos are featured, match
        videos from fixtures are offered as a fallback.
        """
        def fetch() -> Dict[str, Any]:
            videos, all_news = self._parallel(
                lambda: self._store.query(
                    FEATURED_VIDEOS,
                    order_by=[("createdAt", "desc")],
                    limit=self._settings.home_videos_limit,
                ),
                lambda: self._store.query(
                    NEWS,
                    order_by=[("publishDate", "desc")],
                    limit=self._settings.home_news_limit,
                ),
            )
            return {
                "videos": videos,
                "news": [a for a in all_news if not read(a, "featured", False)][:6],
                "featuredArticles": [a for a in all_news if read(a, "featured", False)][:2],
                "fallbackVideos": [] if videos else self._fallback_videos(),
            }

        return self._read_through("home_page_content", DataCategory.NEWS, fetch)

    def get_videos(self, limit: int = 12) -> List[Dict[str, Any]]:
        """Featured videos, newest first."""
        return self._read_through(
            f"videos_{limit}",
            DataCategory.VIDEOS,
            lambda: self._store.query(FEATURED_VIDEOS, order_by=[("createdAt", "desc")], limit=limit),
        )

    def get_cache_stats(self) -> Dict[str, Any]:
        return self._cache.get_stats()
