"""
Package Search Orchestrator.

Fans a search request out over the destination list with a bounded worker
pool, assembles at most one package per destination, and reconciles the
results into a ranked list with a budget fallback.

Example:
    >>> orchestrator = PackageSearchOrchestrator.from_settings(settings)
    >>> result = await orchestrator.search(SearchRequest(max_budget=500, mood=Mood.SUN))
    >>> print(f"{len(result.packages)} packages, exact match: {result.exact_match}")
"""

import logging
import time
import uuid
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence

from redis.asyncio import Redis
from rich.console import Console
from rich.table import Table

from holidayscout.cache.provider_cache import ProviderCache
from holidayscout.cache.redis_backend import RedisCacheBackend
from holidayscout.config import OrchestratorConfig, Settings
from holidayscout.data.destinations import get_destination, list_destinations
from holidayscout.exceptions import ConfigurationError
from holidayscout.models.destination import Destination
from holidayscout.models.offers import HotelSearchResult, TransportOffer
from holidayscout.models.package import Package, SearchResult, SearchStats
from holidayscout.models.search import Mood, SearchRequest
from holidayscout.orchestration.cancellation import CancellationToken, SearchSession
from holidayscout.orchestration.concurrency import map_with_concurrency
from holidayscout.orchestration.package_assembler import PackageAssembler
from holidayscout.orchestration.result_reconciler import reconcile_results
from holidayscout.providers.amadeus_client import AmadeusFlightProvider
from holidayscout.providers.base import HotelProvider, TransportProvider
from holidayscout.providers.cached import CachedHotelProvider, CachedTransportProvider
from holidayscout.providers.flight_estimator import FlightEstimateProvider
from holidayscout.providers.hotel_estimator import HotelEstimateProvider
from holidayscout.providers.train_estimator import TrainEstimateProvider
from holidayscout.utils.date_utils import generate_date_candidates
from holidayscout.utils.logging_config import get_logger

logger = logging.getLogger(__name__)
console = Console()

DestinationSource = Callable[[Optional[Mood], bool], List[Destination]]


class PackageSearchOrchestrator:
    """
    Runs package searches across all candidate destinations.

    Features:
        - Bounded concurrency across destinations (config.concurrency workers)
        - Per-call provider timeouts; a timeout counts as "no offer"
        - Provider failures isolated per destination and counted in stats
        - Budget fallback: cheapest over-budget packages top up a short list
        - Cooperative cancellation, with last-request-wins sessions

    Attributes:
        assembler: Per-destination package assembler
        providers: Every transport and hotel provider, closed by aclose()
        config: Search tuning knobs
        caches: Provider caches whose hit counters feed SearchStats.cache_hits
    """

    def __init__(
        self,
        transport_providers: Sequence[TransportProvider],
        hotel_provider: HotelProvider,
        config: Optional[OrchestratorConfig] = None,
        caches: Sequence[ProviderCache] = (),
        destination_source: DestinationSource = list_destinations,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the orchestrator.

        Args:
            transport_providers: Flight and/or train providers
            hotel_provider: Hotel provider
            config: Search tuning knobs (defaults to OrchestratorConfig())
            caches: Caches wrapping the providers, for hit statistics
            destination_source: Callable(mood, relax_mood) returning destinations
            today: Clock used for generating date samples
        """
        self.config = config or OrchestratorConfig()
        self.assembler = PackageAssembler(transport_providers, hotel_provider, self.config)
        self.providers = [*transport_providers, hotel_provider]
        self.caches = list(caches)
        self.destination_source = destination_source
        self.today = today
        self._sessions: Dict[str, SearchSession] = {}

        logger.info(
            f"PackageSearchOrchestrator initialized with "
            f"{len(transport_providers)} transport providers "
            f"({', '.join(p.PROVIDER_NAME for p in transport_providers)}), "
            f"hotel provider {hotel_provider.PROVIDER_NAME}, "
            f"concurrency {self.config.concurrency}"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        redis_client: Optional[Redis] = None,
    ) -> "PackageSearchOrchestrator":
        """
        Build an orchestrator with cached default providers.

        Flights come from Amadeus when settings.use_amadeus is set, otherwise
        from the estimator. Caches live in Redis when a client is given.

        Raises:
            APIKeyMissingError: If Amadeus is enabled without credentials
            ConfigurationError: If a cache TTL is not positive
        """
        for name, ttl in (("CACHE_TTL_TRANSPORT", settings.cache_ttl_transport),
                          ("CACHE_TTL_HOTELS", settings.cache_ttl_hotels)):
            if ttl <= 0:
                raise ConfigurationError(name, "a positive number of seconds", str(ttl))

        if redis_client is not None:
            transport_backend = RedisCacheBackend(
                redis_client,
                value_type=Optional[TransportOffer],
                key_prefix="holidayscout:transport:",
            )
            hotel_backend = RedisCacheBackend(
                redis_client,
                value_type=Optional[HotelSearchResult],
                key_prefix="holidayscout:hotels:",
            )
        else:
            logger.warning("No Redis client - provider caches are in-process only")
            transport_backend = None
            hotel_backend = None

        transport_cache = ProviderCache(
            "transport", settings.cache_ttl_transport, backend=transport_backend
        )
        hotel_cache = ProviderCache("hotels", settings.cache_ttl_hotels, backend=hotel_backend)

        if settings.use_amadeus:
            flights: TransportProvider = AmadeusFlightProvider(
                client_id=settings.amadeus_client_id,
                client_secret=settings.amadeus_client_secret,
                hostname=settings.amadeus_hostname,
                timeout=settings.provider_timeout_seconds,
            )
        else:
            flights = FlightEstimateProvider()

        return cls(
            transport_providers=[
                CachedTransportProvider(flights, transport_cache),
                CachedTransportProvider(TrainEstimateProvider(), transport_cache),
            ],
            hotel_provider=CachedHotelProvider(HotelEstimateProvider(), hotel_cache),
            config=OrchestratorConfig.from_settings(settings),
            caches=[transport_cache, hotel_cache],
        )

    async def search(
        self,
        request: SearchRequest,
        cancel_token: Optional[CancellationToken] = None,
        session_key: Optional[str] = None,
    ) -> SearchResult:
        """
        Search packages for a request.

        Args:
            request: Validated search request
            cancel_token: Token that aborts this run when cancelled
            session_key: When given, a newer search with the same key
                cancels this one (last request wins)

        Returns:
            SearchResult with ranked packages, or an empty result marked
            cancelled if the run was aborted
        """
        search_id = uuid.uuid4().hex[:8]
        log = get_logger(__name__, {"search_id": search_id})

        session = None
        if cancel_token is None:
            if session_key is not None:
                session = self._sessions.setdefault(session_key, SearchSession())
                cancel_token = session.start()
            else:
                cancel_token = CancellationToken()

        start_time = time.perf_counter()
        hits_before = self._cache_hits()
        stats = SearchStats()

        destinations = self.destination_source(request.mood, request.relax_mood)
        date_candidates = request.fixed_dates or generate_date_candidates(
            request.nights, today=self.today()
        )

        log.info(
            f"Search {search_id} started: origin={request.origin}, "
            f"{len(destinations)} destinations, {len(date_candidates)} date candidates, "
            f"budget={request.max_budget or 'unbounded'}, mood={request.mood.value}, "
            f"transport={request.transport_type.value}"
        )

        try:
            packages = await map_with_concurrency(
                destinations,
                self.config.concurrency,
                lambda destination: self.assembler.assemble(
                    destination, request, date_candidates, stats, cancel_token
                ),
            )
        finally:
            if session is not None and session.current is cancel_token:
                self._sessions.pop(session_key, None)

        stats.cache_hits = self._cache_hits() - hits_before
        stats.elapsed_seconds = round(time.perf_counter() - start_time, 3)

        if cancel_token.cancelled:
            log.info(f"Search {search_id} cancelled ({cancel_token.reason})")
            return SearchResult(packages=[], exact_match=False, stats=stats, cancelled=True)

        ranked, exact_match = reconcile_results(
            packages, request.max_budget, self.config.min_results
        )

        log.info(
            f"Search {search_id} finished in {stats.elapsed_seconds:.2f}s: "
            f"{len(ranked)} packages (exact match: {exact_match}), "
            f"{stats.transport_found}/{stats.destinations_scanned} with transport, "
            f"{stats.errors_count} errors, {stats.timeouts_count} timeouts"
        )

        if request.debug:
            self.print_stats_table(stats)

        return SearchResult(packages=ranked, exact_match=exact_match, stats=stats)

    async def find_package(self, iata_code: str, request: SearchRequest) -> Optional[Package]:
        """
        Assemble the package for a single destination.

        Returns:
            The package (possibly over budget), or None if no transport was found

        Raises:
            DestinationNotFoundError: If the IATA code is unknown
        """
        destination = get_destination(iata_code)
        date_candidates = request.fixed_dates or generate_date_candidates(
            request.nights, today=self.today()
        )
        return await self.assembler.assemble(destination, request, date_candidates, SearchStats())

    async def aclose(self) -> None:
        """Close provider network clients. Call once the orchestrator is no longer used."""
        for provider in self.providers:
            await provider.aclose()
        logger.debug("Closed provider clients")

    def _cache_hits(self) -> int:
        return sum(cache.hits for cache in self.caches)

    def print_stats_table(self, stats: SearchStats):
        """Print a Rich table with search statistics."""
        table = Table(title="Search Statistics")

        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", style="yellow")

        table.add_row("Destinations scanned", str(stats.destinations_scanned))
        table.add_row("Transport found", str(stats.transport_found))
        table.add_row("Over budget", str(stats.over_budget_count))
        table.add_row("Errors", f"[red]{stats.errors_count}[/red]")
        table.add_row("Timeouts", f"[red]{stats.timeouts_count}[/red]")
        table.add_row("Cache hits", f"[green]{stats.cache_hits}[/green]")

        console.print(table)
        console.print(f"\n[dim]Time elapsed: {stats.elapsed_seconds:.2f}s[/dim]\n")
