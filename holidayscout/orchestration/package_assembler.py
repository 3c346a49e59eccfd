"""
Per-destination package assembly.

For one destination the assembler tries a bounded number of date samples,
keeps the cheapest transport offer, pairs it with the cheapest acceptable
hotel for the same dates and classifies the result against the budget.

Missing offers and provider failures are recovered here: a destination
without transport, or whose providers fail, simply yields no package.
"""

import asyncio
import logging
from typing import Awaitable, Dict, List, Optional, Sequence, TypeVar

from holidayscout.config import OrchestratorConfig
from holidayscout.models.destination import Destination
from holidayscout.models.offers import HotelOffer, OfferSource, TransportOffer, TransportType
from holidayscout.models.package import Package, SearchStats
from holidayscout.models.search import DateCandidate, SearchRequest, TransportPreference
from holidayscout.orchestration.cancellation import CancellationToken
from holidayscout.providers.base import HotelProvider, TransportProvider
from holidayscout.providers.hotel_estimator import build_booking_search_url, estimate_stay_price

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ALLOWED_TYPES = {
    TransportPreference.FLIGHT: (TransportType.FLIGHT,),
    TransportPreference.TRAIN: (TransportType.TRAIN,),
    TransportPreference.ANY: (TransportType.FLIGHT, TransportType.TRAIN),
}


class _Cancelled(Exception):
    """Raised internally when the search token fires mid-assembly."""


class PackageAssembler:
    """
    Builds at most one Package per destination.

    Attributes:
        transport_providers: Providers grouped by the transport type they offer
        hotel_provider: Provider queried once per destination
        config: Search tuning knobs (date samples, timeouts, filters)
    """

    def __init__(
        self,
        transport_providers: Sequence[TransportProvider],
        hotel_provider: HotelProvider,
        config: OrchestratorConfig,
    ):
        self.transport_providers: Dict[TransportType, List[TransportProvider]] = {}
        for provider in transport_providers:
            self.transport_providers.setdefault(provider.transport_type, []).append(provider)
        self.hotel_provider = hotel_provider
        self.config = config

    def providers_for(self, preference: TransportPreference) -> List[TransportProvider]:
        """Transport providers allowed by a request's transport preference."""
        providers: List[TransportProvider] = []
        for transport_type in _ALLOWED_TYPES[preference]:
            providers.extend(self.transport_providers.get(transport_type, []))
        return providers

    async def assemble(
        self,
        destination: Destination,
        request: SearchRequest,
        date_candidates: Sequence[DateCandidate],
        stats: SearchStats,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Optional[Package]:
        """
        Assemble the cheapest package for one destination.

        Args:
            destination: Destination to build a package for
            request: The search request
            date_candidates: Ordered date samples; only the first
                config.date_samples are tried
            stats: Counters for the current run, updated in place
            cancel_token: Checked before every provider call and ends
                any provider wait in progress when it fires

        Returns:
            Package (possibly over budget), or None if no transport was
            found, a provider failed, or the search was cancelled
        """
        stats.destinations_scanned += 1

        try:
            transport = await self._find_cheapest_transport(
                destination, request, date_candidates, stats, cancel_token
            )
            if transport is None:
                if request.debug:
                    logger.info(f"No transport offer for {destination}")
                return None

            stats.transport_found += 1
            hotel = await self._find_hotel(destination, transport, request, stats, cancel_token)
        except _Cancelled:
            logger.debug(f"Discarding {destination}: search cancelled")
            return None
        except Exception as e:
            stats.errors_count += 1
            logger.warning(f"Error assembling package for {destination}: {e}")
            return None

        if cancel_token is not None and cancel_token.cancelled:
            return None

        total_price = transport.price + hotel.price
        over_budget = (
            request.max_budget > 0
            and total_price > request.max_budget
            and not request.relax_budget
        )
        if over_budget:
            stats.over_budget_count += 1

        package = Package(
            destination=destination,
            transport=transport,
            hotel=hotel,
            total_price=total_price,
            over_budget=over_budget,
            nights=(transport.return_date - transport.outbound_date).days,
            adults=request.adults,
            currency=transport.currency,
        )

        if request.debug:
            logger.info(
                f"{destination}: {transport.type.value} £{transport.price} + "
                f"hotel £{hotel.price} ({hotel.source.value}) = £{total_price}"
                f"{' (over budget)' if over_budget else ''}"
            )

        return package

    async def _find_cheapest_transport(
        self,
        destination: Destination,
        request: SearchRequest,
        date_candidates: Sequence[DateCandidate],
        stats: SearchStats,
        cancel_token: Optional[CancellationToken],
    ) -> Optional[TransportOffer]:
        providers = self.providers_for(request.transport_type)
        cheapest: Optional[TransportOffer] = None

        for candidate in date_candidates[: self.config.date_samples]:
            for provider in providers:
                offer = await self._call(
                    provider.search(
                        request.origin,
                        destination.iata_code,
                        candidate.outbound_date,
                        candidate.return_date,
                        request.adults,
                    ),
                    stats,
                    cancel_token,
                )
                if offer is None:
                    continue
                if self.config.require_live_price and not offer.is_real_price:
                    continue
                if cheapest is None or offer.price < cheapest.price:
                    cheapest = offer

        return cheapest

    async def _find_hotel(
        self,
        destination: Destination,
        transport: TransportOffer,
        request: SearchRequest,
        stats: SearchStats,
        cancel_token: Optional[CancellationToken],
    ) -> HotelOffer:
        result = await self._call(
            self.hotel_provider.search(
                destination.city,
                transport.outbound_date,
                transport.return_date,
                request.adults,
            ),
            stats,
            cancel_token,
        )

        hotels = list(result.hotels) if result is not None else []
        if self.config.require_hotel_image:
            hotels = [h for h in hotels if h.image]

        if hotels:
            return min(hotels, key=lambda h: h.price)

        nights = (transport.return_date - transport.outbound_date).days
        search_url = (
            result.search_url
            if result is not None and result.search_url
            else build_booking_search_url(
                destination.city, transport.outbound_date, transport.return_date, request.adults
            )
        )
        return HotelOffer(
            id=f"est-{destination.iata_code.lower()}",
            name=f"Hotels in {destination.city}",
            price=estimate_stay_price(destination.city, nights),
            booking_link=search_url,
            source=OfferSource.ESTIMATE,
        )

    async def _call(
        self,
        call: Awaitable[T],
        stats: SearchStats,
        cancel_token: Optional[CancellationToken],
    ) -> Optional[T]:
        """
        Await one provider call with the configured timeout; a timeout means no offer.

        The wait also ends as soon as the cancel token fires, abandoning the
        provider call instead of letting it run to its timeout.
        """
        if cancel_token is not None and cancel_token.cancelled:
            # Close the un-awaited coroutine
            if asyncio.iscoroutine(call):
                call.close()
            raise _Cancelled()

        call_task = asyncio.ensure_future(call)
        waiters = {call_task}
        cancel_wait = None
        if cancel_token is not None:
            cancel_wait = asyncio.ensure_future(cancel_token.wait())
            waiters.add(cancel_wait)

        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=self.config.provider_timeout_seconds,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()

        if call_task in done:
            return call_task.result()
        if cancel_wait is not None and cancel_wait in done:
            raise _Cancelled()

        stats.timeouts_count += 1
        logger.warning(
            f"Provider call timed out after {self.config.provider_timeout_seconds}s"
        )
        return None
