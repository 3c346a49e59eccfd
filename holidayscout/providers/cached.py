"""
Cache wrappers for providers.

Each wrapper keys its cache by a CacheKey built from every parameter that
affects the answer. A provider exception propagates untouched and is
never cached.
"""

from datetime import date
from typing import Optional

from holidayscout.cache.provider_cache import CacheKey, ProviderCache
from holidayscout.models.offers import HotelSearchResult, TransportOffer
from holidayscout.providers.base import HotelProvider, TransportProvider


class CachedTransportProvider(TransportProvider):
    """Transport provider answered from a ProviderCache when possible."""

    def __init__(self, provider: TransportProvider, cache: ProviderCache):
        self.provider = provider
        self.cache = cache
        self.PROVIDER_NAME = provider.PROVIDER_NAME
        self.transport_type = provider.transport_type
        super().__init__()

    async def search(
        self,
        origin: str,
        destination: str,
        outbound_date: date,
        return_date: date,
        adults: int,
    ) -> Optional[TransportOffer]:
        key = CacheKey(
            namespace=self.PROVIDER_NAME,
            origin=origin,
            destination=destination,
            outbound_date=outbound_date,
            return_date=return_date,
            adults=adults,
        )
        return await self.cache.get_or_fetch(
            key,
            lambda: self.provider.search(origin, destination, outbound_date, return_date, adults),
        )

    async def aclose(self) -> None:
        await self.provider.aclose()


class CachedHotelProvider(HotelProvider):
    """Hotel provider answered from a ProviderCache when possible."""

    def __init__(self, provider: HotelProvider, cache: ProviderCache):
        self.provider = provider
        self.cache = cache
        self.PROVIDER_NAME = provider.PROVIDER_NAME
        super().__init__()

    async def search(
        self,
        city: str,
        checkin: date,
        checkout: date,
        adults: int,
    ) -> Optional[HotelSearchResult]:
        key = CacheKey(
            namespace=self.PROVIDER_NAME,
            destination=city,
            outbound_date=checkin,
            return_date=checkout,
            adults=adults,
        )
        return await self.cache.get_or_fetch(
            key,
            lambda: self.provider.search(city, checkin, checkout, adults),
        )

    async def aclose(self) -> None:
        await self.provider.aclose()
