"""
Provider interfaces consumed by the package assembler.

Implementations must be safe to call concurrently for different
parameters. "No offer" is signalled by returning None. Failures
(network, authentication, rate limits) raise, preferably ProviderError;
the assembler records them and skips the destination.

Usage:
    >>> class MyFlights(TransportProvider):
    ...     PROVIDER_NAME = "myflights"
    ...     transport_type = TransportType.FLIGHT
    ...
    ...     async def search(self, origin, destination, outbound_date, return_date, adults):
    ...         ...
"""

import hashlib
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from holidayscout.models.offers import HotelSearchResult, TransportOffer, TransportType


class TransportProvider(ABC):
    """
    Returns a priced return journey for one route and date pair.

    Class Attributes:
        PROVIDER_NAME: Unique identifier used in logs and cache keys
        transport_type: Kind of transport this provider offers
    """

    PROVIDER_NAME: str = "transport"
    transport_type: TransportType = TransportType.FLIGHT

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.PROVIDER_NAME}")

    @abstractmethod
    async def search(
        self,
        origin: str,
        destination: str,
        outbound_date: date,
        return_date: date,
        adults: int,
    ) -> Optional[TransportOffer]:
        """
        Find the cheapest offer for the route.

        Args:
            origin: Origin IATA city/airport code (e.g., 'LON')
            destination: Destination IATA code (e.g., 'BCN')
            outbound_date: Outbound travel date
            return_date: Return travel date
            adults: Number of adult passengers

        Returns:
            TransportOffer priced for all adults, or None if nothing is available
        """

    async def aclose(self) -> None:
        """Release network resources. Providers without any keep this no-op."""


class HotelProvider(ABC):
    """Returns hotel options for one city and stay."""

    PROVIDER_NAME: str = "hotel"

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.PROVIDER_NAME}")

    @abstractmethod
    async def search(
        self,
        city: str,
        checkin: date,
        checkout: date,
        adults: int,
    ) -> Optional[HotelSearchResult]:
        """
        Find hotels for the stay.

        Returns:
            HotelSearchResult (possibly with an empty hotel list), or None
        """

    async def aclose(self) -> None:
        """Release network resources. Providers without any keep this no-op."""


def stable_fraction(*parts: object) -> float:
    """
    Map the given parts to a stable pseudo-random number in [0, 1).

    Estimate providers use it in place of randomness so that the same
    request always yields the same price.
    """
    digest = hashlib.md5(":".join(str(p) for p in parts).encode()).hexdigest()
    return int(digest[:8], 16) / 0x100000000
