"""
Amadeus Flight Offers Search integration for live flight prices.

Uses the client-credentials OAuth flow and the v2 flight-offers endpoint.
Credentials are checked when the provider is constructed, so a missing
key fails the run before any destination is searched.

API Documentation: https://developers.amadeus.com/self-service/apis-docs
"""

import asyncio
import logging
import re
import time
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx

from holidayscout.config import settings
from holidayscout.exceptions import APIKeyMissingError, ProviderError
from holidayscout.models.offers import TransportOffer, TransportType
from holidayscout.providers.base import TransportProvider
from holidayscout.providers.flight_estimator import build_google_flights_url
from holidayscout.utils.retry import api_retry

logger = logging.getLogger(__name__)

_ISO_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?")


def format_iso_duration(value: Optional[str]) -> Optional[str]:
    """
    Convert an ISO-8601 duration to the short display form.

    Examples:
        >>> format_iso_duration("PT2H15M")
        '2h 15m'
    """
    if not value:
        return None
    match = _ISO_DURATION_RE.fullmatch(value)
    if not match:
        return value
    hours, minutes = match.group(1) or "0", match.group(2) or "0"
    return f"{int(hours)}h {int(minutes):02d}m"


class AmadeusFlightProvider(TransportProvider):
    """
    Live flight prices from the Amadeus self-service API.

    Examples:
        >>> provider = AmadeusFlightProvider()
        >>> offer = await provider.search("LON", "BCN", date(2025, 3, 4), date(2025, 3, 8), 2)
        >>> offer.is_real_price
        True
    """

    PROVIDER_NAME = "amadeus"
    transport_type = TransportType.FLIGHT

    HOSTS = {
        "test": "https://test.api.amadeus.com",
        "production": "https://api.amadeus.com",
    }
    TOKEN_ENDPOINT = "/v1/security/oauth2/token"
    SEARCH_ENDPOINT = "/v2/shopping/flight-offers"

    # Refresh the token this many seconds before it expires
    TOKEN_EXPIRY_MARGIN = 30

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        hostname: Optional[str] = None,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the Amadeus provider.

        Args:
            client_id: Amadeus client ID (defaults to settings.amadeus_client_id)
            client_secret: Amadeus client secret (defaults to settings.amadeus_client_secret)
            hostname: 'test' or 'production' (defaults to settings.amadeus_hostname)
            timeout: HTTP timeout in seconds
            http_client: Optional shared httpx client

        Raises:
            APIKeyMissingError: If either credential is missing
        """
        super().__init__()
        self.client_id = client_id or settings.amadeus_client_id
        self.client_secret = client_secret or settings.amadeus_client_secret
        if not self.client_id or not self.client_secret:
            raise APIKeyMissingError(
                service="Amadeus",
                env_vars=["AMADEUS_CLIENT_ID", "AMADEUS_CLIENT_SECRET"],
            )

        self.base_url = self.HOSTS[hostname or settings.amadeus_hostname]
        self.timeout = timeout
        self._client = http_client
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _valid_token(self) -> Optional[str]:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token
        return None

    async def _get_token(self) -> str:
        token = self._valid_token()
        if token:
            return token

        # Concurrent searches share one refresh
        async with self._token_lock:
            token = self._valid_token()
            if token:
                return token
            return await self._request_token()

    @api_retry(max_attempts=3, min_wait_seconds=1, max_wait_seconds=4)
    async def _request_token(self) -> str:
        response = await self._http().post(
            f"{self.base_url}{self.TOKEN_ENDPOINT}",
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
        )
        if response.status_code != 200:
            raise ProviderError(
                self.PROVIDER_NAME,
                "authentication failed - check credentials",
                status_code=response.status_code,
                recoverable=False,
            )

        payload = response.json()
        self._token = payload["access_token"]
        self._token_expires_at = (
            time.monotonic() + int(payload.get("expires_in", 1799)) - self.TOKEN_EXPIRY_MARGIN
        )
        return self._token

    @api_retry(max_attempts=3, min_wait_seconds=1, max_wait_seconds=4)
    async def _search_offers(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        token = await self._get_token()
        response = await self._http().get(
            f"{self.base_url}{self.SEARCH_ENDPOINT}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )

        if response.status_code == 200:
            return response.json().get("data") or []
        if response.status_code == 401:
            self._token = None
            raise ProviderError(self.PROVIDER_NAME, "access token rejected", status_code=401)
        if response.status_code == 429:
            raise ProviderError(self.PROVIDER_NAME, "rate limit exceeded", status_code=429)
        if response.status_code >= 500:
            raise ProviderError(self.PROVIDER_NAME, "server error", status_code=response.status_code)

        # 4xx for an unsupported route means there is nothing to offer
        logger.info(
            f"Amadeus returned {response.status_code} for {params['originLocationCode']}"
            f"->{params['destinationLocationCode']}: treating as no offer"
        )
        return []

    async def search(
        self,
        origin: str,
        destination: str,
        outbound_date: date,
        return_date: date,
        adults: int,
    ) -> Optional[TransportOffer]:
        params = {
            "originLocationCode": origin,
            "destinationLocationCode": destination,
            "departureDate": outbound_date.isoformat(),
            "returnDate": return_date.isoformat(),
            "adults": adults,
            "currencyCode": "GBP",
            "max": 5,
            "nonStop": "false",
        }

        offers = await self._search_offers(params)
        if not offers:
            return None

        cheapest = min(offers, key=lambda o: float(o["price"]["grandTotal"]))
        return self.parse_offer(cheapest, origin, destination, outbound_date, return_date)

    def parse_offer(
        self,
        offer: Dict[str, Any],
        origin: str,
        destination: str,
        outbound_date: date,
        return_date: date,
    ) -> TransportOffer:
        """Convert a raw Amadeus flight offer into a TransportOffer."""
        try:
            outbound = offer["itineraries"][0]
            segments = outbound["segments"]
            carriers: List[str] = []
            for itinerary in offer["itineraries"]:
                for segment in itinerary["segments"]:
                    if segment["carrierCode"] not in carriers:
                        carriers.append(segment["carrierCode"])

            return TransportOffer(
                type=TransportType.FLIGHT,
                price=round(float(offer["price"]["grandTotal"])),
                currency=offer["price"].get("currency", "GBP"),
                outbound_date=outbound_date,
                return_date=return_date,
                departure_timestamp=datetime.fromisoformat(segments[0]["departure"]["at"]),
                arrival_timestamp=datetime.fromisoformat(segments[-1]["arrival"]["at"]),
                stops=len(segments) - 1,
                carriers=carriers,
                duration=format_iso_duration(outbound.get("duration")),
                booking_link=build_google_flights_url(origin, destination, outbound_date, return_date),
                is_real_price=True,
            )
        except (KeyError, IndexError, ValueError) as e:
            raise ProviderError(self.PROVIDER_NAME, f"unparseable offer: {e}") from e
