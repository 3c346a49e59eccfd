"""
Unit tests for the Amadeus flight provider.

HTTP traffic is served by httpx.MockTransport; no network access.
"""

import asyncio
import json
from datetime import date

import httpx
import pytest

from holidayscout.exceptions import APIKeyMissingError, ProviderError
from holidayscout.models.offers import TransportType
from holidayscout.providers.amadeus_client import AmadeusFlightProvider, format_iso_duration

OUTBOUND = date(2026, 4, 7)
RETURN = date(2026, 4, 11)


def make_offer(total: str, carriers=("VY",), duration="PT2H15M"):
    segments = [
        {
            "carrierCode": carrier,
            "departure": {"at": f"2026-04-07T0{8 + i}:00:00"},
            "arrival": {"at": f"2026-04-07T{11 + i}:15:00"},
        }
        for i, carrier in enumerate(carriers)
    ]
    return {
        "price": {"grandTotal": total, "currency": "GBP"},
        "itineraries": [
            {"duration": duration, "segments": segments},
            {"duration": "PT2H05M", "segments": [{
                "carrierCode": "BA",
                "departure": {"at": "2026-04-11T18:00:00"},
                "arrival": {"at": "2026-04-11T19:05:00"},
            }]},
        ],
    }


class AmadeusStub:
    """Serves the token and flight-offers endpoints."""

    def __init__(self, search_status=200, offers=None, token_status=200):
        self.search_status = search_status
        self.offers = offers if offers is not None else []
        self.token_status = token_status
        self.token_requests = 0
        self.search_requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/security/oauth2/token"):
            self.token_requests += 1
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            return httpx.Response(200, json={"access_token": "tok", "expires_in": 1799})

        self.search_requests.append(request)
        if self.search_status != 200:
            return httpx.Response(self.search_status, json={"errors": [{"detail": "nope"}]})
        return httpx.Response(200, content=json.dumps({"data": self.offers}))


class SlowTokenStub(AmadeusStub):
    """Answers the token endpoint after a short delay so requests overlap."""

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/security/oauth2/token"):
            await asyncio.sleep(0.01)
        return super().__call__(request)


def make_provider(stub: AmadeusStub) -> AmadeusFlightProvider:
    return AmadeusFlightProvider(
        client_id="id",
        client_secret="secret",
        hostname="test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(stub)),
    )


class TestAmadeusFlightProvider:
    """Tests for AmadeusFlightProvider."""

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setattr("holidayscout.providers.amadeus_client.settings.amadeus_client_id", None)
        monkeypatch.setattr("holidayscout.providers.amadeus_client.settings.amadeus_client_secret", None)

        with pytest.raises(APIKeyMissingError) as exc_info:
            AmadeusFlightProvider()

        assert "AMADEUS_CLIENT_ID" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_cheapest_offer_selected(self):
        stub = AmadeusStub(offers=[make_offer("210.40"), make_offer("150.60", carriers=("FR", "FR"))])
        provider = make_provider(stub)

        offer = await provider.search("LON", "BCN", OUTBOUND, RETURN, 2)

        assert offer.type == TransportType.FLIGHT
        assert offer.price == 151
        assert offer.is_real_price is True
        assert offer.stops == 1
        assert offer.carriers == ["FR", "BA"]
        assert offer.duration == "2h 15m"
        assert offer.outbound_date == OUTBOUND

        params = stub.search_requests[0].url.params
        assert params["originLocationCode"] == "LON"
        assert params["destinationLocationCode"] == "BCN"
        assert params["adults"] == "2"
        assert params["currencyCode"] == "GBP"
        assert stub.search_requests[0].headers["Authorization"] == "Bearer tok"
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_token_reused(self):
        stub = AmadeusStub(offers=[make_offer("100.00")])
        provider = make_provider(stub)

        await provider.search("LON", "BCN", OUTBOUND, RETURN, 2)
        await provider.search("LON", "LIS", OUTBOUND, RETURN, 2)

        assert stub.token_requests == 1
        assert len(stub.search_requests) == 2

    @pytest.mark.asyncio
    async def test_concurrent_cold_start_fetches_one_token(self):
        """Searches started together before any token exists share one refresh."""
        stub = SlowTokenStub(offers=[make_offer("100.00")])
        provider = make_provider(stub)

        results = await asyncio.gather(
            *(provider.search("LON", code, OUTBOUND, RETURN, 2) for code in ("BCN", "LIS", "OPO"))
        )

        assert all(r is not None for r in results)
        assert stub.token_requests == 1
        assert len(stub.search_requests) == 3

    @pytest.mark.asyncio
    async def test_aclose_closes_http_client(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(AmadeusStub()))
        provider = AmadeusFlightProvider(
            client_id="id", client_secret="secret", hostname="test", http_client=http_client
        )

        await provider.aclose()

        assert http_client.is_closed

    @pytest.mark.asyncio
    async def test_no_offers_is_none(self):
        provider = make_provider(AmadeusStub(offers=[]))

        assert await provider.search("LON", "BCN", OUTBOUND, RETURN, 2) is None

    @pytest.mark.asyncio
    async def test_unsupported_route_is_none(self):
        provider = make_provider(AmadeusStub(search_status=400))

        assert await provider.search("LON", "XXX", OUTBOUND, RETURN, 2) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 429, 500, 503])
    async def test_failures_raise_provider_error(self, status_code):
        provider = make_provider(AmadeusStub(search_status=status_code))

        with pytest.raises(ProviderError) as exc_info:
            await provider.search("LON", "BCN", OUTBOUND, RETURN, 2)

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_authentication_failure(self):
        provider = make_provider(AmadeusStub(token_status=401))

        with pytest.raises(ProviderError) as exc_info:
            await provider.search("LON", "BCN", OUTBOUND, RETURN, 2)

        assert exc_info.value.recoverable is False

    @pytest.mark.asyncio
    async def test_malformed_offer_raises(self):
        provider = make_provider(AmadeusStub(offers=[{"price": {"grandTotal": "99.0"}}]))

        with pytest.raises(ProviderError):
            await provider.search("LON", "BCN", OUTBOUND, RETURN, 2)


class TestFormatIsoDuration:
    """Tests for format_iso_duration."""

    @pytest.mark.parametrize(
        "value,expected",
        [("PT2H15M", "2h 15m"), ("PT1H5M", "1h 05m"), ("PT45M", "0h 45m"), (None, None), ("P1D", "P1D")],
    )
    def test_format(self, value, expected):
        assert format_iso_duration(value) == expected
