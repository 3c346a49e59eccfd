"""
Pytest configuration and shared fixtures for HolidayScout tests.
"""

import asyncio
import os
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from dotenv import load_dotenv

# Load test environment variables before any holidayscout imports
env_file = Path(__file__).parent.parent / ".env.test"
if env_file.exists():
    load_dotenv(env_file, override=True)
else:
    # Fallback: keep tests offline and deterministic
    os.environ.setdefault("DEBUG", "False")
    os.environ.setdefault("USE_AMADEUS", "False")
    os.environ.setdefault("LOG_LEVEL", "WARNING")
    os.environ.pop("REDIS_URL", None)

from holidayscout.config import OrchestratorConfig  # noqa: E402
from holidayscout.models.destination import Destination  # noqa: E402
from holidayscout.models.offers import (  # noqa: E402
    HotelOffer,
    HotelSearchResult,
    OfferSource,
    TransportOffer,
    TransportType,
)
from holidayscout.models.search import DateCandidate  # noqa: E402
from holidayscout.providers.base import HotelProvider, TransportProvider  # noqa: E402


class FakeTransportProvider(TransportProvider):
    """
    Transport provider answering from a price table keyed by destination IATA.

    Destinations listed in `errors` raise the given exception and those in
    `delays` sleep first. Every call is recorded.
    """

    PROVIDER_NAME = "fake_flights"
    transport_type = TransportType.FLIGHT

    def __init__(
        self,
        prices: Dict[str, int],
        errors: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None,
        transport_type: TransportType = TransportType.FLIGHT,
        is_real_price: bool = False,
    ):
        self.transport_type = transport_type
        self.PROVIDER_NAME = f"fake_{transport_type.value}"
        super().__init__()
        self.prices = prices
        self.errors = errors or {}
        self.delays = delays or {}
        self.is_real_price = is_real_price
        self.calls: List[tuple] = []

    async def search(self, origin, destination, outbound_date, return_date, adults):
        self.calls.append((origin, destination, outbound_date, return_date, adults))
        if destination in self.delays:
            await asyncio.sleep(self.delays[destination])
        if destination in self.errors:
            raise self.errors[destination]
        if destination not in self.prices:
            return None
        return TransportOffer(
            type=self.transport_type,
            price=self.prices[destination],
            outbound_date=outbound_date,
            return_date=return_date,
            is_real_price=self.is_real_price,
        )


class FakeHotelProvider(HotelProvider):
    """Hotel provider returning fixed offers per city (default: one £0 hotel)."""

    PROVIDER_NAME = "fake_hotels"

    def __init__(self, hotels: Optional[Dict[str, List[HotelOffer]]] = None, default_price: int = 0):
        super().__init__()
        self.hotels = hotels
        self.default_price = default_price
        self.calls: List[tuple] = []

    async def search(self, city, checkin, checkout, adults):
        self.calls.append((city, checkin, checkout, adults))
        if self.hotels is None:
            offer = HotelOffer(
                id=f"h-{city}",
                name=f"Hotel {city}",
                price=self.default_price,
                image="https://img.example/h.jpg",
                source=OfferSource.LIVE,
            )
            return HotelSearchResult(hotels=[offer])
        if city not in self.hotels:
            return None
        return HotelSearchResult(hotels=self.hotels[city])


def make_destination(iata_code: str, city: Optional[str] = None) -> Destination:
    """Build a Destination for tests."""
    return Destination(
        city=city or f"City{iata_code}",
        country="Testland",
        iata_code=iata_code,
        lat=0.0,
        lng=0.0,
    )


@pytest.fixture
def today():
    """Fixed 'today' (a Monday) for deterministic date sampling."""
    return date(2026, 3, 2)


@pytest.fixture
def date_candidates(today):
    """Two midweek date pairs, 4 nights each."""
    first = today + timedelta(days=22)
    second = today + timedelta(days=36)
    return [
        DateCandidate(outbound_date=first, return_date=first + timedelta(days=4), nights=4),
        DateCandidate(outbound_date=second, return_date=second + timedelta(days=4), nights=4),
    ]


@pytest.fixture
def fast_config():
    """Orchestrator config with a short provider timeout."""
    return OrchestratorConfig(
        concurrency=3,
        min_results=6,
        date_samples=5,
        provider_timeout_seconds=0.5,
    )


@pytest.fixture
def temp_logs_dir(tmp_path):
    """Create a temporary logs directory for testing."""
    logs_dir = tmp_path / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir


# Markers for test categorization
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
