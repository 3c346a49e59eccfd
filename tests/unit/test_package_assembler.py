"""
Unit tests for PackageAssembler.

Uses in-memory fake providers; no network access.
"""

import asyncio

import pytest

from conftest import FakeHotelProvider, FakeTransportProvider, make_destination
from holidayscout.config import OrchestratorConfig
from holidayscout.exceptions import ProviderError
from holidayscout.models.offers import HotelOffer, OfferSource, TransportType
from holidayscout.models.package import SearchStats
from holidayscout.models.search import SearchRequest, TransportPreference
from holidayscout.orchestration.cancellation import CancellationToken
from holidayscout.orchestration.package_assembler import PackageAssembler
from holidayscout.providers.hotel_estimator import estimate_stay_price


class PricePerDateProvider(FakeTransportProvider):
    """Returns a different price for each outbound date."""

    def __init__(self, prices_by_date):
        super().__init__(prices={})
        self.prices_by_date = prices_by_date

    async def search(self, origin, destination, outbound_date, return_date, adults):
        self.calls.append((origin, destination, outbound_date, return_date, adults))
        price = self.prices_by_date.get(outbound_date)
        if price is None:
            return None
        return await FakeTransportProvider(prices={destination: price}).search(
            origin, destination, outbound_date, return_date, adults
        )


class TestPackageAssembler:
    """Tests for PackageAssembler.assemble."""

    @pytest.fixture
    def destination(self):
        return make_destination("BCN", "Barcelona")

    @pytest.fixture
    def request_(self):
        return SearchRequest(max_budget=500)

    @pytest.mark.asyncio
    async def test_builds_package_from_cheapest_offers(self, destination, request_, date_candidates, fast_config):
        flights = FakeTransportProvider(prices={"BCN": 200})
        hotels = FakeHotelProvider(default_price=150)
        assembler = PackageAssembler([flights], hotels, fast_config)
        stats = SearchStats()

        package = await assembler.assemble(destination, request_, date_candidates, stats)

        assert package is not None
        assert package.total_price == 350
        assert package.over_budget is False
        assert package.nights == 4
        assert stats.destinations_scanned == 1
        assert stats.transport_found == 1

    @pytest.mark.asyncio
    async def test_keeps_cheapest_date(self, destination, request_, date_candidates, fast_config):
        """The cheapest date pair wins and the hotel is searched for those dates."""
        first, second = date_candidates
        flights = PricePerDateProvider({first.outbound_date: 300, second.outbound_date: 180})
        hotels = FakeHotelProvider(default_price=100)
        assembler = PackageAssembler([flights], hotels, fast_config)

        package = await assembler.assemble(destination, request_, date_candidates, SearchStats())

        assert package.transport.price == 180
        assert package.transport.outbound_date == second.outbound_date
        assert hotels.calls == [("Barcelona", second.outbound_date, second.return_date, 2)]

    @pytest.mark.asyncio
    async def test_date_samples_limit(self, destination, request_, date_candidates):
        config = OrchestratorConfig(date_samples=1, provider_timeout_seconds=0.5)
        flights = FakeTransportProvider(prices={"BCN": 200})
        assembler = PackageAssembler([flights], FakeHotelProvider(), config)

        await assembler.assemble(destination, request_, date_candidates, SearchStats())

        assert len(flights.calls) == 1

    @pytest.mark.asyncio
    async def test_no_transport_yields_none(self, destination, request_, date_candidates, fast_config):
        hotels = FakeHotelProvider()
        assembler = PackageAssembler([FakeTransportProvider(prices={})], hotels, fast_config)
        stats = SearchStats()

        package = await assembler.assemble(destination, request_, date_candidates, stats)

        assert package is None
        assert stats.transport_found == 0
        assert hotels.calls == []

    @pytest.mark.asyncio
    async def test_any_transport_keeps_cheaper_of_flight_and_train(
        self, destination, request_, date_candidates, fast_config
    ):
        flights = FakeTransportProvider(prices={"BCN": 250})
        trains = FakeTransportProvider(prices={"BCN": 190}, transport_type=TransportType.TRAIN)
        assembler = PackageAssembler([flights, trains], FakeHotelProvider(), fast_config)

        package = await assembler.assemble(destination, request_, date_candidates, SearchStats())

        assert package.transport.type == TransportType.TRAIN
        assert package.transport.price == 190

    @pytest.mark.asyncio
    async def test_transport_preference_restricts_providers(self, destination, date_candidates, fast_config):
        flights = FakeTransportProvider(prices={"BCN": 250})
        trains = FakeTransportProvider(prices={"BCN": 190}, transport_type=TransportType.TRAIN)
        assembler = PackageAssembler([flights, trains], FakeHotelProvider(), fast_config)
        request = SearchRequest(transport_type=TransportPreference.FLIGHT)

        package = await assembler.assemble(destination, request, date_candidates, SearchStats())

        assert package.transport.type == TransportType.FLIGHT
        assert trains.calls == []

    @pytest.mark.asyncio
    async def test_over_budget_classification(self, destination, date_candidates, fast_config):
        flights = FakeTransportProvider(prices={"BCN": 450})
        assembler = PackageAssembler([flights], FakeHotelProvider(default_price=100), fast_config)
        stats = SearchStats()

        package = await assembler.assemble(
            destination, SearchRequest(max_budget=500), date_candidates, stats
        )
        relaxed = await assembler.assemble(
            destination, SearchRequest(max_budget=500, relax_budget=True), date_candidates, SearchStats()
        )
        unbounded = await assembler.assemble(
            destination, SearchRequest(max_budget=0), date_candidates, SearchStats()
        )

        assert package.over_budget is True
        assert stats.over_budget_count == 1
        assert relaxed.over_budget is False
        assert unbounded.over_budget is False

    @pytest.mark.asyncio
    async def test_provider_error_counted_and_skipped(self, destination, request_, date_candidates, fast_config):
        flights = FakeTransportProvider(
            prices={"BCN": 200}, errors={"BCN": ProviderError("fake", "rate limit exceeded", 429)}
        )
        assembler = PackageAssembler([flights], FakeHotelProvider(), fast_config)
        stats = SearchStats()

        package = await assembler.assemble(destination, request_, date_candidates, stats)

        assert package is None
        assert stats.errors_count == 1

    @pytest.mark.asyncio
    async def test_timeout_counts_as_no_offer(self, destination, request_, date_candidates):
        config = OrchestratorConfig(provider_timeout_seconds=0.01)
        flights = FakeTransportProvider(prices={"BCN": 200}, delays={"BCN": 1.0})
        assembler = PackageAssembler([flights], FakeHotelProvider(), config)
        stats = SearchStats()

        package = await assembler.assemble(destination, request_, date_candidates, stats)

        assert package is None
        assert stats.timeouts_count == len(date_candidates)
        assert stats.errors_count == 0

    @pytest.mark.asyncio
    async def test_hotel_fallback_estimate(self, destination, request_, date_candidates, fast_config):
        """Without hotel offers the stay is priced from the city estimate."""
        flights = FakeTransportProvider(prices={"BCN": 200})
        assembler = PackageAssembler([flights], FakeHotelProvider(hotels={}), fast_config)

        package = await assembler.assemble(destination, request_, date_candidates, SearchStats())

        assert package.hotel.source == OfferSource.ESTIMATE
        assert package.hotel.price == estimate_stay_price("Barcelona", 4)
        assert package.total_price == 200 + package.hotel.price

    @pytest.mark.asyncio
    async def test_cheapest_hotel_selected(self, destination, request_, date_candidates, fast_config):
        hotels = FakeHotelProvider(hotels={"Barcelona": [
            HotelOffer(id="a", name="A", price=300, image="a.jpg"),
            HotelOffer(id="b", name="B", price=120),
            HotelOffer(id="c", name="C", price=200, image="c.jpg"),
        ]})
        flights = FakeTransportProvider(prices={"BCN": 100})
        assembler = PackageAssembler([flights], hotels, fast_config)

        package = await assembler.assemble(destination, request_, date_candidates, SearchStats())

        assert package.hotel.id == "b"

    @pytest.mark.asyncio
    async def test_require_hotel_image_filter(self, destination, request_, date_candidates):
        config = OrchestratorConfig(require_hotel_image=True, provider_timeout_seconds=0.5)
        hotels = FakeHotelProvider(hotels={"Barcelona": [
            HotelOffer(id="a", name="A", price=300, image="a.jpg"),
            HotelOffer(id="b", name="B", price=120),
        ]})
        assembler = PackageAssembler([FakeTransportProvider(prices={"BCN": 100})], hotels, config)

        package = await assembler.assemble(destination, request_, date_candidates, SearchStats())

        assert package.hotel.id == "a"

    @pytest.mark.asyncio
    async def test_require_live_price_filter(self, destination, request_, date_candidates):
        config = OrchestratorConfig(require_live_price=True, provider_timeout_seconds=0.5)
        estimates = FakeTransportProvider(prices={"BCN": 100})
        assembler = PackageAssembler([estimates], FakeHotelProvider(), config)

        assert await assembler.assemble(destination, request_, date_candidates, SearchStats()) is None

        live = FakeTransportProvider(prices={"BCN": 180}, is_real_price=True)
        assembler = PackageAssembler([estimates, live], FakeHotelProvider(), config)
        package = await assembler.assemble(destination, request_, date_candidates, SearchStats())

        assert package.transport.price == 180

    @pytest.mark.asyncio
    async def test_cancelled_token_skips_provider_calls(self, destination, request_, date_candidates, fast_config):
        flights = FakeTransportProvider(prices={"BCN": 100})
        assembler = PackageAssembler([flights], FakeHotelProvider(), fast_config)
        token = CancellationToken()
        token.cancel()
        stats = SearchStats()

        package = await assembler.assemble(destination, request_, date_candidates, stats, token)

        assert package is None
        assert flights.calls == []
        assert stats.errors_count == 0

    @pytest.mark.asyncio
    async def test_cancel_mid_assembly_discards_result(self, destination, request_, date_candidates, fast_config):
        token = CancellationToken()

        class CancellingHotels(FakeHotelProvider):
            async def search(self, city, checkin, checkout, adults):
                token.cancel("superseded")
                return await super().search(city, checkin, checkout, adults)

        flights = FakeTransportProvider(prices={"BCN": 100})
        assembler = PackageAssembler([flights], CancellingHotels(), fast_config)

        package = await assembler.assemble(destination, request_, date_candidates, SearchStats(), token)

        assert package is None

    @pytest.mark.asyncio
    async def test_cancel_ends_slow_provider_wait(self, destination, request_, date_candidates):
        """Cancelling stops the wait on an in-flight call instead of running to the timeout."""
        config = OrchestratorConfig(provider_timeout_seconds=10.0)
        flights = FakeTransportProvider(prices={"BCN": 200}, delays={"BCN": 5.0})
        assembler = PackageAssembler([flights], FakeHotelProvider(), config)
        token = CancellationToken()
        stats = SearchStats()

        async def cancel_soon():
            await asyncio.sleep(0.05)
            token.cancel("superseded")

        canceller = asyncio.ensure_future(cancel_soon())
        package = await asyncio.wait_for(
            assembler.assemble(destination, request_, date_candidates, stats, token), timeout=1.0
        )
        await canceller

        assert package is None
        assert len(flights.calls) == 1
        assert stats.timeouts_count == 0
        assert stats.errors_count == 0

    def test_providers_for(self, fast_config):
        flights = FakeTransportProvider(prices={})
        trains = FakeTransportProvider(prices={}, transport_type=TransportType.TRAIN)
        assembler = PackageAssembler([flights, trains], FakeHotelProvider(), fast_config)

        assert assembler.providers_for(TransportPreference.ANY) == [flights, trains]
        assert assembler.providers_for(TransportPreference.TRAIN) == [trains]
