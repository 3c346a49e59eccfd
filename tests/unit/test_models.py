"""
Unit tests for request, offer and package models.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from conftest import make_destination
from holidayscout.exceptions import InvalidSearchRequestError
from holidayscout.models import (
    DateCandidate,
    HotelOffer,
    Mood,
    Package,
    SearchRequest,
    SearchStats,
    TransportOffer,
    TransportPreference,
    TransportType,
    build_search_request,
)


class TestSearchRequest:
    """Tests for SearchRequest validation."""

    def test_defaults(self):
        request = SearchRequest()

        assert request.origin == "LON"
        assert request.nights == 4
        assert request.adults == 2
        assert request.max_budget == 500
        assert request.mood == Mood.RANDOM
        assert request.transport_type == TransportPreference.ANY
        assert request.fixed_dates is None

    def test_origin_normalized(self):
        assert SearchRequest(origin=" lon ").origin == "LON"

    @pytest.mark.parametrize(
        "value,expected",
        [("London", "LON"), ("lhr", "LON"), ("STN", "LON"), ("Manchester", "MAN"), ("DUBLIN", "DUB")],
    )
    def test_origin_aliases(self, value, expected):
        assert SearchRequest(origin=value).origin == expected

    def test_airport_aliases_share_cache_origin(self):
        """Searches from LHR and LON build the same transport request."""
        assert SearchRequest(origin="LHR") == SearchRequest(origin="LON")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("nights", 0),
            ("adults", 0),
            ("adults", 10),
            ("max_budget", -1),
            ("origin", "LONDRES"),
            ("origin", "L1N"),
            ("mood", "sleepy"),
        ],
    )
    def test_invalid_values_raise_domain_error(self, field, value):
        with pytest.raises(InvalidSearchRequestError) as exc_info:
            build_search_request(**{field: value})

        assert exc_info.value.field == field

    def test_empty_fixed_dates_rejected(self):
        with pytest.raises(InvalidSearchRequestError):
            build_search_request(fixed_dates=[])

    def test_enum_values_from_strings(self):
        request = build_search_request(mood="sun", transport_type="train")

        assert request.mood == Mood.SUN
        assert request.transport_type == TransportPreference.TRAIN

    def test_request_is_immutable(self):
        request = SearchRequest()

        with pytest.raises(ValidationError):
            request.nights = 7


class TestDateCandidate:
    """Tests for DateCandidate."""

    def test_span_must_match_nights(self):
        with pytest.raises(ValidationError):
            DateCandidate(outbound_date=date(2026, 4, 7), return_date=date(2026, 4, 9), nights=4)


class TestPackage:
    """Tests for Package price validation."""

    def _offers(self, transport_price=200, hotel_price=150):
        transport = TransportOffer(
            type=TransportType.FLIGHT,
            price=transport_price,
            outbound_date=date(2026, 4, 7),
            return_date=date(2026, 4, 11),
        )
        return transport, HotelOffer(id="h1", name="Hotel", price=hotel_price)

    def test_total_must_equal_sum(self):
        transport, hotel = self._offers()

        with pytest.raises(ValidationError):
            Package(
                destination=make_destination("BCN"),
                transport=transport,
                hotel=hotel,
                total_price=999,
                nights=4,
                adults=2,
            )

    def test_serializes_to_json(self):
        transport, hotel = self._offers()
        package = Package(
            destination=make_destination("BCN", "Barcelona"),
            transport=transport,
            hotel=hotel,
            total_price=350,
            nights=4,
            adults=2,
        )

        data = package.model_dump(mode="json")

        assert data["total_price"] == 350
        assert data["transport"]["type"] == "flight"
        assert data["hotel"]["source"] == "estimate"
        assert data["destination"]["city"] == "Barcelona"


class TestSearchStats:
    def test_starts_at_zero(self):
        stats = SearchStats()

        assert stats.destinations_scanned == 0
        assert stats.errors_count == 0
        assert stats.elapsed_seconds == 0.0
