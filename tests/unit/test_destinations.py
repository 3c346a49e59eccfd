"""
Unit tests for destination reference data.
"""

import pytest

from holidayscout.data.destinations import (
    DESTINATIONS,
    MOOD_CITIES,
    get_destination,
    list_destinations,
)
from holidayscout.exceptions import DestinationNotFoundError
from holidayscout.models.search import Mood


class TestListDestinations:
    """Tests for list_destinations."""

    def test_random_returns_everything(self):
        assert list_destinations(Mood.RANDOM) == list(DESTINATIONS)
        assert list_destinations() == list(DESTINATIONS)

    @pytest.mark.parametrize("mood", [Mood.SUN, Mood.CITY, Mood.ROMANTIC, Mood.ADVENTURE, Mood.CHILL])
    def test_mood_filter(self, mood):
        destinations = list_destinations(mood)

        assert destinations
        assert all(d.city in MOOD_CITIES[mood] for d in destinations)

    def test_every_mood_city_is_a_destination(self):
        cities = {d.city for d in DESTINATIONS}
        for mood_cities in MOOD_CITIES.values():
            assert mood_cities <= cities

    def test_relax_mood_ignores_filter(self):
        assert list_destinations(Mood.SUN, relax_mood=True) == list(DESTINATIONS)

    def test_order_follows_reference_table(self):
        sun = list_destinations(Mood.SUN)
        positions = [DESTINATIONS.index(d) for d in sun]

        assert positions == sorted(positions)

    def test_iata_codes_unique(self):
        codes = [d.iata_code for d in DESTINATIONS]

        assert len(codes) == len(set(codes))


class TestGetDestination:
    """Tests for get_destination."""

    def test_lookup_is_case_insensitive(self):
        assert get_destination("bcn").city == "Barcelona"

    def test_unknown_code(self):
        with pytest.raises(DestinationNotFoundError) as exc_info:
            get_destination("XXX")

        assert exc_info.value.iata_code == "XXX"
