"""
Hotel price estimates by city tier.

Returns a single estimated stay per city with a Booking.com affiliate
search link. The same nightly estimate is used by the package assembler
when a hotel provider has nothing for a city.
"""

from datetime import date
from typing import Dict, Optional
from urllib.parse import urlencode

from holidayscout.config import settings
from holidayscout.models.offers import HotelOffer, HotelSearchResult, OfferSource
from holidayscout.providers.base import HotelProvider
from holidayscout.utils.date_utils import calculate_nights

BOOKING_SEARCH_BASE = "https://www.booking.com/searchresults.html"

EXPENSIVE_CITIES = frozenset({"Paris", "Amsterdam", "Copenhagen", "Stockholm", "Venice"})
MID_RANGE_CITIES = frozenset({"Barcelona", "Madrid", "Rome", "Berlin", "Vienna", "Prague", "Lisbon"})
BUDGET_CITIES = frozenset({"Krakow", "Budapest", "Riga", "Tallinn", "Vilnius", "Warsaw"})


def get_nightly_rate_range(city: str) -> Dict[str, int]:
    """
    Nightly room rate range in GBP for a city.

    Examples:
        >>> get_nightly_rate_range("Paris")
        {'min': 80, 'max': 150}
    """
    if city in EXPENSIVE_CITIES:
        return {"min": 80, "max": 150}
    if city in MID_RANGE_CITIES:
        return {"min": 50, "max": 100}
    if city in BUDGET_CITIES:
        return {"min": 30, "max": 70}
    return {"min": 40, "max": 90}


def estimate_stay_price(city: str, nights: int) -> int:
    """
    Estimated price of a stay: the mid-point nightly rate times nights.

    Examples:
        >>> estimate_stay_price("Prague", 4)
        300
    """
    rates = get_nightly_rate_range(city)
    return round((rates["min"] + rates["max"]) / 2 * nights)


def build_booking_search_url(city: str, checkin: date, checkout: date, adults: int,
                             affiliate_id: Optional[str] = None) -> str:
    """Build a Booking.com search URL sorted by price, with affiliate tracking."""
    params = urlencode({
        "ss": city,
        "checkin": checkin.isoformat(),
        "checkout": checkout.isoformat(),
        "group_adults": str(adults),
        "no_rooms": "1",
        "group_children": "0",
        "sb_travel_purpose": "leisure",
        "aid": affiliate_id if affiliate_id is not None else settings.booking_affiliate_id,
        "order": "price",
    })
    return f"{BOOKING_SEARCH_BASE}?{params}"


class HotelEstimateProvider(HotelProvider):
    """Estimated hotel stays based on city price tiers."""

    PROVIDER_NAME = "hotel_estimate"

    async def search(
        self,
        city: str,
        checkin: date,
        checkout: date,
        adults: int,
    ) -> Optional[HotelSearchResult]:
        nights = calculate_nights(checkin, checkout)
        if nights < 1:
            return None

        search_url = build_booking_search_url(city, checkin, checkout, adults)
        hotel = HotelOffer(
            id=f"est-{city.lower().replace(' ', '-')}",
            name=f"Recommended hotel in {city}",
            price=estimate_stay_price(city, nights),
            booking_link=search_url,
            source=OfferSource.ESTIMATE,
        )
        return HotelSearchResult(hotels=[hotel], search_url=search_url)
