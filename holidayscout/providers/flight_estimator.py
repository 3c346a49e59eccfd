"""
Flight price estimates from London.

Prices are derived from median market fares per destination with weekday,
seasonal and advance-booking modifiers. The booking link opens the same
search on Google Flights, where live prices can be checked.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional
from urllib.parse import quote, urlencode

from holidayscout.models.offers import TransportOffer, TransportType
from holidayscout.providers.base import TransportProvider, stable_fraction

GOOGLE_FLIGHTS_BASE = "https://www.google.com/travel/flights"

# Return fares per person in GBP from London
FLIGHT_PRICES: Dict[str, Dict] = {
    # Short-haul
    "CDG": {"min": 50, "median": 95, "max": 180, "duration": "1h 15m"},   # Paris
    "AMS": {"min": 55, "median": 100, "max": 190, "duration": "1h 20m"},  # Amsterdam
    "BRU": {"min": 45, "median": 85, "max": 160, "duration": "1h 10m"},   # Brussels
    # Spain
    "BCN": {"min": 35, "median": 75, "max": 160, "duration": "2h 15m"},   # Barcelona
    "MAD": {"min": 40, "median": 85, "max": 175, "duration": "2h 30m"},   # Madrid
    "AGP": {"min": 30, "median": 65, "max": 140, "duration": "2h 50m"},   # Malaga
    "ALC": {"min": 28, "median": 60, "max": 130, "duration": "2h 25m"},   # Alicante
    "PMI": {"min": 35, "median": 70, "max": 150, "duration": "2h 20m"},   # Palma
    # Portugal
    "LIS": {"min": 45, "median": 90, "max": 180, "duration": "2h 40m"},   # Lisbon
    "FAO": {"min": 35, "median": 70, "max": 145, "duration": "2h 50m"},   # Faro
    "OPO": {"min": 40, "median": 80, "max": 160, "duration": "2h 25m"},   # Porto
    # Italy
    "FCO": {"min": 50, "median": 100, "max": 200, "duration": "2h 30m"},  # Rome
    "MXP": {"min": 45, "median": 90, "max": 180, "duration": "1h 55m"},   # Milan
    "VCE": {"min": 55, "median": 110, "max": 210, "duration": "2h 05m"},  # Venice
    "NAP": {"min": 50, "median": 95, "max": 185, "duration": "2h 40m"},   # Naples
    # Germany
    "BER": {"min": 40, "median": 85, "max": 170, "duration": "1h 50m"},   # Berlin
    "MUC": {"min": 50, "median": 95, "max": 185, "duration": "1h 55m"},   # Munich
    # Central Europe
    "PRG": {"min": 35, "median": 75, "max": 155, "duration": "2h 00m"},   # Prague
    "VIE": {"min": 50, "median": 100, "max": 195, "duration": "2h 25m"},  # Vienna
    "BUD": {"min": 35, "median": 70, "max": 145, "duration": "2h 35m"},   # Budapest
    "KRK": {"min": 30, "median": 60, "max": 125, "duration": "2h 30m"},   # Krakow
    "WAW": {"min": 40, "median": 80, "max": 160, "duration": "2h 35m"},   # Warsaw
    # Baltics
    "RIX": {"min": 40, "median": 80, "max": 165, "duration": "2h 45m"},   # Riga
    "TLL": {"min": 45, "median": 90, "max": 175, "duration": "2h 50m"},   # Tallinn
    "VNO": {"min": 40, "median": 85, "max": 170, "duration": "2h 55m"},   # Vilnius
    # Nordic
    "CPH": {"min": 50, "median": 100, "max": 195, "duration": "1h 55m"},  # Copenhagen
    "ARN": {"min": 55, "median": 110, "max": 210, "duration": "2h 30m"},  # Stockholm
    # Croatia / Greece
    "DBV": {"min": 60, "median": 120, "max": 230, "duration": "2h 40m"},  # Dubrovnik
    "SPU": {"min": 55, "median": 110, "max": 210, "duration": "2h 30m"},  # Split
    "ATH": {"min": 65, "median": 130, "max": 250, "duration": "3h 45m"},  # Athens
    # Canaries
    "TFS": {"min": 75, "median": 145, "max": 280, "duration": "4h 20m"},  # Tenerife
    "LPA": {"min": 80, "median": 150, "max": 290, "duration": "4h 15m"},  # Gran Canaria
    "DEFAULT": {"min": 55, "median": 105, "max": 200, "duration": "2h 30m"},
}

ROUTE_AIRLINES: Dict[str, List[str]] = {
    "BCN": ["Vueling", "Ryanair", "British Airways", "easyJet"],
    "MAD": ["Iberia", "British Airways", "Ryanair", "Vueling"],
    "LIS": ["TAP Portugal", "British Airways", "Ryanair", "easyJet"],
    "CDG": ["British Airways", "Air France", "easyJet"],
    "AMS": ["British Airways", "KLM", "easyJet"],
    "BER": ["British Airways", "easyJet", "Ryanair"],
    "FCO": ["British Airways", "Ryanair", "Wizz Air", "easyJet"],
    "PRG": ["British Airways", "Ryanair", "easyJet", "Wizz Air"],
    "BUD": ["Ryanair", "Wizz Air", "British Airways"],
    "KRK": ["Ryanair", "Wizz Air", "easyJet"],
    "DEFAULT": ["British Airways", "Ryanair", "easyJet"],
}

# Weekday modifiers (Monday=0)
_WEEKDAY_MODIFIERS = {1: 0.90, 2: 0.90, 4: 1.15, 5: 1.20, 6: 1.10}

# Seasonal modifiers by month number
_MONTH_MODIFIERS = {
    1: 1.15, 2: 0.85, 3: 0.85, 4: 1.10, 5: 1.10,
    7: 1.35, 8: 1.35, 11: 0.90, 12: 1.15,
}

_DURATION_RE = re.compile(r"(\d+)h\s*(\d+)?m?")


def parse_duration(duration: str) -> timedelta:
    """
    Parse a duration such as '2h 15m'.

    Examples:
        >>> parse_duration("2h 15m")
        datetime.timedelta(seconds=8100)
    """
    match = _DURATION_RE.match(duration or "")
    if not match:
        return timedelta(hours=2, minutes=30)
    return timedelta(hours=int(match.group(1)), minutes=int(match.group(2) or 0))


def advance_booking_modifier(days_ahead: int) -> float:
    """Price modifier for how far ahead the trip is booked."""
    if days_ahead > 90:
        return 0.80
    if days_ahead > 60:
        return 0.85
    if days_ahead > 30:
        return 0.95
    if days_ahead > 14:
        return 1.05
    if days_ahead > 7:
        return 1.20
    return 1.40  # Last minute


def build_google_flights_url(
    origin: str,
    destination: str,
    outbound_date: Optional[date] = None,
    return_date: Optional[date] = None,
) -> str:
    """Build a Google Flights search URL for the route."""
    query = f"Flights from {origin} to {destination}"
    if outbound_date:
        query += f" on {outbound_date.isoformat()}"
    if return_date:
        query += f" through {return_date.isoformat()}"

    params = urlencode({"hl": "en-GB", "gl": "uk", "curr": "GBP"})
    return f"{GOOGLE_FLIGHTS_BASE}?q={quote(query)}&{params}"


def estimate_flight_price_per_person(
    destination: str,
    outbound_date: date,
    return_date: date,
    today: date,
) -> int:
    """
    Estimate the return fare per person.

    The base fare sits between 40% and 70% of the way from the minimum to
    the median fare, chosen by a stable hash of the route and dates, then
    weekday, season and booking-window modifiers are applied. The result is
    clamped to the route's [min, max].
    """
    price_data = FLIGHT_PRICES.get(destination, FLIGHT_PRICES["DEFAULT"])

    modifier = _WEEKDAY_MODIFIERS.get(outbound_date.weekday(), 1.0)
    modifier *= _MONTH_MODIFIERS.get(outbound_date.month, 1.0)
    modifier *= advance_booking_modifier((outbound_date - today).days)

    jitter = stable_fraction(destination, outbound_date, return_date)
    base_price = price_data["min"] + (price_data["median"] - price_data["min"]) * (0.4 + jitter * 0.3)
    per_person = round(base_price * modifier)

    return max(price_data["min"], min(price_data["max"], per_person))


class FlightEstimateProvider(TransportProvider):
    """
    Estimated flight prices based on market data.

    Examples:
        >>> provider = FlightEstimateProvider()
        >>> offer = await provider.search("LON", "BCN", date(2025, 3, 4), date(2025, 3, 8), 2)
        >>> offer.is_real_price
        False
    """

    PROVIDER_NAME = "flight_estimate"
    transport_type = TransportType.FLIGHT

    def __init__(self, today: Callable[[], date] = date.today):
        super().__init__()
        self.today = today

    async def search(
        self,
        origin: str,
        destination: str,
        outbound_date: date,
        return_date: date,
        adults: int,
    ) -> Optional[TransportOffer]:
        destination = destination.upper()
        price_data = FLIGHT_PRICES.get(destination, FLIGHT_PRICES["DEFAULT"])
        airlines = ROUTE_AIRLINES.get(destination, ROUTE_AIRLINES["DEFAULT"])

        per_person = estimate_flight_price_per_person(
            destination, outbound_date, return_date, self.today()
        )

        departure = datetime.combine(outbound_date, time(8, 0))

        return TransportOffer(
            type=TransportType.FLIGHT,
            price=per_person * adults,
            currency="GBP",
            outbound_date=outbound_date,
            return_date=return_date,
            departure_timestamp=departure,
            arrival_timestamp=departure + parse_duration(price_data["duration"]),
            stops=0,
            carriers=airlines[:3],
            duration=price_data["duration"],
            booking_link=build_google_flights_url(origin, destination, outbound_date, return_date),
            is_real_price=False,
        )
