"""
Rail journey estimates from London.

Covers Eurostar and connecting European rail services. Only journeys that
start in London are priced; any other origin, or a city without a rail
connection, yields no offer. Booking links go to Klook.
"""

from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Optional
from urllib.parse import urlencode

from holidayscout.config import settings
from holidayscout.models.offers import TransportOffer, TransportType
from holidayscout.providers.base import TransportProvider, stable_fraction

TRAIN_STATIONS: Dict[str, Dict] = {
    "London": {"code": "STP", "name": "London St Pancras", "train_types": ["eurostar"]},
    "Paris": {"code": "PLY", "name": "Paris Gare du Nord", "train_types": ["eurostar", "tgv"]},
    "Lyon": {"code": "LPD", "name": "Lyon Part-Dieu", "train_types": ["tgv"]},
    "Nice": {"code": "NCE", "name": "Nice Ville", "train_types": ["tgv"]},
    "Brussels": {"code": "BRU", "name": "Brussels Midi", "train_types": ["eurostar", "thalys"]},
    "Amsterdam": {"code": "AMS", "name": "Amsterdam Centraal", "train_types": ["eurostar", "thalys", "ice"]},
    "Berlin": {"code": "BER", "name": "Berlin Hauptbahnhof", "train_types": ["ice", "ec"]},
    "Munich": {"code": "MUC", "name": "München Hauptbahnhof", "train_types": ["ice", "ec"]},
    "Cologne": {"code": "CGN", "name": "Köln Hauptbahnhof", "train_types": ["ice", "thalys"]},
    "Barcelona": {"code": "BCN", "name": "Barcelona Sants", "train_types": ["ave", "renfe"]},
    "Madrid": {"code": "MAD", "name": "Madrid Puerta de Atocha", "train_types": ["ave", "renfe"]},
    "Rome": {"code": "ROM", "name": "Roma Termini", "train_types": ["frecciarossa", "italo"]},
    "Milan": {"code": "MIL", "name": "Milano Centrale", "train_types": ["frecciarossa", "italo", "tgv"]},
    "Venice": {"code": "VCE", "name": "Venezia Santa Lucia", "train_types": ["frecciarossa", "italo"]},
    "Naples": {"code": "NAP", "name": "Napoli Centrale", "train_types": ["frecciarossa", "italo"]},
    "Vienna": {"code": "VIE", "name": "Wien Hauptbahnhof", "train_types": ["railjet", "ice"]},
    "Prague": {"code": "PRG", "name": "Praha hlavní nádraží", "train_types": ["railjet", "ec"]},
    "Budapest": {"code": "BUD", "name": "Budapest Keleti", "train_types": ["railjet", "ec"]},
}

# Journey from London: duration in hours and number of changes
JOURNEY_TIMES: Dict[str, Dict] = {
    "Paris": {"duration": 2.25, "changes": 0},
    "Brussels": {"duration": 2.0, "changes": 0},
    "Amsterdam": {"duration": 4.0, "changes": 0},
    "Lyon": {"duration": 5.5, "changes": 1},
    "Nice": {"duration": 8.0, "changes": 1},
    "Cologne": {"duration": 5.0, "changes": 1},
    "Berlin": {"duration": 10.0, "changes": 2},
    "Munich": {"duration": 9.0, "changes": 2},
    "Milan": {"duration": 8.0, "changes": 1},
    "Rome": {"duration": 12.0, "changes": 2},
    "Venice": {"duration": 11.0, "changes": 2},
    "Barcelona": {"duration": 10.0, "changes": 2},
    "Vienna": {"duration": 14.0, "changes": 2},
    "Prague": {"duration": 14.0, "changes": 2},
    "Budapest": {"duration": 18.0, "changes": 3},
}

# Return fares per person in GBP
BASE_TRAIN_PRICES: Dict[str, Dict] = {
    "Paris": {"min": 78, "typical": 140, "max": 300},
    "Brussels": {"min": 70, "typical": 120, "max": 260},
    "Amsterdam": {"min": 90, "typical": 160, "max": 320},
    "Lyon": {"min": 110, "typical": 200, "max": 360},
    "Nice": {"min": 140, "typical": 260, "max": 440},
    "Cologne": {"min": 100, "typical": 180, "max": 340},
    "Berlin": {"min": 160, "typical": 300, "max": 560},
    "Munich": {"min": 150, "typical": 280, "max": 520},
    "Milan": {"min": 140, "typical": 260, "max": 480},
    "Rome": {"min": 180, "typical": 340, "max": 600},
    "Venice": {"min": 170, "typical": 320, "max": 560},
    "Barcelona": {"min": 160, "typical": 300, "max": 560},
    "Vienna": {"min": 200, "typical": 360, "max": 640},
    "Prague": {"min": 190, "typical": 340, "max": 600},
    "Budapest": {"min": 220, "typical": 400, "max": 700},
}

# City and airport codes mapped to the city names used above
CITY_ALIASES: Dict[str, str] = {
    "LON": "London", "STP": "London", "LHR": "London", "LGW": "London",
    "STN": "London", "LTN": "London", "SEN": "London",
    "PAR": "Paris", "CDG": "Paris", "ORY": "Paris",
    "BRU": "Brussels", "AMS": "Amsterdam",
    "BCN": "Barcelona", "MAD": "Madrid",
    "ROM": "Rome", "FCO": "Rome", "MIL": "Milan", "MXP": "Milan",
    "VCE": "Venice", "NAP": "Naples",
    "VIE": "Vienna", "PRG": "Prague", "BUD": "Budapest",
    "BER": "Berlin", "MUC": "Munich", "CGN": "Cologne",
    "NCE": "Nice", "LYS": "Lyon",
}


def normalize_city(value: str) -> str:
    """
    Map an IATA code or city name to a canonical city name.

    Examples:
        >>> normalize_city("CDG")
        'Paris'
        >>> normalize_city("lisbon")
        'Lisbon'
    """
    value = (value or "").strip()
    return CITY_ALIASES.get(value.upper(), value.capitalize())


def is_train_accessible(city: str) -> bool:
    """Check whether a city can be reached by rail from London."""
    return city in TRAIN_STATIONS and city in JOURNEY_TIMES and city in BASE_TRAIN_PRICES


def format_journey_duration(hours: float) -> str:
    """
    Examples:
        >>> format_journey_duration(2.25)
        '2h 15m'
    """
    return f"{int(hours)}h {round((hours % 1) * 60)}m"


def estimate_train_price_per_person(city: str, outbound_date: date, today: date) -> Optional[int]:
    """Estimate the return rail fare per person, or None for unknown cities."""
    price_range = BASE_TRAIN_PRICES.get(city)
    if price_range is None:
        return None

    modifier = 1.0

    # Friday to Sunday travel is more expensive
    if outbound_date.weekday() in (4, 5, 6):
        modifier *= 1.25

    # Peak summer, June to September
    if 6 <= outbound_date.month <= 9:
        modifier *= 1.2

    days_ahead = (outbound_date - today).days
    if days_ahead > 60:
        modifier *= 0.85
    elif days_ahead > 30:
        modifier *= 0.95
    elif days_ahead < 7:
        modifier *= 1.35

    jitter = stable_fraction("train", city, outbound_date)
    base_price = price_range["min"] + (price_range["typical"] - price_range["min"]) * jitter
    return round(base_price * modifier)


def build_klook_train_url(origin_city: str, destination_city: str,
                          outbound_date: date, return_date: Optional[date]) -> str:
    """Build the Klook affiliate rail search URL."""
    params = urlencode({
        "from": origin_city.lower(),
        "to": destination_city.lower(),
        "outbound": outbound_date.isoformat(),
        "return": return_date.isoformat() if return_date else "",
    })
    return f"{settings.klook_affiliate_url}?{params}"


class TrainEstimateProvider(TransportProvider):
    """Estimated rail prices for journeys from London."""

    PROVIDER_NAME = "train_estimate"
    transport_type = TransportType.TRAIN

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
        origin_city = normalize_city(origin)
        destination_city = normalize_city(destination)

        if origin_city != "London" or not is_train_accessible(destination_city):
            return None

        per_person = estimate_train_price_per_person(destination_city, outbound_date, self.today())
        if per_person is None:
            return None

        journey = JOURNEY_TIMES[destination_city]
        station = TRAIN_STATIONS[destination_city]
        departure = datetime.combine(outbound_date, time(7, 0))

        return TransportOffer(
            type=TransportType.TRAIN,
            price=per_person * adults,
            currency="GBP",
            outbound_date=outbound_date,
            return_date=return_date,
            departure_timestamp=departure,
            arrival_timestamp=departure + timedelta(hours=journey["duration"]),
            stops=journey["changes"],
            carriers=[t.capitalize() for t in station["train_types"]],
            duration=format_journey_duration(journey["duration"]),
            booking_link=build_klook_train_url(origin_city, destination_city, outbound_date, return_date),
            is_real_price=False,
        )
