"""
Curated destination list and mood categories.

All destinations are reachable from London with budget airlines; a subset
is also reachable by rail. Coordinates are used for map display.
"""

import logging
from typing import Dict, FrozenSet, List, Optional

from holidayscout.exceptions import DestinationNotFoundError
from holidayscout.models.destination import Destination
from holidayscout.models.search import Mood

logger = logging.getLogger(__name__)

DESTINATIONS: tuple[Destination, ...] = (
    # Spain
    Destination(city="Barcelona", country="Spain", iata_code="BCN", lat=41.3851, lng=2.1734),
    Destination(city="Madrid", country="Spain", iata_code="MAD", lat=40.4168, lng=-3.7038),
    Destination(city="Malaga", country="Spain", iata_code="AGP", lat=36.7213, lng=-4.4214),
    Destination(city="Alicante", country="Spain", iata_code="ALC", lat=38.2822, lng=-0.5582),
    Destination(city="Palma", country="Spain", iata_code="PMI", lat=39.5517, lng=2.7388),
    Destination(city="Tenerife", country="Spain", iata_code="TFS", lat=28.0445, lng=-16.5725),
    # Portugal
    Destination(city="Lisbon", country="Portugal", iata_code="LIS", lat=38.7746, lng=-9.1349),
    Destination(city="Porto", country="Portugal", iata_code="OPO", lat=41.2370, lng=-8.6700),
    Destination(city="Faro", country="Portugal", iata_code="FAO", lat=37.0146, lng=-7.9656),
    # Italy
    Destination(city="Rome", country="Italy", iata_code="FCO", lat=41.9028, lng=12.4964),
    Destination(city="Milan", country="Italy", iata_code="MXP", lat=45.4642, lng=9.1900),
    Destination(city="Venice", country="Italy", iata_code="VCE", lat=45.4408, lng=12.3155),
    Destination(city="Naples", country="Italy", iata_code="NAP", lat=40.8518, lng=14.2681),
    # France
    Destination(city="Paris", country="France", iata_code="CDG", lat=48.8566, lng=2.3522),
    Destination(city="Nice", country="France", iata_code="NCE", lat=43.7102, lng=7.2620),
    Destination(city="Lyon", country="France", iata_code="LYS", lat=45.7640, lng=4.8357),
    # Germany
    Destination(city="Berlin", country="Germany", iata_code="BER", lat=52.5200, lng=13.4050),
    Destination(city="Munich", country="Germany", iata_code="MUC", lat=48.1351, lng=11.5820),
    # Benelux
    Destination(city="Amsterdam", country="Netherlands", iata_code="AMS", lat=52.3676, lng=4.9041),
    Destination(city="Brussels", country="Belgium", iata_code="BRU", lat=50.8503, lng=4.3517),
    # Central and Eastern Europe
    Destination(city="Prague", country="Czech Republic", iata_code="PRG", lat=50.0755, lng=14.4378),
    Destination(city="Budapest", country="Hungary", iata_code="BUD", lat=47.4979, lng=19.0402),
    Destination(city="Krakow", country="Poland", iata_code="KRK", lat=50.0647, lng=19.9450),
    Destination(city="Warsaw", country="Poland", iata_code="WAW", lat=52.2297, lng=21.0122),
    Destination(city="Vienna", country="Austria", iata_code="VIE", lat=48.2082, lng=16.3738),
    # Nordic
    Destination(city="Copenhagen", country="Denmark", iata_code="CPH", lat=55.6761, lng=12.5683),
    Destination(city="Stockholm", country="Sweden", iata_code="ARN", lat=59.3293, lng=18.0686),
    # Balkans and Mediterranean
    Destination(city="Dubrovnik", country="Croatia", iata_code="DBV", lat=42.6507, lng=18.0944),
    Destination(city="Split", country="Croatia", iata_code="SPU", lat=43.5081, lng=16.4402),
    Destination(city="Athens", country="Greece", iata_code="ATH", lat=37.9838, lng=23.7275),
    Destination(city="Thessaloniki", country="Greece", iata_code="SKG", lat=40.6401, lng=22.9444),
    # Baltic
    Destination(city="Riga", country="Latvia", iata_code="RIX", lat=56.9496, lng=24.1052),
    Destination(city="Tallinn", country="Estonia", iata_code="TLL", lat=59.4370, lng=24.7536),
    Destination(city="Vilnius", country="Lithuania", iata_code="VNO", lat=54.6872, lng=25.2797),
)

MOOD_CITIES: Dict[Mood, FrozenSet[str]] = {
    Mood.SUN: frozenset({
        "Barcelona", "Malaga", "Alicante", "Palma", "Tenerife",
        "Lisbon", "Faro", "Nice", "Rome", "Naples",
        "Dubrovnik", "Split", "Athens",
    }),
    Mood.CITY: frozenset({
        "Paris", "Amsterdam", "Berlin", "Prague", "Budapest",
        "Vienna", "Copenhagen", "Stockholm", "Krakow", "Warsaw",
        "Riga", "Tallinn", "Brussels", "Milan",
    }),
    Mood.ROMANTIC: frozenset({
        "Paris", "Venice", "Rome", "Prague", "Vienna", "Dubrovnik", "Lisbon",
    }),
    Mood.ADVENTURE: frozenset({
        "Tenerife", "Split", "Krakow", "Tallinn", "Riga", "Porto", "Naples",
    }),
    Mood.CHILL: frozenset({
        "Palma", "Faro", "Malaga", "Alicante", "Thessaloniki", "Nice", "Copenhagen",
    }),
}

_BY_IATA: Dict[str, Destination] = {d.iata_code: d for d in DESTINATIONS}


def list_destinations(mood: Optional[Mood] = None, relax_mood: bool = False) -> List[Destination]:
    """
    List destinations, optionally restricted to a mood category.

    Args:
        mood: Mood to filter by. None or Mood.RANDOM returns everything.
        relax_mood: Ignore the mood and return the full list

    Returns:
        Destinations in reference-table order
    """
    if mood is None or mood == Mood.RANDOM or relax_mood:
        return list(DESTINATIONS)

    cities = MOOD_CITIES.get(Mood(mood), frozenset())
    filtered = [d for d in DESTINATIONS if d.city in cities]
    logger.debug(f"Mood '{mood.value}' keeps {len(filtered)}/{len(DESTINATIONS)} destinations")
    return filtered


def get_destination(iata_code: str) -> Destination:
    """
    Look up a destination by IATA code.

    Raises:
        DestinationNotFoundError: If the code is not in the reference table
    """
    try:
        return _BY_IATA[iata_code.strip().upper()]
    except KeyError:
        raise DestinationNotFoundError(iata_code) from None
