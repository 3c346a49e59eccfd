"""
Domain models for HolidayScout.

Value objects are immutable pydantic models. SearchStats is the only
mutable model and is owned by a single search run.
"""

from holidayscout.models.destination import Destination
from holidayscout.models.offers import (
    HotelOffer,
    HotelSearchResult,
    OfferSource,
    TransportOffer,
    TransportType,
)
from holidayscout.models.package import Package, SearchResult, SearchStats
from holidayscout.models.search import (
    DateCandidate,
    Mood,
    SearchRequest,
    TransportPreference,
    build_search_request,
    normalize_origin,
)

__all__ = [
    "DateCandidate",
    "Destination",
    "HotelOffer",
    "HotelSearchResult",
    "Mood",
    "OfferSource",
    "Package",
    "SearchRequest",
    "SearchResult",
    "SearchStats",
    "TransportOffer",
    "TransportPreference",
    "TransportType",
    "build_search_request",
    "normalize_origin",
]
