"""
Holiday packages and search results.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from holidayscout.models.destination import Destination
from holidayscout.models.offers import HotelOffer, TransportOffer


class Package(BaseModel):
    """Transport plus hotel for one destination."""

    model_config = ConfigDict(frozen=True)

    destination: Destination
    transport: TransportOffer
    hotel: HotelOffer
    total_price: int
    over_budget: bool = False
    nights: int
    adults: int
    currency: str = "GBP"

    @model_validator(mode="after")
    def check_total(self) -> "Package":
        if self.total_price != self.transport.price + self.hotel.price:
            raise ValueError("total_price must equal transport.price + hotel.price")
        return self


class SearchStats(BaseModel):
    """Counters for one search run."""

    destinations_scanned: int = 0
    transport_found: int = 0
    over_budget_count: int = 0
    errors_count: int = 0
    timeouts_count: int = 0
    cache_hits: int = 0
    elapsed_seconds: float = 0.0


class SearchResult(BaseModel):
    """Ranked packages plus how well they matched the request."""

    packages: List[Package] = Field(default_factory=list)
    exact_match: bool = False
    stats: SearchStats = Field(default_factory=SearchStats)
    cancelled: bool = False
