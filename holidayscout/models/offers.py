"""
Priced offers returned by transport and hotel providers.

Both offer types are tagged: TransportOffer by its transport type and
HotelOffer by where the price came from. Callers branch on the tag.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TransportType(str, Enum):
    """Kind of transport an offer is for."""

    FLIGHT = "flight"
    TRAIN = "train"


class OfferSource(str, Enum):
    """Origin of a hotel price."""

    LIVE = "live"
    ESTIMATE = "estimate"


class TransportOffer(BaseModel):
    """Return journey for all travellers, priced in whole currency units."""

    model_config = ConfigDict(frozen=True)

    type: TransportType
    price: int = Field(ge=0, description="Total return price for all adults")
    currency: str = "GBP"
    outbound_date: date
    return_date: date
    departure_timestamp: Optional[datetime] = None
    arrival_timestamp: Optional[datetime] = None
    stops: int = Field(default=0, ge=0)
    carriers: List[str] = Field(default_factory=list)
    duration: Optional[str] = None
    booking_link: Optional[str] = None
    is_real_price: bool = False


class HotelOffer(BaseModel):
    """Hotel stay for the whole trip, priced in whole currency units."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: int = Field(ge=0, description="Total price for the stay")
    rating: Optional[float] = None
    image: Optional[str] = None
    booking_link: Optional[str] = None
    source: OfferSource = OfferSource.ESTIMATE


class HotelSearchResult(BaseModel):
    """Hotels found for one city and date range."""

    model_config = ConfigDict(frozen=True)

    hotels: List[HotelOffer] = Field(default_factory=list)
    search_url: Optional[str] = None
