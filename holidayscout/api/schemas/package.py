"""
Pydantic schemas for package API endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from holidayscout.models.package import Package, SearchStats
from holidayscout.models.search import Mood, TransportPreference

DISCLAIMER = (
    "Transport and hotel prices are estimates unless marked live. "
    "All prices subject to availability at time of booking."
)


class PackageSearchParams(BaseModel):
    """Echo of the parameters a search ran with."""

    origin: str
    max_budget: int
    nights: int
    adults: int
    mood: Mood
    transport_type: TransportPreference


class PackageSearchResponse(BaseModel):
    """Ranked packages for a search."""

    success: bool = True
    count: int
    data: List[Package]
    search_params: PackageSearchParams
    exact_match: bool = Field(description="False when over-budget packages were added")
    cancelled: bool = False
    stats: SearchStats
    disclaimer: str = DISCLAIMER


class PackageDetailResponse(BaseModel):
    """Package for a single destination."""

    success: bool = True
    data: Optional[Package] = None
    message: Optional[str] = None
