"""
Pydantic schemas for API request/response models.
"""

from holidayscout.api.schemas.package import (
    PackageDetailResponse,
    PackageSearchParams,
    PackageSearchResponse,
)

__all__ = [
    "PackageDetailResponse",
    "PackageSearchParams",
    "PackageSearchResponse",
]
