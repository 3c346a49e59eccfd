"""
Destination reference record.
"""

from pydantic import BaseModel, ConfigDict, Field


class Destination(BaseModel):
    """A city that packages can be built for."""

    model_config = ConfigDict(frozen=True)

    city: str
    country: str
    iata_code: str = Field(min_length=3, max_length=3)
    lat: float
    lng: float

    def __str__(self) -> str:
        return f"{self.city} ({self.iata_code})"
