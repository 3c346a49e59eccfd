"""
Search request value objects.
"""

from datetime import date
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from holidayscout.exceptions import InvalidSearchRequestError


# City names and London airports accepted as origins
ORIGIN_ALIASES = {
    "LONDON": "LON",
    "LHR": "LON",
    "LGW": "LON",
    "STN": "LON",
    "LTN": "LON",
    "LCY": "LON",
    "SEN": "LON",
    "MANCHESTER": "MAN",
    "BIRMINGHAM": "BHX",
    "EDINBURGH": "EDI",
    "DUBLIN": "DUB",
}


def normalize_origin(value: str) -> str:
    """
    Map a city name or airport code to the origin code used in searches.

    Examples:
        >>> normalize_origin("lhr")
        'LON'
        >>> normalize_origin("Manchester")
        'MAN'
    """
    value = value.strip().upper()
    return ORIGIN_ALIASES.get(value, value)


class Mood(str, Enum):
    """Curated destination category. RANDOM means no category filter."""

    SUN = "sun"
    CITY = "city"
    ROMANTIC = "romantic"
    ADVENTURE = "adventure"
    CHILL = "chill"
    RANDOM = "random"


class TransportPreference(str, Enum):
    """Which transport providers a search may use."""

    FLIGHT = "flight"
    TRAIN = "train"
    ANY = "any"


class DateCandidate(BaseModel):
    """One outbound/return date pair to try."""

    model_config = ConfigDict(frozen=True)

    outbound_date: date
    return_date: date
    nights: int = Field(ge=1)

    @model_validator(mode="after")
    def check_span(self) -> "DateCandidate":
        if (self.return_date - self.outbound_date).days != self.nights:
            raise ValueError("return_date must be outbound_date + nights")
        return self


class SearchRequest(BaseModel):
    """
    Parameters of one package search.

    A max_budget of 0 means the budget is unbounded. When fixed_dates is
    given it replaces the generated date samples entirely.
    """

    model_config = ConfigDict(frozen=True)

    origin: str = "LON"
    nights: int = Field(default=4, ge=1, le=30)
    adults: int = Field(default=2, ge=1, le=9)
    max_budget: int = Field(default=500, ge=0)
    mood: Mood = Mood.RANDOM
    transport_type: TransportPreference = TransportPreference.ANY
    relax_budget: bool = False
    relax_mood: bool = False
    fixed_dates: Optional[List[DateCandidate]] = None
    debug: bool = False

    @field_validator("origin")
    @classmethod
    def validate_origin(cls, v: str) -> str:
        v = normalize_origin(v)
        if len(v) != 3 or not v.isalpha():
            raise ValueError("origin must be a 3-letter IATA code")
        return v

    @model_validator(mode="after")
    def check_fixed_dates(self) -> "SearchRequest":
        if self.fixed_dates is not None and not self.fixed_dates:
            raise ValueError("fixed_dates must not be empty when given")
        return self


def build_search_request(**data: Any) -> SearchRequest:
    """
    Build a SearchRequest, converting validation failures to the domain error.

    Raises:
        InvalidSearchRequestError: If any field is malformed
    """
    try:
        return SearchRequest(**data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "request"
        raise InvalidSearchRequestError(field, first["msg"]) from e
