"""
API routes for holiday packages.
Returns JSON responses for programmatic access.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Path, Query, Request, status

from holidayscout.api.schemas.package import (
    PackageDetailResponse,
    PackageSearchParams,
    PackageSearchResponse,
)
from holidayscout.config import settings
from holidayscout.models.search import Mood, TransportPreference, build_search_request
from holidayscout.orchestration.package_orchestrator import PackageSearchOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


def get_orchestrator(request: Request) -> PackageSearchOrchestrator:
    """Orchestrator created at application startup."""
    return request.app.state.orchestrator


@router.get("/packages/search", response_model=PackageSearchResponse, status_code=status.HTTP_200_OK)
async def search_packages(
    origin: str = Query(settings.default_origin, description="Origin IATA code, airport or city name"),
    max_budget: int = Query(500, alias="maxBudget", description="Maximum total price in GBP (0 = unbounded)"),
    nights: int = Query(4, description="Stay length"),
    adults: int = Query(2, description="Number of adults"),
    mood: Mood = Query(Mood.RANDOM, description="Destination mood"),
    transport_type: TransportPreference = Query(TransportPreference.ANY, alias="transportType"),
    relax_budget: bool = Query(False, alias="relaxBudget"),
    relax_mood: bool = Query(False, alias="relaxMood"),
    session_id: Optional[str] = Header(None, alias="X-Search-Session"),
    orchestrator: PackageSearchOrchestrator = Depends(get_orchestrator),
) -> PackageSearchResponse:
    """
    Search holiday packages.

    A newer search sent with the same X-Search-Session header cancels an
    older one still running; the older response comes back with
    cancelled=true and no packages.
    """
    search_request = build_search_request(
        origin=origin,
        max_budget=max_budget,
        nights=nights,
        adults=adults,
        mood=mood,
        transport_type=transport_type,
        relax_budget=relax_budget,
        relax_mood=relax_mood,
    )

    logger.info(
        f"Package search: origin={search_request.origin}, budget={max_budget}, "
        f"nights={nights}, mood={mood.value}"
    )

    result = await orchestrator.search(search_request, session_key=session_id)

    return PackageSearchResponse(
        count=len(result.packages),
        data=result.packages,
        search_params=PackageSearchParams(
            origin=search_request.origin,
            max_budget=search_request.max_budget,
            nights=search_request.nights,
            adults=search_request.adults,
            mood=search_request.mood,
            transport_type=search_request.transport_type,
        ),
        exact_match=result.exact_match,
        cancelled=result.cancelled,
        stats=result.stats,
    )


@router.get("/packages/{iata}", response_model=PackageDetailResponse, status_code=status.HTTP_200_OK)
async def get_package(
    iata: str = Path(..., description="Destination IATA code"),
    origin: str = Query(settings.default_origin),
    nights: int = Query(4),
    adults: int = Query(2),
    max_budget: int = Query(500, alias="maxBudget"),
    orchestrator: PackageSearchOrchestrator = Depends(get_orchestrator),
) -> PackageDetailResponse:
    """
    Retrieve the best package for a single destination.

    Unknown destinations return 404; a known destination without transport
    returns success=false with a message.
    """
    search_request = build_search_request(
        origin=origin, nights=nights, adults=adults, max_budget=max_budget
    )
    package = await orchestrator.find_package(iata, search_request)

    if package is None:
        return PackageDetailResponse(
            success=False,
            message=f"No transport found to {iata.upper()} for the requested dates",
        )

    return PackageDetailResponse(data=package)
