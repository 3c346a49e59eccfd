"""
Date utilities for package searches.

Generates the candidate travel-date windows tried for every destination.
Samples start three weeks out and step every two weeks for six months,
moving weekend departures to the following Tuesday where fares are
usually cheaper.
"""

from datetime import date, timedelta
from typing import List

from holidayscout.exceptions import InvalidSearchRequestError
from holidayscout.models.search import DateCandidate

FIRST_SAMPLE_WEEKS = 3
LAST_SAMPLE_WEEKS = 24
SAMPLE_STEP_WEEKS = 2

# Days to add to reach the following Tuesday
_WEEKEND_SHIFT = {5: 3, 6: 2}  # Saturday=5, Sunday=6


def generate_date_candidates(nights: int, today: date | None = None) -> List[DateCandidate]:
    """
    Generate ordered outbound/return date pairs for a stay length.

    Args:
        nights: Length of stay in nights (must be >= 1)
        today: Reference date. If None, uses date.today().

    Returns:
        Date candidates ordered by departure date, earliest first

    Raises:
        InvalidSearchRequestError: If nights is less than 1

    Examples:
        >>> candidates = generate_date_candidates(4, today=date(2025, 1, 1))
        >>> candidates[0].outbound_date
        datetime.date(2025, 1, 22)
        >>> len(candidates)
        11
    """
    if nights < 1:
        raise InvalidSearchRequestError("nights", "must be at least 1")

    if today is None:
        today = date.today()

    candidates = []
    for weeks_ahead in range(FIRST_SAMPLE_WEEKS, LAST_SAMPLE_WEEKS + 1, SAMPLE_STEP_WEEKS):
        outbound = shift_to_midweek(today + timedelta(weeks=weeks_ahead))
        candidates.append(
            DateCandidate(
                outbound_date=outbound,
                return_date=outbound + timedelta(days=nights),
                nights=nights,
            )
        )

    return candidates


def shift_to_midweek(check_date: date) -> date:
    """
    Move a Saturday or Sunday forward to the next Tuesday.

    Examples:
        >>> shift_to_midweek(date(2025, 1, 4))  # Saturday
        datetime.date(2025, 1, 7)
        >>> shift_to_midweek(date(2025, 1, 8))  # Wednesday
        datetime.date(2025, 1, 8)
    """
    return check_date + timedelta(days=_WEEKEND_SHIFT.get(check_date.weekday(), 0))


def calculate_nights(departure: date, return_date: date) -> int:
    """
    Calculate the number of nights between departure and return dates.

    Returns:
        Number of nights (0 if return is same day or before departure)

    Examples:
        >>> calculate_nights(date(2025, 8, 1), date(2025, 8, 8))
        7
        >>> calculate_nights(date(2025, 8, 5), date(2025, 8, 1))
        0
    """
    if departure is None or return_date is None:
        return 0

    if return_date <= departure:
        return 0

    return (return_date - departure).days
