"""
Ranking and fallback for assembled packages.

Within-budget packages always come first. When there are fewer of them
than the configured minimum, the cheapest over-budget packages top the
list up, and the result is flagged as not an exact match so callers can
say so.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from holidayscout.models.package import Package

logger = logging.getLogger(__name__)


def _by_price(package: Package) -> Tuple[int, str]:
    return package.total_price, package.destination.city


def reconcile_results(
    packages: Sequence[Optional[Package]],
    max_budget: int,
    min_results: int,
) -> Tuple[List[Package], bool]:
    """
    Merge within-budget and over-budget packages into the final ranking.

    Args:
        packages: One entry per destination; None entries are dropped
        max_budget: Requested budget; 0 means unbounded
        min_results: Number of packages below which over-budget ones are added

    Returns:
        Tuple of (ordered packages, exact_match)

    Examples:
        >>> ranked, exact = reconcile_results([pkg_420, pkg_650, None, pkg_480], 500, 6)
        >>> [p.total_price for p in ranked], exact
        ([420, 480, 650], False)
    """
    found = [p for p in packages if p is not None]
    within_budget = sorted((p for p in found if not p.over_budget), key=_by_price)
    over_budget = sorted((p for p in found if p.over_budget), key=_by_price)

    if within_budget and (len(within_budget) >= min_results or max_budget <= 0):
        return within_budget, True

    if not within_budget:
        if over_budget:
            logger.info(
                f"No packages within budget; falling back to "
                f"{min(min_results, len(over_budget))} over-budget packages"
            )
        return over_budget[:min_results], False

    top_up = over_budget[: min_results - len(within_budget)]
    logger.info(
        f"Only {len(within_budget)} packages within budget; "
        f"adding {len(top_up)} over-budget packages"
    )
    return within_budget + top_up, False
