"""
Community safety summaries built from raw street reviews.

Layer 1: Aggregation
  - One pass over the review snapshot
  - Buckets per neighborhood name and per street name: (total, count, issues)
  - A missing score counts as 0 and still increments the count

Layer 2: Ranking
  - Neighborhoods: highest mean first (top 3 by default)
  - Streets: lowest mean first (top 5 by default), with the first
    recorded comment as the representative issue
  - No buckets at all -> one placeholder row instead of an empty list
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from .models import (
    CommunityResponse,
    CommunityStats,
    GroupTotals,
    NeighborhoodSummary,
    RawReview,
    StreetHazardSummary,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_NEIGHBORHOODS = 3
DEFAULT_TOP_STREETS = 5

NO_DATA_NAME = "no data available"
NO_ISSUE_TEXT = "no issue reported"


def _has_name(name: Optional[str]) -> bool:
    return bool(name and name.strip())


def _round1(value: float) -> float:
    """Round half away from zero to one decimal (4.25 -> 4.3, not 4.2)."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _mean(totals: GroupTotals) -> float:
    return _round1(totals.total / totals.count)


def aggregate_reviews(
    reviews: Iterable[RawReview],
) -> Tuple[Dict[str, GroupTotals], Dict[str, GroupTotals]]:
    """
    Group reviews by neighborhood and by street in a single pass.

    Returns fresh (neighborhood_totals, street_totals) dicts keyed by name, in
    first-encounter order. A review without a name on one dimension is left
    out of that dimension only.
    """
    neighborhoods: Dict[str, GroupTotals] = {}
    streets: Dict[str, GroupTotals] = {}

    for review in reviews:
        score = review.score if review.score is not None else 0.0

        if _has_name(review.neighborhood_name):
            bucket = neighborhoods.setdefault(review.neighborhood_name, GroupTotals())
            bucket.total += score
            bucket.count += 1

        if _has_name(review.street_name):
            bucket = streets.setdefault(review.street_name, GroupTotals())
            bucket.total += score
            bucket.count += 1
            if review.comment:
                bucket.issues.append(review.comment)

    return neighborhoods, streets


def rank_neighborhoods(
    totals: Dict[str, GroupTotals],
    n: int = DEFAULT_TOP_NEIGHBORHOODS,
) -> List[NeighborhoodSummary]:
    """Safest neighborhoods first. Ties keep first-encounter order."""
    if not totals:
        return [NeighborhoodSummary(name=NO_DATA_NAME, reviews=0, rating=0.0)]

    summaries = [
        NeighborhoodSummary(name=name, reviews=bucket.count, rating=_mean(bucket))
        for name, bucket in totals.items()
    ]
    summaries.sort(key=lambda s: s.rating, reverse=True)
    return summaries[:n]


def rank_street_hazards(
    totals: Dict[str, GroupTotals],
    n: int = DEFAULT_TOP_STREETS,
) -> List[StreetHazardSummary]:
    """Worst-rated streets first. Ties keep first-encounter order."""
    if not totals:
        return [StreetHazardSummary(name=NO_DATA_NAME, issue=NO_ISSUE_TEXT, rating=0.0)]

    summaries = [
        StreetHazardSummary(
            name=name,
            issue=bucket.issues[0] if bucket.issues else NO_ISSUE_TEXT,
            rating=_mean(bucket),
        )
        for name, bucket in totals.items()
    ]
    summaries.sort(key=lambda s: s.rating)
    return summaries[:n]


def summarize_community(
    reviews: List[RawReview],
    active_users: int,
    top_neighborhoods: int = DEFAULT_TOP_NEIGHBORHOODS,
    top_streets: int = DEFAULT_TOP_STREETS,
    total_reviews: Optional[int] = None,
) -> CommunityResponse:
    """
    Aggregate and rank one review snapshot.

    `total_reviews` is the size of the raw collection when it differs from
    `reviews` (records skipped as malformed still count as submitted).
    """
    if total_reviews is None:
        total_reviews = len(reviews)
    neighborhood_totals, street_totals = aggregate_reviews(reviews)
    logger.info(
        "[COMMUNITY] %d reviews -> %d neighborhoods, %d streets",
        len(reviews), len(neighborhood_totals), len(street_totals),
    )
    return CommunityResponse(
        stats=CommunityStats(active_users=active_users, total_reviews=total_reviews),
        neighborhoods=rank_neighborhoods(neighborhood_totals, top_neighborhoods),
        warnings=rank_street_hazards(street_totals, top_streets),
    )
