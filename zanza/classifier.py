"""
Position-based safety classification of route alternatives.

There is no community-rated path-level safety model yet, so a route's tier,
category and provisional rating follow from where the routing service placed
it among the alternatives:

    position 0 -> SAFE tier,    SAFE category,     rating 5
    position 1 -> WARNING tier, BALANCED category, rating 4
    position 2 -> DANGER tier,  FASTEST category,  rating 3
"""

from typing import List, Sequence

from .models import ClassifiedRoute, RawRoutePath, RouteCategory, SafetyTier

MAX_RATING = 5

_POSITIONS = [
    (SafetyTier.SAFE, RouteCategory.SAFE),
    (SafetyTier.WARNING, RouteCategory.BALANCED),
    (SafetyTier.DANGER, RouteCategory.FASTEST),
]


def classify_routes(
    paths: Sequence[RawRoutePath],
    origin: str,
    destination: str,
) -> List[ClassifiedRoute]:
    """
    Classify up to three paths by position. Empty input gives empty output;
    identical alternatives are kept and classified independently.
    """
    routes: List[ClassifiedRoute] = []
    for idx, path in enumerate(paths[: len(_POSITIONS)]):
        tier, category = _POSITIONS[idx]
        routes.append(
            ClassifiedRoute(
                id=idx + 1,
                origin=origin,
                destination=destination,
                geometry=list(path.geometry),
                distance_m=path.distance_m,
                duration_s=path.duration_s,
                safety_rating=float(max(0, MAX_RATING - idx)),
                contributors=None,
                safety_tier=tier,
                category=category,
            )
        )
    return routes
