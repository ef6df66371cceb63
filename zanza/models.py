from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    lat: float = Field(allow_inf_nan=False)
    lng: float = Field(allow_inf_nan=False)


class CityBounds(BaseModel):
    """Axis-aligned service area. Edges are inclusive."""

    south: float
    west: float
    north: float
    east: float

    def contains(self, coord: Coordinate) -> bool:
        return (
            self.south <= coord.lat <= self.north
            and self.west <= coord.lng <= self.east
        )


class ResolvedAddress(BaseModel):
    address: str
    coordinate: Optional[Coordinate] = Field(
        default=None,
        description="None when the address was not found or lies outside the city.",
    )


class RawRoutePath(BaseModel):
    geometry: List[Coordinate]
    distance_m: float
    duration_s: float


class SafetyTier(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


class RouteCategory(str, Enum):
    SAFE = "safe"
    BALANCED = "balanced"
    FASTEST = "fastest"


class ClassifiedRoute(BaseModel):
    id: int
    origin: str
    destination: str
    geometry: List[Coordinate]
    distance_m: float
    duration_s: float
    safety_rating: float
    contributors: Optional[int] = Field(
        default=None,
        description="Number of community reviews backing the rating; None while unknown.",
    )
    safety_tier: SafetyTier
    category: RouteCategory


class RouteRequest(BaseModel):
    origin: str = Field(description="Free-text start address, e.g. 'Rua Barão de Jaguara, 1000'")
    destination: str = Field(description="Free-text end address")


class RoutesResponse(BaseModel):
    origin: str
    destination: str
    routes: List[ClassifiedRoute]


def _nested(record: Dict[str, Any], *keys: str) -> Any:
    value: Any = record
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


class RawReview(BaseModel):
    neighborhood_name: Optional[str] = None
    street_name: Optional[str] = None
    score: Optional[float] = Field(default=None, allow_inf_nan=False)
    comment: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "RawReview":
        """
        Build a review from a backend record.

        Accepts the flat shape (``neighborhood_name``, ``street_name``,
        ``score``, ``comment``) as well as the backend's nested review
        (``bairroSegmento.bairro.nome``, ``bairroSegmento.ruaSegmento.nome``
        or ``nomeSegmento``, ``notaFinal``, ``comentario``).

        Raises pydantic.ValidationError (or TypeError for non-dict input)
        when the record cannot be interpreted.
        """
        if not isinstance(record, dict):
            raise TypeError(f"review record must be an object, got {type(record).__name__}")
        if "bairroSegmento" not in record and "notaFinal" not in record:
            return cls.model_validate(record)

        street = _nested(record, "bairroSegmento", "ruaSegmento", "nome") or _nested(
            record, "bairroSegmento", "ruaSegmento", "nomeSegmento"
        )
        return cls.model_validate(
            {
                "neighborhood_name": _nested(record, "bairroSegmento", "bairro", "nome"),
                "street_name": street,
                "score": record.get("notaFinal"),
                "comment": record.get("comentario"),
            }
        )


@dataclass
class GroupTotals:
    total: float = 0.0
    count: int = 0
    issues: List[str] = field(default_factory=list)


class NeighborhoodSummary(BaseModel):
    name: str
    reviews: int
    rating: float


class StreetHazardSummary(BaseModel):
    name: str
    issue: str
    rating: float


class CommunityStats(BaseModel):
    # Serialized in the camelCase the community tab reads (stats.activeUsers)
    active_users: int = Field(serialization_alias="activeUsers")
    total_reviews: int = Field(serialization_alias="totalReviews")


class CommunityResponse(BaseModel):
    stats: CommunityStats
    neighborhoods: List[NeighborhoodSummary]
    warnings: List[StreetHazardSummary]
