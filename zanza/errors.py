"""
Failure outcomes of the route and community pipelines.

Every stage raises its own class so callers can tell "address not found"
from "address outside the city" from "routing service unreachable". The
API layer renders any ZanzaError with its status_code and code.
"""

from typing import Any, Dict


class ZanzaError(Exception):
    code = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": self.code}


class InvalidAddress(ZanzaError):
    code = "invalid_address"
    status_code = 400


class AddressNotFound(ZanzaError):
    code = "address_not_found"
    status_code = 404


class AddressOutOfBounds(ZanzaError):
    code = "address_out_of_bounds"
    status_code = 422

    def __init__(self, message: str, lat: float, lng: float):
        super().__init__(message)
        self.lat = lat
        self.lng = lng


class ExternalServiceError(ZanzaError):
    """Network, HTTP status or payload failure talking to an outside service."""

    code = "external_service_failed"
    status_code = 502


class ResolutionFailed(ExternalServiceError):
    code = "geocoding_failed"


class RoutingFailed(ExternalServiceError):
    code = "routing_failed"


class ReviewSourceFailed(ExternalServiceError):
    code = "review_source_failed"


class NoRoutesFound(ZanzaError):
    code = "no_routes_found"
    status_code = 404


class EndpointUnresolved(ZanzaError):
    """One end of a route search could not be resolved; wraps the resolver error."""

    side = "endpoint"

    def __init__(self, cause: ZanzaError):
        super().__init__(f"{self.side.capitalize()}: {cause.message}")
        self.cause = cause
        self.code = f"{self.side}_unresolved"
        self.status_code = cause.status_code

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["side"] = self.side
        payload["reason"] = self.cause.code
        return payload


class OriginUnresolved(EndpointUnresolved):
    side = "origin"


class DestinationUnresolved(EndpointUnresolved):
    side = "destination"
