"""Protocol module for Shard."""

from .responses import HealthResponse, PutRequest, Response, Route, ValueResponse
from .router import RequestRouter

__all__ = [
    "HealthResponse",
    "PutRequest",
    "RequestRouter",
    "Response",
    "Route",
    "ValueResponse",
]
