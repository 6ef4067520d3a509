"""
Route, Response and Payload Definitions

This module defines the data structures exchanged between the
transport and the request router:

- Route: which handling action a (method, path) pair resolves to
- Response: the status code and body computed for one request
- PutRequest / ValueResponse / HealthResponse: the JSON payload shapes
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from pydantic import BaseModel, StrictStr


JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class Route(Enum):
    """Enumeration of the terminal handling actions."""
    HEALTH = auto()
    METRICS = auto()
    KV_GET = auto()
    KV_PUT = auto()
    METHOD_NOT_ALLOWED = auto()
    NOT_FOUND = auto()


class PutRequest(BaseModel):
    """Body of PUT /kv/<key>. Unknown fields are ignored."""
    value: StrictStr


class ValueResponse(BaseModel):
    """Body of a successful GET /kv/<key>."""
    value: str


class HealthResponse(BaseModel):
    """Body of GET /health."""
    status: str
    service: str
    version: str
    uptime_seconds: int
    keys: int


@dataclass
class Response:
    """
    Represents a computed HTTP response.

    Attributes:
        status: HTTP status code
        body: Response body text, None for an empty body
        content_type: Media type of the body
    """
    status: int
    body: Optional[str] = None
    content_type: str = TEXT_CONTENT_TYPE

    @classmethod
    def text(cls, body: str, status: int = 200) -> "Response":
        """Create a plaintext response."""
        return cls(status=status, body=body, content_type=TEXT_CONTENT_TYPE)

    @classmethod
    def json(cls, payload: BaseModel, status: int = 200) -> "Response":
        """Create a response carrying a compact JSON encoding of payload."""
        return cls(status=status, body=payload.model_dump_json(), content_type=JSON_CONTENT_TYPE)

    @classmethod
    def stored(cls) -> "Response":
        """Create the 'OK' response for a successful PUT."""
        return cls.text("OK")

    @classmethod
    def value_response(cls, value: str) -> "Response":
        """Create a GET response with a value."""
        return cls.json(ValueResponse(value=value))

    @classmethod
    def invalid_payload(cls) -> "Response":
        """Create the 400 response for a PUT body that fails validation."""
        return cls.text("JSON Failed to validate", status=400)

    @classmethod
    def key_not_found(cls) -> "Response":
        """Create the 404 response for a GET on an unknown key."""
        return cls.text("Key was not found", status=404)

    @classmethod
    def method_not_allowed(cls) -> "Response":
        return cls.text("Method not allowed!", status=405)

    @classmethod
    def not_found(cls) -> "Response":
        return cls.text("Not found!", status=404)

    @classmethod
    def internal_error(cls) -> "Response":
        return cls.text("Internal server error", status=500)
