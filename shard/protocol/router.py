"""
Request Router Module

This module maps an inbound (method, path) pair to a handling action,
runs that action against the shared store and uptime tracker, and
builds the Response to send back.

Routes:
    ANY  /health     -> 200 JSON health payload
    ANY  /metrics    -> 200 plaintext exposition
    PUT  /kv/<key>   -> 200 OK | 400 JSON Failed to validate
    GET  /kv/<key>   -> 200 {"value": ...} | 404 Key was not found
    *    /kv/<key>   -> 405 Method not allowed!
    ANY  <other>     -> 404 Not found!

The router never does I/O itself. The transport reads the request body
before calling dispatch() and writes the returned Response afterwards,
so the store lock is only ever held around a single dictionary access.
"""

import json
import logging
from typing import Any, Union

from pydantic import ValidationError

from .. import __version__
from ..cache.store import KVStore
from ..cache.uptime import UptimeTracker
from ..config.settings import settings
from .responses import HealthResponse, PutRequest, Response, Route

logger = logging.getLogger(__name__)


class DuplicateFieldError(ValueError):
    """A JSON object repeats the 'value' field."""


def load_put_body(text: str) -> Any:
    """
    Decode a PUT body, rejecting a top-level object that repeats "value".

    Inner objects are decoded before the object that contains them, so
    the last object seen by the hook is the top-level one.
    """
    repeated = []

    def pairs_hook(pairs):
        repeated.append(sum(1 for name, _ in pairs if name == "value") > 1)
        return dict(pairs)

    data = json.loads(text, object_pairs_hook=pairs_hook)
    if isinstance(data, dict) and repeated[-1]:
        raise DuplicateFieldError("duplicate field 'value'")
    return data


class RequestRouter:
    """
    Dispatcher from (method, path, body) to a Response.

    Paths are matched as raw strings: /health and /metrics by equality,
    the key-value family by the literal /kv/ prefix. The key is what is
    left after removing every non-overlapping occurrence of the prefix,
    scanning left to right and without any decoding, so /kv/a/kv/b
    addresses key "ab", /kv/kv/x addresses key "kv/x" and /kv/ alone
    addresses the empty key.

    Attributes:
        store: The KVStore shared by all requests
        uptime: The UptimeTracker owned by the running service
        service_name: Name reported by /health
        version: Version reported by /health
    """

    def __init__(
            self,
            store: KVStore,
            uptime: UptimeTracker,
            service_name: str = None,
            version: str = None,
    ):
        self.store = store
        self.uptime = uptime
        self.service_name = service_name if service_name is not None else settings.SERVICE_NAME
        self.version = version if version is not None else __version__
        self.prefix = settings.KV_PREFIX

    def resolve(self, method: str, path: str) -> Route:
        """
        Select the handling action for a request.

        Args:
            method: HTTP method (compared case-insensitively)
            path: Raw request path as received

        Returns:
            The Route to take
        """
        if path == "/health":
            return Route.HEALTH
        if path == "/metrics":
            return Route.METRICS
        if path.startswith(self.prefix):
            method = method.upper()
            if method == "PUT":
                return Route.KV_PUT
            if method == "GET":
                return Route.KV_GET
            return Route.METHOD_NOT_ALLOWED
        return Route.NOT_FOUND

    def extract_key(self, path: str) -> str:
        """Strip every occurrence of the /kv/ prefix from path."""
        return path.replace(self.prefix, "")

    def dispatch(self, method: str, path: str, body: Union[bytes, str] = b"") -> Response:
        """
        Handle one request end-to-end and build its Response.

        Args:
            method: HTTP method
            path: Raw request path
            body: Full request body, already read by the transport

        Returns:
            Response to write back to the client
        """
        route = self.resolve(method, path)
        logger.debug(f"{method} {path} -> {route.name}")

        if route == Route.HEALTH:
            return self._handle_health()
        if route == Route.METRICS:
            return self._handle_metrics()
        if route == Route.KV_PUT:
            return self._handle_put(self.extract_key(path), body)
        if route == Route.KV_GET:
            return self._handle_get(self.extract_key(path))
        if route == Route.METHOD_NOT_ALLOWED:
            return Response.method_not_allowed()
        return Response.not_found()

    def _handle_put(self, key: str, body: Union[bytes, str]) -> Response:
        """
        Validate a PUT body and store its value.

        The body must decode into an object with a string "value" field.
        Anything else (not JSON, not UTF-8, missing, repeated or non-string field)
        is rejected with 400 and the store is left untouched.
        """
        try:
            text = body.decode("utf-8") if isinstance(body, bytes) else body
        except UnicodeDecodeError:
            logger.debug(f"Rejected PUT body for key {key!r}: not valid UTF-8")
            return Response.invalid_payload()

        try:
            payload = PutRequest.model_validate(load_put_body(text))
        except ValidationError as exc:
            logger.debug(f"Rejected PUT body for key {key!r}: {exc.error_count()} error(s)")
            return Response.invalid_payload()
        except ValueError as exc:
            # Malformed JSON or a repeated field
            logger.debug(f"Rejected PUT body for key {key!r}: {exc}")
            return Response.invalid_payload()

        self.store.put(key, payload.value)
        return Response.stored()

    def _handle_get(self, key: str) -> Response:
        value = self.store.get(key)
        if value is None:
            return Response.key_not_found()
        return Response.value_response(value)

    def _handle_health(self) -> Response:
        payload = HealthResponse(
            status="ok",
            service=self.service_name,
            version=self.version,
            uptime_seconds=self.uptime.elapsed_seconds(),
            keys=self.store.size(),
        )
        return Response.json(payload)

    def _handle_metrics(self) -> Response:
        return Response.text(self.format_metrics(self.uptime.elapsed_seconds(), self.store.size()))

    @staticmethod
    def format_metrics(uptime_seconds: int, keys: int) -> str:
        """
        Format the plaintext metrics exposition.

        Examples:
            >>> RequestRouter.format_metrics(12, 3)
            'shard_uptime_seconds 12\\nshard_keys 3\\n'
        """
        return (
            f"shard_uptime_seconds {uptime_seconds}\n"
            f"shard_keys {keys}\n"
        )
