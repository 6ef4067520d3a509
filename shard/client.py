"""
Shard HTTP Client

A small synchronous client for the Shard HTTP API, used by the
interactive script in scripts/client.py and handy in tests.

Usage:
    with ShardClient("http://localhost:8080") as client:
        client.put("color", "red")
        client.get("color")      # -> "red"
        client.health()["keys"]  # -> 1
"""

from typing import Dict, Optional

import httpx


class ShardError(Exception):
    """Raised when the server answers with an unexpected status."""

    def __init__(self, status: int, body: str):
        super().__init__(f"HTTP {status}: {body}")
        self.status = status
        self.body = body


class ShardClient:
    """
    Thin wrapper around httpx.Client speaking the Shard API.

    Keys are sent verbatim in the path and the server does not decode
    them, so a key containing "#" cannot be addressed: the URL would
    end at the fragment marker. put() and get() reject such keys.
    """

    def __init__(
            self,
            base_url: str = "http://localhost:8080",
            timeout: float = 5.0,
            transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def put(self, key: str, value: str) -> bool:
        """Store value under key. Returns True when the server answered OK."""
        resp = self._http.put(self._key_path(key), json={"value": value})
        if resp.status_code != 200:
            raise ShardError(resp.status_code, resp.text)
        return resp.text == "OK"

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if the key is unknown."""
        resp = self._http.get(self._key_path(key))
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise ShardError(resp.status_code, resp.text)
        return resp.json()["value"]

    @staticmethod
    def _key_path(key: str) -> str:
        if "#" in key:
            raise ValueError(f"Key {key!r} contains '#', which cannot be sent in a URL path")
        return f"/kv/{key}"

    def health(self) -> dict:
        resp = self._http.get("/health")
        if resp.status_code != 200:
            raise ShardError(resp.status_code, resp.text)
        return resp.json()

    def metrics(self) -> Dict[str, int]:
        """Fetch /metrics and parse the "name value" lines."""
        resp = self._http.get("/metrics")
        if resp.status_code != 200:
            raise ShardError(resp.status_code, resp.text)

        result = {}
        for line in resp.text.splitlines():
            if not line.strip():
                continue
            name, value = line.split(" ", 1)
            result[name] = int(value)
        return result

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
