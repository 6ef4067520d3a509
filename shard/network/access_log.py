"""
Access Logging

One log record per completed HTTP request, emitted on the
"shard.access" logger after the response has been written.
"""

import logging


class RequestLogger:
    """Emits a single INFO record per request: method, path, status, elapsed time."""

    def __init__(self, name: str = "shard.access"):
        self._logger = logging.getLogger(name)

    def log(self, method: str, path: str, status: int, elapsed_ms: float) -> None:
        self._logger.info(f"{method} {path} {status} {elapsed_ms:.2f}ms")
