"""Network module for Shard."""

from .access_log import RequestLogger
from .http_server import ShardServer

__all__ = ["RequestLogger", "ShardServer"]
