"""Cache module for Shard."""

from .store import KVStore
from .uptime import UptimeTracker

__all__ = ["KVStore", "UptimeTracker"]
