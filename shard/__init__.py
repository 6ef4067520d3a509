"""
Shard: In-Memory Key-Value Store over HTTP

A small, thread-safe, in-memory key-value service exposing
PUT/GET on /kv/<key> plus /health and /metrics introspection.
"""

__version__ = "1.0.0"
