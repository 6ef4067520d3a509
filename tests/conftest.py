"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
from contextlib import closing
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from shard.cache.store import KVStore
from shard.cache.uptime import UptimeTracker
from shard.network.http_server import ShardServer
from shard.protocol.router import RequestRouter


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class FakeClock:
    """Manually advanced clock for deterministic uptime."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingRequestLogger:
    """RequestLogger stand-in that keeps every record in memory."""

    def __init__(self):
        self.records = []

    def log(self, method: str, path: str, status: int, elapsed_ms: float) -> None:
        self.records.append((method, path, status, elapsed_ms))


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def store() -> KVStore:
    """Create a fresh, empty KVStore."""
    return KVStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def uptime(clock: FakeClock) -> UptimeTracker:
    """UptimeTracker driven by the fake clock."""
    return UptimeTracker(clock=clock)


@pytest.fixture
def router(store: KVStore, uptime: UptimeTracker) -> RequestRouter:
    """Create a RequestRouter over the shared store and fake uptime."""
    return RequestRouter(store, uptime, service_name="shard", version="1.0.0")


# ============================================================================
# HTTP Fixtures
# ============================================================================

@pytest.fixture
def request_logger() -> RecordingRequestLogger:
    return RecordingRequestLogger()


@pytest.fixture
def shard_server(store: KVStore, uptime: UptimeTracker, request_logger: RecordingRequestLogger) -> ShardServer:
    """ShardServer wired to the test store, fake uptime and recording logger (not listening)."""
    return ShardServer(host='127.0.0.1', port=0, store=store, uptime=uptime, request_logger=request_logger)


@pytest_asyncio.fixture
async def api_client(shard_server: ShardServer) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    In-process HTTP client talking to the ASGI app directly.

    Usage:
        async def test_something(api_client):
            resp = await api_client.get("/health")
    """
    transport = httpx.ASGITransport(app=shard_server.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://shard.test") as client:
        yield client


@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def live_server(server_port: int) -> AsyncGenerator[ShardServer, None]:
    """
    Create and start a real uvicorn-backed server for testing.

    This fixture:
    1. Creates a ShardServer on a random free port
    2. Starts it in a background task
    3. Waits until the socket is accepting requests
    4. Yields the server for testing
    5. Stops it after the test
    """
    srv = ShardServer(host='127.0.0.1', port=server_port)

    server_task = asyncio.create_task(srv.start())

    for _ in range(100):
        if srv.is_ready():
            break
        await asyncio.sleep(0.05)

    yield srv

    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
