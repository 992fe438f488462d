"""Pytest configuration for pteropower tests.

Runs a stub panel on a local aiohttp server so requests go over a real
socket, on its own event loop thread.
"""

import asyncio
import logging
import socket
import threading

import pytest
from aiohttp import web

from pteropower import EndpointConfig, PowerClient

TOKEN = "secret-token"
SERVERS = {"lobby": "abc123", "survival": "def456"}


class StubPanel:
    """Minimal stand-in for the panel's power endpoint."""

    def __init__(self):
        self.status = 204
        self.body = ""
        self.headers = {}
        self.delay = 0.0
        self.requests = []
        self._lock = threading.Lock()
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._runner = None
        self.base_url = None

    async def _handle_power(self, request):
        form = await request.post()
        with self._lock:
            self.requests.append({
                "method": request.method,
                "path": request.path,
                "server_id": request.match_info["server_id"],
                "content_type": request.content_type,
                "headers": dict(request.headers),
                "form": dict(form),
            })
        if self.delay:
            await asyncio.sleep(self.delay)
        return web.Response(status=self.status, text=self.body or None, headers=self.headers)

    async def _start(self):
        app = web.Application()
        app.router.add_post("/api/client/servers/{server_id}/power", self._handle_power)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "127.0.0.1", 0)
        await site.start()
        host, port = self._runner.addresses[0][:2]
        self.base_url = f"http://{host}:{port}"

    def start(self):
        self._thread.start()
        asyncio.run_coroutine_threadsafe(self._start(), self._loop).result(10)

    def stop(self):
        asyncio.run_coroutine_threadsafe(self._runner.cleanup(), self._loop).result(10)
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(10)
        self._loop.close()


@pytest.fixture
def panel():
    stub = StubPanel()
    stub.start()
    yield stub
    stub.stop()


@pytest.fixture
def test_logger():
    return logging.getLogger("pteropower.test")


@pytest.fixture
def config(panel):
    return EndpointConfig(panel.base_url, TOKEN, SERVERS)


@pytest.fixture
def client(config, test_logger):
    power_client = PowerClient(config, logger=test_logger)
    yield power_client
    power_client.close(timeout=10)


@pytest.fixture
def closed_port():
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
