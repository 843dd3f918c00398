"""Pytest configuration and fixtures."""
from __future__ import annotations

import asyncio
import socket
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from config import settings


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch, tmp_path) -> None:
    """Set up test environment variables"""
    monkeypatch.setenv('SITES_FILE', str(tmp_path / 'sites.txt'))
    monkeypatch.setenv('CHECK_INTERVAL_SECONDS', '30')
    monkeypatch.setenv('REQUEST_TIMEOUT', '10')
    monkeypatch.setenv('MAX_CONCURRENCY', '0')
    monkeypatch.setenv('SCHEDULE_MODE', 'sleep')
    monkeypatch.setenv('METRICS_HOST', '127.0.0.1')
    monkeypatch.setenv('METRICS_PORT', '9222')
    monkeypatch.setenv('METRICS_PATH', '/metrics')
    monkeypatch.setenv('FAILURE_ALERT_THRESHOLD', '3')
    monkeypatch.setenv('LOG_DIR', str(tmp_path / 'logs'))
    settings.reload()


@pytest.fixture
def sites_file(tmp_path) -> Path:
    """Site list with comments and blank lines"""
    path = tmp_path / 'sites.txt'
    path.write_text(
        "# monitored pages\n"
        "https://a.example\n"
        "\n"
        "   # indented comment\n"
        "  https://b.example  \n",
        encoding='utf-8',
    )
    return path


@pytest.fixture
def page_sizes() -> dict[str, int]:
    """Body sizes served by the page_server fixture, editable per test"""
    return {'/small': 100, '/large': 2048, '/empty': 0}


@pytest_asyncio.fixture
async def page_server(page_sizes):
    """Local HTTP server returning bodies of configured sizes"""

    async def handler(request: web.Request) -> web.Response:
        size = page_sizes.get(request.path)
        if size is None:
            raise web.HTTPNotFound()
        return web.Response(body=b'x' * size)

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(1)
        return web.Response(body=b'late')

    async def truncated(request: web.Request) -> web.StreamResponse:
        response = web.StreamResponse()
        response.content_length = 1000
        await response.prepare(request)
        await response.write(b'x' * 10)
        request.transport.close()
        return response

    app = web.Application()
    app.router.add_get('/slow', slow)
    app.router.add_get('/truncated', truncated)
    app.router.add_get('/{name}', handler)

    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


@pytest.fixture
def refused_url() -> str:
    """URL of a local port that nothing listens on"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        port = sock.getsockname()[1]
    return f'http://127.0.0.1:{port}/'
