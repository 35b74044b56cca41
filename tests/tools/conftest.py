"""Fixtures for tool tests.

Tools are called through an in-memory ``fastmcp.Client`` connected to the
real server, so argument schemas and error flags are exercised the way an
MCP client sees them.
"""

import pytest
from fastmcp import Client

from library_system.permissions import Role
from library_system.server import create_server


@pytest.fixture
def use_service(monkeypatch, make_service):
    """
    Route the tool handlers to a test service.

    Returns a function that installs a service logged in with ``role`` and
    returns it.
    """

    def _use(role: Role | None = Role.BOTH, **kwargs):
        service = make_service(role, **kwargs)
        monkeypatch.setattr("library_system.tools.circulation.get_library_service", lambda: service)
        monkeypatch.setattr("library_system.tools.catalog.get_library_service", lambda: service)
        return service

    return _use


@pytest.fixture
async def client(tmp_path, monkeypatch):
    """Connected client for a server built from the current configuration."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LIBRARY_SYSTEM_DATABASE_PATH", str(tmp_path / "tools.db"))

    async with Client(create_server()) as connected:
        yield connected


@pytest.fixture
def call_tool(client):
    """Call a tool and return the result without raising on tool errors."""

    async def _call(name: str, /, **arguments):
        return await client.call_tool(name, arguments, raise_on_error=False)

    return _call
