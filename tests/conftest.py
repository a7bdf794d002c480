"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock

import jwt
import pytest

from gateway.context import RequestContext, build_context
from gateway.schema import build_schema


@pytest.fixture(scope="session")
def schema():
    return build_schema()


@pytest.fixture
def make_token():
    """Sign a token the way the auth service does; the gateway never verifies it."""
    def _make(**claims):
        payload = {"userId": "user-1", "email": "admin1@yopmail.com", "role": "admin", "name": "Ada Admin"}
        payload.update(claims)
        return jwt.encode(payload, "auth-service-signing-key-the-gateway-never-sees", algorithm="HS256")
    return _make


@pytest.fixture
def auth_context(make_token):
    return build_context(f"Bearer {make_token()}")


@pytest.fixture
def anon_context():
    return RequestContext()


@pytest.fixture
def execute(schema):
    """Run a GraphQL document against the schema with the given context."""
    async def _execute(query, context, variables=None):
        return await schema.execute(query, variable_values=variables, context_value=context)
    return _execute


@pytest.fixture
def mock_call(monkeypatch):
    """Replace one verb of a downstream client with an AsyncMock."""
    def _mock(client, verb, return_value=None, side_effect=None):
        mock = AsyncMock(return_value=return_value, side_effect=side_effect)
        monkeypatch.setattr(client, verb, mock)
        return mock
    return _mock


