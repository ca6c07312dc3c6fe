"""
Shared fixtures for the apicius tests.

Providers are replaced with the in-memory fakes from fakes.py; the backend API
client is a Mock(spec=ApiClient) whose methods return Ok/Err results.
"""

from unittest.mock import Mock

import pytest

from apicius.api_client import ApiClient
from apicius.results import Ok
from fakes import FakeAuthProvider, FakeObjectStorage


@pytest.fixture
def api():
    """ApiClient mock with harmless defaults for every endpoint."""
    client = Mock(spec=ApiClient)
    client.list_recipes.return_value = Ok([])
    client.get_preferences.return_value = Ok(None)
    client.update_preferences.return_value = Ok(None)
    client.update_recipe.return_value = Ok(None)
    client.delete_recipe.return_value = Ok(None)
    client.request_beta_access.return_value = Ok(None)
    return client


@pytest.fixture
def auth():
    return FakeAuthProvider()


@pytest.fixture
def storage():
    return FakeObjectStorage()


@pytest.fixture
def navigate():
    return Mock()
