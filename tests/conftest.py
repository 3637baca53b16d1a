"""
Shared fixtures for the Contacts Service tests.
No external CRM is contacted: adapters are mocked or replaced by the in-memory one.
"""
import os

# We need to set the environment before importing the app
os.environ["CRM_PROVIDER"] = "none"

import pytest
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient

from contacts_service.adapters.base import CRMClient
from contacts_service.adapters.memory_client import InMemoryCRMClient
from contacts_service.main import app


@pytest.fixture
def client():
    """Test client for FastAPI."""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def crm():
    """A mocked CRM adapter wired into the app."""
    mock_crm = MagicMock(spec=CRMClient)
    with patch("contacts_service.main.get_crm_client", return_value=mock_crm):
        yield mock_crm


@pytest.fixture
def memory_crm():
    """The in-memory CRM adapter wired into the app."""
    memory = InMemoryCRMClient()
    with patch("contacts_service.main.get_crm_client", return_value=memory):
        yield memory
