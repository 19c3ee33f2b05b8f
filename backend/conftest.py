"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def reset_app_settings():
    """
    Drop the cached AppSettings around each test.

    The singleton outlives the test database transaction; without this a
    tax rate loaded in one test would leak into the next.
    """
    from settings.config import app_settings

    app_settings.invalidate()
    yield
    app_settings.invalidate()


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/orders/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *
