"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import AsyncMock, MagicMock
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LLM_PROVIDER", "anthropic")
os.environ.setdefault("LLM_MODEL", "claude-sonnet-4-20250514")
os.environ.setdefault("USE_LLM_EXTRACTION", "false")
os.environ.setdefault("APP_BASE_URL", "https://protea.test")
os.environ.setdefault("LOG_FORMAT", "text")

from protea.models.listing import Listing
from protea.models.profile import AuthUser, Profile
from protea.services.access_gate import AccessGate
from tests.utils.factories import create_listing, create_profile_data

ADMIN_ID = "ae43f00b-4138-4baa-9bf2-897e5ee7abfe"
USER_ID = "11111111-2222-3333-4444-555555555555"


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client whose table queries chain back to one query mock."""
    client = MagicMock()
    query = MagicMock()
    for method in ("select", "eq", "in_", "order", "limit", "insert", "update", "upsert", "delete"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=[])
    client.table.return_value = query
    client.query = query
    return client


@pytest.fixture
def auth_user():
    """Regular signed-in user."""
    return AuthUser(id=USER_ID, email="jane.doe@example.com", user_metadata={})


@pytest.fixture
def admin_user():
    """Admin user (also on the fallback allow-list)."""
    return AuthUser(id=ADMIN_ID, email="admin@protea.id", user_metadata={"name": "Admin"})


@pytest.fixture
def user_profile():
    return Profile(**create_profile_data(user_id=USER_ID, name="Jane Doe", email="jane.doe@example.com"))


def make_gate(is_admin: bool) -> AccessGate:
    gate = AccessGate()
    gate.is_admin = AsyncMock(return_value=is_admin)
    return gate


@pytest.fixture
def admin_gate():
    return make_gate(True)


@pytest.fixture
def user_gate():
    return make_gate(False)


@pytest.fixture
def sample_listings():
    """Six listings across two provinces, one Kavling and one soft-deleted."""
    return [
        create_listing(id="1", title="Rumah Cantik", city="Surabaya", province="Jawa Timur",
                       district="Wonokromo", price="1500000000", lt=120, lb=90, kt=3, km=2,
                       property_type="Rumah", transaction_type="Jual", created_at="2024-12-01T10:00:00+00:00"),
        create_listing(id="2", title="Rumah Minimalis", city="Malang", province="Jawa Timur",
                       district="Klojen", price="850000000", lt=100, lb=70, kt=2, km=1,
                       property_type="Rumah", transaction_type="Jual", created_at="2024-12-02T10:00:00+00:00"),
        create_listing(id="3", title="Kavling Siap Bangun", city="Surabaya", province="Jawa Timur",
                       district="Rungkut", price="2500000000", lt=300, lb=None, kt=None, km=None,
                       property_type="Kavling", transaction_type="Jual", created_at="2024-12-03T10:00:00+00:00"),
        create_listing(id="4", title="Apartemen Tengah Kota", city="Jakarta Selatan", province="DKI Jakarta",
                       district="Kebayoran Baru", price="3000000000", lt=0, lb=80, kt=2, km=2,
                       property_type="Apartemen", transaction_type="Sewa", created_at="2024-12-04T10:00:00+00:00"),
        create_listing(id="5", title="DELETED", city="Surabaya", province="Jawa Timur",
                       district="Gubeng", price="500000000", lt=90, lb=60, kt=2, km=1,
                       property_type="Rumah", transaction_type="Jual", created_at="2024-12-05T10:00:00+00:00"),
        create_listing(id="6", title="Rumah Nego", city="Surabaya", province="Jawa Timur",
                       district="Wonokromo", price="nego", lt="abc", lb=100, kt=4, km=3,
                       property_type="Rumah", transaction_type="Jual", created_at="2024-12-06T10:00:00+00:00"),
    ]


@pytest.fixture
def listing_rows(sample_listings):
    """The sample listings as listings-table rows."""
    return [listing.to_row() for listing in sample_listings]


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture(scope="function")
def reset_environment(monkeypatch):
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
