"""Tests for notices, view results and filter criteria defaults."""

import pytest

from protea.models.filters import ALL, FilterCriteria
from protea.models.notice import Notice, ViewResult
from protea.models.profile import AuthUser


@pytest.mark.unit
def test_notice_prefixes_and_auto_dismiss():
    assert Notice.success("Saved").message == "✅ Saved"
    assert Notice.error("Failed").message == "❌ Failed"
    assert Notice.error("Failed").dismiss_after_seconds == 3.0


@pytest.mark.unit
def test_view_results():
    ok = ViewResult.success(data=[1], message="Loaded")
    assert ok.ok and ok.notice.severity == "success"

    assert ViewResult.success().notice is None

    failed = ViewResult.failure("Nope")
    assert not failed.ok and failed.notice.severity == "error"

    silent = ViewResult.redirect("/dashboard")
    assert silent.redirect_to == "/dashboard" and silent.notice is None


@pytest.mark.unit
def test_default_filter_criteria():
    criteria = FilterCriteria()

    assert criteria.is_default()
    assert criteria.property_type == ALL
    assert criteria.price_min is None and criteria.price_max is None
    assert not FilterCriteria(search_term="x").is_default()


@pytest.mark.unit
def test_auth_user_from_dict():
    user = AuthUser.from_supabase({"id": "u1", "email": "a@b.c", "user_metadata": {"full_name": " Ani "}})

    assert user.metadata_name == "Ani"
