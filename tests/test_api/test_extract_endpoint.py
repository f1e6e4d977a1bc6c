"""Tests for the description extraction endpoint."""

import json

import pytest
from unittest.mock import AsyncMock, patch

from api.listings.extract import handler
from tests.fixtures.descriptions import WHATSAPP_HOUSE
from tests.utils.helpers import build_request, response_body, response_status, run_handler

AUTH = {"Authorization": "Bearer test-token"}


@pytest.mark.unit
def test_extract_requires_body():
    h = run_handler(handler, build_request("POST", "/api/listings/extract", headers=AUTH), "POST")

    assert response_status(h) == 400


@pytest.mark.unit
def test_extract_requires_text():
    h = run_handler(handler, build_request("POST", "/api/listings/extract", body={"text": " "}, headers=AUTH), "POST")

    assert response_status(h) == 400
    assert json.loads(response_body(h))["field"] == "text"


@pytest.mark.unit
def test_extract_returns_form_values(auth_user, monkeypatch):
    monkeypatch.setenv("USE_LLM_EXTRACTION", "false")

    with patch("api._http.get_user_from_token", new=AsyncMock(return_value=auth_user)):
        h = run_handler(
            handler,
            build_request("POST", "/api/listings/extract", body={"text": WHATSAPP_HOUSE}, headers=AUTH),
            "POST",
        )

    assert response_status(h) == 200
    assert json.loads(response_body(h))["fields"] == {
        "land_area": "120",
        "building_area": "90",
        "bedrooms": "4",
        "bathrooms": "2",
        "price": "1725000000",
    }


@pytest.mark.unit
def test_extract_without_token_is_401():
    h = run_handler(handler, build_request("POST", "/api/listings/extract", body={"text": "LT 100"}), "POST")

    assert response_status(h) == 401
