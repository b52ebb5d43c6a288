import pytest
from httpx import AsyncClient

from tests.utils.json_compare import assert_json_matches


@pytest.mark.asyncio
async def test_successful_registration(client: AsyncClient, test_data):
    """
    Given a new email address
    When I register
    Then I receive 201 with my public profile
    And the password hash is never returned
    """
    response = await client.post("/auth/register", json=test_data.get_copy("register_request"))

    assert response.status_code == 201
    data = response.json()
    assert_json_matches(data, test_data.get("expected_user_view"))
    assert "password" not in data and "password_hash" not in data


@pytest.mark.asyncio
async def test_duplicate_email_is_conflict(client: AsyncClient, test_data):
    payload = test_data.get_copy("register_request")
    first = await client.post("/auth/register", json=payload)
    assert first.status_code == 201

    payload["email"] = payload["email"].upper()
    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "CONFLICT"
    assert error["message"] == "Email already exists"


@pytest.mark.asyncio
async def test_invalid_registrations(client: AsyncClient, test_data):
    for case in test_data.get("invalid_registrations"):
        response = await client.post("/auth/register", json=case["payload"])

        assert response.status_code == 400, case
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == case["message"]
