"""
Tests for authentication endpoints.

This module contains tests for user registration, login, API key management,
the angler profile and account deletion.
"""

from fishlog.models.journal_entry import JournalEntry
from fishlog.models.license import FishingLicense
from tests.conftest import count_rows, register


def test_register_new_user(client):
    """Test user registration with valid data."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "NewUser@Example.com", "password": "securepassword123"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["api_key"]
    assert data["email"] == "newuser@example.com"
    assert data["is_active"] is True
    assert "user_id" in data


def test_register_duplicate_email(client):
    """Test that registering with duplicate email fails."""
    register(client, email="duplicate@example.com")

    response = client.post(
        "/api/v1/auth/register",
        json={"email": "duplicate@example.com", "password": "differentpass456"}
    )
    assert response.status_code == 400
    assert "already registered" in response.json()["detail"].lower()


def test_register_invalid_email(client):
    """Test registration with invalid email format."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "notanemail", "password": "password123"}
    )
    assert response.status_code == 422


def test_register_short_password(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "short@example.com", "password": "short"}
    )
    assert response.status_code == 422


def test_login_success(client):
    """Test successful login with valid credentials."""
    register(client, email="logintest@example.com", password="testpass123")

    response = client.post(
        "/api/v1/auth/login",
        data={"username": "logintest@example.com", "password": "testpass123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "logintest@example.com"
    assert data["expires_in"] > 0

    # The access token works as a Bearer credential
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "logintest@example.com"


def test_login_wrong_password(client):
    """Test login with incorrect password."""
    register(client, email="wrongpass@example.com", password="correctpass")

    response = client.post(
        "/api/v1/auth/login",
        data={"username": "wrongpass@example.com", "password": "wrongpassword"}
    )
    assert response.status_code == 401
    assert "incorrect" in response.json()["detail"].lower()


def test_login_nonexistent_user(client):
    """Test login with non-existent email."""
    response = client.post(
        "/api/v1/auth/login",
        data={"username": "doesnotexist@example.com", "password": "anypassword"}
    )
    assert response.status_code == 401


def test_api_key_as_bearer(client):
    data = register(client, email="bearer@example.com")
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['api_key']}"})
    assert response.status_code == 200


def test_regenerate_api_key(client):
    """Test API key regeneration."""
    old_api_key = register(client, email="regenkey@example.com")["api_key"]

    response = client.post(
        "/api/v1/auth/apikey/regenerate",
        headers={"X-API-Key": old_api_key}
    )
    assert response.status_code == 200
    new_api_key = response.json()["api_key"]
    assert new_api_key != old_api_key

    assert client.get("/api/v1/auth/me", headers={"X-API-Key": old_api_key}).status_code == 401
    assert client.get("/api/v1/auth/me", headers={"X-API-Key": new_api_key}).status_code == 200


def test_change_password(client):
    api_key = register(client, email="changepw@example.com", password="oldpassword1")["api_key"]
    headers = {"X-API-Key": api_key}

    wrong = client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "notmypassword", "new_password": "newpassword1"},
        headers=headers,
    )
    assert wrong.status_code == 400

    response = client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "oldpassword1", "new_password": "newpassword1"},
        headers=headers,
    )
    assert response.status_code == 204

    old_login = client.post(
        "/api/v1/auth/login",
        data={"username": "changepw@example.com", "password": "oldpassword1"}
    )
    assert old_login.status_code == 401
    new_login = client.post(
        "/api/v1/auth/login",
        data={"username": "changepw@example.com", "password": "newpassword1"}
    )
    assert new_login.status_code == 200


def test_profile_starts_empty(client, auth_headers):
    response = client.get("/api/v1/auth/profile", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "angler@example.com"
    assert data["first_name"] is None
    assert data["phone"] is None


def test_update_profile(client, auth_headers):
    response = client.put(
        "/api/v1/auth/profile",
        json={"first_name": "Ada", "last_name": "Walton", "phone": "+1 (651) 555-0100", "email": "new@example.com"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["first_name"] == "Ada"
    assert data["last_name"] == "Walton"
    assert data["email"] == "angler@example.com"

    # Fields not sent are kept
    client.put("/api/v1/auth/profile", json={"address": "12 River Rd"}, headers=auth_headers)
    me = client.get("/api/v1/auth/me", headers=auth_headers).json()
    assert me["first_name"] == "Ada"
    assert me["address"] == "12 River Rd"


def test_update_profile_rejects_bad_phone(client, auth_headers):
    response = client.put("/api/v1/auth/profile", json={"phone": "call me"}, headers=auth_headers)
    assert response.status_code == 422


def test_delete_account_requires_password(client, auth_headers):
    response = client.request(
        "DELETE", "/api/v1/auth/me", json={"password": "notmypassword"}, headers=auth_headers
    )
    assert response.status_code == 400
    assert client.get("/api/v1/auth/me", headers=auth_headers).status_code == 200


def test_delete_account_removes_everything(client, auth_headers, db_sessionmaker):
    client.post("/api/v1/entries", json={"date": "2024-06-01"}, headers=auth_headers)
    client.post(
        "/api/v1/licenses",
        json={"state": "MN", "license_type": "Annual", "start_date": "2024-03-01", "end_date": "2025-02-28"},
        headers=auth_headers,
    )
    other = {"X-API-Key": register(client, email="other@example.com")["api_key"]}
    client.post("/api/v1/entries", json={"date": "2024-06-02"}, headers=other)

    response = client.request(
        "DELETE", "/api/v1/auth/me", json={"password": "tightlines123"}, headers=auth_headers
    )

    assert response.status_code == 204
    assert client.get("/api/v1/auth/me", headers=auth_headers).status_code == 401
    login = client.post(
        "/api/v1/auth/login",
        data={"username": "angler@example.com", "password": "tightlines123"}
    )
    assert login.status_code == 401
    assert count_rows(db_sessionmaker, JournalEntry) == 1
    assert count_rows(db_sessionmaker, FishingLicense) == 0
    assert len(client.get("/api/v1/entries", headers=other).json()) == 1
