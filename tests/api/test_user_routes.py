"""HTTP tests for the protected user directory routes."""

import pytest

from meetmax.services.token_codec import TokenPurpose


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/api/user/me"),
        ("GET", "/api/user/all-users"),
        ("PATCH", "/api/user/update-user"),
        ("DELETE", "/api/user/delete-user"),
    ],
)
def test_routes_require_bearer_token(client, method, path):
    missing = client.request(method, path)
    assert missing.status_code == 401
    assert missing.json() == {"success": False, "message": "Unauthorized"}

    wrong_scheme = client.request(method, path, headers={"Authorization": "Basic Zm9vOmJhcg=="})
    assert wrong_scheme.status_code == 401


def test_invalid_token_is_forbidden(client, codec):
    refresh_token = codec.issue("jane@example.com", TokenPurpose.REFRESH)
    for token in ("garbage", refresh_token):
        response = client.get("/api/user/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "Forbidden"}


def test_me(client, make_user, auth_headers):
    make_user()
    response = client.get("/api/user/me", headers=auth_headers())
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "jane@example.com"
    assert data["gender"] == "female"
    assert "password_hash" not in data


def test_all_users(client, make_user, auth_headers):
    make_user()
    make_user(email="john@example.com", firstname="John")
    response = client.get("/api/user/all-users", headers=auth_headers())
    assert response.status_code == 200
    assert {user["email"] for user in response.json()["data"]} == {"jane@example.com", "john@example.com"}


def test_all_users_empty(client, auth_headers):
    response = client.get("/api/user/all-users", headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["message"] == "No user(s) found"


def test_update_user(client, make_user, auth_headers, repository):
    user = make_user()
    response = client.patch(
        "/api/user/update-user",
        headers=auth_headers(),
        json={
            "id": user.id,
            "email": "jane@example.com",
            "firstname": "Janet",
            "lastname": "Doe",
            "dateOfBirth": "1992-03-14",
            "gender": "female",
        },
    )
    assert response.status_code == 200
    assert response.json()["message"] == "User Doe Janet with email: jane@example.com updated"
    assert repository.find_by_id(user.id).firstname == "Janet"


def test_update_user_email_conflict(client, make_user, auth_headers):
    make_user(email="john@example.com")
    user = make_user()
    response = client.patch(
        "/api/user/update-user",
        headers=auth_headers(),
        json={
            "id": user.id,
            "email": "john@example.com",
            "firstname": "Jane",
            "lastname": "Doe",
            "date_of_birth": "1992-03-14",
            "gender": "female",
        },
    )
    assert response.status_code == 409


def test_delete_user(client, make_user, auth_headers, repository):
    user = make_user()
    response = client.request("DELETE", "/api/user/delete-user", headers=auth_headers(), json={"id": user.id})
    assert response.status_code == 200
    assert response.json()["message"] == "User Doe Jane with email: jane@example.com deleted"
    assert repository.find_by_id(user.id) is None

    again = client.request("DELETE", "/api/user/delete-user", headers=auth_headers(), json={"id": user.id})
    assert again.status_code == 400


def test_out_of_range_ids_are_rejected(client, make_user, auth_headers, repository):
    make_user()
    too_large = 2**63

    deleted = client.request("DELETE", "/api/user/delete-user", headers=auth_headers(), json={"id": too_large})
    updated = client.patch(
        "/api/user/update-user",
        headers=auth_headers(),
        json={
            "id": too_large,
            "email": "jane@example.com",
            "firstname": "Jane",
            "lastname": "Doe",
            "date_of_birth": "1992-03-14",
            "gender": "female",
        },
    )
    for response in (deleted, updated):
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"].startswith("id:")

    negative = client.request("DELETE", "/api/user/delete-user", headers=auth_headers(), json={"id": -1})
    assert negative.status_code == 400
    assert len(repository.list_all()) == 1
