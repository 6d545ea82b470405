from fastapi import status
from sqlalchemy import select

from conftest import DEFAULT_PASSWORD, make_auth_headers
from hrdesk.models import Account, Employee, RefreshToken


def _account_payload(email: str = "new@example.com", **overrides) -> dict:
    payload = {
        "title": "Dr",
        "firstName": "New",
        "lastName": "Person",
        "email": email,
        "password": "secret123",
        "confirmPassword": "secret123",
        "role": "User",
        "verified": True,
    }
    payload.update(overrides)
    return payload


def test_list_accounts_admin_only(client, admin_headers, user_headers, user):
    assert client.get("/api/accounts", headers=user_headers).status_code == status.HTTP_403_FORBIDDEN

    response = client.get("/api/accounts", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert {a["email"] for a in response.json()} == {"admin@example.com", user.email}


def test_create_verified_account_can_login(client, admin_headers):
    response = client.post("/api/accounts", json=_account_payload(), headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["isVerified"] is True
    assert body["status"] == "Active"

    login = client.post("/api/auth/login", json={"email": "new@example.com", "password": "secret123"})
    assert login.status_code == status.HTTP_200_OK


def test_create_unverified_account_is_inactive(client, admin_headers):
    response = client.post("/api/accounts", json=_account_payload(verified=False), headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["isVerified"] is False
    assert response.json()["status"] == "Inactive"


def test_create_account_duplicate_email(client, admin, admin_headers):
    response = client.post("/api/accounts", json=_account_payload(email=admin.email), headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_owner_or_admin_can_read(client, user, user_headers, admin, admin_headers):
    assert client.get(f"/api/accounts/{user.id}", headers=user_headers).status_code == status.HTTP_200_OK
    assert client.get(f"/api/accounts/{user.id}", headers=admin_headers).status_code == status.HTTP_200_OK
    assert client.get(f"/api/accounts/{admin.id}", headers=user_headers).status_code == status.HTTP_403_FORBIDDEN


def test_get_missing_account_is_404(client, admin_headers):
    assert client.get("/api/accounts/999", headers=admin_headers).status_code == status.HTTP_404_NOT_FOUND


def test_user_updates_own_profile_but_not_role(client, user, user_headers):
    response = client.put(f"/api/accounts/{user.id}", json={"firstName": "Renamed"}, headers=user_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["firstName"] == "Renamed"

    response = client.put(f"/api/accounts/{user.id}", json={"role": "Admin"}, headers=user_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_email_conflict(client, user, admin, admin_headers):
    response = client.put(f"/api/accounts/{user.id}", json={"email": admin.email}, headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_update_password_requires_confirmation(client, user, user_headers):
    response = client.put(f"/api/accounts/{user.id}", json={"password": "another123"}, headers=user_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.put(
        f"/api/accounts/{user.id}",
        json={"password": "another123", "confirmPassword": "another123"},
        headers=user_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    login = client.post("/api/auth/login", json={"email": user.email, "password": "another123"})
    assert login.status_code == status.HTTP_200_OK


def test_toggle_status(client, user, admin_headers, user_headers):
    assert client.put(f"/api/accounts/{user.id}/toggle-status", headers=user_headers).status_code == 403

    response = client.put(f"/api/accounts/{user.id}/toggle-status", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["account"]["status"] == "Inactive"

    response = client.put(f"/api/accounts/{user.id}/toggle-status", headers=admin_headers)
    assert response.json()["account"]["status"] == "Active"


def test_change_password(client, user, user_headers, admin, admin_headers):
    wrong = client.post(
        f"/api/accounts/{user.id}/change-password",
        json={"currentPassword": "nope", "password": "changed123", "confirmPassword": "changed123"},
        headers=user_headers,
    )
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED

    other = client.post(
        f"/api/accounts/{user.id}/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "password": "changed123", "confirmPassword": "changed123"},
        headers=admin_headers,
    )
    assert other.status_code == status.HTTP_403_FORBIDDEN

    ok = client.post(
        f"/api/accounts/{user.id}/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "password": "changed123", "confirmPassword": "changed123"},
        headers=user_headers,
    )
    assert ok.status_code == status.HTTP_200_OK


def test_refresh_tokens_listing_and_revoke_all(client, session, user, user_headers):
    client.post("/api/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
    client.post("/api/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})

    response = client.get(f"/api/accounts/{user.id}/refresh-tokens", headers=user_headers)
    assert response.status_code == status.HTTP_200_OK
    tokens = response.json()
    assert len(tokens) == 2
    assert all(t["isActive"] for t in tokens)

    revoke = client.post(f"/api/accounts/{user.id}/revoke-all-tokens", headers=user_headers)
    assert revoke.status_code == status.HTTP_200_OK
    assert revoke.json()["message"] == "2 token(s) revoked"

    remaining = session.scalars(
        select(RefreshToken).where(RefreshToken.account_id == user.id, RefreshToken.revoked.is_(None))
    ).all()
    assert remaining == []


def test_delete_account_cascades_to_employee(client, session, user, admin_headers, make_employee):
    employee = make_employee(account=user)
    user_id, employee_id = user.id, employee.id
    response = client.delete(f"/api/accounts/{user_id}", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK

    session.expire_all()
    assert session.get(Account, user_id) is None
    assert session.get(Employee, employee_id) is None


def test_user_can_delete_own_account_only(client, user, user_headers, make_account):
    other = make_account()
    assert client.delete(f"/api/accounts/{other.id}", headers=user_headers).status_code == 403
    assert client.delete(f"/api/accounts/{user.id}", headers=make_auth_headers(user)).status_code == 200


def test_passwords_over_72_bytes_are_rejected(client, user, user_headers, admin_headers):
    # 72 characters, 144 bytes once encoded.
    long_password = "é" * 72

    created = client.post(
        "/api/accounts",
        json=_account_payload(password=long_password, confirmPassword=long_password),
        headers=admin_headers,
    )
    assert created.status_code == status.HTTP_400_BAD_REQUEST
    assert any(e["field"] == "password" for e in created.json()["errors"])

    updated = client.put(
        f"/api/accounts/{user.id}",
        json={"password": long_password, "confirmPassword": long_password},
        headers=user_headers,
    )
    assert updated.status_code == status.HTTP_400_BAD_REQUEST

    changed = client.post(
        f"/api/accounts/{user.id}/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "password": long_password, "confirmPassword": long_password},
        headers=user_headers,
    )
    assert changed.status_code == status.HTTP_400_BAD_REQUEST

    login = client.post("/api/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
    assert login.status_code == status.HTTP_200_OK
