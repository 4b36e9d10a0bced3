from app.core.jwt import create_access_token
from app.models.enums import Role
from app.models.user import User

NEW_USER = {
    "name": "Somchai",
    "email": "somchai@example.com",
    "tel": "0891234567",
    "password": "secret123",
}


def test_register_login_me(client):
    res = client.post("/auth/register", json=NEW_USER)
    assert res.status_code == 201
    body = res.json()
    assert body["role"] == "user"
    assert body["membership_tier"] == "none"
    assert body["credit"] == 0
    assert "password" not in body and "password_hash" not in body

    res = client.post("/auth/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]})
    assert res.status_code == 200
    token = res.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == NEW_USER["email"]


def test_register_duplicate_email(client):
    client.post("/auth/register", json=NEW_USER)

    res = client.post("/auth/register", json=NEW_USER)

    assert res.status_code == 400
    assert res.json()["error"] == "InvalidRequest"


def test_wrong_password_is_401(client):
    client.post("/auth/register", json=NEW_USER)

    res = client.post("/auth/login", json={"email": NEW_USER["email"], "password": "nope-nope"})

    assert res.status_code == 401
    assert res.json()["error"] == "Unauthorized"


def test_bad_token_is_401(client):
    res = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_token_with_stale_role_is_401(client, guest):
    token = create_access_token({"sub": guest.email, "role": "admin"})

    res = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 401


def test_register_always_creates_plain_user(client, db, room):
    res = client.post("/auth/register", json={**NEW_USER, "role": "admin", "responsible_hotel_id": room.hotel_id})

    assert res.status_code == 201
    assert res.json()["role"] == "user"
    assert res.json()["responsible_hotel_id"] is None
    assert db.query(User).filter(User.email == NEW_USER["email"]).one().role == Role.USER

    token = client.post(
        "/auth/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]}
    ).json()["access_token"]
    long_stay = client.post(
        f"/rooms/{room.id}/bookings",
        json={"check_in_date": "2030-04-01T14:00:00", "check_out_date": "2030-04-20T14:00:00"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert long_stay.status_code == 400
    assert long_stay.json()["error"] == "StayTooLong"


def test_admin_assigns_hotel_manager(client, hotel, guest, admin, auth_headers):
    url = f"/auth/users/{guest.id}/role"
    old_headers = auth_headers(guest)

    assert client.put(url, json={"role": "hotelManager"}, headers=auth_headers(admin)).status_code == 400

    res = client.put(url, json={"role": "hotelManager", "responsible_hotel_id": hotel.id}, headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.json()["role"] == "hotelManager"
    assert res.json()["responsible_hotel_id"] == hotel.id

    # Tokens issued for the old role stop working
    assert client.get("/auth/me", headers=old_headers).status_code == 401


def test_only_admin_changes_roles(client, guest, manager, auth_headers):
    for caller in (guest, manager):
        res = client.put(f"/auth/users/{guest.id}/role", json={"role": "admin"}, headers=auth_headers(caller))
        assert res.status_code == 403


def test_change_role_of_missing_user_is_404(client, admin, auth_headers):
    res = client.put("/auth/users/999/role", json={"role": "admin"}, headers=auth_headers(admin))
    assert res.status_code == 404
