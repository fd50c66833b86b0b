from datetime import timedelta

from app.core.security import create_access_token
from app.db.models.user import User


def test_register_login_me(client, db):
    registered = client.post(
        "/api/auth/register",
        json={"email": "nouveau@tutorat.fr", "name": "Nina Garnier", "password": "secret1234", "role": "parent"},
    )
    assert registered.status_code == 201
    assert registered.json()["roles"] == ["parent"]

    login = client.post("/api/auth/login", json={"email": "nouveau@tutorat.fr", "password": "secret1234"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "nouveau@tutorat.fr"


def test_register_defaults_to_student(client):
    res = client.post(
        "/api/auth/register",
        json={"email": "eleve@tutorat.fr", "name": "Tom", "password": "secret1234"},
    )
    assert res.json()["roles"] == ["student"]


def test_register_duplicate_email(client, student):
    res = client.post(
        "/api/auth/register",
        json={"email": student.email, "name": "Doublon", "password": "secret1234"},
    )
    assert res.status_code == 400
    assert res.json()["error"] == "BUSINESS_RULE_ERROR"


def test_register_cannot_self_assign_admin(client, db):
    res = client.post(
        "/api/auth/register",
        json={"email": "pirate@tutorat.fr", "name": "Pirate", "password": "secret1234", "role": "admin"},
    )
    assert res.status_code == 422
    assert db.query(User).count() == 0


def test_login_wrong_password(client, student):
    res = client.post("/api/auth/login", json={"email": student.email, "password": "mauvais-mot"})
    assert res.status_code == 401


def test_expired_token_is_rejected(client, student):
    token = create_access_token({"sub": student.email}, expires_delta=timedelta(minutes=-1))
    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["message"] == "Session expirée, veuillez vous reconnecter."


def test_inactive_user_is_rejected(client, db, student, auth_headers):
    student.is_active = False
    db.commit()
    res = client.get("/api/auth/me", headers=auth_headers(student))
    assert res.status_code == 401


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
