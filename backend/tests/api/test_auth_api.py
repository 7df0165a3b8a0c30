"""Auth endpoints end to end through the Flask test client."""

from tests.factories.user import ClientFactory

BASE = "/api/v1/auth"


def test_register_login_whoami_logout(client, session):
    resp = client.post(
        f"{BASE}/register",
        json={
            "username": "newcoach",
            "password": "longpassword",
            "role": "coach",
            "email": "new@coach.io",
            "profile": {"bio": "Strength coach"},
        },
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["profile"]["bio"] == "Strength coach"
    assert "password" not in resp.get_json()["data"]

    resp = client.post(f"{BASE}/login", json={"username": "newcoach", "password": "longpassword"})
    assert resp.status_code == 200
    body = resp.get_json()["data"]
    assert body["token_type"] == "Bearer"
    headers = {"Authorization": f"Bearer {body['access_token']}"}

    me = client.get(f"{BASE}/whoami", headers=headers)
    assert me.status_code == 200
    assert me.get_json()["data"]["role"] == "coach"

    assert client.post(f"{BASE}/logout", headers=headers).status_code == 200

    revoked = client.get(f"{BASE}/whoami", headers=headers)
    assert revoked.status_code == 401
    assert revoked.mimetype == "application/problem+json"


def test_register_validation_problem(client, session):
    resp = client.post(f"{BASE}/register", json={"username": "ab", "role": "client"})
    assert resp.status_code == 422
    problem = resp.get_json()
    assert problem["code"] == "validation_error"
    assert {"username", "password"} <= set(problem["details"]["errors"])


def test_register_duplicate_username_conflicts(client, session):
    ClientFactory(username="dupe")
    session.commit()

    resp = client.post(
        f"{BASE}/register", json={"username": "dupe", "password": "longpassword", "role": "client"}
    )
    assert resp.status_code == 409


def test_login_wrong_password(client, session):
    ClientFactory(username="jamie", password="rightpassword")
    session.commit()

    resp = client.post(f"{BASE}/login", json={"username": "jamie", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "unauthorized"


def test_whoami_requires_token(client, session):
    resp = client.get(f"{BASE}/whoami")
    assert resp.status_code == 401
    assert "request_id" in resp.get_json()
