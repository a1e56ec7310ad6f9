import pytest

from reports_api.routers import auth


@pytest.fixture
def google_configured(monkeypatch):
    monkeypatch.setattr(auth, "GOOGLE_CLIENT_ID", "test-client-id")
    monkeypatch.setattr(auth, "JWT_SECRET", "test-jwt-secret")


def fake_verifier(idinfo):
    def verify(token, request, client_id):
        assert client_id == "test-client-id"
        if token != "valid-token":
            raise ValueError("bad token")
        return idinfo
    return verify


def test_google_auth_provisions_user_and_issues_token(client, google_configured, monkeypatch):
    idinfo = {"sub": "1234", "email": "ana@example.com", "name": "Ana", "picture": "https://img.example.com/a.png"}
    monkeypatch.setattr(auth.id_token, "verify_oauth2_token", fake_verifier(idinfo))

    res = client.post("/auth/google", json={"id_token": "valid-token"})

    assert res.status_code == 200
    body = res.json()
    assert body["user"]["email"] == "ana@example.com"

    claims = auth.decode_access_token(body["access_token"])
    assert claims["sub"] == str(body["user"]["id"])
    assert claims["email"] == "ana@example.com"

    # same Google account, same row
    again = client.post("/auth/google", json={"id_token": "valid-token"})
    assert again.json()["user"]["id"] == body["user"]["id"]

    # and the email-based flow sees the same user
    legacy = client.post("/users/google-login", json={"email": "ana@example.com"})
    assert legacy.json()["user"]["id"] == body["user"]["id"]


def test_google_auth_invalid_token(client, google_configured, monkeypatch):
    monkeypatch.setattr(auth.id_token, "verify_oauth2_token", fake_verifier({}))

    res = client.post("/auth/google", json={"id_token": "forged"})

    assert res.status_code == 401


def test_google_auth_token_without_email(client, google_configured, monkeypatch):
    monkeypatch.setattr(auth.id_token, "verify_oauth2_token", fake_verifier({"sub": "1"}))

    res = client.post("/auth/google", json={"id_token": "valid-token"})

    assert res.status_code == 400


def test_google_auth_not_configured(client, monkeypatch):
    monkeypatch.setattr(auth, "GOOGLE_CLIENT_ID", None)

    res = client.post("/auth/google", json={"id_token": "valid-token"})

    assert res.status_code == 503


def test_google_auth_refuses_without_jwt_secret(client, google_configured, monkeypatch):
    idinfo = {"sub": "1234", "email": "ana@example.com"}
    monkeypatch.setattr(auth.id_token, "verify_oauth2_token", fake_verifier(idinfo))
    monkeypatch.setattr(auth, "JWT_SECRET", None)

    res = client.post("/auth/google", json={"id_token": "valid-token"})

    assert res.status_code == 503
    assert "access_token" not in res.json()
