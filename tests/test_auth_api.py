from config.settings import settings
from live.workspace import registry


def test_signin_admin_issues_session_and_opens_workspace(client, db, seed_admin):
    resp = client.post("/auth/signin", json={"id_token": "firebase-token-admin-0001"})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["uid"] == "uid-admin"
    assert body["is_admin"] is True
    assert body["expires_in_sec"] == settings.SESSION_TTL_SEC

    sessions = db.collection("auth_sessions").docs
    assert len(sessions) == 1
    assert body["token"] not in sessions
    assert len(registry) == 1


def test_signin_non_admin_gets_session_without_workspace(client):
    resp = client.post("/auth/signin", json={"id_token": "firebase-token-staff-0001"})
    assert resp.status_code == 200
    assert resp.json()["is_admin"] is False
    assert len(registry) == 0


def test_signin_rejects_bad_token(client):
    resp = client.post("/auth/signin", json={"id_token": "not-a-real-firebase-token"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "invalid_id_token"


def test_signin_fails_closed_without_audience(client, monkeypatch):
    monkeypatch.setattr(settings, "FIREBASE_PROJECT_ID", "")
    monkeypatch.setattr(settings, "FIRESTORE_PROJECT_ID", "")
    resp = client.post("/auth/signin", json={"id_token": "firebase-token-admin-0001"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "auth_audience_not_configured"


def test_signout_revokes_session_and_closes_workspace(client, admin_headers):
    assert client.get("/auth/me", headers=admin_headers).json()["is_admin"] is True
    resp = client.post("/auth/signout", headers=admin_headers)
    assert resp.status_code == 200
    assert len(registry) == 0

    resp = client.get("/auth/me", headers=admin_headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "revoked_session"


def test_expired_and_missing_sessions(client, db, admin_headers):
    assert client.get("/auth/me").json()["detail"] == "missing_auth"
    assert client.get("/auth/me", headers={"Authorization": "Token abc"}).json()["detail"] == "invalid_auth_header"

    for doc in db.collection("auth_sessions").docs.values():
        doc["expires_at"] = 0
    resp = client.get("/auth/me", headers=admin_headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "expired_session"


def test_expired_session_drops_its_listeners(client, db, admin_headers):
    assert client.get("/ui/view", headers=admin_headers).json()["view"] == "admin"
    assert len(registry) == 1

    for doc in db.collection("auth_sessions").docs.values():
        doc["expires_at"] = 0
    assert client.get("/ui/view", headers=admin_headers).json()["view"] == "landing"
    assert len(registry) == 0
    assert db.collection("items").watches == []
    assert db.collection("regions").watches == []


def test_repeated_signin_keeps_one_live_view(client, db, seed_admin):
    for _ in range(3):
        resp = client.post("/auth/signin", json={"id_token": "firebase-token-admin-0001"})
        assert resp.status_code == 200
    assert len(registry) == 1
    assert len(db.collection("items").watches) == 1
    assert len(db.collection("regions").watches) == 1


def test_signout_survives_revoke_failure(client, db, admin_headers, caplog):
    db.collection("auth_sessions").fail_on = {"set"}
    resp = client.post("/auth/signout", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    assert len(registry) == 0
    assert any(r.getMessage() == "signout_error" for r in caplog.records)
