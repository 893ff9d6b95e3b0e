"""
Integration tests for authentication flows.

Tests cover:
1. Register -> 201, {id, email}, welcome job queued
2. Register validation -> Missing email / Missing password / Already exist
3. Connect with Basic credentials -> token
4. Access /users/me with X-Token -> 200
5. Disconnect -> 204, token no longer resolves
6. Wrong password / malformed header -> 401
7. Expired session -> 401

Uses TestClient (sync) with in-memory stores.
"""

from fastapi.testclient import TestClient

from apps.api.jobs.dispatcher import WelcomeJob
from tests.helpers import basic_auth, token_header

# =============================================================================
# Test Data
# =============================================================================

TEST_USER = {
    "email": "bob@dylan.com",
    "password": "toto1234!",
}


# =============================================================================
# Helper Functions
# =============================================================================


def register_user(client: TestClient, user_data: dict | None = None):
    """Register a user and return the response."""
    return client.post("/users", json=user_data or TEST_USER)


def connect(client: TestClient, email: str, password: str):
    """Connect and return the response."""
    return client.get("/connect", headers=basic_auth(email, password))


# =============================================================================
# Registration
# =============================================================================


class TestRegister:
    def test_register_returns_id_and_email(self, client: TestClient, dispatcher):
        response = register_user(client)

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"id", "email"}
        assert body["email"] == TEST_USER["email"]

    def test_register_never_returns_password(self, client: TestClient):
        body = register_user(client).json()

        assert "password" not in body
        assert "password_hash" not in body

    def test_register_queues_welcome_job(self, client: TestClient, dispatcher):
        body = register_user(client).json()

        assert len(dispatcher.jobs) == 1
        job = dispatcher.jobs[0]
        assert isinstance(job, WelcomeJob)
        assert str(job.user_id) == body["id"]

    def test_missing_email(self, client: TestClient):
        response = register_user(client, {"password": "toto1234!"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing email"}

    def test_missing_password(self, client: TestClient):
        response = register_user(client, {"email": "bob@dylan.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing password"}

    def test_email_checked_before_password(self, client: TestClient):
        response = register_user(client, {})

        assert response.json() == {"error": "Missing email"}

    def test_duplicate_email(self, client: TestClient, dispatcher):
        register_user(client)
        response = register_user(client)

        assert response.status_code == 400
        assert response.json() == {"error": "Already exist"}
        assert len(dispatcher.jobs) == 1


# =============================================================================
# Sessions
# =============================================================================


class TestConnect:
    def test_connect_returns_token(self, client: TestClient):
        register_user(client)
        response = connect(client, TEST_USER["email"], TEST_USER["password"])

        assert response.status_code == 200
        token = response.json()["token"]
        assert isinstance(token, str) and token

    def test_each_connect_issues_distinct_token(self, client: TestClient):
        register_user(client)
        first = connect(client, TEST_USER["email"], TEST_USER["password"]).json()
        second = connect(client, TEST_USER["email"], TEST_USER["password"]).json()

        assert first["token"] != second["token"]

    def test_session_stored_with_24h_ttl(self, client: TestClient, fake_redis):
        register_user(client)
        token = connect(client, TEST_USER["email"], TEST_USER["password"]).json()["token"]

        assert fake_redis.ttl(f"auth_{token}") == 24 * 60 * 60

    def test_wrong_password(self, client: TestClient):
        register_user(client)
        response = connect(client, TEST_USER["email"], "wrong")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_unknown_email(self, client: TestClient):
        response = connect(client, "nobody@example.com", "whatever")

        assert response.status_code == 401

    def test_missing_header(self, client: TestClient):
        response = client.get("/connect")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_malformed_header(self, client: TestClient):
        register_user(client)
        for header in ("Bearer abc", "Basic", "Basic !!!notbase64", "Basic Ym9i"):
            response = client.get("/connect", headers={"Authorization": header})
            assert response.status_code == 401, header


class TestMe:
    def test_me_returns_user(self, client: TestClient):
        user = register_user(client).json()
        token = connect(client, TEST_USER["email"], TEST_USER["password"]).json()["token"]

        response = client.get("/users/me", headers=token_header(token))

        assert response.status_code == 200
        assert response.json() == {"id": user["id"], "email": TEST_USER["email"]}

    def test_me_without_token(self, client: TestClient):
        response = client.get("/users/me")

        assert response.status_code == 401

    def test_me_with_unknown_token(self, client: TestClient):
        response = client.get("/users/me", headers=token_header("not-a-token"))

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_me_after_expiry(self, client: TestClient, fake_redis, user_token):
        fake_redis.advance(24 * 60 * 60)

        response = client.get("/users/me", headers=token_header(user_token))

        assert response.status_code == 401

    def test_me_just_before_expiry(self, client: TestClient, fake_redis, user_token):
        fake_redis.advance(24 * 60 * 60 - 1)

        response = client.get("/users/me", headers=token_header(user_token))

        assert response.status_code == 200


class TestDisconnect:
    def test_disconnect_revokes_token(self, client: TestClient, user_token):
        response = client.get("/disconnect", headers=token_header(user_token))

        assert response.status_code == 204
        assert response.content == b""
        assert client.get("/users/me", headers=token_header(user_token)).status_code == 401

    def test_disconnect_twice(self, client: TestClient, user_token):
        client.get("/disconnect", headers=token_header(user_token))
        response = client.get("/disconnect", headers=token_header(user_token))

        assert response.status_code == 401

    def test_disconnect_without_token(self, client: TestClient):
        response = client.get("/disconnect")

        assert response.status_code == 401

    def test_disconnect_leaves_other_sessions(self, client: TestClient):
        register_user(client)
        first = connect(client, TEST_USER["email"], TEST_USER["password"]).json()["token"]
        second = connect(client, TEST_USER["email"], TEST_USER["password"]).json()["token"]

        client.get("/disconnect", headers=token_header(first))

        assert client.get("/users/me", headers=token_header(second)).status_code == 200
