"""Tests for the session endpoints."""

from conftest import OTHER_TRAINER_ID, TRAINER_ID, bearer, create_test_token
from fakes import backend_error


class TestMe:
    def test_superadmin(self, client, superadmin_headers):
        response = client.get("/api/auth/me", headers=superadmin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["is_superadmin"] is True
        assert body["profile"]["role"] == "superadmin"
        assert body["profile"]["source"] == "seed_email"
        assert body["tenant_mode"] == "simulated"
        assert body["tenant_schema"] is None

    def test_trainer(self, client, trainer_headers):
        body = client.get("/api/auth/me", headers=trainer_headers).json()

        assert body["is_superadmin"] is False
        assert body["profile"]["role"] == "trainer"
        assert body["profile"]["full_name"] == "Coach Carter"
        assert body["tenant_ready"] is True
        assert body["tenant_mode"] == "live"
        assert body["tenant_schema"] == "pt_" + TRAINER_ID.replace("-", "_")

    def test_player_binds_to_trainer_schema(self, client, player_headers):
        body = client.get("/api/auth/me", headers=player_headers).json()
        assert body["profile"]["role"] == "player"
        assert body["profile"]["trainer_id"] == TRAINER_ID
        assert body["tenant_schema"] == "pt_" + TRAINER_ID.replace("-", "_")

    def test_unmatched_principal_is_unresolved(self, client, stranger_headers):
        body = client.get("/api/auth/me", headers=stranger_headers).json()
        assert body["profile"]["role"] == "unresolved"
        assert body["is_superadmin"] is False
        assert body["tenant_ready"] is False

    def test_superadmins_table_grants_superadmin(self, client, fake_db):
        fake_db.seed("superadmins", [{"id": OTHER_TRAINER_ID, "email": "ops@example.com"}])
        headers = bearer(create_test_token(OTHER_TRAINER_ID, "ops@example.com"))

        body = client.get("/api/auth/me", headers=headers).json()

        assert body["is_superadmin"] is True
        assert body["profile"]["source"] == "table"


class TestAuthentication:
    def test_missing_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["error"] == "MISSING_TOKEN"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_expired_token(self, client):
        response = client.get("/api/auth/me", headers=bearer(create_test_token(TRAINER_ID, expired=True)))
        assert response.status_code == 401
        assert response.json()["error"] == "TOKEN_EXPIRED"

    def test_token_signed_with_another_secret(self, client):
        token = create_test_token(TRAINER_ID, secret="not-the-project-secret-at-all")
        response = client.get("/api/auth/me", headers=bearer(token))
        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_TOKEN"


class TestSignUp:
    def test_creates_trainer_and_schema(self, client, fake_db):
        response = client.post(
            "/api/auth/sign-up",
            json={"email": "new.coach@example.com", "password": "secret123", "full_name": "New Coach"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["trainer_created"] is True
        assert body["provisioned"] is True
        assert body["errors"] == []
        trainer_id = body["principal"]["id"]
        assert any(r["id"] == trainer_id for r in fake_db.rows("trainers"))
        name, params = fake_db.rpc_calls[0]
        assert name == "execute_sql"
        assert trainer_id.replace("-", "_") in params["sql"]

    def test_reports_provisioning_failure(self, client, fake_db):
        fake_db.rpc_results["execute_sql"] = backend_error("function execute_sql does not exist")
        fake_db.rpc_results["create_tenant_schema"] = backend_error("function create_tenant_schema does not exist")

        response = client.post(
            "/api/auth/sign-up",
            json={"email": "new.coach@example.com", "password": "secret123", "full_name": "New Coach"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["trainer_created"] is True
        assert body["provisioned"] is False
        assert len(body["errors"]) == 2

    def test_validation(self, client):
        response = client.post("/api/auth/sign-up", json={"email": "not-an-email", "password": "x", "full_name": ""})
        assert response.status_code == 422
