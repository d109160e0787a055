"""Tests for the health and readiness endpoints."""


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "1.0.0"}


def test_ready_probes_backend(client, fake_db):
    response = client.get("/api/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["database"] == "connected"
    assert body["cached_config"]["url"] == "https://fake.supabase.co"
    assert ("public", "trainers") in [(schema, spec.table) for schema, spec in fake_db.queries]


def test_ready_reports_unreachable_backend(client, fake_db):
    fake_db.fail("trainers", error=ConnectionError("connection refused"))

    response = client.get("/api/ready")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "not_ready"
    assert body["database"] == "error"
    assert "connection refused" in body["error"]
    assert body["cached_config"] is None


def test_ready_uses_last_result_unless_asked(client, fake_db):
    client.get("/api/ready")
    probes = len(fake_db.queries)

    client.get("/api/ready")
    assert len(fake_db.queries) == probes

    client.get("/api/ready", params={"recheck": True})
    assert len(fake_db.queries) == probes + 1
