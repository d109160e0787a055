"""Tests for the trainer route tree."""

from conftest import TRAINER_ID
from fakes import backend_error

from modules.tenants.schema import tenant_schema_name

SCHEMA = tenant_schema_name(TRAINER_ID)


def seed_shop(fake_db):
    fake_db.seed(
        "shop_items",
        [
            {"id": "ball", "name": "Match ball", "price": 25.0,
             "category": "equipment", "active": True, "created_at": "2024-01-02"},
            {"id": "shirt", "name": "Training shirt", "price": 15.0,
             "category": "apparel", "active": True, "created_at": "2024-01-03"},
            {"id": "old", "name": "Old cones", "price": 3.0,
             "category": "equipment", "active": False, "created_at": "2024-01-01"},
        ],
    )


class TestAccess:
    def test_unresolved_principal_is_refused(self, client, stranger_headers):
        response = client.get("/api/trainer/players", headers=stranger_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "PROFILE_NOT_RESOLVED"

    def test_superadmin_gets_sample_players(self, client, superadmin_headers):
        body = client.get("/api/trainer/players", headers=superadmin_headers).json()
        assert body["simulated"] is True
        assert body["reason"] == "superadmin_preview"
        assert len(body["data"]) == 3

    def test_player_reads_trainer_schema(self, client, player_headers, fake_db):
        fake_db.seed("players", [{"id": "p1", "name": "Ana"}], schema=SCHEMA)
        body = client.get("/api/trainer/players", headers=player_headers).json()
        assert body["simulated"] is False
        assert [p["id"] for p in body["data"]] == ["p1"]


class TestPlayers:
    def test_list_is_live_and_empty(self, client, trainer_headers):
        body = client.get("/api/trainer/players", headers=trainer_headers).json()
        assert body["simulated"] is False
        assert body["data"] == []

    def test_create_and_update(self, client, trainer_headers, fake_db):
        response = client.post(
            "/api/trainer/players", json={"name": "Rui", "position": "Goalkeeper"}, headers=trainer_headers
        )
        assert response.status_code == 201
        player_id = fake_db.rows("players", schema=SCHEMA)[0]["id"]

        response = client.patch(
            f"/api/trainer/players/{player_id}", json={"position": "Defender"}, headers=trainer_headers
        )
        assert response.status_code == 200
        assert fake_db.rows("players", schema=SCHEMA)[0]["position"] == "Defender"

    def test_unknown_player(self, client, trainer_headers):
        response = client.patch("/api/trainer/players/nope", json={"name": "X"}, headers=trainer_headers)
        assert response.status_code == 404

    def test_create_validation(self, client, trainer_headers):
        assert client.post("/api/trainer/players", json={"name": ""}, headers=trainer_headers).status_code == 422

    def test_homework(self, client, trainer_headers, fake_db):
        response = client.post(
            "/api/trainer/homework",
            json={"title": "Juggling", "due_date": "2999-01-01T00:00:00Z"},
            headers=trainer_headers,
        )
        assert response.status_code == 201
        body = client.get("/api/trainer/homework", params={"active": True}, headers=trainer_headers).json()
        assert [h["title"] for h in body["data"]] == ["Juggling"]

    def test_dashboard(self, client, trainer_headers, fake_db):
        fake_db.seed("players", [{"id": "p1", "name": "Ana"}], schema=SCHEMA)
        fake_db.seed("orders", [{"id": "o1", "total_amount": 30.0, "paid": False}], schema=SCHEMA)

        body = client.get("/api/trainer/dashboard", headers=trainer_headers).json()

        assert body["total_players"] == 1
        assert body["pending_payments"] == 1
        assert body["pending_total"] == 30.0
        assert body["simulated"] is False


class TestShop:
    def test_browse_active_items(self, client, trainer_headers, fake_db):
        seed_shop(fake_db)
        names = {i["name"] for i in client.get("/api/trainer/shop", headers=trainer_headers).json()}
        assert names == {"Match ball", "Training shirt"}

    def test_categories(self, client, trainer_headers, fake_db):
        seed_shop(fake_db)
        response = client.get("/api/trainer/shop/categories", headers=trainer_headers)
        assert response.json() == ["apparel", "equipment"]

    def test_checkout(self, client, trainer_headers, fake_db):
        seed_shop(fake_db)

        response = client.post(
            "/api/trainer/shop/checkout",
            json={"lines": [{"item_id": "ball", "quantity": 2}, {"item_id": "shirt", "quantity": 1}]},
            headers=trainer_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["order"]["total_amount"] == 65.0
        assert body["order"]["user_id"] == TRAINER_ID
        assert body["item_count"] == 3
        assert len(fake_db.rows("order_items")) == 2

    def test_checkout_empty_cart(self, client, trainer_headers):
        response = client.post("/api/trainer/shop/checkout", json={"lines": []}, headers=trainer_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "EMPTY_CART"

    def test_checkout_inactive_item(self, client, trainer_headers, fake_db):
        seed_shop(fake_db)
        response = client.post(
            "/api/trainer/shop/checkout", json={"lines": [{"item_id": "old"}]}, headers=trainer_headers
        )
        assert response.status_code == 404
        assert response.json()["error"] == "SHOP_ITEM_NOT_FOUND"

    def test_checkout_items_failure_reports_order(self, client, trainer_headers, fake_db):
        seed_shop(fake_db)
        fake_db.fail("order_items", action="insert", error=backend_error("permission denied"))

        response = client.post(
            "/api/trainer/shop/checkout", json={"lines": [{"item_id": "ball"}]}, headers=trainer_headers
        )

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "ORDER_FAILED"
        order_id = fake_db.rows("orders")[0]["id"]
        assert body["details"]["order_id"] == order_id


class TestAds:
    def test_no_active_ad(self, client, trainer_headers):
        response = client.get("/api/trainer/ads/active", headers=trainer_headers)
        assert response.status_code == 200
        assert response.json() is None

    def test_backend_failure_means_no_ad(self, client, trainer_headers, fake_db):
        fake_db.fail("ads")
        response = client.get("/api/trainer/ads/active", headers=trainer_headers)
        assert response.status_code == 200
        assert response.json() is None


class TestProfile:
    def test_update_syncs_display_name(self, client, trainer_headers, fake_db):
        response = client.patch(
            "/api/trainer/profile", json={"full_name": "Coach K", "bio": "UEFA A"}, headers=trainer_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["table"] == "trainers"
        assert body["metadata_synced"] is True
        assert fake_db.rows("trainers")[0]["full_name"] == "Coach K"
        assert fake_db.auth.admin.updated == [(TRAINER_ID, {"user_metadata": {"full_name": "Coach K"}})]

    def test_player_cannot_edit(self, client, player_headers):
        response = client.patch("/api/trainer/profile", json={"bio": "hi"}, headers=player_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "PROFILE_NOT_EDITABLE"

    def test_avatar_upload(self, client, trainer_headers, fake_db):
        response = client.post(
            "/api/trainer/profile/avatar",
            files={"file": ("me.jpg", b"jpeg", "image/jpeg")},
            headers=trainer_headers,
        )
        assert response.status_code == 201
        assert response.json()["path"].startswith(f"{TRAINER_ID}-")
