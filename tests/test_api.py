import unittest
from decimal import Decimal
from unittest import mock

import jwt
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from wms.config import Settings
from wms.database.base import Base
from wms.database.engine import create_db_engine
from wms.database.session import get_db, session_scope
from wms.main import app

JWT_SECRET = "jwt-secret-for-tests-0123456789abcdef"


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = create_db_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=self.engine)
        TestingSession = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

        def override_get_db():
            db = TestingSession()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def register(self, username="alice", password="wonderland"):
        response = self.client.post(
            "/api/register",
            json={"username": username, "password": password, "confirm_password": password},
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class AuthApiTest(ApiTestCase):
    def test_health_is_public(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
        self.assertEqual(response.json()["database"], "ok")

    def test_health_reports_unreachable_database(self):
        broken = mock.MagicMock()
        broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("disk I/O error"))

        def broken_db():
            yield broken

        app.dependency_overrides[get_db] = broken_db
        with self.assertLogs("wms.routers.health", level="WARNING"):
            response = self.client.get("/health")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "degraded")
        self.assertEqual(response.json()["database"], "unavailable")

    def test_api_requires_authentication(self):
        for path in ("/api/products", "/api/warehouses", "/api/dashboard/summary"):
            self.assertEqual(self.client.get(path).status_code, 401, path)

    def test_dashboard_page_redirects_to_login(self):
        response = self.client.get("/dashboard", follow_redirects=False)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/login")

    def test_register_logs_in_and_logout_ends_session(self):
        self.register()
        me = self.client.get("/api/user")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["username"], "alice")
        self.assertNotIn("password_hash", me.json())

        self.assertEqual(self.client.post("/api/logout").status_code, 204)
        self.assertEqual(self.client.get("/api/user").status_code, 401)

    def test_login_with_wrong_password(self):
        self.register()
        self.client.post("/api/logout")
        response = self.client.post("/api/login", json={"username": "alice", "password": "nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "AUTHENTICATION_FAILURE")

        response = self.client.post(
            "/api/login", json={"username": "alice", "password": "wonderland"}
        )
        self.assertEqual(response.status_code, 200)

    def test_duplicate_registration_conflicts(self):
        self.register()
        response = self.client.post(
            "/api/register", json={"username": "alice", "password": "another-one"}
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["code"], "CONSTRAINT_VIOLATION")

    def test_mismatched_confirmation_is_rejected(self):
        response = self.client.post(
            "/api/register",
            json={"username": "bob", "password": "secret1", "confirm_password": "secret2"},
        )
        self.assertEqual(response.status_code, 422)

    def test_html_login_form(self):
        self.register()
        self.client.post("/api/logout")
        self.assertEqual(self.client.get("/login").status_code, 200)

        failed = self.client.post("/login", data={"username": "alice", "password": "bad"})
        self.assertEqual(failed.status_code, 401)

        response = self.client.post(
            "/login",
            data={"username": "alice", "password": "wonderland"},
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 303)
        self.assertEqual(self.client.get("/dashboard").status_code, 200)

    def test_api_key_and_jwt_principals(self):
        settings = Settings(API_KEYS="test-key,other-key", JWT_SECRET=JWT_SECRET)
        with mock.patch("wms.core.security.get_settings", return_value=settings):
            ok = self.client.get("/api/products", headers={"X-API-Key": "test-key"})
            self.assertEqual(ok.status_code, 200)

            bad = self.client.get("/api/products", headers={"X-API-Key": "wrong"})
            self.assertEqual(bad.status_code, 401)

            token = jwt.encode({"uid": None}, JWT_SECRET, algorithm="HS256")
            bearer = self.client.get(
                "/api/products", headers={"Authorization": "Bearer {}".format(token)}
            )
            self.assertEqual(bearer.status_code, 200)

            forged = jwt.encode({"uid": 1}, "x" * 40, algorithm="HS256")
            rejected = self.client.get(
                "/api/products", headers={"Authorization": "Bearer {}".format(forged)}
            )
            self.assertEqual(rejected.status_code, 401)


class InventoryApiTest(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.register()
        response = self.client.post("/api/warehouses", json={"name": "Main"})
        self.assertEqual(response.status_code, 201, response.text)
        self.warehouse_id = response.json()["id"]
        response = self.client.post(
            "/api/products",
            json={"sku": "P1", "name": "Hammer", "cost": "2.50", "reorder_point": "10"},
        )
        self.assertEqual(response.status_code, 201, response.text)
        self.product_id = response.json()["id"]

    def move(self, direction, quantity):
        response = self.client.post(
            "/api/stock-movements",
            json={
                "product_id": self.product_id,
                "warehouse_id": self.warehouse_id,
                "direction": direction,
                "quantity": quantity,
            },
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def balance(self):
        response = self.client.get(
            "/api/inventory",
            params={"product_id": self.product_id, "warehouse_id": self.warehouse_id},
        )
        self.assertEqual(response.status_code, 200)
        rows = response.json()
        return Decimal(str(rows[0]["quantity"])) if rows else None

    def test_generated_warehouse_code(self):
        self.assertEqual(len(self.warehouse_id), 10)

    def test_movements_drive_the_balance(self):
        self.move("IN", 10)
        self.assertEqual(self.balance(), Decimal("10"))
        self.move("OUT", 3)
        self.assertEqual(self.balance(), Decimal("7"))
        self.move("OUT", 20)
        self.assertEqual(self.balance(), Decimal("-13"))

        listed = self.client.get("/api/stock-movements", params={"product_id": self.product_id})
        self.assertEqual([row["direction"] for row in listed.json()], ["OUT", "OUT", "IN"])

    def test_movement_is_stamped_with_the_session_user(self):
        movement = self.move("IN", 1)
        me = self.client.get("/api/user").json()
        self.assertEqual(movement["created_by"], me["id"])
        fetched = self.client.get("/api/stock-movements/{}".format(movement["id"]))
        self.assertEqual(fetched.status_code, 200)

    def test_invalid_movements_are_rejected(self):
        base = {"product_id": self.product_id, "warehouse_id": self.warehouse_id}
        zero = self.client.post("/api/stock-movements", json=dict(base, direction="IN", quantity=0))
        self.assertEqual(zero.status_code, 422)
        sideways = self.client.post(
            "/api/stock-movements", json=dict(base, direction="UP", quantity=1)
        )
        self.assertEqual(sideways.status_code, 422)
        unknown = self.client.post(
            "/api/stock-movements",
            json={"product_id": 9999, "warehouse_id": self.warehouse_id, "direction": "IN", "quantity": 1},
        )
        self.assertEqual(unknown.status_code, 409)

    def test_movement_listing_needs_a_filter(self):
        self.assertEqual(self.client.get("/api/stock-movements").status_code, 400)

    def test_missing_entities_are_404(self):
        self.assertEqual(self.client.get("/api/products/9999").status_code, 404)
        self.assertEqual(self.client.get("/api/stock-movements/9999").status_code, 404)
        self.assertEqual(self.client.get("/api/warehouses/NOPE").status_code, 404)

    def test_product_search_and_soft_delete(self):
        self.assertEqual(len(self.client.get("/api/products", params={"q": "ham"}).json()), 1)
        self.assertEqual(self.client.get("/api/products", params={"q": "zzz"}).json(), [])
        self.assertEqual(self.client.get("/api/products/sku/P1").json()["id"], self.product_id)

        deleted = self.client.delete("/api/products/{}".format(self.product_id))
        self.assertEqual(deleted.status_code, 204)
        self.assertEqual(
            self.client.get("/api/products/{}".format(self.product_id)).status_code, 404
        )
        self.assertEqual(
            self.client.delete("/api/products/{}".format(self.product_id)).status_code, 404
        )

    def test_duplicate_sku_conflicts(self):
        response = self.client.post("/api/products", json={"sku": "P1", "name": "Again"})
        self.assertEqual(response.status_code, 409)

    def test_dashboard_endpoints(self):
        self.move("IN", 10)
        self.move("OUT", 3)

        value = self.client.get("/api/dashboard/inventory-value").json()
        self.assertEqual(Decimal(str(value["total_value"])), Decimal("17.5"))

        low = self.client.get("/api/dashboard/low-stock").json()
        self.assertEqual([item["product"]["sku"] for item in low], ["P1"])
        self.assertEqual(Decimal(str(low[0]["inventory"]["quantity"])), Decimal("7"))

        categories = self.client.get("/api/dashboard/inventory-by-category").json()
        self.assertEqual(categories[0]["category"], "Uncategorized")

        trends = self.client.get("/api/dashboard/order-trends", params={"months": 3}).json()
        self.assertEqual(len(trends), 3)

        summary = self.client.get("/api/dashboard/summary")
        self.assertEqual(summary.status_code, 200)
        self.assertEqual(summary.json()["low_stock_count"], 1)
        self.assertEqual(len(summary.json()["recent_movements"]), 2)

        self.move("IN", 8)
        self.assertEqual(self.client.get("/api/dashboard/low-stock").json(), [])
        self.assertEqual(self.client.get("/dashboard").status_code, 200)

    def test_orders_with_items(self):
        response = self.client.post(
            "/api/orders",
            json={
                "order_type": "PURCHASE",
                "warehouse_id": self.warehouse_id,
                "items": [{"product_id": self.product_id, "quantity": "4", "unit_price": "2.50"}],
            },
        )
        self.assertEqual(response.status_code, 201, response.text)
        order = response.json()
        self.assertEqual(len(order["items"]), 1)
        self.assertEqual(Decimal(str(order["total_amount"])), Decimal("10"))

        fetched = self.client.get("/api/orders/{}".format(order["id"])).json()
        self.assertEqual(fetched["order_number"], order["order_number"])

        self.assertEqual(self.client.delete("/api/orders/{}".format(order["id"])).status_code, 204)
        self.assertEqual(self.client.get("/api/orders/{}".format(order["id"])).status_code, 404)

    def test_reconcile_endpoint(self):
        self.move("IN", 5)
        response = self.client.post("/api/stock-movements/reconcile", params={"dry_run": "true"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"dry_run": True, "corrections": []})


class SessionScopeTest(unittest.TestCase):
    def test_session_is_closed_even_when_the_block_fails(self):
        session = mock.MagicMock()
        factory = mock.MagicMock(return_value=session)
        with self.assertRaises(RuntimeError):
            with session_scope(factory) as db:
                self.assertIs(db, session)
                raise RuntimeError("boom")
        session.close.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
