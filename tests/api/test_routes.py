"""HTTP tests for the session, cart and order routes."""

import threading
from types import SimpleNamespace

import pytest
from conftest import FixedRandom, ManualScheduler
from fastapi.testclient import TestClient

from foodcart import create_app
from foodcart.configuration.settings import Configuration
from foodcart.models.storage.storage_entry import StorageEntry
from foodcart.routes.order.order import start_tracking

BURGER = {"productId": 1, "name": "Spicy Mango Burger", "unitPrice": 7.99}
FRIES = {"productId": 2, "name": "Crispy Lotus Fries", "unitPrice": 4.49}


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def app(configuration, scheduler):
    return create_app(configuration, scheduler=scheduler, rng=FixedRandom(0.9))


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def signed_in(client):
    client.post("/session/", json={"accountId": "1"})
    return client


def _submit(client, *items, notes=None):
    for item in items:
        client.post("/cart/items/", json=item)
    return client.post("/orders/", json={"notes": notes})


class TestSessionRoutes:
    def test_sign_in_and_out(self, client):
        assert client.get("/session/").json() == {"accountId": None}
        assert client.post("/session/", json={"accountId": "7"}).json() == {"accountId": "7"}
        assert client.get("/session/").json() == {"accountId": "7"}
        client.delete("/session/")
        assert client.get("/session/").json() == {"accountId": None}


class TestCartRoutes:
    def test_add_increments_quantity(self, client):
        client.post("/cart/items/", json=BURGER)
        response = client.post("/cart/items/", json=BURGER)
        body = response.json()
        assert len(body["lines"]) == 1
        assert body["lines"][0]["quantity"] == 2
        assert body["total"] == pytest.approx(15.98)
        assert body["totalItems"] == 2

    def test_update_and_remove(self, client):
        client.post("/cart/items/", json=BURGER)
        client.post("/cart/items/", json=FRIES)

        body = client.patch("/cart/items/2", json={"quantity": 3}).json()
        assert body["total"] == pytest.approx(7.99 + 3 * 4.49)

        body = client.patch("/cart/items/2", json={"quantity": 0}).json()
        assert [line["productId"] for line in body["lines"]] == [1]

        body = client.delete("/cart/items/1").json()
        assert body["lines"] == []

    def test_cancel_cart_clears_it(self, client):
        client.post("/cart/items/", json=BURGER)
        client.delete("/cart/items/")
        assert client.get("/cart/").json()["lines"] == []


class TestOrderRoutes:
    def test_submit_requires_account(self, client):
        client.post("/cart/items/", json=BURGER)
        response = client.post("/orders/", json={})
        assert response.status_code == 401
        assert "solution" in response.json()
        assert len(client.get("/cart/").json()["lines"]) == 1

    def test_submit_empty_cart_is_rejected(self, signed_in):
        response = signed_in.post("/orders/", json={})
        assert response.status_code == 400
        assert signed_in.get("/orders/").json() == []

    def test_submit_reports_unsaved_order_and_keeps_cart(self, app, signed_in, scheduler):
        StorageEntry.__table__.drop(app.state.db_engine)

        response = _submit(signed_in, BURGER)

        assert response.status_code == 503
        assert "solution" in response.json()
        assert len(signed_in.get("/cart/").json()["lines"]) == 1
        assert scheduler.jobs == {}

    def test_submit_creates_pending_order_and_clears_cart(self, signed_in):
        response = _submit(signed_in, BURGER, BURGER, notes="no onions")
        assert response.status_code == 200
        order = response.json()
        assert order["deliveryStatus"] == "Pending"
        assert order["total"] == pytest.approx(15.98)
        assert order["notes"] == "no onions"
        assert order["lineItems"] == [{"productId": 1, "name": "Spicy Mango Burger", "unitPrice": 7.99, "quantity": 2}]
        assert signed_in.get("/cart/").json()["lines"] == []
        assert signed_in.get("/orders/latest").json()["orderId"] == order["orderId"]

    def test_history_without_account_is_empty(self, client):
        assert client.get("/orders/").json() == []
        assert client.get("/orders/latest").status_code == 404

    def test_scheduled_progression_is_visible(self, signed_in, scheduler):
        order_id = _submit(signed_in, BURGER).json()["orderId"]

        scheduler.run_until(3)
        assert signed_in.get(f"/orders/{order_id}/progress").json() == {"status": "In Progress", "progress": 50}

        scheduler.run_all()
        assert signed_in.get("/orders/latest").json()["deliveryStatus"] == "Delivered"

    def test_tracking_follows_latest_order(self, signed_in, scheduler):
        _submit(signed_in, BURGER)
        tracking = signed_in.get("/orders/tracking").json()
        assert tracking["polling"] is True
        assert tracking["progress"] == 25

        scheduler.run_all()
        scheduler.tick("poll:1")
        tracking = signed_in.get("/orders/tracking").json()
        assert tracking["polling"] is False
        assert tracking["order"]["deliveryStatus"] == "Delivered"
        assert tracking["progress"] == 100

    def test_cancel_order(self, signed_in, scheduler):
        order_id = _submit(signed_in, BURGER).json()["orderId"]

        response = signed_in.post(f"/orders/{order_id}/cancel")
        assert response.json()["deliveryStatus"] == "Cancelled"

        scheduler.run_all()
        assert signed_in.get("/orders/latest").json()["deliveryStatus"] == "Cancelled"
        assert signed_in.post(f"/orders/{order_id}/cancel").status_code == 409

    def test_manual_status_update(self, signed_in):
        order_id = _submit(signed_in, BURGER).json()["orderId"]

        response = signed_in.patch(f"/orders/{order_id}/status", json={"status": "Out for Delivery"})
        assert response.json()["deliveryStatus"] == "Out for Delivery"

        signed_in.patch(f"/orders/{order_id}/status", json={"status": "Delivered"})
        response = signed_in.patch(f"/orders/{order_id}/status", json={"status": "Pending"})
        assert response.status_code == 409

    def test_unknown_order_returns_404(self, signed_in):
        assert signed_in.post("/orders/missing/cancel").status_code == 404
        assert signed_in.get("/orders/missing/print").status_code == 404

    def test_print_receipt(self, signed_in):
        order = _submit(signed_in, BURGER, BURGER, FRIES, notes="extra napkins").json()
        receipt = signed_in.get(f"/orders/{order['orderId']}/print").text

        assert f"ORDER #{order['orderId'][:8]}" in receipt
        assert "Spicy Mango Burger x 2" in receipt
        assert "$15.98" in receipt
        assert "$20.47" in receipt
        assert "Notes: extra napkins" in receipt

    def test_history_survives_restart(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'foodcart.db'}")

        with TestClient(create_app(Configuration(), scheduler=ManualScheduler())) as client:
            client.post("/session/", json={"accountId": "1"})
            order_id = _submit(client, BURGER).json()["orderId"]

        with TestClient(create_app(Configuration(), scheduler=ManualScheduler())) as client:
            assert client.get("/orders/").json() == []
            client.post("/session/", json={"accountId": "1"})
            orders = client.get("/orders/").json()
            assert [o["orderId"] for o in orders] == [order_id]
            assert orders[0]["deliveryStatus"] == "Pending"


class TestTracking:
    def test_concurrent_tracking_leaves_one_poller(self, app, scheduler):
        request = SimpleNamespace(app=app)
        barrier = threading.Barrier(8)
        started = []

        def track():
            barrier.wait()
            started.append(start_tracking(request, "1"))

        threads = [threading.Thread(target=track) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        running = [poller for poller in started if poller.running]
        assert running == [app.state.pollers["1"]]
        assert "poll:1" in scheduler.jobs
