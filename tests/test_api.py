"""
HTTP endpoints
"""
from datetime import datetime, timedelta


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_api_status(client):
    assert client.get("/api/status").json()["status"] == "ok"


def test_customer_create_and_account_type_lookup(client):
    created = client.post("/api/customers", json={"name": "Ali", "phone": "+965 5555 0001"})
    assert created.status_code == 200
    assert created.json()["account_type"] == "Primary"

    lookup = client.get("/api/customers/account-type", params={"phone": "+965 5555 0001"})
    assert lookup.json()["account_type"] == "Secondary"
    assert lookup.json()["primary_customer_id"] == created.json()["id"]

    search = client.get("/api/customers/search", params={"q": "ali"})
    assert [c["name"] for c in search.json()] == ["Ali"]


def test_secondary_without_primary_is_400(client):
    response = client.post("/api/customers", json={"name": "Omar", "phone": "+965 1", "account_type": "Secondary"})
    assert response.status_code == 400


def test_missing_customer_is_404(client):
    assert client.get("/api/customers/999").status_code == 404


def test_measurement_provisions_computed(client, make_customer):
    customer = make_customer()
    response = client.post("/api/measurements", json={
        "customer_id": customer.id, "armhole": 20, "armhole_front": 11,
    })
    body = response.json()
    assert response.status_code == 200
    assert body["measurement_id"] == f"{customer.id}-1"
    assert float(body["armhole_provision"]) == 2.0


def test_start_order_offers_pending_draft(client, make_customer, make_order):
    ali = make_customer(name="Ali", phone="+965 5555 0001")
    make_order(ali, status="draft", id=100)

    response = client.post("/api/work-orders/start", json={"customer_id": ali.id})

    assert response.json()["pending"] is True
    assert [o["id"] for o in response.json()["orders"]] == [100]

    fresh = client.post("/api/work-orders/start", json={"customer_id": ali.id, "force_new": True})
    assert fresh.json()["draft"]["order_id"] == 101


def test_garment_batch_stock_error_is_400(client, make_customer, make_measurement, make_fabric):
    customer = make_customer()
    measurement = make_measurement(customer)
    fabric = make_fabric(real_stock="5")
    order = client.post("/api/work-orders", json={"customer_id": customer.id}).json()

    row = {
        "measurement_id": str(measurement.id),
        "fabric_source": "IN",
        "fabric_id": fabric.id,
        "fabric_length": "3.0",
        "delivery_date": (datetime.now() + timedelta(days=10)).isoformat(),
    }
    response = client.post(f"/api/work-orders/{order['id']}/garments", json={"garments": [row, row]})

    assert response.status_code == 400
    assert len(response.json()["detail"]) == 2


def test_confirmed_order_rejects_writes_with_409(client, make_customer, make_order):
    order = make_order(make_customer())
    response = client.post(f"/api/work-orders/{order.id}/shelf-items", json={"items": []})
    assert response.status_code == 409


def test_totals_preview(client, make_fabric, seed_prices):
    seed_prices()
    fabric = make_fabric(price_per_meter="2.000")
    response = client.post("/api/work-orders/totals/preview", json={
        "garments": [{"fabric_source": "IN", "fabric_id": fabric.id, "fabric_length": "3", "express": True}],
        "stitching_price": "9",
        "home_delivery": True,
        "discount_type": "flat",
        "discount_percentage": "10",
    })
    totals = response.json()
    # fabric 6 + stitching 9 + line 1 + delivery 5 + express 2 = 23, less 2.30
    assert totals["subtotal"] == 23.0
    assert totals["discount"] == 2.3
    assert totals["order_total"] == 20.7


def test_link_and_unlink_endpoints(client, make_customer, make_order):
    customer = make_customer()
    a, b = make_order(customer), make_order(customer)
    date = (datetime.now() + timedelta(days=14)).isoformat()

    linked = client.post("/api/links", json={"order_ids": [a.id, b.id], "primary_order_id": a.id, "delivery_date": date})
    assert linked.status_code == 200
    assert linked.json()["linked"] == [b.id]

    refused = client.post(f"/api/links/{b.id}/unlink", json={})
    assert refused.status_code == 400

    groups = client.get("/api/links/groups").json()
    assert groups["total"] == 1

    unlinked = client.post(f"/api/links/{b.id}/unlink", json={"delivery_date": date})
    assert unlinked.status_code == 200


def test_link_without_date_is_400(client, make_customer, make_order):
    customer = make_customer()
    a, b = make_order(customer), make_order(customer)
    response = client.post("/api/links", json={"order_ids": [a.id, b.id], "primary_order_id": a.id})
    assert response.status_code == 400
    assert "A revised delivery date is required" in response.json()["detail"]


def test_showroom_listing_and_reminder(client, make_customer, make_order):
    customer = make_customer()
    order = make_order(
        customer,
        production_stage="final_at_shop",
        delivery_date=datetime.now() - timedelta(days=3),
        order_total=20,
        paid=5,
    )

    listing = client.get("/api/showroom").json()
    assert listing["orders"][0]["delay_in_days"] == 3
    assert listing["orders"][0]["balance"] == 15.0

    reminder = client.post(f"/api/showroom/{order.id}/reminders", json={"kind": "r1", "notes": "Called, no answer"})
    assert reminder.status_code == 200
    bad = client.post(f"/api/showroom/{order.id}/reminders", json={"kind": "r9"})
    assert bad.status_code == 400

    stage = client.post(f"/api/showroom/{order.id}/stage", json={"production_stage": "order_collected"})
    assert stage.status_code == 200
    assert client.get("/api/showroom").json()["total"] == 0


def test_update_order_with_unknown_customer_is_400(client, make_customer):
    order = client.post("/api/work-orders", json={"customer_id": make_customer().id}).json()

    response = client.put(f"/api/work-orders/{order['id']}", json={"customer_id": 9999})

    assert response.status_code == 400
    assert response.json()["detail"] == "Customer 9999 not found"
    assert client.get(f"/api/work-orders/{order['id']}").status_code == 200


def test_single_garment_over_stock_is_400_and_confirm_keeps_stock(client, make_customer, make_measurement, make_fabric):
    customer = make_customer()
    measurement = make_measurement(customer)
    fabric = make_fabric(real_stock="5")
    order = client.post("/api/work-orders", json={"customer_id": customer.id}).json()
    row = {
        "measurement_id": str(measurement.id),
        "fabric_source": "IN",
        "fabric_id": fabric.id,
        "fabric_length": "50",
        "delivery_date": (datetime.now() + timedelta(days=10)).isoformat(),
    }

    over = client.post(f"/api/work-orders/{order['id']}/garments/single", json=row)
    assert over.status_code == 400
    assert "Available: 5.00m" in over.json()["detail"][0]

    ok = client.post(f"/api/work-orders/{order['id']}/garments/single", json=dict(row, fabric_length="4"))
    assert ok.status_code == 200
    assert ok.json()["garment_id"] == f"{order['id']}-1"


def test_preview_rejects_unknown_stitching_tier(client):
    response = client.post("/api/work-orders/totals/preview", json={"stitching_price": "123"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Stitching price must be 7 or 9"


def test_sales_order_and_history_endpoints(client, make_customer, make_shelf):
    customer = make_customer()
    product = make_shelf(stock=3, price="2.500")

    created = client.post("/api/orders/sales", json={
        "customer_id": customer.id,
        "items": [{"shelf_id": product.id, "quantity": 2}],
        "payment_type": "knet",
        "payment_ref_no": "K-991",
        "paid": "5",
    })
    assert created.status_code == 200
    assert created.json()["order_type"] == "SALES"
    assert created.json()["order_total"] == 5.0

    refused = client.post("/api/orders/sales", json={
        "customer_id": customer.id,
        "items": [{"shelf_id": product.id, "quantity": 2}],
        "payment_type": "cash",
    })
    assert refused.status_code == 400
    assert client.post("/api/orders/sales", json={"customer_id": 999}).status_code == 404

    history = client.get("/api/orders", params={"order_type": "SALES"}).json()
    assert history["total"] == 1
    assert history["orders"][0]["id"] == created.json()["id"]
    assert history["orders"][0]["num_of_garments"] == 0
