from configs import db
from db.models.b2b import B2B
from db.models.user import User, UserRole
from utils.auth import Actor, is_manager_or_above


def test_manager_capability_by_role(app):
    for role in (UserRole.SUPER_ADMIN, UserRole.ADMIN, UserRole.MANAGER):
        assert is_manager_or_above(User(role=role))
    assert not is_manager_or_above(User(role=UserRole.STAFF))
    assert not is_manager_or_above(None)


def test_actor_from_user(manager, staff):
    assert Actor.from_user(manager) == Actor(id=manager.id, is_manager=True)
    assert Actor.from_user(staff).is_manager is False


def test_api_requires_login(client):
    resp = client.get("/api/leads")
    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "unauthorized"


def test_login_rejects_bad_password(client, staff):
    resp = client.post("/auth/login", json={"username": "staff1", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "invalid_credentials"


def test_login_rejects_disabled_account(client, staff):
    staff.is_active = False
    db.session.commit()
    resp = client.post("/auth/login", json={"username": "staff1", "password": "secret"})
    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "account_disabled"


def test_me_and_logout(login, staff):
    client = login(staff)
    assert client.get("/auth/me").get_json()["data"]["username"] == "staff1"

    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401


def test_record_production_over_http(login, staff, material, product):
    client = login(staff)
    resp = client.post(
        "/api/manufacturing",
        json={
            "product_id": product.id,
            "material_id": material.id,
            "quantity_used": 4,
            "manufactured_qty": 20,
            "manufacturing_date": "2026-10-18",
        },
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["data"]["quantity_used"] == 4
    assert body["data"]["manufacturing_date"] == "2026-10-18"

    listed = client.get(f"/api/manufacturing/product/{product.id}").get_json()["data"]
    assert [log["id"] for log in listed] == [body["data"]["id"]]


def test_production_errors_map_to_status_codes(login, staff, material, product):
    client = login(staff)

    short = client.post(
        "/api/manufacturing",
        json={
            "product_id": product.id,
            "material_id": material.id,
            "quantity_used": 11,
            "manufactured_qty": 1,
        },
    )
    assert short.status_code == 400
    err = short.get_json()["error"]
    assert err["code"] == "insufficient_stock"
    assert err["details"]["available"] == 10.0

    missing = client.post(
        "/api/manufacturing",
        json={"product_id": 999, "material_id": material.id, "quantity_used": 1, "manufactured_qty": 1},
    )
    assert missing.status_code == 404
    assert missing.get_json()["error"]["code"] == "not_found"

    bad = client.post(
        "/api/manufacturing",
        json={"product_id": product.id, "material_id": material.id, "quantity_used": 0, "manufactured_qty": 1},
    )
    assert bad.status_code == 400
    assert bad.get_json()["error"]["code"] == "validation_error"


def test_reverse_over_http(login, staff, manager, material, product):
    client = login(staff)
    log_id = client.post(
        "/api/manufacturing",
        json={"product_id": product.id, "material_id": material.id, "quantity_used": 2, "manufactured_qty": 3},
    ).get_json()["data"]["id"]

    client.post("/auth/logout")
    client = login(manager)
    assert client.post(f"/api/manufacturing/{log_id}/reverse", json={}).status_code == 201
    again = client.post(f"/api/manufacturing/{log_id}/reverse", json={})
    assert again.status_code == 409
    assert client.get(f"/api/manufacturing/{log_id}").get_json()["data"]["reversed"] is True


def test_conversion_then_b2b_progress(login, staff, lead):
    client = login(staff)

    resp = client.put(f"/api/leads/{lead.id}", json={"converted": True, "remarks": "deal"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["converted"] is True

    records = client.get("/api/b2b").get_json()["data"]
    assert len(records) == 1
    assert records[0]["lead_id"] == lead.id
    assert records[0]["order_status"] == "OPEN"

    b2b_id = records[0]["id"]
    resp = client.put(
        f"/api/b2b/{b2b_id}",
        json={"total_order_value": 1000, "amount_received": 400, "amount_pending": 1},
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["amount_pending"] == 600.0

    resp = client.patch(f"/api/b2b/{b2b_id}", json={"amount_received": -5})
    assert resp.status_code == 400
    assert B2B.query.get(b2b_id).amount_received == 400


def test_staff_cannot_touch_someone_elses_lead(login, other_staff, lead):
    client = login(other_staff)
    resp = client.put(f"/api/leads/{lead.id}", json={"converted": True})
    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "forbidden"


def test_catalog_writes_need_a_manager(login, staff, manager):
    client = login(staff)
    resp = client.post("/api/materials", json={"name": "Glycerin", "unit": "L"})
    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "forbidden"

    client.post("/auth/logout")
    client = login(manager)
    resp = client.post("/api/materials", json={"name": "Glycerin", "unit": "L"})
    assert resp.status_code == 201
    material_id = resp.get_json()["data"]["id"]

    resp = client.post(f"/api/materials/{material_id}/receive", json={"quantity": "12.5"})
    assert resp.get_json()["data"]["current_quantity"] == 12.5

    resp = client.post(
        "/api/products", json={"name": "Glycerin Soap", "category": "Bath", "price": 99}
    )
    assert resp.status_code == 201


def test_admin_requires_admin_role(client, login, staff):
    assert client.get("/manage/").status_code == 401

    login(staff)
    assert client.get("/manage/").status_code == 403


def test_unknown_route_uses_error_envelope(login, staff):
    client = login(staff)
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "not_found"
