from bson import ObjectId

from tests.conftest import PRODUCT_PAYLOAD, auth_header


def test_registration_always_starts_unverified(client, db):
    response = client.post(
        "/api/seller/register",
        json={
            "businessName": "Sneaky Shop",
            "email": "Sneaky@Example.com",
            "password": "s3cret-pass",
            "phone": "555-0101",
            "address": "2 Market Street",
            "verified": True,
        },
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["token"]
    assert body["seller"]["verified"] is False
    assert body["seller"]["email"] == "sneaky@example.com"
    assert "password" not in body["seller"]

    stored = db.sellers.find_one({"email": "sneaky@example.com"})
    assert stored["verified"] is False
    assert stored["password"] != "s3cret-pass"


def test_registration_requires_fields(client):
    response = client.post(
        "/api/seller/register", json={"email": "a@b.co", "password": "s3cret-pass"}
    )
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "validation_error"
    assert "businessName" in body["message"]


def test_registration_rejects_short_password(client):
    response = client.post(
        "/api/seller/register",
        json={
            "businessName": "Shop",
            "email": "a@b.co",
            "password": "123",
            "phone": "1",
            "address": "x",
        },
    )
    assert response.status_code == 400


def test_duplicate_email_conflicts_and_keeps_first_seller(
    client, db, register_seller
):
    first, _ = register_seller(email="dup@example.com", businessName="First Shop")
    response = client.post(
        "/api/seller/register",
        json={
            "businessName": "Second Shop",
            "email": "DUP@example.com",
            "password": "other-pass",
            "phone": "555-0199",
            "address": "9 Elsewhere",
        },
    )
    assert response.status_code == 409
    assert response.get_json()["error"] == "conflict"

    assert db.sellers.count_documents({"email": "dup@example.com"}) == 1
    stored = db.sellers.find_one({"_id": ObjectId(first["_id"])})
    assert stored["businessName"] == "First Shop"
    login = client.post(
        "/api/seller/login", json={"email": "dup@example.com", "password": "s3cret-pass"}
    )
    assert login.status_code == 200


def test_login(client, register_seller):
    seller, _ = register_seller()
    response = client.post(
        "/api/seller/login", json={"email": "SHOP@example.com", "password": "s3cret-pass"}
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["seller"]["_id"] == seller["_id"]
    assert body["token"]

    response = client.post(
        "/api/seller/login", json={"email": "shop@example.com", "password": "wrong-pass"}
    )
    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid email or password"


def test_unverified_seller_is_blocked_from_every_mutation(
    client, db, register_seller, verified_seller, create_product
):
    _, verified_token = verified_seller
    product = create_product(verified_token)
    _, pending_token = register_seller(email="pending@example.com")

    attempts = [
        client.post(
            "/api/seller/products", json=PRODUCT_PAYLOAD, headers=auth_header(pending_token)
        ),
        client.put(
            f"/api/seller/products/{product['_id']}",
            json={"price": 1},
            headers=auth_header(pending_token),
        ),
        client.delete(
            f"/api/seller/products/{product['_id']}", headers=auth_header(pending_token)
        ),
    ]
    for response in attempts:
        assert response.status_code == 403
        body = response.get_json()
        assert body["error"] == "not_verified"
        assert "admin approval" in body["message"]

    assert db.products.count_documents({}) == 1
    assert db.products.find_one({"_id": ObjectId(product["_id"])})["price"] == 89.5


def test_unverified_check_happens_before_product_lookup(client, register_seller):
    _, token = register_seller()
    response = client.put(
        f"/api/seller/products/{ObjectId()}", json={"price": 3}, headers=auth_header(token)
    )
    assert response.status_code == 403
    assert response.get_json()["error"] == "not_verified"


def test_approval_unlocks_product_creation(
    client, db, register_seller, approve, admin_token
):
    seller, token = register_seller(email="a@example.com")

    blocked = client.post(
        "/api/seller/products", json=PRODUCT_PAYLOAD, headers=auth_header(token)
    )
    assert blocked.status_code == 403
    assert blocked.get_json()["error"] == "not_verified"

    approve(seller["_id"])
    created = client.post(
        "/api/seller/products", json=PRODUCT_PAYLOAD, headers=auth_header(token)
    )
    assert created.status_code == 201
    product = created.get_json()
    assert product["sellerId"] == seller["_id"]
    assert product["rating"] == 0
    assert product["numReviews"] == 0

    stored_seller = db.sellers.find_one({"_id": ObjectId(seller["_id"])})
    assert stored_seller["products"] == [ObjectId(product["_id"])]

    other, other_token = register_seller(email="b@example.com")
    approve(other["_id"])
    response = client.put(
        f"/api/seller/products/{product['_id']}",
        json={"price": 1},
        headers=auth_header(other_token),
    )
    assert response.status_code == 403
    assert response.get_json()["error"] == "forbidden"


def test_rejection_takes_effect_on_next_request(
    client, verified_seller, admin_token
):
    seller, token = verified_seller
    client.put(
        f"/api/admin/sellers/{seller['_id']}/reject", headers=auth_header(admin_token)
    )
    response = client.post(
        "/api/seller/products", json=PRODUCT_PAYLOAD, headers=auth_header(token)
    )
    assert response.status_code == 403
    assert response.get_json()["error"] == "not_verified"


def test_create_ignores_client_supplied_owner(client, verified_seller):
    seller, token = verified_seller
    payload = dict(PRODUCT_PAYLOAD, sellerId=str(ObjectId()), rating=5, numReviews=900)
    response = client.post("/api/seller/products", json=payload, headers=auth_header(token))
    assert response.status_code == 201
    product = response.get_json()
    assert product["sellerId"] == seller["_id"]
    assert product["rating"] == 0
    assert product["numReviews"] == 0


def test_create_validates_product_fields(client, verified_seller):
    _, token = verified_seller
    invalid_payloads = [
        dict(PRODUCT_PAYLOAD, title="ab"),
        dict(PRODUCT_PAYLOAD, price=-1),
        dict(PRODUCT_PAYLOAD, category="weapons"),
        dict(PRODUCT_PAYLOAD, imageUrl=""),
        dict(PRODUCT_PAYLOAD, productDescription="too short"),
        dict(PRODUCT_PAYLOAD, companyDescription="short"),
        dict(PRODUCT_PAYLOAD, countInStock=-3),
    ]
    for payload in invalid_payloads:
        response = client.post(
            "/api/seller/products", json=payload, headers=auth_header(token)
        )
        assert response.status_code == 400, payload
        assert response.get_json()["error"] == "validation_error"


def test_owner_updates_product(client, verified_seller, create_product):
    seller, token = verified_seller
    product = create_product(token)
    response = client.put(
        f"/api/seller/products/{product['_id']}",
        json={"price": 75, "countInStock": 0, "sellerId": str(ObjectId())},
        headers=auth_header(token),
    )
    assert response.status_code == 200
    updated = response.get_json()
    assert updated["price"] == 75
    assert updated["countInStock"] == 0
    assert updated["title"] == PRODUCT_PAYLOAD["title"]
    assert updated["sellerId"] == seller["_id"]


def test_update_rejects_invalid_values(client, verified_seller, create_product):
    _, token = verified_seller
    product = create_product(token)
    response = client.put(
        f"/api/seller/products/{product['_id']}",
        json={"category": "weapons"},
        headers=auth_header(token),
    )
    assert response.status_code == 400


def test_update_missing_and_malformed_ids(client, verified_seller):
    _, token = verified_seller
    missing = client.put(
        f"/api/seller/products/{ObjectId()}", json={"price": 3}, headers=auth_header(token)
    )
    assert missing.status_code == 404
    malformed = client.put(
        "/api/seller/products/not-an-id", json={"price": 3}, headers=auth_header(token)
    )
    assert malformed.status_code == 400


def test_product_without_owner_cannot_be_mutated(client, db, verified_seller):
    _, token = verified_seller
    legacy_id = db.products.insert_one(
        {"title": "Legacy seed item", "price": 5, "category": "home"}
    ).inserted_id

    update = client.put(
        f"/api/seller/products/{legacy_id}", json={"price": 1}, headers=auth_header(token)
    )
    delete = client.delete(f"/api/seller/products/{legacy_id}", headers=auth_header(token))
    assert update.status_code == 403
    assert delete.status_code == 403
    assert db.products.find_one({"_id": legacy_id})["price"] == 5


def test_delete_removes_product_and_back_reference(
    client, db, verified_seller, register_seller, approve, create_product
):
    seller, token = verified_seller
    product = create_product(token)

    intruder, intruder_token = register_seller(email="intruder@example.com")
    approve(intruder["_id"])
    forbidden = client.delete(
        f"/api/seller/products/{product['_id']}", headers=auth_header(intruder_token)
    )
    assert forbidden.status_code == 403
    assert forbidden.get_json()["error"] == "forbidden"

    response = client.delete(
        f"/api/seller/products/{product['_id']}", headers=auth_header(token)
    )
    assert response.status_code == 200
    assert response.get_json()["message"] == "Product removed"
    assert db.products.count_documents({}) == 0
    assert db.sellers.find_one({"_id": ObjectId(seller["_id"])})["products"] == []


def test_profile_lists_products_and_updates(client, verified_seller, create_product):
    _, token = verified_seller
    product = create_product(token)

    profile = client.get("/api/seller/profile", headers=auth_header(token)).get_json()
    assert profile["verified"] is True
    assert [item["_id"] for item in profile["products"]] == [product["_id"]]

    response = client.put(
        "/api/seller/profile",
        json={"businessName": "Renamed Shop", "verified": False, "password": "new-pass-1"},
        headers=auth_header(token),
    )
    assert response.status_code == 200
    updated = response.get_json()
    assert updated["businessName"] == "Renamed Shop"
    assert updated["verified"] is True

    login = client.post(
        "/api/seller/login", json={"email": "shop@example.com", "password": "new-pass-1"}
    )
    assert login.status_code == 200


def test_seller_product_listing_is_scoped_to_owner(
    client, verified_seller, register_seller, approve, create_product
):
    _, token = verified_seller
    other, other_token = register_seller(email="other@example.com")
    approve(other["_id"])
    mine = create_product(token)
    create_product(other_token, title="Other seller item")

    response = client.get("/api/seller/products", headers=auth_header(token))
    assert [item["_id"] for item in response.get_json()] == [mine["_id"]]
