import mongomock
import pytest

from marketplace import create_app

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"

PRODUCT_PAYLOAD = {
    "title": "Trail Running Shoes",
    "price": 89.5,
    "category": "sports",
    "imageUrl": "https://cdn.example.com/shoes.jpg",
    "productDescription": "Lightweight trail shoes with a grippy outsole.",
    "companyDescription": "Family-run outdoor gear shop.",
    "brand": "Peak",
    "countInStock": 12,
}


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db():
    return mongomock.MongoClient().marketplace


@pytest.fixture
def app(db):
    app = create_app(
        {
            "TESTING": True,
            "JWT_SECRET_KEY": TEST_SECRET,
            "ADMIN_SETUP_TOKEN": "",
            "FALLBACK_WHEN_EMPTY": False,
        },
        db=db,
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_seller(client):
    def _register(email="shop@example.com", **overrides):
        payload = {
            "businessName": "Corner Shop",
            "email": email,
            "password": "s3cret-pass",
            "phone": "555-0100",
            "address": "1 Market Street",
            "description": "Everyday goods",
        }
        payload.update(overrides)
        response = client.post("/api/seller/register", json=payload)
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return body["seller"], body["token"]

    return _register


@pytest.fixture
def admin_token(client):
    response = client.post(
        "/api/admin/register",
        json={"name": "Root Admin", "email": "admin@example.com", "password": "adm1n-pass"},
    )
    assert response.status_code == 201, response.get_json()
    return response.get_json()["token"]


@pytest.fixture
def approve(client, admin_token):
    def _approve(seller_id):
        response = client.put(
            f"/api/admin/sellers/{seller_id}/approve", headers=auth_header(admin_token)
        )
        assert response.status_code == 200, response.get_json()
        return response.get_json()["seller"]

    return _approve


@pytest.fixture
def verified_seller(register_seller, approve):
    seller, token = register_seller()
    approve(seller["_id"])
    return seller, token


@pytest.fixture
def create_product(client):
    def _create(token, **overrides):
        payload = dict(PRODUCT_PAYLOAD)
        payload.update(overrides)
        response = client.post(
            "/api/seller/products", json=payload, headers=auth_header(token)
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _create


@pytest.fixture
def register_customer(client):
    def _register(email="buyer@example.com"):
        response = client.post(
            "/api/auth/register",
            json={"name": "Bea Buyer", "email": email, "password": "buyer-pass"},
        )
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return body["user"], body["token"]

    return _register
