from datetime import datetime
from typing import Dict

from flask import g, jsonify
from pymongo.errors import DuplicateKeyError

from .credentials import ROLE_SELLER, check_secret, hash_secret, issue_token
from .errors import Conflict, NotFound, Unauthenticated, ValidationError
from .guards import seller_required, verified_seller_required
from .ownership import assert_ownership, attach_product, detach_product
from .serializers import serialize_product, serialize_seller
from .validation import (
    clean_text,
    is_valid_email,
    json_body,
    normalize_email,
    normalize_product_payload,
    parse_object_id,
    require_fields,
    validate_password,
)

SELLER_REQUIRED_FIELDS = ("businessName", "email", "password", "phone", "address")
PROFILE_FIELDS = ("businessName", "phone", "address", "description")


def register_seller_routes(app, db):
    def load_owned_product(product_id: str):
        object_id = parse_object_id(product_id, "product identifier")
        product_document = db.products.find_one({"_id": object_id})
        if not product_document:
            raise NotFound("Product not found")
        return product_document

    def populated_products(seller_document):
        product_ids = list(seller_document.get("products") or [])
        if not product_ids:
            return []
        by_id = {
            document["_id"]: document
            for document in db.products.find({"_id": {"$in": product_ids}})
        }
        return [
            serialize_product(by_id[product_id])
            for product_id in product_ids
            if product_id in by_id
        ]

    @app.route("/api/seller/register", methods=["POST"])
    def register_seller():
        payload = json_body()
        fields = require_fields(payload, SELLER_REQUIRED_FIELDS)
        email = normalize_email(fields["email"])
        password = str(payload.get("password", ""))

        if not is_valid_email(email):
            raise ValidationError("Please provide a valid email address.")
        validate_password(password, app.config["MIN_PASSWORD_LENGTH"])

        if db.sellers.find_one({"email": email}):
            raise Conflict("Seller account already exists with this email")

        timestamp = datetime.utcnow()
        seller_document = {
            "businessName": fields["businessName"],
            "email": email,
            "password": hash_secret(password),
            "phone": fields["phone"],
            "address": fields["address"],
            "description": clean_text(payload.get("description")),
            # Client-supplied verification state is ignored.
            "verified": False,
            "verificationDate": None,
            "products": [],
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        try:
            insert_result = db.sellers.insert_one(seller_document)
        except DuplicateKeyError:
            raise Conflict("Seller account already exists with this email")

        seller_document["_id"] = insert_result.inserted_id
        app.logger.info("Registered seller %s pending verification", email)

        return (
            jsonify(
                {
                    "token": issue_token(insert_result.inserted_id, ROLE_SELLER),
                    "seller": serialize_seller(seller_document),
                }
            ),
            201,
        )

    @app.route("/api/seller/login", methods=["POST"])
    def login_seller():
        payload = json_body()
        email = normalize_email(payload.get("email"))
        password = str(payload.get("password", ""))

        if not email or not password:
            raise ValidationError("Email and password are required.")

        seller = db.sellers.find_one({"email": email})
        if not seller or not check_secret(password, seller.get("password")):
            raise Unauthenticated("Invalid email or password")

        return jsonify(
            {
                "token": issue_token(seller["_id"], ROLE_SELLER),
                "seller": serialize_seller(seller),
            }
        )

    @app.route("/api/seller/profile", methods=["GET"])
    @seller_required
    def get_seller_profile():
        seller = g.identity
        return jsonify(serialize_seller(seller, products=populated_products(seller)))

    @app.route("/api/seller/profile", methods=["PUT"])
    @seller_required
    def update_seller_profile():
        seller = g.identity
        payload = json_body()

        updates: Dict[str, object] = {}
        for field in PROFILE_FIELDS:
            value = clean_text(payload.get(field))
            if value:
                updates[field] = value

        new_password = str(payload.get("password") or "")
        if new_password:
            validate_password(new_password, app.config["MIN_PASSWORD_LENGTH"])
            updates["password"] = hash_secret(new_password)

        updates["updatedAt"] = datetime.utcnow()
        db.sellers.update_one({"_id": seller["_id"]}, {"$set": updates})
        updated_seller = db.sellers.find_one({"_id": seller["_id"]})
        return jsonify(serialize_seller(updated_seller))

    @app.route("/api/seller/products", methods=["GET"])
    @seller_required
    def list_seller_products():
        cursor = db.products.find({"sellerId": g.identity["_id"]}).sort(
            "createdAt", -1
        )
        return jsonify([serialize_product(document) for document in cursor])

    @app.route("/api/seller/products", methods=["POST"])
    @verified_seller_required
    def create_seller_product():
        seller = g.identity
        fields, error = normalize_product_payload(json_body())
        if error:
            raise ValidationError(error)

        timestamp = datetime.utcnow()
        product_document = {
            **fields,
            "sellerId": seller["_id"],
            "rating": 0,
            "numReviews": 0,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }
        insert_result = db.products.insert_one(product_document)
        attach_product(db, seller["_id"], insert_result.inserted_id)

        created_product = db.products.find_one({"_id": insert_result.inserted_id})
        return jsonify(serialize_product(created_product)), 201

    @app.route("/api/seller/products/<product_id>", methods=["PUT"])
    @verified_seller_required
    def update_seller_product(product_id: str):
        product_document = load_owned_product(product_id)
        assert_ownership(product_document, g.identity["_id"], "update")

        updates, error = normalize_product_payload(json_body(), partial=True)
        if error:
            raise ValidationError(error)

        updates["updatedAt"] = datetime.utcnow()
        db.products.update_one({"_id": product_document["_id"]}, {"$set": updates})
        updated_product = db.products.find_one({"_id": product_document["_id"]})
        return jsonify(serialize_product(updated_product))

    @app.route("/api/seller/products/<product_id>", methods=["DELETE"])
    @verified_seller_required
    def delete_seller_product(product_id: str):
        product_document = load_owned_product(product_id)
        assert_ownership(product_document, g.identity["_id"], "delete")

        db.products.delete_one({"_id": product_document["_id"]})
        detach_product(db, g.identity["_id"], product_document["_id"])
        return jsonify({"message": "Product removed"})
