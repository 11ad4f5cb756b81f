import hmac
from datetime import datetime

from flask import g, jsonify, request
from pymongo.errors import DuplicateKeyError

from .credentials import ROLE_ADMIN, check_secret, hash_secret, issue_token
from .errors import Conflict, Forbidden, Unauthenticated, ValidationError
from .guards import admin_required, authenticate
from .moderation import approve_seller, dashboard_stats, delete_seller, reject_seller
from .serializers import serialize_admin, serialize_seller
from .validation import (
    clean_text,
    is_valid_email,
    json_body,
    normalize_email,
    require_fields,
    validate_password,
)

ADMIN_ROLE_TAGS = ("admin", "superadmin")


def register_admin_routes(app, db):
    def authorize_admin_registration(payload):
        """Gate admin creation.

        Once an admin exists only an admin may create another. Before that the
        first admin needs ``ADMIN_SETUP_TOKEN`` when one is configured.
        """
        if db.admins.find_one() is not None:
            authenticate(ROLE_ADMIN)
            return

        expected_token = app.config.get("ADMIN_SETUP_TOKEN") or ""
        if not expected_token:
            return

        supplied_token = (
            request.headers.get("X-Admin-Setup-Token")
            or clean_text(payload.get("setupToken"))
        )
        if not supplied_token or not hmac.compare_digest(
            supplied_token.encode("utf-8"), expected_token.encode("utf-8")
        ):
            raise Forbidden("A valid admin setup token is required.")

    @app.route("/api/admin/register", methods=["POST"])
    def register_admin():
        payload = json_body()
        authorize_admin_registration(payload)

        fields = require_fields(payload, ("name", "email", "password"))
        email = normalize_email(fields["email"])
        password = str(payload.get("password", ""))
        if not is_valid_email(email):
            raise ValidationError("Please provide a valid email address.")
        validate_password(password, app.config["MIN_PASSWORD_LENGTH"])

        role_tag = clean_text(payload.get("role")).lower() or "admin"
        if role_tag not in ADMIN_ROLE_TAGS:
            raise ValidationError("Role must be 'admin' or 'superadmin'.")

        if db.admins.find_one({"email": email}):
            raise Conflict("Admin already exists")

        admin_document = {
            "name": fields["name"],
            "email": email,
            "password": hash_secret(password),
            "role": role_tag,
            "createdAt": datetime.utcnow(),
        }
        try:
            insert_result = db.admins.insert_one(admin_document)
        except DuplicateKeyError:
            raise Conflict("Admin already exists")
        admin_document["_id"] = insert_result.inserted_id

        creator = g.get("identity")
        app.logger.info(
            "Registered admin %s (created by %s)",
            email,
            creator.get("email") if creator else "bootstrap",
        )

        return (
            jsonify(
                {
                    "token": issue_token(insert_result.inserted_id, ROLE_ADMIN),
                    "admin": serialize_admin(admin_document),
                }
            ),
            201,
        )

    @app.route("/api/admin/login", methods=["POST"])
    def login_admin():
        payload = json_body()
        email = normalize_email(payload.get("email"))
        password = str(payload.get("password", ""))

        if not email or not password:
            raise ValidationError("Email and password are required.")

        admin = db.admins.find_one({"email": email})
        if not admin or not check_secret(password, admin.get("password")):
            raise Unauthenticated("Invalid email or password")

        return jsonify(
            {
                "token": issue_token(admin["_id"], ROLE_ADMIN),
                "admin": serialize_admin(admin),
            }
        )

    @app.route("/api/admin/profile", methods=["GET"])
    @admin_required
    def get_admin_profile():
        return jsonify(serialize_admin(g.identity))

    @app.route("/api/admin/stats", methods=["GET"])
    @admin_required
    def get_dashboard_stats():
        return jsonify(dashboard_stats(db))

    @app.route("/api/admin/sellers", methods=["GET"])
    @admin_required
    def list_sellers():
        cursor = db.sellers.find().sort("createdAt", -1)
        return jsonify([serialize_seller(document) for document in cursor])

    @app.route("/api/admin/sellers/pending", methods=["GET"])
    @admin_required
    def list_pending_sellers():
        cursor = db.sellers.find({"verified": False}).sort("createdAt", -1)
        return jsonify([serialize_seller(document) for document in cursor])

    @app.route("/api/admin/sellers/<seller_id>/approve", methods=["PUT"])
    @admin_required
    def approve_seller_route(seller_id: str):
        seller = approve_seller(db, seller_id)
        app.logger.info(
            "Seller %s approved by %s", seller.get("email"), g.identity.get("email")
        )
        return jsonify(
            {"message": "Seller approved successfully", "seller": serialize_seller(seller)}
        )

    @app.route("/api/admin/sellers/<seller_id>/reject", methods=["PUT"])
    @admin_required
    def reject_seller_route(seller_id: str):
        seller = reject_seller(db, seller_id)
        app.logger.info(
            "Seller %s rejected by %s", seller.get("email"), g.identity.get("email")
        )
        return jsonify({"message": "Seller rejected", "seller": serialize_seller(seller)})

    @app.route("/api/admin/sellers/<seller_id>", methods=["DELETE"])
    @admin_required
    def delete_seller_route(seller_id: str):
        seller = delete_seller(db, seller_id)
        app.logger.info(
            "Seller %s deleted by %s", seller.get("email"), g.identity.get("email")
        )
        return jsonify({"message": "Seller deleted successfully"})
