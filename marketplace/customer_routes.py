from datetime import datetime

from flask import g, jsonify
from pymongo.errors import DuplicateKeyError

from .credentials import ROLE_CUSTOMER, check_secret, hash_secret, issue_token
from .errors import Conflict, Unauthenticated, ValidationError
from .guards import customer_required
from .serializers import serialize_customer
from .validation import (
    is_valid_email,
    json_body,
    normalize_email,
    require_fields,
    validate_password,
)


def register_customer_routes(app, db):
    @app.route("/api/auth/register", methods=["POST"])
    def register_customer():
        payload = json_body()
        fields = require_fields(payload, ("name", "email", "password"))
        email = normalize_email(fields["email"])
        password = str(payload.get("password", ""))

        if not is_valid_email(email):
            raise ValidationError("Please provide a valid email address.")
        validate_password(password, app.config["MIN_PASSWORD_LENGTH"])

        if db.users.find_one({"email": email}):
            raise Conflict("An account with this email already exists.")

        user_document = {
            "name": fields["name"],
            "email": email,
            "password": hash_secret(password),
            "createdAt": datetime.utcnow(),
        }
        try:
            insert_result = db.users.insert_one(user_document)
        except DuplicateKeyError:
            raise Conflict("An account with this email already exists.")
        user_document["_id"] = insert_result.inserted_id

        return (
            jsonify(
                {
                    "token": issue_token(insert_result.inserted_id, ROLE_CUSTOMER),
                    "user": serialize_customer(user_document),
                }
            ),
            201,
        )

    @app.route("/api/auth/login", methods=["POST"])
    def login_customer():
        payload = json_body()
        email = normalize_email(payload.get("email"))
        password = str(payload.get("password", ""))

        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = db.users.find_one({"email": email})
        if not user or not check_secret(password, user.get("password")):
            raise Unauthenticated("Invalid email or password")

        return jsonify(
            {
                "token": issue_token(user["_id"], ROLE_CUSTOMER),
                "user": serialize_customer(user),
            }
        )

    @app.route("/api/auth/profile", methods=["GET"])
    @customer_required
    def get_customer_profile():
        return jsonify(serialize_customer(g.identity))
