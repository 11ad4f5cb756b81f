import math
from datetime import datetime
from typing import Dict, List, Optional

from flask import g, jsonify

from .credentials import ROLE_ADMIN, ROLE_CUSTOMER
from .errors import Forbidden, NotFound, ValidationError
from .guards import admin_required, customer_required, roles_required
from .serializers import serialize_order
from .validation import clean_text, json_body, parse_object_id, require_fields

SHIPPING_ADDRESS_FIELDS = ("address", "city", "postalCode", "country")


def safe_int(value, default=0):
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(numeric) or numeric != int(numeric):
        return default
    return int(numeric)


def normalize_order_item(payload) -> Optional[Dict]:
    if not isinstance(payload, dict):
        return None

    product_identifier = (
        payload.get("product") or payload.get("productId") or payload.get("_id")
    )
    product_id = clean_text(product_identifier)
    if not product_id:
        return None

    raw_quantity = payload.get("qty", payload.get("quantity"))
    if isinstance(raw_quantity, bool):
        return None
    quantity = safe_int(raw_quantity, 0)
    if quantity < 1:
        return None
    return {"product_id": product_id, "qty": quantity}


def calculate_order_totals(items: List[Dict], tax_rate: float, shipping: float):
    items_price = round(sum(item["price"] * item["qty"] for item in items), 2)
    tax_price = round(items_price * tax_rate, 2)
    shipping_price = round(shipping, 2)
    return {
        "itemsPrice": items_price,
        "taxPrice": tax_price,
        "shippingPrice": shipping_price,
        "totalPrice": round(items_price + tax_price + shipping_price, 2),
    }


def register_order_routes(app, db):
    def load_order(order_id: str):
        object_id = parse_object_id(order_id, "order identifier")
        order_document = db.orders.find_one({"_id": object_id})
        if not order_document:
            raise NotFound("Order not found")
        return order_document

    def assert_order_access(order_document):
        if g.role == ROLE_ADMIN:
            return
        if order_document.get("user") != g.identity["_id"]:
            raise Forbidden("Not authorized to view this order")

    @app.route("/api/orders", methods=["POST"])
    @customer_required
    def create_order():
        payload = json_body()
        raw_items = payload.get("orderItems")
        if not isinstance(raw_items, list) or not raw_items:
            raise ValidationError("No order items")

        order_items = []
        for entry in raw_items:
            normalized_entry = normalize_order_item(entry)
            if not normalized_entry:
                raise ValidationError(
                    "Each order item needs a product and a quantity of at least 1."
                )
            object_id = parse_object_id(normalized_entry["product_id"], "product identifier")
            product_document = db.products.find_one({"_id": object_id})
            if not product_document:
                raise NotFound(f"Product {normalized_entry['product_id']} not found")

            order_items.append(
                {
                    "product": product_document["_id"],
                    "title": product_document.get("title", ""),
                    "imageUrl": product_document.get("imageUrl", ""),
                    # Prices always come from the catalog, never from the client.
                    "price": round(float(product_document.get("price", 0) or 0), 2),
                    "qty": normalized_entry["qty"],
                    "sellerId": product_document.get("sellerId"),
                }
            )

        address_payload = payload.get("shippingAddress")
        if not isinstance(address_payload, dict):
            raise ValidationError("A shipping address is required.")
        shipping_address = require_fields(address_payload, SHIPPING_ADDRESS_FIELDS)

        totals = calculate_order_totals(
            order_items,
            app.config["ORDER_TAX_RATE"],
            app.config["ORDER_SHIPPING_PRICE"],
        )
        order_document = {
            "user": g.identity["_id"],
            "orderItems": order_items,
            "shippingAddress": shipping_address,
            "paymentMethod": clean_text(payload.get("paymentMethod")) or "card",
            **totals,
            "isPaid": False,
            "paidAt": None,
            "isDelivered": False,
            "createdAt": datetime.utcnow(),
        }
        insert_result = db.orders.insert_one(order_document)
        order_document["_id"] = insert_result.inserted_id
        return jsonify(serialize_order(order_document)), 201

    @app.route("/api/orders", methods=["GET"])
    @admin_required
    def list_all_orders():
        cursor = db.orders.find().sort("createdAt", -1)
        return jsonify([serialize_order(document) for document in cursor])

    @app.route("/api/orders/myorders", methods=["GET"])
    @customer_required
    def list_my_orders():
        cursor = db.orders.find({"user": g.identity["_id"]}).sort("createdAt", -1)
        return jsonify([serialize_order(document) for document in cursor])

    @app.route("/api/orders/<order_id>", methods=["GET"])
    @roles_required(ROLE_CUSTOMER, ROLE_ADMIN)
    def get_order(order_id: str):
        order_document = load_order(order_id)
        assert_order_access(order_document)
        return jsonify(serialize_order(order_document))

    @app.route("/api/orders/<order_id>/pay", methods=["PUT"])
    @customer_required
    def pay_order(order_id: str):
        order_document = load_order(order_id)
        assert_order_access(order_document)

        payload = json_body()
        payment_result = {
            "id": clean_text(payload.get("id")),
            "status": clean_text(payload.get("status")),
            "updateTime": clean_text(payload.get("update_time")),
            "emailAddress": clean_text(payload.get("email_address")),
        }
        db.orders.update_one(
            {"_id": order_document["_id"]},
            {
                "$set": {
                    "isPaid": True,
                    "paidAt": datetime.utcnow(),
                    "paymentResult": payment_result,
                }
            },
        )
        return jsonify(serialize_order(db.orders.find_one({"_id": order_document["_id"]})))
