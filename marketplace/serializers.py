from datetime import datetime
from typing import Dict, List, Optional

from bson import ObjectId


def isoformat(value) -> Optional[str]:
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is not None:
        return value.isoformat()
    return f"{value.isoformat()}Z"


def stringify_id(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def serialize_seller(seller_document, products: Optional[List[Dict]] = None) -> Dict:
    if not seller_document:
        return {}

    serialized = {
        "_id": str(seller_document.get("_id")),
        "businessName": seller_document.get("businessName", "") or "",
        "email": seller_document.get("email", "") or "",
        "phone": seller_document.get("phone", "") or "",
        "address": seller_document.get("address", "") or "",
        "description": seller_document.get("description", "") or "",
        "verified": bool(seller_document.get("verified")),
        "verificationDate": isoformat(seller_document.get("verificationDate")),
        "createdAt": isoformat(seller_document.get("createdAt")),
    }
    if products is not None:
        serialized["products"] = products
    else:
        serialized["products"] = [
            str(product_id) for product_id in seller_document.get("products") or []
        ]
    return serialized


def serialize_seller_summary(seller_document) -> Optional[Dict]:
    if not seller_document:
        return None
    return {
        "_id": str(seller_document.get("_id")),
        "businessName": seller_document.get("businessName", "") or "",
        "email": seller_document.get("email", "") or "",
    }


def serialize_admin(admin_document) -> Dict:
    if not admin_document:
        return {}
    return {
        "_id": str(admin_document.get("_id")),
        "name": admin_document.get("name", "") or "",
        "email": admin_document.get("email", "") or "",
        "role": admin_document.get("role", "admin") or "admin",
    }


def serialize_customer(user_document) -> Dict:
    if not user_document:
        return {}
    return {
        "_id": str(user_document.get("_id")),
        "name": user_document.get("name", "") or "",
        "email": user_document.get("email", "") or "",
        "createdAt": isoformat(user_document.get("createdAt")),
    }


def serialize_product(product_document, seller_summaries: Optional[Dict] = None) -> Dict:
    try:
        price_value = float(product_document.get("price", 0) or 0)
    except (TypeError, ValueError):
        price_value = 0.0

    seller_id = product_document.get("sellerId")
    serialized = {
        "_id": str(product_document.get("_id")),
        "title": product_document.get("title", "") or "",
        "price": round(price_value, 2),
        "category": product_document.get("category", "") or "",
        "imageUrl": product_document.get("imageUrl", "") or "",
        "productDescription": product_document.get("productDescription", "") or "",
        "companyDescription": product_document.get("companyDescription", "") or "",
        "brand": product_document.get("brand", "") or "",
        "countInStock": int(product_document.get("countInStock", 0) or 0),
        "rating": product_document.get("rating", 0) or 0,
        "numReviews": product_document.get("numReviews", 0) or 0,
        "sellerId": stringify_id(seller_id),
        "createdAt": isoformat(product_document.get("createdAt")),
        "updatedAt": isoformat(product_document.get("updatedAt")),
    }
    if seller_summaries is not None:
        serialized["seller"] = seller_summaries.get(seller_id)
    return serialized


def serialize_order(order_document) -> Dict:
    if not order_document:
        return {}

    items = []
    for item in order_document.get("orderItems") or []:
        items.append(
            {
                "product": stringify_id(item.get("product")),
                "title": item.get("title", "") or "",
                "imageUrl": item.get("imageUrl", "") or "",
                "price": item.get("price", 0),
                "qty": item.get("qty", 0),
                "sellerId": stringify_id(item.get("sellerId")),
            }
        )

    return {
        "_id": str(order_document.get("_id")),
        "user": stringify_id(order_document.get("user")),
        "orderItems": items,
        "shippingAddress": dict(order_document.get("shippingAddress") or {}),
        "paymentMethod": order_document.get("paymentMethod", "") or "",
        "itemsPrice": order_document.get("itemsPrice", 0),
        "taxPrice": order_document.get("taxPrice", 0),
        "shippingPrice": order_document.get("shippingPrice", 0),
        "totalPrice": order_document.get("totalPrice", 0),
        "isPaid": bool(order_document.get("isPaid")),
        "paidAt": isoformat(order_document.get("paidAt")),
        "isDelivered": bool(order_document.get("isDelivered")),
        "createdAt": isoformat(order_document.get("createdAt")),
    }


def build_seller_summaries(db, product_documents) -> Dict[ObjectId, Optional[Dict]]:
    """Look up the owning sellers of ``product_documents`` in one query."""
    seller_ids = {
        document.get("sellerId")
        for document in product_documents
        if isinstance(document.get("sellerId"), ObjectId)
    }
    summaries: Dict[ObjectId, Optional[Dict]] = {
        seller_id: None for seller_id in seller_ids
    }
    if not seller_ids:
        return summaries
    for seller_document in db.sellers.find({"_id": {"$in": list(seller_ids)}}):
        summaries[seller_document["_id"]] = serialize_seller_summary(seller_document)
    return summaries
