import re
from typing import Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from flask import jsonify, request
from pymongo.errors import PyMongoError

from .errors import NotFound
from .serializers import build_seller_summaries, serialize_product, serialize_seller_summary
from .validation import clean_text


def filter_fallback_products(
    products: List[Dict], category: str = "", search: str = ""
) -> List[Dict]:
    filtered = [dict(product) for product in products]
    if category:
        filtered = [product for product in filtered if product.get("category") == category]
    if search:
        needle = search.lower()
        filtered = [
            product
            for product in filtered
            if needle in str(product.get("title", "")).lower()
            or needle in str(product.get("productDescription", "")).lower()
        ]
    return filtered


def register_product_routes(app, db):
    def fallback_products() -> List[Dict]:
        return list(app.config.get("FALLBACK_PRODUCTS") or [])

    def find_fallback_product(product_id: str) -> Optional[Dict]:
        for product in fallback_products():
            if str(product.get("_id")) == product_id:
                return dict(product)
        return None

    @app.route("/api/products", methods=["GET"])
    def list_products():
        category = clean_text(request.args.get("category")).lower()
        search = clean_text(request.args.get("search"))

        query: Dict[str, object] = {}
        if category:
            query["category"] = category
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"productDescription": {"$regex": pattern, "$options": "i"}},
            ]

        try:
            product_docs = list(db.products.find(query).sort("createdAt", -1))
            seller_summaries = build_seller_summaries(db, product_docs)
        except PyMongoError as exc:
            app.logger.warning("Serving fallback catalog, product query failed: %s", exc)
            return jsonify(filter_fallback_products(fallback_products(), category, search))

        if not product_docs and app.config.get("FALLBACK_WHEN_EMPTY"):
            return jsonify(filter_fallback_products(fallback_products(), category, search))

        return jsonify(
            [
                serialize_product(document, seller_summaries=seller_summaries)
                for document in product_docs
            ]
        )

    @app.route("/api/products/<product_id>", methods=["GET"])
    def get_product(product_id: str):
        try:
            object_id = ObjectId(product_id)
        except (InvalidId, TypeError):
            object_id = None

        product_document = None
        if object_id is not None:
            try:
                product_document = db.products.find_one({"_id": object_id})
                seller_document = (
                    db.sellers.find_one({"_id": product_document.get("sellerId")})
                    if product_document and product_document.get("sellerId")
                    else None
                )
            except PyMongoError as exc:
                app.logger.warning("Product lookup failed for %s: %s", product_id, exc)
                product_document = None

        if product_document:
            serialized = serialize_product(product_document)
            serialized["seller"] = serialize_seller_summary(seller_document)
            return jsonify(serialized)

        fallback = find_fallback_product(product_id)
        if fallback:
            return jsonify(fallback)
        raise NotFound("Product not found")
