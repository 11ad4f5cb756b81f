"""Admin-driven seller verification.

A seller is either pending (``verified`` false) or verified. Approve and
reject are idempotent and act immediately; deleting a seller leaves their
products in place with a dangling ``sellerId``.
"""
from datetime import datetime
from typing import Dict

from .errors import NotFound
from .validation import parse_object_id


def _load_seller(db, seller_id):
    object_id = parse_object_id(seller_id, "seller identifier")
    seller = db.sellers.find_one({"_id": object_id})
    if not seller:
        raise NotFound("Seller not found")
    return seller


def approve_seller(db, seller_id):
    seller = _load_seller(db, seller_id)
    db.sellers.update_one(
        {"_id": seller["_id"]},
        {"$set": {"verified": True, "verificationDate": datetime.utcnow()}},
    )
    return db.sellers.find_one({"_id": seller["_id"]})


def reject_seller(db, seller_id):
    seller = _load_seller(db, seller_id)
    db.sellers.update_one(
        {"_id": seller["_id"]},
        {"$set": {"verified": False, "verificationDate": None}},
    )
    return db.sellers.find_one({"_id": seller["_id"]})


def delete_seller(db, seller_id):
    seller = _load_seller(db, seller_id)
    db.sellers.delete_one({"_id": seller["_id"]})
    return seller


def dashboard_stats(db) -> Dict[str, int]:
    # Independent counts; under concurrent writes they need not add up.
    return {
        "totalSellers": db.sellers.count_documents({}),
        "verifiedSellers": db.sellers.count_documents({"verified": True}),
        "pendingSellers": db.sellers.count_documents({"verified": False}),
        "totalProducts": db.products.count_documents({}),
        "totalUsers": db.users.count_documents({}),
        "totalOrders": db.orders.count_documents({}),
    }
