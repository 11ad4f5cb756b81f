from flask import current_app
from pymongo.errors import PyMongoError

from .errors import Forbidden


def assert_ownership(product, seller_id, action: str = "modify"):
    """Allow the mutation only when ``seller_id`` owns ``product``.

    Products without a ``sellerId`` have no owner and cannot be mutated by
    any seller.
    """
    owner_id = product.get("sellerId") if product else None
    if owner_id is None or str(owner_id) != str(seller_id):
        raise Forbidden(f"Not authorized to {action} this product")


def attach_product(db, seller_id, product_id):
    # Second write after the product insert; not atomic with it.
    try:
        db.sellers.update_one({"_id": seller_id}, {"$push": {"products": product_id}})
    except PyMongoError as exc:
        current_app.logger.warning(
            "Product %s saved but seller %s list not updated: %s",
            product_id,
            seller_id,
            exc,
        )
        raise


def detach_product(db, seller_id, product_id):
    try:
        db.sellers.update_one({"_id": seller_id}, {"$pull": {"products": product_id}})
    except PyMongoError as exc:
        current_app.logger.warning(
            "Product %s deleted but seller %s list not updated: %s",
            product_id,
            seller_id,
            exc,
        )
        raise
