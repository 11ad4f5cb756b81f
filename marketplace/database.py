from flask import current_app
from flask_pymongo import PyMongo
from pymongo import ASCENDING, DESCENDING

EXTENSION_KEY = "marketplace_db"

COLLECTION_BY_ROLE = {
    "seller": "sellers",
    "admin": "admins",
    "customer": "users",
}


def init_db(app, db=None):
    """Attach the document store to ``app``.

    ``db`` lets callers hand in an already-open database (tests pass a
    mongomock one); otherwise Flask-PyMongo connects using ``MONGO_URI``.
    """
    if db is None:
        mongo = PyMongo(app)
        db = mongo.db
    app.extensions[EXTENSION_KEY] = db
    ensure_indexes(app, db)
    return db


def get_db():
    return current_app.extensions[EXTENSION_KEY]


def ensure_indexes(app, db):
    for collection_name in ("sellers", "admins", "users"):
        try:
            db[collection_name].create_index("email", unique=True)
        except Exception as exc:
            app.logger.warning(
                "Unable to ensure email index for %s: %s", collection_name, exc
            )

    try:
        db.products.create_index([("sellerId", ASCENDING)])
        db.products.create_index([("category", ASCENDING)])
        db.products.create_index([("createdAt", DESCENDING)])
        db.orders.create_index([("user", ASCENDING)])
    except Exception as exc:
        app.logger.warning("Unable to ensure catalog indexes: %s", exc)
