from typing import Dict, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from .admin_routes import register_admin_routes
from .config import load_settings
from .customer_routes import register_customer_routes
from .database import init_db
from .errors import register_error_handlers
from .order_routes import register_order_routes
from .product_routes import register_product_routes
from .seller_routes import register_seller_routes


def create_app(config_overrides: Optional[Dict] = None, db=None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # --- Configuration ---
    app.config.update(load_settings())
    app.config["JWT_ERROR_MESSAGE_KEY"] = "message"
    if config_overrides:
        app.config.update(config_overrides)

    # --- Initialize extensions ---
    CORS(app, origins=app.config["CORS_ALLOWED_ORIGINS"] or "*")
    JWTManager(app)
    db = init_db(app, db)

    register_error_handlers(app)

    # --- Routes ---
    register_seller_routes(app, db)
    register_admin_routes(app, db)
    register_product_routes(app, db)
    register_customer_routes(app, db)
    register_order_routes(app, db)

    @app.route("/api/health")
    def health():
        return jsonify({"status": "OK", "message": "Server is running"})

    return app
