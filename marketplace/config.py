import os
from datetime import timedelta
from typing import Dict, List

from dotenv import load_dotenv

from .demo_catalog import DEMO_PRODUCTS


def _env_flag(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _allowed_origins() -> List[str]:
    origins = [
        os.getenv("FRONTEND_URL", "").strip(),
        os.getenv("PUBLIC_FRONTEND_URL", "").strip(),
    ]
    cors_extra = os.getenv("CORS_ALLOWED_ORIGINS", "")
    if cors_extra:
        for origin in cors_extra.split(","):
            trimmed = origin.strip()
            if trimmed:
                origins.append(trimmed)
    return [origin for origin in origins if origin]


def load_settings() -> Dict[str, object]:
    """Read the runtime configuration from the environment (and ``.env``)."""
    load_dotenv()

    try:
        token_ttl_days = max(1, int(os.getenv("TOKEN_TTL_DAYS", "30")))
    except (TypeError, ValueError):
        token_ttl_days = 30

    return {
        "JWT_SECRET_KEY": os.getenv("JWT_SECRET")
        or os.getenv("JWT_SECRET_KEY", "change-me-in-production"),
        "JWT_ACCESS_TOKEN_EXPIRES": timedelta(days=token_ttl_days),
        "MONGO_URI": os.getenv(
            "MONGO_URI", "mongodb://localhost:27017/marketplace"
        ),
        "CORS_ALLOWED_ORIGINS": _allowed_origins(),
        "ADMIN_SETUP_TOKEN": (os.getenv("ADMIN_SETUP_TOKEN") or "").strip(),
        "FALLBACK_PRODUCTS": list(DEMO_PRODUCTS),
        "FALLBACK_WHEN_EMPTY": _env_flag("FALLBACK_WHEN_EMPTY", True),
        "ORDER_TAX_RATE": _env_float("ORDER_TAX_RATE", 0.10),
        "ORDER_SHIPPING_PRICE": _env_float("ORDER_SHIPPING_PRICE", 0.0),
        "MIN_PASSWORD_LENGTH": 6,
    }
