import math
import re
from typing import Dict, Iterable, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from flask import request

from .errors import ValidationError

email_regex = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PRODUCT_CATEGORIES = (
    "electronics",
    "fashion",
    "home",
    "books",
    "sports",
    "beauty",
    "toys",
    "automotive",
    "grocery",
    "health",
)
TITLE_MIN_LENGTH = 3
PRODUCT_DESCRIPTION_MIN_LENGTH = 20
COMPANY_DESCRIPTION_MIN_LENGTH = 10


def normalize_email(value: Optional[str]) -> str:
    return str(value or "").strip().lower()


def is_valid_email(value: Optional[str]) -> bool:
    normalized = normalize_email(value)
    return bool(normalized and email_regex.match(normalized))


def clean_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_object_id(value, label: str = "identifier") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label}.")


def require_fields(payload: Dict, fields: Iterable[str]) -> Dict[str, str]:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    cleaned = {field: clean_text(payload.get(field)) for field in fields}
    missing = [field for field, value in cleaned.items() if not value]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return cleaned


def validate_password(password: str, min_length: int):
    if len(password or "") < min_length:
        raise ValidationError(
            f"Password must be at least {min_length} characters long."
        )


def _parse_number(value, label: str) -> Tuple[Optional[float], Optional[str]]:
    if isinstance(value, bool):
        return None, f"{label} must be a valid number."
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None, f"{label} must be a valid number."
    if not math.isfinite(numeric):
        return None, f"{label} must be a valid number."
    return numeric, None


def normalize_product_payload(
    payload: Optional[Dict], *, partial: bool = False
) -> Tuple[Dict, Optional[str]]:
    """Validate the product fields a seller may set.

    With ``partial`` only the supplied fields are checked, which is how
    updates work. ``sellerId``, ``rating`` and ``numReviews`` are never taken
    from the request.
    """
    if not isinstance(payload, dict):
        return {}, "Product data must be a JSON object."

    normalized: Dict = {}

    def supplied(field: str) -> bool:
        return not partial or payload.get(field) is not None

    if supplied("title"):
        title = clean_text(payload.get("title"))
        if len(title) < TITLE_MIN_LENGTH:
            return {}, f"Title must be at least {TITLE_MIN_LENGTH} characters."
        normalized["title"] = title

    if supplied("price"):
        price, error = _parse_number(payload.get("price"), "Price")
        if error:
            return {}, error
        if price < 0:
            return {}, "Price cannot be negative."
        normalized["price"] = round(price, 2)

    if supplied("category"):
        category = clean_text(payload.get("category")).lower()
        if category not in PRODUCT_CATEGORIES:
            return {}, f"{category or 'Empty value'} is not a valid category."
        normalized["category"] = category

    if supplied("imageUrl"):
        image_url = clean_text(payload.get("imageUrl"))
        if not image_url:
            return {}, "Product image is required."
        normalized["imageUrl"] = image_url

    if supplied("productDescription"):
        description = clean_text(payload.get("productDescription"))
        if len(description) < PRODUCT_DESCRIPTION_MIN_LENGTH:
            return (
                {},
                "Description must be at least "
                f"{PRODUCT_DESCRIPTION_MIN_LENGTH} characters.",
            )
        normalized["productDescription"] = description

    if supplied("companyDescription"):
        company = clean_text(payload.get("companyDescription"))
        if len(company) < COMPANY_DESCRIPTION_MIN_LENGTH:
            return (
                {},
                "Company description must be at least "
                f"{COMPANY_DESCRIPTION_MIN_LENGTH} characters.",
            )
        normalized["companyDescription"] = company

    if "brand" in payload or not partial:
        normalized["brand"] = clean_text(payload.get("brand"))

    if payload.get("countInStock") is not None:
        stock, error = _parse_number(payload.get("countInStock"), "Stock")
        if error:
            return {}, error
        if stock < 0:
            return {}, "Stock cannot be negative."
        if stock != int(stock):
            return {}, "Stock must be a whole number."
        normalized["countInStock"] = int(stock)
    elif not partial:
        normalized["countInStock"] = 0

    return normalized, None


def json_body() -> Dict:
    """The request's JSON object, or ``{}`` when no JSON was sent."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload
