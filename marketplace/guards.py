from functools import wraps

from bson import ObjectId
from bson.errors import InvalidId
from flask import g, request

from .credentials import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_SELLER, verify_token
from .database import COLLECTION_BY_ROLE, get_db
from .errors import IdentityNotFound, NotVerified, Unauthenticated, WrongRole

NOT_FOUND_MESSAGES = {
    ROLE_SELLER: "Seller not found",
    ROLE_ADMIN: "Admin not found",
    ROLE_CUSTOMER: "User not found",
}


def parse_bearer(header_value) -> str:
    if not header_value:
        raise Unauthenticated("Not authorized, no token")
    parts = str(header_value).split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise Unauthenticated("Not authorized, malformed authorization header")
    return parts[1]


def load_identity(role: str, subject_id: str):
    try:
        object_id = ObjectId(subject_id)
    except (InvalidId, TypeError):
        raise IdentityNotFound(NOT_FOUND_MESSAGES[role])

    record = get_db()[COLLECTION_BY_ROLE[role]].find_one({"_id": object_id})
    if not record:
        raise IdentityNotFound(NOT_FOUND_MESSAGES[role])
    return record


def authenticate(*roles: str):
    """Resolve the request's bearer credential to a stored identity.

    The resolved record is placed on ``g.identity`` and its role on
    ``g.role``. A credential whose role is not in ``roles`` fails with
    ``WrongRole`` before any lookup happens.
    """
    token = parse_bearer(request.headers.get("Authorization"))
    credential = verify_token(token)

    if roles and credential.role not in roles:
        raise WrongRole(f"Not authorized as {' or '.join(roles)}")

    record = load_identity(credential.role, credential.subject_id)
    g.identity = record
    g.role = credential.role
    return record


def roles_required(*roles: str):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            authenticate(*roles)
            return view(*args, **kwargs)

        return wrapper

    return decorator


seller_required = roles_required(ROLE_SELLER)
admin_required = roles_required(ROLE_ADMIN)
customer_required = roles_required(ROLE_CUSTOMER)


def verified_seller_required(view):
    """Seller guard followed by the verification gate.

    ``verified`` is read from the record loaded for this request, so an
    approval or rejection takes effect on the seller's very next call.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        seller = authenticate(ROLE_SELLER)
        if seller.get("verified") is not True:
            raise NotVerified()
        return view(*args, **kwargs)

    return wrapper
