from collections import namedtuple
from typing import Optional

import bcrypt
from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from .errors import Unauthenticated

ROLE_SELLER = "seller"
ROLE_ADMIN = "admin"
ROLE_CUSTOMER = "customer"
ROLES = (ROLE_SELLER, ROLE_ADMIN, ROLE_CUSTOMER)

Credential = namedtuple("Credential", ["subject_id", "role"])


def hash_secret(plain: str) -> bytes:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt())


def check_secret(plain: str, hashed: Optional[bytes]) -> bool:
    if not plain or not hashed:
        return False
    if isinstance(hashed, str):
        hashed = hashed.encode("utf-8")
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed)
    except ValueError:
        return False


def issue_token(subject_id, role: str) -> str:
    """Sign a credential for ``subject_id`` carrying ``role``.

    Expiry comes from ``JWT_ACCESS_TOKEN_EXPIRES``; there is no refresh or
    revocation, so the token stays valid until it expires even if the
    account behind it is deleted.
    """
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role!r}")
    return create_access_token(
        identity=str(subject_id), additional_claims={"role": role}
    )


def verify_token(token: str) -> Credential:
    if not token:
        raise Unauthenticated("Not authorized, no token")

    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException) as exc:
        current_app.logger.info("Rejected credential: %s", exc)
        raise Unauthenticated() from exc

    subject_id = claims.get(current_app.config.get("JWT_IDENTITY_CLAIM", "sub"))
    role = claims.get("role")
    if not subject_id or role not in ROLES:
        raise Unauthenticated()
    return Credential(subject_id=str(subject_id), role=role)
