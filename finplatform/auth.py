# finplatform/auth.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError
from fastapi import Header, Request

from .errors import AuthError, ForbiddenError

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Token config
# ─────────────────────────────────────────────────────────────────────────────

JWT_ALG = "HS256"
TOKEN_TTL = timedelta(days=7)

ADMIN_EMAIL = "admin@financialplatform.com"
ADMIN_MARKER = "admin"
ROLE_ADMIN = "admin"
ROLE_USER = "user"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Password hashing
# ─────────────────────────────────────────────────────────────────────────────

BCRYPT_MAX_BYTES = 72


def _secret_bytes(plain: str) -> bytes:
    # bcrypt only reads the first 72 bytes; longer secrets are cut there.
    return plain.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_secret_bytes(plain), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(plain: str, hashed: str) -> bool:
    """Compare 'plain' against a stored bcrypt hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(_secret_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


# ─────────────────────────────────────────────────────────────────────────────
# JWT helpers
# ─────────────────────────────────────────────────────────────────────────────

def issue_token(account_id: str, email: str, secret: str, issued_at: Optional[datetime] = None) -> str:
    """Create a signed JWT bound to the account id and email, valid for 7 days."""
    iat = issued_at or _now_utc()
    exp = iat + TOKEN_TTL
    payload = {
        "userId": account_id,
        "email": email,
        "iat": int(iat.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)


def verify_token(token: Optional[str], secret: str) -> dict:
    """
    Decode and validate a token. Pure function of the token and the secret:
    no account lookup happens, so a token outlives later status changes.
    """
    if not token:
        raise AuthError("Authentication token required")
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALG])
    except JWTError as e:
        raise AuthError(f"Invalid token: {e}")
    if not claims.get("userId"):
        raise AuthError("Invalid token: missing userId claim")
    return claims


def derive_role(claims: dict) -> str:
    """
    Admin iff the email claim contains "admin" anywhere or is the platform
    admin address. String based; any "*admin*" mailbox qualifies.
    """
    email = claims.get("email") or ""
    if ADMIN_MARKER in email or email == ADMIN_EMAIL:
        return ROLE_ADMIN
    return ROLE_USER


# ─────────────────────────────────────────────────────────────────────────────
# Auth dependencies
# ─────────────────────────────────────────────────────────────────────────────

def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    # Handle case-insensitively and allow extra spaces
    parts = authorization.strip().split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def require_auth(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> dict:
    """Validate 'Authorization: Bearer <jwt>'. Returns decoded claims; raises 401 on failure."""
    token = bearer_token(authorization)
    if not token:
        raise AuthError("Authentication token required")
    try:
        return verify_token(token, request.app.state.settings.jwt_secret)
    except AuthError as e:
        logger.info("Rejected user token: %s", e.message)
        raise AuthError("Invalid token")


def require_admin(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> dict:
    """Like require_auth, but the derived role must be admin (403 otherwise)."""
    token = bearer_token(authorization)
    if not token:
        raise AuthError("Admin token required")
    try:
        claims = verify_token(token, request.app.state.settings.jwt_secret)
    except AuthError as e:
        logger.info("Rejected admin token: %s", e.message)
        raise AuthError("Invalid admin token")
    if derive_role(claims) != ROLE_ADMIN:
        raise ForbiddenError("Admin access required")
    return claims
