# finplatform/accounts.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .auth import hash_password, check_password, issue_token
from .config import Settings
from .countries import currency_for
from .errors import ValidationError, DuplicateError, AuthError, ForbiddenError, NotFoundError
from .models import Account, NOT_ASSIGNED
from .transactions import parse_amount

logger = logging.getLogger(__name__)

ACCOUNT_STATUSES = {"active", "suspended", "frozen"}
ACCOUNT_TIERS = {"tier1", "tier2", "tier3"}
PAYMENT_DETAIL_FIELDS = ("bank_account_details", "crypto_address", "paypal_address")
BALANCE_FIELDS = ("balance", "crypto_balance")

# Same text for unknown email and wrong password.
BAD_CREDENTIALS = "Invalid email or password"


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


# ---------- Identity ----------

def register(
    db: Session,
    settings: Settings,
    email: Optional[str],
    password: Optional[str],
    full_name: Optional[str],
    country_code: Optional[str],
    phone: Optional[str] = None,
) -> Tuple[str, Account]:
    """
    Create an active tier1 account with zero balances and return (token, account).
    Email uniqueness is left to the UNIQUE constraint; a conflict becomes DuplicateError.
    """
    if any(_blank(v) for v in (email, password, full_name, country_code)):
        raise ValidationError("All fields are required")

    account = Account(
        email=email,
        password_hash=hash_password(password, rounds=settings.bcrypt_rounds),
        full_name=full_name,
        phone=phone or "",
        country_code=country_code,
        currency=currency_for(db, country_code),
        user_status="active",
        user_tier="tier1",
        balance=0.0,
        crypto_balance=0.0,
        bank_account_details=NOT_ASSIGNED,
        crypto_address=NOT_ASSIGNED,
        paypal_address=NOT_ASSIGNED,
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError("Email already registered")
    db.refresh(account)

    logger.info("User registered: %s", account.id)
    return issue_token(account.id, account.email, settings.jwt_secret), account


def login(db: Session, settings: Settings, email: Optional[str], password: Optional[str]) -> Tuple[str, Account]:
    if _blank(email) or not password:
        raise ValidationError("Email and password required")

    account = db.execute(select(Account).where(Account.email == email)).scalars().first()
    if account is None or not check_password(password, account.password_hash):
        raise AuthError(BAD_CREDENTIALS)

    if account.user_status != "active":
        raise ForbiddenError(f"Account is {account.user_status}")

    logger.info("User logged in: %s", account.id)
    return issue_token(account.id, account.email, settings.jwt_secret), account


def get_profile(db: Session, account_id: str) -> Account:
    account = db.get(Account, account_id)
    if account is None:
        raise NotFoundError("User not found")
    return account


# ---------- Administration ----------

def list_accounts(db: Session) -> List[Account]:
    return list(db.execute(select(Account).order_by(Account.created_at.desc())).scalars().all())


def _apply(db: Session, account_id: str, changes: dict) -> Account:
    account = db.get(Account, account_id)
    if account is None:
        raise NotFoundError("User not found")
    for key, value in changes.items():
        setattr(account, key, value)
    db.commit()
    db.refresh(account)
    logger.info("ADMIN: updated %s for user %s", ", ".join(sorted(changes)), account_id)
    return account


def update_status(db: Session, account_id: str, status: Optional[str]) -> Account:
    if status not in ACCOUNT_STATUSES:
        raise ValidationError("Invalid status")
    return _apply(db, account_id, {"user_status": status})


def update_balance(db: Session, account_id: str, fields: dict) -> Account:
    """Only keys present in 'fields' are written; each is parsed on its own."""
    changes = {
        key: parse_amount(fields[key], f"Invalid {key}")
        for key in BALANCE_FIELDS
        if key in fields
    }
    if not changes:
        raise ValidationError("No update data provided")
    return _apply(db, account_id, changes)


def update_payment_details(db: Session, account_id: str, fields: dict) -> Account:
    changes = {key: fields[key] for key in PAYMENT_DETAIL_FIELDS if key in fields}
    if not changes:
        raise ValidationError("No update data provided")
    return _apply(db, account_id, changes)


def update_tier(db: Session, account_id: str, tier: Optional[str]) -> Account:
    if tier not in ACCOUNT_TIERS:
        raise ValidationError("Invalid tier. Must be tier1, tier2, or tier3")
    return _apply(db, account_id, {"user_tier": tier})
