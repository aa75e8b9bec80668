# finplatform/transactions.py
"""
Transfer requests and their admin-driven status lifecycle.

A transfer is only a record: creating one debits nothing and checks neither
balance nor currency. Admins move it through the statuses below.
"""
import logging
import math
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from .errors import ValidationError, NotFoundError
from .models import Transaction

logger = logging.getLogger(__name__)

PENDING, APPROVED, REJECTED, COMPLETED = "pending", "approved", "rejected", "completed"
STATUSES = (PENDING, APPROVED, REJECTED, COMPLETED)

# Forward-only table, consulted only in strict mode. Same-status moves are
# always allowed so admins can amend notes.
TRANSITIONS: Dict[str, FrozenSet[str]] = {
    PENDING: frozenset({PENDING, APPROVED, REJECTED, COMPLETED}),
    APPROVED: frozenset({APPROVED, REJECTED, COMPLETED}),
    REJECTED: frozenset({REJECTED}),
    COMPLETED: frozenset({COMPLETED}),
}

USER_HISTORY_LIMIT = 50
ADMIN_HISTORY_LIMIT = 100

PAYMENT_METHODS = [
    {"value": "paypal", "label": "PayPal", "icon": "fab fa-paypal"},
    {"value": "bank_transfer", "label": "Bank Transfer", "icon": "fas fa-university"},
    {"value": "crypto", "label": "Cryptocurrency", "icon": "fab fa-bitcoin"},
    {"value": "credit_card", "label": "Credit Card", "icon": "fas fa-credit-card"},
    {"value": "internal", "label": "Internal Transfer", "icon": "fas fa-exchange-alt"},
]


def parse_amount(value, message: str = "Invalid amount") -> float:
    """Parse a number or numeric string; sign and magnitude are not checked."""
    if isinstance(value, bool):
        raise ValidationError(message)
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if not math.isfinite(parsed):
        raise ValidationError(message)
    return parsed


def _missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def can_transition(current: str, new: str, strict: bool = False) -> bool:
    if not strict:
        return new in STATUSES
    return new in TRANSITIONS.get(current, frozenset())


def create_transfer(
    db: Session,
    user_id: Optional[str],
    amount,
    payment_method: Optional[str],
    recipient_email: Optional[str],
    currency: Optional[str] = None,
    description: Optional[str] = None,
) -> Transaction:
    if any(_missing(v) for v in (user_id, amount, payment_method, recipient_email)):
        raise ValidationError("Missing required fields")

    tx = Transaction(
        user_id=user_id,
        transaction_type="transfer",
        amount=parse_amount(amount),
        currency=currency or "USD",
        payment_method=payment_method,
        recipient_email=recipient_email,
        description=description or f"Payment to {recipient_email}",
        status=PENDING,
    )
    db.add(tx)
    db.commit()
    db.refresh(tx)
    logger.info("Transaction created: %s (user=%s amount=%s %s)", tx.id, user_id, tx.amount, tx.currency)
    return tx


def list_for_account(db: Session, user_id: Optional[str]) -> List[Transaction]:
    if _missing(user_id):
        raise ValidationError("User ID required")
    stmt = (
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(Transaction.created_at.desc())
        .limit(USER_HISTORY_LIMIT)
    )
    return list(db.execute(stmt).scalars().all())


def list_all(db: Session) -> List[Transaction]:
    """Newest transactions across all accounts, with the originating account loaded."""
    stmt = (
        select(Transaction)
        .options(joinedload(Transaction.account))
        .order_by(Transaction.created_at.desc())
        .limit(ADMIN_HISTORY_LIMIT)
    )
    return list(db.execute(stmt).scalars().all())


def set_status(
    db: Session,
    transaction_id: str,
    status: Optional[str],
    admin_notes: Optional[str] = None,
    strict: bool = False,
) -> Transaction:
    """
    Overwrite status and notes. Without strict mode any status may follow any
    other (completed -> pending included); strict mode applies TRANSITIONS.
    """
    if status not in STATUSES:
        raise ValidationError("Invalid status")

    tx = db.get(Transaction, transaction_id)
    if tx is None:
        raise NotFoundError("Transaction not found")

    if not can_transition(tx.status, status, strict=strict):
        raise ValidationError(f"Cannot move transaction from {tx.status} to {status}")

    previous = tx.status
    tx.status = status
    tx.admin_notes = admin_notes or ""
    db.commit()
    db.refresh(tx)
    logger.info("ADMIN: transaction %s moved %s -> %s", tx.id, previous, status)
    return tx
