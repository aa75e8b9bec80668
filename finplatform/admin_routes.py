# admin_routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import accounts, transactions
from .auth import require_admin
from .config import Settings, get_settings
from .db import get_db
from .schemas import (
    AccountStatusIn, BalanceIn, PaymentDetailsIn, TierIn, TransactionStatusIn,
    AccountEnvelope, AccountsEnvelope, AdminTransactionsEnvelope, TransactionEnvelope,
)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])

# ---------- Accounts ----------

@router.get("/users", response_model=AccountsEnvelope)
def list_users(db: Session = Depends(get_db)):
    """Admin: every account, newest first. Password hashes never leave the server."""
    return {"success": True, "users": accounts.list_accounts(db)}


@router.put("/users/{user_id}/status", response_model=AccountEnvelope)
def update_user_status(user_id: str, body: AccountStatusIn, db: Session = Depends(get_db)):
    user = accounts.update_status(db, user_id, body.status)
    return {"success": True, "message": f"User status updated to {body.status}", "user": user}


@router.put("/users/{user_id}/balance", response_model=AccountEnvelope)
def update_user_balance(user_id: str, body: BalanceIn, db: Session = Depends(get_db)):
    """
    Admin: set balance and/or crypto_balance. Fields left out of the body are
    not touched.
    """
    user = accounts.update_balance(db, user_id, body.model_dump(exclude_unset=True))
    return {"success": True, "message": "User balances updated", "user": user}


@router.put("/users/{user_id}/payment-details", response_model=AccountEnvelope)
def update_user_payment_details(user_id: str, body: PaymentDetailsIn, db: Session = Depends(get_db)):
    user = accounts.update_payment_details(db, user_id, body.model_dump(exclude_unset=True))
    return {"success": True, "message": "Payment details updated successfully", "user": user}


@router.put("/users/{user_id}/tier", response_model=AccountEnvelope)
def update_user_tier(user_id: str, body: TierIn, db: Session = Depends(get_db)):
    user = accounts.update_tier(db, user_id, body.tier)
    return {"success": True, "message": f"User tier updated to {body.tier}", "user": user}

# ---------- Transactions ----------

@router.get("/transactions", response_model=AdminTransactionsEnvelope)
def list_transactions(db: Session = Depends(get_db)):
    return {"success": True, "transactions": transactions.list_all(db)}


@router.put("/transactions/{transaction_id}/status", response_model=TransactionEnvelope)
def update_transaction_status(
    transaction_id: str,
    body: TransactionStatusIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    tx = transactions.set_status(
        db, transaction_id, body.status, body.admin_notes,
        strict=settings.strict_transaction_transitions,
    )
    return {"success": True, "message": f"Transaction {body.status}", "transaction": tx}
