import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from .db import Base

NOT_ASSIGNED = "Not assigned yet"


def _uuid() -> str:
    return str(uuid.uuid4())


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String, unique=True, nullable=False, index=True)  # exact, case-sensitive
    password_hash = Column(Text, nullable=False)
    full_name = Column(String, nullable=False)
    phone = Column(String, default="")
    country_code = Column(String, nullable=False)
    currency = Column(String, default="USD")
    user_status = Column(String, index=True, default="active")       # active | suspended | frozen
    user_tier = Column(String, default="tier1")                      # tier1 | tier2 | tier3
    balance = Column(Float, default=0.0)
    crypto_balance = Column(Float, default=0.0)
    bank_account_details = Column(Text, default=NOT_ASSIGNED)
    crypto_address = Column(Text, default=NOT_ASSIGNED)
    paypal_address = Column(Text, default=NOT_ASSIGNED)
    created_at = Column(DateTime(timezone=True), default=_now_utc)
    updated_at = Column(DateTime(timezone=True), default=_now_utc, onupdate=_now_utc)

    transactions = relationship("Transaction", back_populates="account")


class Transaction(Base):
    __tablename__ = "transactions"
    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    transaction_type = Column(String, default="transfer")
    amount = Column(Float, nullable=False)
    currency = Column(String, default="USD")
    payment_method = Column(String)                                  # paypal | bank_transfer | crypto | ...
    recipient_email = Column(String)
    description = Column(Text)
    status = Column(String, index=True, default="pending")           # pending | approved | rejected | completed
    admin_notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_now_utc, index=True)
    updated_at = Column(DateTime(timezone=True), default=_now_utc, onupdate=_now_utc)

    account = relationship("Account", back_populates="transactions")


class Country(Base):
    __tablename__ = "countries"
    country_code = Column(String, primary_key=True)
    country_name = Column(String, nullable=False)
    phone_code = Column(String)
    currency_code = Column(String)
    currency_symbol = Column(String)
