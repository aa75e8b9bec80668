from pydantic import BaseModel, Field
from typing import Any, Optional, List
from datetime import datetime

# Left raw so parse_amount sees booleans and junk before any coercion.
Amount = Any

# ---------- Accounts ----------
class AccountOut(BaseModel):
    # password_hash is deliberately absent
    id: str
    email: str
    full_name: str
    phone: Optional[str] = None
    country_code: str
    currency: str
    user_status: str
    user_tier: str
    balance: float
    crypto_balance: float
    bank_account_details: Optional[str] = None
    crypto_address: Optional[str] = None
    paypal_address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AccountBrief(BaseModel):
    email: str
    full_name: str

    class Config:
        from_attributes = True

class AccountStatusIn(BaseModel):
    status: Optional[str] = None   # "active" | "suspended" | "frozen"

class BalanceIn(BaseModel):
    balance: Optional[Amount] = None
    crypto_balance: Optional[Amount] = None

class PaymentDetailsIn(BaseModel):
    bank_account_details: Optional[str] = None
    crypto_address: Optional[str] = None
    paypal_address: Optional[str] = None

class TierIn(BaseModel):
    tier: Optional[str] = None     # "tier1" | "tier2" | "tier3"

# ---------- Transactions ----------
class SendMoneyIn(BaseModel):
    user_id: Optional[str] = Field(None, alias="userId")
    amount: Optional[Amount] = None
    currency: Optional[str] = None
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    recipient_email: Optional[str] = Field(None, alias="recipientEmail")
    description: Optional[str] = None

    class Config:
        populate_by_name = True

class TransactionStatusIn(BaseModel):
    status: Optional[str] = None   # "pending" | "approved" | "rejected" | "completed"
    admin_notes: Optional[str] = None

class TransactionOut(BaseModel):
    id: str
    user_id: str
    transaction_type: str
    amount: float
    currency: str
    payment_method: Optional[str] = None
    recipient_email: Optional[str] = None
    description: Optional[str] = None
    status: str
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AdminTransactionOut(TransactionOut):
    users: Optional[AccountBrief] = Field(None, validation_alias="account")

class PaymentMethodOut(BaseModel):
    value: str
    label: str
    icon: str

# ---------- Auth ----------
class RegisterIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = Field(None, alias="fullName")
    phone: Optional[str] = None
    country_code: Optional[str] = Field(None, alias="countryCode")

    class Config:
        populate_by_name = True

class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class CountryOut(BaseModel):
    country_code: str
    country_name: str
    phone_code: Optional[str] = None
    currency_code: Optional[str] = None
    currency_symbol: Optional[str] = None

# ---------- Envelopes ----------
class Envelope(BaseModel):
    success: bool = True
    message: Optional[str] = None

class AuthOut(Envelope):
    token: str
    user: AccountOut

class AccountEnvelope(Envelope):
    user: AccountOut

class AccountsEnvelope(Envelope):
    users: List[AccountOut]

class TransactionEnvelope(Envelope):
    transaction: TransactionOut

class TransactionsEnvelope(Envelope):
    transactions: List[TransactionOut]

class AdminTransactionsEnvelope(Envelope):
    transactions: List[AdminTransactionOut]

class CountriesEnvelope(Envelope):
    countries: List[CountryOut]

class PaymentMethodsEnvelope(Envelope):
    paymentMethods: List[PaymentMethodOut]

class HealthOut(BaseModel):
    status: str
    timestamp: datetime
    database: str
    message: str
