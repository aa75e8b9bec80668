import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Country

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"

FALLBACK_COUNTRIES = [
    {"country_code": "US", "country_name": "United States", "phone_code": "+1", "currency_code": "USD", "currency_symbol": "$"},
    {"country_code": "KE", "country_name": "Kenya", "phone_code": "+254", "currency_code": "KES", "currency_symbol": "KSh"},
    {"country_code": "UK", "country_name": "United Kingdom", "phone_code": "+44", "currency_code": "GBP", "currency_symbol": "£"},
    {"country_code": "NG", "country_name": "Nigeria", "phone_code": "+234", "currency_code": "NGN", "currency_symbol": "₦"},
    {"country_code": "IN", "country_name": "India", "phone_code": "+91", "currency_code": "INR", "currency_symbol": "₹"},
]


def _as_dict(c: Country) -> dict:
    return dict(country_code=c.country_code, country_name=c.country_name, phone_code=c.phone_code,
                currency_code=c.currency_code, currency_symbol=c.currency_symbol)


def list_countries(db: Session) -> List[dict]:
    """Countries ordered by name; the embedded list when the store errors or is empty."""
    try:
        rows = db.execute(select(Country).order_by(Country.country_name)).scalars().all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Database countries error, using fallback: %s", e)
        return [dict(c) for c in FALLBACK_COUNTRIES]
    if not rows:
        logger.warning("Countries table is empty, using fallback")
        return [dict(c) for c in FALLBACK_COUNTRIES]
    return [_as_dict(c) for c in rows]


def currency_for(db: Session, country_code: str) -> str:
    try:
        country = db.get(Country, country_code)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Currency lookup for %s failed, defaulting to %s: %s", country_code, DEFAULT_CURRENCY, e)
        return DEFAULT_CURRENCY
    if country is None or not country.currency_code:
        return DEFAULT_CURRENCY
    return country.currency_code
