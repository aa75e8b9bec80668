# auth_routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import accounts
from .auth import require_auth
from .config import Settings, get_settings
from .countries import list_countries
from .db import get_db
from .schemas import (
    RegisterIn, LoginIn,
    AuthOut, AccountEnvelope, CountriesEnvelope,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/countries", response_model=CountriesEnvelope)
def countries(db: Session = Depends(get_db)):
    return {"success": True, "countries": list_countries(db)}


@router.post("/register", response_model=AuthOut)
def register(
    body: RegisterIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    token, account = accounts.register(
        db, settings,
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        country_code=body.country_code,
        phone=body.phone,
    )
    return {"success": True, "message": "Registration successful!", "token": token, "user": account}


@router.post("/login", response_model=AuthOut)
def login(
    body: LoginIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    token, account = accounts.login(db, settings, body.email, body.password)
    return {"success": True, "message": "Login successful", "token": token, "user": account}


@router.get("/profile", response_model=AccountEnvelope)
def profile(claims: dict = Depends(require_auth), db: Session = Depends(get_db)):
    return {"success": True, "user": accounts.get_profile(db, claims["userId"])}
