# app/routes/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.auth.identity import Identity
from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.dependencies.auth import get_current_identity
from app.schemas.auth import AuthOut, LoginIn, RegisterIn, UserOut
from app.schemas.common import Envelope, MessageOut, ok
from app.services import users as user_service
from app.services.auth_cookie import clear_auth_cookie, set_auth_cookie

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Envelope[AuthOut], status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(
    request: Request,
    response: Response,
    payload: RegisterIn,
    db: Session = Depends(get_db),
):
    user, token = user_service.register_user(
        db,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    set_auth_cookie(response, token)
    return ok({"user": user, "token": token}, "User registered successfully")


@router.post("/login", response_model=Envelope[AuthOut])
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(
    request: Request,
    response: Response,
    payload: LoginIn,
    db: Session = Depends(get_db),
):
    user, token = user_service.authenticate_user(db, email=payload.email, password=payload.password)
    set_auth_cookie(response, token)
    return ok({"user": user, "token": token}, "Login successful")


@router.post("/logout", response_model=MessageOut)
def logout(response: Response):
    clear_auth_cookie(response)
    return ok(message="Logout successful")


@router.get("/me", response_model=Envelope[UserOut])
def me(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(user_service.get_user(db, identity.user_id))
