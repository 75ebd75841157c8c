# app/schemas/auth.py
from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel, RawEmail


class RegisterIn(CamelModel):
    email: RawEmail
    password: str = Field(min_length=1, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)


class LoginIn(CamelModel):
    email: RawEmail
    password: str = Field(min_length=1)


class UserOut(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime


class AuthOut(CamelModel):
    user: UserOut
    token: str
