# app/schemas/common.py
from __future__ import annotations

import re
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

UPDATE_REQUIRES_FIELD = "At least one field must be provided for update"

_URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; either is accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(CamelModel):
    @model_validator(mode="after")
    def _require_one_field(self):
        if not self.model_fields_set:
            raise ValueError(UPDATE_REQUIRES_FIELD)
        return self


class Envelope(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class MessageOut(CamelModel):
    success: bool = True
    message: str


class ErrorItem(CamelModel):
    field: str
    message: str


class ErrorOut(CamelModel):
    success: bool = False
    message: str
    errors: Optional[List[ErrorItem]] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


def ok(data: Any = None, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def validate_optional_url(value: Optional[str]) -> Optional[str]:
    # "" is accepted and means "no URL".
    if value is None or value == "":
        return value
    if not _URL_RE.match(value.strip()):
        raise ValueError("Invalid URL format")
    return value.strip()


def validate_email_address(value: str) -> str:
    """
    Syntax check only. The address is kept as submitted (trimmed): no
    lower-casing of the domain, so stored emails match what users typed.
    """
    value = value.strip()
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError("Invalid email address") from exc
    return value


RawEmail = Annotated[str, AfterValidator(validate_email_address)]
