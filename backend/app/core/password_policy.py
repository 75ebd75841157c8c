from __future__ import annotations

import re
from typing import List

from app.core.config import settings
from app.core.errors import ValidationError

_UPPERCASE_RE = re.compile(r"[A-Z]")
_LOWERCASE_RE = re.compile(r"[a-z]")
_NUMBER_RE = re.compile(r"[0-9]")

_VIOLATION_MESSAGES = {
    "uppercase": "Password must contain at least one uppercase letter",
    "lowercase": "Password must contain at least one lowercase letter",
    "number": "Password must contain at least one number",
}


def evaluate_password(password: str) -> List[str]:
    """
    Returns a list of violation codes if the password does not meet policy.
    """
    pw = password or ""
    violations: list[str] = []
    min_length = max(int(getattr(settings, "PASSWORD_MIN_LENGTH", 8) or 0), 1)

    if len(pw) < min_length:
        violations.append("min_length")
    if not _UPPERCASE_RE.search(pw):
        violations.append("uppercase")
    if not _LOWERCASE_RE.search(pw):
        violations.append("lowercase")
    if not _NUMBER_RE.search(pw):
        violations.append("number")
    return violations


def ensure_strong_password(password: str) -> None:
    violations = evaluate_password(password)
    if not violations:
        return

    errors = []
    for code in violations:
        if code == "min_length":
            message = f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
        else:
            message = _VIOLATION_MESSAGES[code]
        errors.append({"field": "password", "message": message, "code": code})
    raise ValidationError(errors=errors)
