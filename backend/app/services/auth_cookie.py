from __future__ import annotations

from fastapi import Request, Response

from app.core.config import settings
from app.core.security import token_max_age_seconds


# -----------------------------
# Cookie helpers
# -----------------------------
def cookie_name() -> str:
    return str(getattr(settings, "AUTH_COOKIE_NAME", "token")).strip() or "token"


def cookie_path() -> str:
    return str(getattr(settings, "AUTH_COOKIE_PATH", "/")).strip() or "/"


def cookie_secure() -> bool:
    # Prod => HTTPS => Secure cookies. Dev http://localhost => must be False.
    return settings.is_prod


def cookie_samesite() -> str:
    """
    "strict" by default; the SPA and API share a site.
    "none" ONLY if you truly need cross-site cookies (requires HTTPS + Secure=True)
    """
    v = str(getattr(settings, "AUTH_COOKIE_SAMESITE", "strict")).lower().strip()
    if v not in {"lax", "strict", "none"}:
        return "strict"
    return v


def set_auth_cookie(resp: Response, token: str) -> None:
    resp.set_cookie(
        key=cookie_name(),
        value=token,
        httponly=True,
        secure=cookie_secure(),
        samesite=cookie_samesite(),
        max_age=token_max_age_seconds(),
        path=cookie_path(),
    )


def clear_auth_cookie(resp: Response) -> None:
    resp.delete_cookie(
        key=cookie_name(),
        path=cookie_path(),
    )


def read_auth_cookie(req: Request) -> str | None:
    val = req.cookies.get(cookie_name())
    if not val:
        return None
    val = val.strip()
    return val or None
