import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from app.core.config import settings, require_jwt_secret
from app.core.errors import AppError
from app.core.logging_config import configure_logging
from app.core.rate_limit import limiter
from app.routes.applications import router as applications_router
from app.routes.auth import router as auth_router
from app.routes.cover_letters import router as cover_letters_router
from app.routes.cvs import router as cvs_router
from app.routes.jobs import router as jobs_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

require_jwt_secret()

app = FastAPI(title="Job Application Tracker")
logger.info(
    "Startup config: ENV=%s api_prefix=%s ai_configured=%s rate_limiting=%s cors_origins=%s",
    settings.ENV,
    settings.API_PREFIX,
    settings.ai_configured,
    settings.ENABLE_RATE_LIMITING,
    len(settings.CORS_ORIGINS),
)

_DEFAULT_MESSAGE_BY_STATUS: dict[int, str] = {
    400: "Validation failed",
    401: "Authentication required",
    403: "Forbidden",
    404: "Not found",
    405: "Method not allowed",
    409: "Conflict",
    429: "Too many requests",
    500: "Internal server error",
}


def _error_body(message: str, errors: list | None = None) -> dict:
    payload: dict = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return payload


def _field_from_loc(loc) -> str:
    # ("body", "personalInfo", "email") -> "personalInfo.email"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or str(loc[-1] if loc else "request")


@app.exception_handler(AppError)
def app_error_handler(request: Request, exc: AppError):  # noqa: ARG001
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.errors))


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    detail = exc.detail
    if isinstance(detail, str) and detail:
        message = detail
    else:
        message = _DEFAULT_MESSAGE_BY_STATUS.get(int(exc.status_code), "Request failed")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    errors = []
    for err in exc.errors():
        message = str(err.get("msg") or "Invalid value")
        # pydantic prefixes messages raised from validators.
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": _field_from_loc(err.get("loc") or ()), "message": message})
    return JSONResponse(status_code=400, content=_error_body("Validation failed", errors))


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    lambda request, exc: JSONResponse(  # noqa: ARG005
        status_code=429,
        content=_error_body("Too many requests, please try again later"),
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api = APIRouter(prefix=settings.API_PREFIX)
api.include_router(auth_router)
api.include_router(jobs_router)
api.include_router(applications_router)
api.include_router(cvs_router)
api.include_router(cover_letters_router)


@api.get("/health")
def api_health_check():
    return {"success": True, "message": "API is running"}


app.include_router(api)


@app.get("/health")
def health_check():
    return {"status": "ok"}
