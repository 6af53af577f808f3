# main.py
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from application.controllers.autentication_controller import router as auth_router
from application.controllers.client_controller import router as client_router
from application.controllers.sale_controller import router as sale_router
from application.controllers.product_controller import router as product_router
from application.controllers.report_controller import router as report_router
from application.utils.utils import get_client_ip
from domain.exceptions import AppError, AuthError, RateLimitError
from infrastructure import rate_limiter
from infrastructure.audit import audit_hook
from infrastructure.logger import configure_logging
from infrastructure.settings import CORS_ORIGINS

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="BizFlow API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-CSRF-Token", "Content-Disposition"],
)


def _error_body(message: str, field: str | None = None) -> dict:
    body = {"success": False, "error": message}
    if field:
        body["field"] = field
    return body


@app.middleware("http")
async def rate_limit_and_audit(request: Request, call_next):
    if rate_limiter.general_limit_enabled and request.url.path.startswith("/api/"):
        result = rate_limiter.general_limiter.check(get_client_ip(request))
        if not result.allowed:
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=_error_body(rate_limiter.general_limiter.message),
                headers={"Retry-After": str(result.reset_in)},
            )

    response = await call_next(request)
    rate_limiter.release_successful_auth(request, response.status_code)
    audit_hook.after_response(request, response.status_code)
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {}
    if isinstance(exc, AuthError):
        headers["WWW-Authenticate"] = "Bearer"
    elif isinstance(exc, RateLimitError):
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.field), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    # loc vem como ("body", "email") ou ("query", "page")
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(first.get("msg", "Invalid request"), loc[-1] if loc else None),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == status.HTTP_404_NOT_FOUND else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=_error_body(message), headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


app.include_router(auth_router)
app.include_router(client_router)
app.include_router(sale_router)
app.include_router(product_router)
app.include_router(report_router)

@app.get("/health")
def health():
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
