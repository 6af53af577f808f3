# settings.py
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


APP_ENV = os.environ.get("APP_ENV", "development")
IS_PRODUCTION = APP_ENV == "production"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
AUDIT_LOG_DIR = os.environ.get("AUDIT_LOG_DIR", "logs")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:5174,http://localhost:3000",
    ).split(",")
    if origin.strip()
]
CLIENT_URL = os.environ.get("CLIENT_URL")
if CLIENT_URL and CLIENT_URL not in CORS_ORIGINS:
    CORS_ORIGINS.append(CLIENT_URL)

# limite geral: só liga por padrão em produção
RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", IS_PRODUCTION)
RATE_LIMIT_MAX = int(os.environ.get("RATE_LIMIT_MAX", "500"))
RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))
AUTH_RATE_LIMIT_MAX = int(os.environ.get("AUTH_RATE_LIMIT_MAX", "20"))

CSRF_ENABLED = _flag("CSRF_ENABLED", False)
CSRF_TOKEN_TTL_SECONDS = 60 * 60
