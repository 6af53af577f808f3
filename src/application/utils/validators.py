"""Field validation and sanitization for incoming payloads.

Every public ``validate_*`` function either returns a normalized value or
raises ``ValidationError`` naming the offending field. The ``*_data``
builders turn a raw request body into an immutable record and stop at the
first invalid field. Nothing here touches the database.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping

from email_validator import EmailNotValidError, validate_email as check_email_syntax

from domain.entities.records import (
    INDUSTRIES,
    ClientRecord,
    ProductCategory,
    ProductRecord,
    SaleRecord,
    SaleStatus,
    StockOperation,
    StockUpdate,
    UserRecord,
)
from domain.entities.user_classes import RoleType
from domain.exceptions import ValidationError

MAX_AMOUNT = 99_999_999.99
MIN_DATE = datetime(2000, 1, 1, tzinfo=timezone.utc)
MAX_EMAIL_LENGTH = 100
# inteiro de 64 bits com sinal, limite das chaves no banco
MAX_ID = 2**63 - 1
MAX_STOCK = 1_000_000_000

TAG_RE = re.compile(r"<[^>]*>")
JS_URI_RE = re.compile(r"javascript:", re.IGNORECASE)
EVENT_HANDLER_RE = re.compile(r"on\w+\s*=", re.IGNORECASE)
NAME_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ\s\-']+$")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-()]")
PHONE_RE = re.compile(r"^[+\d]+$")
LETTER_RE = re.compile(r"[A-Za-z]")
DIGIT_RE = re.compile(r"\d")

GMAIL_DOMAINS = {"gmail.com", "googlemail.com"}
PLUS_TAG_DOMAINS = {
    "hotmail.com", "hotmail.co.uk", "hotmail.es", "live.com", "live.com.mx",
    "outlook.com", "outlook.es", "msn.com", "icloud.com", "me.com", "mac.com",
    "fastmail.com", "fastmail.fm",
}
YAHOO_DOMAINS = {"yahoo.com", "yahoo.es", "yahoo.com.mx", "yahoo.com.ar", "ymail.com", "rocketmail.com"}


# -----------------------------
# Texto
# -----------------------------
def sanitize_text(text: Any, max_length: int = 500) -> str:
    """Strip tags, ``javascript:`` prefixes and inline event handlers, then truncate.

    This is a defence against stored markup, not a full HTML sanitizer.
    """
    if text is None or text == "":
        return ""
    sanitized = str(text)
    sanitized = TAG_RE.sub("", sanitized)
    sanitized = JS_URI_RE.sub("", sanitized)
    sanitized = EVENT_HANDLER_RE.sub("", sanitized)
    sanitized = sanitized.strip()
    return sanitized[:max_length]


def validate_name(name: Any, field: str = "name") -> str:
    if not name or not isinstance(name, str):
        raise ValidationError(field, "Name is required")

    sanitized = sanitize_text(name, 100)
    if len(sanitized) < 2:
        raise ValidationError(field, "Name must have at least 2 characters")
    if not NAME_RE.match(sanitized):
        raise ValidationError(field, "Name can only contain letters, spaces, hyphens and apostrophes")
    return sanitized


def validate_email(email: Any, field: str = "email") -> str:
    """Return the canonical form of an address: lower-cased, provider aliases folded."""
    if not email or not isinstance(email, str):
        raise ValidationError(field, "Email is required")

    try:
        checked = check_email_syntax(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError(field, "Invalid email")

    local, domain = checked.local_part.lower(), checked.domain.lower()
    if domain in GMAIL_DOMAINS:
        local = local.split("+", 1)[0].replace(".", "")
        domain = "gmail.com"
    elif domain in PLUS_TAG_DOMAINS:
        local = local.split("+", 1)[0]
    elif domain in YAHOO_DOMAINS:
        local = local.split("-", 1)[0]

    if not local:
        raise ValidationError(field, "Invalid email")

    normalized = f"{local}@{domain}"
    if len(normalized) > MAX_EMAIL_LENGTH:
        raise ValidationError(field, "Email is too long")
    # a remoção do alias pode deixar um ponto antes do @
    try:
        check_email_syntax(normalized, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError(field, "Invalid email")
    return normalized


def validate_phone(phone: Any, field: str = "phone") -> str | None:
    if phone is None or phone == "":
        return None
    if not isinstance(phone, str):
        raise ValidationError(field, "Invalid phone")

    clean = PHONE_SEPARATORS_RE.sub("", phone)
    if not PHONE_RE.match(clean):
        raise ValidationError(field, "Phone can only contain digits and +")
    if not 8 <= len(clean) <= 15:
        raise ValidationError(field, "Phone must have between 8 and 15 characters")
    return clean


def validate_password(password: Any, field: str = "password") -> str:
    if not password or not isinstance(password, str):
        raise ValidationError(field, "Password is required")
    if len(password) < 6:
        raise ValidationError(field, "Password must have at least 6 characters")
    if len(password) > 128:
        raise ValidationError(field, "Password is too long")
    if not LETTER_RE.search(password) or not DIGIT_RE.search(password):
        raise ValidationError(field, "Password must contain at least one letter and one number")
    return password


# -----------------------------
# Números e datas
# -----------------------------
def _to_float(value: Any, field: str, label: str) -> float:
    if value is None or value == "":
        raise ValidationError(field, f"{label} is required")
    if isinstance(value, bool):
        raise ValidationError(field, f"{label} must be a valid number")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(field, f"{label} must be a valid number")
    if not math.isfinite(number):
        raise ValidationError(field, f"{label} must be a valid number")
    return number


def round_cents(number: float) -> float:
    """Round half away from zero on the cent, using the shortest decimal repr.

    ``99.995`` rounds to ``100.0`` even though its binary value sits just below.
    """
    return float(Decimal(repr(number)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def validate_amount(amount: Any, field: str = "amount", label: str = "Amount") -> float:
    number = _to_float(amount, field, label)
    if number < 0:
        raise ValidationError(field, f"{label} cannot be negative")
    if number > MAX_AMOUNT:
        raise ValidationError(field, f"{label} is too large")
    return round_cents(number)


def validate_stock(stock: Any, field: str = "stock") -> int:
    number = _to_float(stock, field, "Stock")
    if not number.is_integer():
        raise ValidationError(field, "Stock must be a whole number")
    if number < 0:
        raise ValidationError(field, "Stock cannot be negative")
    if number > MAX_STOCK:
        raise ValidationError(field, "Stock is too large")
    return int(number)


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch em milissegundos, como o front envia Date.now()
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _years_from(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # 29/02 -> 28/02
        return moment.replace(year=moment.year + years, day=28)


def validate_date(value: Any, field: str = "date", now: datetime | None = None) -> datetime:
    if value is None or value == "":
        raise ValidationError(field, "Date is required")

    parsed = _parse_datetime(value)
    if parsed is None:
        raise ValidationError(field, "Invalid date")
    if parsed < MIN_DATE:
        raise ValidationError(field, "Date cannot be earlier than the year 2000")

    now = now or datetime.now(timezone.utc)
    if parsed > _years_from(now, 10):
        raise ValidationError(field, "Date is too far in the future")
    return parsed


def parse_date_filter(value: str | None, field: str) -> datetime | None:
    """Parse a ``from``/``to`` query value; no range bounds apply to filters."""
    if value is None or value == "":
        return None
    parsed = _parse_datetime(value)
    if parsed is None:
        raise ValidationError(field, "Invalid date")
    return parsed


# -----------------------------
# Enums
# -----------------------------
def validate_industry(industry: Any, field: str = "industry") -> str | None:
    if industry is None or industry == "":
        return None
    if industry not in INDUSTRIES:
        raise ValidationError(field, "Invalid industry")
    return industry


def validate_status(status: Any, field: str = "status") -> SaleStatus:
    try:
        return SaleStatus(status)
    except ValueError:
        raise ValidationError(field, "Invalid status")


def validate_category(category: Any, field: str = "category") -> ProductCategory:
    try:
        return ProductCategory(category)
    except ValueError:
        raise ValidationError(field, "Invalid category")


def validate_role(role: Any, field: str = "role") -> RoleType:
    try:
        return RoleType(role)
    except ValueError:
        raise ValidationError(field, "Invalid role")


def _validate_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {"true", "false"}:
        return value.lower() == "true"
    raise ValidationError(field, f"{field} must be true or false")


def _validate_id(value: Any, field: str, message: str) -> int:
    if isinstance(value, Mapping):
        value = value.get("id")
    if isinstance(value, bool):
        raise ValidationError(field, message)
    try:
        ident = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(field, message)
    if not 0 < ident <= MAX_ID or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(field, message)
    return ident


def _require_mapping(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValidationError("body", "Request body must be a JSON object")
    return data


# -----------------------------
# Registros por entidade
# -----------------------------
def validate_client_data(data: Any) -> ClientRecord:
    data = _require_mapping(data)
    email = data.get("email")
    return ClientRecord(
        name=validate_name(data.get("name")),
        email=validate_email(email) if email else None,
        phone=validate_phone(data.get("phone")),
        industry=validate_industry(data.get("industry")),
        notes=sanitize_text(data.get("notes"), 1000),
    )


def validate_sale_data(data: Any, now: datetime | None = None) -> SaleRecord:
    data = _require_mapping(data)
    client = data.get("client", data.get("clientId"))
    raw_date = data.get("date")
    raw_status = data.get("status")
    return SaleRecord(
        client_id=_validate_id(client, "client", "Invalid client"),
        amount=validate_amount(data.get("amount")),
        description=sanitize_text(data.get("description"), 500),
        date=validate_date(raw_date, now=now) if raw_date not in (None, "") else (now or datetime.now(timezone.utc)),
        status=validate_status(raw_status) if raw_status not in (None, "") else SaleStatus.pending,
    )


def validate_user_data(data: Any, is_update: bool = False) -> UserRecord:
    data = _require_mapping(data)
    password = None
    if not is_update or data.get("password"):
        password = validate_password(data.get("password"))
    role = data.get("role")
    return UserRecord(
        name=validate_name(data.get("name")),
        email=validate_email(data.get("email")),
        password=password,
        role=validate_role(role) if role else None,
    )


def validate_product_data(data: Any) -> ProductRecord:
    data = _require_mapping(data)

    name = sanitize_text(data.get("name"), 200)
    if not name:
        raise ValidationError("name", "Product name is required")

    category = data.get("category")
    sku = sanitize_text(data.get("sku"), 100)
    stock = data.get("stock")
    is_active = data.get("isActive", data.get("is_active"))
    return ProductRecord(
        name=name,
        description=sanitize_text(data.get("description"), 1000),
        price=validate_amount(data.get("price"), field="price", label="Price"),
        category=validate_category(category) if category else ProductCategory.producto,
        sku=sku or None,
        stock=validate_stock(stock) if stock not in (None, "") else 0,
        is_active=_validate_bool(is_active, "isActive") if is_active is not None else True,
    )


def validate_stock_update(data: Any) -> StockUpdate:
    data = _require_mapping(data)
    try:
        operation = StockOperation(data.get("operation"))
    except ValueError:
        raise ValidationError("operation", "Invalid operation. Use: add, subtract or set")
    return StockUpdate(quantity=validate_stock(data.get("quantity"), field="quantity"), operation=operation)
