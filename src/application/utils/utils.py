# utils.py
from math import ceil
from typing import Any

from fastapi import Request

def get_client_ip(request: Request) -> str:
    """Tenta extrair IP real atrás de proxy/load balancer."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        # Pega o primeiro IP da cadeia
        return xff.split(",")[0].strip()
    xri = request.headers.get("x-real-ip")
    if xri:
        return xri.strip()
    return request.client.host if request.client else "0.0.0.0"

def envelope(data: Any = None, message: str | None = None, meta: dict | None = None) -> dict:
    """Formato único de resposta de sucesso: {success, data, message?, meta?}."""
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    if meta is not None:
        body["meta"] = meta
    return body

def page_meta(total: int, page: int, limit: int) -> dict:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": ceil(total / limit) if limit else 0,
    }
