"""Audit trail written after a handler has produced its final response."""

import json
import logging
from datetime import datetime, timezone

from fastapi import Request

from infrastructure.logger import get_audit_logger

logger = logging.getLogger(__name__)


class AuditHook:
    """Post-handler hook: called by the middleware with the final status code.

    Routes opt in through the ``audited`` dependency, which tags the request
    with an action name. Only successful (2xx) responses are recorded.
    """

    def __init__(self, audit_logger: logging.Logger | None = None):
        self._audit_logger = audit_logger

    @property
    def audit_logger(self) -> logging.Logger:
        if self._audit_logger is None:
            self._audit_logger = get_audit_logger()
        return self._audit_logger

    def after_response(self, request: Request, status_code: int) -> dict | None:
        action = getattr(request.state, "audit_action", None)
        if action is None or not 200 <= status_code < 300:
            return None

        client_host = request.client.host if request.client else "unknown"
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "userId": getattr(request.state, "user_id", None) or "anonymous",
            "ip": client_host,
            "method": request.method,
            "path": request.url.path,
            "query": dict(request.query_params),
            "status": status_code,
        }
        try:
            self.audit_logger.info(json.dumps(entry, ensure_ascii=False))
        except OSError:
            # falha no arquivo de auditoria não derruba a requisição
            logger.exception("Failed to write audit entry for %s", action)
        return entry


audit_hook = AuditHook()


def audited(action: str):
    """Dependency factory tagging a route with its audit action."""
    def _tag(request: Request) -> None:
        request.state.audit_action = action
    return _tag
