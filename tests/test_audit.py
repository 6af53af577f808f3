import json
import logging
from datetime import datetime

import pytest
from starlette.requests import Request

from infrastructure.audit import AuditHook, audit_hook
from infrastructure.logger import DailyFileHandler


@pytest.fixture
def audit_file(tmp_path):
    logger = logging.getLogger(f"bizflow.audit.test.{tmp_path.name}")
    handler = DailyFileHandler(str(tmp_path), "audit")
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    path = tmp_path / f"audit-{datetime.now().strftime('%Y-%m-%d')}.log"
    yield logger, path
    logger.removeHandler(handler)
    handler.close()


def _entries(path):
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


def _request(method="DELETE", path="/api/sales/3", query=b"force=1", action=None):
    request = Request({
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query,
        "headers": [],
        "client": ("10.0.0.1", 5555),
    })
    if action:
        request.state.audit_action = action
    return request


def test_hook_writes_json_line_for_tagged_success(audit_file):
    logger, path = audit_file
    hook = AuditHook(logger)

    request = _request(action="sale.delete")
    request.state.user_id = 7
    entry = hook.after_response(request, 200)

    assert _entries(path) == [entry]
    assert entry["action"] == "sale.delete"
    assert entry["userId"] == 7
    assert entry["ip"] == "10.0.0.1"
    assert entry["method"] == "DELETE"
    assert entry["path"] == "/api/sales/3"
    assert entry["query"] == {"force": "1"}
    assert entry["status"] == 200


def test_hook_skips_untagged_and_failed_requests(audit_file):
    logger, path = audit_file
    hook = AuditHook(logger)

    assert hook.after_response(_request(), 200) is None
    assert hook.after_response(_request(action="sale.delete"), 404) is None
    assert hook.after_response(_request(action="sale.delete"), 302) is None
    assert _entries(path) == []


def test_anonymous_actions_are_recorded_as_such(audit_file):
    logger, _ = audit_file
    entry = AuditHook(logger).after_response(_request(method="POST", path="/api/auth/register", action="auth.register"), 201)
    assert entry["userId"] == "anonymous"


def test_api_writes_only_successful_tagged_requests(client, auth_headers, registered, audit_file, monkeypatch):
    logger, path = audit_file
    monkeypatch.setattr(audit_hook, "_audit_logger", logger)

    created = client.post(
        "/api/clients", json={"name": "Cliente Uno", "notes": "segredo-123"}, headers=auth_headers
    )
    assert created.status_code == 201
    assert client.post("/api/clients", json={"name": "X"}, headers=auth_headers).status_code == 400
    assert client.get("/api/clients", headers=auth_headers).status_code == 200

    entries = _entries(path)
    assert len(entries) == 1
    assert entries[0]["action"] == "client.create"
    assert entries[0]["status"] == 201
    assert entries[0]["userId"] == registered["user"]["id"]
    # o corpo da requisição nunca vai para o log
    assert "segredo-123" not in path.read_text(encoding="utf-8")
