"""
FastAPI Depends.

- X-API-Key authorization for the status API
- security audit log lines for allow/deny
"""

from __future__ import annotations

from fastapi import Header, HTTPException, Request, status

from grievance_ledger.common.errors import UnauthorizedError
from grievance_ledger.common.logging import get_project_logger
from grievance_ledger.common.security import AuthContext, require_auth

log = get_project_logger()


def _request_meta(request: Request | None) -> tuple[str, str, str | None]:
    if request is None:
        return "unknown", "UNKNOWN", None
    endpoint = request.url.path
    method = request.method
    client_ip = request.client.host if request.client else None
    return endpoint, method, client_ip


def _audit_deny(*, request: Request | None, reason: str, error_code: str) -> None:
    endpoint, method, client_ip = _request_meta(request)
    log.warning(
        "security_audit_deny",
        extra={
            "payload": {
                "endpoint": endpoint,
                "method": method,
                "status_code": status.HTTP_401_UNAUTHORIZED,
                "reason": reason,
                "error_code": error_code,
                "client_ip": client_ip,
            }
        },
    )


def auth_dep(
    request: Request,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> AuthContext:
    try:
        ctx = require_auth(x_api_key=x_api_key)
    except UnauthorizedError as e:
        _audit_deny(request=request, reason=e.message, error_code=e.code)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": e.code, "message": e.message},
        ) from e

    endpoint, method, _ = _request_meta(request)
    log.debug(
        "security_audit_allow",
        extra={
            "payload": {
                "endpoint": endpoint,
                "method": method,
                "subject": ctx.subject,
                "auth_type": ctx.auth_type,
            }
        },
    )
    return ctx
