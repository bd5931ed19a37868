from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse
import hashlib
from gstrecon.core.audit import audit_repo
from gstrecon.core.config import settings
from gstrecon.schemas.audit import AuditAction, AuditLogEntry, AuditStatus
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ANONYMOUS_TENANT = "ANONYMOUS"
PUBLIC_PREFIXES = ("/health", "/docs", "/openapi.json", "/redoc")

# Longest prefix first so /reconcile/purchase does not fall into /reconcile
ACTION_BY_PREFIX = (
    ("/reconcile/purchase", AuditAction.RECONCILE_PURCHASE),
    ("/reconcile/sales", AuditAction.RECONCILE_SALES),
    ("/gstr3b/waterfall", AuditAction.ITC_WATERFALL),
    ("/gstr3b/compute", AuditAction.GSTR3B_COMPUTE),
    ("/validate/gstin", AuditAction.VALIDATE_GSTIN),
    ("/health", AuditAction.HEALTH_CHECK),
)


def resolve_action(endpoint: str) -> AuditAction:
    for prefix, action in ACTION_BY_PREFIX:
        if endpoint.startswith(prefix):
            return action
    return AuditAction.UNKNOWN


def _record(entry: AuditLogEntry):
    # The audit trail must never take down the request it describes
    try:
        audit_repo.save(entry)
    except Exception as e:
        logger.error(f"Audit Logging Failed: {e}")


class AuditMiddleware(BaseHTTPMiddleware):
    """
    Records every request with SHA-256 hashes of the request and response bodies,
    so a reconciliation result can later be tied to the exact input that produced it.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        endpoint = request.url.path
        method = request.method
        action_type = resolve_action(endpoint)

        tenant_id: Optional[str] = request.headers.get("X-Tenant-ID")
        is_public = any(endpoint.startswith(p) for p in PUBLIC_PREFIXES)

        logger.debug(f"Request to {endpoint}, tenant_id={tenant_id}, is_public={is_public}")

        if not tenant_id and settings.REQUIRE_TENANT_ID and not is_public:
            _record(AuditLogEntry(
                endpoint=endpoint,
                method=method,
                action_type=action_type,
                tenant_id="MISSING",
                status_code=400,
                status=AuditStatus.FAILURE,
            ))
            return JSONResponse(status_code=400, content={"detail": "Missing tenant identifier"})

        tenant_id = tenant_id or ANONYMOUS_TENANT

        request_body_bytes = await request.body()
        # Always hash the body, even if empty, for determinism
        input_hash = hashlib.sha256(request_body_bytes).hexdigest()

        status = AuditStatus.FAILURE
        status_code = None
        output_hash = None

        try:
            response = await call_next(request)
            status_code = response.status_code
            if 200 <= response.status_code < 300:
                status = AuditStatus.SUCCESS

            response_body_bytes = b""
            async for chunk in response.body_iterator:
                response_body_bytes += chunk
            output_hash = hashlib.sha256(response_body_bytes).hexdigest()

            response = Response(
                content=response_body_bytes,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type
            )
        finally:
            _record(AuditLogEntry(
                endpoint=endpoint,
                method=method,
                action_type=action_type,
                tenant_id=tenant_id,
                status_code=status_code,
                input_hash=input_hash,
                output_hash=output_hash,
                status=status,
            ))

        return response
