"""FastAPI application entry point."""
import logging
import time
import uuid
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from securebond.core.config import settings
from securebond.core.performance import RequestMetric, performance_monitor
from securebond.core.structured_logging import build_log_context, configure_logging
from securebond.services.audit_service import get_client_ip, get_user_agent

configure_logging()
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,  # 10% of requests for performance monitoring
        send_default_pii=False,  # Client records are PII
    )
    logger.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from securebond.core.rate_limit import limiter


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="SecureBond API",
    description="Bail bond case management API",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    expose_headers=["X-Request-ID", "Content-Disposition"],
)


# ============================================================================
# Request metrics
# ============================================================================

@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    """Time every request, tag it with X-Request-ID and feed the performance monitor."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        duration_ms = (time.perf_counter() - started) * 1000
        performance_monitor.record(RequestMetric(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            response_time_ms=round(duration_ms, 2),
            timestamp=datetime.now(timezone.utc),
            user_agent=get_user_agent(request),
            ip=get_client_ip(request),
        ))
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Error handlers
# ============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Field-level validation errors as 400."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Validation failed", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    principal = getattr(request.state, "principal", None)
    logger.exception(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        extra=build_log_context(
            principal_id=str(principal.principal_id) if principal else None,
            principal_type=principal.principal_type.value if principal else None,
            request_id=getattr(request.state, "request_id", None),
            route=request.url.path,
            method=request.method,
        ),
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ============================================================================
# Routers
# ============================================================================

from securebond.routers import (
    alerts,
    audit,
    auth,
    bonds,
    check_ins,
    client_portal,
    clients,
    company,
    contact,
    court_dates,
    expenses,
    geolocation,
    internal,
    legal,
    notifications,
    ops,
    payments,
    reports,
    users,
)

# Auth (staff + client portal login)
app.include_router(auth.router)
app.include_router(users.router)

# Case management (admin)
app.include_router(clients.router)
app.include_router(bonds.router)
app.include_router(payments.router)
app.include_router(expenses.router)
app.include_router(court_dates.router)

# Compliance
app.include_router(check_ins.router)
app.include_router(geolocation.router)
app.include_router(alerts.router)

# Client portal (client sessions only)
app.include_router(client_portal.router)

# Notifications, legal acknowledgments, audit trail
app.include_router(notifications.router)
app.include_router(legal.router)
app.include_router(audit.router)

# Company configuration and public contact form
app.include_router(company.router)
app.include_router(contact.router)

# Reporting, performance metrics, detailed health
app.include_router(reports.router)
app.include_router(ops.router)

# Internal cron endpoints (X-Internal-Secret)
app.include_router(internal.router)


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    if not ops.check_database():
        return JSONResponse(status_code=503, content={"status": "error", "database": "down"})
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
