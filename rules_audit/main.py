import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rules_audit.api.audit import router as audit_api_router
from rules_audit.api.errors import create_error_response
from rules_audit.api.rules import router as rules_api_router
from rules_audit.api.telemetry import router as telemetry_api_router
from rules_audit.api.validation import router as validation_api_router
from rules_audit.core.config import config
from rules_audit.core.errors import RuleNotFoundError
from rules_audit.core.utils.logging import configure_logging
from rules_audit.runtime import get_runtime

# --- Application Setup ---

configure_logging(config.logging)

app = FastAPI(
    title="Rules Audit",
    description="Rule telemetry and coverage audit for the validation engine.",
    version="0.1.0",
)

# --- CORS Configuration ---

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=config.cors.headers,
)

# --- Include Routers ---

app.include_router(telemetry_api_router, prefix="/api/v1")
app.include_router(audit_api_router, prefix="/api/v1")
app.include_router(validation_api_router, prefix="/api/v1")
app.include_router(rules_api_router, prefix="/api/v1")

# --- Error Handlers ---


@app.exception_handler(RuleNotFoundError)
async def rule_not_found_handler(request: Request, exc: RuleNotFoundError) -> JSONResponse:
    error = create_error_response(
        code="rule_not_found",
        message=f"Rule '{exc}' is not in the registry",
        details={"rule_id": str(exc)},
    )
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error.model_dump())


# --- Root Endpoint ---


@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the service is running."""
    runtime = get_runtime()
    return {
        "status": "ok",
        "message": "Rules audit is running.",
        "rules": runtime.registry.count(),
        "telemetry_enabled": runtime.store.is_enabled(),
    }


# --- Application Lifecycle ---


@app.on_event("startup")
async def startup_event():
    """Validate configuration and load the rule registry before serving."""
    config.validate()
    runtime = get_runtime()
    runtime.sink.start()
    logging.info(f"🚀 Rules audit started with {runtime.registry.count()} rules")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop background delivery and flush buffered analytics events."""
    sent = get_runtime().sink.stop()
    logging.info(f"Flushed {sent} telemetry events on shutdown")
