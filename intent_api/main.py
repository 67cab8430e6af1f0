"""
AI Intent Classifier: FastAPI Service

Scores inbound leads for enrollment readiness and optionally pushes the result
back to the CRM.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intent_api.config import settings
from intent_api.errors import RateLimitExceeded, ServiceError
from intent_api.routes import classifier

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the scoring profile on startup so a broken profile fails the deploy, not a request."""
    scorer = classifier.get_scorer()
    logger.info("Loaded scoring profile %r (%s scheme)", scorer.profile.name, scorer.profile.scheme)
    yield


app = FastAPI(
    title="AI Intent Classifier API",
    description="Deterministic lead readiness scoring with optional LLM classification and CRM push-back.",
    version=settings.service_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(classifier.router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code < 500:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    else:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)

    headers = None
    if isinstance(exc, RateLimitExceeded):
        headers = {"Retry-After": str(max(1, round(exc.retry_after)))}
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
        headers=headers,
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


@app.get("/", tags=["health"])
async def root():
    """Liveness probe describing the service."""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "status": "ok",
    }


@app.get("/health", tags=["health"])
async def health():
    """Health check for load balancers and container orchestration."""
    return {"status": "ok"}
