"""
API routes for snippet categorization and service introspection.
"""

import json
import time
from datetime import datetime
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from transcript_labeler.api.dependencies import (
    get_classifier_gateway,
    get_orchestrator,
    get_settings,
)
from transcript_labeler.api.models import (
    CategorizeRequest,
    CategorizeResponse,
    ErrorResponse,
    HealthResponse,
    VersionResponse,
)
from transcript_labeler.config import Settings
from transcript_labeler.orchestrator import RequestOrchestrator

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _read_json_body(request: Request) -> Any:
    """Decode the request body, treating an empty or invalid body as {}."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Request body is not valid JSON, treating as empty", body_length=len(raw))
        return {}


@router.post(
    "/api/categorize",
    status_code=status.HTTP_200_OK,
    summary="Categorize transcript snippets",
    description="""
    Label each snippet as PROB (problem-oriented), SOLN (solution-oriented)
    or "" (neither).

    Entries without a non-empty string `text` are dropped silently. The caller
    is identified by the optional `x-ms-client-principal` header and held to an
    hourly quota.
    """,
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": CategorizeRequest.model_json_schema()}},
            "required": False,
        }
    },
    responses={
        200: {"model": CategorizeResponse, "description": "Snippets labeled"},
        429: {"model": ErrorResponse, "description": "Hourly limit exceeded"},
        500: {"model": ErrorResponse, "description": "Remote model or internal failure"},
    },
)
async def categorize(
    request: Request,
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Categorize the entries of the request body.

    Args:
        request: Incoming request (body read leniently)
        orchestrator: Request orchestrator (injected)
        settings: Application settings (injected)

    Returns:
        JSONResponse with the orchestrator's status code and body
    """
    body = await _read_json_body(request)
    principal_header = request.headers.get(settings.PRINCIPAL_HEADER)

    result = await orchestrator.handle(body, principal_header)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="""
    Report liveness and configuration status. By default the remote model
    is not contacted. With `remote=true` the provider model list is fetched
    as a reachability check; no generation runs, so no tokens are spent.
    """,
)
async def health_check(
    remote: bool = Query(False, description="Also check that the remote model API answers"),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """
    Check configuration of the service.

    Args:
        remote: List models on the provider (no generation, no tokens)

    Returns:
        HealthResponse with component statuses
    """
    checks: dict[str, str] = {}
    start_time = time.time()
    gateway = None

    try:
        gateway = get_classifier_gateway()
        checks["gateway"] = "remote" if gateway.calls_remote else "bypassed (debug mode)"
        overall = "healthy"
    except Exception as e:
        checks["gateway"] = f"unavailable ({type(e).__name__})"
        overall = "degraded"

    if remote and gateway is not None and gateway.llm_client is not None:
        if await gateway.llm_client.health_check():
            checks["remote_model"] = "reachable"
        else:
            checks["remote_model"] = "unreachable"
            overall = "degraded"

    checks["api_key"] = "configured" if settings.ANTHROPIC_API_KEY else "missing"

    logger.info(
        "Health check",
        status=overall,
        checks=checks,
        duration_ms=int((time.time() - start_time) * 1000),
    )

    return HealthResponse(
        status=overall,
        version=settings.APP_VERSION,
        checks=checks,
        timestamp=datetime.utcnow(),
    )


@router.get(
    "/version",
    response_model=VersionResponse,
    summary="Get service configuration",
)
async def get_version(
    settings: Settings = Depends(get_settings),
) -> VersionResponse:
    """Return version and the effective batching, throughput and quota settings."""
    return VersionResponse(
        service_version=settings.APP_VERSION,
        model_name=settings.ANTHROPIC_MODEL,
        max_batch_chars=settings.MAX_BATCH_CHARS,
        rate_limit_interval_seconds=settings.RATE_LIMIT_INTERVAL_SECONDS,
        quota_limits={
            "identified": settings.QUOTA_LIMIT_IDENTIFIED,
            "anonymous": settings.QUOTA_LIMIT_ANONYMOUS,
        },
    )
