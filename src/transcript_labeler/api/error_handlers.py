"""
FastAPI exception handlers for structured error responses.

The orchestrator already turns failures into response values; these handlers
cover errors raised outside it (e.g. while building dependencies) and answer
with the same {success: false, error} envelope.
"""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from transcript_labeler.llm.exceptions import LLMClientError, LLMConfigurationError

logger = structlog.get_logger(__name__)


async def llm_configuration_error_handler(request: Request, exc: LLMConfigurationError) -> JSONResponse:
    """
    Handle a misconfigured LLM client (e.g. missing API key).

    Maps to 500 Internal Server Error.
    """
    logger.error("LLM client misconfigured", error=exc.message, details=exc.details)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": exc.message},
    )


async def llm_client_error_handler(request: Request, exc: LLMClientError) -> JSONResponse:
    """
    Handle remote model errors raised outside the orchestrator.

    Maps to 500 Internal Server Error, carrying only the message.
    """
    logger.error("LLM client error", error=exc.message, error_type=type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": exc.message},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error. The stack trace is logged, never returned.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": str(exc) or "An unexpected error occurred"},
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    LLMConfigurationError: llm_configuration_error_handler,
    LLMClientError: llm_client_error_handler,
    Exception: generic_error_handler,
}
