"""
Anthropic client implementation for LLM inference.

Communicates with the Anthropic Messages API using httpx AsyncClient. Supports:
- System + user instruction per request
- Connection pooling, one HTTP call per generation
- Token/latency metadata extraction
"""

import json
import time
from typing import Any, Dict, Optional
import httpx
import structlog

from transcript_labeler.llm.base_client import BaseLLMClient
from transcript_labeler.llm.exceptions import (
    LLMConfigurationError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from transcript_labeler.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from transcript_labeler.monitoring.metrics import llm_latency_seconds, llm_tokens_total


logger = structlog.get_logger(__name__)


class AnthropicClient(BaseLLMClient):
    """
    Anthropic-specific LLM client using httpx for async HTTP communication.

    API Endpoints:
    - POST /v1/messages: Generate a message
    - GET /v1/models: Lightweight reachability check

    Features:
    - Connection pooling via persistent AsyncClient
    - Retryable error flags for timeouts, network errors, 429 and 5xx
    - Metadata extraction (tokens, latency, stop reason)
    """

    MESSAGES_PATH = "/v1/messages"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.anthropic.com",
        api_version: str = "2023-06-01",
        timeout: int = 60,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        """
        Initialize Anthropic client.

        Args:
            api_key: Anthropic API key
            base_url: API base URL
            api_version: Value of the anthropic-version header
            timeout: Request timeout in seconds
            connection_limits: httpx connection pool limits (default: 10 max connections)
            transport: Custom httpx transport (tests use httpx.MockTransport)
            **kwargs: Additional config

        Raises:
            LLMConfigurationError: If api_key is empty
        """
        if not api_key:
            raise LLMConfigurationError("Anthropic API key is required")

        super().__init__(base_url, timeout, **kwargs)

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )

        self._api_key = api_key
        self.api_version = api_version
        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
                headers={
                    "x-api-key": self._api_key,
                    "anthropic-version": self.api_version,
                    "content-type": "application/json",
                },
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    def _build_payload(self, request: LLMGenerationRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system_prompt:
            payload["system"] = request.system_prompt
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.stop_sequences:
            payload["stop_sequences"] = request.stop_sequences
        return payload

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate completion using the Messages API (one HTTP call).

        POST /v1/messages with payload:
        {
            "model": "claude-3-5-sonnet-20240620",
            "max_tokens": 500,
            "system": "...",
            "messages": [{"role": "user", "content": "..."}]
        }

        Response:
        {
            "model": "claude-3-5-sonnet-20240620",
            "content": [{"type": "text", "text": "..."}],
            "stop_reason": "end_turn",
            "usage": {"input_tokens": 250, "output_tokens": 120}
        }

        Retries are the caller's job: each attempt must take its own
        throughput slot, so this method never loops. Timeouts, network
        errors, 429 and 5xx raise retryable errors.
        """
        start_time = time.time()
        payload = self._build_payload(request)

        logger.info(
            "Sending generation request to Anthropic",
            model=request.model,
            prompt_length=len(request.prompt),
            max_tokens=request.max_tokens,
        )

        try:
            client = await self._get_client()
            response = await client.post(self.MESSAGES_PATH, json=payload)
            response.raise_for_status()
            response_data = response.json()

        except httpx.TimeoutException as e:
            self._observe_failure(request.model, start_time)
            logger.warning("Anthropic request timeout", timeout=self.timeout, error=str(e))
            raise LLMTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"timeout": self.timeout}
            ) from e

        except httpx.HTTPStatusError as e:
            self._observe_failure(request.model, start_time)
            status_code = e.response.status_code
            error_text = e.response.text
            logger.error("Anthropic HTTP error", status_code=status_code, error_text=error_text[:500])

            error_cls = LLMRateLimitError if status_code == 429 else LLMGenerationError
            raise error_cls(
                f"Anthropic API error: {status_code}",
                details={"status": status_code, "error": error_text[:500]},
                retryable=status_code == 429 or status_code >= 500,
            ) from e

        except (httpx.NetworkError, httpx.RemoteProtocolError) as e:
            self._observe_failure(request.model, start_time)
            logger.warning("Anthropic network error", error=str(e))
            raise LLMConnectionError(
                f"Network error: {str(e)}",
                details={"error_type": type(e).__name__}
            ) from e

        except json.JSONDecodeError as e:
            self._observe_failure(request.model, start_time)
            logger.error("Failed to decode Anthropic response body", error=str(e))
            raise LLMGenerationError(
                "Invalid JSON body from Anthropic",
                details={"parse_error": str(e)}
            ) from e

        return self._to_response(response_data, request, start_time)

    def _to_response(
        self,
        response_data: Any,
        request: LLMGenerationRequest,
        start_time: float,
    ) -> LLMGenerationResponse:
        latency_ms = int((time.time() - start_time) * 1000)

        content = self._extract_text(response_data)
        if not content:
            self._observe_failure(request.model, start_time)
            raise LLMGenerationError(
                "Unexpected Anthropic response",
                details={"response_keys": sorted(response_data) if isinstance(response_data, dict) else None}
            )

        model_version = response_data.get("model", request.model)
        usage = response_data.get("usage") or {}
        prompt_tokens = usage.get("input_tokens")
        completion_tokens = usage.get("output_tokens")

        logger.info(
            "Anthropic generation successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            stop_reason=response_data.get("stop_reason"),
        )

        llm_latency_seconds.labels(model=model_version, success="true").observe(latency_ms / 1000.0)
        if prompt_tokens:
            llm_tokens_total.labels(model=model_version, token_type="prompt").inc(prompt_tokens)
        if completion_tokens:
            llm_tokens_total.labels(model=model_version, token_type="completion").inc(completion_tokens)

        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason=response_data.get("stop_reason"),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            raw_metadata={"id": response_data.get("id")},
        )

    @staticmethod
    def _extract_text(response_data: Any) -> Optional[str]:
        """Text of the first text content block, if any."""
        if not isinstance(response_data, dict):
            return None
        blocks = response_data.get("content")
        if not isinstance(blocks, list):
            return None
        for block in blocks:
            if isinstance(block, dict) and block.get("type", "text") == "text":
                text = block.get("text")
                if isinstance(text, str):
                    return text
        return None

    @staticmethod
    def _observe_failure(model: str, start_time: float) -> None:
        llm_latency_seconds.labels(model=model, success="false").observe(time.time() - start_time)

    async def health_check(self) -> bool:
        """
        Check API reachability via GET /v1/models.

        Returns True if the API answers with a 2xx status, False otherwise.
        """
        try:
            client = await self._get_client()
            response = await client.get("/v1/models", timeout=5.0)
            response.raise_for_status()
            logger.debug("Anthropic health check passed")
            return True
        except httpx.HTTPError as e:
            logger.warning("Anthropic health check failed", error=str(e))
            return False

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Anthropic client connection")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
