"""
Custom exceptions for the LLM client layer.

These exceptions let the gateway and orchestrator distinguish remote failure
modes. ``retryable`` tells the gateway whether another attempt (with its own
throughput slot) may succeed; anything that surfaces from the gateway aborts
the whole request.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    retryable = False

    def __init__(self, message: str, details: dict | None = None, retryable: bool | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if retryable is not None:
            self.retryable = retryable


class LLMConfigurationError(LLMClientError):
    """
    Raised when the client cannot be built, e.g. the API key is missing.
    """
    pass


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to reach the inference provider.

    Includes network errors, DNS failures, etc.
    """
    retryable = True


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when the request exceeds the timeout threshold.
    """
    pass


class LLMGenerationError(LLMClientError):
    """
    Raised when the provider answers but yields no usable text.

    Examples:
    - 4xx/5xx error from the API (5xx is retryable)
    - Response body without a text content block
    - Response body that is not JSON
    """
    pass


class LLMRateLimitError(LLMGenerationError):
    """
    Raised when the provider answers 429.
    """
    retryable = True
