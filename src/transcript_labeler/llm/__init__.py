"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- AnthropicClient: Implementation for the Anthropic Messages API
- PromptBuilder: Renders labeling prompts for a batch
- exceptions: LLM-specific exceptions
"""

from transcript_labeler.llm.base_client import BaseLLMClient
from transcript_labeler.llm.anthropic_client import AnthropicClient
from transcript_labeler.llm.prompt_builder import PromptBuilder
from transcript_labeler.llm.exceptions import (
    LLMClientError,
    LLMConfigurationError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
)

__all__ = [
    "BaseLLMClient",
    "AnthropicClient",
    "PromptBuilder",
    "LLMClientError",
    "LLMConfigurationError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMRateLimitError",
    "LLMTimeoutError",
]
