"""
LLM-specific data models for request/response cycle.

These models are internal to the LLM layer and handle the raw communication
with the inference provider. They are separate from the classification models
(LabeledText, BatchClassification) so the client implementation can change
without touching the gateway or orchestrator.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class LLMGenerationRequest(BaseModel):
    """
    Internal request model for LLM generation.

    Standardized format handed to any BaseLLMClient implementation.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="User instruction embedding the batch")
    system_prompt: Optional[str] = Field(default=None, description="System-level instruction")
    model: str = Field(..., description="Model identifier (e.g., 'claude-3-5-sonnet-20240620')")
    max_tokens: int = Field(default=500, ge=1, le=8192, description="Maximum tokens to generate")
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Sampling temperature")
    stop_sequences: Optional[list[str]] = Field(default=None, description="Stop sequences for generation")


class LLMGenerationResponse(BaseModel):
    """
    Internal response model from LLM generation.

    Contains the raw generated text plus metadata for logging. Parsing of the
    content into labels happens in the validation layer.
    """
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text (expected to hold a JSON array)")
    model_version: str = Field(..., description="Model that actually served the request")
    finish_reason: Optional[str] = Field(
        default=None,
        description="Why generation stopped: 'end_turn', 'max_tokens', 'stop_sequence', etc."
    )
    prompt_tokens: Optional[int] = Field(default=None, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, description="Tokens in completion")
    latency_ms: int = Field(..., ge=0, description="Generation latency in milliseconds")
    raw_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific metadata (for debugging)"
    )
