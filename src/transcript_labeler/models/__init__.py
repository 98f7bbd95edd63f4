"""
Data models for the Transcript Labeler.

Includes:
- Enums (CategoryEnum)
- Classification models (LabeledText, DebugRecord, BatchClassification, CallerIdentity)
- LLM models (LLMGenerationRequest, LLMGenerationResponse)
"""

from transcript_labeler.models.enums import CategoryEnum
from transcript_labeler.models.classification_models import (
    BatchClassification,
    CallerIdentity,
    DebugRecord,
    LabeledText,
)
from transcript_labeler.models.llm_models import (
    LLMGenerationRequest,
    LLMGenerationResponse,
)

__all__ = [
    # Enums
    "CategoryEnum",
    # Classification models
    "LabeledText",
    "DebugRecord",
    "BatchClassification",
    "CallerIdentity",
    # LLM models
    "LLMGenerationRequest",
    "LLMGenerationResponse",
]
