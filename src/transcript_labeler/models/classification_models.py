"""
Classification data models for the Transcript Labeler.

These models carry labels from the gateway to the orchestrator and out over
the HTTP surface. Category strings are kept verbatim: only PROB, SOLN and ""
are guaranteed by the prompt, but whatever the model emits is passed through.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from transcript_labeler.models.enums import CategoryEnum


class LabeledText(BaseModel):
    """A single transcript snippet with its assigned category."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Snippet text exactly as submitted")
    category: str = Field(
        default=CategoryEnum.UNLABELED.value,
        description="PROB, SOLN or empty string",
    )

    @classmethod
    def unlabeled(cls, text: str) -> "LabeledText":
        return cls(text=text, category=CategoryEnum.UNLABELED.value)


class DebugRecord(BaseModel):
    """
    Out-of-band diagnostic record for one batch.

    Emitted only when both debug flags are enabled. Serialized with the
    double-underscore keys so consumers can tell it apart from results.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt: str = Field(..., alias="__debugPrompt")
    api_response: str = Field(..., alias="__debugApiResponse")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class BatchClassification:
    """
    Labels for one batch, in the batch's input order.

    Attributes:
        results: One LabeledText per input text
        debug: Diagnostic record when debug-with-real-calls mode is active
        parsed: False when the model output could not be parsed and every
            category was defaulted
    """

    results: list[LabeledText]
    debug: Optional[DebugRecord] = None
    parsed: bool = True

    def to_payload(self) -> list[dict[str, Any]]:
        """Serialize results, followed by the diagnostic record if present."""
        payload = [result.model_dump() for result in self.results]
        if self.debug is not None:
            payload.append(self.debug.to_payload())
        return payload


@dataclass(frozen=True)
class CallerIdentity:
    """
    Caller key used for quota accounting.

    Attributes:
        caller_id: Stable identifier extracted from the trust header
        anonymous: True when no usable header was supplied
    """

    caller_id: str
    anonymous: bool = False
    source: str = field(default="header", compare=False)
