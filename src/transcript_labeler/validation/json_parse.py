"""
JSON parsing of raw model output.

Two attempts, in order:
1. Strict: the whole content is one JSON document.
2. Extraction: the first JSON array or object embedded in the content
   (tolerates commentary or code fences around the JSON).
"""

import json
from dataclasses import dataclass
from typing import Any

import structlog

from .exceptions import JSONParseError

logger = structlog.get_logger(__name__)

STRICT = "strict"
EXTRACTED = "extracted"


@dataclass(frozen=True)
class ParsedJSON:
    """Decoded JSON value and the path that produced it (strict or extracted)."""

    value: Any
    method: str


class JSONParser:
    """
    Parse model output into a JSON value.

    Raises JSONParseError when no JSON array/object can be recovered,
    including input nested deeper than the interpreter recursion limit.
    """

    def __init__(self):
        self._decoder = json.JSONDecoder()

    def parse(self, content: str) -> ParsedJSON:
        """
        Parse JSON content from a model response.

        Args:
            content: Raw text returned by the model

        Returns:
            ParsedJSON with the decoded value

        Raises:
            JSONParseError: If content holds no decodable JSON array/object
        """
        if not content or not content.strip():
            raise JSONParseError(
                "Model response content is empty or whitespace-only",
                raw_content=content,
                parse_error="Empty content",
            )

        try:
            return ParsedJSON(value=json.loads(content), method=STRICT)
        except json.JSONDecodeError as e:
            strict_error = f"{e.msg} at line {e.lineno} col {e.colno}"
        except RecursionError:
            strict_error = "JSON nested too deeply"

        extracted = self._extract_first(content)
        if extracted is not None:
            logger.debug("Extracted JSON from surrounding text", content_length=len(content))
            return ParsedJSON(value=extracted, method=EXTRACTED)

        raise JSONParseError(
            "Failed to parse model response as JSON",
            raw_content=content,
            parse_error=strict_error,
        )

    def _extract_first(self, content: str) -> Any:
        """Return the first decodable JSON array/object in content, or None."""
        for index, char in enumerate(content):
            if char not in "[{":
                continue
            try:
                value, _ = self._decoder.raw_decode(content, index)
            except json.JSONDecodeError:
                continue
            except RecursionError:
                # Rejected outright; rescanning from each inner bracket is quadratic
                logger.warning("JSON nested too deeply to extract", content_length=len(content))
                return None
            return value
        return None
