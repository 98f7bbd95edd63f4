"""
Response parser: model output -> per-text labels.

Turns raw model text into one LabeledText per batch text, in batch order.
The outcome is tagged so the fallback path is explicit:

- Parsed: JSON recovered and reconciled onto the batch
- Unparseable: no usable JSON; every text gets an empty category

Parse problems never raise out of this module.
"""

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Sequence, Union

import structlog

from transcript_labeler.models.classification_models import LabeledText
from transcript_labeler.models.enums import CategoryEnum
from transcript_labeler.monitoring.metrics import parse_outcomes_total
from .exceptions import ResultShapeError, ValidationError
from .json_parse import JSONParser

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Parsed:
    """Model output parsed; results are aligned with the batch."""

    results: list[LabeledText]
    method: str


@dataclass(frozen=True)
class Unparseable:
    """Model output unusable; results carry empty categories."""

    results: list[LabeledText]
    reason: str


ParseOutcome = Union[Parsed, Unparseable]


def _coerce_category(value: Any) -> str:
    if value is None:
        return CategoryEnum.UNLABELED.value
    if isinstance(value, str):
        return value
    return str(value)


class ResponseParser:
    """
    Parse and reconcile model output against the batch that produced it.

    Reconciliation runs in two passes:
    1. Each input text takes the first unclaimed parsed item with the same
       text. Every exact match is made before any fallback.
    2. Texts still unmatched take the remaining object items in order, so
       with no exact matches at all this is a positional pairing.
    Texts left over after both passes get an empty category.

    The output text is always the input text, so results are never lost,
    duplicated or reordered, whatever the model returned.
    """

    def __init__(self, json_parser: JSONParser | None = None):
        self.json_parser = json_parser or JSONParser()

    def parse(self, content: str, batch: Sequence[str]) -> ParseOutcome:
        """
        Parse model content for a batch.

        Args:
            content: Raw text returned by the model
            batch: Texts sent in the request, in order

        Returns:
            Parsed or Unparseable outcome with one result per batch text
        """
        try:
            parsed = self.json_parser.parse(content)
            items = self._as_items(parsed.value)
        except ValidationError as e:
            parse_outcomes_total.labels(outcome="unparseable").inc()
            logger.warning(
                "Failed to parse model response, defaulting categories",
                error=e.message,
                details=e.details,
                batch_size=len(batch),
            )
            return Unparseable(
                results=[LabeledText.unlabeled(text) for text in batch],
                reason=e.message,
            )

        parse_outcomes_total.labels(outcome=parsed.method).inc()
        results = self._reconcile(items, batch)

        if len(items) != len(batch):
            logger.info(
                "Model returned a different number of items than sent",
                sent=len(batch),
                returned=len(items),
            )

        return Parsed(results=results, method=parsed.method)

    def _as_items(self, value: Any) -> list[Any]:
        """Normalize a decoded JSON value into a list of candidate items."""
        if isinstance(value, list):
            return value

        if isinstance(value, dict):
            if "text" in value or "category" in value:
                return [value]
            # Wrapped form, e.g. {"results": [...]}
            for nested in value.values():
                if isinstance(nested, list):
                    return nested
            raise ResultShapeError(
                "JSON object holds no list of results",
                found_type="dict",
            )

        raise ResultShapeError(
            f"Model response is not a JSON array (got {type(value).__name__})",
            found_type=type(value).__name__,
        )

    def _reconcile(self, items: list[Any], batch: Sequence[str]) -> list[LabeledText]:
        by_text: dict[str, deque[int]] = defaultdict(deque)
        for index, item in enumerate(items):
            if isinstance(item, dict) and isinstance(item.get("text"), str):
                by_text[item["text"]].append(index)

        # Exact text matches claim their items before any fallback runs
        assigned: dict[int, int] = {}
        for position, text in enumerate(batch):
            candidates = by_text.get(text)
            if candidates:
                assigned[position] = candidates.popleft()

        used = set(assigned.values())
        leftovers = deque(
            index for index, item in enumerate(items) if index not in used and isinstance(item, dict)
        )
        for position in range(len(batch)):
            if position not in assigned and leftovers:
                assigned[position] = leftovers.popleft()

        results = []
        for position, text in enumerate(batch):
            index = assigned.get(position)
            if index is None:
                results.append(LabeledText.unlabeled(text))
            else:
                category = _coerce_category(items[index].get("category"))
                results.append(LabeledText(text=text, category=category))

        return results
