"""
Batching utilities for the classifier gateway.

Packs transcript snippets into size-bounded, order-preserving batches so that
many short texts share one remote call.
"""

from typing import Any, Iterable, Sequence


def batch_texts(texts: Sequence[str], max_chars: int) -> list[list[str]]:
    """
    Split texts into consecutive batches whose summed length stays within max_chars.

    Greedy left-to-right packing: texts are appended to the current batch while
    the running character total stays within the ceiling. When the next text
    would exceed it, the current batch is closed and a new one starts with that
    text. A text longer than max_chars is never split or dropped; it becomes
    the sole member of its own batch.

    Args:
        texts: Snippets in their original order
        max_chars: Character ceiling per batch (must be >= 1)

    Returns:
        List of non-empty batches; concatenating them reproduces ``texts``.

    Raises:
        ValueError: If max_chars is not positive

    Examples:
        >>> batch_texts(["aa", "bb", "cc"], 4)
        [['aa', 'bb'], ['cc']]
        >>> batch_texts(["a", "toolong", "b"], 3)
        [['a'], ['toolong'], ['b']]
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be >= 1, got {max_chars}")

    batches: list[list[str]] = []
    current: list[str] = []
    current_length = 0

    for text in texts:
        if current and current_length + len(text) > max_chars:
            batches.append(current)
            current = []
            current_length = 0
        current.append(text)
        current_length += len(text)

    if current:
        batches.append(current)

    return batches


def extract_texts(body: Any) -> list[str]:
    """
    Pull snippet texts out of a request body of the form {"entries": [{"text": ...}]}.

    Malformed input is filtered, never rejected: a missing or non-list
    ``entries`` yields no texts, and entries that are not objects or whose
    ``text`` is not a non-empty string are dropped. Order is preserved.
    """
    if not isinstance(body, dict):
        return []

    entries = body.get("entries")
    if not isinstance(entries, list):
        return []

    return [
        entry["text"]
        for entry in entries
        if isinstance(entry, dict) and isinstance(entry.get("text"), str) and entry["text"]
    ]


def flatten(batches: Iterable[Sequence[Any]]) -> list[Any]:
    """Concatenate batches back into a single list, preserving order."""
    return [item for batch in batches for item in batch]
