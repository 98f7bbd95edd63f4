"""
Enumerations for Transcript Labeler data models.
"""

from enum import Enum


class CategoryEnum(str, Enum):
    """
    Design-process category of a transcript snippet.

    Single-label: each snippet gets exactly one value. UNLABELED (empty string)
    is the value for snippets that fit neither definition and the fallback
    when the model output cannot be parsed.
    """

    PROB = "PROB"
    SOLN = "SOLN"
    UNLABELED = ""

    @classmethod
    def values(cls) -> list[str]:
        """Allowed category strings, in prompt order."""
        return [member.value for member in cls]
