"""
Parsing and reconciliation of model output.

- JSONParser: strict parse, then extraction of the first embedded JSON value
- ResponseParser: tagged Parsed / Unparseable outcome aligned with the batch
"""

from .exceptions import JSONParseError, ResultShapeError, ValidationError
from .json_parse import JSONParser, ParsedJSON
from .response_parser import ParseOutcome, Parsed, ResponseParser, Unparseable

__all__ = [
    "ValidationError",
    "JSONParseError",
    "ResultShapeError",
    "JSONParser",
    "ParsedJSON",
    "ResponseParser",
    "ParseOutcome",
    "Parsed",
    "Unparseable",
]
