"""
Caller identity resolution from the platform trust header.

The hosting platform forwards the authenticated principal as base64-encoded
JSON, e.g.:

    {"userId": "...", "userDetails": "ada@example.com",
     "claims": [{"typ": "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier",
                 "val": "..."}]}

Lookup order: userId, then a name-identifier claim, then userDetails.
A missing or corrupt header resolves to the anonymous identity.
"""

import base64
import binascii
import json
from typing import Any, Optional

import structlog

from transcript_labeler.models.classification_models import CallerIdentity

logger = structlog.get_logger(__name__)

ANONYMOUS_CALLER_ID = "anonymous"

NAME_IDENTIFIER_CLAIMS = frozenset(
    {
        "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier",
        "nameidentifier",
        "name_identifier",
        "sub",
    }
)


def anonymous_identity(caller_id: str = ANONYMOUS_CALLER_ID, source: str = "none") -> CallerIdentity:
    return CallerIdentity(caller_id=caller_id, anonymous=True, source=source)


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _claim_identifier(claims: Any) -> Optional[str]:
    if not isinstance(claims, list):
        return None
    for claim in claims:
        if not isinstance(claim, dict):
            continue
        claim_type = claim.get("typ")
        if isinstance(claim_type, str) and claim_type.lower() in NAME_IDENTIFIER_CLAIMS:
            value = _non_empty_str(claim.get("val"))
            if value:
                return value
    return None


def decode_principal(header_value: str) -> dict[str, Any]:
    """
    Decode a base64 JSON principal header.

    Raises:
        ValueError: If the header is not valid base64, not UTF-8 JSON
            (nesting past the recursion limit included), or does not hold
            a JSON object
    """
    try:
        decoded = base64.b64decode(header_value, validate=False)
        principal = json.loads(decoded.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Undecodable principal header: {e}") from e
    except RecursionError as e:
        raise ValueError("Principal header JSON is nested too deeply") from e

    if not isinstance(principal, dict):
        raise ValueError(f"Principal header is not a JSON object (got {type(principal).__name__})")
    return principal


def resolve_caller_identity(
    header_value: Optional[str],
    anonymous_caller_id: str = ANONYMOUS_CALLER_ID,
) -> CallerIdentity:
    """
    Resolve the quota key for a request.

    Never raises: decode failures are logged and demote the caller to anonymous.

    Args:
        header_value: Raw trust header value, if present
        anonymous_caller_id: Identity used for callers without a usable header

    Returns:
        CallerIdentity for quota accounting
    """
    if not header_value:
        return anonymous_identity(anonymous_caller_id)

    try:
        principal = decode_principal(header_value)
    except ValueError as e:
        logger.warning("Failed to decode principal header, treating caller as anonymous", error=str(e))
        return anonymous_identity(anonymous_caller_id, source="invalid")

    user_id = _non_empty_str(principal.get("userId"))
    if user_id:
        return CallerIdentity(caller_id=user_id, source="userId")

    claim_id = _claim_identifier(principal.get("claims"))
    if claim_id:
        return CallerIdentity(caller_id=claim_id, source="claim")

    user_details = _non_empty_str(principal.get("userDetails"))
    if user_details:
        return CallerIdentity(caller_id=user_details, source="userDetails")

    logger.info("Principal header carries no identifier, treating caller as anonymous")
    return anonymous_identity(anonymous_caller_id, source="empty")
