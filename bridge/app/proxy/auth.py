"""
API key extraction for forwarded requests.

The bridge does not authenticate callers itself. It only lifts a CAST AI API
key off the inbound request so it can be re-sent upstream; CAST AI rejects
the call if the key is missing or wrong.
"""

from typing import Mapping, Optional

from fastapi import Request

CASTAI_KEY_HEADER = "X-CastAI-API-Key"
GENERIC_KEY_HEADER = "X-API-Key"
BEARER_PREFIX = "Bearer "


def extract_api_key(headers: Mapping[str, str]) -> Optional[str]:
    """
    Pick the API key from inbound headers.

    Precedence: X-CastAI-API-Key, then X-API-Key, then the Authorization
    header with its "Bearer " prefix stripped. The first non-empty value wins.

    Args:
        headers: Inbound request headers (case-insensitive mapping)

    Returns:
        The API key, or None when the request carries no credentials
    """
    for name in (CASTAI_KEY_HEADER, GENERIC_KEY_HEADER):
        value = headers.get(name)
        if value:
            return value

    authorization = headers.get("Authorization")
    if authorization:
        if authorization.startswith(BEARER_PREFIX):
            authorization = authorization[len(BEARER_PREFIX):]
        return authorization or None

    return None


def get_api_key(request: Request) -> Optional[str]:
    """Dependency wrapper around extract_api_key."""
    return extract_api_key(request.headers)
