"""
Upstream Client
===============

Issues calls against the CAST AI REST API and normalizes failures into
UpstreamError.

Request shape:
    - Accept / Content-Type: application/json
    - X-API-Key: <key>   (only when the caller supplied one)
    - JSON body verbatim for methods that carry one

No retries, no custom timeouts: the httpx client defaults apply.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import UpstreamError

logger = logging.getLogger(__name__)

UPSTREAM_KEY_HEADER = "X-API-Key"
BODY_METHODS = {"POST", "PUT", "PATCH"}


def build_upstream_headers(api_key: Optional[str]) -> Dict[str, str]:
    """
    Build headers for an upstream request.

    Args:
        api_key: CAST AI API key extracted from the inbound request

    Returns:
        Headers dict for the upstream request
    """
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if api_key:
        headers[UPSTREAM_KEY_HEADER] = api_key
    return headers


def decode_body(response: httpx.Response) -> Any:
    """
    Decode an upstream response body.

    Returns parsed JSON, the raw text when the body is not JSON, or None
    when the body is empty.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class UpstreamClient:
    """
    Thin wrapper around a shared httpx.AsyncClient bound to the CAST AI base URL.

    The underlying client is owned by the application lifespan; this class
    never closes it.
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str):
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    async def request(
        self,
        method: str,
        path: str,
        api_key: Optional[str] = None,
        query: Optional[Dict[str, str]] = None,
        body: Any = None
    ) -> Any:
        """
        Call the upstream API and return its decoded body.

        Args:
            method: HTTP method
            path: Upstream path, already substituted (e.g. /v1/organizations)
            api_key: Optional CAST AI API key
            query: Query parameters to append (only present ones)
            body: JSON body, sent only for POST/PUT/PATCH

        Returns:
            Decoded upstream response body

        Raises:
            UpstreamError: On transport failure or a non-2xx status
        """
        method = method.upper()
        url = f"{self._base_url}{path}"
        kwargs: Dict[str, Any] = {
            "headers": build_upstream_headers(api_key),
        }
        if query:
            kwargs["params"] = query
        if method in BODY_METHODS and body is not None:
            kwargs["json"] = body

        logger.debug(
            f"Forwarding {method} {path}",
            extra={"query": list(query or {}), "has_api_key": bool(api_key)}
        )

        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Upstream transport error for {method} {path}: {e}")
            raise UpstreamError(
                str(e) or "Upstream request failed",
                status_code=500
            ) from e

        if response.is_success:
            return decode_body(response)

        details = decode_body(response)
        message = None
        if isinstance(details, dict) and details.get("message"):
            message = str(details["message"])
        if not message:
            message = f"Request failed with status code {response.status_code}"

        logger.warning(
            f"Upstream returned {response.status_code} for {method} {path}",
            extra={"status_code": response.status_code}
        )
        raise UpstreamError(
            message,
            status_code=response.status_code,
            details=details
        )

    async def get(
        self,
        path: str,
        api_key: Optional[str] = None,
        query: Optional[Dict[str, str]] = None
    ) -> Any:
        return await self.request("GET", path, api_key=api_key, query=query)
