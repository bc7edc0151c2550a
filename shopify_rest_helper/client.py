"""Client helpers."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, TYPE_CHECKING

from .config import get_defaults, get_transport
from .errors import ShopifyHTTPError
from .scope import current_session, effective_headers, effective_site
from .throttle import CALL_LIMIT_HEADER, throttle_for

if TYPE_CHECKING:
    import requests

logger = logging.getLogger(__name__)


def send(
    method: str,
    path: str,
    *,
    params: Mapping[str, Any] | None = None,
    json: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: Optional[float] = None,
) -> "requests.Response":
    """Send a request for ``path`` on behalf of the active session.

    Site, headers and call-limit bucket are read from the current context at
    call time, so activating or clearing a session between two calls always
    takes effect.

    Args:
        method: HTTP verb
        path: Admin path, already version-qualified (e.g. ``/admin/shop.json``)
        params: Optional query string parameters
        json: Optional request body
        headers: Extra headers for this call only
        timeout: Request timeout in seconds (default: configured timeout)

    Returns:
        The transport response for a status below 400.

    Raises:
        NoActiveSessionError: If no session is active and no default site is set
        ShopifyHTTPError: If Shopify answers with an error status
    """
    site = effective_site()
    request_headers = effective_headers()
    request_headers["Accept"] = "application/json"
    if json is not None:
        request_headers["Content-Type"] = "application/json"
    if headers:
        request_headers.update(headers)

    defaults = get_defaults()
    session = current_session()
    throttle = throttle_for(session.shop_domain) if session is not None else None
    if throttle is not None:
        throttle.before_request(defaults.min_bucket, defaults.min_sleep)

    url = f"{site}{path}"
    logger.debug("%s %s", method.upper(), url)
    resp = get_transport().request(
        method.upper(),
        url,
        headers=request_headers,
        params=params,
        json=json,
        timeout=timeout if timeout is not None else defaults.timeout,
    )

    status = getattr(resp, "status_code", None)
    if status is None:
        raise ShopifyHTTPError("Transport response missing status_code")
    if throttle is not None:
        throttle.after_response((getattr(resp, "headers", None) or {}).get(CALL_LIMIT_HEADER))
    if status >= 400:
        snippet = getattr(resp, "text", "")[:300]
        logger.debug("%s %s failed with HTTP %s", method.upper(), url, status)
        raise ShopifyHTTPError(snippet, status)
    return resp


def execute(
    method: str,
    path: str,
    *,
    params: Mapping[str, Any] | None = None,
    json: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: Optional[float] = None,
) -> dict[str, Any]:
    """Like :func:`send` but return the parsed JSON body (``{}`` when empty).

    Example:
        >>> activate_session(Session("your-store.myshopify.com", access_token))
        >>> execute("GET", "/admin/shop.json")["shop"]["name"]
    """
    resp = send(method, path, params=params, json=json, headers=headers, timeout=timeout)
    text = getattr(resp, "text", "")
    if not text or not text.strip():
        return {}
    try:
        return resp.json()
    except ValueError as exc:
        raise ShopifyHTTPError(text[:300], resp.status_code) from exc
