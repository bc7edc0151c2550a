"""Pagination helpers."""
from __future__ import annotations

from typing import Any, Iterable, Optional, Type
from urllib.parse import parse_qs, urlsplit

from requests.utils import parse_header_links

from . import scope
from .base import ResourceBase
from .client import send
from .errors import ShopifyHTTPError


def next_page_info(link_header: Optional[str]) -> Optional[str]:
    """Return the ``page_info`` cursor of the ``rel="next"`` link, if any."""
    if not link_header:
        return None
    for link in parse_header_links(link_header):
        if link.get("rel") == "next":
            values = parse_qs(urlsplit(link.get("url", "")).query).get("page_info")
            return values[0] if values else None
    return None


def iter_pages(
    resource: Type[ResourceBase],
    page_size: int = 250,
    **options: Any,
) -> Iterable[dict[str, Any]]:
    """
    Yield records of `resource` across every page, following the cursor in
    the `Link` response header until there is no `rel="next"` link.

    Shopify only accepts `limit` alongside `page_info`, so filters in `options`
    apply to the first request; prefix options (e.g. `product_id`) apply to
    every request. The session active when iteration starts is used for
    every page.

    Args:
        resource: A `ResourceBase` subclass such as `Product`.
        page_size: Records per page (default 250, Shopify max).
        options: Prefix options and first-page filters.

    Yields:
        dict: Each record, one at a time.

    Raises:
        NoActiveSessionError: If no session is active when iteration starts.
        ShopifyHTTPError: On an error status or a body that is not JSON.

    Example:
        >>> for product in iter_pages(Product, page_size=50, status="active"):
        ...     print(product["title"])
    """
    session = scope.require_session()
    prefix_options, query = resource._split_options(options)
    limit = query.pop("limit", None)
    limit = limit if (isinstance(limit, int) and limit > 0) else page_size
    params: dict[str, Any] = {**query, "limit": limit}
    with scope.temp(session):
        path = resource.collection_path(**prefix_options)
    while True:
        # Pages always go to the shop the iteration started on, whatever is
        # active when the consumer resumes the generator.
        with scope.temp(session):
            resp = send("GET", path, params=params)
        try:
            data = resp.json()
        except ValueError as exc:
            raise ShopifyHTTPError(getattr(resp, "text", "")[:300], resp.status_code) from exc
        if resource.collection_name not in data:
            raise ValueError(f"response missing key '{resource.collection_name}'")
        for item in data[resource.collection_name]:
            yield item
        cursor = next_page_info((getattr(resp, "headers", None) or {}).get("Link"))
        if not cursor:
            break
        params = {"limit": limit, "page_info": cursor}
