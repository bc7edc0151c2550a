"""Session object binding a shop, an access token and an API version."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union
from urllib.parse import urlsplit

from .api_version import ApiVersion
from .errors import ValidationError

MYSHOPIFY_DOMAIN = "myshopify.com"


def normalize_shop_domain(shop_domain: str) -> str:
    """Reduce ``shop_domain`` to a bare ``host[:port]``.

    Accepts ``shop.example.com``, ``https://shop.example.com``, an optional
    trailing ``/`` or ``/admin``, and a bare shop name (``shop1`` becomes
    ``shop1.myshopify.com``). Anything else raises ``ValidationError``.
    """
    raw = shop_domain.strip() if isinstance(shop_domain, str) else ""
    if not raw:
        raise ValidationError("shop domain must not be empty")

    parts = urlsplit(raw if "://" in raw else f"//{raw}")
    if parts.scheme not in ("", "http", "https"):
        raise ValidationError(f"unsupported scheme in shop domain {raw!r}")
    if parts.query or parts.fragment or parts.username or parts.password:
        raise ValidationError(f"shop domain {raw!r} must be a host name")
    if parts.path.strip("/") not in ("", "admin"):
        raise ValidationError(f"shop domain {raw!r} contains a path")
    try:
        port = parts.port
    except ValueError as exc:
        raise ValidationError(f"invalid port in shop domain {raw!r}") from exc

    host = parts.hostname or ""
    if not host:
        raise ValidationError(f"shop domain {raw!r} has no host")
    if "." not in host and host != "localhost":
        host = f"{host}.{MYSHOPIFY_DOMAIN}"
    return f"{host}:{port}" if port else host


@dataclass(frozen=True)
class Session:
    """Credentials and API version for acting on one Shopify store.

    Sessions are immutable values; two sessions compare equal when the shop,
    token and version all match. Activate one with
    :func:`shopify_rest_helper.scope.activate_session` or scope it to a block
    with :func:`shopify_rest_helper.scope.with_session`.

    Attributes:
        shop_domain: Bare host of the store (e.g. ``'your-store.myshopify.com'``)
        access_token: The API access token for authentication
        api_version: The Admin API version (default: no version)
    """

    shop_domain: str
    access_token: str = field(repr=False)
    api_version: ApiVersion = field(default_factory=ApiVersion.no_version)

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: Union[ApiVersion, str, None] = None,
    ) -> None:
        object.__setattr__(self, "shop_domain", normalize_shop_domain(shop_domain))
        object.__setattr__(self, "access_token", (access_token or "").strip())
        object.__setattr__(self, "api_version", ApiVersion.coerce(api_version))

    @property
    def site(self) -> str:
        return f"https://{self.shop_domain}"

    @property
    def valid(self) -> bool:
        return bool(self.shop_domain and self.access_token)
