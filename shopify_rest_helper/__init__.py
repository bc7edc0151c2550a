"""Public API exports."""
from .api_version import ApiVersion
from .base import ResourceBase
from .client import execute, send
from .config import __version__, configure, set_default_header
from .errors import (
    InvalidSessionError,
    NoActiveSessionError,
    ShopifyAPIError,
    ShopifyHTTPError,
    ValidationError,
)
from .paginate import iter_pages
from .resources import Customer, Order, Product, Shop, Variant
from .scope import (
    activate_session,
    bind,
    clear_session,
    current_session,
    set_header,
    temp,
    with_session,
)
from .session import Session
from .throttle import credit_left, credit_limit, credit_maxed, credit_used, evict_throttle

__all__ = [
    "ApiVersion",
    "Session",
    "ResourceBase",
    "Shop",
    "Product",
    "Variant",
    "Order",
    "Customer",
    "activate_session",
    "clear_session",
    "current_session",
    "with_session",
    "temp",
    "set_header",
    "bind",
    "configure",
    "set_default_header",
    "send",
    "execute",
    "iter_pages",
    "credit_used",
    "credit_left",
    "credit_limit",
    "credit_maxed",
    "evict_throttle",
    "ShopifyAPIError",
    "ShopifyHTTPError",
    "ValidationError",
    "InvalidSessionError",
    "NoActiveSessionError",
    "__version__",
]
