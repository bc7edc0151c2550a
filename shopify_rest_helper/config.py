"""Process-wide defaults shared by every execution context."""
from __future__ import annotations

import os
import platform
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .transport import RequestsTransport, Transport

__version__ = "0.1.0"

USER_AGENT = f"ShopifyRESTHelper/{__version__} Python/{platform.python_version()}"


def _env_site() -> Optional[str]:
    site = os.getenv("SHOPIFY_REST_SITE", "").strip().rstrip("/")
    return site or None


@dataclass(frozen=True)
class Defaults:
    """Read-only snapshot of the process-wide layer.

    Attributes:
        site: Site used when no session is active. Defaults to the
            ``SHOPIFY_REST_SITE`` env var or ``None``.
        headers: Headers sent from every context, ``User-Agent`` included.
        timeout: Request timeout in seconds. Defaults to the
            ``SHOPIFY_REST_TIMEOUT`` env var or ``30``.
        transport: Transport used for outbound calls, created on first use.
        min_bucket: Calls that must be available before a request proceeds.
        min_sleep: Minimum time to sleep when rate limited, in seconds.
    """

    site: Optional[str] = field(default_factory=_env_site)
    headers: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({"User-Agent": USER_AGENT})
    )
    timeout: float = field(
        default_factory=lambda: float(os.getenv("SHOPIFY_REST_TIMEOUT", "30"))
    )
    transport: Optional[Transport] = None
    min_bucket: int = 1
    min_sleep: float = 0.5


_lock = threading.Lock()
_defaults = Defaults()


def get_defaults() -> Defaults:
    """Return the current defaults without locking."""
    return _defaults


def configure(**changes: Any) -> Defaults:
    """Replace fields of the process-wide defaults, e.g. ``configure(timeout=10)``."""
    global _defaults
    if "headers" in changes:
        changes["headers"] = MappingProxyType(dict(changes["headers"]))
    with _lock:
        _defaults = replace(_defaults, **changes)
        return _defaults


def set_default_header(name: str, value: Optional[str]) -> None:
    """Set a header for every context; ``None`` removes it."""
    global _defaults
    with _lock:
        headers = dict(_defaults.headers)
        if value is None:
            headers.pop(name, None)
        else:
            headers[name] = value
        _defaults = replace(_defaults, headers=MappingProxyType(headers))


def get_transport() -> Transport:
    """Return the configured transport, creating a ``RequestsTransport`` once."""
    global _defaults
    transport = _defaults.transport
    if transport is not None:
        return transport
    with _lock:
        if _defaults.transport is None:
            _defaults = replace(_defaults, transport=RequestsTransport())
        return _defaults.transport


def reset_defaults() -> None:
    global _defaults
    with _lock:
        _defaults = Defaults()
