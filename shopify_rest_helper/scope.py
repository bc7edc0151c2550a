"""Context-local binding of the active session.

Each thread and each asyncio task sees its own active session and its own
header overrides, stored in :class:`contextvars.ContextVar` slots. Tasks copy
the spawning context automatically; threads start from an empty slot unless
the target is wrapped with :func:`bind`, which captures a snapshot of the
caller's context at spawn time. Changes made afterwards on either side are
never visible to the other.
"""
from __future__ import annotations

import contextvars
import functools
import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional, TypeVar, Union

from .api_version import ApiVersion
from .config import get_defaults
from .errors import InvalidSessionError, NoActiveSessionError
from .session import Session

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"

logger = logging.getLogger(__name__)

T = TypeVar("T")

_active_session: contextvars.ContextVar[Optional[Session]] = contextvars.ContextVar(
    "shopify_rest_active_session", default=None
)
# Overrides layered on top of the process-wide headers; a ``None`` value masks
# a default header in this context only.
_context_headers: contextvars.ContextVar[Mapping[str, Optional[str]]] = (
    contextvars.ContextVar(
        "shopify_rest_context_headers", default=MappingProxyType({})
    )
)


def activate_session(session: Optional[Session]) -> Session:
    """Make ``session`` the active session of the current context."""
    if not isinstance(session, Session) or not session.valid:
        raise InvalidSessionError("Session cannot be None or invalid")
    _active_session.set(session)
    logger.debug(
        "Activated session for %s (api version %s)",
        session.shop_domain,
        session.api_version,
    )
    return session


def clear_session() -> None:
    """Drop the active session and the access-token header of this context.

    Other header overrides stay in place. Clearing an empty slot is a no-op.
    """
    session = _active_session.get()
    if session is not None:
        logger.debug("Cleared session for %s", session.shop_domain)
        _active_session.set(None)
    remove_header(ACCESS_TOKEN_HEADER)


def current_session() -> Optional[Session]:
    return _active_session.get()


def require_session() -> Session:
    session = _active_session.get()
    if session is None:
        raise NoActiveSessionError("No Shopify session is active in this context")
    return session


@contextmanager
def with_session(session: Session) -> Iterator[Session]:
    """Activate ``session`` for the body of a ``with`` block.

    The previously active session (or none) is restored on every exit path,
    and nested blocks unwind in LIFO order.
    """
    if not isinstance(session, Session) or not session.valid:
        raise InvalidSessionError("Session cannot be None or invalid")
    token = _active_session.set(session)
    try:
        yield session
    finally:
        _active_session.reset(token)


@contextmanager
def temp(
    session: Union[Session, str],
    access_token: Optional[str] = None,
    api_version: Union[ApiVersion, str, None] = None,
) -> Iterator[Session]:
    """Run the block under ``session`` without disturbing the ambient one.

    ``session`` may also be a shop domain, in which case a session is built
    from it, ``access_token`` and ``api_version``.
    """
    if not isinstance(session, Session):
        session = Session(session, access_token, api_version)
    with with_session(session) as active:
        yield active


def set_header(name: str, value: Optional[str]) -> None:
    """Override a header in the current context only.

    ``None`` hides a process-wide default of the same name in this context.
    The access-token header is owned by the active session and is never
    taken from an override.
    """
    headers = dict(_context_headers.get())
    headers[name] = value
    _context_headers.set(MappingProxyType(headers))


def remove_header(name: str) -> None:
    """Forget a context override so the process-wide value shows through again."""
    current = _context_headers.get()
    if name in current:
        headers = dict(current)
        del headers[name]
        _context_headers.set(MappingProxyType(headers))


def context_headers() -> Mapping[str, Optional[str]]:
    return _context_headers.get()


def snapshot() -> contextvars.Context:
    """Copy the current context for handing to a worker."""
    return contextvars.copy_context()


def bind(fn: Callable[..., T]) -> Callable[..., T]:
    """Wrap ``fn`` to run in a snapshot of the calling context.

    Use it when starting threads or submitting to executors, e.g.
    ``threading.Thread(target=bind(work))``.
    """
    ctx = contextvars.copy_context()

    @functools.wraps(fn)
    def runner(*args: Any, **kwargs: Any) -> T:
        return ctx.copy().run(fn, *args, **kwargs)

    return runner


def effective_site() -> str:
    """Site of the active session, else the process-wide default site."""
    session = _active_session.get()
    if session is not None:
        return session.site
    site = get_defaults().site
    if site:
        return site
    raise NoActiveSessionError(
        "No Shopify session is active and no default site is configured"
    )


def _is_token_header(name: str) -> bool:
    return name.lower() == ACCESS_TOKEN_HEADER.lower()


def effective_headers() -> dict[str, str]:
    """Process-wide headers, then context overrides, then the session token.

    The access-token header only ever comes from the active session; a value
    for it in either header layer is dropped.
    """
    headers = {
        name: value
        for name, value in get_defaults().headers.items()
        if not _is_token_header(name)
    }
    for name, value in _context_headers.get().items():
        if _is_token_header(name):
            continue
        if value is None:
            headers.pop(name, None)
        else:
            headers[name] = value
    session = _active_session.get()
    if session is not None:
        headers[ACCESS_TOKEN_HEADER] = session.access_token
    return headers


def effective_api_version() -> ApiVersion:
    session = _active_session.get()
    return session.api_version if session is not None else ApiVersion.no_version()


def reset_context() -> None:
    """Empty the session slot and header overrides of the current context."""
    _active_session.set(None)
    _context_headers.set(MappingProxyType({}))
