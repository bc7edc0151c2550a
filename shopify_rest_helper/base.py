"""Shared base for Admin REST resources."""
from __future__ import annotations

import re
from string import Formatter
from typing import Any, ClassVar, Mapping, Optional

from . import scope
from .client import execute
from .config import get_transport
from .session import Session
from .transport import Transport


def _underscore(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _pluralize(word: str) -> str:
    if word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u"):
        return f"{word[:-1]}ies"
    if word.endswith(("s", "x", "ch", "sh")):
        return f"{word}es"
    return f"{word}s"


def _check_prefix(value: str) -> str:
    stripped = value.strip().lstrip("/")
    if stripped == "admin" or stripped.startswith("admin/"):
        raise ValueError(
            f"prefix {value!r} must not start with /admin, it is derived from the API version"
        )
    if stripped and not stripped.endswith("/"):
        stripped += "/"
    return stripped


class ResourceBase:
    """Base class for Admin REST resources such as ``Product`` or ``Order``.

    Nothing about the tenant is stored on the class: site, headers and the
    version-qualified prefix are computed from the active session on every
    call. Subclasses only declare their names and an optional relative
    prefix, which may reference parent ids::

        class Variant(ResourceBase, prefix="products/{product_id}/"):
            pass

        Variant.find_all(product_id=632910392)
    """

    element_name: ClassVar[Optional[str]] = None
    collection_name: ClassVar[Optional[str]] = None
    singleton: ClassVar[bool] = False
    _prefix_source: ClassVar[str] = ""

    def __init_subclass__(cls, prefix: Optional[str] = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "element_name" not in cls.__dict__:
            cls.element_name = _underscore(cls.__name__)
        if "collection_name" not in cls.__dict__:
            cls.collection_name = _pluralize(cls.element_name)
        if prefix is not None:
            cls.set_prefix(prefix)

    # Session activation, exposed here for callers used to ``Base.activate_session``.

    @staticmethod
    def activate_session(session: Optional[Session]) -> Session:
        return scope.activate_session(session)

    @staticmethod
    def clear_session() -> None:
        scope.clear_session()

    @staticmethod
    def set_header(name: str, value: Optional[str]) -> None:
        """Set a header for every resource, in the current context only."""
        scope.set_header(name, value)

    @classmethod
    def effective_site(cls) -> str:
        return scope.effective_site()

    @classmethod
    def effective_headers(cls) -> dict[str, str]:
        return scope.effective_headers()

    @classmethod
    def connection(cls) -> Transport:
        return get_transport()

    # Paths

    @classmethod
    def set_prefix(cls, value: str) -> None:
        """Declare the resource path below the admin root, e.g. ``'products/{product_id}/'``.

        Raises:
            ValueError: If ``value`` already includes the ``/admin`` segment.
        """
        cls._prefix_source = _check_prefix(value)

    @classmethod
    def prefix(cls, **options: Any) -> str:
        """Return the admin-qualified prefix for the active session's API version."""
        try:
            relative = cls._prefix_source.format_map(options)
        except KeyError as exc:
            raise ValueError(f"missing prefix option {exc.args[0]!r} for {cls.__name__}") from exc
        return scope.effective_api_version().construct_api_path(relative)

    @classmethod
    def _split_options(cls, options: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
        names = {field for _, field, _, _ in Formatter().parse(cls._prefix_source) if field}
        prefix_options = {k: v for k, v in options.items() if k in names}
        query = {k: v for k, v in options.items() if k not in names}
        return prefix_options, query

    @classmethod
    def _require_names(cls) -> None:
        if cls.element_name is None or cls.collection_name is None:
            raise TypeError(f"{cls.__name__} has no resource name; call verbs on a subclass")

    @classmethod
    def collection_path(cls, **prefix_options: Any) -> str:
        cls._require_names()
        return f"{cls.prefix(**prefix_options)}{cls.collection_name}.json"

    @classmethod
    def element_path(cls, id: Any = None, **prefix_options: Any) -> str:
        cls._require_names()
        if cls.singleton:
            return f"{cls.prefix(**prefix_options)}{cls.element_name}.json"
        return f"{cls.prefix(**prefix_options)}{cls.collection_name}/{id}.json"

    # Verbs

    @classmethod
    def find_all(cls, **options: Any) -> list[dict[str, Any]]:
        prefix_options, query = cls._split_options(options)
        data = execute("GET", cls.collection_path(**prefix_options), params=query or None)
        return data.get(cls.collection_name, [])

    @classmethod
    def find(cls, id: Any, **options: Any) -> dict[str, Any]:
        prefix_options, query = cls._split_options(options)
        data = execute("GET", cls.element_path(id, **prefix_options), params=query or None)
        return data.get(cls.element_name, data)

    @classmethod
    def current(cls, **options: Any) -> dict[str, Any]:
        """Fetch a singleton resource such as the shop."""
        if not cls.singleton:
            raise TypeError(f"{cls.__name__} is not a singleton resource")
        return cls.find(None, **options)

    @classmethod
    def count(cls, **options: Any) -> int:
        cls._require_names()
        prefix_options, query = cls._split_options(options)
        path = f"{cls.prefix(**prefix_options)}{cls.collection_name}/count.json"
        return int(execute("GET", path, params=query or None).get("count", 0))

    @classmethod
    def create(cls, attributes: Mapping[str, Any], **prefix_options: Any) -> dict[str, Any]:
        data = execute(
            "POST",
            cls.collection_path(**prefix_options),
            json={cls.element_name: dict(attributes)},
        )
        return data.get(cls.element_name, data)

    @classmethod
    def update(cls, id: Any, attributes: Mapping[str, Any], **prefix_options: Any) -> dict[str, Any]:
        data = execute(
            "PUT",
            cls.element_path(id, **prefix_options),
            json={cls.element_name: dict(attributes)},
        )
        return data.get(cls.element_name, data)

    @classmethod
    def delete(cls, id: Any, **prefix_options: Any) -> None:
        execute("DELETE", cls.element_path(id, **prefix_options))
