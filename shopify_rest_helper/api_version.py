"""Admin API versions and versioned request paths."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

API_PREFIX = "/admin/"
NO_VERSION_NAME = "no version"


@dataclass(frozen=True)
class ApiVersion:
    """A named Admin API version, or the legacy unversioned sentinel."""

    name: str = NO_VERSION_NAME

    @classmethod
    def no_version(cls) -> "ApiVersion":
        return cls(NO_VERSION_NAME)

    @classmethod
    def unstable(cls) -> "ApiVersion":
        return cls("unstable")

    @classmethod
    def coerce(cls, value: Union["ApiVersion", str, None]) -> "ApiVersion":
        """Turn ``None``, a version name or an ``ApiVersion`` into an ``ApiVersion``.

        ``"no_version"`` is accepted as a spelling of the sentinel so callers can
        pass it from configuration files.
        """
        if isinstance(value, ApiVersion):
            return value
        if value is None:
            return cls.no_version()
        name = str(value).strip()
        if name in ("", "no_version", NO_VERSION_NAME):
            return cls.no_version()
        return cls(name)

    @property
    def is_versioned(self) -> bool:
        return self.name != NO_VERSION_NAME

    def construct_api_path(self, path: str) -> str:
        path = path.lstrip("/")
        if not self.is_versioned:
            return f"{API_PREFIX}{path}"
        return f"{API_PREFIX}api/{self.name}/{path}"

    def __str__(self) -> str:
        return self.name
