"""Canonical construct types emitted by the RST extractors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

_HTTP_SCHEMES = ("http://", "https://")


class RoleType(str, Enum):
    """Builtin `ref` roles versus every other role name."""

    REF = "ref"
    ROLE = "role"

    @classmethod
    def for_name(cls, name: str) -> "RoleType":
        return cls.REF if name == "ref" else cls.ROLE


@dataclass(frozen=True, slots=True)
class Role:
    """An inline ``:name:`text <target>``` cross-reference."""

    name: str
    role_type: RoleType
    target: str

    @classmethod
    def of(cls, name: str, target: str) -> "Role":
        return cls(name=name, role_type=RoleType.for_name(name), target=target)

    def with_target(self, target: str) -> "Role":
        return Role(name=self.name, role_type=self.role_type, target=target)

    def __str__(self) -> str:
        return f":{self.name}:`{self.target}`"


@dataclass(frozen=True, slots=True)
class RefTarget:
    """A ``.. _label:`` anchor definition."""

    name: str

    def __str__(self) -> str:
        return f".. _{self.name}:"


@dataclass(frozen=True, slots=True)
class Constant:
    """A ``{+name+}`` placeholder used as the prefix of a link target."""

    name: str
    target: str

    def is_http_link(self) -> bool:
        return self.target.startswith(_HTTP_SCHEMES)

    def __str__(self) -> str:
        return f"{{+{self.name}+}}{self.target}"


@dataclass(frozen=True, slots=True)
class HTTPLink:
    """An absolute http(s) URL found in a document."""

    url: str

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class Directive:
    """A generic ``.. name:: argument`` directive."""

    name: str
    target: str


@dataclass(frozen=True, slots=True)
class SharedInclude:
    """A ``.. sharedinclude:: path`` directive resolved against a remote base."""

    path: str
