"""Role catalog loaded from the snooty parser's ``rstspec.toml``."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Mapping
import tomllib


LOGGER = logging.getLogger(__name__)

SNOOTY_PARSER_LATEST_RELEASE_URL = "https://api.github.com/repos/mongodb/snooty-parser/releases/latest"
RSTSPEC_URL_TEMPLATE = "https://raw.githubusercontent.com/mongodb/snooty-parser/{tag}/snooty/rstspec.toml"


@dataclass(frozen=True, slots=True)
class RoleCatalog:
    """Known role names split by how a reference through them is validated.

    ``roles`` carry a URL template with a ``%s`` slot for the role target,
    ``raw_roles`` need no check at all and ``rst_objects`` are valid by name.
    """

    roles: Mapping[str, str] = field(default_factory=dict)
    raw_roles: frozenset[str] = frozenset()
    rst_objects: frozenset[str] = frozenset()

    def knows(self, name: str) -> bool:
        return name in self.roles or name in self.raw_roles or name in self.rst_objects

    def template_for(self, name: str) -> str | None:
        return self.roles.get(name)

    @classmethod
    def from_toml(cls, text: str) -> "RoleCatalog":
        data = tomllib.loads(text)

        roles: dict[str, str] = {}
        raw_roles: set[str] = set()
        for name, spec in (data.get("role") or {}).items():
            link = _link_template(spec)
            if link is None:
                raw_roles.add(name)
            else:
                roles[name] = link

        rst_objects: set[str] = set()
        for name in data.get("rstobject") or {}:
            rst_objects.add(name)
            _, _, short_name = name.rpartition(":")
            if short_name:
                rst_objects.add(short_name)

        return cls(roles=roles, raw_roles=frozenset(raw_roles), rst_objects=frozenset(rst_objects))


def _link_template(spec: Any) -> str | None:
    if not isinstance(spec, dict):
        return None
    role_type = spec.get("type")
    if isinstance(role_type, dict):
        link = role_type.get("link")
        if isinstance(link, str) and link:
            return link
    return None


def expand_template(template: str, target: str) -> str:
    """Substitute a role target into its ``%s`` URL template."""

    if "%s" in template:
        return template.replace("%s", target, 1)
    return template + target


def resolve_role_catalog_url(fetch_json: Callable[[str], Any]) -> str:
    """Locate ``rstspec.toml`` for the latest snooty parser release."""

    release = fetch_json(SNOOTY_PARSER_LATEST_RELEASE_URL)
    tag = release.get("tag_name") if isinstance(release, dict) else None
    if not isinstance(tag, str) or not tag.strip():
        raise ValueError("Latest snooty-parser release has no tag_name")
    LOGGER.info("Using role catalog from snooty-parser %s", tag)
    return RSTSPEC_URL_TEMPLATE.format(tag=tag.strip())
