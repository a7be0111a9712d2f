"""Stateless extractors for RST cross-reference constructs."""

from .decoding import decode_document
from .models import Constant, Directive, HTTPLink, RefTarget, Role, RoleType, SharedInclude
from .patterns import (
    find_constants,
    find_directives,
    find_http_links,
    find_local_refs,
    find_roles,
    find_shared_includes,
)

__all__ = [
    "Constant",
    "Directive",
    "HTTPLink",
    "RefTarget",
    "Role",
    "RoleType",
    "SharedInclude",
    "decode_document",
    "find_constants",
    "find_directives",
    "find_http_links",
    "find_local_refs",
    "find_roles",
    "find_shared_includes",
]
