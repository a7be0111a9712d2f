"""Pattern-based extraction of cross-reference constructs from RST sources.

Each matcher is independent and stateless: it takes raw document bytes (or
already decoded text) and returns every occurrence of one construct kind.
Input that does not match is simply absent from the result.  Matchers are
written so that their cost stays linear in the input size, including on
unbalanced backticks and long runs of colons.
"""

from __future__ import annotations

import re

from rstxref.extraction.decoding import as_text
from rstxref.extraction.models import Constant, Directive, HTTPLink, RefTarget, Role, SharedInclude


# ---------------------------------------------------------------------------
# Pattern library
# ---------------------------------------------------------------------------

# Anchor: ".. _label:", "    - ..  _label:", ".. _faq-storage limit:"
_LOCAL_REF_RE = re.compile(
    r"^[ \t]*(?:-[ \t]+)?\.\.[ \t]+_[ \t]*([^:\s](?:[^:\n]*[^:\s])?)[ \t]*:",
    re.MULTILINE,
)

# Directive: ".. include:: /includes/foo.txt"
_DIRECTIVE_RE = re.compile(
    r"^[ \t]*(?:-[ \t]+)?\.\.[ \t]+([A-Za-z0-9-]+)::(.*)$",
    re.MULTILINE,
)

# Role opener: ":ref:`", ":py:meth:`", ":v4.0:`".  The span body is scanned by hand.
_ROLE_OPEN_RE = re.compile(r"(?<![A-Za-z0-9]):([A-Za-z0-9][A-Za-z0-9.:\-]{0,63}):`")

# Explicit target trailer inside a role body: "title <target>"
_ROLE_TRAILER_RE = re.compile(r"<([^<>]*)>\s*$")

_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")

# Constant-backed anonymous link: "`text <{+api+}/suffix>`__"
_CONSTANT_LINK_RE = re.compile(r"`[^`<]*<\{\+([A-Za-z0-9_.\-]+)\+\}([^<>`]*)>`__")

# Absolute URL: bare, "[text](url)" or "`text <url>`__"; may carry "{+name+}" placeholders
_HTTP_LINK_RE = re.compile(
    r"(?<![A-Za-z0-9+.\-])https?://(?:[^\s<>()\[\]{}`'\"\\|^]|\{\+[A-Za-z0-9_.\-]+\+\})+"
)

_URL_TRAILING_PUNCTUATION = ".,;:!?*"

SHARED_INCLUDE_DIRECTIVE = "sharedinclude"


def _collapse_whitespace(value: str) -> str:
    return " ".join(value.split())


def find_local_refs(source: bytes | str) -> list[RefTarget]:
    """Return every ``.. _label:`` anchor definition in document order."""

    text = as_text(source)
    return [RefTarget(name=m.group(1).strip()) for m in _LOCAL_REF_RE.finditer(text)]


def find_directives(source: bytes | str) -> list[Directive]:
    """Return directives that carry a non-empty argument."""

    text = as_text(source)
    directives: list[Directive] = []
    for m in _DIRECTIVE_RE.finditer(text):
        argument = m.group(2).strip()
        if not argument:
            continue
        directives.append(Directive(name=m.group(1), target=argument))
    return directives


def find_shared_includes(source: bytes | str) -> list[SharedInclude]:
    return [
        SharedInclude(path=directive.target)
        for directive in find_directives(source)
        if directive.name == SHARED_INCLUDE_DIRECTIVE
    ]


def _role_target(body: str) -> str:
    trailer = _ROLE_TRAILER_RE.search(body)
    if trailer is not None and trailer.group(1).strip():
        return _collapse_whitespace(trailer.group(1))
    return _collapse_whitespace(body)


def find_roles(source: bytes | str) -> list[Role]:
    """Return every ``:name:`...``` role.

    The body runs to the nearest closing backtick, so adjacent roles such as
    ``:a:`x`/:a:`y``` are reported separately.  Inline markup never crosses
    a blank line: an opener with no closing backtick in its own paragraph is
    skipped and scanning resumes right after it.
    """

    text = as_text(source)
    roles: list[Role] = []
    pos = 0
    paragraph_end = -1
    while True:
        opener = _ROLE_OPEN_RE.search(text, pos)
        if opener is None:
            break
        start = opener.end()
        if start > paragraph_end:
            blank = _BLANK_LINE_RE.search(text, start)
            paragraph_end = blank.start() if blank is not None else len(text)

        close = text.find("`", start, paragraph_end)
        body = text[start:close] if close != -1 else ""
        if not body.strip():
            pos = start
            continue

        pos = close + 1
        target = _role_target(body)
        if target:
            roles.append(Role.of(opener.group(1), target))
    return roles


def find_constants(source: bytes | str) -> list[Constant]:
    """Return every constant-backed ``<{+name+}suffix>`__`` link."""

    text = as_text(source)
    return [Constant(name=m.group(1), target=m.group(2)) for m in _CONSTANT_LINK_RE.finditer(text)]


def find_http_links(source: bytes | str) -> list[HTTPLink]:
    text = as_text(source)
    links: list[HTTPLink] = []
    for m in _HTTP_LINK_RE.finditer(text):
        url = m.group(0).rstrip(_URL_TRAILING_PUNCTUATION)
        _, _, rest = url.partition("://")
        if not rest:
            continue
        links.append(HTTPLink(url=url))
    return links
