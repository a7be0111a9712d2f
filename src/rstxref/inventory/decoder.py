"""Decoder for Sphinx object inventories (``objects.inv``).

The wire format is four ASCII header lines followed by a zlib stream of
newline-terminated records ``name domain:role priority uri dispname``.
Any structural problem degrades to an empty mapping for that inventory.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
import re
from typing import Callable, Iterable, Sequence
import zlib


LOGGER = logging.getLogger(__name__)

INVENTORY_FILENAME = "objects.inv"
INTERSPHINX_TYPE = "intersphinx"

_HEADER_PREFIXES = (
    b"# Sphinx inventory version",
    b"# Project:",
    b"# Version:",
    b"# The remainder of this file is compressed using zlib",
)

# name may contain spaces (std:term); dispname is the rest of the line
_RECORD_RE = re.compile(r"^(.+?)\s+(\S+:\S+)\s+(-?\d+)\s+(\S*)\s+(.*)$")


@dataclass(frozen=True, slots=True)
class Ref:
    """A resolved cross-project target."""

    target: str
    type: str = INTERSPHINX_TYPE


RefMap = dict[str, Ref]


def inventory_base_url(inventory_url: str) -> str:
    """Strip the trailing inventory filename to obtain the URL prefix for entries."""

    if inventory_url.endswith(INVENTORY_FILENAME):
        return inventory_url[: -len(INVENTORY_FILENAME)]
    if inventory_url.endswith("/"):
        return inventory_url
    return inventory_url.rsplit("/", 1)[0] + "/"


def _split_header(payload: bytes) -> bytes | None:
    lines = payload.split(b"\n", len(_HEADER_PREFIXES))
    if len(lines) <= len(_HEADER_PREFIXES):
        return None
    for line, prefix in zip(lines, _HEADER_PREFIXES):
        if not line.startswith(prefix):
            return None
    return lines[-1]


def decode_inventory(payload: bytes, inventory_url: str) -> RefMap:
    """Decode one inventory into ``name -> Ref`` using the inventory's own URL as base."""

    body = _split_header(payload)
    if body is None:
        LOGGER.warning("Inventory %s has a malformed header, skipping", inventory_url)
        return {}

    try:
        text = zlib.decompress(body).decode("utf-8", errors="replace")
    except zlib.error as exc:
        LOGGER.warning("Inventory %s body could not be decompressed: %s", inventory_url, exc)
        return {}

    base_url = inventory_base_url(inventory_url)
    refs: RefMap = {}
    skipped = 0
    for line in text.splitlines():
        if not line.strip():
            continue
        record = _RECORD_RE.match(line.rstrip())
        if record is None:
            skipped += 1
            continue

        name = record.group(1)
        uri = record.group(4)
        if uri.endswith("$"):
            uri = uri[:-1] + name
        refs[name] = Ref(target=base_url + uri)

    if skipped:
        LOGGER.warning("Inventory %s: skipped %d malformed record(s)", inventory_url, skipped)
    return refs


def join_inventories(maps: Iterable[RefMap]) -> RefMap:
    """Combine several inventories; the first project to register a name keeps it."""

    joined: RefMap = {}
    for refs in maps:
        for name, ref in refs.items():
            joined.setdefault(name, ref)
    return joined


def load_inventories(
    urls: Sequence[str],
    fetch: Callable[[str], bytes],
    *,
    max_workers: int = 8,
) -> RefMap:
    """Fetch and decode every inventory concurrently, joined in configuration order."""

    if not urls:
        return {}

    def _load(url: str) -> RefMap:
        try:
            payload = fetch(url)
        except Exception as exc:
            LOGGER.warning("Could not fetch inventory %s: %s", url, exc)
            return {}
        refs = decode_inventory(payload, url)
        LOGGER.info("Loaded %d inventory entries from %s", len(refs), url)
        return refs

    with ThreadPoolExecutor(max_workers=min(max_workers, len(urls))) as executor:
        maps = list(executor.map(_load, urls))
    return join_inventories(maps)
