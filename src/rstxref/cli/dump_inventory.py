"""CLI entrypoint: decode intersphinx inventories and print the joined map."""

from __future__ import annotations

import argparse
import json
import logging

from rstxref.inventory.decoder import load_inventories
from rstxref.net.client import HttpClient


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Decode objects.inv inventories into a name -> URL map")
    parser.add_argument("--url", action="append", required=True, help="Inventory URL (repeatable, first wins)")
    parser.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout in seconds")
    args = parser.parse_args(argv)

    with HttpClient(timeout_seconds=args.timeout) as http:
        refs = load_inventories(args.url, http.fetch_bytes)

    payload = {name: {"target": ref.target, "type": ref.type} for name, ref in sorted(refs.items())}
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0 if refs else 1


if __name__ == "__main__":
    raise SystemExit(main())
