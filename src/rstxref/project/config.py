"""Project configuration read from ``snooty.toml``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping
import tomllib


PROJECT_CONFIG_FILENAME = "snooty.toml"


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Constants, intersphinx inventories and the shared-include base of one docs project."""

    name: str = ""
    constants: Mapping[str, str] = field(default_factory=dict)
    intersphinx: tuple[str, ...] = ()
    sharedinclude_root: str = ""

    @classmethod
    def from_toml(cls, text: str) -> "ProjectConfig":
        data = tomllib.loads(text)

        raw_constants = data.get("constants") or {}
        if not isinstance(raw_constants, dict):
            raise ValueError("snooty.toml [constants] must be a table")
        constants = {str(key): str(value) for key, value in raw_constants.items()}

        raw_intersphinx = data.get("intersphinx") or []
        if not isinstance(raw_intersphinx, list):
            raise ValueError("snooty.toml intersphinx must be a list of URLs")
        intersphinx = tuple(str(url).strip() for url in raw_intersphinx if str(url).strip())
        for url in intersphinx:
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"intersphinx entry must start with http:// or https://: {url}")

        sharedinclude_root = str(data.get("sharedinclude_root") or "").strip()

        return cls(
            name=str(data.get("name") or ""),
            constants=constants,
            intersphinx=intersphinx,
            sharedinclude_root=sharedinclude_root,
        )

    @classmethod
    def from_path(cls, path: str | Path) -> "ProjectConfig":
        return cls.from_toml(Path(path).read_text(encoding="utf-8"))
