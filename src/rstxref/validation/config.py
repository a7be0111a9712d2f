"""Runtime settings for link validation."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping


DEFAULT_WORKERS = 10
DEFAULT_THROTTLE = 10
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_RETRIES = 2


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw_value!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class CheckerSettings:
    """Validated worker pool and HTTP settings."""

    workers: int = DEFAULT_WORKERS
    throttle: int = DEFAULT_THROTTLE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    rstspec_url: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CheckerSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        workers_raw = source.get("RSTXREF_WORKERS", str(DEFAULT_WORKERS)).strip()
        throttle_raw = source.get("RSTXREF_THROTTLE", str(DEFAULT_THROTTLE)).strip()
        timeout_raw = source.get("RSTXREF_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)).strip()
        retries_raw = source.get("RSTXREF_MAX_RETRIES", str(DEFAULT_MAX_RETRIES)).strip()
        rstspec_url = source.get("RSTXREF_RSTSPEC_URL", "").strip() or None

        if not workers_raw:
            raise ValueError("RSTXREF_WORKERS cannot be empty")
        if not throttle_raw:
            raise ValueError("RSTXREF_THROTTLE cannot be empty")
        if not timeout_raw:
            raise ValueError("RSTXREF_TIMEOUT_SECONDS cannot be empty")
        if not retries_raw:
            raise ValueError("RSTXREF_MAX_RETRIES cannot be empty")

        if rstspec_url is not None and not rstspec_url.startswith(("http://", "https://")):
            raise ValueError("RSTXREF_RSTSPEC_URL must start with http:// or https://")

        return cls(
            workers=_parse_positive_int(name="RSTXREF_WORKERS", raw_value=workers_raw),
            throttle=_parse_positive_int(name="RSTXREF_THROTTLE", raw_value=throttle_raw),
            timeout_seconds=_parse_positive_float(
                name="RSTXREF_TIMEOUT_SECONDS",
                raw_value=timeout_raw,
                minimum=0.1,
            ),
            max_retries=_parse_positive_int(name="RSTXREF_MAX_RETRIES", raw_value=retries_raw, minimum=0),
            rstspec_url=rstspec_url,
        )

    def with_overrides(self, *, workers: int | None = None, throttle: int | None = None) -> "CheckerSettings":
        """Apply CLI overrides on top of environment-derived settings."""

        if workers is not None and workers < 1:
            raise ValueError("workers must be >= 1")
        if throttle is not None and throttle < 1:
            raise ValueError("throttle must be >= 1")
        return CheckerSettings(
            workers=self.workers if workers is None else workers,
            throttle=self.throttle if throttle is None else throttle,
            timeout_seconds=self.timeout_seconds,
            max_retries=self.max_retries,
            rstspec_url=self.rstspec_url,
        )
