"""End-to-end link check over one documentation project."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Callable, Iterable, Sequence

from rstxref.index.collectors import build_corpus_index, load_shared_includes
from rstxref.inventory.decoder import load_inventories
from rstxref.inventory.roles import RoleCatalog, resolve_role_catalog_url
from rstxref.net.client import HttpClient
from rstxref.project.config import ProjectConfig
from rstxref.project.documents import SourceDocument
from rstxref.validation.config import CheckerSettings
from rstxref.validation.planner import ResolutionPlanner
from rstxref.validation.pool import ThrottledWorkerPool


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckReport:
    documents: int = 0
    roles: int = 0
    anchors: int = 0
    links: int = 0
    inventory_entries: int = 0
    probes: int = 0
    duration_ms: int = 0
    diagnostics: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def to_dict(self) -> dict[str, int | bool | list[str]]:
        return {
            "documents": self.documents,
            "roles": self.roles,
            "anchors": self.anchors,
            "links": self.links,
            "inventory_entries": self.inventory_entries,
            "probes": self.probes,
            "duration_ms": self.duration_ms,
            "ok": self.ok,
            "diagnostics": self.diagnostics,
        }


def load_role_catalog(http: HttpClient, *, rstspec_url: str | None = None) -> RoleCatalog:
    url = rstspec_url or resolve_role_catalog_url(http.fetch_json)
    catalog = RoleCatalog.from_toml(http.fetch_bytes(url).decode("utf-8"))
    LOGGER.info(
        "Role catalog: %d templated, %d raw, %d objects",
        len(catalog.roles),
        len(catalog.raw_roles),
        len(catalog.rst_objects),
    )
    return catalog


class LinkChecker:
    """Wires extraction, inventories, planning and probing for a single run."""

    def __init__(
        self,
        project: ProjectConfig,
        catalog: RoleCatalog,
        *,
        fetch: Callable[[str], bytes],
        probe: Callable[[str], tuple[str, bool]],
        settings: CheckerSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        self._project = project
        self._catalog = catalog
        self._fetch = fetch
        self._probe = probe
        self._settings = settings or CheckerSettings()
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_http(cls, project: ProjectConfig, settings: CheckerSettings, http: HttpClient) -> "LinkChecker":
        catalog = load_role_catalog(http, rstspec_url=settings.rstspec_url)
        return cls(
            project,
            catalog,
            fetch=http.fetch_bytes,
            probe=http.check_reachable,
            settings=settings,
        )

    def run(
        self,
        documents: Sequence[SourceDocument],
        *,
        changes: Iterable[str] = (),
        check_refs: bool = False,
        check_docs: bool = False,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> CheckReport:
        started = time.perf_counter()
        report = CheckReport(documents=len(documents))

        refs = load_inventories(self._project.intersphinx, self._fetch)
        report.inventory_entries = len(refs)

        corpus = build_corpus_index(documents)
        shared = load_shared_includes(corpus.shared_includes, self._project.sharedinclude_root, self._fetch)
        corpus.roles.union(shared.roles)
        corpus.anchors.union(shared.anchors)
        report.diagnostics.extend(shared.diagnostics)
        report.roles = len(corpus.roles)
        report.anchors = len(corpus.anchors)
        report.links = len(corpus.links)

        plan = ResolutionPlanner(
            corpus,
            refs,
            self._catalog,
            self._project.constants,
            changeset=changes,
            check_refs=check_refs,
            check_docs=check_docs,
        ).plan()
        report.diagnostics.extend(plan.diagnostics)
        report.probes = len(plan.tasks)

        pool = ThrottledWorkerPool(
            self._probe,
            workers=self._settings.workers,
            throttle=self._settings.throttle,
            sleep=self._sleep,
            clock=self._clock,
        )
        report.diagnostics.extend(pool.run(plan.tasks, on_progress=on_progress))

        report.duration_ms = int((time.perf_counter() - started) * 1000)
        return report
