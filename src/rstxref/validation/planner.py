"""Classify discovered references and plan the network probes they need."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, Mapping

from rstxref.extraction.models import Constant, HTTPLink, Role
from rstxref.index.collectors import CorpusIndex
from rstxref.index.maps import AnchorIndex, LinkIndex, substitute_placeholders
from rstxref.inventory.decoder import RefMap
from rstxref.inventory.roles import RoleCatalog, expand_template


LOGGER = logging.getLogger(__name__)

IGNORED_ROLES = frozenset({"guilabel"})
REF_ROLES = frozenset({"ref", "py:meth", "py:class"})
DOC_ROLE = "doc"


@dataclass(frozen=True, slots=True)
class ProbeTask:
    """One reachability probe for a URL derived from a role or link."""

    url: str
    path: str
    origin: Role | HTTPLink

    def failure_message(self, status: str) -> str:
        if isinstance(self.origin, Role):
            return (
                f"in {self.path}: interpreted url {self.url} from {self.origin} was not valid. "
                f"Got response {status}"
            )
        return f"in {self.path}: {self.url} is not a valid http link. Got response {status}"


@dataclass(slots=True)
class ResolutionPlan:
    tasks: list[ProbeTask] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)
    scheduled_urls: set[str] = field(default_factory=set, repr=False)

    def schedule(self, task: ProbeTask) -> bool:
        """Add *task* unless its URL is already planned."""

        if task.url in self.scheduled_urls:
            return False
        self.scheduled_urls.add(task.url)
        self.tasks.append(task)
        return True


def _normalize_path(path: str) -> str:
    value = path.strip()
    while value.startswith("./"):
        value = value[2:]
    return value.lstrip("/")


class Changeset:
    """Documents in scope for a run; an empty changeset covers the whole corpus."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries = tuple(_normalize_path(entry) for entry in entries if entry and entry.strip())

    def includes(self, path: str) -> bool:
        if not self._entries:
            return True
        candidate = _normalize_path(path)
        return any(
            entry == candidate or entry.endswith("/" + candidate) or candidate.endswith("/" + entry)
            for entry in self._entries
        )


class ResolutionPlanner:
    """Turns corpus indices into diagnostics plus a deduplicated probe list."""

    def __init__(
        self,
        corpus: CorpusIndex,
        refs: RefMap,
        catalog: RoleCatalog,
        constants: Mapping[str, str],
        *,
        changeset: Iterable[str] = (),
        check_refs: bool = False,
        check_docs: bool = False,
    ) -> None:
        self._corpus = corpus
        self._refs = refs
        self._catalog = catalog
        self._constants = constants
        self._changeset = Changeset(changeset)
        self._check_refs = check_refs
        self._check_docs = check_docs

    def plan(self) -> ResolutionPlan:
        plan = ResolutionPlan()
        roles, unresolved_roles = self._corpus.roles.substitute_constants(self._constants)
        anchors, unresolved_anchors = self._corpus.anchors.substitute_constants(self._constants)
        links, unresolved_links = self._corpus.links.substitute_constants(self._constants)
        for unresolved in (*unresolved_roles, *unresolved_anchors, *unresolved_links):
            if self._changeset.includes(unresolved.path):
                names = ", ".join(unresolved.names)
                plan.diagnostics.append(
                    f"in {unresolved.path}: {unresolved.construct} uses undefined constant(s) {names}"
                )

        links = self._links_with_constants(plan, links)

        for role, path in roles.items():
            if self._changeset.includes(path):
                self._plan_role(plan, role, path, anchors)

        for link, path in links.items():
            if self._changeset.includes(path):
                plan.schedule(ProbeTask(url=link.url, path=path, origin=link))

        LOGGER.info("Planned %d probe(s), %d local diagnostic(s)", len(plan.tasks), len(plan.diagnostics))
        return plan

    def _links_with_constants(self, plan: ResolutionPlan, links: LinkIndex) -> LinkIndex:
        """Add constant-backed absolute URLs to *links*, reporting undefined names regardless of scope."""

        for constant, path in self._corpus.constants.items():
            value = self._constants.get(constant.name)
            if value is None:
                plan.diagnostics.append(f"in {path}: {constant} is not defined in config")
                continue

            target, missing = substitute_placeholders(str(value) + constant.target, self._constants)
            if missing:
                names = ", ".join(missing)
                plan.diagnostics.append(f"in {path}: {constant} uses undefined constant(s) {names}")
                continue

            resolved = Constant(name=constant.name, target=target)
            link = HTTPLink(url=resolved.target)
            if resolved.is_http_link() and link not in links:
                links.add(link, path)
        return links.upgraded_to_https()

    def _plan_role(
        self,
        plan: ResolutionPlan,
        role: Role,
        path: str,
        anchors: AnchorIndex,
    ) -> None:
        if role.name in IGNORED_ROLES:
            return

        if role.name in REF_ROLES:
            if self._check_refs and role.target not in self._refs and not anchors.has_label(role.target):
                plan.diagnostics.append(f"in {path}: {role} is not a valid ref")
            return

        if role.name == DOC_ROLE:
            if self._check_docs and not self._corpus.documents.resolve(role.target, path):
                plan.diagnostics.append(f"in {path}: {role} is not a valid file found in this docset")
            return

        if not self._catalog.knows(role.name):
            plan.diagnostics.append(f"in {path}: {role} is not a valid role")
            return

        template = self._catalog.template_for(role.name)
        if template is not None:
            url = expand_template(template, role.target)
            plan.schedule(ProbeTask(url=url, path=path, origin=role))
