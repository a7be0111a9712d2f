"""Resolution planning, throttled probing and end-to-end runs."""

from .config import CheckerSettings
from .planner import Changeset, ProbeTask, ResolutionPlan, ResolutionPlanner
from .pool import MessageFunnel, ThrottledWorkerPool, UrlClaims
from .runner import CheckReport, LinkChecker, load_role_catalog

__all__ = [
    "Changeset",
    "CheckReport",
    "CheckerSettings",
    "LinkChecker",
    "MessageFunnel",
    "ProbeTask",
    "ResolutionPlan",
    "ResolutionPlanner",
    "ThrottledWorkerPool",
    "UrlClaims",
    "load_role_catalog",
]
