from __future__ import annotations

import threading

import pytest

from rstxref.extraction.models import HTTPLink, Role
from rstxref.validation.pool import MessageFunnel, ThrottledWorkerPool, UrlClaims
from rstxref.validation.planner import ProbeTask


class _FakeClock:
    """Monotonic nanosecond clock that only moves when someone sleeps."""

    def __init__(self) -> None:
        self.now_ns = 0
        self.sleeps: list[float] = []

    def __call__(self) -> int:
        return self.now_ns

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now_ns += int(seconds * 1e9)


def _link_task(url: str, path: str = "source/index.txt") -> ProbeTask:
    return ProbeTask(url=url, path=path, origin=HTTPLink(url))


def _no_sleep(_: float) -> None:
    return None


@pytest.mark.parametrize(
    ("workers", "throttle", "expected_ns"),
    [
        (10, 10, 1_000_000_000),
        (1, 2, 500_000_000),
        (3, 7, 428_571_429),
        (1, 1000, 1_000_000),
    ],
)
def test_min_interval_per_worker(workers: int, throttle: int, expected_ns: int) -> None:
    pool = ThrottledWorkerPool(lambda url: ("200 OK", True), workers=workers, throttle=throttle)

    assert pool.min_interval_ns == expected_ns


def test_single_worker_paces_every_dispatch() -> None:
    clock = _FakeClock()
    probed: list[str] = []

    def probe(url: str) -> tuple[str, bool]:
        probed.append(url)
        return "200 OK", True

    pool = ThrottledWorkerPool(probe, workers=1, throttle=2, sleep=clock.sleep, clock=clock)
    diagnostics = pool.run([_link_task(f"https://example.com/{index}") for index in range(3)])

    assert diagnostics == []
    assert probed == ["https://example.com/0", "https://example.com/1", "https://example.com/2"]
    assert clock.sleeps == [0.5, 0.5, 0.5]


def test_duplicate_urls_are_probed_once() -> None:
    calls: list[str] = []
    lock = threading.Lock()

    def probe(url: str) -> tuple[str, bool]:
        with lock:
            calls.append(url)
        return "404 Not Found", False

    tasks = [_link_task("https://a.bad.url", path=f"source/{index}.txt") for index in range(8)]
    tasks.append(_link_task("https://www.google.com"))
    pool = ThrottledWorkerPool(probe, workers=4, throttle=1000, sleep=_no_sleep)

    diagnostics = pool.run(tasks)

    assert sorted(calls) == ["https://a.bad.url", "https://www.google.com"]
    assert len(diagnostics) == 2
    assert all("is not a valid http link. Got response 404 Not Found" in message for message in diagnostics)


def test_progress_is_reported_once_per_task() -> None:
    seen: list[tuple[int, int]] = []
    tasks = [_link_task(f"https://example.com/{index % 3}") for index in range(7)]
    pool = ThrottledWorkerPool(lambda url: ("200 OK", True), workers=3, throttle=1000, sleep=_no_sleep)

    pool.run(tasks, on_progress=lambda completed, total: seen.append((completed, total)))

    assert seen == [(index, 7) for index in range(1, 8)]


def test_raising_reachability_check_becomes_diagnostic() -> None:
    def probe(url: str) -> tuple[str, bool]:
        raise RuntimeError("boom")

    task = ProbeTask(
        url="https://docs.mongodb.com/manual/nope",
        path="source/index.txt",
        origin=Role.of("manual", "/nope"),
    )
    pool = ThrottledWorkerPool(probe, workers=2, throttle=100, sleep=_no_sleep)

    assert pool.run([task]) == [
        "in source/index.txt: interpreted url https://docs.mongodb.com/manual/nope from :manual:`/nope` "
        "was not valid. Got response RuntimeError: boom"
    ]


def test_empty_task_list_finishes() -> None:
    pool = ThrottledWorkerPool(lambda url: ("200 OK", True), workers=5, throttle=5, sleep=_no_sleep)

    assert pool.run([]) == []


@pytest.mark.parametrize(("workers", "throttle"), [(0, 10), (10, 0), (-1, 1)])
def test_pool_rejects_invalid_sizes(workers: int, throttle: int) -> None:
    with pytest.raises(ValueError, match="must be >= 1"):
        ThrottledWorkerPool(lambda url: ("200 OK", True), workers=workers, throttle=throttle)


def test_url_claims_are_exclusive() -> None:
    claims = UrlClaims()

    assert claims.claim("https://example.com") is True
    assert claims.claim("https://example.com") is False
    assert claims.claim("https://example.org") is True
    assert len(claims) == 2


def test_message_funnel_drains_before_close_returns() -> None:
    received: list[int] = []
    funnel: MessageFunnel[int] = MessageFunnel(received.append, name="test-funnel")

    producers = [threading.Thread(target=lambda base=base: [funnel.put(base + i) for i in range(50)]) for base in (0, 100)]
    for producer in producers:
        producer.start()
    for producer in producers:
        producer.join()
    funnel.close()

    assert sorted(received) == list(range(50)) + list(range(100, 150))
