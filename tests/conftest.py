"""Shared test fixtures."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator

import pytest

from healthz.checker import Checker
from healthz.models import Runtime


def fake_runtime() -> Runtime:
    return Runtime(arch="test", os="test", version="python-test")


@pytest.fixture
def checker() -> Iterator[Checker]:
    """A Checker with a stubbed runtime provider, closed after the test."""
    c = Checker(runtime_provider=fake_runtime)
    yield c
    c.close()


@pytest.fixture
def eventually() -> Callable[..., None]:
    """Poll ``predicate`` until it holds or fail after ``timeout`` seconds."""

    def wait(predicate: Callable[[], bool], timeout: float = 2.0, interval: float = 0.01) -> None:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return
            time.sleep(interval)
        assert predicate(), f"condition not met within {timeout}s"

    return wait
