"""Process-wide default Checker and module-level shortcuts.

The default checker is created on first use. Replacing it with
set_default_checker() does not carry existing checks over: anything
registered on the old instance keeps running there until it is closed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from fastapi import APIRouter

from .check import CheckFunc
from .checker import Checker
from .http import DEFAULT_PATH, create_router
from .models import Status
from .remote import RemoteOptions

logger = logging.getLogger(__name__)

_default: Checker | None = None
_lock = threading.Lock()


def get_default_checker() -> Checker:
    global _default
    with _lock:
        if _default is None:
            _default = Checker()
        return _default


def set_default_checker(checker: Checker) -> Checker | None:
    """Install ``checker`` as the default. Returns the previous one, if any.

    Meant to be called once at startup, before anything registers checks.
    """
    global _default
    with _lock:
        previous, _default = _default, checker
    if previous is not None and previous is not checker and previous.checks():
        logger.warning(
            "Default checker replaced with %d checks still registered on the old one",
            len(previous.checks()),
        )
    return previous


# ── Shortcuts ────────────────────────────────────────────────────────────────


def set_meta(name: str, value: Any) -> None:
    get_default_checker().set_meta(name, value)


def delete_meta(name: str) -> None:
    get_default_checker().delete_meta(name)


def add_build_info(distribution: str | None = None, repo: Path | None = None) -> None:
    get_default_checker().add_build_info(distribution, repo)


def register(name: str, period: float, fn: CheckFunc) -> None:
    get_default_checker().register(name, period, fn)


def register_remote(
    name: str, period: float, url: str, options: RemoteOptions | None = None,
) -> None:
    get_default_checker().register_remote(name, period, url, options)


def set(name: str, err: BaseException | None, expiry: float = 0.0) -> None:
    get_default_checker().set(name, err, expiry)


def deregister(name: str) -> None:
    get_default_checker().deregister(name)


def status() -> Status:
    return get_default_checker().status()


def router(path: str = DEFAULT_PATH) -> APIRouter:
    """Router serving the default checker, for ``app.include_router()``."""
    return create_router(get_default_checker(), path)
