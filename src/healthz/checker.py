"""Checker — registry of named checks and aggregate status computation.

All operations run on the caller's thread and hold one lock for the
duration of registry access. Checks evaluate on their own threads and are
only ever read here, never triggered.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from datetime import datetime, timedelta, timezone
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

from .check import Check, CheckFunc
from .config import settings
from .errors import ScopedMultiError, is_warning
from .models import Runtime, Status, StatusLabel
from .remote import RemoteOptions, remote_check
from .runtime import RuntimeProvider, collect

logger = logging.getLogger(__name__)


class Checker:
    """Evaluates registered checks and reports the aggregate health status.

    Most applications should use the process-wide default from
    ``healthz.default`` instead of creating their own.
    """

    def __init__(
        self,
        runtime_ttl: float | None = None,
        runtime_provider: RuntimeProvider | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._since = datetime.now(timezone.utc)
        self._metadata: dict[str, Any] = {}
        self._checks: dict[str, Check] = {}
        self._runtime = Runtime()
        self._runtime_ttl = timedelta(
            seconds=runtime_ttl if runtime_ttl else settings.runtime_ttl,
        )
        self._collect = runtime_provider or collect

    def __enter__(self) -> Checker:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def since(self) -> datetime:
        return self._since

    # ── Metadata ─────────────────────────────────────────────────────────

    def set_meta(self, name: str, value: Any) -> None:
        """Add a metadata entry returned with every status, e.g. a version."""
        with self._lock:
            self._metadata[name] = value

    def delete_meta(self, name: str) -> None:
        with self._lock:
            self._metadata.pop(name, None)

    def add_build_info(self, distribution: str | None = None, repo: Path | None = None) -> None:
        """Add build information to the metadata.

        ``version`` comes from the installed ``distribution``; ``vcs_revision``,
        ``vcs_time`` and ``vcs_modified`` come from the git checkout at
        ``repo`` (default: working directory). Missing sources are skipped.
        """
        if distribution:
            try:
                self.set_meta("version", importlib_metadata.version(distribution))
            except importlib_metadata.PackageNotFoundError:
                logger.debug("Distribution %s not installed, no version", distribution)

        for key, value in _git_info(repo).items():
            self.set_meta(key, value)

    # ── Registry ─────────────────────────────────────────────────────────

    def register(self, name: str, period: float, fn: CheckFunc) -> None:
        """Register ``fn`` to be evaluated every ``period`` seconds.

        ``fn`` returns None when healthy, or returns or raises an exception.
        A period of 0 uses the configured default.
        """
        if not callable(fn):
            raise TypeError("check function must be callable")
        self._replace(Check.periodic(name, period, fn))

    def set(self, name: str, err: BaseException | None, expiry: float = 0.0) -> None:
        """Set a static status value without a check function.

        Useful when an event loop can push real-time status directly. With a
        non-zero ``expiry`` the value becomes an Expired failure unless it is
        set again within ``expiry`` seconds.
        """
        self._replace(Check.static(name, err, expiry))

    def register_remote(
        self,
        name: str,
        period: float,
        url: str,
        options: RemoteOptions | None = None,
    ) -> None:
        """Monitor the healthz endpoint of another instance at ``url``.

        Remote failures and warnings are reported under ``name/``, e.g. a
        remote ``bar`` failure shows up as ``foo/bar`` for a check named
        ``foo``. A remote that does not speak this format yields a single
        result under ``name``.
        """
        self.register(name, period, remote_check(url, options))

    def _replace(self, check: Check) -> None:
        name = check.name
        with self._lock:
            old = self._checks.get(name)
            if old is not None:
                logger.debug("Replacing check %s", name)
                old.stop()
            check.start()
            self._checks[name] = check

    def deregister(self, name: str) -> None:
        """Stop and remove a check. No-op for unknown names."""
        with self._lock:
            check = self._checks.pop(name, None)
        if check is not None:
            check.stop()

    def checks(self) -> list[str]:
        with self._lock:
            return sorted(self._checks)

    def close(self) -> None:
        """Stop and remove every registered check."""
        with self._lock:
            checks = list(self._checks.values())
            self._checks.clear()
        for check in checks:
            check.stop()

    # ── Status ───────────────────────────────────────────────────────────

    def status(self) -> Status:
        """Current aggregate status. Never waits for a check to evaluate."""
        with self._lock:
            now = datetime.now(timezone.utc)
            if self._runtime.collected_at + self._runtime_ttl < now:
                self._runtime = self._collect()

            failures: dict[str, str] = {}
            warnings: dict[str, str] = {}
            for name, check in self._checks.items():
                _flatten(name, check.status(), failures, warnings)

            metadata = dict(self._metadata)
            runtime = self._runtime

        if failures:
            label = StatusLabel.UNAVAILABLE
        elif warnings:
            label = StatusLabel.WARNING
        else:
            label = StatusLabel.OK

        return Status(
            ok=not failures,
            has_warnings=bool(warnings),
            status=label,
            time=now,
            since=self._since,
            runtime=runtime,
            failures=failures,
            warnings=warnings,
            metadata=metadata,
        )


def _flatten(
    name: str,
    err: BaseException | None,
    failures: dict[str, str],
    warnings: dict[str, str],
) -> None:
    if err is None:
        return
    if isinstance(err, ScopedMultiError):
        for key, sub in err.items():
            _flatten(f"{name}/{key}", sub, failures, warnings)
        return
    if is_warning(err):
        warnings[name] = str(err)
    else:
        failures[name] = str(err)


def _git_info(repo: Path | None) -> dict[str, Any]:
    cwd = str(repo) if repo else None
    try:
        revision = _git(cwd, "rev-parse", "HEAD")
        commit_time = _git(cwd, "log", "-1", "--format=%cI")
        dirty = _git(cwd, "status", "--porcelain")
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("No git build info: %s", e)
        return {}
    return {
        "vcs_revision": revision,
        "vcs_time": commit_time,
        "vcs_modified": str(bool(dirty)).lower(),
    }


def _git(cwd: str | None, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=5,
        check=True,
    )
    return result.stdout.strip()
