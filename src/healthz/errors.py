"""Check result types — warnings, synthetic failures, scoped multi-errors.

A check result is either ``None`` (healthy) or an exception instance:

* ``HealthWarning``: degraded but not failing, does not flip ``ok``
* ``ScopedMultiError``: container of named sub-results, classified per entry
* anything else: a hard failure

``Pending`` and ``Expired`` are the only failures the library synthesizes
on its own.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping


class HealthWarning(Exception):
    """A check result that is reported as a warning instead of a failure."""

    def __init__(self, msg: str) -> None:
        self.msg = msg
        super().__init__(msg)

    def __str__(self) -> str:
        return self.msg


def warn(msg: str, *args: object) -> HealthWarning:
    """Build a HealthWarning, %-formatting ``msg`` with ``args`` if given."""
    if args:
        msg = msg % args
    return HealthWarning(msg)


def is_warning(err: BaseException | None) -> bool:
    """True if ``err`` or anything in its explicit cause chain is a warning.

    Only ``__cause__`` links (``raise ... from ...``) count as wrapping.
    A ScopedMultiError is never a warning itself.
    """
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, ScopedMultiError):
            return False
        if isinstance(err, HealthWarning):
            return True
        seen.add(id(err))
        err = err.__cause__
    return False


class Pending(Exception):
    """Result of a periodic check that has not completed its first run."""

    def __init__(self) -> None:
        super().__init__("pending")


def format_seconds(seconds: float) -> str:
    return f"{seconds:g}s"


class Expired(Exception):
    """Result of a static check whose value was not refreshed in time."""

    def __init__(self, expiry: float) -> None:
        self.expiry = expiry
        super().__init__(f"status expired after {format_seconds(expiry)}")


class ScopedMultiError(Exception):
    """Several independent results of one check, keyed by sub-name.

    Sub-results are reported as ``<check>/<key>`` and may themselves be
    ScopedMultiErrors, which nest one more level.
    """

    def __init__(self, errors: Mapping[str, BaseException | None] | None = None) -> None:
        self.errors: dict[str, BaseException | None] = dict(errors or {})
        super().__init__(self.errors)

    def __str__(self) -> str:
        parts = ["multiple errors:"]
        for key in sorted(self.errors):
            parts.append(f"\n{key}: {self.errors[key]}")
        return "".join(parts)

    def __getitem__(self, key: str) -> BaseException | None:
        return self.errors[key]

    def __setitem__(self, key: str, err: BaseException | None) -> None:
        self.errors[key] = err

    def __contains__(self, key: object) -> bool:
        return key in self.errors

    def __iter__(self) -> Iterator[str]:
        return iter(self.errors)

    def items(self):
        return self.errors.items()


def is_scoped_multi_error(err: BaseException | None) -> bool:
    """True if ``err`` is a ScopedMultiError. Does not look through causes."""
    return isinstance(err, ScopedMultiError)
