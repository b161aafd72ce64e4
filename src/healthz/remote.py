"""Remote checks — poll another instance's healthz endpoint and merge its results.

A compatible remote's failures and warnings come back as a ScopedMultiError,
so the local Checker reports them under ``<check name>/<remote key>``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from .check import CheckFunc
from .config import settings
from .errors import HealthWarning, ScopedMultiError, warn
from .models import RemoteStatus

logger = logging.getLogger(__name__)


class RemoteError(Exception):
    """A failure reported by, or about, a remote healthz endpoint."""


@dataclass
class RemoteOptions:
    """Options for Checker.register_remote()."""

    client: httpx.Client | None = None  # overrides the default client
    timeout: float | None = None  # default settings.remote_timeout; ignored with a custom client
    as_warnings: bool = False  # downgrade remote failures to warnings
    warn_404: bool = False  # a missing endpoint is a warning, not a failure


def _validate_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"invalid remote healthz url {url!r}: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"remote healthz url must be absolute http(s): {url!r}")


def remote_check(url: str, options: RemoteOptions | None = None) -> CheckFunc:
    """Build a check function that fetches and interprets a remote status."""
    _validate_url(url)
    opts = options or RemoteOptions()
    timeout = opts.timeout if opts.timeout and opts.timeout > 0 else settings.remote_timeout

    def fail(msg: str) -> Exception:
        return HealthWarning(msg) if opts.as_warnings else RemoteError(msg)

    def fetch() -> httpx.Response:
        if opts.client is not None:
            return opts.client.get(url)
        with httpx.Client(timeout=timeout) as client:
            return client.get(url)

    def check() -> BaseException | None:
        try:
            resp = fetch()
        except httpx.HTTPError as e:
            logger.debug("Remote healthz %s unreachable: %s", url, e)
            err = fail(str(e) or type(e).__name__)
            err.__cause__ = e
            return err

        # 2xx and 5xx carry a status document, anything else is a protocol error
        code = resp.status_code
        if code < 200 or 300 <= code < 500 or code >= 600:
            if code == 404 and opts.warn_404:
                return warn("remote healthz endpoint does not exist")
            return fail(f"unexpected healthz http status code: {code}")
        remote_ok = code < 300

        try:
            remote = RemoteStatus.model_validate_json(resp.content)
        except ValidationError:
            # Not our format, the status code is all we have
            if remote_ok:
                return None
            return fail(_contents_message(code, resp.text))

        if not remote_ok and not remote.failures:
            # Error code without failures: not a compatible document
            return fail(_contents_message(code, resp.text))

        errors = ScopedMultiError()
        for key, msg in remote.failures.items():
            errors[key] = fail(msg)
        for key, msg in remote.warnings.items():
            errors[key] = HealthWarning(msg)
        if not errors.errors:
            return None
        return errors

    return check


def _contents_message(code: int, body: str) -> str:
    excerpt = body[: settings.remote_body_excerpt]
    return f"remote http code {code}, contents:\n{excerpt}"
