from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library defaults loaded from environment / .env file.

    Every value can be overridden per instance through constructor
    arguments; these only apply when the caller passes nothing.
    """

    model_config = {
        "env_prefix": "HEALTHZ_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Seconds between runtime stats collections (memory, threads)
    runtime_ttl: float = 15.0

    # Period used when a check is registered with period 0
    check_period: float = 1.0

    # Remote checks
    remote_timeout: float = 10.0  # ignored when a custom client is supplied
    remote_body_excerpt: int = 1024  # max chars of a remote body quoted in errors


settings = Settings()
