"""Deployment configuration read from the environment.

Usage
-----
Build a configuration explicitly:

>>> config = DeployConfig(site_bucket="blog")
>>> config.hugo_bin
'hugo'

Or load it from environment variables:

>>> import os
>>> os.environ["SITEDROP_SITE_BUCKET"] = "blog"
>>> DeployConfig.from_env().site_bucket
'blog'

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from sitedrop.errors import ConfigError

_DEFAULT_HUGO_BIN = "hugo"
_DEFAULT_HTTP_TIMEOUT_S = 60.0
_DEFAULT_USER_AGENT = "sitedrop/0.1"


@dc.dataclass(frozen=True, slots=True)
class DeployConfig:
    """Settings for one deployment pipeline instance.

    Attributes
    ----------
    site_bucket
        Base bucket name. Each deploy publishes to
        ``{site_bucket}-{commit_id}``.
    github_token
        Optional bearer token sent with archive downloads.
    hugo_bin
        Path or name of the Hugo executable.
    work_root
        Parent directory for per-delivery workspaces. ``None`` uses the
        system temporary directory.
    http_timeout_s
        Timeout in seconds for archive downloads.
    user_agent
        ``User-Agent`` header sent to the source host.

    """

    site_bucket: str
    github_token: str | None = None
    hugo_bin: str = _DEFAULT_HUGO_BIN
    work_root: Path | None = None
    http_timeout_s: float = _DEFAULT_HTTP_TIMEOUT_S
    user_agent: str = _DEFAULT_USER_AGENT

    @staticmethod
    def _optional(env_var: str) -> str | None:
        raw = os.environ.get(env_var, "").strip()
        return raw or None

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        """Read a positive float env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            raise ConfigError.invalid(env_var, raw, "a number") from exc
        if value <= 0:
            raise ConfigError.invalid(env_var, raw, "positive")
        return value

    @classmethod
    def from_env(cls) -> DeployConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``SITEDROP_SITE_BUCKET``: Base bucket name (required).
        - ``SITEDROP_GITHUB_TOKEN``: Token for archive downloads.
        - ``SITEDROP_HUGO_BIN``: Hugo executable, default ``hugo``.
        - ``SITEDROP_WORK_ROOT``: Parent directory for workspaces.
        - ``SITEDROP_HTTP_TIMEOUT_S``: Download timeout in seconds.

        Raises
        ------
        ConfigError
            If the bucket name is missing or the timeout is not a positive
            number.

        """
        site_bucket = cls._optional("SITEDROP_SITE_BUCKET")
        if site_bucket is None:
            raise ConfigError.missing("SITEDROP_SITE_BUCKET")

        work_root_raw = cls._optional("SITEDROP_WORK_ROOT")
        return cls(
            site_bucket=site_bucket,
            github_token=cls._optional("SITEDROP_GITHUB_TOKEN"),
            hugo_bin=cls._optional("SITEDROP_HUGO_BIN") or _DEFAULT_HUGO_BIN,
            work_root=Path(work_root_raw) if work_root_raw else None,
            http_timeout_s=cls._parse_positive_float(
                "SITEDROP_HTTP_TIMEOUT_S", _DEFAULT_HTTP_TIMEOUT_S
            ),
        )
