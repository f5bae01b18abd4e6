"""sitedrop runtime entrypoint.

This module provides the ASGI application factory served by Granian.
It delegates to :func:`sitedrop.api.app.create_app` while keeping the
``sitedrop.runtime:create_app`` entrypoint stable.

When ``SITEDROP_SITE_BUCKET`` is set, the runtime builds the deployment
services (S3 client, archive client, Hugo builder) and registers the
webhook endpoint. Otherwise it starts in probe-only mode.

Configuration is driven by environment variables:

- ``SITEDROP_HOST``: Bind address (default ``0.0.0.0``)
- ``SITEDROP_PORT``: Listen port (default ``8080``)
- ``SITEDROP_LOG_LEVEL``: Log level (default ``INFO``)
- ``SITEDROP_SITE_BUCKET`` and the other ``DeployConfig`` variables

Run the service directly with ``python -m sitedrop.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from sitedrop.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main", "parse_port"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535


def parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid SITEDROP_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        Webhook-enabled app when ``SITEDROP_SITE_BUCKET`` is set, otherwise
        a probe-only app.

    """
    from sitedrop.api.app import AppDependencies
    from sitedrop.api.app import create_app as _create_api_app

    if not os.environ.get("SITEDROP_SITE_BUCKET", "").strip():
        log_warning(logger, "SITEDROP_SITE_BUCKET is not set; webhooks disabled")
        return _create_api_app()

    from sitedrop.config import DeployConfig
    from sitedrop.factory import build_services

    services = build_services(DeployConfig.from_env())
    return _create_api_app(AppDependencies(services=services))


def main() -> None:
    """Start the sitedrop server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("SITEDROP_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = parse_port(os.environ.get("SITEDROP_PORT", "8080"))
    log_level_str = os.environ.get("SITEDROP_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid SITEDROP_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting sitedrop on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "sitedrop.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
