"""Command-line interface for sitedrop.

Usage:
    sitedrop deploy payload.json   # replay a stored push delivery
    sitedrop serve                 # run the webhook server

Environment variables:
    SITEDROP_SITE_BUCKET  - Base bucket name (required for deploy)
    SITEDROP_LOG_LEVEL    - Log level (default: INFO)
"""

from __future__ import annotations

import asyncio
import typing as typ
from http import HTTPStatus
from pathlib import Path

from cyclopts import App, Parameter

from sitedrop.errors import SitedropError
from sitedrop.factory import DeployServices, build_services
from sitedrop.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_info,
)

app = App(
    name="sitedrop",
    help="Deploy pushed commits as static sites to public buckets",
    version="0.1.0",
)

logger = get_logger(__name__)


async def replay(body: bytes, services: DeployServices) -> int:
    """Run ``body`` through the webhook handler and return an exit code.

    Returns 0 when the commit was deployed or was already deployed, and 1
    when the payload is malformed or the deployment failed.
    """
    try:
        response = await services.handler.handle_body(body)
    except SitedropError as exc:
        log_exception(logger, f"Deployment failed: {exc}", exc)
        return 1
    finally:
        await services.aclose()

    status = response["statusCode"]
    if status == HTTPStatus.BAD_REQUEST:
        log_error(logger, "Payload is not a valid push event")
        return 1
    log_info(logger, "Finished with status %d", status)
    return 0


@app.command
def deploy(
    payload: Path,
    *,
    log_level: typ.Annotated[
        str, Parameter(env_var="SITEDROP_LOG_LEVEL")
    ] = "INFO",
) -> int:
    """Replay a stored push webhook payload.

    Parameters
    ----------
    payload
        File holding the JSON body of a push delivery.
    log_level
        Log level for the run.

    """
    configure_logging(log_level)
    body = payload.read_bytes()
    return asyncio.run(replay(body, build_services()))


@app.command
def serve() -> None:
    """Run the webhook server with Granian."""
    from sitedrop.runtime import main as run_server

    run_server()


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    raise SystemExit(main())
