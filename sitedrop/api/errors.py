"""Falcon error handlers for deployment failures.

A failed deployment has already been rolled back by the time it reaches
the HTTP layer. The handlers here only translate the surviving exception
into a JSON error body.

Usage
-----
Register the handlers on the Falcon app::

    from sitedrop.api.errors import handle_build_failure, handle_deploy_failure
    from sitedrop.errors import BuildError, SitedropError

    app.add_error_handler(SitedropError, handle_deploy_failure)
    app.add_error_handler(BuildError, handle_build_failure)

"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from sitedrop.errors import BuildError, SitedropError

__all__ = ["handle_build_failure", "handle_deploy_failure"]


async def handle_deploy_failure(
    _req: Request,
    resp: Response,
    ex: SitedropError,
    _params: dict[str, typ.Any],
) -> None:
    """Map a ``SitedropError`` to an HTTP 502 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The deployment failure.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_502
    resp.media = {
        "title": "Deployment failed",
        "description": str(ex),
    }


async def handle_build_failure(
    _req: Request,
    resp: Response,
    ex: BuildError,
    _params: dict[str, typ.Any],
) -> None:
    """Map a ``BuildError`` to an HTTP 502 JSON response with the exit code."""
    resp.status = falcon.HTTP_502
    resp.media = {
        "title": "Site build failed",
        "description": str(ex),
        "exit_code": ex.exit_code,
    }
