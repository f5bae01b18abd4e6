"""Liveness and readiness probes.

``/health`` answers as long as the process serves requests. ``/ready``
additionally reports whether the webhook endpoint is wired up: without a
bucket configured the service starts in probe-only mode and is not ready
to accept deliveries.

Usage
-----
::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(webhooks_enabled=True))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe tied to webhook availability.

    Parameters
    ----------
    webhooks_enabled
        Whether ``POST /webhooks/push`` is registered.

    """

    def __init__(self, *, webhooks_enabled: bool) -> None:
        """Record whether deliveries can be accepted."""
        self._webhooks_enabled = webhooks_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready.

        Responds 200 ``{"status": "ready"}`` when deliveries are accepted,
        otherwise 503 ``{"status": "unconfigured"}``.
        """
        if self._webhooks_enabled:
            resp.media = {"status": "ready"}
            resp.status = HTTPStatus.OK
        else:
            resp.media = {"status": "unconfigured"}
            resp.status = HTTPStatus.SERVICE_UNAVAILABLE
