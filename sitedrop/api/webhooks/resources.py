"""Webhook endpoint that triggers deployments.

``POST /webhooks/push`` passes the raw request body to the
:class:`~sitedrop.handler.WebhookHandler` and mirrors its status:
``201`` deployed, ``204`` already deployed, ``400`` malformed payload.
A ``ping`` delivery, sent by the source host when a hook is registered,
is acknowledged without deploying anything.

Usage
-----
Register the resource on the Falcon app::

    app.add_route("/webhooks/push", PushWebhookResource(handler))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from sitedrop.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from sitedrop.handler import WebhookHandler

__all__ = ["EVENT_HEADER", "PushWebhookResource"]

logger = get_logger(__name__)

EVENT_HEADER = "X-GitHub-Event"


class PushWebhookResource:
    """Resource accepting push deliveries."""

    def __init__(self, handler: WebhookHandler) -> None:
        """Bind the resource to the webhook handler.

        Parameters
        ----------
        handler
            Handler that validates deliveries and runs the pipeline.

        """
        self._handler = handler

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /webhooks/push.

        Deployment errors propagate to the app's error handlers.
        """
        if req.get_header(EVENT_HEADER) == "ping":
            log_info(logger, "Acknowledged webhook ping")
            resp.media = {"status": "pong"}
            resp.status = HTTPStatus.OK
            return

        body = await req.stream.read()
        result = await self._handler.handle_body(body)
        status = HTTPStatus(result["statusCode"])
        resp.status = status
        if status is HTTPStatus.BAD_REQUEST:
            resp.media = {
                "title": "Invalid payload",
                "description": "Body is not a valid push event",
            }
