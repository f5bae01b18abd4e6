"""Entry point invoked once per webhook delivery.

The handler accepts a function-as-a-service style event, a mapping whose
``body`` holds the JSON text of the delivery, and returns a response
mapping carrying only ``statusCode``:

- ``400`` when the body cannot be decoded; nothing else is attempted.
- ``204`` when the commit's bucket already exists.
- ``201`` after a successful build and upload.

Deployment failures are not converted into a status; the original
exception propagates to the invoker once any rollback has finished.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from sitedrop.errors import InvalidPayloadError
from sitedrop.events import parse_push_event
from sitedrop.logging import get_logger, log_info, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitedrop.pipeline import DeployPipeline

logger = get_logger(__name__)


class HandlerResponse(typ.TypedDict):
    """Response returned to the invoker."""

    statusCode: int


def _response(status: int) -> HandlerResponse:
    return {"statusCode": int(status)}


class WebhookHandler:
    """Validate a delivery and hand it to the deployment pipeline.

    Parameters
    ----------
    pipeline
        Pipeline that performs the deployment. It carries the storage
        client, so one handler instance serves every delivery.

    """

    def __init__(self, pipeline: DeployPipeline) -> None:
        """Bind the handler to a pipeline."""
        self._pipeline = pipeline

    async def handle_body(self, body: str | bytes | None) -> HandlerResponse:
        """Process a raw delivery body and return the response."""
        try:
            event = parse_push_event(body)
        except InvalidPayloadError as exc:
            log_warning(logger, "Rejected webhook delivery: %s", exc.reason)
            return _response(HTTPStatus.BAD_REQUEST)

        log_info(
            logger,
            "Push to %s at %s",
            event.repository.full_name,
            event.commit_id,
        )
        outcome = await self._pipeline.deploy(event)
        return _response(outcome.status_code)

    async def __call__(
        self,
        event: cabc.Mapping[str, typ.Any],
        context: object | None = None,
    ) -> HandlerResponse:
        """Handle a function-as-a-service event mapping.

        Parameters
        ----------
        event
            Invocation event; only ``body`` is read.
        context
            Invocation context supplied by the platform (unused).

        """
        body = event.get("body")
        if body is not None and not isinstance(body, (str, bytes)):
            return _response(HTTPStatus.BAD_REQUEST)
        return await self.handle_body(body)


__all__ = ["HandlerResponse", "WebhookHandler"]
