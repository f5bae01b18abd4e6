"""Application factory for the sitedrop Falcon ASGI application.

Usage
-----
Create a probe-only app (no deployment configuration)::

    app = create_app()

Create an app that accepts push webhooks::

    from sitedrop.api.app import AppDependencies, create_app
    from sitedrop.factory import build_services

    app = create_app(AppDependencies(services=build_services(config)))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from sitedrop.api.errors import handle_build_failure, handle_deploy_failure
from sitedrop.api.health import HealthResource, ReadyResource
from sitedrop.errors import BuildError, SitedropError

if typ.TYPE_CHECKING:
    from sitedrop.factory import DeployServices

__all__ = ["WEBHOOK_ROUTE", "AppDependencies", "create_app"]

WEBHOOK_ROUTE = "/webhooks/push"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    services
        Deployment services. When ``None`` only the probes are served.

    """

    services: DeployServices | None = None


def create_app(dependencies: AppDependencies | None = None) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. Without services the webhook
        route is not registered and ``/ready`` reports 503.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    services = dependencies.services if dependencies is not None else None

    middleware: list[object] = []
    if services is not None:
        from sitedrop.api.middleware import ServicesLifecycle

        middleware.append(ServicesLifecycle(services))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(webhooks_enabled=services is not None))

    if services is not None:
        from sitedrop.api.webhooks import PushWebhookResource

        app.add_route(WEBHOOK_ROUTE, PushWebhookResource(services.handler))

    app.add_error_handler(SitedropError, handle_deploy_failure)
    app.add_error_handler(BuildError, handle_build_failure)

    return app
