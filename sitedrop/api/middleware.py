"""ASGI lifespan middleware that closes deployment clients on shutdown.

Usage
-----
::

    app = falcon.asgi.App(middleware=[ServicesLifecycle(services)])

"""

from __future__ import annotations

import typing as typ

from sitedrop.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from sitedrop.factory import DeployServices

__all__ = ["ServicesLifecycle"]

logger = get_logger(__name__)


class ServicesLifecycle:
    """Falcon middleware releasing :class:`DeployServices` at shutdown.

    Parameters
    ----------
    services
        Services whose network clients are closed when the ASGI server
        sends the lifespan shutdown event.

    """

    def __init__(self, services: DeployServices) -> None:
        """Hold the services to close."""
        self._services = services

    async def process_shutdown(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Close the services' clients."""
        await self._services.aclose()
        log_info(logger, "Closed deployment clients")
