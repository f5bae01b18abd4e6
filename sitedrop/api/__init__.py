"""sitedrop HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives push webhooks.

Public API
----------
create_app
    Application factory. With deployment services it registers
    ``POST /webhooks/push``; without them only the probes are served.
"""

from sitedrop.api.app import create_app

__all__ = ["create_app"]
