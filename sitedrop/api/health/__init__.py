"""Health probe resources."""

from sitedrop.api.health.resources import HealthResource, ReadyResource

__all__ = ["HealthResource", "ReadyResource"]
