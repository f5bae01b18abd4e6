"""Webhook resources."""

from sitedrop.api.webhooks.resources import EVENT_HEADER, PushWebhookResource

__all__ = ["EVENT_HEADER", "PushWebhookResource"]
