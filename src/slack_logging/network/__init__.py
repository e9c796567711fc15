"""
Outbound delivery of Slack payloads
"""

from .webhook import SlackWebhookClient, WebhookTransport

__all__ = [
    "WebhookTransport",
    "SlackWebhookClient",
]
