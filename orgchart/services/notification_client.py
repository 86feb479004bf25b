# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Notification client — inter-service communication.
Handles HTTP calls to the notification-service with timeout & fault tolerance.
"""

import httpx

from orgchart.core.config import settings
from orgchart.core.logging import get_logger
from orgchart.metrics.prometheus import NOTIFICATIONS_SENT

logger = get_logger(__name__)


class NotificationClient:
    """Fire-and-forget notification sender via notification-service."""

    def __init__(self, base_url: str | None = None) -> None:
        self._base_url = settings.NOTIFICATION_SERVICE_URL if base_url is None else base_url

    @property
    def enabled(self) -> bool:
        return bool(self._base_url)

    def send(
        self,
        channel: str,
        recipient: str,
        message: str,
        reference_id: str = "N/A",
    ) -> bool:
        """Send a notification. Failures are logged but never raised."""
        if not self.enabled:
            logger.debug("Notifications disabled, skipping message to %s", recipient)
            return False
        try:
            with httpx.Client(timeout=settings.NOTIFICATION_TIMEOUT) as client:
                resp = client.post(
                    f"{self._base_url}/api/v1/notify",
                    json={
                        "channel": channel,
                        "recipient": recipient,
                        "message": message,
                        # notification-service keys every message by incident_id
                        "incident_id": reference_id,
                    },
                )
            NOTIFICATIONS_SENT.labels(channel=channel).inc()
            logger.info(
                "Notification sent: recipient=%s, channel=%s, status=%d",
                recipient,
                channel,
                resp.status_code,
            )
            return True
        except Exception as exc:
            logger.warning("Notification failed: %s", exc)
            return False
