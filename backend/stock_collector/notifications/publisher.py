"""
Mail-sender publisher — pushes supplier notification events to Pub/Sub.

Publishing is fire-and-forget: delivery retries belong to the mail
sender, so a failed publish is logged and swallowed here.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from google.cloud import pubsub_v1

from stock_collector.core.constants import MailType
from stock_collector.core.errors import ConfigurationError
from stock_collector.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TemplateData:
    """Fields rendered into the supplier mail template."""

    supplierNumber: str
    supplierName: str
    subject: str
    project: str
    time: str
    country: str
    file: str
    error: str


@dataclass(frozen=True)
class NotificationEvent:
    """One mail-sender message."""

    subject: str
    supplier_email: str
    template_data: TemplateData
    mail_type: MailType = MailType.FILE

    def to_message(self) -> dict[str, Any]:
        """Wire shape expected by the mail sender."""
        return {
            "subject": self.subject,
            "supplierEmail": self.supplier_email,
            "dynamicTemplateData": asdict(self.template_data),
            "mailType": str(self.mail_type),
        }


class NotificationPublisher(Protocol):
    async def publish(self, event: NotificationEvent) -> None: ...


class PubSubMailPublisher:
    """Publishes NotificationEvents to the mail-sender topic."""

    def __init__(
        self,
        project_id: str,
        topic: str,
        client: pubsub_v1.PublisherClient | None = None,
    ) -> None:
        if not project_id:
            raise ConfigurationError(
                "Missing environment variable: GENERAL_PROJECT_ID",
                missing=["GENERAL_PROJECT_ID"],
            )
        if not topic:
            raise ConfigurationError(
                "Missing environment variable: MAIL_SENDER_TOPIC",
                missing=["MAIL_SENDER_TOPIC"],
            )
        self._client = client or pubsub_v1.PublisherClient()
        self._topic_path = self._client.topic_path(project_id, topic)

    async def publish(self, event: NotificationEvent) -> None:
        data = json.dumps(event.to_message()).encode("utf-8")
        try:
            future = self._client.publish(self._topic_path, data)
            message_id = await asyncio.to_thread(future.result)
        except Exception as exc:
            logger.error(
                "Error while publishing message to topic",
                topic=self._topic_path,
                subject=event.subject,
                error=str(exc),
            )
            return

        logger.info(
            "Notification published",
            topic=self._topic_path,
            subject=event.subject,
            message_id=message_id,
        )
