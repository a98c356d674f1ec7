"""
SupplierNotifier — turns a rejection into a mail-sender event.

Supplier info is resolved on every notification; a lookup failure
propagates to the caller and aborts the current file.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from stock_collector.clients.supplier_directory import SupplierDirectory
from stock_collector.core.constants import MailSubject
from stock_collector.core.logging import get_logger
from stock_collector.notifications.publisher import (
    NotificationEvent,
    NotificationPublisher,
    TemplateData,
)
from stock_collector.pipeline.context import CandidateFile
from stock_collector.validation.file_name import get_country

logger = get_logger(__name__)

TIME_FORMAT = "%d.%m.%Y, %H:%M:%S"


class SupplierNotifier:
    def __init__(
        self,
        directory: SupplierDirectory,
        publisher: NotificationPublisher,
        *,
        project: str = "ds-inventory",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.directory = directory
        self.publisher = publisher
        self.project = project
        self._clock = clock

    async def notify(
        self,
        candidate: CandidateFile,
        subject: MailSubject,
        message: str,
        *,
        recipient: str | None = None,
    ) -> NotificationEvent:
        """
        Publish one `file` mail about the candidate.

        The mail goes to the supplier's own address unless an explicit
        recipient is given.
        """
        info = await self.directory.get_supplier_info(candidate.supplier_id)
        event = NotificationEvent(
            subject=str(subject),
            supplier_email=recipient or info.email,
            template_data=TemplateData(
                supplierNumber=candidate.supplier_id,
                supplierName=info.name,
                subject=str(subject),
                project=self.project,
                time=self._clock().strftime(TIME_FORMAT),
                country=get_country(candidate.file_name),
                file=candidate.file_name,
                error=message,
            ),
        )
        await self.publisher.publish(event)
        logger.info(
            "Supplier notified",
            supplier_id=candidate.supplier_id,
            file_name=candidate.file_name,
            subject=event.subject,
        )
        return event
