"""
tests/test_publisher.py
=======================
PubSubMailPublisher: message wire shape and swallowed publish failures.
"""

from __future__ import annotations

import json

import pytest
from structlog.testing import capture_logs

from stock_collector.core.constants import MailSubject, MailType
from stock_collector.core.errors import ConfigurationError
from stock_collector.notifications.publisher import (
    NotificationEvent,
    PubSubMailPublisher,
    TemplateData,
)


class FakeFuture:
    def __init__(self, message_id: str | None = None, error: Exception | None = None) -> None:
        self._message_id = message_id
        self._error = error

    def result(self) -> str:
        if self._error is not None:
            raise self._error
        return self._message_id


class FakePublisherClient:
    def __init__(self, future: FakeFuture | None = None) -> None:
        self.future = future or FakeFuture("msg-1")
        self.published: list[tuple[str, bytes]] = []

    def topic_path(self, project: str, topic: str) -> str:
        return f"projects/{project}/topics/{topic}"

    def publish(self, topic: str, data: bytes) -> FakeFuture:
        self.published.append((topic, data))
        return self.future


def event() -> NotificationEvent:
    return NotificationEvent(
        subject=MailSubject.FILE_SIZE,
        supplier_email="stock@supplier.example.com",
        template_data=TemplateData(
            supplierNumber="123456",
            supplierName="Gartenmöbel GmbH",
            subject=MailSubject.FILE_SIZE,
            project="ds-inventory",
            time="30.03.2022, 16:18:10",
            country="DE",
            file="stock_123456_DE_20220330150345.csv",
            error="Die Datei stock_123456_DE_20220330150345.csv hat eine Dateigröße von Null",
        ),
    )


class TestPubSubMailPublisher:
    @pytest.mark.asyncio
    async def test_publishes_mail_sender_message(self) -> None:
        client = FakePublisherClient()
        publisher = PubSubMailPublisher("general-project", "mail-sender", client=client)

        await publisher.publish(event())

        ((topic, data),) = client.published
        assert topic == "projects/general-project/topics/mail-sender"
        message = json.loads(data.decode("utf-8"))
        assert message["subject"] == str(MailSubject.FILE_SIZE)
        assert message["supplierEmail"] == "stock@supplier.example.com"
        assert message["mailType"] == str(MailType.FILE)
        assert message["dynamicTemplateData"]["supplierNumber"] == "123456"
        assert message["dynamicTemplateData"]["supplierName"] == "Gartenmöbel GmbH"
        assert message["dynamicTemplateData"]["country"] == "DE"

    @pytest.mark.asyncio
    async def test_publish_failure_is_logged_not_raised(self) -> None:
        client = FakePublisherClient(FakeFuture(error=RuntimeError("deadline exceeded")))
        publisher = PubSubMailPublisher("general-project", "mail-sender", client=client)

        with capture_logs() as logs:
            await publisher.publish(event())

        assert any(
            entry["event"] == "Error while publishing message to topic"
            and entry["error"] == "deadline exceeded"
            for entry in logs
        )

    def test_missing_project_is_a_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            PubSubMailPublisher("", "mail-sender", client=FakePublisherClient())

        assert exc_info.value.missing == ["GENERAL_PROJECT_ID"]

    def test_missing_topic_is_a_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            PubSubMailPublisher("general-project", "", client=FakePublisherClient())

        assert exc_info.value.missing == ["MAIL_SENDER_TOPIC"]
