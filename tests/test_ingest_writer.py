"""
tests/test_ingest_writer.py
===========================
IngestWriter: destination naming, bucket choice and the bounded copy retry.
"""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from conftest import CSV_BUCKET, XLSX_BUCKET, FakeEndpoint, FakeSink, RecordingAlerts
from stock_collector.core.errors import WriteExhaustedError
from stock_collector.ingestion.writer import IngestWriter

VALID_NAME = "stock_123456_DE_20220330161810.csv"


class TestDestination:
    def test_file_path_appends_transmission_id(self) -> None:
        assert (
            IngestWriter.get_file_path(VALID_NAME, "123456", 666)
            == "123456/stock_123456_DE_20220330161810_666.csv"
        )

    def test_file_path_lower_cases_extension(self) -> None:
        assert (
            IngestWriter.get_file_path("stock_123456_AT_20220330161810.XLSX", "123456", 7)
            == "123456/stock_123456_AT_20220330161810_7.xlsx"
        )

    def test_bucket_by_extension(self, writer: IngestWriter) -> None:
        assert writer.choose_bucket(VALID_NAME) == CSV_BUCKET
        assert writer.choose_bucket("stock_123456_DE_20220330161810.CSV") == CSV_BUCKET
        assert writer.choose_bucket("stock_123456_DE_20220330161810.xlsx") == XLSX_BUCKET


class TestCopyToSink:
    @pytest.mark.asyncio
    async def test_copies_content_and_returns_uri(
        self,
        writer: IngestWriter,
        endpoint: FakeEndpoint,
        sink: FakeSink,
    ) -> None:
        endpoint.add_file("123456", VALID_NAME, content=b"sku;qty\n1;2\n")

        uri = await writer.copy_to_sink("123456", VALID_NAME, 666)

        assert uri == "gs://inbound-csv/123456/stock_123456_DE_20220330161810_666.csv"
        assert sink.objects == {
            ("inbound-csv", "123456/stock_123456_DE_20220330161810_666.csv"): b"sku;qty\n1;2\n"
        }
        assert all(w.closed for w in sink.writers)
        # the source is left in place; deleting it is the caller's job
        assert endpoint.names_in("123456") == [VALID_NAME]

    @pytest.mark.asyncio
    async def test_internal_folder_uses_supplier_id_from_name(
        self,
        writer: IngestWriter,
        endpoint: FakeEndpoint,
        sink: FakeSink,
    ) -> None:
        file_name = "stock_654321_DE_20220330161810.xlsx"
        endpoint.add_file("s_sm-ds_p", file_name)

        uri = await writer.copy_to_sink("s_sm-ds_p", file_name, 12)

        assert uri == "gs://inbound-xlsx/654321/stock_654321_DE_20220330161810_12.xlsx"

    @pytest.mark.asyncio
    async def test_transient_failures_are_retried(
        self,
        writer: IngestWriter,
        endpoint: FakeEndpoint,
        sink: FakeSink,
        alerts: RecordingAlerts,
    ) -> None:
        endpoint.add_file("123456", VALID_NAME)
        endpoint.get_failures = 2

        with capture_logs() as logs:
            uri = await writer.copy_to_sink("123456", VALID_NAME, 666)

        assert uri.endswith("_666.csv")
        assert len(endpoint.ops("get")) == 3
        assert alerts.alerts == []
        failures = [entry for entry in logs if entry["event"] == "Writing file to bucket failed"]
        assert [entry["attempt"] for entry in failures] == [1, 2]

    @pytest.mark.asyncio
    async def test_exhaustion_alerts_and_raises(
        self,
        writer: IngestWriter,
        endpoint: FakeEndpoint,
        sink: FakeSink,
        alerts: RecordingAlerts,
    ) -> None:
        path = endpoint.add_file("123456", VALID_NAME)
        endpoint.get_failures = 3

        with pytest.raises(WriteExhaustedError) as exc_info:
            await writer.copy_to_sink("123456", VALID_NAME, 666)

        assert str(exc_info.value) == f"Error writing file to storage: {path}."
        assert exc_info.value.attempts == 3
        assert len(endpoint.ops("get")) == 3
        assert sink.objects == {}
        assert all(w.closed for w in sink.writers)

        (alert,) = alerts.alerts
        assert alert[0] == f"Error writing file name {VALID_NAME} to folder 123456"
        assert alert[1] == "An error has occurred while writing file"
        assert alert[2] == [
            ("Supplier", "123456"),
            ("File Name", VALID_NAME),
            ("Folder Name", "123456"),
        ]

    @pytest.mark.asyncio
    async def test_attempt_budget_is_per_file(
        self,
        writer: IngestWriter,
        endpoint: FakeEndpoint,
    ) -> None:
        """An exhausted file does not eat into the next file's attempts."""
        endpoint.add_file("123456", VALID_NAME)
        other = "stock_123456_DE_20220330161811.csv"
        endpoint.add_file("123456", other)
        endpoint.get_failures = 3

        with pytest.raises(WriteExhaustedError):
            await writer.copy_to_sink("123456", VALID_NAME, 1)

        endpoint.get_failures = 2
        uri = await writer.copy_to_sink("123456", other, 2)

        assert uri.endswith("_2.csv")
