"""
tests/conftest.py
=================
In-memory collaborators for the collector: an SFTP endpoint, an object
sink, a log store, a supplier directory, a mail publisher and an alert
channel.  Every fake records what was done to it so tests can assert on
side effects without a network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import pytest

from stock_collector.clients.supplier_directory import SupplierInfo
from stock_collector.core.errors import EndpointError
from stock_collector.ingestion.folders import FolderPolicy
from stock_collector.ingestion.inbox import SftpInbox
from stock_collector.ingestion.sftp_client import RemoteEntry, RemoteFileNotFoundError, RemoteStat
from stock_collector.ingestion.writer import IngestWriter
from stock_collector.pipeline.engine import ValidationPipeline
from stock_collector.pipeline.notifier import SupplierNotifier
from stock_collector.pipeline.stages.age import FileAgeGate
from stock_collector.pipeline.stages.file_name import FileNameGate
from stock_collector.pipeline.stages.file_size import FileSizeGate
from stock_collector.pipeline.stages.supplier import SupplierAuthorizationGate

NOW = 1_700_000_000.0
BASE_PATH = "/EAI/s_ds-inventory-inbox_p/data/"
DEFAULT_MAILBOX = "supplier-management@example.com"
SUPPLIER_EMAIL = "stock@supplier-123456.example.com"
CSV_BUCKET = "inbound-csv"
XLSX_BUCKET = "inbound-xlsx"


# =============================================================================
# Endpoint
# =============================================================================


@dataclass
class RemoteFile:
    content: bytes
    modify_time: float


class FakeEndpoint:
    """EndpointClient over a dict of absolute paths."""

    def __init__(self) -> None:
        self.files: dict[str, RemoteFile] = {}
        self.folders: set[str] = set()
        self.calls: list[tuple] = []
        self.connected = False
        self.get_failures = 0
        self.connect_error: Exception | None = None

    def add_file(
        self,
        supplier_folder: str,
        file_name: str,
        content: bytes = b"sku;qty\n4711;3\n",
        age_seconds: float = 3600,
    ) -> str:
        path = f"{BASE_PATH}{supplier_folder}/data/{file_name}"
        self.files[path] = RemoteFile(content=content, modify_time=NOW - age_seconds)
        self.folders.add(supplier_folder)
        return path

    def names_in(self, supplier_folder: str) -> list[str]:
        prefix = f"{BASE_PATH}{supplier_folder}/data/"
        return sorted(path[len(prefix):] for path in self.files if path.startswith(prefix))

    def ops(self, operation: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == operation]

    async def connect(self) -> None:
        self.calls.append(("connect",))
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    async def end(self) -> None:
        self.calls.append(("end",))
        self.connected = False

    async def list(self, path: str) -> list[RemoteEntry]:
        self.calls.append(("list", path))
        if path.rstrip("/") == BASE_PATH.rstrip("/"):
            return [RemoteEntry(name=name) for name in sorted(self.folders)]
        prefix = f"{path.rstrip('/')}/"
        return [
            RemoteEntry(name=file_path[len(prefix):])
            for file_path in sorted(self.files)
            if file_path.startswith(prefix)
        ]

    async def stat(self, path: str) -> RemoteStat:
        self.calls.append(("stat", path))
        remote = self._require(path)
        return RemoteStat(modify_time=remote.modify_time, size=len(remote.content))

    async def get(self, path: str, sink) -> None:
        self.calls.append(("get", path))
        if self.get_failures:
            self.get_failures -= 1
            raise EndpointError(f"SFTP get failed for {path}: connection reset")
        sink.write(self._require(path).content)

    async def delete(self, path: str, ignore_missing: bool = False) -> str:
        self.calls.append(("delete", path, ignore_missing))
        if path not in self.files:
            if ignore_missing:
                return f"File does not exist: {path}"
            raise RemoteFileNotFoundError(f"No such file: {path}")
        del self.files[path]
        return f"Successfully deleted {path}"

    async def rename(self, old_path: str, new_path: str) -> None:
        self.calls.append(("rename", old_path, new_path))
        self.files[new_path] = self.files.pop(old_path)

    def _require(self, path: str) -> RemoteFile:
        if path not in self.files:
            raise RemoteFileNotFoundError(f"No such file: {path}")
        return self.files[path]


# =============================================================================
# Sink / log store / notifications
# =============================================================================


class FakeWriter:
    def __init__(self, sink: FakeSink, bucket: str, key: str) -> None:
        self._sink = sink
        self.bucket = bucket
        self.key = key
        self.buffer = bytearray()
        self.closed = False

    def write(self, data: bytes) -> int:
        self.buffer.extend(data)
        return len(data)

    async def commit(self) -> None:
        self._sink.objects[(self.bucket, self.key)] = bytes(self.buffer)

    def close(self) -> None:
        self.closed = True


class FakeSink:
    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.writers: list[FakeWriter] = []

    def write(self, destination_path: str, bucket: str) -> FakeWriter:
        writer = FakeWriter(self, bucket, destination_path)
        self.writers.append(writer)
        return writer


class FakeLogStore:
    def __init__(self, authorized: set[tuple[str, str, str]] | None = None) -> None:
        self.authorized = authorized if authorized is not None else set()
        self.transmissions: list = []
        self.updates: list[tuple] = []
        self.lookups: list[tuple[str, str, str]] = []
        self.loaded = False
        self.torn_down = False
        self.next_id = 666

    async def add_transmission(self, record) -> int:
        self.transmissions.append(record)
        return self.next_id

    async def update_transmission(self, transmission_id, status, storage_path) -> None:
        self.updates.append((transmission_id, status, storage_path))

    async def load_supplier_states(self) -> None:
        self.loaded = True

    async def is_supplier_authorized(self, supplier_id, country, inbound_channel) -> bool:
        key = (supplier_id, country, inbound_channel)
        self.lookups.append(key)
        return key in self.authorized

    async def teardown(self) -> None:
        self.torn_down = True


class FakeDirectory:
    """SupplierDirectory stand-in; resolves every supplier to one address."""

    def __init__(self, email: str = SUPPLIER_EMAIL, name: str = "Gartenmöbel GmbH") -> None:
        self.email = email
        self.name = name
        self.requested: list[str] = []
        self.error: Exception | None = None

    async def get_supplier_info(self, supplier_id: str) -> SupplierInfo:
        self.requested.append(supplier_id)
        if self.error is not None:
            raise self.error
        return SupplierInfo(name=self.name, email=self.email)


class RecordingPublisher:
    def __init__(self) -> None:
        self.events: list = []

    async def publish(self, event) -> None:
        self.events.append(event)


class RecordingAlerts:
    def __init__(self) -> None:
        self.alerts: list[tuple] = []

    async def alert(self, title, details, variables=None) -> bool:
        self.alerts.append((title, details, variables))
        return True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def endpoint() -> FakeEndpoint:
    return FakeEndpoint()


@pytest.fixture
def policy() -> FolderPolicy:
    """Production folder policy: supplier folders are listed."""
    return FolderPolicy(
        internal_folder_exceptions=["s_sm-ds_p"],
        ignored_folders=["s_ds-test-supplier_p", "s_sm-ds_t"],
        production=True,
    )


@pytest.fixture
def inbox(endpoint: FakeEndpoint, policy: FolderPolicy) -> SftpInbox:
    return SftpInbox(endpoint, BASE_PATH, policy)


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def log_store() -> FakeLogStore:
    return FakeLogStore(authorized={("123456", "DE", "csv"), ("123456", "DE", "xlsx")})


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def alerts() -> RecordingAlerts:
    return RecordingAlerts()


@pytest.fixture
def notifier(directory: FakeDirectory, publisher: RecordingPublisher) -> SupplierNotifier:
    return SupplierNotifier(
        directory,
        publisher,
        clock=lambda: datetime(2022, 3, 30, 16, 18, 10),
    )


@pytest.fixture
def pipeline(
    inbox: SftpInbox,
    notifier: SupplierNotifier,
    alerts: RecordingAlerts,
    log_store: FakeLogStore,
) -> ValidationPipeline:
    return ValidationPipeline([
        FileAgeGate(inbox, minimum_age_seconds=30, clock=lambda: NOW),
        FileNameGate(inbox, notifier, alerts),
        FileSizeGate(inbox, notifier),
        SupplierAuthorizationGate(inbox, notifier, log_store, default_mailbox=DEFAULT_MAILBOX),
    ])


@pytest.fixture
def writer(inbox: SftpInbox, sink: FakeSink, alerts: RecordingAlerts) -> IngestWriter:
    return IngestWriter(
        inbox,
        sink,
        alerts,
        csv_bucket=CSV_BUCKET,
        xlsx_bucket=XLSX_BUCKET,
        uri_scheme="gs",
    )
