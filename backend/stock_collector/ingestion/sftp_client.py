"""
SFTP endpoint client — Paramiko session shared by all folder workers.

Paramiko's SFTPClient is blocking and not safe for concurrent use, so
every call is pushed to a worker thread and serialised through one
asyncio.Lock.  Concurrent folder workers therefore share a single
connection without interleaving requests on it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Protocol

import paramiko

from stock_collector.core.errors import EndpointError
from stock_collector.core.logging import get_logger

logger = get_logger(__name__)


class RemoteFileNotFoundError(EndpointError):
    """The remote path does not exist (anymore)."""
    pass


@dataclass(frozen=True)
class RemoteEntry:
    name: str


@dataclass(frozen=True)
class RemoteStat:
    modify_time: float          # epoch seconds
    size: int


class EndpointClient(Protocol):
    """Capability interface of the remote file endpoint."""

    async def connect(self) -> None: ...

    async def list(self, path: str) -> list[RemoteEntry]: ...

    async def stat(self, path: str) -> RemoteStat: ...

    async def get(self, path: str, sink: BinaryIO) -> None: ...

    async def delete(self, path: str, ignore_missing: bool = False) -> str: ...

    async def rename(self, old_path: str, new_path: str) -> None: ...

    async def end(self) -> None: ...


class ParamikoEndpointClient:
    """EndpointClient backed by a single Paramiko SFTP session."""

    def __init__(self, host: str, port: int, username: str, password: str) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._transport: paramiko.Transport | None = None
        self._sftp: paramiko.SFTPClient | None = None
        self._lock = asyncio.Lock()

    # ─── Session lifecycle ─────────────────────────────

    async def connect(self) -> None:
        async with self._lock:
            try:
                await asyncio.to_thread(self._open)
            except (OSError, paramiko.SSHException) as exc:
                raise EndpointError(
                    f"SFTP connect to {self._host}:{self._port} failed: {exc}",
                    details={"operation": "connect"},
                ) from exc
        logger.info("SFTP session opened", host=self._host, port=self._port)

    def _open(self) -> None:
        transport = paramiko.Transport((self._host, self._port))
        try:
            transport.connect(username=self._username, password=self._password)
            self._sftp = paramiko.SFTPClient.from_transport(transport)
        except Exception:
            transport.close()
            raise
        self._transport = transport

    async def end(self) -> None:
        async with self._lock:
            if self._sftp is not None:
                await asyncio.to_thread(self._sftp.close)
            if self._transport is not None:
                await asyncio.to_thread(self._transport.close)
            self._sftp = None
            self._transport = None
        logger.info("SFTP session closed", host=self._host)

    # ─── Operations ────────────────────────────────────

    async def list(self, path: str) -> list[RemoteEntry]:
        attrs = await self._run("list", path, lambda sftp: sftp.listdir_attr(path))
        return [RemoteEntry(name=attr.filename) for attr in attrs]

    async def stat(self, path: str) -> RemoteStat:
        attr = await self._run("stat", path, lambda sftp: sftp.stat(path))
        return RemoteStat(modify_time=float(attr.st_mtime or 0), size=int(attr.st_size or 0))

    async def get(self, path: str, sink: BinaryIO) -> None:
        await self._run("get", path, lambda sftp: sftp.getfo(path, sink))

    async def delete(self, path: str, ignore_missing: bool = False) -> str:
        try:
            await self._run("delete", path, lambda sftp: sftp.remove(path))
        except RemoteFileNotFoundError:
            if not ignore_missing:
                raise
            logger.debug("File already gone, nothing to delete", path=path)
            return f"File does not exist: {path}"
        return f"Successfully deleted {path}"

    async def rename(self, old_path: str, new_path: str) -> None:
        await self._run("rename", old_path, lambda sftp: sftp.rename(old_path, new_path))

    async def _run(self, operation: str, path: str, func: Callable[[paramiko.SFTPClient], Any]) -> Any:
        async with self._lock:
            if self._sftp is None:
                raise EndpointError(f"SFTP session not connected ({operation} {path})")
            try:
                return await asyncio.to_thread(func, self._sftp)
            except FileNotFoundError as exc:
                raise RemoteFileNotFoundError(
                    f"No such file: {path}",
                    details={"operation": operation},
                ) from exc
            except (OSError, paramiko.SSHException) as exc:
                raise EndpointError(
                    f"SFTP {operation} failed for {path}: {exc}",
                    details={"operation": operation},
                ) from exc
