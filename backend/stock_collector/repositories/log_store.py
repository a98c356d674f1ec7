"""
LogStore — transmission log + supplier authorization cache.

Owns the session lifecycle on top of the repository functions:

    add_transmission()        insert INITIATED row, id 0 when the insert fails
    update_transmission()     final status + storage path, failures are logged
    load_supplier_states()    bulk load of the authorization set (raises)
    is_supplier_authorized()  cache lookup, lazily registering unknown triples

The authorization set is read once per invocation. Unknown triples are
inserted with a NULL state and count as not authorized from then on.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from stock_collector.core.constants import TransmissionStatus
from stock_collector.core.logging import get_logger
from stock_collector.db.models.supplier_state import AUTHORIZED_STATE
from stock_collector.repositories import supplier_states as supplier_state_repo
from stock_collector.repositories import transmissions as transmission_repo
from stock_collector.repositories.transmissions import TransmissionRecord

logger = get_logger(__name__)

# Returned by add_transmission() when the row could not be written
UNSTORED_TRANSMISSION_ID = 0

# (supplier_number, country, inbound_channel)
SupplierKey = tuple[str, str, str]


class LogStore(Protocol):
    async def add_transmission(self, record: TransmissionRecord) -> int: ...

    async def update_transmission(
        self, transmission_id: int, status: TransmissionStatus, storage_path: str
    ) -> None: ...

    async def load_supplier_states(self) -> None: ...

    async def is_supplier_authorized(
        self, supplier_id: str, country: str, inbound_channel: str
    ) -> bool: ...

    async def teardown(self) -> None: ...


class PostgresLogStore:
    """LogStore backed by the invrpt schema."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine
        self._states: dict[SupplierKey, bool] = {}
        self._states_lock = asyncio.Lock()

    # ── Transmissions ─────────────────────────

    async def add_transmission(self, record: TransmissionRecord) -> int:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    return await transmission_repo.insert_transmission(session, record)
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "Error storing transmission",
                supplier_number=record.supplier_number,
                transmission_timestamp=record.transmission_timestamp.isoformat(),
                error=str(exc),
            )
            return UNSTORED_TRANSMISSION_ID

    async def update_transmission(
        self,
        transmission_id: int,
        status: TransmissionStatus,
        storage_path: str,
    ) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await transmission_repo.update_transmission(
                        session,
                        transmission_id,
                        status=status,
                        storage_path=storage_path,
                    )
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "Error updating transmission",
                transmission_id=transmission_id,
                status=str(status),
                error=str(exc),
            )

    # ── Supplier authorization ────────────────

    async def load_supplier_states(self) -> None:
        try:
            async with self._session_factory() as session:
                rows = await supplier_state_repo.list_supplier_states(session)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Error getting supplier states", error=str(exc))
            raise

        self._states = {
            (row.supplier_number, row.country, row.inbound_channel): row.state == AUTHORIZED_STATE
            for row in rows
        }
        logger.info("Supplier states loaded", count=len(self._states))

    async def is_supplier_authorized(
        self,
        supplier_id: str,
        country: str,
        inbound_channel: str,
    ) -> bool:
        key = (supplier_id, country, inbound_channel)
        async with self._states_lock:
            if key in self._states:
                return self._states[key]
            await self._add_unknown_supplier(supplier_id, country, inbound_channel)
            self._states[key] = False
            return False

    async def _add_unknown_supplier(
        self,
        supplier_id: str,
        country: str,
        inbound_channel: str,
    ) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await supplier_state_repo.insert_unknown_supplier_state(
                        session,
                        supplier_number=supplier_id,
                        country=country,
                        inbound_channel=inbound_channel,
                    )
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "Error creating supplier state",
                supplier_id=supplier_id,
                country=country,
                inbound_channel=inbound_channel,
                error=str(exc),
            )
            return
        logger.info(
            "Added new supplier to supplier states",
            supplier_id=supplier_id,
            country=country,
            inbound_channel=inbound_channel,
        )

    async def teardown(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
