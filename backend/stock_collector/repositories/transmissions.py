"""
Transmission log repository.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from stock_collector.core.constants import InboundMethod, TransmissionStatus
from stock_collector.db.models.transmission_log import TransmissionLog


@dataclass(frozen=True)
class TransmissionRecord:
    """A new transmission as handed to the log store."""

    transmission_timestamp: datetime
    supplier_number: str
    status: TransmissionStatus
    inbound_channel: str
    inbound_method: InboundMethod


async def insert_transmission(db: AsyncSession, record: TransmissionRecord) -> int:
    """Insert a transmission and return its generated id."""
    row = TransmissionLog(
        transmission_timestamp=record.transmission_timestamp,
        supplier_key_account_number=record.supplier_number,
        status=str(record.status),
        inbound_channel=record.inbound_channel,
        inbound_method=str(record.inbound_method),
    )
    db.add(row)
    await db.flush()
    return row.id


async def update_transmission(
    db: AsyncSession,
    transmission_id: int,
    *,
    status: TransmissionStatus,
    storage_path: str,
) -> int:
    """Set the final status and storage path. Returns the number of rows touched."""
    result = await db.execute(
        update(TransmissionLog)
        .where(TransmissionLog.id == transmission_id)
        .values(status=str(status), storage_path=storage_path)
    )
    await db.flush()
    return result.rowcount
