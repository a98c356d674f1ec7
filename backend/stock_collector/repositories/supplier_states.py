"""
Supplier state repository (authorization triples).

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stock_collector.db.models.supplier_state import SupplierState


async def list_supplier_states(db: AsyncSession) -> list[SupplierState]:
    """Every known (supplier, country, channel) triple with its state."""
    result = await db.execute(select(SupplierState))
    return list(result.scalars().all())


async def insert_unknown_supplier_state(
    db: AsyncSession,
    *,
    supplier_number: str,
    country: str,
    inbound_channel: str,
) -> SupplierState:
    """Register a newly sighted triple with an undecided (NULL) state."""
    row = SupplierState(
        supplier_number=supplier_number,
        country=country,
        inbound_channel=inbound_channel,
        state=None,
    )
    db.add(row)
    await db.flush()
    return row
