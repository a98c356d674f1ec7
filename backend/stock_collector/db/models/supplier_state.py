"""
SupplierState — which (supplier, country, channel) may submit stock files.

state:
    1     authorized
    NULL  first seen by the collector, awaiting a decision
    other not authorized
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from stock_collector.db.models.base import INVRPT_SCHEMA, Base

AUTHORIZED_STATE = 1


class SupplierState(Base):
    __tablename__ = "supplier_state"
    __table_args__ = (
        UniqueConstraint("supplier_number", "country", "inbound_channel"),
        {"schema": INVRPT_SCHEMA},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    supplier_number: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(2), nullable=False)
    inbound_channel: Mapped[str] = mapped_column(String(10), nullable=False)
    state: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<SupplierState {self.supplier_number} {self.country} "
            f"{self.inbound_channel} state={self.state}>"
        )
