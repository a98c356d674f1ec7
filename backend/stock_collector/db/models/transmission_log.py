"""
TransmissionLog — one row per accepted stock file.

Inserted as INITIATED when a file passes validation and updated exactly
once with the copy outcome (SUCCESS + storage URI, or FAILED + "NA").
A row left INITIATED marks an abandoned transmission.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from stock_collector.db.models.base import INVRPT_SCHEMA, Base, utcnow


class TransmissionLog(Base):
    __tablename__ = "transmission_log"
    __table_args__ = {"schema": INVRPT_SCHEMA}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Transmission ──────────────────────────
    transmission_timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    supplier_key_account_number: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True
    )
    inbound_channel: Mapped[str] = mapped_column(String(10), nullable=False)  # csv | xlsx
    inbound_method: Mapped[str] = mapped_column(String(10), nullable=False)   # SFTP | Upload | EDI

    # ── Outcome ───────────────────────────────
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="INITIATED")
    storage_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<TransmissionLog id={self.id} supplier={self.supplier_key_account_number} status={self.status}>"
