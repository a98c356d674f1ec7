"""
Models package — re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `stock_collector/db/models/<table_name>.py`
    2. Import it here
"""

from stock_collector.db.models.base import Base
from stock_collector.db.models.supplier_state import SupplierState
from stock_collector.db.models.transmission_log import TransmissionLog

__all__ = [
    "Base",
    "SupplierState",
    "TransmissionLog",
]
