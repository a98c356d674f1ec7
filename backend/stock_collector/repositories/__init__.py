"""
Repositories package — data-access layer.

Each repository file handles all DB operations for one table.
Repositories do NOT handle retries or business logic beyond basic
data integrity.

Convention:
    - One file per table (transmissions.py, supplier_states.py)
    - All functions accept `AsyncSession` as the first argument
    - Use `flush()` internally; commit/rollback is owned by LogStore
"""
