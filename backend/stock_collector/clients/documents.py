"""Firestore-backed supplier document store."""

from __future__ import annotations

from typing import Any, Protocol

from google.cloud import firestore


class SupplierDocuments(Protocol):
    """Keyed lookup of supplier documents by supplier id."""

    async def get(self, supplier_id: str) -> dict[str, Any] | None:
        """Return the document body, or None if no document exists."""
        ...


class FirestoreSupplierDocuments:
    """Reads supplier documents from a Firestore collection."""

    def __init__(self, project_id: str, collection: str = "dropshippingSuppliers") -> None:
        self._project_id = project_id
        self._collection = collection
        self._client: firestore.AsyncClient | None = None

    def _get_client(self) -> firestore.AsyncClient:
        if self._client is None:
            self._client = firestore.AsyncClient(project=self._project_id)
        return self._client

    async def get(self, supplier_id: str) -> dict[str, Any] | None:
        snapshot = await (
            self._get_client()
            .collection(self._collection)
            .document(supplier_id)
            .get()
        )
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}
