"""
SupplierDirectory — resolves a supplier's display name and notification email.

Two independent lookups, both required:
    - name:  supplier masterdata API, behind a client-credentials token
    - email: supplier document store (`emailInvrpt` field), falling back to
             the default supplier-management mailbox when the field is empty

Nothing is cached: every notification re-resolves the supplier.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from stock_collector.clients.documents import SupplierDocuments
from stock_collector.clients.retry_fetch import RequestSpec, RetryableCaller
from stock_collector.core.errors import SupplierLookupError, SupplierNotFoundError
from stock_collector.core.logging import get_logger

logger = get_logger(__name__)

EMAIL_FIELD = "emailInvrpt"


@dataclass(frozen=True)
class SupplierInfo:
    """Display metadata used in supplier notifications."""

    name: str
    email: str


class SupplierDirectory:
    """Supplier metadata lookups used by the validation stages."""

    def __init__(
        self,
        caller: RetryableCaller,
        documents: SupplierDocuments,
        *,
        oauth_url: str,
        oauth_username: str,
        oauth_password: str,
        masterdata_url: str,
        default_mailbox: str,
    ) -> None:
        self._caller = caller
        self._documents = documents
        self._oauth_url = oauth_url
        self._oauth_credentials = (oauth_username, oauth_password)
        self._masterdata_url = masterdata_url.rstrip("/")
        self.default_mailbox = default_mailbox

    async def get_supplier_info(self, supplier_id: str) -> SupplierInfo:
        """
        Resolve name and email for one supplier.

        Raises RetryExhaustedError / SupplierLookupError when the API is
        unusable and SupplierNotFoundError when no supplier document exists.
        """
        logger.info("Resolving supplier info", supplier_id=supplier_id)
        token = await self.get_auth_token()

        response = await self._caller.call(
            RequestSpec(
                url=f"{self._masterdata_url}/{supplier_id}",
                method="GET",
                headers={"Authorization": f"Bearer {token}"},
            ),
            "get_supplier_info",
        )
        if response.status_code != httpx.codes.OK:
            logger.error(
                "Unexpected supplier masterdata response",
                supplier_id=supplier_id,
                status_code=response.status_code,
            )
            raise SupplierLookupError(
                f"Supplier masterdata returned {response.status_code}",
                status_code=response.status_code,
            )
        payload = response.json()

        email = await self.get_supplier_email(supplier_id)
        return SupplierInfo(name=payload.get("name") or "", email=email)

    async def get_supplier_email(self, supplier_id: str) -> str:
        """Notification address from the supplier document (not retried)."""
        document = await self._documents.get(supplier_id)
        if document is None:
            logger.error("No such supplier document", supplier_id=supplier_id)
            raise SupplierNotFoundError(supplier_id)

        email = document.get(EMAIL_FIELD)
        if not email:
            logger.info(
                "No notification address configured, using default mailbox",
                supplier_id=supplier_id,
            )
            return self.default_mailbox
        return email

    async def get_auth_token(self) -> str:
        """Client-credentials handshake against the OAuth endpoint."""
        response = await self._caller.call(
            RequestSpec(
                url=self._oauth_url,
                method="POST",
                headers={
                    "Accept": "*/*",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data={"grant_type": "client_credentials"},
                auth=self._oauth_credentials,
            ),
            "get_auth_token",
        )
        if response.status_code != httpx.codes.OK:
            logger.error("Token request failed", status_code=response.status_code)
            raise SupplierLookupError(
                "Could not retrieve ID token",
                status_code=response.status_code,
            )

        token = response.json().get("access_token")
        if not token:
            logger.error("Token response carried no access_token")
            raise SupplierLookupError("Could not retrieve ID token")
        return token
