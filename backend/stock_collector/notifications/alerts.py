"""
Operational alerts — Teams incoming-webhook MessageCards.

Only infrastructure-shaped failures are alerted (bucket copy exhaustion,
malformed timestamps); routine authorization rejections are not.

Usage::

    alerter = TeamsAlerter(http_client, webhook_url=settings.TEAMS_WEBHOOK_URL)
    await alerter.alert(
        "Error writing file stock_...csv to folder 123456",
        "An error has occurred while writing file",
        [("Supplier", "123456"), ("File Name", "stock_...csv")],
    )
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol

import httpx

from stock_collector.core.logging import get_logger

logger = get_logger(__name__)

ALERT_COLOR = "D70000"


class AlertChannel(Protocol):
    async def alert(
        self,
        title: str,
        details: str,
        variables: list[tuple[str, str]] | None = None,
    ) -> bool: ...


class TeamsAlerter:
    """Posts alerts to a Teams channel; never raises."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        webhook_url: str,
        project: str = "",
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._webhook_url = webhook_url
        self._project = project
        self._timeout = timeout

    def build_card(
        self,
        title: str,
        details: str,
        variables: list[tuple[str, str]] | None = None,
    ) -> dict:
        facts = [{"name": "Project", "value": self._project}] if self._project else []
        facts += [{"name": name, "value": str(value)} for name, value in variables or []]
        return {
            "@type": "MessageCard",
            "@context": "http://schema.org/extensions",
            "themeColor": ALERT_COLOR,
            "summary": details,
            "sections": [
                {
                    "activityTitle": details,
                    "activitySubtitle": title,
                    "facts": facts,
                    "text": datetime.now(timezone.utc).isoformat(),
                }
            ],
        }

    async def alert(
        self,
        title: str,
        details: str,
        variables: list[tuple[str, str]] | None = None,
    ) -> bool:
        """Send one alert. Returns True if Teams accepted it."""
        if not self._webhook_url:
            logger.debug("TEAMS_WEBHOOK_URL not configured; skipping alert", title=title)
            return False

        try:
            response = await self._client.post(
                self._webhook_url,
                json=self.build_card(title, details, variables),
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning("Teams alert failed", title=title, error=str(exc))
            return False

        if response.is_success:
            logger.warning("Teams alert has been sent", title=title)
            return True

        logger.warning(
            "Teams returned non-success status for alert",
            title=title,
            status_code=response.status_code,
        )
        return False
