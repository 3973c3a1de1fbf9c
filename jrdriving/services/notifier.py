# jrdriving/services/notifier.py
"""
Webhook fan-out for lifecycle, quote, recruitment and password-reset events.

notify() returns immediately: one asyncio task is spawned per configured
destination and POSTs the JSON payload. Destinations are independent:
a failure is logged and dropped (no retry, no ordering between destinations).
Must be called from inside a running event loop.
"""

import asyncio
import enum
from typing import Optional

import httpx

from jrdriving.config import Settings
from jrdriving.utils.logger import get_logger

logger = get_logger(__name__)


class EventKind(str, enum.Enum):
    QUOTE_CREATED = "quote_created"
    DRIVER_APPLICATION = "driver_application"
    MISSION_STATUS = "mission_status"
    PASSWORD_RESET = "password_reset"


class Notifier:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._destinations = {EventKind(kind): urls for kind, urls in settings.WEBHOOKS.items()}
        self._timeout = settings.WEBHOOK_TIMEOUT_SECONDS
        self._transport = transport
        self._pending: set[asyncio.Task] = set()

    def destinations(self, kind: EventKind) -> list[str]:
        return list(self._destinations.get(kind, []))

    def notify(self, kind: EventKind, payload: dict) -> list[asyncio.Task]:
        """Spawn one delivery task per destination. No-op when none are configured."""
        urls = self.destinations(kind)
        if not urls:
            return []

        tasks = []
        for url in urls:
            task = asyncio.create_task(self._post(url, kind, payload), name=f"webhook-{kind.value}")
            # Keep a reference until done so the task is not garbage collected mid-flight
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        logger.debug(f"[WEBHOOK] {kind.value} fanned out to {len(tasks)} destination(s)")
        return tasks

    async def _post(self, url: str, kind: EventKind, payload: dict) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
            if response.is_success:
                return True
            logger.warning(f"[WEBHOOK] {kind.value} → {url} returned HTTP {response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"[WEBHOOK] {kind.value} → {url} unreachable: {e}")
        except Exception as e:
            logger.error(f"[WEBHOOK] {kind.value} → {url} failed: {e}", exc_info=True)
        return False

    async def drain(self):
        """Wait for in-flight deliveries. Called on shutdown."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
