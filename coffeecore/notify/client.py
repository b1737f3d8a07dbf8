"""
Notification Client
-------------------
One best-effort POST of an InterestRecord to the notification endpoint.
No retry, no local state between calls, never raises: the result is always
one of DELIVERED / REJECTED / TRANSPORT_FAILED. Callers treat the two failure
outcomes the same way; the split only feeds the logs.
"""
from __future__ import annotations

import time
from enum import Enum
from typing import Optional

import httpx

from coffeecore.notify.record import InterestRecord
from coffeecore.observability.logging import log
from coffeecore.settings import settings
from coffeecore.utils.time import to_iso8601, utc_now


class Outcome(str, Enum):
    DELIVERED = "delivered"
    REJECTED = "rejected"
    TRANSPORT_FAILED = "transport_failed"

    @property
    def ok(self) -> bool:
        return self is Outcome.DELIVERED


def _client_kwargs(transport) -> dict:
    kwargs = {}
    t = float(getattr(settings, "NOTIFY_TIMEOUT_SEC", 5.0) or 0.0)
    # 0 keeps the httpx default
    if t > 0:
        kwargs["timeout"] = t
    if transport is not None:
        kwargs["transport"] = transport
    return kwargs


class NotificationClient:
    def __init__(self, url: Optional[str] = None, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url or settings.NOTIFY_URL
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    async def submit(self, record: InterestRecord) -> Outcome:
        return await self._post(record.to_payload(), record.productId)

    async def notify_click(self, product_id: str) -> Outcome:
        """
        Fake-door click counter: one POST per product call-to-action click,
        before any email is captured. The admin address fills the email slot.
        """
        payload = {
            "product": product_id,
            "email": settings.ADMIN_EMAIL,
            "event": "click",
            "ts": to_iso8601(utc_now()),
        }
        return await self._post(payload, product_id)

    async def _post(self, payload: dict, product_id: str) -> Outcome:
        start = time.monotonic()
        log(event="notify_attempt", url=self.url, product=product_id, payload=payload)

        try:
            async with httpx.AsyncClient(**_client_kwargs(self._transport)) as client:
                resp = await client.post(self.url, json=payload)
        except Exception as e:
            log(
                event="notify_transport_failed",
                product=product_id,
                elapsedMs=int((time.monotonic() - start) * 1000),
                errorType=type(e).__name__,
                error=str(e)[:300],
            )
            return Outcome.TRANSPORT_FAILED

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if 200 <= resp.status_code < 300:
            log(event="notify_delivered", product=product_id,
                statusCode=int(resp.status_code), elapsedMs=elapsed_ms)
            return Outcome.DELIVERED

        try:
            text = (resp.text or "")[:300]
        except Exception:
            text = ""
        log(event="notify_rejected", product=product_id,
            statusCode=int(resp.status_code), elapsedMs=elapsed_ms, responseText=text)
        return Outcome.REJECTED
