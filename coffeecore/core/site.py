"""
One visitor's page session: the fake-door modal, the contact form and the
navigator, each with its own state. Sessions only hold UI state; submitted
records are never kept after their request.
"""
from __future__ import annotations

import asyncio
import time
import uuid
from collections import OrderedDict
from typing import Callable, Optional, Set

from coffeecore.catalog.models import Catalog, Product
from coffeecore.catalog.products import DEFAULT_CATALOG
from coffeecore.core.modal import ModalController, ModalState
from coffeecore.core.navigator import Page, PageLike, ScrollHighlightNavigator
from coffeecore.core.state_machine import Submission, SubmissionMachine
from coffeecore.notify.client import NotificationClient
from coffeecore.notify.record import InterestRecord
from coffeecore.observability.logging import log
from coffeecore.settings import settings

# Section ids rendered by the single-page site
SECTION_IDS = ("chi-siamo", "processo", "prodotti", "contatti")
CONTACT_SECTION = "contatti"


class SiteSession:
    def __init__(
        self,
        client: Optional[NotificationClient] = None,
        *,
        catalog: Optional[Catalog] = None,
        page: Optional[PageLike] = None,
    ):
        self.client = client or NotificationClient()
        self.catalog = catalog or DEFAULT_CATALOG
        self.modal = ModalController(
            SubmissionMachine(self.client, confirmation=settings.FAKE_DOOR_CONFIRMATION,
                              surface="modal", catalog=self.catalog)
        )
        self.contact = SubmissionMachine(self.client, confirmation=settings.CONTACT_CONFIRMATION,
                                         surface="contact", catalog=self.catalog)
        self.navigator = ScrollHighlightNavigator(page if page is not None else Page(SECTION_IDS))
        # Click notifications still running; held so the tasks aren't collected mid-flight
        self._clicks: Set[asyncio.Task] = set()

    def click_product(self, product_id: str) -> ModalState:
        product = self.catalog.require(product_id)
        state = self.modal.open(product)
        self._notify_click(product)
        return state

    def _notify_click(self, product: Product) -> None:
        # Fire-and-forget; never touches the modal's submission state
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log(event="click_notify_skipped", product=product.id, reason="no_event_loop")
            return
        task = loop.create_task(self._send_click(product.id))
        self._clicks.add(task)
        task.add_done_callback(self._clicks.discard)

    async def _send_click(self, product_id: str) -> None:
        outcome = await self.client.notify_click(product_id)
        log(event="click_notified", product=product_id, outcome=outcome.value)

    def close_modal(self) -> ModalState:
        return self.modal.close()

    async def submit_modal_email(self, email: str) -> Submission:
        return await self.modal.submit_email(email)

    async def submit_contact(self, name: str, email: str, message: str) -> Submission:
        record = InterestRecord.for_contact(email=email, name=name, message=message)
        return await self.contact.submit(record)

    def write_to_us(self) -> bool:
        return self.navigator.focus_section(CONTACT_SECTION)

    def focus_section(self, section_id: str) -> bool:
        return self.navigator.focus_section(section_id)

    def close(self) -> None:
        self.navigator.cancel_all()


class SessionRegistry:
    """
    In-process map of page sessions keyed by an opaque id.
    Sessions idle longer than `ttl_sec` expire; past `max_sessions` the
    least recently used one is evicted.
    """

    def __init__(
        self,
        client: Optional[NotificationClient] = None,
        *,
        ttl_sec: Optional[int] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self.ttl_sec = int(ttl_sec if ttl_sec is not None else settings.SESSION_TTL_SEC)
        self.max_sessions = int(max_sessions if max_sessions is not None else settings.SESSION_MAX)
        self._clock = clock
        # sid -> (session, last seen); least recently used first
        self._sessions: "OrderedDict[str, tuple]" = OrderedDict()

    def create(self) -> str:
        self.prune()
        while self.max_sessions > 0 and len(self._sessions) >= self.max_sessions:
            sid, (old, _) = self._sessions.popitem(last=False)
            old.close()
            log(event="session_evicted", sessionId=sid, reason="capacity")
        sid = uuid.uuid4().hex
        self._sessions[sid] = (SiteSession(self._client), self._clock())
        return sid

    def get(self, session_id: str) -> Optional[SiteSession]:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        session, seen = entry
        now = self._clock()
        if self._expired(seen, now):
            self._evict(session_id, "expired")
            return None
        self._sessions[session_id] = (session, now)
        self._sessions.move_to_end(session_id)
        return session

    def drop(self, session_id: str) -> bool:
        if session_id not in self._sessions:
            return False
        self._evict(session_id, "dropped")
        return True

    def prune(self) -> int:
        now = self._clock()
        stale = [sid for sid, (_, seen) in self._sessions.items() if self._expired(seen, now)]
        for sid in stale:
            self._evict(sid, "expired")
        return len(stale)

    def _expired(self, seen: float, now: float) -> bool:
        return self.ttl_sec > 0 and now - seen > self.ttl_sec

    def _evict(self, session_id: str, reason: str) -> None:
        session, _ = self._sessions.pop(session_id)
        session.close()
        log(event="session_evicted", sessionId=session_id, reason=reason)

    def __len__(self) -> int:
        return len(self._sessions)
