"""
Scroll-Highlight Navigator
--------------------------
Scrolls a named page section into view and pulses it for a short, fixed
time. Sections that aren't rendered are skipped silently. Re-focusing a
section whose pulse is still running restarts the pulse instead of stacking
a second removal timer.

Pages and sections are whatever the presentation layer hands in: anything
with `get_section(id)` returning an object that implements
`scroll_into_view(behavior, block)`, `add_class(name)` and `remove_class(name)`.
`Page` / `Section` below are the in-memory versions used by the HTTP surface.
"""
from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Protocol

from coffeecore.observability.logging import log
from coffeecore.settings import settings


class SectionLike(Protocol):
    def scroll_into_view(self, behavior: str, block: str) -> None: ...
    def add_class(self, name: str) -> None: ...
    def remove_class(self, name: str) -> None: ...


class PageLike(Protocol):
    def get_section(self, section_id: str) -> Optional[SectionLike]: ...


class Section:
    def __init__(self, section_id: str):
        self.id = section_id
        self.classes: set = set()
        self.scrolls: List[dict] = []

    def scroll_into_view(self, behavior: str, block: str) -> None:
        self.scrolls.append({"behavior": behavior, "block": block})

    def add_class(self, name: str) -> None:
        self.classes.add(name)

    def remove_class(self, name: str) -> None:
        self.classes.discard(name)


class Page:
    def __init__(self, section_ids=()):
        self.sections: Dict[str, Section] = {sid: Section(sid) for sid in section_ids}

    def get_section(self, section_id: str) -> Optional[Section]:
        return self.sections.get(section_id)


class ScrollHighlightNavigator:
    def __init__(self, page: PageLike, *, duration_ms: Optional[int] = None, highlight_class: Optional[str] = None):
        self.page = page
        self.duration_ms = int(duration_ms if duration_ms is not None else settings.HIGHLIGHT_DURATION_MS)
        self.highlight_class = highlight_class or settings.HIGHLIGHT_CLASS
        # Pending removal per section; entries disappear when they fire
        self._pending: Dict[str, asyncio.TimerHandle] = {}

    def focus_section(self, section_id: str) -> bool:
        """
        Returns False when the section isn't on the page (no-op), True otherwise.
        Without a running event loop the section is scrolled to but not
        highlighted, since nothing could remove the highlight afterwards.
        """
        el = self.page.get_section(section_id)
        if el is None:
            log(event="section_missing", sectionId=section_id)
            return False

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        el.scroll_into_view(behavior="smooth", block="start")
        if loop is None:
            log(event="section_highlight_skipped", sectionId=section_id, reason="no_event_loop")
            return True

        el.add_class(self.highlight_class)
        prev = self._pending.pop(section_id, None)
        if prev is not None:
            prev.cancel()

        self._pending[section_id] = loop.call_later(self.duration_ms / 1000.0, self._clear, section_id, el)
        log(event="section_highlight", sectionId=section_id, restarted=prev is not None, durationMs=self.duration_ms)
        return True

    def _clear(self, section_id: str, el: SectionLike) -> None:
        self._pending.pop(section_id, None)
        el.remove_class(self.highlight_class)

    def is_highlighted(self, section_id: str) -> bool:
        return section_id in self._pending

    def cancel_all(self) -> None:
        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()
