"""
Interaction Modal Controller
----------------------------
Visibility of the "fake door" dialog and the product it targets. ModalState
is an explicit immutable value: open_modal() / close_modal() return a new
one. The controller owns the current value plus the modal surface's
SubmissionMachine, and reopening always clears the machine so a previous
product's confirmation or fallback never shows under a new one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from coffeecore.catalog.models import Product
from coffeecore.core.state_machine import Submission, SubmissionMachine
from coffeecore.errors import ModalClosed
from coffeecore.notify.record import InterestRecord
from coffeecore.observability.logging import log


@dataclass(frozen=True)
class ModalState:
    isOpen: bool = False
    targetProduct: Optional[Product] = None

    def __post_init__(self):
        if self.isOpen and self.targetProduct is None:
            raise ValueError("an open modal needs a target product")


CLOSED = ModalState()


def open_modal(product: Product) -> ModalState:
    return ModalState(isOpen=True, targetProduct=product)


def close_modal(_state: Optional[ModalState] = None) -> ModalState:
    return CLOSED


class ModalController:
    def __init__(self, machine: SubmissionMachine):
        self.machine = machine
        self.state: ModalState = CLOSED

    def open(self, product: Product) -> ModalState:
        self.state = open_modal(product)
        self.machine.reset()
        log(event="modal_open", product=product.id)
        return self.state

    def close(self) -> ModalState:
        # In-flight submissions keep running; their result is just not shown
        prev = self.state.targetProduct
        self.state = close_modal(self.state)
        log(event="modal_close", product=prev.id if prev else None, inFlight=self.machine.busy)
        return self.state

    async def submit_email(self, email: str) -> Submission:
        if not self.state.isOpen:
            raise ModalClosed("modal is closed")
        opened = self.state
        record = InterestRecord.for_product(opened.targetProduct, email)
        sub = await self.machine.submit(record)
        if self.state is not opened:
            # Closed or reopened while in flight: the visitor no longer sees this dialog
            log(event="modal_result_hidden", product=record.productId, state=sub.state)
            return sub.hidden()
        return sub

    def view(self) -> dict:
        p = self.state.targetProduct
        out = {
            "isOpen": self.state.isOpen,
            "product": {"id": p.id, "name": p.name} if p else None,
            "submission": None,
        }
        if self.state.isOpen:
            out["submission"] = self.machine.current.view()
        return out
