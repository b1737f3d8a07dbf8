import asyncio
import pytest
from coffeecore.notify.client import Outcome


class FakeClient:
    """Stands in for NotificationClient; optionally holds each submit until released."""

    def __init__(self, outcome=Outcome.DELIVERED, hold=False):
        self.outcome = outcome
        self.hold = hold
        self.calls = []
        self.clicks = []
        self._gate = None

    async def submit(self, record):
        self.calls.append(record)
        if self.hold:
            self._gate = asyncio.Event()
            await self._gate.wait()
        return self.outcome

    async def notify_click(self, product_id):
        self.clicks.append(product_id)
        return Outcome.DELIVERED

    def release(self):
        self._gate.set()


@pytest.fixture
def make_client():
    return FakeClient
