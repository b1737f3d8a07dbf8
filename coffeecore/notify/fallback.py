"""
Fallback Channel Resolver
-------------------------
When delivery cannot be confirmed the visitor is handed a pre-filled mail
compose addressed to the administrator instead. resolve_fallback() is a pure
function of the record and static configuration: no I/O, and the failure
outcome is deliberately not an input.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional
from urllib.parse import quote

from coffeecore.catalog.models import Catalog
from coffeecore.catalog.products import DEFAULT_CATALOG
from coffeecore.notify.record import InterestRecord
from coffeecore.settings import settings


@dataclass(frozen=True)
class ManualContactAction:
    to: str
    subject: str
    body: str

    def mailto_url(self) -> str:
        # RFC 6068: percent-encode header values, spaces as %20
        return f"mailto:{self.to}?subject={quote(self.subject, safe='')}&body={quote(self.body, safe='')}"

    def to_dict(self) -> dict:
        out = asdict(self)
        out["mailto"] = self.mailto_url()
        return out


def _product_name(product_id: str, catalog: Catalog) -> str:
    p = catalog.get(product_id)
    return p.name if p is not None else product_id


def resolve_fallback(record: InterestRecord, catalog: Optional[Catalog] = None) -> ManualContactAction:
    catalog = catalog or DEFAULT_CATALOG

    if record.is_contact:
        body = settings.CONTACT_BODY_TEMPLATE.format(
            name=record.name or "",
            message=record.message or "",
            email=record.contactEmail,
        )
        return ManualContactAction(to=settings.ADMIN_EMAIL, subject=settings.CONTACT_SUBJECT, body=body)

    subject = settings.FAKE_DOOR_SUBJECT_TEMPLATE.format(product_name=_product_name(record.productId, catalog))
    return ManualContactAction(to=settings.ADMIN_EMAIL, subject=subject, body=settings.FAKE_DOOR_BODY)
