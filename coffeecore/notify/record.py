"""
Interest Record
---------------
The payload one visitor's interest (fake door) or contact inquiry produces.
Built once per submission and never mutated; serialized with to_payload()
into the JSON body POSTed to the notification endpoint.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from coffeecore.catalog.models import Product
from coffeecore.errors import ValidationFailed
from coffeecore.utils.time import to_iso8601, utc_now

# Stands in for a product id on general inquiries
CONTACT_SENTINEL = "contact"


def normalize_email(value: Optional[str]) -> str:
    """Syntax-checked, normalized address. No DNS lookups."""
    try:
        return validate_email((value or "").strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationFailed("email", str(e))


def looks_like_email(value: Optional[str]) -> bool:
    try:
        normalize_email(value)
    except ValidationFailed:
        return False
    return True


@dataclass(frozen=True)
class InterestRecord:
    productId: str
    contactEmail: str
    name: Optional[str] = None
    message: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.productId:
            raise ValidationFailed("productId", "required")
        if not self.contactEmail:
            raise ValidationFailed("contactEmail", "required")

    @property
    def is_contact(self) -> bool:
        return self.productId == CONTACT_SENTINEL

    @classmethod
    def for_product(cls, product: Product, email: str, now: Optional[datetime] = None) -> "InterestRecord":
        email = normalize_email(email)
        return cls(productId=product.id, contactEmail=email, timestamp=now or utc_now())

    @classmethod
    def for_contact(cls, email: str, name: str, message: str, now: Optional[datetime] = None) -> "InterestRecord":
        email = normalize_email(email)
        name = (name or "").strip()
        message = (message or "").strip()
        if not name:
            raise ValidationFailed("name", "required")
        if not message:
            raise ValidationFailed("message", "required")
        return cls(
            productId=CONTACT_SENTINEL,
            contactEmail=email,
            name=name,
            message=message,
            timestamp=now or utc_now(),
        )

    def to_payload(self) -> dict:
        body = {"product": self.productId, "email": self.contactEmail}
        if self.name is not None:
            body["name"] = self.name
        if self.message is not None:
            body["msg"] = self.message
        body["ts"] = to_iso8601(self.timestamp)
        return body
