"""Parsing helpers for values that arrive as raw strings or uploads."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .errors import ImageTooLargeError, ValidationError

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
# largest value a signed 64-bit INTEGER column can hold
MAX_CONTACT_ID = 2**63 - 1


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip()


def parse_contact_id(value) -> int:
    """Return a positive integer identifier or raise ValidationError."""
    if isinstance(value, bool):
        raise ValidationError("Contact id must be a positive integer", field="id")
    if isinstance(value, int):
        contact_id = value
    else:
        text = (str(value) if value is not None else "").strip()
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(f"Invalid contact id: {value!r}", field="id")
        contact_id = int(text)
    if contact_id <= 0 or contact_id > MAX_CONTACT_ID:
        raise ValidationError(f"Invalid contact id: {value!r}", field="id")
    return contact_id


def parse_birthdate(value: Optional[str]) -> Optional[date]:
    """Parse a strict YYYY-MM-DD string; blank means no birthdate."""
    text = (value or "").strip()
    if not text:
        return None
    if not DATE_PATTERN.fullmatch(text):
        raise ValidationError(f"Birthdate must be formatted YYYY-MM-DD, got {value!r}", field="birthdate")
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid birthdate: {value!r}", field="birthdate") from exc


def check_profile_image(data: Optional[bytes], limit: int) -> Optional[bytes]:
    """Return the payload, None when empty, or raise when it reaches the cap."""
    if not data:
        return None
    if limit > 0 and len(data) >= limit:
        raise ImageTooLargeError(len(data), limit)
    return bytes(data)


@dataclass(frozen=True)
class SearchCriteria:
    """Listing filters: either the contact pair (email/phone) or the location pair (city/state)."""

    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        *,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
    ) -> "SearchCriteria":
        def _blank_to_none(value: Optional[str]) -> Optional[str]:
            value = clean_text(value)
            return value or None

        criteria = cls(
            email=_blank_to_none(email),
            phone=_blank_to_none(phone),
            city=_blank_to_none(city),
            state=_blank_to_none(state),
        )
        if criteria.by_contact and criteria.by_location:
            raise ValidationError("Search by email/phone or by city/state, not both")
        return criteria

    @property
    def by_contact(self) -> bool:
        return self.email is not None or self.phone is not None

    @property
    def by_location(self) -> bool:
        return self.city is not None or self.state is not None

    @property
    def is_empty(self) -> bool:
        return not (self.by_contact or self.by_location)
