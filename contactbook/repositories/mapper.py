"""Conversions between joined contact/address rows and domain values."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

from contactbook.domain.contacts import Address, Contact

ADDRESS_FIELDS = ("line1", "line2", "city", "state", "zip", "country")


def _mapping(row) -> Mapping[str, Any]:
    return getattr(row, "_mapping", row)


def _to_bytes(value) -> Optional[bytes]:
    if value is None:
        return None
    # psycopg hands back memoryview, mysqlclient bytes
    return bytes(value)


def _to_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def row_to_contact(row) -> Contact:
    """Build a Contact with its nested Address from one joined result row."""
    data = _mapping(row)
    address = Address(
        id=data.get("address_id"),
        line1=data.get("line1"),
        line2=data.get("line2"),
        line3="",
        city=data.get("city"),
        state=data.get("state"),
        zip=data.get("zip"),
        country=data.get("country"),
    )
    return Contact(
        id=data.get("id"),
        name=data.get("name"),
        company=data.get("company"),
        profile_image=_to_bytes(data.get("profile_img")),
        email=data.get("email"),
        birthdate=_to_date(data.get("birthdate")),
        work_phone=data.get("phone_work"),
        personal_phone=data.get("phone_personal"),
        address=address,
    )


def contact_params(contact: Contact) -> dict[str, Any]:
    """Column values for the contact row; absent image/birthdate bind NULL."""
    return {
        "name": contact.name,
        "company": contact.company,
        "profile_img": bytes(contact.profile_image) if contact.profile_image else None,
        "email": contact.email,
        "birthdate": contact.birthdate,
        "phone_work": contact.work_phone,
        "phone_personal": contact.personal_phone,
    }


def address_params(address: Optional[Address]) -> dict[str, Any]:
    """Column values for the address row; line3 has no column."""
    address = address or Address.empty()
    return {name: getattr(address, name) for name in ADDRESS_FIELDS}
