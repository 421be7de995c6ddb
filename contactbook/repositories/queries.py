"""
Statement builders for the contact/address tables.

Every caller-supplied value ends up as a bind parameter; nothing here
formats values into SQL text.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from sqlalchemy import and_, delete, func, insert, or_, select, update
from sqlalchemy.sql.expression import ColumnElement, Delete, Insert, Select, Update

from contactbook.db.models import AddressRow, ContactRow

LIKE_ESCAPE = "/"

CONTACT_COLUMNS = (
    ContactRow.id,
    ContactRow.name,
    ContactRow.company,
    ContactRow.profile_img,
    ContactRow.email,
    ContactRow.birthdate,
    ContactRow.phone_work,
    ContactRow.phone_personal,
    ContactRow.address_id,
)
ADDRESS_COLUMNS = (
    AddressRow.line1,
    AddressRow.line2,
    AddressRow.city,
    AddressRow.state,
    AddressRow.zip,
    AddressRow.country,
)


def escape_like(value: str) -> str:
    """Make %, _ and the escape character match themselves in a LIKE pattern."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains_pattern(value: str) -> str:
    return f"%{escape_like(value)}%"


def _contains(column, value: str) -> ColumnElement:
    return column.like(contains_pattern(value), escape=LIKE_ESCAPE)


def select_contacts() -> Select:
    """Contact rows joined to the address each one owns, in store order."""
    return select(*CONTACT_COLUMNS, *ADDRESS_COLUMNS).join(
        AddressRow, ContactRow.address_id == AddressRow.id
    )


def select_contact_by_id(contact_id: int) -> Select:
    return select_contacts().where(ContactRow.id == contact_id)


def contact_filters(email: Optional[str] = None, phone: Optional[str] = None) -> list[ColumnElement]:
    clauses: list[ColumnElement] = []
    if email is not None:
        clauses.append(_contains(ContactRow.email, email))
    if phone is not None:
        clauses.append(or_(_contains(ContactRow.phone_work, phone), _contains(ContactRow.phone_personal, phone)))
    return clauses


def location_filters(city: Optional[str] = None, state: Optional[str] = None) -> list[ColumnElement]:
    clauses: list[ColumnElement] = []
    if city is not None:
        clauses.append(AddressRow.city == city)
    if state is not None:
        clauses.append(AddressRow.state == state)
    return clauses


def search_contacts(
    *,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
) -> Select:
    """Listing narrowed by every filter given; omitted filters do not constrain."""
    clauses = contact_filters(email, phone) + location_filters(city, state)
    stmt = select_contacts()
    if clauses:
        stmt = stmt.where(and_(*clauses))
    return stmt


def insert_address(params: Mapping[str, Any]) -> Insert:
    return insert(AddressRow).values(**params)


def insert_contact(params: Mapping[str, Any], address_id: int) -> Insert:
    return insert(ContactRow).values(**params, address_id=address_id)


def select_address_id(contact_id: int) -> Select:
    return select(ContactRow.address_id).where(ContactRow.id == contact_id)


def update_contact(contact_id: int, params: Mapping[str, Any]) -> Update:
    return update(ContactRow).where(ContactRow.id == contact_id).values(**params)


def update_address(address_id: int, params: Mapping[str, Any]) -> Update:
    return update(AddressRow).where(AddressRow.id == address_id).values(**params)


def delete_contact(contact_id: int) -> Delete:
    return delete(ContactRow).where(ContactRow.id == contact_id)


def delete_address(address_id: int) -> Delete:
    return delete(AddressRow).where(AddressRow.id == address_id)


def count_addresses() -> Select:
    return select(func.count()).select_from(AddressRow)
