"""High-level data access for contacts backed by SQLAlchemy.

Each public method opens exactly one session through ``get_session`` or
``transaction`` and releases it before returning, including when the store
raises. Writes that touch both tables run in one transaction.
"""
from __future__ import annotations

import dataclasses
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError

from contactbook.db.session import get_session, transaction
from contactbook.domain.contacts import Address, Contact
from contactbook.domain.errors import DatabaseTimeoutError, PersistenceError
from contactbook.repositories import mapper, queries

logger = logging.getLogger(__name__)

_TIMEOUT_MARKERS = ("timeout", "timed out", "database is locked", "lock wait")


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into PersistenceError."""
    try:
        yield
    except PoolTimeoutError as exc:
        logger.exception("%s timed out waiting for a connection", action)
        raise DatabaseTimeoutError(f"{action} timed out") from exc
    except OperationalError as exc:
        text = str(exc.orig if exc.orig is not None else exc).lower()
        logger.exception("%s failed", action)
        if any(marker in text for marker in _TIMEOUT_MARKERS):
            raise DatabaseTimeoutError(f"{action} timed out: {exc.orig}") from exc
        raise PersistenceError(f"{action} failed: {exc.orig}") from exc
    except SQLAlchemyError as exc:
        logger.exception("%s failed", action)
        raise PersistenceError(f"{action} failed: {exc}") from exc


class ContactRepository:
    """CRUD and search over the contact/address pair."""

    # -------------------------- writes --------------------------
    def insert(self, contact: Contact) -> Contact:
        """Store the address, then the contact pointing at it; both or neither.

        Returns a copy of ``contact`` carrying the identifiers the store
        assigned. A missing address is stored as an all-empty one.
        """
        address = contact.address or Address.empty()
        with _store_errors("insert contact"):
            with transaction() as session:
                result = session.execute(queries.insert_address(mapper.address_params(address)))
                address_id = result.inserted_primary_key[0]
                result = session.execute(queries.insert_contact(mapper.contact_params(contact), address_id))
                contact_id = result.inserted_primary_key[0]
        logger.info("inserted contact %s with address %s", contact_id, address_id)
        return dataclasses.replace(
            contact,
            id=contact_id,
            address=dataclasses.replace(address, id=address_id, line3=""),
        )

    def update(self, contact: Contact) -> bool:
        """Replace every field of the contact and its address; False if the id is unknown."""
        if contact.id is None:
            return False
        with _store_errors("update contact"):
            with transaction() as session:
                address_id = session.execute(
                    queries.select_address_id(contact.id).with_for_update()
                ).scalar_one_or_none()
                if address_id is None:
                    return False
                session.execute(queries.update_contact(contact.id, mapper.contact_params(contact)))
                session.execute(queries.update_address(address_id, mapper.address_params(contact.address)))
        logger.info("updated contact %s", contact.id)
        return True

    def delete(self, contact_id: int) -> bool:
        """Remove the contact and the address it owns; False if the id is unknown."""
        with _store_errors("delete contact"):
            with transaction() as session:
                address_id = session.execute(
                    queries.select_address_id(contact_id).with_for_update()
                ).scalar_one_or_none()
                if address_id is None:
                    return False
                session.execute(queries.delete_contact(contact_id))
                session.execute(queries.delete_address(address_id))
        logger.info("deleted contact %s and address %s", contact_id, address_id)
        return True

    # -------------------------- reads --------------------------
    def get(self, contact_id: int) -> Optional[Contact]:
        with _store_errors("get contact"):
            with get_session() as session:
                row = session.execute(queries.select_contact_by_id(contact_id)).first()
        return mapper.row_to_contact(row) if row is not None else None

    def list_all(self) -> list[Contact]:
        return self.search()

    def search(
        self,
        *,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
    ) -> list[Contact]:
        """Contacts matching every given filter; email/phone match substrings, city/state exactly."""
        stmt = queries.search_contacts(email=email, phone=phone, city=city, state=state)
        logger.debug("search email=%r phone=%r city=%r state=%r", email, phone, city, state)
        with _store_errors("search contacts"):
            with get_session() as session:
                rows = session.execute(stmt).all()
        return [mapper.row_to_contact(row) for row in rows]

    def search_by_contact_info(self, email: Optional[str] = None, phone: Optional[str] = None) -> list[Contact]:
        return self.search(email=email, phone=phone)

    def search_by_location(self, city: Optional[str] = None, state: Optional[str] = None) -> list[Contact]:
        return self.search(city=city, state=state)

    def count_addresses(self) -> int:
        """Number of stored address rows; a diagnostic for spotting orphaned addresses."""
        with _store_errors("count addresses"):
            with get_session() as session:
                return int(session.execute(queries.count_addresses()).scalar_one())
