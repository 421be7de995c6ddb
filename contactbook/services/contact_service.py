"""
Contact use cases: validation, not-found handling and search mode selection.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field

from contactbook.core.config import Settings, get_settings
from contactbook.domain.contacts import Address, Contact
from contactbook.domain.errors import (
    ContactNotFoundError,
    ImageTooLargeError,
    ProfileImageNotFoundError,
    ValidationError,
)
from contactbook.domain.validation import SearchCriteria, check_profile_image, parse_contact_id
from contactbook.repositories.contact_repository import ContactRepository

logger = logging.getLogger(__name__)


@dataclass
class ContactService:
    """Creates, reads, replaces, deletes and searches contacts."""

    repository: ContactRepository = field(default_factory=ContactRepository)
    settings: Settings = field(default_factory=get_settings)

    # -------------------------------------- helpers --------------------------------------
    def _checked(self, contact: Contact) -> Contact:
        try:
            image = check_profile_image(contact.profile_image, self.settings.max_image_bytes)
        except ImageTooLargeError as exc:
            logger.warning("rejected profile image: %s", exc.message)
            raise
        return dataclasses.replace(contact, profile_image=image, address=contact.address or Address.empty())

    # -------------------------------------- use cases --------------------------------------
    def create(self, contact: Contact) -> Contact:
        return self.repository.insert(self._checked(contact))

    def get(self, contact_id) -> Contact:
        cid = parse_contact_id(contact_id)
        contact = self.repository.get(cid)
        if contact is None:
            logger.warning("contact %s not found", cid)
            raise ContactNotFoundError(cid)
        return contact

    def update(self, contact: Contact) -> Contact:
        """Replace every stored field of ``contact`` (no partial updates)."""
        contact = dataclasses.replace(contact, id=parse_contact_id(contact.id))
        if not self.repository.update(self._checked(contact)):
            logger.warning("update of missing contact %s", contact.id)
            raise ContactNotFoundError(contact.id)
        return self.get(contact.id)

    def delete(self, contact_id) -> int:
        cid = parse_contact_id(contact_id)
        if not self.repository.delete(cid):
            logger.warning("delete of missing contact %s", cid)
            raise ContactNotFoundError(cid)
        return cid

    def list_all(self) -> list[Contact]:
        return self.repository.list_all()

    def search(self, criteria: SearchCriteria | None = None) -> list[Contact]:
        criteria = criteria or SearchCriteria()
        if criteria.by_contact and criteria.by_location:
            raise ValidationError("Search by email/phone or by city/state, not both")
        if criteria.is_empty:
            return self.list_all()
        if criteria.by_contact:
            return self.repository.search_by_contact_info(criteria.email, criteria.phone)
        return self.repository.search_by_location(criteria.city, criteria.state)

    def get_profile_image(self, contact_id) -> bytes:
        contact = self.get(contact_id)
        if contact.profile_image is None:
            raise ProfileImageNotFoundError(contact.id)
        return contact.profile_image
