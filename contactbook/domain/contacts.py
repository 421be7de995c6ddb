"""Contact and Address value types."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional


@dataclass
class Address:
    id: Optional[int] = None
    line1: Optional[str] = None
    line2: Optional[str] = None
    # reserved, never persisted
    line3: str = ""
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def empty(cls) -> "Address":
        """Address stored when a contact is written without one."""
        return cls(line1="", line2="", line3="", city="", state="", zip="", country="")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "line1": self.line1,
            "line2": self.line2,
            "line3": self.line3,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
            "country": self.country,
        }


@dataclass
class Contact:
    """A contact and the one address it owns.

    ``id`` is assigned by the store on insert. ``profile_image`` and
    ``birthdate`` are None when absent, never empty placeholders.
    """

    id: Optional[int] = None
    name: Optional[str] = None
    company: Optional[str] = None
    profile_image: Optional[bytes] = field(default=None, repr=False)
    email: Optional[str] = None
    birthdate: Optional[date] = None
    work_phone: Optional[str] = None
    personal_phone: Optional[str] = None
    address: Optional[Address] = None

    @property
    def has_profile_image(self) -> bool:
        return self.profile_image is not None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form; the image bytes are served by their own endpoint."""
        return {
            "id": self.id,
            "name": self.name,
            "company": self.company,
            "email": self.email,
            "birthdate": self.birthdate.isoformat() if self.birthdate else None,
            "workPhone": self.work_phone,
            "personalPhone": self.personal_phone,
            "hasProfileImage": self.has_profile_image,
            "address": self.address.to_dict() if self.address else None,
        }
