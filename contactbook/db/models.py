"""SQLAlchemy models for the two-table contact store."""
from __future__ import annotations

from sqlalchemy import Column, Date, ForeignKey, Integer, LargeBinary, String
from sqlalchemy.orm import relationship

from .session import Base


class AddressRow(Base):
    __tablename__ = "address"

    id = Column(Integer, primary_key=True, autoincrement=True)
    line1 = Column(String(255), nullable=True)
    line2 = Column(String(255), nullable=True)
    city = Column(String(128), nullable=True)
    state = Column(String(64), nullable=True)
    zip = Column(String(32), nullable=True)
    country = Column(String(128), nullable=True)

    contact = relationship("ContactRow", back_populates="address", uselist=False)


class ContactRow(Base):
    __tablename__ = "contact"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    profile_img = Column(LargeBinary, nullable=True)
    email = Column(String(255), nullable=True)
    birthdate = Column(Date, nullable=True)
    phone_work = Column(String(32), nullable=True)
    phone_personal = Column(String(32), nullable=True)
    address_id = Column(Integer, ForeignKey("address.id"), nullable=False)

    address = relationship("AddressRow", back_populates="contact")
