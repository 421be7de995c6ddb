#!/usr/bin/env python3
"""
Insert one contact (and its address) directly into the configured database.

Usage:
  python scripts/add_contact.py --name "Ada Lovelace" [--email ada@example.com] [--birthdate 1815-12-10]
                                [--city London] [--image photo.jpg] ...
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from contactbook.core.config import get_settings
from contactbook.core.log import configure_logging
from contactbook.db.create_tables import create_all
from contactbook.domain.contacts import Address, Contact
from contactbook.domain.errors import ContactError
from contactbook.domain.validation import parse_birthdate
from contactbook.services.contact_service import ContactService

logger = logging.getLogger("contactbook.scripts.add_contact")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Add a contact to the database")
    ap.add_argument("--name", required=True, help="Contact name")
    ap.add_argument("--company")
    ap.add_argument("--email")
    ap.add_argument("--work-phone")
    ap.add_argument("--personal-phone")
    ap.add_argument("--birthdate", help="YYYY-MM-DD")
    ap.add_argument("--line1")
    ap.add_argument("--line2")
    ap.add_argument("--city")
    ap.add_argument("--state", help="Abbreviated, e.g. IL")
    ap.add_argument("--zip")
    ap.add_argument("--country")
    ap.add_argument("--image", type=Path, help="Path to a profile image")
    ap.add_argument("--create-tables", action="store_true", help="Create the schema first")
    return ap


def contact_from_args(args: argparse.Namespace) -> Contact:
    image = args.image.read_bytes() if args.image else None
    return Contact(
        name=args.name.strip(),
        company=args.company,
        profile_image=image,
        email=args.email,
        birthdate=parse_birthdate(args.birthdate),
        work_phone=args.work_phone,
        personal_phone=args.personal_phone,
        address=Address(
            line1=args.line1,
            line2=args.line2,
            city=args.city,
            state=args.state,
            zip=args.zip,
            country=args.country,
        ),
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    if args.create_tables:
        create_all()
    try:
        created = ContactService().create(contact_from_args(args))
    except ContactError as exc:
        logger.error("could not add contact: %s", exc.message)
        return 1
    print(f"OK: contact {created.id} added (address {created.address.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
