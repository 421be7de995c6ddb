"""
Shared fixtures: every test gets its own temporary SQLite database.
"""
from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

# Make the contactbook package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from contactbook.core import config as core_config  # noqa: E402
from contactbook.db.create_tables import create_all, drop_all  # noqa: E402
from contactbook.db import session as db_session  # noqa: E402
from contactbook.domain.contacts import Address, Contact  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and tear everything down afterwards."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    # drop cached settings/engine so the env var is re-read
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    drop_all()
    create_all()

    yield db_file

    try:
        drop_all()
    except Exception:
        pass
    try:
        engine.dispose()
    except Exception:
        pass
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


_DEFAULT = object()


def make_contact(**overrides) -> Contact:
    address = overrides.pop("address", _DEFAULT)
    if address is _DEFAULT:
        address = Address(
            line1="1 Main St",
            line2="Apt 2",
            city="Chicago",
            state="IL",
            zip="60601",
            country="USA",
        )
    values = dict(
        name="Ada Lovelace",
        company="Analytical Engines",
        profile_image=b"\xff\xd8\xff\xe0jpeg",
        email="ada@example.com",
        birthdate=date(1815, 12, 10),
        work_phone="312-555-0100",
        personal_phone="312-555-0199",
        address=address,
    )
    values.update(overrides)
    return Contact(**values)


@pytest.fixture()
def contact_factory():
    return make_contact
