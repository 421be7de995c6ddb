"""
Repository tests against a temporary SQLite database.
"""
from __future__ import annotations

import dataclasses
from datetime import date

import pytest

from contactbook.db import session as db_session
from contactbook.domain.contacts import Address
from contactbook.domain.errors import PersistenceError
from contactbook.repositories import contact_repository, queries
from contactbook.repositories.contact_repository import ContactRepository


def _without_ids(contact):
    return dataclasses.replace(contact, id=None, address=dataclasses.replace(contact.address, id=None))


def test_insert_then_get_round_trip(temp_db, contact_factory):
    repo = ContactRepository()
    original = contact_factory()

    created = repo.insert(original)

    assert created.id is not None
    assert created.address.id is not None
    fetched = repo.get(created.id)
    assert fetched is not None
    assert fetched.id == created.id
    assert fetched.address.id == created.address.id
    assert _without_ids(fetched) == _without_ids(original)
    assert fetched.birthdate == date(1815, 12, 10)
    assert fetched.profile_image == b"\xff\xd8\xff\xe0jpeg"


def test_insert_without_address_stores_empty_address(temp_db, contact_factory):
    repo = ContactRepository()

    created = repo.insert(contact_factory(address=None))

    assert repo.count_addresses() == 1
    fetched = repo.get(created.id)
    assert fetched.address == dataclasses.replace(Address.empty(), id=created.address.id)


def test_absent_image_and_birthdate_read_back_as_none(temp_db, contact_factory):
    repo = ContactRepository()

    created = repo.insert(contact_factory(profile_image=None, birthdate=None))
    fetched = repo.get(created.id)

    assert fetched.profile_image is None
    assert fetched.birthdate is None


def test_empty_image_is_stored_as_null(temp_db, contact_factory):
    repo = ContactRepository()
    created = repo.insert(contact_factory(profile_image=b""))
    assert repo.get(created.id).profile_image is None


def test_get_unknown_id_returns_none(temp_db):
    assert ContactRepository().get(4242) is None


def test_update_rewrites_both_rows_and_is_idempotent(temp_db, contact_factory):
    repo = ContactRepository()
    created = repo.insert(contact_factory())
    changed = dataclasses.replace(
        created,
        name="Ada King",
        email="countess@example.com",
        birthdate=None,
        profile_image=None,
        address=Address(line1="12 St James Sq", line2="", city="London", state="", zip="SW1", country="UK"),
    )

    assert repo.update(changed) is True
    first = repo.get(created.id)
    assert repo.update(changed) is True
    second = repo.get(created.id)

    assert first == second
    assert first.name == "Ada King"
    assert first.birthdate is None
    assert first.profile_image is None
    assert first.address.city == "London"
    assert first.address.id == created.address.id
    assert repo.count_addresses() == 1


def test_update_unknown_id_returns_false(temp_db, contact_factory):
    repo = ContactRepository()
    assert repo.update(contact_factory(id=999)) is False
    assert repo.update(contact_factory(id=None)) is False


def test_delete_removes_contact_and_address(temp_db, contact_factory):
    repo = ContactRepository()
    keep = repo.insert(contact_factory(name="Keep"))
    gone = repo.insert(contact_factory(name="Gone"))

    assert repo.delete(gone.id) is True

    assert repo.get(gone.id) is None
    assert repo.get(keep.id) is not None
    assert repo.count_addresses() == 1
    assert repo.delete(gone.id) is False


def test_failed_contact_insert_leaves_no_address_behind(temp_db, contact_factory, monkeypatch):
    repo = ContactRepository()
    real_insert_contact = queries.insert_contact

    def broken_insert_contact(params, address_id):
        # foreign key points nowhere, so the second statement fails
        return real_insert_contact(params, 987654)

    monkeypatch.setattr(queries, "insert_contact", broken_insert_contact)

    with pytest.raises(PersistenceError):
        repo.insert(contact_factory())

    assert repo.count_addresses() == 0
    assert repo.list_all() == []


def test_failed_address_update_keeps_old_contact_values(temp_db, contact_factory, monkeypatch):
    repo = ContactRepository()
    created = repo.insert(contact_factory(name="Before", address=Address(city="Chicago", state="IL")))
    real_update_address = queries.update_address

    def broken_update_address(address_id, params):
        # unknown column, so the address statement fails after the contact one ran
        return real_update_address(address_id, {"bogus": 1})

    monkeypatch.setattr(queries, "update_address", broken_update_address)

    changed = dataclasses.replace(created, name="After", address=Address(city="Madison", state="WI"))
    with pytest.raises(PersistenceError):
        repo.update(changed)

    stored = repo.get(created.id)
    assert stored.name == "Before"
    assert stored.address.city == "Chicago"


def test_failed_address_delete_keeps_contact(temp_db, contact_factory, monkeypatch):
    repo = ContactRepository()
    created = repo.insert(contact_factory())
    monkeypatch.setattr(
        queries, "delete_address", lambda address_id: queries.update_address(address_id, {"bogus": 1})
    )

    with pytest.raises(PersistenceError):
        repo.delete(created.id)

    assert repo.get(created.id) == created
    assert repo.count_addresses() == 1


def test_session_released_on_failure(temp_db, contact_factory, monkeypatch):
    released = []
    real_release = db_session.release

    def spy_release(session):
        released.append(session)
        real_release(session)

    monkeypatch.setattr(db_session, "release", spy_release)
    monkeypatch.setattr(queries, "insert_contact", lambda params, address_id: queries.insert_address({"bogus": 1}))

    with pytest.raises(PersistenceError):
        ContactRepository().insert(contact_factory())

    assert len(released) == 1


def test_each_call_acquires_and_releases_once(temp_db, contact_factory, monkeypatch):
    acquired, released = [], []
    real_acquire, real_release = db_session.acquire, db_session.release

    def spy_acquire():
        session = real_acquire()
        acquired.append(session)
        return session

    def spy_release(session):
        released.append(session)
        real_release(session)

    monkeypatch.setattr(db_session, "acquire", spy_acquire)
    monkeypatch.setattr(db_session, "release", spy_release)

    repo = ContactRepository()
    created = repo.insert(contact_factory())
    repo.get(created.id)
    repo.search(email="ada")
    repo.update(created)
    repo.delete(created.id)

    assert len(acquired) == 5
    assert released == acquired


def test_list_all_returns_every_contact(temp_db, contact_factory):
    repo = ContactRepository()
    names = {"One", "Two", "Three"}
    for name in names:
        repo.insert(contact_factory(name=name))

    assert {c.name for c in repo.list_all()} == names


def test_email_filter_is_case_sensitive_substring(temp_db, contact_factory):
    repo = ContactRepository()
    for email in ("a@x.com", "ab@x.com", "c@y.com"):
        repo.insert(contact_factory(email=email))

    assert sorted(c.email for c in repo.search(email="a")) == ["a@x.com", "ab@x.com"]
    assert [c.email for c in repo.search(email="a@")] == ["a@x.com"]
    assert repo.search(email="A") == []


def test_email_filter_treats_wildcards_literally(temp_db, contact_factory):
    repo = ContactRepository()
    repo.insert(contact_factory(email="under_score@x.com"))
    repo.insert(contact_factory(email="underXscore@x.com"))
    repo.insert(contact_factory(email="100%real@x.com"))

    assert [c.email for c in repo.search(email="under_")] == ["under_score@x.com"]
    assert [c.email for c in repo.search(email="%")] == ["100%real@x.com"]
    assert repo.search(email="/") == []


def test_phone_filter_matches_work_or_personal(temp_db, contact_factory):
    repo = ContactRepository()
    repo.insert(contact_factory(name="work", work_phone="555-1234", personal_phone="000"))
    repo.insert(contact_factory(name="personal", work_phone="000", personal_phone="555-1234"))
    repo.insert(contact_factory(name="neither", work_phone="111", personal_phone="222"))

    assert sorted(c.name for c in repo.search(phone="1234")) == ["personal", "work"]


def test_email_and_phone_filters_combine_with_and(temp_db, contact_factory):
    repo = ContactRepository()
    repo.insert(contact_factory(name="both", email="a@x.com", work_phone="555-1234"))
    repo.insert(contact_factory(name="email only", email="a@x.com", work_phone="999", personal_phone="999"))

    assert [c.name for c in repo.search_by_contact_info("a@", "1234")] == ["both"]


def test_location_filter_is_exact_and_case_sensitive(temp_db, contact_factory):
    repo = ContactRepository()
    repo.insert(contact_factory(name="upper", address=Address(city="Chicago", state="IL")))
    repo.insert(contact_factory(name="lower", address=Address(city="chicago", state="IL")))
    repo.insert(contact_factory(name="springfield", address=Address(city="Springfield", state="IL")))

    assert [c.name for c in repo.search_by_location(city="Chicago")] == ["upper"]
    assert [c.name for c in repo.search_by_location(city="Chic")] == []
    assert len(repo.search_by_location(state="IL")) == 3
    assert [c.name for c in repo.search_by_location("chicago", "IL")] == ["lower"]


def test_location_filter_values_are_not_interpreted_as_sql(temp_db, contact_factory):
    repo = ContactRepository()
    repo.insert(contact_factory())

    assert repo.search_by_location(city="x' OR '1'='1") == []
    assert repo.search_by_location(state='"IL" OR 1=1') == []
    assert len(repo.list_all()) == 1


def test_store_errors_are_wrapped(temp_db, contact_factory, monkeypatch):
    from sqlalchemy.exc import OperationalError

    def boom(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(queries, "select_contact_by_id", boom)

    with pytest.raises(contact_repository.DatabaseTimeoutError) as info:
        ContactRepository().get(1)
    assert info.value.retryable is True
