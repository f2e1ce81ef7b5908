"""Tests for the website record store."""
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import User, Website
from app.services.websites import WebsiteStore
from app.utils.exceptions import (
    DuplicateNameError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    handle_database_error,
)

OWNER = "li-owner"
OTHER = "li-other"


@pytest.fixture
def store(db):
    for identity in (OWNER, OTHER):
        db.add(User(identity_id=identity, name=identity, website_ids=[]))
    db.commit()
    return WebsiteStore(db)


def test_create_assigns_id_and_defaults(store):
    website = store.create(OWNER, "Portfolio", "<html></html>")
    assert website.id
    assert website.owner_id == OWNER
    assert website.published is False
    assert website.created_at is not None


def test_create_keeps_generated_suffix(store):
    website = store.create(OWNER, "My Website 2025-01-02 (1)", "<html></html>")
    assert website.name == "My Website 2025-01-02 (1)"
    with pytest.raises(InvalidInputError):
        store.create(OWNER, "   ", "<html></html>")


def test_create_rejects_duplicate_name_per_owner(store):
    store.create(OWNER, "Portfolio", "<html></html>")
    with pytest.raises(DuplicateNameError):
        store.create(OWNER, "Portfolio", "<html></html>")
    # Other owners may reuse the name
    assert store.create(OTHER, "Portfolio", "<html></html>").owner_id == OTHER


def test_unique_constraint_is_authoritative(store, monkeypatch):
    store.create(OWNER, "Portfolio", "<html>first</html>")
    # Simulate a concurrent request that passed the advisory check
    monkeypatch.setattr(store, "name_taken", lambda *args, **kwargs: False)

    with pytest.raises(DuplicateNameError):
        store.create(OWNER, "Portfolio", "<html>second</html>")

    assert store.db.query(Website).filter(Website.owner_id == OWNER).count() == 1


def test_unique_constraint_is_authoritative_on_rename(store, monkeypatch):
    store.create(OWNER, "Portfolio", "<html>first</html>")
    second = store.create(OWNER, "Resume", "<html>second</html>")
    monkeypatch.setattr(store, "name_taken", lambda *args, **kwargs: False)

    with pytest.raises(DuplicateNameError):
        store.rename(second.id, OWNER, "Portfolio")

    assert store.db.get(Website, second.id).name == "Resume"


def test_other_integrity_errors_are_not_duplicate_names(store, monkeypatch):
    def failing_commit():
        raise IntegrityError("INSERT INTO websites", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(store.db, "commit", failing_commit)

    with pytest.raises(IntegrityError):
        store.create("li-unknown", "Portfolio", "<html></html>")


def test_handle_database_error_maps_only_the_name_constraint(settings):
    class Diag:
        def __init__(self, constraint_name):
            self.constraint_name = constraint_name

    class PostgresError(Exception):
        def __init__(self, constraint_name):
            super().__init__("violation")
            self.diag = Diag(constraint_name)

    duplicate = IntegrityError("UPDATE websites", {}, PostgresError("uq_websites_owner_name"))
    foreign_key = IntegrityError("INSERT INTO websites", {}, PostgresError("websites_owner_id_fkey"))

    assert isinstance(handle_database_error(duplicate, "rename website", settings), DuplicateNameError)
    error = handle_database_error(foreign_key, "create website", settings)
    assert not isinstance(error, DuplicateNameError)
    assert error.status_code == 500


def test_list_by_owner_newest_first(store):
    first = store.create(OWNER, "First", "<html></html>")
    second = store.create(OWNER, "Second", "<html></html>")
    store.create(OTHER, "Foreign", "<html></html>")

    assert [w.id for w in store.list_by_owner(OWNER)] == [second.id, first.id]


def test_rename(store):
    website = store.create(OWNER, "Old Name", "<html></html>")
    renamed = store.rename(website.id, OWNER, "New Name!")
    assert renamed.name == "New Name"
    # Renaming to the current name is allowed
    assert store.rename(website.id, OWNER, "New Name").name == "New Name"


def test_rename_to_taken_name_keeps_original(store):
    a = store.create(OWNER, "Site A", "<html></html>")
    store.create(OWNER, "Site B", "<html></html>")

    with pytest.raises(DuplicateNameError):
        store.rename(a.id, OWNER, "Site B")

    store.db.expire_all()
    assert store.db.get(Website, a.id).name == "Site A"


def test_rename_validates_length(store):
    website = store.create(OWNER, "Site A", "<html></html>")
    with pytest.raises(InvalidInputError):
        store.rename(website.id, OWNER, "!!")


def test_ownership_is_part_of_lookup(store):
    website = store.create(OWNER, "Private", "<html></html>")
    with pytest.raises(NotFoundError):
        store.rename(website.id, OTHER, "Stolen")
    with pytest.raises(NotFoundError):
        store.set_published(website.id, OTHER, True)
    with pytest.raises(NotFoundError):
        store.delete(website.id, OTHER)


def test_set_published_is_idempotent(store):
    website = store.create(OWNER, "Site", "<html></html>")
    assert store.set_published(website.id, OWNER, True).published is True
    assert store.set_published(website.id, OWNER, True).published is True
    assert store.set_published(website.id, OWNER, False).published is False


def test_fetch_public_visibility(store):
    website = store.create(OWNER, "Site", "<html>hello</html>")

    assert store.fetch_public(website.id, OWNER) == "<html>hello</html>"
    with pytest.raises(ForbiddenError):
        store.fetch_public(website.id)
    with pytest.raises(ForbiddenError):
        store.fetch_public(website.id, OTHER)

    store.set_published(website.id, OWNER, True)
    assert store.fetch_public(website.id) == "<html>hello</html>"
    assert store.fetch_public(website.id) == store.fetch_public(website.id, OTHER)

    with pytest.raises(NotFoundError):
        store.fetch_public("missing")


def test_delete_unlinks_from_user(store):
    website = store.create(OWNER, "Site", "<html></html>")
    store.link_to_user(OWNER, website.id)

    store.delete(website.id, OWNER)

    user = store.db.query(User).filter(User.identity_id == OWNER).one()
    assert user.website_ids == []
    with pytest.raises(NotFoundError):
        store.delete(website.id, OWNER)


def test_delete_all_by_owner(store):
    store.create(OWNER, "One", "<html></html>")
    store.create(OWNER, "Two", "<html></html>")
    kept = store.create(OTHER, "Three", "<html></html>")

    assert store.delete_all_by_owner(OWNER) == 2
    assert store.list_by_owner(OWNER) == []
    assert [w.id for w in store.list_by_owner(OTHER)] == [kept.id]

    with pytest.raises(NotFoundError):
        store.delete_all_by_owner(OWNER)


def test_default_name_probes_suffixes(store):
    today = date(2025, 1, 2)
    assert store.default_name(OWNER, today) == "My Website 2025-01-02"

    store.create(OWNER, "My Website 2025-01-02", "<html></html>")
    assert store.default_name(OWNER, today) == "My Website 2025-01-02 (1)"

    store.create(OWNER, "My Website 2025-01-02 (1)", "<html></html>")
    assert store.default_name(OWNER, today) == "My Website 2025-01-02 (2)"
    assert store.default_name(OTHER, today) == "My Website 2025-01-02"
