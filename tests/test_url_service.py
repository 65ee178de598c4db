import asyncio
import uuid

from gourls_app.models.url_entry import UrlEntry, utcnow
from gourls_app.services.results import ErrorKind


def add_system_entry(db_session, short_name="docs", long_url="https://docs.example.com"):
    entry = UrlEntry(
        short_name=short_name,
        long_url=long_url,
        created_by="system",
        created_at=utcnow(),
        is_system_entry=True,
    )
    db_session.add(entry)
    db_session.commit()
    return entry


class TestCreate:
    """Creation, reserved words and uniqueness"""

    def test_create_then_get_by_short_name(self, make_service):
        service = make_service("alice")

        created = asyncio.run(service.create_url("abc", "http://x"))
        assert created.ok

        result = asyncio.run(service.get_by_short_name("abc"))
        assert result.ok
        assert result.entry.long_url == "http://x"
        assert result.entry.created_by == "alice"
        assert result.entry.updated_at is None
        assert result.entry.updated_by is None
        assert result.entry.is_system_entry is False
        assert result.entry.can_edit is True
        assert result.entry.can_delete is True

    def test_short_name_is_trimmed(self, make_service):
        service = make_service("alice")

        result = asyncio.run(service.create_url("  docs  ", "https://docs.example.com"))

        assert result.entry.short_name == "docs"

    def test_long_url_is_not_validated(self, make_service):
        service = make_service("alice")

        result = asyncio.run(service.create_url("notes", "not a url at all"))

        assert result.ok
        assert result.entry.long_url == "not a url at all"

    def test_reserved_word_rejected(self, make_service, db_session):
        service = make_service("alice")

        result = asyncio.run(service.create_url(" ADMIN ", "http://x"))

        assert not result.ok
        assert result.error.kind == ErrorKind.RESERVED_WORD
        assert db_session.query(UrlEntry).count() == 0

    def test_duplicate_is_case_insensitive(self, make_service, db_session):
        service = make_service("alice")
        asyncio.run(service.create_url("go", "http://go.dev"))

        result = asyncio.run(make_service("bob").create_url(" GO", "http://other.com"))

        assert result.error.kind == ErrorKind.DUPLICATE
        assert db_session.query(UrlEntry).count() == 1
        assert db_session.query(UrlEntry).one().long_url == "http://go.dev"

    def test_short_names_stay_unique(self, make_service, db_session):
        service = make_service("alice")
        for name in ["a", "A", "b", " b ", "B", "c"]:
            asyncio.run(service.create_url(name, "http://x"))

        keys = [row[0] for row in db_session.query(UrlEntry.short_name_key).all()]
        assert sorted(keys) == ["a", "b", "c"]

    def test_duplicate_check_folds_non_ascii_case(self, make_service, db_session):
        asyncio.run(make_service("alice").create_url("Élan", "http://elan.example"))

        result = asyncio.run(make_service("bob").create_url("élan", "http://other.com"))

        assert result.error.kind == ErrorKind.DUPLICATE
        assert [row[0] for row in db_session.query(UrlEntry.short_name).all()] == ["Élan"]

    def test_non_ascii_key_is_unique_in_the_store(self, make_service, db_session, monkeypatch):
        asyncio.run(make_service("alice").create_url("ÜBER", "http://a"))
        service = make_service("bob")
        monkeypatch.setattr(service, "_find_by_normalized_name", lambda *args, **kwargs: None)

        result = asyncio.run(service.create_url("über", "http://b"))

        assert result.error.kind == ErrorKind.DUPLICATE
        assert db_session.query(UrlEntry).count() == 1

    def test_unique_index_catches_race(self, make_service, db_session, monkeypatch):
        """A concurrent writer slipping past the pre-check still yields a duplicate"""
        asyncio.run(make_service("bob").create_url("go", "http://go.dev"))
        service = make_service("alice")
        monkeypatch.setattr(service, "_find_by_normalized_name", lambda *args, **kwargs: None)

        result = asyncio.run(service.create_url("Go", "http://other.com"))

        assert result.error.kind == ErrorKind.DUPLICATE
        assert db_session.query(UrlEntry).count() == 1


class TestUpdate:
    """Authorization and audit fields on update"""

    def test_update_sets_audit_fields(self, make_service):
        service = make_service("alice")
        created = asyncio.run(service.create_url("go", "http://go.dev")).entry

        result = asyncio.run(service.update_url(created.id, "go2", "https://go.dev/doc"))

        assert result.ok
        updated = result.entry
        assert updated.id == created.id
        assert updated.short_name == "go2"
        assert updated.long_url == "https://go.dev/doc"
        assert updated.created_by == "alice"
        assert updated.created_at == created.created_at
        assert updated.updated_by == "alice"
        assert updated.updated_at is not None

    def test_update_by_other_user_forbidden(self, make_service):
        created = asyncio.run(make_service("bob").create_url("go", "http://go.dev")).entry

        result = asyncio.run(make_service("alice").update_url(created.id, "go2", "http://go.dev"))

        assert result.error.kind == ErrorKind.FORBIDDEN
        unchanged = asyncio.run(make_service("bob").get_by_id(created.id)).entry
        assert unchanged.short_name == "go"
        assert unchanged.updated_at is None

    def test_owner_match_is_case_insensitive(self, make_service):
        created = asyncio.run(make_service("Bob").create_url("go", "http://go.dev")).entry

        result = asyncio.run(make_service("bob").update_url(created.id, "go", "http://go.dev/x"))

        assert result.ok

    def test_update_unknown_id(self, make_service):
        result = asyncio.run(make_service("alice").update_url(uuid.uuid4(), "x", "http://x"))

        assert result.error.kind == ErrorKind.NOT_FOUND

    def test_rename_to_reserved_word_rejected(self, make_service):
        service = make_service("alice")
        created = asyncio.run(service.create_url("go", "http://go.dev")).entry

        result = asyncio.run(service.update_url(created.id, "Api", "http://go.dev"))

        assert result.error.kind == ErrorKind.RESERVED_WORD

    def test_rename_to_taken_name_rejected(self, make_service):
        service = make_service("alice")
        asyncio.run(service.create_url("taken", "http://a"))
        created = asyncio.run(service.create_url("go", "http://go.dev")).entry

        result = asyncio.run(service.update_url(created.id, "TAKEN", "http://go.dev"))

        assert result.error.kind == ErrorKind.DUPLICATE

    def test_rename_to_non_ascii_variant_rejected(self, make_service):
        service = make_service("alice")
        asyncio.run(service.create_url("Straße", "http://a"))
        created = asyncio.run(service.create_url("go", "http://go.dev")).entry

        result = asyncio.run(service.update_url(created.id, "STRAßE", "http://go.dev"))

        assert result.error.kind == ErrorKind.DUPLICATE

    def test_case_only_rename_allowed(self, make_service):
        service = make_service("alice")
        created = asyncio.run(service.create_url("go", "http://go.dev")).entry

        result = asyncio.run(service.update_url(created.id, "GO", "http://go.dev"))

        assert result.ok
        assert result.entry.short_name == "GO"

    def test_system_entry_only_editable_by_system(self, make_service, db_session):
        entry = add_system_entry(db_session)

        denied = asyncio.run(make_service("alice").update_url(entry.id, "docs", "http://evil"))
        allowed = asyncio.run(make_service("system").update_url(entry.id, "docs", "https://new"))

        assert denied.error.kind == ErrorKind.FORBIDDEN
        assert allowed.ok
        assert allowed.entry.is_system_entry is True
        assert allowed.entry.created_by == "system"


class TestDelete:

    def test_delete_own_entry(self, make_service, db_session):
        service = make_service("alice")
        created = asyncio.run(service.create_url("go", "http://go.dev")).entry

        result = asyncio.run(service.delete_url(created.id))

        assert result.ok
        assert db_session.query(UrlEntry).count() == 0

    def test_delete_unknown_is_not_found(self, make_service):
        result = asyncio.run(make_service("alice").delete_url(uuid.uuid4()))

        assert result.error.kind == ErrorKind.NOT_FOUND

    def test_delete_other_users_entry_forbidden(self, make_service, db_session):
        created = asyncio.run(make_service("bob").create_url("go", "http://go.dev")).entry

        result = asyncio.run(make_service("alice").delete_url(created.id))

        assert result.error.kind == ErrorKind.FORBIDDEN
        assert db_session.query(UrlEntry).count() == 1

    def test_system_can_delete_anything(self, make_service, db_session):
        entry = add_system_entry(db_session)

        result = asyncio.run(make_service("system").delete_url(entry.id))

        assert result.ok


class TestReads:

    def test_search_is_case_insensitive_substring(self, make_service):
        service = make_service("alice")
        for name in ["golang", "GoDocs", "python"]:
            asyncio.run(service.create_url(name, "http://x"))

        results = asyncio.run(service.search_urls("GO"))

        assert [entry.short_name for entry in results] == ["GoDocs", "golang"]

    def test_search_folds_non_ascii_case(self, make_service):
        service = make_service("alice")
        for name in ["Élan", "elan"]:
            asyncio.run(service.create_url(name, "http://x"))

        results = asyncio.run(service.search_urls("ÉL"))

        assert [entry.short_name for entry in results] == ["Élan"]

    def test_empty_search_returns_everything(self, make_service):
        service = make_service("alice")
        for name in ["b", "a"]:
            asyncio.run(service.create_url(name, "http://x"))

        assert len(asyncio.run(service.search_urls(""))) == 2
        assert len(asyncio.run(service.search_urls(None))) == 2

    def test_search_treats_wildcards_literally(self, make_service):
        service = make_service("alice")
        asyncio.run(service.create_url("100%", "http://x"))
        asyncio.run(service.create_url("1000", "http://y"))

        results = asyncio.run(service.search_urls("0%"))

        assert [entry.short_name for entry in results] == ["100%"]

    def test_list_annotates_permissions_per_user(self, make_service, db_session):
        add_system_entry(db_session)
        asyncio.run(make_service("bob").create_url("bobs", "http://b"))

        listing = {entry.short_name: entry for entry in asyncio.run(make_service("bob").list_urls())}

        assert listing["bobs"].can_edit is True
        assert listing["docs"].can_edit is False
        assert listing["docs"].can_delete is False

    def test_get_by_short_name_is_case_sensitive(self, make_service):
        service = make_service("alice")
        asyncio.run(service.create_url("Go", "http://go.dev"))

        assert asyncio.run(service.get_by_short_name("Go")).ok
        assert asyncio.run(service.get_by_short_name("go")).error.kind == ErrorKind.NOT_FOUND

    def test_get_by_id(self, make_service):
        service = make_service("alice")
        created = asyncio.run(service.create_url("go", "http://go.dev")).entry

        assert asyncio.run(service.get_by_id(created.id)).entry.short_name == "go"
        assert asyncio.run(service.get_by_id(uuid.uuid4())).error.kind == ErrorKind.NOT_FOUND


def test_example_scenario(make_service):
    """reserved = {admin, api}; bob owns "go", alice may not rename it"""
    bob = make_service("bob")
    alice = make_service("alice")

    assert asyncio.run(bob.create_url("admin", "http://x")).error.kind == ErrorKind.RESERVED_WORD

    go = asyncio.run(bob.create_url("go", "http://go.dev"))
    assert go.ok

    assert asyncio.run(alice.create_url("GO", "http://other.com")).error.kind == ErrorKind.DUPLICATE

    rename = asyncio.run(alice.update_url(go.entry.id, "go2", "http://go.dev"))
    assert rename.error.kind == ErrorKind.FORBIDDEN
