"""Tests for the local persistent store."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from aapda_mitra.database import Database, DisasterType, LATEST_SCHEMA_VERSION
from aapda_mitra.errors import StorageError


def _alert(alert_type: str, severity: str = "High") -> dict:
    return {
        "type": alert_type,
        "area": "Test Area",
        "severity": severity,
        "message": f"{alert_type} message",
        "time": "Just now",
    }


class TestCollectionCrud:
    """CRUD behaviour shared by every collection."""

    def test_empty_collection_counts_zero(self, db):
        assert db.personal_contacts.count() == 0
        assert db.personal_contacts.get_all() == []

    def test_put_without_key_assigns_unused_key(self, db):
        first = db.personal_contacts.put({"name": "Mom", "number": "98765"})
        second = db.personal_contacts.put({"name": "Dad", "number": "12345"})

        assert isinstance(first, int)
        assert first != second
        assert db.personal_contacts.count() == 2

    def test_deleted_key_is_not_reused(self, db):
        first = db.personal_contacts.put({"name": "Mom", "number": "98765"})
        db.personal_contacts.delete(first)

        second = db.personal_contacts.put({"name": "Dad", "number": "12345"})

        assert second != first

    def test_put_existing_key_overwrites(self, db):
        key = db.personal_contacts.put({"name": "Mom", "number": "98765"})

        same = db.personal_contacts.put({"id": key, "name": "Mother", "number": "11111"})

        assert same == key
        assert db.personal_contacts.count() == 1
        assert db.personal_contacts.get(key) == {"id": key, "name": "Mother", "number": "11111"}

    def test_put_replaces_whole_record(self, db):
        key = db.alerts.put({**_alert("Flood"), "image": "data:image/png;base64,AAAA"})
        db.alerts.put({"id": key, **_alert("Flood")})

        assert db.alerts.get(key)["image"] is None

    def test_put_with_new_explicit_key_inserts(self, db):
        key = db.shelters.put({"id": 42, "name": "School", "capacity": 10, "available": 5})
        assert key == 42
        assert db.shelters.get(42)["name"] == "School"

    def test_fixed_key_collection_requires_key(self, db):
        with pytest.raises(StorageError):
            db.user_profile.put({"name": "No Id"})

    def test_enum_key_is_stored_by_value(self, db):
        key = db.survival_guides.put({
            "disaster_type": DisasterType.FLOOD,
            "guide": "Move to higher ground",
            "timestamp": datetime(2024, 7, 1, 12, 0),
        })

        assert key == "Flood"
        record = db.survival_guides.get(DisasterType.FLOOD)
        assert record["guide"] == "Move to higher ground"
        assert record["timestamp"] == datetime(2024, 7, 1, 12, 0)

    def test_get_missing_returns_none(self, db):
        assert db.alerts.get(999) is None

    def test_delete_is_idempotent(self, db):
        key = db.personal_contacts.put({"name": "Mom", "number": "98765"})

        db.personal_contacts.delete(key)
        db.personal_contacts.delete(key)

        assert db.personal_contacts.get(key) is None
        assert db.personal_contacts.count() == 0

    def test_unknown_field_is_rejected(self, db):
        with pytest.raises(StorageError):
            db.personal_contacts.put({"name": "Mom", "number": "1", "email": "x@y.z"})


class TestOrdering:
    """get_all ordering options."""

    @pytest.fixture
    def alerts(self, db):
        return [
            db.alerts.put(_alert("A", "High")),
            db.alerts.put(_alert("B", "Low")),
            db.alerts.put(_alert("C", "High")),
        ]

    def test_default_order_is_primary_key(self, db, alerts):
        assert [a["id"] for a in db.alerts.get_all()] == alerts

    def test_reverse_by_id(self, db, alerts):
        assert [a["id"] for a in db.alerts.get_all(order_by="id", reverse=True)] == alerts[::-1]

    def test_ties_keep_insertion_order(self, db, alerts):
        ordered = db.alerts.get_all(order_by="severity")
        assert [a["type"] for a in ordered] == ["A", "C", "B"]

    def test_unknown_order_field_raises(self, db, alerts):
        with pytest.raises(StorageError):
            db.alerts.get_all(order_by="priority")


class TestBulkSeed:
    """bulk_seed has no dedup guard of its own."""

    def test_bulk_seed_inserts_all(self, db):
        db.alerts.bulk_seed([_alert("A"), _alert("B")])
        assert db.alerts.count() == 2

    def test_second_seed_duplicates_keyless_records(self, db):
        records = [_alert("A"), _alert("B")]
        db.alerts.bulk_seed(records)
        db.alerts.bulk_seed(records)
        assert db.alerts.count() == 4


class TestSchemaGenerations:
    """Versioned, additive schema upgrades."""

    def test_fresh_database_has_no_version(self, bare_db):
        assert bare_db.current_version() == 0

    def test_uninitialized_collection_raises_storage_error(self, bare_db):
        with pytest.raises(StorageError):
            bare_db.personal_contacts.count()

    def test_generation_one_only_has_contacts_and_profile(self, bare_db):
        assert bare_db.upgrade(1) == 1

        bare_db.personal_contacts.put({"name": "Mom", "number": "98765"})
        bare_db.user_profile.put({"id": 1, "name": "Asha"})
        with pytest.raises(StorageError):
            bare_db.alerts.count()

    def test_upgrade_preserves_generation_one_data(self, bare_db):
        bare_db.upgrade(1)
        key = bare_db.personal_contacts.put({"name": "Mom", "number": "98765"})

        assert bare_db.upgrade() == LATEST_SCHEMA_VERSION

        assert bare_db.personal_contacts.get(key) == {"id": key, "name": "Mom", "number": "98765"}
        assert bare_db.alerts.count() == 0
        assert bare_db.shelters.count() == 0
        assert bare_db.survival_guides.count() == 0

    def test_upgrade_is_noop_when_current(self, db):
        db.personal_contacts.put({"name": "Mom", "number": "98765"})
        assert db.upgrade() == LATEST_SCHEMA_VERSION
        assert db.upgrade(1) == LATEST_SCHEMA_VERSION
        assert db.personal_contacts.count() == 1

    def test_unknown_version_rejected(self, bare_db):
        with pytest.raises(ValueError):
            bare_db.upgrade(99)

    def test_data_survives_reopen(self, db, db_url):
        key = db.personal_contacts.put({"name": "Mom", "number": "98765"})
        db.close()

        reopened = Database(db_url)
        try:
            assert reopened.current_version() == LATEST_SCHEMA_VERSION
            assert reopened.personal_contacts.get(key)["name"] == "Mom"
        finally:
            reopened.close()


class TestCollectionLookup:
    def test_lookup_by_name(self, db):
        assert db.collection("alerts") is db.alerts
        assert db.collection("survival_guides").key_name == "disaster_type"

    def test_unknown_collection_raises(self, db):
        with pytest.raises(StorageError):
            db.collection("volunteers")

    def test_key_kinds(self, db):
        assert db.personal_contacts.auto_keyed
        assert db.alerts.auto_keyed
        assert not db.user_profile.auto_keyed
        assert not db.survival_guides.auto_keyed
