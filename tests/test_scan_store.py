from datetime import datetime, timedelta, timezone

import pytest

from organoai.core.models import ScanRecord
from organoai.errors import AuthError, InvalidRecordError, OrganoAIError
from organoai.storage.scan_store import ScanRecordStore

T0 = datetime(2025, 5, 1, 10, 0, tzinfo=timezone.utc)


def make_record(disease="Mildiu", scanned_at=T0, **kwargs):
    defaults = dict(
        disease_type=disease,
        description="Hongo que afecta las hojas.",
        treatment="Fungicida a base de cobre.",
        scanned_at=scanned_at,
        image_url="https://i.ibb.co/x/leaf.png",
    )
    defaults.update(kwargs)
    return ScanRecord(**defaults)


def test_round_trip(scans):
    record = make_record(latitude=40.4168, longitude=-3.7038)
    scans.save("user-1", record)

    [stored] = scans.list_all("user-1")

    assert stored.disease_type == record.disease_type
    assert stored.description == record.description
    assert stored.treatment == record.treatment
    assert stored.scanned_at == record.scanned_at
    assert stored.image_url == record.image_url
    assert stored.latitude == 40.4168
    assert stored.longitude == -3.7038
    assert stored.created_at is not None


def test_non_utc_timestamp_round_trips(scans):
    madrid = timezone(timedelta(hours=2))
    record = make_record(scanned_at=datetime(2025, 5, 1, 12, 0, tzinfo=madrid))
    scans.save("user-1", record)

    assert scans.list_all("user-1")[0].scanned_at == record.scanned_at


def test_missing_coordinates_round_trip(scans):
    scans.save("user-1", make_record())
    stored = scans.list_all("user-1")[0]
    assert stored.latitude is None
    assert stored.longitude is None


def test_most_recent_first(scans):
    scans.save("user-1", make_record("Roya", T0 + timedelta(hours=1)))
    scans.save("user-1", make_record("Mildiu", T0))
    scans.save("user-1", make_record("Oidio", T0 + timedelta(days=1)))

    assert [r.disease_type for r in scans.list_all("user-1")] == ["Oidio", "Roya", "Mildiu"]


def test_equal_timestamps_newest_insert_first(scans):
    scans.save("user-1", make_record("Primero"))
    scans.save("user-1", make_record("Segundo"))

    assert [r.disease_type for r in scans.list_all("user-1")] == ["Segundo", "Primero"]


def test_list_all_is_idempotent(scans):
    scans.save("user-1", make_record("Roya", T0))
    scans.save("user-1", make_record("Mildiu", T0 + timedelta(minutes=5)))

    assert scans.list_all("user-1") == scans.list_all("user-1")


def test_records_are_scoped_per_user(scans):
    scans.save("user-1", make_record("Roya"))
    scans.save("user-2", make_record("Mildiu"))

    assert [r.disease_type for r in scans.list_all("user-1")] == ["Roya"]
    assert [r.disease_type for r in scans.list_all("user-2")] == ["Mildiu"]
    assert scans.list_all("user-3") == []


@pytest.mark.parametrize("user_id", [None, ""])
def test_unauthenticated_calls_fail(scans, store, user_id):
    with pytest.raises(AuthError):
        scans.save(user_id, make_record())
    with pytest.raises(AuthError):
        scans.list_all(user_id)
    assert store.count() == 0


def test_record_without_image_url_is_rejected(scans, store):
    with pytest.raises(InvalidRecordError):
        scans.save("user-1", make_record(image_url=""))
    assert store.count() == 0


def test_record_without_disease_type_is_rejected(scans, store):
    with pytest.raises(OrganoAIError):
        scans.save("user-1", make_record(disease=""))
    assert store.count() == 0


def test_store_collection_layout(store):
    ScanRecordStore(store).save("abc", make_record())
    assert store.count("users/abc/escaneos") == 1
