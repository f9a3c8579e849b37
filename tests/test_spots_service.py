from datetime import date

import pytest

from app.models.spot import Spot
from app.schemas.spot import SpotCreate
from app.services.rate_limit import (
    LIMITS,
    RateLimitExceeded,
    check_rate_limit,
    increment_rate_limit,
    rate_limit_key,
)
from app.services.spots import create_spot, get_spot, list_spots, upsert_spot


def _import_payload(source_id="1", **overrides):
    payload = {
        "type": "toilet",
        "title": "梅田公衆便所",
        "description": "北区梅田付近の公衆トイレ（自動登録）。詳細は現地表示で。",
        "lat": 34.70,
        "lng": 135.50,
        "region_tag": "kansai",
        "status": "active",
        "is_official": True,
        "anonymous_id": "system_import",
        "toilet_is_free": True,
        "source_name": "osaka_city_pdf",
        "source_id": source_id,
        "source_url": "https://example.org",
    }
    payload.update(overrides)
    return payload


def _user_spot(**overrides):
    data = {
        "type": "smoking",
        "description": "駅の東口を出てすぐ右手にある喫煙所です。灰皿あり。",
        "lat": 34.69,
        "lng": 135.50,
        "anonymous_id": "anon-1",
        "smoking_type": "designated_area",
        "toilet_is_free": True,
        "agreed_to_rules": True,
    }
    data.update(overrides)
    return SpotCreate(**data)


def test_upsert_spot_inserts_then_updates(db):
    first = upsert_spot(db, _import_payload())
    second = upsert_spot(db, _import_payload(lat=34.71, title="新しい名前"))

    assert first.id == second.id
    assert db.query(Spot).count() == 1
    assert second.lat == 34.71
    assert second.title == "新しい名前"
    assert second.imported_at is not None


def test_upsert_spot_keeps_different_sources_apart(db):
    upsert_spot(db, _import_payload(source_id="1"))
    upsert_spot(db, _import_payload(source_id="1", source_name="other_source"))
    assert db.query(Spot).count() == 2


def test_upsert_spot_requires_source_key(db):
    with pytest.raises(ValueError):
        upsert_spot(db, _import_payload(source_id=""))


def test_list_spots_hides_hidden_and_applies_type_filters(db):
    upsert_spot(db, _import_payload(source_id="free", toilet_open_24h=True))
    upsert_spot(db, _import_payload(source_id="paid", toilet_is_free=False))
    upsert_spot(db, _import_payload(source_id="hidden", status="hidden"))
    create_spot(db, _user_spot())

    assert len(list_spots(db)) == 3
    assert {s.source_id for s in list_spots(db, spot_type="toilet")} == {"free", "paid"}

    free = list_spots(db, toilet_free_only=True)
    assert {s.type for s in free} == {"toilet", "smoking"}
    assert "paid" not in {s.source_id for s in free}

    open_24h = list_spots(db, spot_type="toilet", toilet_24h=True)
    assert [s.source_id for s in open_24h] == ["free"]

    assert len(list_spots(db, smoking_types=["outdoor_ok"])) == 2
    assert len(list_spots(db, official_only=True)) == 2


def test_create_spot_drops_fields_of_other_types(db):
    spot = create_spot(db, _user_spot())

    assert spot.is_official is False
    assert spot.region_tag == "kansai"
    assert spot.status == "active"
    assert spot.smoking_type == "designated_area"
    assert spot.toilet_is_free is None
    assert get_spot(db, spot.id).id == spot.id


def test_get_spot_unknown_raises_lookup_error(db):
    with pytest.raises(LookupError):
        get_spot(db, "missing")


def test_spot_submissions_are_rate_limited(db):
    for _ in range(LIMITS["spot"]):
        create_spot(db, _user_spot())

    with pytest.raises(RateLimitExceeded):
        create_spot(db, _user_spot())
    # another anonymous id still has quota
    create_spot(db, _user_spot(anonymous_id="anon-2"))


def test_rate_limit_counters_are_per_day(db):
    today = date(2026, 10, 19)
    tomorrow = date(2026, 10, 20)
    for _ in range(LIMITS["report"]):
        increment_rate_limit(db, "anon", "report", today)

    assert check_rate_limit(db, "anon", "report", today) is False
    assert check_rate_limit(db, "anon", "report", tomorrow) is True
    assert rate_limit_key("anon", "report", today) == "anon:report:20261019"


def test_rate_limit_unknown_action(db):
    with pytest.raises(ValueError):
        check_rate_limit(db, "anon", "upload")


def test_rate_limit_timestamps_use_utc(db):
    from datetime import datetime, timedelta, timezone

    from app.models.rate_limit import RateLimit

    increment_rate_limit(db, "anon", "spot")

    row = db.get(RateLimit, rate_limit_key("anon", "spot"))
    now_utc = datetime.now(timezone.utc).replace(tzinfo=None)
    assert abs(row.updated_at - now_utc) < timedelta(minutes=1)
