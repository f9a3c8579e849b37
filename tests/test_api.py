from app.services.rate_limit import LIMITS

SPOT_FORM = {
    "type": "toilet",
    "title": "天満橋駅前トイレ",
    "description": "天満橋駅の改札を出て左手、地下通路の突き当たりにあります。",
    "lat": 34.690,
    "lng": 135.520,
    "anonymous_id": "anon-api",
    "toilet_is_free": True,
    "toilet_open_24h": False,
    "smoking_type": "inside_ok",
    "agreed_to_rules": True,
}


def _create_spot(client, **overrides):
    body = {**SPOT_FORM, **overrides}
    return client.post("/api/v1/spots", json=body)


def test_health_endpoints(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/api/v1/health").json() == {"status": "ok"}


def test_create_and_read_spot(client):
    response = _create_spot(client)
    assert response.status_code == 201
    spot = response.json()
    assert spot["is_official"] is False
    assert spot["smoking_type"] is None
    assert spot["toilet_is_free"] is True

    detail = client.get(f"/api/v1/spots/{spot['id']}")
    assert detail.status_code == 200
    assert detail.json()["title"] == "天満橋駅前トイレ"

    listing = client.get("/api/v1/spots", params={"type": "toilet"})
    assert [s["id"] for s in listing.json()] == [spot["id"]]
    assert client.get("/api/v1/spots", params={"type": "cafe"}).json() == []


def test_spot_validation_errors(client):
    assert _create_spot(client, description="短すぎる説明").status_code == 422
    assert _create_spot(client, agreed_to_rules=False).status_code == 422
    assert _create_spot(client, lat=120.0).status_code == 422
    assert _create_spot(client, type="parking").status_code == 422


def test_unknown_spot_is_404(client):
    assert client.get("/api/v1/spots/nope").status_code == 404
    assert client.get("/api/v1/spots/nope/reviews").status_code == 404


def test_spot_rate_limit_returns_429(client):
    for _ in range(LIMITS["spot"]):
        assert _create_spot(client).status_code == 201
    assert _create_spot(client).status_code == 429


def test_reviews_round_trip(client):
    spot_id = _create_spot(client).json()["id"]

    response = client.post(
        "/api/v1/reviews",
        json={
            "spot_id": spot_id,
            "body": "きれいに清掃されていました。",
            "confidence": "sure",
            "visited_at": "2026-10-01",
            "anonymous_id": "anon-review",
        },
    )
    assert response.status_code == 201

    reviews = client.get(f"/api/v1/spots/{spot_id}/reviews").json()
    assert len(reviews) == 1
    assert reviews[0]["confidence"] == "sure"
    assert reviews[0]["visited_at"] == "2026-10-01"


def test_review_validation_and_unknown_spot(client):
    spot_id = _create_spot(client).json()["id"]
    short = client.post(
        "/api/v1/reviews",
        json={"spot_id": spot_id, "body": "短い", "confidence": "sure", "anonymous_id": "a"},
    )
    assert short.status_code == 422

    missing = client.post(
        "/api/v1/reviews",
        json={"spot_id": "nope", "body": "十分な長さの口コミです。", "confidence": "maybe", "anonymous_id": "a"},
    )
    assert missing.status_code == 404


def test_reports(client):
    spot_id = _create_spot(client).json()["id"]
    body = {
        "target_type": "spot",
        "target_id": spot_id,
        "reason": "outdated",
        "note": "閉鎖されていました",
        "anonymous_id": "anon-report",
    }

    response = client.post("/api/v1/reports", json=body)
    assert response.status_code == 201
    assert response.json()["reason"] == "outdated"

    assert client.post("/api/v1/reports", json={**body, "reason": "spam"}).status_code == 422

    for _ in range(LIMITS["report"] - 1):
        assert client.post("/api/v1/reports", json=body).status_code == 201
    assert client.post("/api/v1/reports", json=body).status_code == 429


def test_spot_listing_filters_smoking_types_and_is_newest_first(client):
    toilet = _create_spot(client, anonymous_id="anon-t").json()
    designated = _create_spot(
        client, type="smoking", smoking_type="designated_area", anonymous_id="anon-s1"
    ).json()
    outdoor = _create_spot(client, type="smoking", smoking_type="outdoor_ok", anonymous_id="anon-s2").json()

    everything = client.get("/api/v1/spots").json()
    assert [s["id"] for s in everything] == [outdoor["id"], designated["id"], toilet["id"]]

    filtered = client.get("/api/v1/spots", params={"smoking_types": "outdoor_ok, heated_only"}).json()
    assert [s["id"] for s in filtered] == [outdoor["id"], toilet["id"]]

    smoking_only = client.get(
        "/api/v1/spots", params={"type": "smoking", "smoking_types": "designated_area,outdoor_ok"}
    ).json()
    assert {s["id"] for s in smoking_only} == {designated["id"], outdoor["id"]}


def test_oversized_ids_are_rejected(client):
    long_id = "x" * 37
    review = client.post(
        "/api/v1/reviews",
        json={"spot_id": long_id, "body": "十分な長さの口コミです。", "confidence": "sure", "anonymous_id": "a"},
    )
    assert review.status_code == 422

    report = client.post(
        "/api/v1/reports",
        json={"target_type": "spot", "target_id": long_id, "reason": "other", "anonymous_id": "a"},
    )
    assert report.status_code == 422
