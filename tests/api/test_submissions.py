"""Submission Routes — create, list, fetch and delete through the HTTP server.

Invariants:
    - Valid POST → 201 with a fresh id, defaults applied, submittedAt >= request time
    - Any missing required field or bad email → 400 and nothing persisted
    - Unknown / deleted ids → 404
    - List is ordered by submittedAt descending
    - Storage failures → 500 with the driver message passed through
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from formapp.models.submission import Submission

BASE = "/api/submissions"


async def _count(test_db) -> int:
    result = await test_db.execute(select(func.count()).select_from(Submission))
    return result.scalar_one()


# --- create -------------------------------------------------------------------

async def test_create_returns_201_with_defaults(client):
    before = datetime.now(timezone.utc)
    res = await client.post(BASE, json={
        "firstName": "A", "lastName": "B", "email": "a@b.com",
        "interests": "x", "subscription": "y",
    })
    assert res.status_code == 201
    body = res.json()
    assert body["frequency"] == "weekly"
    assert body["termsAccepted"] is False
    assert body["phone"] is None
    assert body["comments"] is None
    assert body["interests"] == "x"
    assert len(body["id"]) == 36
    assert datetime.fromisoformat(body["submittedAt"]) >= before


async def test_create_generates_distinct_ids(client, valid_payload):
    first = await client.post(BASE, json=valid_payload)
    second = await client.post(BASE, json=valid_payload)
    assert first.json()["id"] != second.json()["id"]


async def test_create_persists_exactly_one_row(client, valid_payload, test_db):
    await client.post(BASE, json=valid_payload)
    assert await _count(test_db) == 1


async def test_create_trims_text_fields(client, valid_payload):
    valid_payload.update(
        firstName="  Ada ", lastName=" Lovelace  ",
        phone=" 555-0100 ", comments="  hi  ",
    )
    body = (await client.post(BASE, json=valid_payload)).json()
    assert body["firstName"] == "Ada"
    assert body["lastName"] == "Lovelace"
    assert body["phone"] == "555-0100"
    assert body["comments"] == "hi"


async def test_create_keeps_interest_list_as_given(client, valid_payload):
    created = (await client.post(BASE, json=valid_payload)).json()
    fetched = (await client.get(f"{BASE}/{created['id']}")).json()
    assert fetched["interests"] == ["math", "engines"]


async def test_create_keeps_interest_string_unquoted(client, valid_payload, test_db):
    valid_payload["interests"] = "x"
    created = (await client.post(BASE, json=valid_payload)).json()
    fetched = (await client.get(f"{BASE}/{created['id']}")).json()
    assert fetched["interests"] == "x"

    row = await test_db.get(Submission, created["id"])
    assert row.interests == "x"


@pytest.mark.parametrize("value,expected", [
    (True, True), ("true", False), (1, False), (None, False),
])
async def test_terms_accepted_only_literal_true(client, valid_payload, value, expected):
    valid_payload["termsAccepted"] = value
    body = (await client.post(BASE, json=valid_payload)).json()
    assert body["termsAccepted"] is expected


@pytest.mark.parametrize("field", [
    "firstName", "lastName", "email", "interests", "subscription",
])
async def test_missing_required_field_returns_400(client, valid_payload, test_db, field):
    del valid_payload[field]
    res = await client.post(BASE, json=valid_payload)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MISSING_REQUIRED_FIELDS"
    assert field in res.json()["error"]["details"]["missing"]
    assert await _count(test_db) == 0


async def test_empty_required_field_returns_400(client, valid_payload):
    valid_payload["subscription"] = ""
    res = await client.post(BASE, json=valid_payload)
    assert res.status_code == 400


@pytest.mark.parametrize("email", ["ada.example.com", "ada@example", "a da@x.com"])
async def test_invalid_email_returns_400(client, valid_payload, test_db, email):
    valid_payload["email"] = email
    res = await client.post(BASE, json=valid_payload)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_EMAIL"
    assert await _count(test_db) == 0


async def test_malformed_json_returns_400(client):
    res = await client.post(
        BASE, content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MALFORMED_BODY"


async def test_non_object_body_returns_400(client):
    res = await client.post(BASE, json=["not", "an", "object"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MALFORMED_BODY"


async def test_non_string_values_accepted_and_stored_as_text(client, valid_payload):
    valid_payload.update(phone=5551234, subscription=3, frequency=7)
    res = await client.post(BASE, json=valid_payload)
    assert res.status_code == 201
    body = res.json()
    assert body["phone"] == "5551234"
    assert body["subscription"] == "3"
    assert body["frequency"] == "7"

    fetched = (await client.get(f"{BASE}/{body['id']}")).json()
    assert fetched["phone"] == "5551234"


# --- read ---------------------------------------------------------------------

async def test_get_returns_created_record(client, valid_payload):
    created = (await client.post(BASE, json=valid_payload)).json()
    res = await client.get(f"{BASE}/{created['id']}")
    assert res.status_code == 200
    assert res.json()["email"] == "ada@example.com"


async def test_get_unknown_id_returns_404(client):
    res = await client.get(f"{BASE}/does-not-exist")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "SUBMISSION_NOT_FOUND"


async def test_list_is_empty_initially(client):
    res = await client.get(BASE)
    assert res.status_code == 200
    assert res.json() == []


async def test_list_orders_most_recent_first(client, test_db):
    t1 = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i, ts in enumerate([t1, t1 + timedelta(hours=2), t1 + timedelta(hours=1)]):
        test_db.add(Submission(
            id=f"id-{i}", first_name="F", last_name="L", email="f@l.io",
            interests="x", subscription="y", submitted_at=ts,
        ))
    await test_db.commit()

    res = await client.get(BASE)
    assert [s["id"] for s in res.json()] == ["id-1", "id-2", "id-0"]


# --- delete -------------------------------------------------------------------

async def test_delete_removes_row_then_get_returns_404(client, valid_payload, test_db):
    created = (await client.post(BASE, json=valid_payload)).json()
    await client.post(BASE, json=valid_payload)

    res = await client.delete(f"{BASE}/{created['id']}")
    assert res.status_code == 200
    assert res.json() == {"message": "Submission deleted successfully"}
    assert await _count(test_db) == 1
    assert (await client.get(f"{BASE}/{created['id']}")).status_code == 404


async def test_delete_unknown_id_returns_404(client):
    res = await client.delete(f"{BASE}/does-not-exist")
    assert res.status_code == 404


# --- storage failures ---------------------------------------------------------

async def test_list_storage_failure_returns_500(broken_client):
    res = await broken_client.get(BASE)
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "DATABASE_ERROR"
    assert "no such table" in error["message"]


async def test_create_storage_failure_returns_500(broken_client, valid_payload):
    res = await broken_client.post(BASE, json=valid_payload)
    assert res.status_code == 500


# --- CORS ---------------------------------------------------------------------

async def test_cors_header_present(client):
    res = await client.get(BASE, headers={"Origin": "http://example.org"})
    assert res.headers["access-control-allow-origin"] == "*"
