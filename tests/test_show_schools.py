from __future__ import annotations

import base64

from conftest import JPEG_BYTES, PNG_BYTES, image_file, valid_form


def _add(client, **fields) -> int:
    data = fields.pop("image", JPEG_BYTES)
    resp = client.post("/api/addSchool", data=valid_form(**fields), files=image_file(data=data))
    assert resp.status_code == 201
    return resp.json()["id"]


def test_empty_listing(client):
    resp = client.get("/api/showSchools")

    assert resp.status_code == 200
    assert resp.json() == []


def test_listing_hides_contact_details(client):
    _add(client)

    resp = client.get("/api/showSchools")

    assert resp.status_code == 200
    (school,) = resp.json()
    assert set(school) == {"id", "name", "address", "city", "state", "image"}
    assert school["name"] == "Green Valley High"
    assert school["state"] == "Maharashtra"


def test_jpeg_round_trip_through_data_uri(client):
    _add(client)

    (school,) = client.get("/api/showSchools").json()

    prefix = "data:image/jpeg;base64,"
    assert school["image"].startswith(prefix)
    assert base64.b64decode(school["image"][len(prefix):]) == JPEG_BYTES


def test_png_is_labelled_by_content(client):
    _add(client, image=PNG_BYTES)

    (school,) = client.get("/api/showSchools").json()

    assert school["image"].startswith("data:image/png;base64,")


def test_missing_blob_uses_placeholder(client, fake_db):
    _add(client)
    fake_db.rows[0]["image"] = None

    (school,) = client.get("/api/showSchools").json()

    assert school["image"] == "/placeholder-image.jpg"


def test_listing_twice_is_identical(client):
    first_id = _add(client, name="Alpha School")
    second_id = _add(client, name="Beta School")

    first = client.get("/api/showSchools").json()
    second = client.get("/api/showSchools").json()

    assert first == second
    assert [s["id"] for s in first] == [first_id, second_id]


def test_query_failure_uses_error_envelope(client, fake_db):
    fake_db.fail_with = RuntimeError("relation \"schools\" does not exist")

    resp = client.get("/api/showSchools")

    assert resp.status_code == 500
    assert resp.json() == {
        "error": "Internal Server Error",
        "message": "relation \"schools\" does not exist",
    }


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
