from __future__ import annotations

import asyncio
import dataclasses
from typing import Any

import pytest
from fastapi.testclient import TestClient

from core.db import get_database
from core.settings import Settings, get_settings, load_settings
from main import app

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01" + bytes(range(256)) + b"\xff\xd9"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

LISTED_COLUMNS = ("id", "name", "address", "city", "state", "image")


class FakeDatabase:
    """
    In-memory stand-in for core.db.Database.

    Understands the two statements the schools repository issues.
    """

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.fail_with: BaseException | None = None
        self._next_id = 1

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def query(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self._maybe_fail()
        await asyncio.sleep(0)
        assert sql.strip().upper().startswith("SELECT")
        return [{col: row[col] for col in LISTED_COLUMNS} for row in self.rows]

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self._maybe_fail()
        assert "INSERT INTO schools" in sql
        name, address, city, state, contact, email_id, image = args
        # Yield so concurrent requests interleave.
        await asyncio.sleep(0)
        row = {
            "id": self._next_id,
            "name": name,
            "address": address,
            "city": city,
            "state": state,
            "contact": contact,
            "email_id": email_id,
            "image": image,
        }
        self._next_id += 1
        self.rows.append(row)
        return {"id": row["id"]}

    async def execute(self, sql: str, *args: Any) -> None:
        self._maybe_fail()

    async def close(self) -> None:
        return None


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def upload_dir(tmp_path):
    # Deliberately not created: the intake handler must create it.
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir) -> Settings:
    return dataclasses.replace(load_settings(), upload_dir=upload_dir, app_env="test")


@pytest.fixture
def client(fake_db, settings):
    app.dependency_overrides[get_database] = lambda: fake_db
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def override_settings(client, settings):
    """
    Swap in settings with a few fields changed for the rest of the test.
    """

    def _override(**changes: Any) -> Settings:
        changed = dataclasses.replace(settings, **changes)
        app.dependency_overrides[get_settings] = lambda: changed
        return changed

    return _override


def valid_form(**overrides: Any) -> dict[str, Any]:
    form = {
        "name": "Green Valley High",
        "address": "12 Park Street",
        "city": "Pune",
        "state": "Maharashtra",
        "contact": "9876543210",
        "email_id": "office@greenvalley.edu",
    }
    form.update(overrides)
    return form


def image_file(data: bytes = JPEG_BYTES, filename: str = "logo.jpg", content_type: str = "image/jpeg"):
    return {"image": (filename, data, content_type)}
