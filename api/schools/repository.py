"""
School persistence.
This module is where schools-related SQL lives.
"""

from __future__ import annotations

from typing import Any

from core.db import Database

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schools (
  id BIGSERIAL PRIMARY KEY,
  name TEXT NOT NULL,
  address TEXT NOT NULL,
  city TEXT NOT NULL,
  state TEXT NOT NULL,
  contact TEXT NOT NULL,
  email_id TEXT NOT NULL,
  image BYTEA NOT NULL
)
"""


async def create_schema(db: Database) -> None:
    await db.execute(SCHEMA_SQL)


async def insert_school(
    db: Database,
    *,
    name: str,
    address: str,
    city: str,
    state: str,
    contact: str,
    email_id: str,
    image: bytes,
) -> int:
    """
    Insert one school row and return its generated id.
    """
    row = await db.fetch_one(
        """
        INSERT INTO schools (name, address, city, state, contact, email_id, image)
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        RETURNING id
        """,
        name,
        address,
        city,
        state,
        contact,
        email_id,
        image,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert school.")
    return int(row["id"])


async def list_schools(db: Database) -> list[dict[str, Any]]:
    # contact and email_id stay out of the public listing.
    return await db.query(
        """
        SELECT id, name, address, city, state, image
        FROM schools
        """
    )
