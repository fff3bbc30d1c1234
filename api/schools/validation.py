"""
Intake validation.

`validate_intake` returns either a `ValidIntake` (normalized record ready to
insert) or an `InvalidIntake` listing every problem found, in field order.
Each field contributes at most one message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Union

from .staging import StagedFile

CONTACT_PATTERN = re.compile(r"^[0-9]{10}$")
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

TEXT_FIELDS = ("name", "address", "city", "state", "contact", "email_id")

# field -> (label, minimum length)
_MIN_LENGTHS: tuple[tuple[str, str, int], ...] = (
    ("name", "Name", 2),
    ("address", "Address", 5),
    ("city", "City", 2),
    ("state", "State", 2),
)


@dataclass(frozen=True)
class ValidIntake:
    name: str
    address: str
    city: str
    state: str
    contact: str
    email_id: str
    image: StagedFile


@dataclass(frozen=True)
class InvalidIntake:
    violations: tuple[str, ...]


IntakeResult = Union[ValidIntake, InvalidIntake]


def _clean(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def validate_intake(fields: Mapping[str, object], image: StagedFile | None) -> IntakeResult:
    values = {key: _clean(fields.get(key)) for key in TEXT_FIELDS}
    violations: list[str] = []

    for key, label, min_length in _MIN_LENGTHS:
        value = values[key]
        if not value:
            violations.append(f"{label} is required")
        elif len(value) < min_length:
            violations.append(f"{label} must be at least {min_length} characters")

    if not CONTACT_PATTERN.match(values["contact"]):
        violations.append("Contact must be a 10-digit number")

    if not EMAIL_PATTERN.search(values["email_id"]):
        violations.append("Valid email is required")

    if image is None or not image.path:
        violations.append("Image is required")

    if violations or image is None:
        return InvalidIntake(violations=tuple(violations))

    return ValidIntake(image=image, **values)
