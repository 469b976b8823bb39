# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- An in-memory record store with failure injection
- A seeded school (grades, sections, subjects, users)
"""

import copy
import itertools
import re
from dataclasses import dataclass
from typing import Any

import pytest

from src.core.config import clear_settings_cache
from src.core.errors import (
    ConflictError,
    RecordNotFoundError,
    ValidationError,
)
from src.infrastructure.record_store import Collections, Record


# =============================================================================
# In-memory Record Store
# =============================================================================

# Fields that must point at an existing record when set
RELATIONS: dict[str, dict[str, str]] = {
    Collections.PROFILES: {
        "user_id": Collections.USERS,
        "grade_id": Collections.GRADES,
        "section_id": Collections.SECTIONS,
    },
    Collections.SECTIONS: {"grade": Collections.GRADES},
    Collections.TEACHER_SUBJECTS: {
        "teacher_id": Collections.USERS,
        "subject_id": Collections.SUBJECTS,
    },
    Collections.TEACHER_CLASSES: {
        "teacher_id": Collections.USERS,
        "subject_id": Collections.SUBJECTS,
        "grade_id": Collections.GRADES,
        "section_id": Collections.SECTIONS,
    },
}

UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {
    Collections.USERS: ("email",),
    Collections.PROFILES: ("user_id",),
}

_TERM = re.compile(r"(\w+)\s*(!=|=)\s*('(?:[^'\\]|\\.)*'|true|false|null|-?\d+(?:\.\d+)?)")


def _parse_literal(raw: str) -> Any:
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw == "null":
        return None
    if raw.startswith("'"):
        return re.sub(r"\\(.)", r"\1", raw[1:-1])
    return float(raw) if "." in raw else int(raw)


def _matches(record: Record, expr: str | None) -> bool:
    """Evaluate an AND-only filter built by the filters helpers."""
    if not expr:
        return True
    assert "||" not in expr, f"OR filters are not supported by the fake: {expr}"
    terms = _TERM.findall(expr)
    assert terms, f"Unparseable filter: {expr}"
    for field, op, raw in terms:
        expected = _parse_literal(raw)
        actual = record.get(field)
        if expected is None:
            equal = actual in (None, "")
        elif isinstance(expected, bool):
            equal = bool(actual) is expected
        else:
            equal = actual == expected
        if equal != (op == "="):
            return False
    return True


@dataclass
class FailureRule:
    """Raise ``error`` on matching calls, ``times`` times (None: always)."""

    method: str
    collection: str
    error: BaseException
    times: int | None = None
    record_id: str | None = None


class FakeRecordStore:
    """In-memory stand-in for PocketBaseClient.

    Enforces relation targets and unique fields like the real store, and
    records every call in ``calls`` as ``(method, collection, detail)``.
    """

    def __init__(self) -> None:
        self.data: dict[str, dict[str, Record]] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self._failures: list[FailureRule] = []
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)

    # ----- test helpers -----------------------------------------------------

    def seed(self, collection: str, record_id: str, **fields: Any) -> Record:
        record = {"id": record_id, "created": self._timestamp(), **fields}
        self.data.setdefault(collection, {})[record_id] = record
        return copy.deepcopy(record)

    def fail(
        self,
        method: str,
        collection: str,
        error: BaseException | None = None,
        times: int | None = None,
        record_id: str | None = None,
    ) -> None:
        """Raise ``error`` on matching calls.

        ``error`` may be any exception; a BaseException subclass that is not
        an Exception stands in for the process stopping at that call.
        """
        self._failures.append(
            FailureRule(
                method,
                collection,
                error or ValidationError("Failed to process the request."),
                times,
                record_id,
            )
        )

    def records(self, collection: str, **where: Any) -> list[Record]:
        rows = self.data.get(collection, {}).values()
        return [
            copy.deepcopy(r)
            for r in rows
            if all(r.get(k) == v for k, v in where.items())
        ]

    @property
    def writes(self) -> list[tuple[str, str, Any]]:
        return [c for c in self.calls if c[0] in ("create", "update", "delete")]

    # ----- RecordStore protocol ---------------------------------------------

    async def list(
        self,
        collection: str,
        filter: str | None = None,
        sort: str | None = None,
        expand: str | None = None,
    ) -> list[Record]:
        self._call("list", collection, filter)
        rows = [r for r in self.data.get(collection, {}).values() if _matches(r, filter)]
        for key in reversed((sort or "").split(",")):
            key = key.strip()
            if not key:
                continue
            field = key.lstrip("-+")
            rows.sort(key=lambda r: (r.get(field) is None, r.get(field)), reverse=key.startswith("-"))
        return copy.deepcopy(rows)

    async def count(self, collection: str, filter: str | None = None) -> int:
        self._call("count", collection, filter)
        return sum(1 for r in self.data.get(collection, {}).values() if _matches(r, filter))

    async def get(self, collection: str, record_id: str) -> Record:
        self._call("get", collection, record_id, record_id)
        return copy.deepcopy(self._require(collection, record_id))

    async def create(self, collection: str, fields: Record) -> Record:
        self._call("create", collection, fields)
        record = {
            k: v for k, v in copy.deepcopy(fields).items()
            if k not in ("password", "passwordConfirm")
        }
        record["id"] = record.get("id") or f"{collection[:3]}{next(self._ids)}"
        record["created"] = self._timestamp()
        self._check(collection, record)
        self.data.setdefault(collection, {})[record["id"]] = record
        return copy.deepcopy(record)

    async def update(self, collection: str, record_id: str, fields: Record) -> Record:
        self._call("update", collection, (record_id, fields), record_id)
        current = self._require(collection, record_id)
        merged = {**current, **copy.deepcopy(fields)}
        self._check(collection, merged)
        self.data[collection][record_id] = merged
        return copy.deepcopy(merged)

    async def delete(self, collection: str, record_id: str) -> None:
        self._call("delete", collection, record_id, record_id)
        self._require(collection, record_id)
        del self.data[collection][record_id]

    # ----- internals ----------------------------------------------------------

    def _call(self, method: str, collection: str, detail: Any, record_id: str | None = None) -> None:
        self.calls.append((method, collection, detail))
        for rule in self._failures:
            if rule.method != method or rule.collection != collection:
                continue
            if rule.record_id is not None and rule.record_id != record_id:
                continue
            if rule.times is not None:
                if rule.times <= 0:
                    continue
                rule.times -= 1
            raise rule.error

    def _require(self, collection: str, record_id: str) -> Record:
        try:
            return self.data[collection][record_id]
        except KeyError:
            raise RecordNotFoundError(
                "The requested resource wasn't found.", details={"id": record_id}
            ) from None

    def _check(self, collection: str, record: Record) -> None:
        for field, target in RELATIONS.get(collection, {}).items():
            value = record.get(field)
            if value and value not in self.data.get(target, {}):
                raise ValidationError(
                    "Failed to create record.",
                    details={"fields": {field: {"code": "validation_missing_rel_records"}}},
                )
        for field in UNIQUE_FIELDS.get(collection, ()):
            value = record.get(field)
            clash = any(
                other.get(field) == value and other["id"] != record["id"]
                for other in self.data.get(collection, {}).values()
            )
            if value and clash:
                raise ConflictError(
                    "Failed to create record.",
                    details={"fields": {field: {"code": "validation_not_unique"}}},
                )

    def _timestamp(self) -> str:
        n = next(self._clock)
        return f"2025-01-01 {n // 3600:02d}:{n // 60 % 60:02d}:{n % 60:02d}.000Z"


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store() -> FakeRecordStore:
    """Provide an empty in-memory record store."""
    return FakeRecordStore()


@pytest.fixture
def school(store: FakeRecordStore) -> FakeRecordStore:
    """Seed two grades with sections, two subjects and a few users.

    Grade g4 has sections s4a and s4b, grade g5 has s5a. Users: admin a1,
    active teachers t1 and t2, inactive teacher t3, student st1.
    """
    store.seed(Collections.GRADES, "g4", code="G4", name={"en": "Grade 4", "ar": "الصف الرابع"}, display_order=4, is_active=True)
    store.seed(Collections.GRADES, "g5", code="G5", name="Grade 5", display_order=5, is_active=True)
    store.seed(Collections.SECTIONS, "s4a", name="4A", grade="g4", max_students=30, is_active=True)
    store.seed(Collections.SECTIONS, "s4b", name="4B", grade="g4", max_students=30, is_active=True)
    store.seed(Collections.SECTIONS, "s5a", name="5A", grade="g5", max_students=30, is_active=True)
    store.seed(Collections.SUBJECTS, "math", code="MATH", name='{"en": "Math", "ar": "رياضيات"}', is_active=True)
    store.seed(Collections.SUBJECTS, "sci", code="SCI", name="Science", color="#4CAF50", is_active=True)
    store.seed(Collections.USERS, "a1", email="admin@school.test", role="admin", is_active=True, name="Admin")
    store.seed(Collections.USERS, "t1", email="t1@school.test", role="teacher", is_active=True, name="Teacher One")
    store.seed(Collections.USERS, "t2", email="t2@school.test", role="teacher", is_active=True, name="Teacher Two")
    store.seed(Collections.USERS, "t3", email="t3@school.test", role="teacher", is_active=False, name="Teacher Three")
    store.seed(Collections.USERS, "st1", email="st1@school.test", role="student", is_active=True, name="Student One")
    store.calls.clear()
    return store


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def clean_settings():
    """Clear cached settings before and after the test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
