# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Helpers for building PocketBase filter expressions.

Values are always quoted and escaped so ids and free text coming from
requests cannot change the shape of the expression.

Example:
    >>> and_(eq("is_active", True), eq("grade", "g1"))
    "(is_active=true && grade='g1')"
"""

from typing import Any


def literal(value: Any) -> str:
    """Render a Python value as a filter literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


def eq(field: str, value: Any) -> str:
    """Field equals value."""
    return f"{field}={literal(value)}"


def neq(field: str, value: Any) -> str:
    """Field differs from value."""
    return f"{field}!={literal(value)}"


def contains(field: str, value: Any) -> str:
    """Multi-value (relation/array) field contains value."""
    return f"{field}~{literal(value)}"


def and_(*parts: str | None) -> str:
    """Join expressions with AND, skipping empty parts."""
    return _join(" && ", parts)


def or_(*parts: str | None) -> str:
    """Join expressions with OR, skipping empty parts."""
    return _join(" || ", parts)


def _join(operator: str, parts: tuple[str | None, ...]) -> str:
    present = [p for p in parts if p]
    if not present:
        return ""
    if len(present) == 1:
        return present[0]
    return "(" + operator.join(present) + ")"
