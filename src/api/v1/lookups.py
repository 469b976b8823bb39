# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lookup API endpoints.

Reference data used by the enrollment forms:
- GET /grades - Active grades in display order
- GET /sections - Active sections, optionally of one grade
- GET /subjects - Subjects ordered by code
"""

from typing import Annotated

from fastapi import APIRouter, Query

from src.api.dependencies import Lookups
from src.models.lookup import Grade, Section, Subject

router = APIRouter()


@router.get("/grades", response_model=list[Grade], summary="List grades")
async def list_grades(lookups: Lookups) -> list[Grade]:
    return await lookups.fetch_grades()


@router.get("/sections", response_model=list[Section], summary="List sections")
async def list_sections(
    lookups: Lookups,
    grade_id: Annotated[str | None, Query(description="Only sections of this grade")] = None,
) -> list[Section]:
    return await lookups.fetch_sections_by_grade(grade_id)


@router.get("/subjects", response_model=list[Subject], summary="List subjects")
async def list_subjects(lookups: Lookups) -> list[Subject]:
    return await lookups.fetch_subjects()
