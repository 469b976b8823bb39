# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-item outcomes of the best-effort teacher assignment loop."""

from dataclasses import dataclass, field

from src.models.user import AssignmentError


@dataclass(frozen=True)
class AssignmentOutcome:
    """Result of one (subject, grade, section) assignment.

    Exactly one of record_id and error is set.
    """

    subject_id: str
    grade_id: str
    section_id: str
    record_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def created(
        cls, subject_id: str, grade_id: str, section_id: str, record_id: str
    ) -> "AssignmentOutcome":
        return cls(subject_id, grade_id, section_id, record_id=record_id)

    @classmethod
    def failed(
        cls, subject_id: str, grade_id: str, section_id: str, error: str
    ) -> "AssignmentOutcome":
        return cls(subject_id, grade_id, section_id, error=error)


@dataclass
class AssignmentSummary:
    """Reduction of assignment outcomes into counts and error entries."""

    outcomes: list[AssignmentOutcome] = field(default_factory=list)

    def add(self, outcome: AssignmentOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def created(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)

    @property
    def errors(self) -> list[AssignmentError]:
        return [
            AssignmentError(
                subject_id=o.subject_id,
                grade_id=o.grade_id,
                section_id=o.section_id,
                message=o.error or "",
            )
            for o in self.outcomes
            if not o.ok
        ]
