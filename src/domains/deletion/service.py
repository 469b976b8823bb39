# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Deletion service for portal users.

A user is active, soft-deleted or hard-deleted:

    active --soft_delete_user--> soft-deleted --reactivate_user--> active
    active | soft-deleted --hard_delete_user--> hard-deleted (terminal)

Soft deletion only flips ``is_active`` and stamps ``deleted_at``; every row
referencing the user stays. Hard deletion removes those rows first and the
user record last, so a failure part-way leaves the user in place and the
call can simply be repeated.

reassign_classes() and soft_delete_user() are separate record store calls.
A crash between them leaves the classes moved and the old teacher active;
soft_delete_user() can then be called on its own.

Example:
    >>> deletion = DeletionService(store)
    >>> report = await deletion.get_user_dependencies(user_id)
    >>> await deletion.soft_delete_user(user_id)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Literal

from src.core.errors import (
    DependencyWriteError,
    PortalError,
    RecordNotFoundError,
    ValidationError,
)
from src.infrastructure.record_store import Collections, RecordStore, filters
from src.models.deletion import (
    DeletionMode,
    DeletionResult,
    DependencyReport,
    ReassignmentResult,
    SoftDeleteWithReassignmentResult,
)
from src.models.user import User, UserRole
from src.utils.datetime import format_store_timestamp, utc_now

logger = logging.getLogger(__name__)

HARD_DELETE_CONFIRMATION = "DELETE"


@dataclass(frozen=True)
class DependencyRelation:
    """A collection whose rows reference a user through one field.

    Attributes:
        kind: Name reported in dependency counts.
        collection: Collection holding the rows.
        field: Field referencing the user id.
        on_hard_delete: Delete the rows, or clear the reference and keep them.
    """

    kind: str
    collection: str
    field: str
    on_hard_delete: Literal["delete", "nullify"] = "delete"


# Order is the order of removal during hard delete
DEPENDENCY_RELATIONS: tuple[DependencyRelation, ...] = (
    DependencyRelation("classes", Collections.TEACHER_CLASSES, "teacher_id"),
    DependencyRelation("subjects", Collections.TEACHER_SUBJECTS, "teacher_id"),
    DependencyRelation("enrollments", Collections.ENROLLMENTS, "student_id"),
    DependencyRelation("submissions", Collections.SUBMISSIONS, "student_id"),
    DependencyRelation("activities", Collections.ACTIVITIES, "teacher_id", "nullify"),
    DependencyRelation("profile", Collections.PROFILES, "user_id"),
)


def is_hard_delete_confirmed(confirmation: str | None) -> bool:
    """Whether the operator typed the hard delete confirmation exactly.

    Case-sensitive and without trimming: " DELETE" or "delete" do not count.
    """
    return confirmation == HARD_DELETE_CONFIRMATION


def require_hard_delete_confirmation(confirmation: str | None) -> None:
    """Raise ValidationError unless the confirmation text is exactly "DELETE"."""
    if not is_hard_delete_confirmed(confirmation):
        raise ValidationError(
            f'Hard delete requires typing "{HARD_DELETE_CONFIRMATION}" to confirm',
            details={"field": "confirmation"},
        )


class DeletionService:
    """Service for removing users and moving their classes.

    Attributes:
        _store: Record store client.
        _relations: Relations counted and cleaned up for a user.
    """

    def __init__(
        self,
        store: RecordStore,
        relations: tuple[DependencyRelation, ...] = DEPENDENCY_RELATIONS,
    ) -> None:
        """Initialize deletion service.

        Args:
            store: Record store client.
            relations: Relations referencing users.
        """
        self._store = store
        self._relations = relations

    async def get_user_dependencies(self, user_id: str) -> DependencyReport:
        """Count rows referencing the user, without changing anything.

        Args:
            user_id: User identifier.

        Returns:
            Counts per kind (zero counts omitted) and their total.
        """
        counts = await asyncio.gather(
            *(
                self._store.count(rel.collection, filters.eq(rel.field, user_id))
                for rel in self._relations
            )
        )
        dependencies = {
            rel.kind: count for rel, count in zip(self._relations, counts) if count > 0
        }
        return DependencyReport(
            dependencies=dependencies,
            total_impact=sum(dependencies.values()),
        )

    async def soft_delete_user(self, user_id: str) -> DeletionResult:
        """Deactivate a user, keeping every dependent row.

        Deactivating an already inactive user succeeds without writing.

        Raises:
            RecordNotFoundError: If the user does not exist.
        """
        user = await self._get_user(user_id)
        if not user.active:
            logger.info("Soft delete skipped, user already inactive: %s", user_id)
            return DeletionResult(
                mode=DeletionMode.SOFT, user_id=user_id, already_inactive=True
            )

        await self._store.update(
            Collections.USERS,
            user_id,
            {"is_active": False, "deleted_at": format_store_timestamp(utc_now())},
        )

        logger.info("User soft deleted: %s", user_id)

        return DeletionResult(mode=DeletionMode.SOFT, user_id=user_id)

    async def reactivate_user(self, user_id: str) -> User:
        """Bring a soft-deleted user back. Active users are returned as is.

        Raises:
            RecordNotFoundError: If the user does not exist (or was hard deleted).
        """
        user = await self._get_user(user_id)
        if user.active:
            return user

        record = await self._store.update(
            Collections.USERS, user_id, {"is_active": True, "deleted_at": ""}
        )

        logger.info("User reactivated: %s", user_id)

        return User.from_record(record)

    async def hard_delete_user(self, user_id: str, confirmation: str | None) -> DeletionResult:
        """Permanently remove a user and its dependents.

        Args:
            user_id: User identifier.
            confirmation: Text typed by the operator; must be exactly "DELETE".

        Returns:
            Deletion result.

        Raises:
            ValidationError: Confirmation missing or wrong. Nothing is touched.
            RecordNotFoundError: If the user does not exist.
            DependencyWriteError: A dependent row could not be removed. The
                user record is kept and the call can be repeated.
        """
        require_hard_delete_confirmation(confirmation)
        await self._get_user(user_id)

        for rel in self._relations:
            await self._remove_dependents(user_id, rel)

        remaining = await self.get_user_dependencies(user_id)
        if remaining.total_impact:
            raise DependencyWriteError(
                "User still has dependent records",
                compensated=False,
                details={"user_id": user_id, "remaining": remaining.dependencies},
            )

        await self._store.delete(Collections.USERS, user_id)

        logger.warning("User hard deleted: %s", user_id)

        return DeletionResult(mode=DeletionMode.HARD, user_id=user_id)

    async def delete_user(
        self,
        user_id: str,
        mode: DeletionMode | str,
        confirmation: str | None = None,
    ) -> DeletionResult:
        """Dispatch the legacy ``?mode=soft|hard`` delete to the explicit operation."""
        try:
            mode = DeletionMode(mode)
        except ValueError as e:
            raise ValidationError(
                f"Unknown deletion mode: {mode}", details={"field": "mode"}
            ) from e

        if mode is DeletionMode.HARD:
            return await self.hard_delete_user(user_id, confirmation)
        return await self.soft_delete_user(user_id)

    async def reassign_classes(
        self,
        old_teacher_id: str,
        new_teacher_id: str,
        class_ids: list[str],
    ) -> ReassignmentResult:
        """Move class assignments from one teacher to another.

        Every row is checked before the first write. The new teacher gets a
        subject edge for any subject of the moved rows it does not teach yet.

        Args:
            old_teacher_id: Teacher currently holding the classes.
            new_teacher_id: Teacher taking them over.
            class_ids: Ids of ``teacher_classes`` rows to move.

        Returns:
            Reassignment result.

        Raises:
            ValidationError: Bad teacher or a row not held by the old teacher.
            DependencyWriteError: A row update failed. Rows already moved are
                listed in ``details["reassigned"]``, the rest in ``details["pending"]``;
                repeating the call with the pending ids finishes the move.
        """
        if not class_ids:
            raise ValidationError("No classes to reassign", details={"field": "class_ids"})
        if old_teacher_id == new_teacher_id:
            raise ValidationError(
                "Classes cannot be reassigned to the same teacher",
                details={"field": "new_teacher_id"},
            )

        await self._require_replacement_teacher(new_teacher_id)

        rows = []
        for class_id in dict.fromkeys(class_ids):
            try:
                row = await self._store.get(Collections.TEACHER_CLASSES, class_id)
            except RecordNotFoundError as e:
                raise ValidationError(
                    f"Class assignment {class_id} not found",
                    details={"class_id": class_id},
                ) from e
            if row.get("teacher_id") != old_teacher_id:
                raise ValidationError(
                    f"Class assignment {class_id} does not belong to teacher {old_teacher_id}",
                    details={"class_id": class_id, "teacher_id": row.get("teacher_id")},
                )
            rows.append(row)

        edges_created = await self._ensure_subject_edges(
            new_teacher_id, [r.get("subject_id") for r in rows]
        )

        reassigned: list[str] = []
        for row in rows:
            try:
                await self._store.update(
                    Collections.TEACHER_CLASSES, row["id"], {"teacher_id": new_teacher_id}
                )
            except PortalError as e:
                logger.error(
                    "Reassignment stopped: from=%s, to=%s, moved=%s, error=%s",
                    old_teacher_id,
                    new_teacher_id,
                    reassigned,
                    e.message,
                )
                raise DependencyWriteError(
                    f"Failed to reassign class {row['id']}: {e.message}",
                    original=e,
                    compensated=False,
                    details={
                        "old_teacher_id": old_teacher_id,
                        "new_teacher_id": new_teacher_id,
                        "failed": row["id"],
                        "reassigned": reassigned,
                        "pending": [r["id"] for r in rows if r["id"] not in reassigned],
                        "subject_edges_created": edges_created,
                    },
                ) from e
            reassigned.append(row["id"])

        logger.info(
            "Classes reassigned: from=%s, to=%s, count=%d",
            old_teacher_id,
            new_teacher_id,
            len(reassigned),
        )

        return ReassignmentResult(
            old_teacher_id=old_teacher_id,
            new_teacher_id=new_teacher_id,
            reassigned=reassigned,
            subject_edges_created=edges_created,
        )

    async def soft_delete_with_reassignment(
        self,
        user_id: str,
        reassignments: dict[str, str],
    ) -> SoftDeleteWithReassignmentResult:
        """Reassign classes, then soft delete the user.

        Args:
            user_id: Teacher being removed.
            reassignments: ``teacher_classes`` row id -> replacement teacher id.

        Returns:
            Reassignment results per replacement teacher and the deletion.
        """
        by_teacher: dict[str, list[str]] = {}
        for class_id, new_teacher_id in reassignments.items():
            by_teacher.setdefault(new_teacher_id, []).append(class_id)

        results = [
            await self.reassign_classes(user_id, new_teacher_id, class_ids)
            for new_teacher_id, class_ids in by_teacher.items()
        ]
        deletion = await self.soft_delete_user(user_id)

        return SoftDeleteWithReassignmentResult(deletion=deletion, reassignments=results)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_user(self, user_id: str) -> User:
        record = await self._store.get(Collections.USERS, user_id)
        return User.from_record(record)

    async def _require_replacement_teacher(self, teacher_id: str) -> None:
        try:
            teacher = await self._get_user(teacher_id)
        except RecordNotFoundError as e:
            raise ValidationError(
                f"Replacement teacher {teacher_id} not found",
                details={"field": "new_teacher_id"},
            ) from e
        if teacher.role != UserRole.TEACHER.value or not teacher.active:
            raise ValidationError(
                f"User {teacher_id} is not an active teacher",
                details={"field": "new_teacher_id"},
            )

    async def _ensure_subject_edges(
        self, teacher_id: str, subject_ids: list[str | None]
    ) -> list[str]:
        """Create missing teacher_subjects edges; return the new subject ids."""
        wanted = [s for s in dict.fromkeys(subject_ids) if s]
        if not wanted:
            return []

        existing = await self._store.list(
            Collections.TEACHER_SUBJECTS, filter=filters.eq("teacher_id", teacher_id)
        )
        have = {r.get("subject_id") for r in existing}

        created = []
        for subject_id in wanted:
            if subject_id in have:
                continue
            await self._store.create(
                Collections.TEACHER_SUBJECTS,
                {"teacher_id": teacher_id, "subject_id": subject_id},
            )
            created.append(subject_id)
        return created

    async def _remove_dependents(self, user_id: str, rel: DependencyRelation) -> None:
        """Delete or detach every row of one relation pointing at the user."""
        try:
            rows = await self._store.list(rel.collection, filter=filters.eq(rel.field, user_id))
            for row in rows:
                if rel.on_hard_delete == "nullify":
                    await self._store.update(rel.collection, row["id"], {rel.field: ""})
                else:
                    await self._store.delete(rel.collection, row["id"])
        except PortalError as e:
            logger.error(
                "Hard delete stopped: user=%s, kind=%s, error=%s", user_id, rel.kind, e.message
            )
            raise DependencyWriteError(
                f"Failed to remove {rel.kind} of user {user_id}: {e.message}",
                original=e,
                compensated=False,
                details={"user_id": user_id, "kind": rel.kind},
            ) from e
