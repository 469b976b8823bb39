# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Compensation scope for multi-step writes.

The record store has no transactions spanning collections, so a write that
touches several collections registers an undo action after each successful
step. If a later step fails the undo actions run in reverse order.

Example:
    >>> async with CompensationScope("student enrollment") as scope:
    ...     user = await store.create("users", {...})
    ...     scope.push("delete user", lambda: store.delete("users", user["id"]))
    ...     await store.create("user_profiles", {...})
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any

logger = logging.getLogger(__name__)

UndoAction = Callable[[], Awaitable[Any]]


@dataclass
class CompensationFailure:
    """An undo action that raised."""

    description: str
    error: BaseException


@dataclass
class CompensationScope:
    """Stack of undo actions for one multi-step operation.

    Leaving the scope normally discards the stack. Leaving it with an
    exception unwinds whatever is still on the stack and lets the exception
    propagate. unwind() can also be called explicitly when the caller needs
    to know whether compensation succeeded before raising.

    Attributes:
        name: Operation name used in log messages.
        failures: Undo actions that raised during unwind.
        compensated: None until unwind ran, then whether every action succeeded.
    """

    name: str
    failures: list[CompensationFailure] = field(default_factory=list)
    compensated: bool | None = None
    _actions: list[tuple[str, UndoAction]] = field(default_factory=list, repr=False)

    def push(self, description: str, action: UndoAction) -> None:
        """Register the undo action for a step that just succeeded."""
        self._actions.append((description, action))

    @property
    def pending(self) -> int:
        """Number of undo actions that would run on unwind."""
        return len(self._actions)

    def commit(self) -> None:
        """Forget all undo actions; the operation is complete."""
        self._actions.clear()

    async def unwind(self) -> bool:
        """Run pending undo actions, most recent first.

        Every action is attempted even when an earlier one fails. Failures are
        logged and collected in ``failures``; nothing is raised.

        Returns:
            True if every undo action succeeded.
        """
        ok = True
        while self._actions:
            description, action = self._actions.pop()
            try:
                await action()
            except Exception as e:
                ok = False
                self.failures.append(CompensationFailure(description, e))
                logger.error(
                    "Compensation step failed: operation=%s, step=%s, error=%s",
                    self.name,
                    description,
                    e,
                )
            else:
                logger.info(
                    "Compensation step done: operation=%s, step=%s",
                    self.name,
                    description,
                )
        self.compensated = ok
        return ok

    async def __aenter__(self) -> "CompensationScope":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc_type is None:
            self.commit()
        elif self._actions:
            await self.unwind()
        return False
