"""
Duplicate review session - functional core for the duplicate review workflow.

A ReviewSession walks one user through the groups of a single scan, one group
at a time. It handles:
- Running the scan and entering review (or completing straight away when the
  scan finds nothing)
- Selecting transactions of the current group for deletion
- Deleting the selection, keeping every member, or stepping back a group
- Building the final summary

The session is an explicit state value, one of:

    Idle -> Scanning -> Reviewing -> Complete
             |  ^
             v  |
        Idle(error)

Actions that do not fit the current state raise InvalidTransition. Only one
action may be in flight at a time; a second caller gets SessionBusyError.
Nothing is persisted: a new review always starts a new session and a new scan.

NO IMPORTS FROM:
- rich (console, table, prompt)
- typer

All dependencies are injected. All functions return data structures.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Iterator, Union

from ledger_dupes.errors import (
    DeletionFailure,
    InvalidTransition,
    InvariantViolation,
    SessionBusyError,
    UnknownTransactionError,
)
from ledger_dupes.model.duplicate import DuplicateCandidateGroup, GroupMember
from ledger_dupes.services.deletion_service import DeletionExecutor
from ledger_dupes.services.scan_service import DuplicateScanService

logger = logging.getLogger(__name__)


class SessionStatus(StrEnum):
    IDLE = "idle"
    SCANNING = "scanning"
    REVIEWING = "reviewing"
    COMPLETE = "complete"


@dataclass(frozen=True)
class ReviewSummary:
    """Final counts of a duplicate review session."""

    total_groups: int
    groups_resolved: int
    transactions_deleted: int
    scanned_transactions: int


@dataclass(frozen=True)
class Idle:
    """No scan yet, or the last scan failed (error is set)."""

    error: str | None = None
    status: SessionStatus = field(default=SessionStatus.IDLE, init=False)


@dataclass(frozen=True)
class Scanning:
    """Scan request in flight."""

    status: SessionStatus = field(default=SessionStatus.SCANNING, init=False)


@dataclass(frozen=True)
class Reviewing:
    """Walking through the groups of one scan."""

    groups: tuple[DuplicateCandidateGroup, ...]
    scanned_transactions: int
    index: int = 0
    selection: frozenset[str] = frozenset()
    resolved_group_ids: frozenset[str] = frozenset()
    deleted_ids: frozenset[str] = frozenset()
    transactions_deleted: int = 0
    pending_delete: bool = False
    status: SessionStatus = field(default=SessionStatus.REVIEWING, init=False)

    @property
    def current_group(self) -> DuplicateCandidateGroup:
        return self.groups[self.index]

    @property
    def remaining_members(self) -> list[GroupMember]:
        """Members of the current group not deleted earlier in this session."""
        return [m for m in self.current_group.transactions if m.id not in self.deleted_ids]

    @property
    def can_delete(self) -> bool:
        """At least one selected and at least one survivor."""
        return 0 < len(self.selection) < len(self.remaining_members)

    @property
    def is_last_group(self) -> bool:
        return self.index == len(self.groups) - 1

    @property
    def groups_resolved(self) -> int:
        return len(self.resolved_group_ids)


@dataclass(frozen=True)
class Complete:
    """Terminal state. The summary is final."""

    summary: ReviewSummary
    status: SessionStatus = field(default=SessionStatus.COMPLETE, init=False)


SessionState = Union[Idle, Scanning, Reviewing, Complete]


class ReviewSession:
    """
    Process-local duplicate review workflow for one user.

    Responsibilities:
    - Drive the scan and hold its groups
    - Track the current group, its selection, and running totals
    - Enforce the at-least-one-survivor rule before contacting the store
    - Delegate deletion to the DeletionExecutor

    Does NOT:
    - Display anything or prompt for input
    - Persist anything besides the deletions it requests
    - Refresh the scanned data mid-session
    """

    def __init__(
        self,
        scan_service: DuplicateScanService,
        executor: DeletionExecutor,
        user_id: str,
        min_confidence: int = 0,
    ):
        """
        Initialize an empty session.

        Args:
            scan_service: Runs the duplicate scan
            executor: Deletes selected transactions
            user_id: Identity of the reviewing user, threaded into scan and delete
            min_confidence: Groups scoring below this are left out of the review
        """
        self.scan_service = scan_service
        self.executor = executor
        self.user_id = user_id
        self.min_confidence = min_confidence
        self._state: SessionState = Idle()
        self._discarded = False
        self._in_flight = threading.Lock()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def is_discarded(self) -> bool:
        return self._discarded

    @property
    def is_busy(self) -> bool:
        return self._in_flight.locked()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_scan(self) -> SessionState:
        """
        Run the scan: Idle -> Scanning -> Reviewing | Complete.

        On failure the session returns to Idle with the error recorded and
        the error is re-raised; calling start_scan again retries.

        Returns:
            The new state

        Raises:
            InvalidTransition: if the session is not idle
            ScanFailure: if the scan fails (other errors propagate as raised)
        """
        with self._action():
            if not isinstance(self._state, Idle):
                raise InvalidTransition(f"Cannot start a scan while {self.status}")

            self._state = Scanning()
            try:
                result = self.scan_service.scan(self.user_id)
            except Exception as exc:
                logger.warning("Scan failed for user %s: %s", self.user_id, exc)
                if not self._discarded:
                    self._state = Idle(error=str(exc))
                raise

            if self._discarded:
                logger.info("Ignoring scan result for discarded session")
                return self._state

            result = result.with_min_confidence(self.min_confidence)
            if result.is_empty:
                self._state = Complete(
                    summary=ReviewSummary(
                        total_groups=0,
                        groups_resolved=0,
                        transactions_deleted=0,
                        scanned_transactions=result.scanned_transactions,
                    )
                )
            else:
                self._state = Reviewing(
                    groups=tuple(result.duplicate_groups),
                    scanned_transactions=result.scanned_transactions,
                )
            return self._state

    def toggle(self, transaction_id: str) -> frozenset[str]:
        """
        Add or remove a transaction from the current group's selection.

        Returns:
            The new selection

        Raises:
            UnknownTransactionError: if the id is not a remaining member of
                the current group
        """
        with self._action():
            state = self._require_reviewing("toggle")
            if transaction_id not in {m.id for m in state.remaining_members}:
                raise UnknownTransactionError(
                    f"Transaction {transaction_id} is not in the current group"
                )
            selection = state.selection ^ {transaction_id}
            self._state = replace(state, selection=selection)
            return selection

    def keep_all(self) -> SessionState:
        """Resolve the current group without deleting anything and advance."""
        with self._action():
            state = self._require_reviewing("keep all")
            self._state = self._advance(replace(state, selection=frozenset()))
            return self._state

    def delete_selected_and_advance(self) -> SessionState:
        """
        Delete the selected transactions, then resolve the group and advance.

        The selection must be non-empty and leave at least one member of the
        group standing; otherwise the store is never contacted. If deletion
        fails the current group stays active with its selection intact.

        Returns:
            The new state

        Raises:
            InvariantViolation: if nothing is selected or nothing would survive
            DeletionFailure: if the store rejects the batch
        """
        with self._action():
            state = self._require_reviewing("delete")
            if not state.selection:
                raise InvariantViolation("Select at least one transaction to delete")
            if len(state.selection) >= len(state.remaining_members):
                raise InvariantViolation("At least one transaction in the group must remain")

            ids = [m.id for m in state.remaining_members if m.id in state.selection]
            self._state = replace(state, pending_delete=True)
            try:
                deleted = self.executor.execute(self.user_id, ids)
            except DeletionFailure:
                if not self._discarded:
                    self._state = state
                raise

            if self._discarded:
                return self._state

            self._state = self._advance(
                replace(
                    state,
                    selection=frozenset(),
                    deleted_ids=state.deleted_ids | set(ids),
                    transactions_deleted=state.transactions_deleted + deleted,
                )
            )
            return self._state

    def previous(self) -> SessionState:
        """Step back one group. The selection is cleared."""
        with self._action():
            state = self._require_reviewing("go back")
            if state.index == 0:
                raise InvalidTransition("Already at the first group")
            self._state = replace(state, index=state.index - 1, selection=frozenset())
            return self._state

    def acknowledge(self) -> ReviewSummary:
        """Return the final summary of a complete session and discard it."""
        with self._action():
            if not isinstance(self._state, Complete):
                raise InvalidTransition(f"Cannot acknowledge while {self.status}")
            summary = self._state.summary
        self.discard()
        return summary

    def discard(self) -> None:
        """
        Close the session.

        In-flight store calls are not cancelled; their results are ignored.
        """
        self._discarded = True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _action(self) -> Iterator[None]:
        if self._discarded:
            raise InvalidTransition("Session has been discarded")
        if not self._in_flight.acquire(blocking=False):
            raise SessionBusyError("Another action is still in progress")
        try:
            yield
        finally:
            self._in_flight.release()

    def _require_reviewing(self, action: str) -> Reviewing:
        state = self._state
        if not isinstance(state, Reviewing):
            raise InvalidTransition(f"Cannot {action} while {self.status}")
        return state

    @staticmethod
    def _advance(state: Reviewing) -> SessionState:
        resolved = state.resolved_group_ids | {state.current_group.id}
        if not state.is_last_group:
            return replace(state, index=state.index + 1, resolved_group_ids=resolved)
        return Complete(
            summary=ReviewSummary(
                total_groups=len(state.groups),
                groups_resolved=len(resolved),
                transactions_deleted=state.transactions_deleted,
                scanned_transactions=state.scanned_transactions,
            )
        )


__all__ = [
    "ReviewSession",
    "ReviewSummary",
    "SessionState",
    "SessionStatus",
    "Idle",
    "Scanning",
    "Reviewing",
    "Complete",
]
