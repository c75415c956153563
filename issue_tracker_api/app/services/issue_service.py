"""
In-memory issue store.

Issues are grouped by project name.  Each project maps to a list of
issues kept in insertion order; a project that has never been seen is
created empty the first time it is referenced.  Nothing is persisted:
the table lives as long as the ``IssueStore`` instance that owns it.

Every operation returns an :class:`IssueOutcome` instead of raising, so
the HTTP layer can report business errors in the response body.  All
access to the table happens under one lock, which keeps the
find-then-mutate steps of update and delete atomic if the store is
used from several threads.
"""

from __future__ import annotations

import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from issue_tracker_api.app.schemas.issue import (
    IssueCreate,
    IssueDelete,
    IssueErrorCode,
    IssueMessage,
    IssueOutcome,
    IssueRead,
    IssueUpdate,
    normalize_boolean,
)


logger = logging.getLogger(__name__)


def generate_issue_id() -> str:
    """Return a random 24-character lowercase hexadecimal identifier."""
    return secrets.token_hex(12)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_string(value: Any) -> str:
    """String form of a value as it appears in a JSON response."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _matches(issue: IssueRead, criteria: Mapping[str, Any]) -> bool:
    fields = issue.model_dump(mode="json", by_alias=True)
    for key, expected in criteria.items():
        # Unknown or unset fields never match
        if fields.get(key) is None:
            return False
        if _as_string(fields[key]) != _as_string(expected):
            return False
    return True


class IssueStore:
    """Project-scoped issue table with list, create, update and delete.

    Parameters
    ----------
    clock : Optional[Callable[[], datetime]]
        Source of the current time for ``created_on``/``updated_on``.
        Defaults to the UTC wall clock.
    id_factory : Optional[Callable[[], str]]
        Generator for new issue identifiers.  Defaults to
        :func:`generate_issue_id`.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._projects: Dict[str, List[IssueRead]] = {}
        self._lock = threading.Lock()
        self._clock = clock or _utcnow
        self._id_factory = id_factory or generate_issue_id

    def _issues(self, project: str) -> List[IssueRead]:
        # Caller must hold the lock
        return self._projects.setdefault(project, [])

    def _find(self, issues: List[IssueRead], issue_id: str) -> int:
        for index, issue in enumerate(issues):
            if issue.id == issue_id:
                return index
        return -1

    def _new_id(self, issues: List[IssueRead]) -> str:
        taken = {issue.id for issue in issues}
        issue_id = self._id_factory()
        while issue_id in taken:
            issue_id = self._id_factory()
        return issue_id

    def list_issues(self, project: str, criteria: Optional[Mapping[str, Any]] = None) -> List[IssueRead]:
        """Return the issues of ``project`` matching every criterion.

        Each criterion names a field and the value it must have; values
        are compared by their string form.  An ``open`` criterion of
        ``"true"`` or ``"false"`` matches the boolean flag.  With no
        criteria all issues are returned in insertion order.
        """
        criteria = dict(criteria or {})
        if "open" in criteria:
            criteria["open"] = normalize_boolean(criteria["open"])
        with self._lock:
            issues = [issue.model_copy() for issue in self._issues(project)]
        if not criteria:
            return issues
        return [issue for issue in issues if _matches(issue, criteria)]

    def create_issue(self, project: str, data: IssueCreate) -> IssueOutcome:
        """Add a new open issue to ``project`` and return it."""
        if not (data.issue_title and data.issue_text and data.created_by):
            logger.info("Rejected issue for project %s: required field(s) missing", project)
            return IssueOutcome.failure(IssueErrorCode.REQUIRED_FIELDS_MISSING)
        now = self._clock()
        with self._lock:
            issues = self._issues(project)
            issue = IssueRead(
                id=self._new_id(issues),
                issue_title=data.issue_title,
                issue_text=data.issue_text,
                created_by=data.created_by,
                assigned_to=data.assigned_to or "",
                status_text=data.status_text or "",
                open=True,
                created_on=now,
                updated_on=now,
            )
            issues.append(issue)
        logger.info("Created issue %s in project %s", issue.id, project)
        return IssueOutcome.success(issue.model_copy())

    def update_issue(self, project: str, data: IssueUpdate) -> IssueOutcome:
        """Apply the fields sent in ``data`` to an existing issue.

        Fields absent from the request keep their current value, and so
        do sent fields whose value cannot be stored.  The issue's
        ``updated_on`` always moves forward on success.
        """
        if not data.id:
            return IssueOutcome.failure(IssueErrorCode.MISSING_ID)
        if not data.sent_fields():
            return IssueOutcome.failure(IssueErrorCode.NO_UPDATE_FIELDS, data.id)
        with self._lock:
            issues = self._issues(project)
            index = self._find(issues, data.id)
            if index == -1:
                logger.info("Could not update issue %s in project %s: not found", data.id, project)
                return IssueOutcome.failure(IssueErrorCode.COULD_NOT_UPDATE, data.id)
            current = issues[index]
            now = self._clock()
            if now <= current.updated_on:
                now = current.updated_on + timedelta(microseconds=1)
            changes = data.changes()
            issues[index] = current.model_copy(update={**changes, "updated_on": now})
        logger.info("Updated issue %s in project %s: %s", data.id, project, sorted(data.sent_fields()))
        return IssueOutcome.success(IssueMessage(result="successfully updated", id=data.id))

    def delete_issue(self, project: str, data: IssueDelete) -> IssueOutcome:
        """Remove an issue from ``project``."""
        if not data.id:
            return IssueOutcome.failure(IssueErrorCode.MISSING_ID)
        with self._lock:
            issues = self._issues(project)
            index = self._find(issues, data.id)
            if index == -1:
                logger.info("Could not delete issue %s in project %s: not found", data.id, project)
                return IssueOutcome.failure(IssueErrorCode.COULD_NOT_DELETE, data.id)
            del issues[index]
        logger.info("Deleted issue %s from project %s", data.id, project)
        return IssueOutcome.success(IssueMessage(result="successfully deleted", id=data.id))
