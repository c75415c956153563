"""
Pydantic schemas for issues.

An issue belongs to a project and carries a title, a description, the
name of its author, an optional assignee and status text, an ``open``
flag and two audit timestamps.  On the wire the identifier is exposed
as ``_id``; Pydantic does not allow leading underscores in field names
so the models use ``id`` with an alias.

Request bodies are deliberately lenient: every field is optional so
that missing values reach the issue store, which reports them as
business errors instead of HTTP validation failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Set, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


REQUIRED_FIELDS = ("issue_title", "issue_text", "created_by")

ModelT = TypeVar("ModelT", bound=BaseModel)


def normalize_boolean(value: Any) -> Any:
    """Map the strings ``"true"``/``"false"`` to booleans.

    Booleans and any other value are returned unchanged.
    """
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    return value


def _as_text(value: Any) -> Optional[str]:
    # Numbers are stored as their string form, integral floats without
    # a fractional part; zero counts as empty.  Objects and lists
    # cannot be stored in a text field and are dropped.
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        if not value:
            return ""
        if value is True:
            return "true"
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    return None


def parse_body(model: Type[ModelT], body: Any) -> ModelT:
    """Validate a request body, treating anything but an object as ``{}``."""
    if not isinstance(body, dict):
        body = {}
    return model.model_validate(body)


class IssueCreate(BaseModel):
    """Schema for creating a new issue.

    ``issue_title``, ``issue_text`` and ``created_by`` are required by
    the store; they are optional here so their absence can be reported
    as ``required field(s) missing``.
    """

    issue_title: Optional[str] = Field(None, description="Short title of the issue")
    issue_text: Optional[str] = Field(None, description="Full description of the issue")
    created_by: Optional[str] = Field(None, description="Name of the reporter")
    assigned_to: Optional[str] = Field(None, description="Name of the assignee")
    status_text: Optional[str] = Field(None, description="Free-form status note")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)


class IssueUpdate(BaseModel):
    """Schema for a partial update of an issue.

    Every updatable key present in the request body counts as sent,
    whatever its value.  Only values that fit the stored record are
    applied: ``null``, an ``open`` that is not a boolean, and an empty
    required text field leave the current value in place.
    """

    id: Optional[str] = Field(None, alias="_id")
    issue_title: Optional[str] = None
    issue_text: Optional[str] = None
    created_by: Optional[str] = None
    assigned_to: Optional[str] = None
    status_text: Optional[str] = None
    open: Optional[bool] = None

    @field_validator("id", "issue_title", "issue_text", "created_by", "assigned_to", "status_text", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)

    @field_validator("open", mode="before")
    @classmethod
    def coerce_open(cls, v):
        v = normalize_boolean(v)
        # Anything that is not a boolean after normalisation is ignored
        return v if isinstance(v, bool) else None

    def sent_fields(self) -> Set[str]:
        """Names of the updatable fields present in the request body."""
        return self.model_fields_set - {"id"}

    def changes(self) -> Dict[str, Any]:
        """Return the sent values that can be merged into an issue."""
        supplied = self.model_dump(include=self.sent_fields())
        return {
            key: value
            for key, value in supplied.items()
            if value is not None and not (value == "" and key in REQUIRED_FIELDS)
        }


class IssueDelete(BaseModel):
    """Schema for deleting an issue."""

    id: Optional[str] = Field(None, alias="_id")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)


class IssueRead(BaseModel):
    """Schema for reading a stored issue."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    issue_title: str
    issue_text: str
    created_by: str
    assigned_to: str = ""
    status_text: str = ""
    open: bool = True
    created_on: datetime
    updated_on: datetime


class IssueMessage(BaseModel):
    """Confirmation returned by a successful update or delete."""

    model_config = ConfigDict(populate_by_name=True)

    result: str
    id: str = Field(..., alias="_id")


class IssueErrorCode(str, Enum):
    """Business errors reported in the response body."""

    REQUIRED_FIELDS_MISSING = "required field(s) missing"
    MISSING_ID = "missing _id"
    NO_UPDATE_FIELDS = "no update field(s) sent"
    COULD_NOT_UPDATE = "could not update"
    COULD_NOT_DELETE = "could not delete"


@dataclass(frozen=True)
class IssueOutcome:
    """Result of a store operation: a payload or an error code."""

    payload: Optional[BaseModel] = None
    error: Optional[IssueErrorCode] = None
    issue_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, payload: BaseModel) -> "IssueOutcome":
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: IssueErrorCode, issue_id: Optional[str] = None) -> "IssueOutcome":
        return cls(error=error, issue_id=issue_id)

    def to_body(self) -> Dict[str, Any]:
        """Serialize to the JSON body sent to clients."""
        if self.ok:
            return self.payload.model_dump(mode="json", by_alias=True)
        body: Dict[str, Any] = {"error": self.error.value}
        if self.issue_id is not None:
            body["_id"] = self.issue_id
        return body
