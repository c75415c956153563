"""
Issue endpoints.

One resource path, ``/api/issues/{project}``, supports listing with
query-string filters, creating, updating and deleting issues.  Every
response uses HTTP 200: business errors such as a missing ``_id`` are
reported as ``{"error": ...}`` in the body, which existing clients
rely on.  Request bodies are read as plain JSON and validated here, so
a body that is not an object behaves like an empty one.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Request

from issue_tracker_api.app.schemas.issue import IssueCreate, IssueDelete, IssueRead, IssueUpdate, parse_body
from issue_tracker_api.app.services.issue_service import IssueStore

router = APIRouter()


def get_issue_store(request: Request) -> IssueStore:
    """Return the issue store attached to the running application."""
    return request.app.state.issue_store


@router.get("/{project}", response_model=List[IssueRead])
async def list_issues(
    project: str,
    request: Request,
    store: IssueStore = Depends(get_issue_store),
) -> List[IssueRead]:
    """List the issues of a project.

    Every query parameter is a filter: only issues whose field of that
    name has the given value are returned, e.g.
    ``?open=true&assigned_to=Joe``.
    """
    criteria = dict(request.query_params)
    return store.list_issues(project, criteria)


@router.post("/{project}")
async def create_issue(
    project: str,
    body: Any = Body(None),
    store: IssueStore = Depends(get_issue_store),
) -> Dict[str, Any]:
    """Create an issue and return the stored record."""
    outcome = store.create_issue(project, parse_body(IssueCreate, body))
    return outcome.to_body()


@router.put("/{project}")
async def update_issue(
    project: str,
    body: Any = Body(None),
    store: IssueStore = Depends(get_issue_store),
) -> Dict[str, Any]:
    """Update the fields sent in the body on the issue named by ``_id``."""
    outcome = store.update_issue(project, parse_body(IssueUpdate, body))
    return outcome.to_body()


@router.delete("/{project}")
async def delete_issue(
    project: str,
    body: Any = Body(None),
    store: IssueStore = Depends(get_issue_store),
) -> Dict[str, Any]:
    """Delete the issue named by ``_id``."""
    outcome = store.delete_issue(project, parse_body(IssueDelete, body))
    return outcome.to_body()
