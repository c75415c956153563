"""
Functional tests for the ``/api/issues/{project}`` routes.

Every response is expected to be HTTP 200, with business errors
reported in the JSON body.
"""

import re

import pytest

from issue_tracker_api.app.main import create_app
from issue_tracker_api.app.services.issue_service import IssueStore

PROJECT = "apitest"
URL = f"/api/issues/{PROJECT}"
HEX_ID = re.compile(r"^[0-9a-f]{24}$")

ISSUE_FIELDS = {
    "_id",
    "issue_title",
    "issue_text",
    "created_on",
    "updated_on",
    "created_by",
    "assigned_to",
    "open",
    "status_text",
}


def create_issue(client, **overrides):
    payload = {
        "issue_title": "Test Issue",
        "issue_text": "This is a test issue",
        "created_by": "functional tests",
        "assigned_to": "dev",
        "status_text": "in QA",
    }
    payload.update(overrides)
    response = client.post(URL, json=payload)
    assert response.status_code == 200
    return response.json()


def delete(client, url, body=None):
    if body is None:
        return client.request("DELETE", url)
    return client.request("DELETE", url, json=body)


class TestCreateIssue:
    def test_every_field(self, client):
        payload = {
            "issue_title": "Every Field",
            "issue_text": "Full payload",
            "created_by": "functional tests",
            "assigned_to": "dev-1",
            "status_text": "triage",
        }

        response = client.post(URL, json=payload)

        assert response.status_code == 200
        body = response.json()
        assert set(body) == ISSUE_FIELDS
        for key, value in payload.items():
            assert body[key] == value
        assert body["open"] is True
        assert body["created_on"] == body["updated_on"]
        assert HEX_ID.match(body["_id"])

    def test_only_required_fields(self, client):
        response = client.post(
            URL,
            json={"issue_title": "Only Required", "issue_text": "No optional fields", "created_by": "functional tests"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["assigned_to"] == ""
        assert body["status_text"] == ""
        assert body["open"] is True

    def test_missing_required_fields(self, client):
        response = client.post(URL, json={"issue_title": "Missing fields", "created_by": "functional tests"})

        assert response.status_code == 200
        assert response.json() == {"error": "required field(s) missing"}
        assert client.get(URL).json() == []

    def test_empty_body(self, client):
        response = client.post(URL)

        assert response.status_code == 200
        assert response.json() == {"error": "required field(s) missing"}

    @pytest.mark.parametrize("body", [[1, 2], "text", 7])
    def test_non_object_body(self, client, body):
        response = client.post(URL, json=body)

        assert response.status_code == 200
        assert response.json() == {"error": "required field(s) missing"}

    def test_object_valued_field(self, client):
        response = client.post(
            URL, json={"issue_title": "T", "issue_text": "X", "created_by": "U", "assigned_to": {"name": "joe"}}
        )

        assert response.status_code == 200
        assert response.json()["assigned_to"] == ""


class TestListIssues:
    def test_view_issues(self, client):
        create_issue(client)

        response = client.get(URL)

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert set(body[0]) == ISSUE_FIELDS

    def test_unknown_project(self, client):
        response = client.get("/api/issues/never-used")

        assert response.status_code == 200
        assert response.json() == []

    def test_one_filter(self, client):
        create_issue(client)
        closed = create_issue(client)
        client.put(URL, json={"_id": closed["_id"], "open": False})

        body = client.get(URL, params={"open": "true"}).json()

        assert len(body) == 1
        assert all(issue["open"] is True for issue in body)

    def test_multiple_filters(self, client):
        create_issue(client, created_by="functional tests")
        create_issue(client, created_by="someone else")
        closed = create_issue(client, created_by="functional tests")
        client.put(URL, json={"_id": closed["_id"], "open": "false"})

        body = client.get(URL, params={"open": "true", "created_by": "functional tests"}).json()

        assert len(body) == 1
        assert body[0]["open"] is True
        assert body[0]["created_by"] == "functional tests"

    def test_unknown_filter_field(self, client):
        create_issue(client)

        assert client.get(URL, params={"priority": "high"}).json() == []


class TestUpdateIssue:
    def test_one_field(self, client):
        issue = create_issue(client)

        response = client.put(URL, json={"_id": issue["_id"], "assigned_to": "dev-2"})

        assert response.status_code == 200
        assert response.json() == {"result": "successfully updated", "_id": issue["_id"]}
        stored = client.get(URL, params={"_id": issue["_id"]}).json()[0]
        assert stored["assigned_to"] == "dev-2"
        assert stored["status_text"] == "in QA"
        assert stored["created_on"] == issue["created_on"]

    def test_multiple_fields(self, client):
        issue = create_issue(client)

        response = client.put(
            URL,
            json={"_id": issue["_id"], "issue_title": "Updated Title", "status_text": "verified", "open": False},
        )

        assert response.json() == {"result": "successfully updated", "_id": issue["_id"]}
        stored = client.get(URL, params={"_id": issue["_id"]}).json()[0]
        assert stored["issue_title"] == "Updated Title"
        assert stored["status_text"] == "verified"
        assert stored["open"] is False

    def test_missing_id(self, client):
        response = client.put(URL, json={"issue_text": "no id here"})

        assert response.status_code == 200
        assert response.json() == {"error": "missing _id"}

    def test_no_fields(self, client):
        issue = create_issue(client)

        response = client.put(URL, json={"_id": issue["_id"]})

        assert response.status_code == 200
        assert response.json() == {"error": "no update field(s) sent", "_id": issue["_id"]}

    @pytest.mark.parametrize(
        "fields",
        [{"open": "maybe"}, {"status_text": None}, {"status_text": {"a": 1}}],
    )
    def test_sent_field_with_unstorable_value(self, client, fields):
        issue = create_issue(client)

        response = client.put(URL, json={"_id": issue["_id"], **fields})

        assert response.status_code == 200
        assert response.json() == {"result": "successfully updated", "_id": issue["_id"]}
        stored = client.get(URL, params={"_id": issue["_id"]}).json()[0]
        assert stored["open"] is True
        assert stored["status_text"] == "in QA"

    def test_non_object_body(self, client):
        response = client.put(URL, json=["_id"])

        assert response.status_code == 200
        assert response.json() == {"error": "missing _id"}

    def test_invalid_id(self, client):
        bad_id = "000000000000000000000000"

        response = client.put(URL, json={"_id": bad_id, "issue_title": "won't work"})

        assert response.status_code == 200
        assert response.json() == {"error": "could not update", "_id": bad_id}


class TestDeleteIssue:
    def test_delete(self, client):
        issue = create_issue(client, issue_title="To Delete")

        response = delete(client, URL, {"_id": issue["_id"]})

        assert response.status_code == 200
        assert response.json() == {"result": "successfully deleted", "_id": issue["_id"]}
        assert client.get(URL, params={"_id": issue["_id"]}).json() == []

    def test_invalid_id(self, client):
        bad_id = "000000000000000000000000"

        response = delete(client, URL, {"_id": bad_id})

        assert response.status_code == 200
        assert response.json() == {"error": "could not delete", "_id": bad_id}

    @pytest.mark.parametrize("body", [{}, None])
    def test_missing_id(self, client, body):
        response = delete(client, URL, body)

        assert response.status_code == 200
        assert response.json() == {"error": "missing _id"}


def test_end_to_end_open_flag(client):
    created = client.post("/api/issues/p1", json={"issue_title": "T", "issue_text": "X", "created_by": "U"}).json()

    assert created["issue_title"] == "T"
    assert created["issue_text"] == "X"
    assert created["created_by"] == "U"
    assert created["assigned_to"] == ""
    assert created["status_text"] == ""
    assert created["open"] is True
    assert created["created_on"] == created["updated_on"]
    assert HEX_ID.match(created["_id"])

    updated = client.put("/api/issues/p1", json={"_id": created["_id"], "open": "false"}).json()
    assert updated == {"result": "successfully updated", "_id": created["_id"]}

    closed = client.get("/api/issues/p1", params={"open": "false"}).json()
    still_open = client.get("/api/issues/p1", params={"open": "true"}).json()
    assert created["_id"] in [issue["_id"] for issue in closed]
    assert created["_id"] not in [issue["_id"] for issue in still_open]


def test_apps_do_not_share_issues(client):
    create_issue(client)

    other = create_app()
    store = other.state.issue_store

    assert isinstance(store, IssueStore)
    assert store.list_issues(PROJECT) == []
