from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from issue_tracker_api.app.main import create_app
from issue_tracker_api.app.services.issue_service import IssueStore


class TickingClock:
    """Clock that advances one second every time it is read."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock) -> IssueStore:
    return IssueStore(clock=clock)


@pytest.fixture
def client() -> Iterator[TestClient]:
    app = create_app(IssueStore())
    with TestClient(app) as test_client:
        yield test_client
