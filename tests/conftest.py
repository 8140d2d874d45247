# tests/conftest.py
from typing import Callable, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from autoload.core.config import LoaderConfig
from autoload.main import create_app
from autoload.models.load import LoadDestination, LoadOptions, LoadStatus, SourceReference


class FakeLoadJob:
    def __init__(
        self,
        job_id: str,
        wait_error: Optional[Exception],
        job_error: Optional[str],
        before_wait: Optional[Callable[[], None]] = None,
    ):
        self.job_id = job_id
        self.before_wait = before_wait
        self.wait_error = wait_error
        self.job_error = job_error
        self.wait_calls = 0

    def wait(self) -> LoadStatus:
        self.wait_calls += 1
        if self.before_wait is not None:
            self.before_wait()
        if self.wait_error is not None:
            raise self.wait_error
        if self.job_error is not None:
            return LoadStatus(job_id=self.job_id, error=self.job_error)
        return LoadStatus(job_id=self.job_id, output_rows=3)


class FakeLoadEngine:
    """Records every submission; failures are switched on per test."""

    def __init__(self):
        self.submissions: List[Tuple[SourceReference, LoadDestination, LoadOptions]] = []
        self.jobs: List[FakeLoadJob] = []
        self.submit_error: Optional[Exception] = None
        self.wait_error: Optional[Exception] = None
        self.job_error: Optional[str] = None
        self.before_wait: Optional[Callable[[], None]] = None

    def submit_load(self, source, destination, options) -> FakeLoadJob:
        if self.submit_error is not None:
            raise self.submit_error
        self.submissions.append((source, destination, options))
        job = FakeLoadJob(
            f"job-{len(self.jobs) + 1}", self.wait_error, self.job_error, self.before_wait
        )
        self.jobs.append(job)
        return job


@pytest.fixture
def destination() -> LoadDestination:
    return LoadDestination(project="proj", dataset="ds", table="tbl")


@pytest.fixture
def config(destination) -> LoaderConfig:
    return LoaderConfig(destination=destination)


@pytest.fixture
def engine() -> FakeLoadEngine:
    return FakeLoadEngine()


@pytest.fixture
def client(config, engine) -> TestClient:
    return TestClient(create_app(config, engine))


def push_body(event_type: Optional[str] = "OBJECT_FINALIZE", bucket="b", obj="o.json", **message):
    attributes = {"bucketId": bucket, "objectId": obj}
    if event_type is not None:
        attributes["eventType"] = event_type
    msg = {"id": "1", "attributes": attributes}
    msg.update(message)
    return {"message": msg, "subscription": "projects/proj/subscriptions/autoload"}
