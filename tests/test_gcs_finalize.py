# tests/test_gcs_finalize.py
import json

import pytest

from autoload.core.errors import (
    JobExecutionError,
    MalformedRequest,
    SubmissionError,
    WaitError,
)
from autoload.models.pubsub import PubSubPushEnvelope
from autoload.services.gcs_finalize import (
    LOAD_OPTIONS,
    decode_push_body,
    handle_gcs_finalize_push,
)
from tests.conftest import push_body


def _envelope(**kwargs) -> PubSubPushEnvelope:
    return PubSubPushEnvelope.model_validate(push_body(**kwargs))


def test_decode_push_body_reads_attributes():
    env = decode_push_body(json.dumps(push_body()).encode())

    assert env.message.id == "1"
    assert env.message.bucket_id == "b"
    assert env.message.object_id == "o.json"
    assert env.message.event_type == "OBJECT_FINALIZE"
    assert env.subscription == "projects/proj/subscriptions/autoload"


@pytest.mark.parametrize("raw", [b"{}", b"null", b'{"message": null}', b'{"message": {}}'])
def test_decode_push_body_tolerates_missing_fields(raw):
    env = decode_push_body(raw)

    assert env.message.attributes == {}
    assert env.message.event_type == ""
    assert env.message.data is None


def test_decode_push_body_rejects_garbage():
    with pytest.raises(MalformedRequest):
        decode_push_body(b"<xml/>")


def test_finalize_returns_status(engine, destination):
    status = handle_gcs_finalize_push(_envelope(), destination, engine)

    assert status.job_id == "job-1"
    assert status.output_rows == 3
    assert engine.submissions == [
        (engine.submissions[0][0], destination, LOAD_OPTIONS)
    ]


def test_skip_returns_none(engine, destination):
    assert handle_gcs_finalize_push(_envelope(event_type="OBJECT_DELETE"), destination, engine) is None
    assert engine.submissions == []


@pytest.mark.parametrize(
    "bucket,obj,uri",
    [
        ("b", "o.json", "gs://b/o.json"),
        ("logs", "2024/01/02/part-0001.ndjson", "gs://logs/2024/01/02/part-0001.ndjson"),
        ("b", "with space.json", "gs://b/with space.json"),
        ("", "", "gs:///"),
    ],
)
def test_source_uri_is_plain_concatenation(engine, destination, bucket, obj, uri):
    handle_gcs_finalize_push(_envelope(bucket=bucket, obj=obj), destination, engine)

    assert engine.submissions[0][0].uri == uri


def test_submission_failure_stops_before_wait(engine, destination):
    cause = ValueError("bad reference")
    engine.submit_error = cause

    with pytest.raises(SubmissionError) as exc_info:
        handle_gcs_finalize_push(_envelope(), destination, engine)

    assert exc_info.value.__cause__ is cause
    assert engine.jobs == []


def test_wait_failure(engine, destination):
    engine.wait_error = TimeoutError("socket")

    with pytest.raises(WaitError) as exc_info:
        handle_gcs_finalize_push(_envelope(), destination, engine)

    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.__cause__, TimeoutError)


def test_job_failure(engine, destination):
    engine.job_error = "Provided Schema does not match Table"

    with pytest.raises(JobExecutionError, match="does not match"):
        handle_gcs_finalize_push(_envelope(), destination, engine)
