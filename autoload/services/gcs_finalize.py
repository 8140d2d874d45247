# autoload/services/gcs_finalize.py
import json
from typing import Any, Optional, Union

from pydantic import ValidationError

from autoload.core.errors import (
    JobExecutionError,
    MalformedRequest,
    SubmissionError,
    WaitError,
)
from autoload.core.logging import get_logger
from autoload.infra.load_engine import LoadEngine
from autoload.models.load import LoadDestination, LoadOptions, LoadStatus, SourceReference
from autoload.models.pubsub import OBJECT_FINALIZE, PubSubPushEnvelope

logger = get_logger("gcs_finalize")

# Every finalize appends, and the table may widen to fit what arrives.
LOAD_OPTIONS = LoadOptions(
    allow_field_addition=True,
    allow_field_relaxation=True,
)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_push_body(body: Union[bytes, str]) -> PubSubPushEnvelope:
    """
    Decode a Pub/Sub push body. Anything that is not JSON, or is JSON but not
    an envelope (wrong types, message.data not base64), is a MalformedRequest.
    """
    if isinstance(body, bytes):
        # invalid UTF-8 becomes U+FFFD rather than failing the whole message
        body = body.decode("utf-8", "replace")
    try:
        raw: Any = json.loads(body, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedRequest(f"Invalid JSON: {e}") from e
    if raw is None:
        # a literal null decodes to an empty envelope
        raw = {}
    try:
        return PubSubPushEnvelope.model_validate(raw)
    except ValidationError as e:
        raise MalformedRequest(f"Invalid Pub/Sub envelope: {e}") from e


def load_finalized_object(
    bucket: str,
    object_name: str,
    destination: LoadDestination,
    engine: LoadEngine,
) -> LoadStatus:
    """Submit one append load for gs://bucket/object and wait for it."""
    if not bucket or not object_name:
        logger.warning(
            "Finalize event with empty bucketId=%r or objectId=%r; submitting anyway",
            bucket,
            object_name,
        )
    source = SourceReference.for_object(bucket, object_name)

    try:
        job = engine.submit_load(source, destination, LOAD_OPTIONS)
    except Exception as e:
        raise SubmissionError(f"Load submission failed for {source.uri}") from e
    logger.info(
        "Submitted load job %s: %s -> %s",
        job.job_id,
        source.uri,
        destination.table_id,
    )

    try:
        status = job.wait()
    except Exception as e:
        raise WaitError(f"Waiting on load job {job.job_id} failed") from e

    if status.failed:
        raise JobExecutionError(
            f"Load job {status.job_id} failed: {status.error} {status.errors}"
        )
    logger.info(
        "Load job %s done: %s rows into %s",
        status.job_id,
        status.output_rows,
        destination.table_id,
    )
    return status


def handle_gcs_finalize_push(
    envelope: PubSubPushEnvelope,
    destination: LoadDestination,
    engine: LoadEngine,
) -> Optional[LoadStatus]:
    """
    Handle a GCS notification delivered by Pub/Sub push.

    - OBJECT_FINALIZE: load the object into the destination table (blocking)
    - anything else: no-op
    Not idempotent: a redelivered finalize appends the rows again.
    """
    msg = envelope.message
    logger.info(
        "Received push message id=%s subscription=%s eventType=%s",
        msg.id,
        envelope.subscription,
        msg.event_type,
    )
    if msg.event_type != OBJECT_FINALIZE:
        logger.info("Skipping eventType=%r for message %s", msg.event_type, msg.id)
        return None
    return load_finalized_object(msg.bucket_id, msg.object_id, destination, engine)
