# autoload/api/handler/object_finalize_handler.py
from fastapi import Request

from autoload.core.config import LoaderConfig
from autoload.core.errors import MalformedRequest
from autoload.core.logging import get_logger
from autoload.infra.load_engine import LoadEngine
from autoload.services.gcs_finalize import decode_push_body, handle_gcs_finalize_push

logger = get_logger("object_finalize_handler")


class ObjectFinalizeHandler:
    def __init__(self, config: LoaderConfig, engine: LoadEngine):
        self.config = config
        self.engine = engine

    async def read_body(self, request: Request) -> bytes:
        try:
            return await request.body()
        except Exception as e:
            raise MalformedRequest("Could not read request body") from e

    def do_process(self, body: bytes) -> None:
        # Blocking: may wait minutes on the load job. Run off the event loop.
        envelope = decode_push_body(body)
        handle_gcs_finalize_push(envelope, self.config.destination, self.engine)
