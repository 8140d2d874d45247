# autoload/main.py
import sys
from typing import Optional, Sequence

import uvicorn
from fastapi import FastAPI

from autoload.api.handler.object_finalize_handler import ObjectFinalizeHandler
from autoload.api.router.pubsub_push_router import router as pubsub_push_router
from autoload.core.config import LoaderConfig, parse_config
from autoload.core.errors import ConfigurationError
from autoload.core.exception_handlers import add_exception_handlers
from autoload.core.logging import get_logger
from autoload.infra.bigquery_engine import BigQueryLoadEngine
from autoload.infra.load_engine import LoadEngine

logger = get_logger("main")


def create_app(config: LoaderConfig, engine: LoadEngine) -> FastAPI:
    app = FastAPI(
        title="GCS Autoload",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.handler = ObjectFinalizeHandler(config, engine)
    add_exception_handlers(app)

    # Catch-all: Pub/Sub may be pointed at any path.
    app.include_router(pubsub_push_router)
    return app


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        config = parse_config(argv)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    try:
        engine = BigQueryLoadEngine.from_project(config.destination.project)
    except Exception as e:
        logger.error("Could not create BigQuery client: %s", e)
        sys.exit(1)

    app = create_app(config, engine)
    logger.info("Listening on port %s", config.port)
    uvicorn.run(app, host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
