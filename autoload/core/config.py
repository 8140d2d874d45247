# autoload/core/config.py
import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from autoload.core.errors import ConfigurationError
from autoload.core.logging import get_logger
from autoload.models.load import LoadDestination

PROJECT_ENV = "GOOGLE_CLOUD_PROJECT"
DATASET_ENV = "BQ_DATASET"
TABLE_ENV = "BQ_TABLE"
PORT_ENV = "PORT"
DEFAULT_PORT = 8080

logger = get_logger("config")


@dataclass(frozen=True)
class LoaderConfig:
    destination: LoadDestination
    port: int = DEFAULT_PORT


def build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autoload",
        description="Load finalized GCS objects into BigQuery on Pub/Sub push",
    )
    parser.add_argument(
        "--project",
        default=environ.get(PROJECT_ENV, ""),
        help=f"Google Cloud project (default: ${PROJECT_ENV})",
    )
    parser.add_argument(
        "--dataset",
        default=environ.get(DATASET_ENV, ""),
        help=f"BigQuery dataset (default: ${DATASET_ENV})",
    )
    parser.add_argument(
        "--table",
        default=environ.get(TABLE_ENV, ""),
        help=f"BigQuery table (default: ${TABLE_ENV})",
    )
    return parser


def _resolve_port(raw: Optional[str]) -> int:
    if not raw:
        logger.info("Defaulting to port %s", DEFAULT_PORT)
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{PORT_ENV} must be an integer, got {raw!r}") from e
    if not 0 < port < 65536:
        raise ConfigurationError(f"{PORT_ENV} out of range: {port}")
    return port


def parse_config(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> LoaderConfig:
    """
    Build the process-wide configuration from flags and environment.

    Flags win over environment. Every destination coordinate must be
    non-empty; BigQuery rejects the load otherwise, so we refuse to start.
    """
    if environ is None:
        environ = os.environ
    args = build_parser(environ).parse_args(argv)

    missing = [
        name
        for name in ("project", "dataset", "table")
        if not getattr(args, name).strip()
    ]
    if missing:
        raise ConfigurationError(
            f"Missing destination setting(s): {', '.join(missing)}"
        )

    destination = LoadDestination(
        project=args.project.strip(),
        dataset=args.dataset.strip(),
        table=args.table.strip(),
    )
    return LoaderConfig(
        destination=destination, port=_resolve_port(environ.get(PORT_ENV))
    )
