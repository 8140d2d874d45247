# autoload/infra/load_engine.py
from typing import Protocol

from autoload.models.load import LoadDestination, LoadOptions, LoadStatus, SourceReference


class LoadJob(Protocol):
    job_id: str

    def wait(self) -> LoadStatus:
        """Block until the job is terminal. Raises only if waiting itself fails."""
        ...


class LoadEngine(Protocol):
    """The slice of the analytics engine the trigger needs; shared across requests."""

    def submit_load(
        self,
        source: SourceReference,
        destination: LoadDestination,
        options: LoadOptions,
    ) -> LoadJob: ...
