# autoload/models/load.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

NEWLINE_DELIMITED_JSON = "NEWLINE_DELIMITED_JSON"
WRITE_APPEND = "WRITE_APPEND"


@dataclass(frozen=True)
class LoadDestination:
    project: str
    dataset: str
    table: str

    @property
    def table_id(self) -> str:
        return f"{self.project}.{self.dataset}.{self.table}"


@dataclass(frozen=True)
class SourceReference:
    uri: str
    source_format: str = NEWLINE_DELIMITED_JSON

    @classmethod
    def for_object(cls, bucket: str, object_name: str) -> "SourceReference":
        # No normalisation: the URI is exactly what the notification named.
        return cls(uri="gs://" + bucket + "/" + object_name)


@dataclass(frozen=True)
class LoadOptions:
    allow_field_addition: bool = True
    allow_field_relaxation: bool = True
    write_disposition: str = WRITE_APPEND


@dataclass(frozen=True)
class LoadStatus:
    """Terminal state of a load job. `error` is set iff the job failed."""

    job_id: str
    error: Optional[str] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)
    output_rows: Optional[int] = None

    @property
    def failed(self) -> bool:
        return self.error is not None
