# autoload/infra/bigquery_engine.py
from typing import List, Optional

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import bigquery

from autoload.core.logging import get_logger
from autoload.models.load import LoadDestination, LoadOptions, LoadStatus, SourceReference

logger = get_logger("bigquery_engine")


def build_job_config(
    source: SourceReference, options: LoadOptions
) -> bigquery.LoadJobConfig:
    schema_update_options: List[str] = []
    if options.allow_field_addition:
        schema_update_options.append(bigquery.SchemaUpdateOption.ALLOW_FIELD_ADDITION)
    if options.allow_field_relaxation:
        schema_update_options.append(
            bigquery.SchemaUpdateOption.ALLOW_FIELD_RELAXATION
        )
    return bigquery.LoadJobConfig(
        source_format=source.source_format,
        schema_update_options=schema_update_options,
        write_disposition=options.write_disposition,
    )


class BigQueryLoadJob:
    def __init__(self, job: bigquery.LoadJob):
        self._job = job
        self.job_id: str = job.job_id

    def wait(self) -> LoadStatus:
        try:
            self._job.result()
        except GoogleAPICallError:
            # result() raises for failed jobs too; only a job that actually
            # reached DONE with an error_result is an execution failure.
            error_result = self._job.error_result
            if not error_result:
                raise
            return LoadStatus(
                job_id=self.job_id,
                error=error_result.get("message") or str(error_result),
                errors=list(self._job.errors or []),
            )
        return LoadStatus(job_id=self.job_id, output_rows=self._job.output_rows)


class BigQueryLoadEngine:
    """LoadEngine backed by one google-cloud-bigquery client.

    The client is created once at startup and shared by every request thread.
    """

    def __init__(self, client: bigquery.Client):
        self.client = client

    @classmethod
    def from_project(cls, project: Optional[str]) -> "BigQueryLoadEngine":
        return cls(bigquery.Client(project=project))

    def submit_load(
        self,
        source: SourceReference,
        destination: LoadDestination,
        options: LoadOptions,
    ) -> BigQueryLoadJob:
        job_config = build_job_config(source, options)
        table_ref = bigquery.TableReference(
            bigquery.DatasetReference(destination.project, destination.dataset),
            destination.table,
        )
        job = self.client.load_table_from_uri(
            source.uri, table_ref, job_config=job_config
        )
        logger.debug("Created load job %s for %s", job.job_id, source.uri)
        return BigQueryLoadJob(job)
