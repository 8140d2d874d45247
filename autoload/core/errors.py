# autoload/core/errors.py
from typing import Optional


class AutoloadError(Exception):
    """Base error; status_code is what the push endpoint answers with."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class MalformedRequest(AutoloadError):
    # body unreadable or not a push envelope
    status_code = 400


class SubmissionError(AutoloadError):
    # engine rejected the load request
    status_code = 500


class WaitError(AutoloadError):
    # could not observe the job reaching a terminal state
    status_code = 500


class JobExecutionError(AutoloadError):
    # job ran and failed (bad records, schema conflict, missing object...)
    status_code = 500


class ConfigurationError(AutoloadError):
    """Raised at startup only; never reaches a request."""
