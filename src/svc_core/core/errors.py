"""
Error types for init system backends.

Job results reported by systemd are mapped onto a fixed set of exception
classes. See systemd's org.freedesktop.systemd1(5), signal JobRemoved.
"""
from types import MappingProxyType
from typing import Optional


class InitSystemError(Exception):
    """Base class for errors raised by init system backends."""


class BackendUnavailable(InitSystemError):
    """The libraries needed to talk to the init system are not installed."""


class DeadlineExceeded(InitSystemError, TimeoutError):
    """The per-call connection deadline elapsed before the call finished."""


class JobError(InitSystemError):
    """A systemd job finished with a result other than `done`."""
    message = "job did not complete"

    def __init__(self, result: str, unit: Optional[str] = None):
        self.result = result
        self.unit = unit
        detail = f"{self.message} (result={result!r}"
        if unit:
            detail += f", unit={unit!r}"
        super().__init__(detail + ")")


class JobCanceledError(JobError):
    message = "job has been canceled before it finished execution"


class JobTimeoutError(JobError):
    message = "job timeout was reached"


class JobFailedError(JobError):
    message = "job failed"


class JobDependencyError(JobError):
    message = ("another job this job has been depending on failed "
               "and the job hence has been removed too")


class JobSkippedError(JobError):
    message = "job was skipped because it didn't apply to the unit's current state"


class UnknownJobResultError(JobError):
    message = "unknown error"


RESULT_DONE = "done"
RESULT_CANCELED = "canceled"
RESULT_TIMEOUT = "timeout"
RESULT_FAILED = "failed"
RESULT_DEPENDENCY = "dependency"
RESULT_SKIPPED = "skipped"

JOB_RESULT_ERRORS = MappingProxyType({
    RESULT_DONE: None,
    RESULT_CANCELED: JobCanceledError,
    RESULT_TIMEOUT: JobTimeoutError,
    RESULT_FAILED: JobFailedError,
    RESULT_DEPENDENCY: JobDependencyError,
    RESULT_SKIPPED: JobSkippedError,
})


def check_job_result(result: str, unit: Optional[str] = None) -> None:
    """
    Raises the error mapped to a job result.

    Returns normally for `done`. Results missing from JOB_RESULT_ERRORS
    raise UnknownJobResultError.
    """
    if result not in JOB_RESULT_ERRORS:
        raise UnknownJobResultError(result, unit)
    error_cls = JOB_RESULT_ERRORS[result]
    if error_cls is not None:
        raise error_cls(result, unit)
