"""
One-shot delivery of systemd job results.

StartUnit/StopUnit return a job object path right away; the outcome arrives
later through the JobRemoved signal. The signal can be dispatched before the
caller knows which path to wait for, so results are buffered per path.
"""
from typing import Callable, Dict, List, Optional


class JobResult:
    """Single-use slot for the result of one job."""

    def __init__(self, path: str):
        self.path = path
        self._result: Optional[str] = None
        self._done = False
        self._callbacks: List[Callable[["JobResult"], None]] = []

    @property
    def done(self) -> bool:
        return self._done

    def set(self, result: str):
        if self._done:
            raise RuntimeError(f"result for job {self.path} already delivered")
        self._result = result
        self._done = True
        callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            cb(self)

    def get(self) -> str:
        if not self._done:
            raise RuntimeError(f"job {self.path} has not finished")
        return self._result

    def add_done_callback(self, cb: Callable[["JobResult"], None]):
        if self._done:
            cb(self)
        else:
            self._callbacks.append(cb)


class JobListener:
    """Routes JobRemoved signals to the slot waiting for that job."""

    def __init__(self):
        self._waiting: Dict[str, JobResult] = {}
        self._finished: Dict[str, str] = {}

    def expect(self, path: str) -> JobResult:
        path = str(path)
        slot = JobResult(path)
        if path in self._finished:
            slot.set(self._finished.pop(path))
        else:
            self._waiting[path] = slot
        return slot

    def job_removed(self, job_id, path, unit, result):
        """Signal handler for org.freedesktop.systemd1.Manager.JobRemoved."""
        path, result = str(path), str(result)
        slot = self._waiting.pop(path, None)
        if slot is None:
            self._finished[path] = result
        else:
            slot.set(result)
