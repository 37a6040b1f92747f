import fnmatch
import os
import pytest
from typing import Dict, List, Tuple

from svc_core.core.jobs import JobListener


class FakeSystemd:
    """In-memory stand-in for PID 1 as seen through SystemdConnection."""

    def __init__(self):
        self.unit_files: List[Tuple[str, str]] = []
        self.properties: Dict[Tuple[str, str], str] = {}
        self.broken_units = set()
        self.job_results: Dict[str, str] = {}
        self.calls: List[tuple] = []
        self.opened = 0
        self.closed = 0
        self.timeouts: List[float] = []
        self.listener = JobListener()
        self._next_job = 1

    def connect(self, timeout):
        self.timeouts.append(timeout)
        return FakeConnection(self)

    def queue_job(self, verb, name):
        path = f"/org/freedesktop/systemd1/job/{self._next_job}"
        self._next_job += 1
        result = self.job_results.get(name, "done")
        if result == "done":
            self.properties[(name, "ActiveState")] = "active" if verb == "start" else "inactive"
        # systemd may emit JobRemoved before the caller registers the job path
        self.listener.job_removed(self._next_job, path, name, result)
        return self.listener.expect(path)


class FakeConnection:
    def __init__(self, daemon: FakeSystemd):
        self.daemon = daemon

    def __enter__(self):
        self.daemon.opened += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.daemon.closed += 1

    def list_unit_files(self):
        self.daemon.calls.append(("list_unit_files",))
        return list(self.daemon.unit_files)

    def list_unit_files_by_patterns(self, states, patterns):
        self.daemon.calls.append(("list_unit_files_by_patterns", states, patterns))
        return [
            (path, state) for path, state in self.daemon.unit_files
            if any(fnmatch.fnmatchcase(os.path.basename(path), p) for p in patterns)
        ]

    def get_unit_property(self, name, prop):
        self.daemon.calls.append(("get_unit_property", name, prop))
        if name in self.daemon.broken_units:
            raise RuntimeError(f"Unit {name} not loaded")
        return self.daemon.properties.get((name, prop), "")

    def enable_unit_files(self, files, runtime=False, force=True):
        self.daemon.calls.append(("enable_unit_files", files, runtime, force))
        return True, []

    def disable_unit_files(self, files, runtime=False):
        self.daemon.calls.append(("disable_unit_files", files, runtime))
        return []

    def start_unit(self, name, mode="replace"):
        self.daemon.calls.append(("start_unit", name, mode))
        return self.daemon.queue_job("start", name)

    def stop_unit(self, name, mode="replace"):
        self.daemon.calls.append(("stop_unit", name, mode))
        return self.daemon.queue_job("stop", name)

    def wait(self, job):
        return job.get()

    def reload(self):
        self.daemon.calls.append(("reload",))


@pytest.fixture
def fake_systemd(monkeypatch):
    daemon = FakeSystemd()
    monkeypatch.setattr(
        "svc_core.init_systems.systemd.SystemdConnection",
        lambda timeout: daemon.connect(timeout),
    )
    return daemon
