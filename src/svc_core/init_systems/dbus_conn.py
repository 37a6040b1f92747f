"""
systemd D-Bus connection

A private system bus connection to org.freedesktop.systemd1 that lives for a
single backend call. Every method call is bounded by what is left of the
connection deadline, and job results are awaited through JobRemoved signals.
"""
import time
import logging
from typing import List, Optional, Tuple

from ..core.errors import BackendUnavailable, DeadlineExceeded
from ..core.jobs import JobListener, JobResult

try:
    import dbus
    from dbus.mainloop.glib import DBusGMainLoop
    from gi.repository import GLib
    DBUS_AVAILABLE = True
except ImportError:
    DBUS_AVAILABLE = False

logger = logging.getLogger(__name__)

SYSTEMD_BUS_NAME = "org.freedesktop.systemd1"
SYSTEMD_OBJECT_PATH = "/org/freedesktop/systemd1"
MANAGER_INTERFACE = "org.freedesktop.systemd1.Manager"
UNIT_INTERFACE = "org.freedesktop.systemd1.Unit"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"


class SystemdConnection:
    """
    Context manager around one connection to the systemd manager.

    Attributes:
        timeout: Seconds from open() until the connection deadline.
    """

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout
        self._deadline: Optional[float] = None
        self._bus = None
        self._manager = None
        self._match = None
        self._jobs = JobListener()

    def __enter__(self) -> "SystemdConnection":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ── lifecycle ────────────────────────────────────────────────────
    def open(self):
        if not DBUS_AVAILABLE:
            raise BackendUnavailable(
                "dbus-python and PyGObject are required to manage systemd "
                "(pip install 'svcctl[systemd]')"
            )
        self._deadline = time.monotonic() + self.timeout
        self._bus = dbus.SystemBus(private=True, mainloop=DBusGMainLoop())
        try:
            systemd1 = self._bus.get_object(SYSTEMD_BUS_NAME, SYSTEMD_OBJECT_PATH,
                                            introspect=False)
            self._manager = dbus.Interface(systemd1, dbus_interface=MANAGER_INTERFACE)
        except Exception:
            self.close()
            raise

    def close(self):
        if self._match is not None:
            self._match.remove()
            self._match = None
        if self._bus is not None:
            self._bus.close()
            self._bus = None
        self._manager = None

    def remaining(self) -> float:
        """Seconds left before the connection deadline."""
        left = self._deadline - time.monotonic()
        if left <= 0:
            raise DeadlineExceeded(
                f"systemd connection deadline of {self.timeout}s exceeded"
            )
        return left

    # ── manager calls ────────────────────────────────────────────────
    def list_unit_files(self) -> List[Tuple[str, str]]:
        files = self._manager.ListUnitFiles(timeout=self.remaining())
        return [(str(path), str(state)) for path, state in files]

    def list_unit_files_by_patterns(self, states: List[str],
                                    patterns: List[str]) -> List[Tuple[str, str]]:
        files = self._manager.ListUnitFilesByPatterns(
            dbus.Array(states, signature="s"),
            dbus.Array(patterns, signature="s"),
            timeout=self.remaining(),
        )
        return [(str(path), str(state)) for path, state in files]

    def get_unit_property(self, name: str, prop: str) -> str:
        unit = self._unit_properties(name)
        return str(unit.Get(UNIT_INTERFACE, prop, timeout=self.remaining()))

    def enable_unit_files(self, files: List[str], runtime: bool = False,
                          force: bool = True):
        carries_install_info, changes = self._manager.EnableUnitFiles(
            dbus.Array(files, signature="s"), runtime, force,
            timeout=self.remaining(),
        )
        return bool(carries_install_info), [tuple(map(str, c)) for c in changes]

    def disable_unit_files(self, files: List[str], runtime: bool = False):
        changes = self._manager.DisableUnitFiles(
            dbus.Array(files, signature="s"), runtime,
            timeout=self.remaining(),
        )
        return [tuple(map(str, c)) for c in changes]

    def start_unit(self, name: str, mode: str = "replace") -> JobResult:
        self._subscribe()
        path = self._manager.StartUnit(name, mode, timeout=self.remaining())
        logger.debug("queued start job %s for %s", path, name)
        return self._jobs.expect(path)

    def stop_unit(self, name: str, mode: str = "replace") -> JobResult:
        self._subscribe()
        path = self._manager.StopUnit(name, mode, timeout=self.remaining())
        logger.debug("queued stop job %s for %s", path, name)
        return self._jobs.expect(path)

    def reload(self):
        self._manager.Reload(timeout=self.remaining())

    # ── jobs ─────────────────────────────────────────────────────────
    def wait(self, job: JobResult) -> str:
        """
        Blocks until the job result arrives or the connection deadline passes.

        A result that has been delivered is returned even when the deadline
        elapsed at the same time.
        """
        if not job.done:
            self._run_until(job)
        if not job.done:
            raise DeadlineExceeded(
                f"no result for job {job.path} within {self.timeout}s"
            )
        return job.get()

    def _run_until(self, job: JobResult):
        try:
            remaining = self.remaining()
        except DeadlineExceeded:
            return
        loop = GLib.MainLoop()
        expired = []

        def on_deadline():
            expired.append(True)
            loop.quit()
            return False

        timer = GLib.timeout_add(max(1, int(remaining * 1000)), on_deadline)
        job.add_done_callback(lambda _job: loop.quit())
        if not job.done:
            loop.run()
        if not expired:
            GLib.source_remove(timer)

    def _subscribe(self):
        if self._match is not None:
            return
        # Register the receiver before the job is queued so no JobRemoved is missed.
        self._match = self._bus.add_signal_receiver(
            self._jobs.job_removed,
            signal_name="JobRemoved",
            dbus_interface=MANAGER_INTERFACE,
            bus_name=SYSTEMD_BUS_NAME,
            path=SYSTEMD_OBJECT_PATH,
        )
        self._manager.Subscribe(timeout=self.remaining())

    def _unit_properties(self, name: str):
        unit_path = self._manager.LoadUnit(name, timeout=self.remaining())
        unit = self._bus.get_object(SYSTEMD_BUS_NAME, unit_path, introspect=False)
        return dbus.Interface(unit, dbus_interface=PROPERTIES_INTERFACE)
