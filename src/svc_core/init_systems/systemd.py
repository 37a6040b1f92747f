import os
import logging
from typing import List, Optional
from ..config import SystemdConfig, settings
from ..core.base_init import BaseInitManager
from ..core.errors import check_job_result
from ..models.service_info import ServiceInfo
from .dbus_conn import SystemdConnection

logger = logging.getLogger(__name__)

class SystemdManager(BaseInitManager):
    """
    Init manager for hosts booted with systemd.
    Talks to PID 1 over D-Bus; every call opens and closes its own connection.
    """

    name = "systemd"

    def __init__(self, config: Optional[SystemdConfig] = None):
        self.config = config or settings.systemd

    def _connect(self) -> SystemdConnection:
        return SystemdConnection(timeout=self.config.timeout)

    def list_services(self, pattern: str = "") -> List[ServiceInfo]:
        with self._connect() as conn:
            if pattern == "" or pattern == "*":
                files = conn.list_unit_files()
            else:
                files = conn.list_unit_files_by_patterns([], [pattern])

        services = []
        for path, _state in files:
            service_name = os.path.basename(path)
            try:
                running = self.is_service_running(service_name)
            except Exception as e:
                # One unreadable unit must not fail the whole listing
                logger.debug("could not probe %s: %s", service_name, e)
                running = False
            services.append(ServiceInfo(name=service_name, running=running))
        return services

    def is_service_enabled(self, name: str) -> bool:
        with self._connect() as conn:
            return conn.get_unit_property(name, "UnitFileState") == "enabled"

    def is_service_running(self, name: str) -> bool:
        with self._connect() as conn:
            return conn.get_unit_property(name, "ActiveState") == "active"

    def enable_service(self, name: str) -> None:
        with self._connect() as conn:
            conn.enable_unit_files([name], False, True)
            state = conn.get_unit_property(name, "ActiveState")

        # enable means enabled and running
        if state != "active":
            logger.debug("%s is %s after enable, starting it", name, state)
            self.start_service(name)

    def disable_service(self, name: str) -> None:
        with self._connect() as conn:
            state = conn.get_unit_property(name, "ActiveState")
            if state != "active":
                conn.disable_unit_files([name], False)
                return

        # A running unit is stopped instead of disabled
        logger.debug("%s is active, stopping instead of disabling", name)
        self.stop_service(name)

    def start_service(self, name: str) -> None:
        with self._connect() as conn:
            job = conn.start_unit(name, self.config.job_mode)
            result = conn.wait(job)
        logger.debug("start job for %s finished: %s", name, result)
        check_job_result(result, name)

    def stop_service(self, name: str) -> None:
        with self._connect() as conn:
            job = conn.stop_unit(name, self.config.job_mode)
            result = conn.wait(job)
        logger.debug("stop job for %s finished: %s", name, result)
        check_job_result(result, name)

    def reload(self) -> None:
        with self._connect() as conn:
            conn.reload()
