import os
import fnmatch
import logging
import subprocess
from typing import List, Optional
from ..config import OpenRCConfig, settings
from ..core.base_init import BaseInitManager
from ..models.service_info import ServiceInfo

logger = logging.getLogger(__name__)

CMD_START = "start"
CMD_STOP = "stop"
CMD_STATUS = "status"
CMD_LIST = "list"

SERVICE_SUFFIX = ".service"

def strip_service_suffix(name: str) -> str:
    # Callers coming from systemd may pass "foo.service"
    if name.endswith(SERVICE_SUFFIX):
        return name[:-len(SERVICE_SUFFIX)]
    return name

def check_pattern(pattern: str):
    """Rejects glob patterns with an unterminated [class] or a trailing backslash."""
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            if i + 1 >= n:
                raise ValueError(f"bad pattern: {pattern!r}")
            i += 2
        elif c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            # a class holds at least one character, so "[]" is unterminated
            end = pattern.find("]", j + 1)
            if end == -1:
                raise ValueError(f"bad pattern: {pattern!r}")
            i = end + 1
        else:
            i += 1

class OpenRCManager(BaseInitManager):
    """
    Init manager for OpenRC hosts (Alpine, Gentoo).
    Drives rc-service and rc-update; every call is synchronous.
    """

    name = "openrc"

    def __init__(self, config: Optional[OpenRCConfig] = None):
        self.config = config or settings.openrc

    def list_services(self, pattern: str = "") -> List[ServiceInfo]:
        filtered = pattern != "" and pattern != "*"
        if filtered:
            check_pattern(pattern)

        names = self.rc_service_list()
        if filtered:
            names = [n for n in names if fnmatch.fnmatchcase(n, pattern)]

        services = []
        for svc_name in names:
            services.append(ServiceInfo(
                name=svc_name,
                running=self.is_service_running(svc_name)
            ))
        return services

    def is_service_running(self, name: str) -> bool:
        try:
            self.rc_service(name, CMD_STATUS)
        except subprocess.CalledProcessError as e:
            # stopped/crashed services exit non-zero
            logger.debug("rc-service %s status exited %s", name, e.returncode)
            return False
        return True

    def is_service_enabled(self, name: str) -> bool:
        link = os.path.join(self.config.runlevels_dir, self.config.runlevel,
                            strip_service_suffix(name))
        return os.path.lexists(link)

    def enable_service(self, name: str) -> None:
        self.rc_update("add", name, self.config.runlevel)

    def disable_service(self, name: str) -> None:
        self.rc_update("del", name, self.config.runlevel)

    def start_service(self, name: str) -> None:
        self.rc_service(name, CMD_START)

    def stop_service(self, name: str) -> None:
        self.rc_service(name, CMD_STOP)

    def reload(self) -> None:
        # OpenRC reads init scripts on every invocation
        pass

    # ── rc tooling ───────────────────────────────────────────────────
    def rc_update(self, command: str, name: str, runlevel: str):
        args = [self.config.rc_update, "--quiet", command,
                strip_service_suffix(name), runlevel]
        logger.debug("running %s", " ".join(args))
        subprocess.run(args, capture_output=True, text=True, check=True)

    def rc_service(self, name: str, command: str) -> str:
        args = [self.config.rc_service]
        if command == CMD_LIST:
            args.append("--list")
        else:
            args.extend(["--quiet", strip_service_suffix(name), command])

        logger.debug("running %s", " ".join(args))
        result = subprocess.run(args, capture_output=True, text=True, check=True)
        return result.stdout

    def rc_service_list(self) -> List[str]:
        out = self.rc_service("", CMD_LIST)
        return [line.strip() for line in out.splitlines() if line.strip()]
