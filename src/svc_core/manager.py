"""
Init system selection.

Mirrors sd_booted(3): systemd is in charge iff /run/systemd/system/ exists.
Everything else is treated as OpenRC.
"""
import os
import logging
from functools import lru_cache
from typing import Optional
from .config import SvcConfig, settings
from .core.base_init import BaseInitManager
from .init_systems.openrc import OpenRCManager
from .init_systems.systemd import SystemdManager

logger = logging.getLogger(__name__)

def detect_init_manager(config: Optional[SvcConfig] = None) -> BaseInitManager:
    config = config or settings
    if os.path.isdir(config.systemd.run_marker):
        manager = SystemdManager(config.systemd)
    else:
        manager = OpenRCManager(config.openrc)
    logger.debug("using %s init manager", manager.name)
    return manager

@lru_cache(maxsize=None)
def get_init_manager() -> BaseInitManager:
    """Returns the init manager for this process, detecting it on first use."""
    return detect_init_manager()
