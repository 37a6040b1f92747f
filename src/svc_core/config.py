import os
import logging
import yaml
from pathlib import Path
from typing import List, Dict, Any
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

class SystemdConfig(BaseModel):
    timeout: float = 30.0
    job_mode: str = "replace"
    run_marker: str = "/run/systemd/system/"

class OpenRCConfig(BaseModel):
    rc_update: str = "/sbin/rc-update"
    rc_service: str = "/sbin/rc-service"
    runlevel: str = "default"
    runlevels_dir: str = "/etc/runlevels"

class SvcConfig(BaseModel):
    systemd: SystemdConfig = SystemdConfig()
    openrc: OpenRCConfig = OpenRCConfig()

def load_config_data(env_var: str, default_paths: List[Path]) -> Dict[str, Any]:
    """Helper to load config from env var or list of paths"""
    path = os.getenv(env_var)
    candidates = [Path(path)] if path else []
    candidates.extend(default_paths)

    for p in candidates:
        if not p.exists():
            continue
        try:
            with open(p, "r") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Error loading config from %s: %s", p, e)
        return {}
    return {}

def load_config() -> SvcConfig:
    base_dir = Path(__file__).resolve().parent.parent.parent

    # SVCCTL_CONFIG takes precedence over the project and working directory files.
    paths = [
        base_dir / "config" / "svcctl.yaml",
        base_dir / "config" / "svcctl.conf",
        Path("svcctl.yaml"),
        Path("svcctl.conf")
    ]
    data = load_config_data("SVCCTL_CONFIG", paths)
    if not isinstance(data, dict):
        logger.warning("Ignoring config: expected a mapping, got %s", type(data).__name__)
        data = {}

    sections = {}
    for key in ("systemd", "openrc"):
        section = data.get(key) or {}
        if isinstance(section, dict):
            sections[key] = section
        else:
            logger.warning("Ignoring config section %r: expected a mapping", key)

    try:
        return SvcConfig(**sections)
    except ValidationError as e:
        logger.warning("Invalid config, using defaults: %s", e)
        return SvcConfig()

# Global Instance
settings = load_config()
