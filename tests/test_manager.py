from unittest.mock import MagicMock, patch
from svc_core import manager as manager_mod
from svc_core.config import OpenRCConfig, SvcConfig, SystemdConfig
from svc_core.core.base_init import BaseInitManager
from svc_core.init_systems.openrc import OpenRCManager
from svc_core.init_systems.systemd import SystemdManager

def test_systemd_when_marker_exists(tmp_path):
    config = SvcConfig(systemd=SystemdConfig(run_marker=str(tmp_path), timeout=5))
    manager = manager_mod.detect_init_manager(config)
    assert isinstance(manager, SystemdManager)
    assert isinstance(manager, BaseInitManager)
    assert manager.config.timeout == 5

def test_openrc_when_marker_missing(tmp_path):
    config = SvcConfig(
        systemd=SystemdConfig(run_marker=str(tmp_path / "run/systemd/system")),
        openrc=OpenRCConfig(runlevel="boot"),
    )
    manager = manager_mod.detect_init_manager(config)
    assert isinstance(manager, OpenRCManager)
    assert manager.config.runlevel == "boot"

def test_marker_must_be_a_directory(tmp_path):
    marker = tmp_path / "system"
    marker.write_text("")
    config = SvcConfig(systemd=SystemdConfig(run_marker=str(marker)))
    assert isinstance(manager_mod.detect_init_manager(config), OpenRCManager)

def test_selection_happens_once():
    chosen = MagicMock(spec=BaseInitManager)
    manager_mod.get_init_manager.cache_clear()
    try:
        with patch.object(manager_mod, "detect_init_manager", return_value=chosen) as detect:
            assert manager_mod.get_init_manager() is chosen
            assert manager_mod.get_init_manager() is chosen
        detect.assert_called_once()
    finally:
        manager_mod.get_init_manager.cache_clear()
