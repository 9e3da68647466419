"""
Tests for config file path resolution
"""

from pathlib import Path

from dnsguard.core.config import Settings, resolve_config_path


def test_relative_filename_joined_to_work_dir():
    """Test a relative filename is joined to the working directory"""
    path = resolve_config_path("sub/conf.yaml", "/etc/app")
    assert str(path) == "/etc/app/sub/conf.yaml"


def test_absolute_filename_unchanged():
    """Test an absolute filename ignores the working directory"""
    assert str(resolve_config_path("/tmp/x.yaml", "/etc/app")) == "/tmp/x.yaml"
    assert str(resolve_config_path("/tmp/x.yaml", "/somewhere/else")) == "/tmp/x.yaml"


def test_accepts_path_objects():
    """Test Path arguments resolve the same way as strings"""
    assert resolve_config_path(Path("conf.yaml"), Path("/srv")) == Path("/srv/conf.yaml")


def test_settings_paths(tmp_path):
    """Test derived paths of the process settings"""
    settings = Settings(work_dir=tmp_path, config_file="dnsguard.yaml")

    assert settings.config_path == tmp_path / "dnsguard.yaml"
    assert settings.data_dir == tmp_path / "data"
    assert settings.filter_dir == tmp_path / "data" / "filters"


def test_settings_absolute_config_file(tmp_path):
    settings = Settings(work_dir=tmp_path, config_file="/tmp/elsewhere.yaml")
    assert settings.config_path == Path("/tmp/elsewhere.yaml")
