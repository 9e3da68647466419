"""
Pytest configuration and fixtures for dnsguard tests
"""

import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dnsguard.core.config import Settings
from dnsguard.main import create_app
from dnsguard.services.config_service import ConfigService


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Empty working directory for one test"""
    return tmp_path


@pytest.fixture
def settings(work_dir: Path) -> Settings:
    return Settings(work_dir=work_dir, config_file="dnsguard.yaml")


@pytest.fixture
def config_service(settings: Settings) -> ConfigService:
    """Config store with built-in defaults, nothing loaded yet"""
    return ConfigService(settings)


@pytest.fixture
def write_config(settings: Settings):
    """Write raw YAML to the configured config file"""
    def _write(text: str) -> Path:
        path = settings.config_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def test_client(config_service: ConfigService) -> TestClient:
    """Create test client"""
    return TestClient(create_app(config_service))


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def sample_filters_yaml():
    """Four filters, the last repeating the first one's URL"""
    return """
filters:
- id: 1
  enabled: true
  url: https://example.org/a.txt
  name: A
- id: 2
  enabled: false
  url: https://example.org/b.txt
  name: B
- id: 3
  enabled: true
  url: https://example.org/c.txt
  name: C
- id: 4
  enabled: true
  url: https://example.org/a.txt
  name: A again
"""
