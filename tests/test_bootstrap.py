"""
Tests for startup ordering, logging setup and the command line runner
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from dnsguard.core.exceptions import ConfigParseError, ConfigReadError
from dnsguard.core.logging import JSONFormatter, LoggerManager
from dnsguard.main import bootstrap
from dnsguard.run import build_parser, main


def test_bootstrap_without_file(settings):
    """Test startup without a config file uses defaults in first-run mode"""
    config_service = bootstrap(settings, configure_logging=False)

    assert config_service.first_run is True
    assert config_service.snapshot().bind_port == 3000
    # nothing is written until setup completes
    config_service.write()
    assert not settings.config_path.exists()


def test_bootstrap_with_file(settings, write_config, sample_filters_yaml):
    """Test startup loads and normalizes the existing config"""
    write_config("bind_port: 8080\n" + sample_filters_yaml)

    config_service = bootstrap(settings, configure_logging=False)

    assert config_service.first_run is False
    config = config_service.snapshot()
    assert config.bind_port == 8080
    assert [f.id for f in config.filters] == [1, 2, 3]


def test_bootstrap_malformed_file_is_fatal(settings, write_config):
    write_config("bind_port: [\n")
    with pytest.raises(ConfigParseError):
        bootstrap(settings, configure_logging=False)


def test_bootstrap_unreadable_file_is_fatal(settings):
    settings.config_path.mkdir(parents=True)
    with pytest.raises(ConfigReadError):
        bootstrap(settings, configure_logging=False)


def test_logging_verbose_sets_debug(restore_root_logger):
    """Test verbose switches the root logger to DEBUG"""
    manager = LoggerManager()

    manager.setup_logging(verbose=True)

    assert restore_root_logger.level == logging.DEBUG
    assert manager.configured


def test_logging_default_is_info(restore_root_logger):
    LoggerManager().setup_logging()
    assert restore_root_logger.level == logging.INFO


def test_logging_setup_runs_once(restore_root_logger):
    """Test a second setup is ignored unless forced"""
    manager = LoggerManager()
    manager.setup_logging(verbose=False)

    manager.setup_logging(verbose=True)
    assert restore_root_logger.level == logging.INFO

    manager.setup_logging(verbose=True, force=True)
    assert restore_root_logger.level == logging.DEBUG


def test_logging_to_file_relative_to_work_dir(restore_root_logger, work_dir):
    """Test a relative log_file is placed under the working directory"""
    LoggerManager().setup_logging(log_file="logs/dnsguard.log", work_dir=work_dir, format_type="json")

    handlers = [h for h in restore_root_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, JSONFormatter)

    logging.getLogger("dnsguard.test").info("hello")
    handlers[0].flush()
    assert "hello" in (work_dir / "logs" / "dnsguard.log").read_text()


def test_parser_options():
    args = build_parser().parse_args(["-c", "/etc/dnsguard.yaml", "-w", "/opt/dnsguard", "-p", "8080", "-v"])
    assert args.config == "/etc/dnsguard.yaml"
    assert args.work_dir == "/opt/dnsguard"
    assert args.port == 8080
    assert args.verbose is True


def test_main_exits_on_bad_config(restore_root_logger, work_dir):
    """Test the runner aborts startup when the config cannot be parsed"""
    (work_dir / "dnsguard.yaml").write_text("dns: [unclosed\n")

    assert main(["-w", str(work_dir), "-c", "dnsguard.yaml"]) == 1


def test_bootstrap_reads_file_once(settings, write_config, monkeypatch):
    """Test startup reads the config file a single time, present or absent"""
    from dnsguard.services import config_service as config_service_module

    calls = []
    real_read = config_service_module.read_file_if_exists

    def counting_read(path):
        calls.append(path)
        return real_read(path)

    monkeypatch.setattr(config_service_module, "read_file_if_exists", counting_read)

    bootstrap(settings, configure_logging=False)
    assert len(calls) == 1

    write_config("bind_port: 8080\n")
    calls.clear()
    bootstrap(settings, configure_logging=False)
    assert len(calls) == 1
