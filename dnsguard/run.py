#!/usr/bin/env python3
"""
Runner script for dnsguard
Loads the configuration, applies command line overrides and serves the admin API
"""

import argparse
import sys
from typing import List, Optional

from .core.config import Settings
from .core.exceptions import ConfigError
from .core.logging import get_logger, setup_logging


logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dnsguard", description="DNS filtering gateway")
    parser.add_argument("-c", "--config", help="path to the config file")
    parser.add_argument("-w", "--work-dir", help="path to the working directory")
    parser.add_argument("-H", "--host", help="host address to bind the web interface to")
    parser.add_argument("-p", "--port", type=int, help="port to serve the web interface on")
    parser.add_argument("-l", "--logfile", help="path to the log file, 'syslog' for the system log")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable verbose output")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.config:
        overrides["config_file"] = args.config
    if args.work_dir:
        overrides["work_dir"] = args.work_dir
    return Settings(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Imported here so that --help works without the web stack
    import uvicorn
    from .main import bootstrap, create_app

    settings = load_settings(args)
    try:
        config_service = bootstrap(settings)
    except (ConfigError, OSError) as e:
        logger.error(f"Failed to load configuration: {e}")
        return 1

    # Command line overrides are applied in memory only
    with config_service.update(persist=False) as config:
        if args.host:
            config.bind_host = args.host
        if args.port:
            config.bind_port = args.port
        if args.logfile is not None:
            config.log_settings.log_file = args.logfile
        if args.verbose:
            config.log_settings.verbose = True
        log_settings = config.log_settings.model_copy()
        host, port = config.bind_host, config.bind_port

    if args.logfile is not None or args.verbose:
        setup_logging(log_settings, format_type=settings.log_format, work_dir=settings.work_dir, force=True)

    uvicorn.run(
        create_app(config_service),
        host=host,
        port=port,
        log_level="debug" if log_settings.verbose else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
