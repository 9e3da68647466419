"""
dnsguard application assembly
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .core.config import Settings
from .core.exceptions import ConfigReadError, install_exception_handlers
from .core.logging import get_logger, setup_logging
from .routers import control
from .services.config_service import ConfigService


logger = get_logger(__name__)


def bootstrap(settings: Optional[Settings] = None, configure_logging: bool = True) -> ConfigService:
    """Load the configuration in startup order.

    The raw file is read once. Logging settings are extracted from it
    first so that logging is live before the full parse. Errors from the
    full parse propagate and must abort startup.
    """
    settings = settings or Settings()
    config_service = ConfigService(settings)

    data = None
    read_error = None
    try:
        data = config_service.read_config_file()
    except ConfigReadError as e:
        read_error = e

    log_settings = config_service.get_log_settings(data) if read_error is None else None
    if configure_logging:
        setup_logging(log_settings, format_type=settings.log_format, work_dir=settings.work_dir)

    if read_error is not None:
        logger.error(f"Couldn't read config file: {read_error}")
        raise read_error

    config_service.parse_config(data)
    config_service.first_run = config_service.detect_first_run()
    if config_service.first_run:
        logger.info("No configuration file found, starting in first-run mode")

    return config_service


def create_app(config_service: ConfigService) -> FastAPI:
    """Build the admin API around an already loaded config store"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        with config_service.read() as config:
            address = f"{config.bind_host}:{config.bind_port}"
        logger.info(f"dnsguard {__version__} web interface on {address}")
        yield
        logger.info("dnsguard shut down")

    app = FastAPI(
        title="dnsguard",
        description="DNS filtering gateway administration",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config_service = config_service

    install_exception_handlers(app)
    app.include_router(control.router)

    @app.get("/health")
    async def health_check():
        """Basic health check"""
        return {
            "status": "healthy",
            "service": "dnsguard",
            "version": __version__,
            "first_run": config_service.first_run,
        }

    return app
