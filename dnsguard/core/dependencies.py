"""
Dependencies for FastAPI routes
"""

import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ..services.config_service import ConfigService
from ..services.filter_service import FilterService
from .exceptions import UnauthorizedError


http_basic = HTTPBasic(auto_error=False)


def get_config_service(request: Request) -> ConfigService:
    """The config store owned by the application"""
    return request.app.state.config_service


def get_filter_service(
    config_service: ConfigService = Depends(get_config_service)
) -> FilterService:
    return FilterService(config_service)


def require_auth(
    credentials: Optional[HTTPBasicCredentials] = Depends(http_basic),
    config_service: ConfigService = Depends(get_config_service),
) -> Optional[str]:
    """Check HTTP Basic credentials against auth_name/auth_pass.

    No credentials are required while auth_name is empty.
    """
    with config_service.read() as config:
        auth_name = config.auth_name
        auth_pass = config.auth_pass

    if not auth_name:
        return None

    if credentials is None:
        raise UnauthorizedError("Authentication required")

    name_ok = secrets.compare_digest(credentials.username.encode(), auth_name.encode())
    pass_ok = secrets.compare_digest(credentials.password.encode(), auth_pass.encode())
    if not (name_ok and pass_ok):
        raise UnauthorizedError("Invalid username or password")

    return credentials.username
