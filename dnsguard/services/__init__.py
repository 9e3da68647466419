"""
Business logic services for dnsguard
"""

from .config_service import ConfigService
from .filter_service import FilterService, normalize_filters
from .user_filter import UserFilter

__all__ = [
    'ConfigService',
    'FilterService',
    'UserFilter',
    'normalize_filters',
]
