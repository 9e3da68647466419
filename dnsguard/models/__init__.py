"""
Data models for dnsguard
"""

from .config import (
    Configuration,
    DNSConfig,
    DHCPConfig,
    Filter,
    FilteringConfig,
    LogSettings,
    TLSConfig,
    TLSConfigSettings,
    TLSConfigStatus,
)
from .control import FilterAdd, FilterRemove, FilterEnable, FilteringStatus, ControlStatus

__all__ = [
    'Configuration', 'DNSConfig', 'DHCPConfig', 'Filter', 'FilteringConfig',
    'LogSettings', 'TLSConfig', 'TLSConfigSettings', 'TLSConfigStatus',
    'FilterAdd', 'FilterRemove', 'FilterEnable', 'FilteringStatus', 'ControlStatus',
]
