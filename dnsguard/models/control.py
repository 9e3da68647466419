"""
Request and response models of the admin API
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from .config import Filter, TLSConfigSettings, TLSConfigStatus


class FilterAdd(BaseModel):
    """Model for adding a filter subscription"""
    url: str = Field(min_length=1)
    name: str = ""
    enabled: bool = True


class FilterRemove(BaseModel):
    url: str = Field(min_length=1)


class FilterEnable(BaseModel):
    url: str = Field(min_length=1)
    enabled: bool


class LanguageChange(BaseModel):
    language: str = Field(max_length=8)


class FilteringStatus(BaseModel):
    enabled: bool
    filters: List[Filter]
    user_rules: List[str]


class ControlStatus(BaseModel):
    dns_address: str
    dns_port: int
    bind_host: str
    bind_port: int
    protection_enabled: bool
    querylog_enabled: bool
    upstream_dns: List[str]
    language: str
    running: bool = True
    version: Optional[str] = None


class TLSStatus(BaseModel):
    """TLS settings together with the computed certificate status"""
    settings: TLSConfigSettings
    status: TLSConfigStatus
