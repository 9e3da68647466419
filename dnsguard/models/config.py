"""
Configuration data models for dnsguard

Field defaults form the built-in default table: a fresh Configuration()
is exactly what the service runs with when no file exists.
"""

from typing import Optional, List
from datetime import datetime
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field


CURRENT_SCHEMA_VERSION = 1

DEFAULT_DNS = ["tls://1.1.1.1", "tls://1.0.0.1"]


class LogSettings(BaseModel):
    """Logging settings, extracted before the rest of the configuration"""
    log_file: str = ""   # empty writes to stdout, "syslog" writes to syslog
    verbose: bool = False


class FilteringConfig(BaseModel):
    """Filtering behaviour of the DNS engine, stored inline in the dns section"""
    protection_enabled: bool = True   # whether or not use any of the filtering features
    filtering_enabled: bool = True    # whether or not use filter lists
    blocked_response_ttl: int = 10    # in seconds
    querylog_enabled: bool = True
    ratelimit: int = 20
    refuse_any: bool = True
    bootstrap_dns: str = "8.8.8.8:53"
    ratelimit_whitelist: List[str] = Field(default_factory=list)
    parental_sensitivity: int = 0
    parental_enabled: bool = False
    safesearch_enabled: bool = False
    safebrowsing_enabled: bool = False


class DNSConfig(BaseModel):
    """DNS server configuration"""
    bind_host: str = "0.0.0.0"
    port: int = 53
    filtering: FilteringConfig = Field(default_factory=FilteringConfig)
    upstream_dns: List[str] = Field(default_factory=lambda: list(DEFAULT_DNS))


class CertificateConfig(BaseModel):
    """Certificate and key material handed to the DNS-over-TLS listener"""
    certificate_chain: str = ""
    private_key: str = ""
    certificate_path: str = ""
    private_key_path: str = ""


class TLSConfigSettings(BaseModel):
    """Persisted TLS settings"""
    enabled: bool = False
    server_name: str = ""
    force_https: bool = False
    port_https: int = 443
    port_dns_over_tls: int = 853
    certificate: CertificateConfig = Field(default_factory=CertificateConfig)


class TLSConfigStatus(BaseModel):
    """Certificate and key status, recalculated on each run and never persisted"""
    # certificate status
    valid_chain: bool = False
    subject: str = ""
    issuer: str = ""
    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None
    dns_names: List[str] = Field(default_factory=list)
    status_cert: str = ""

    # key status
    valid_key: bool = False
    key_type: str = ""

    # warnings
    warning: str = ""
    warning_validation: str = ""


class TLSConfig(BaseModel):
    settings: TLSConfigSettings = Field(default_factory=TLSConfigSettings)
    status: TLSConfigStatus = Field(default_factory=TLSConfigStatus)


class Filter(BaseModel):
    """A block-list source"""
    id: int = 0
    enabled: bool = True
    url: str = ""
    name: str = ""

    # runtime only
    rules_count: int = 0
    last_updated: Optional[datetime] = None

    def path(self, filter_dir: Path) -> Path:
        """Location of the cached filter contents"""
        return Path(filter_dir) / f"{self.id}.txt"


class DHCPConfig(BaseModel):
    """DHCP server configuration, owned by the DHCP server and stored as-is"""
    model_config = ConfigDict(extra="allow")

    enabled: bool = False
    interface_name: str = ""
    gateway_ip: str = ""
    subnet_mask: str = ""
    range_start: str = ""
    range_end: str = ""
    lease_duration: int = 0


def _default_filters() -> List[Filter]:
    return [
        Filter(id=1, enabled=True, url="https://adguardteam.github.io/AdGuardSDNSFilter/Filters/filter.txt", name="AdGuard Simplified Domain Names filter"),
        Filter(id=2, enabled=False, url="https://adaway.org/hosts.txt", name="AdAway"),
        Filter(id=3, enabled=False, url="https://hosts-file.net/ad_servers.txt", name="hpHosts - Ad and Tracking servers only"),
        Filter(id=4, enabled=False, url="http://www.malwaredomainlist.com/hostslist/hosts.txt", name="MalwareDomainList.com Hosts List"),
    ]


class Configuration(BaseModel):
    """Appliance configuration.

    Only ever accessed through ConfigService, which guards it with a
    reader-writer lock.
    """
    bind_host: str = "0.0.0.0"
    bind_port: int = 3000
    auth_name: str = ""
    auth_pass: str = ""
    language: str = ""  # two-letter ISO 639-1 language code
    dns: DNSConfig = Field(default_factory=DNSConfig)
    tls: TLSConfig = Field(default_factory=TLSConfig)
    filters: List[Filter] = Field(default_factory=_default_filters)
    user_rules: List[str] = Field(default_factory=list)
    dhcp: DHCPConfig = Field(default_factory=DHCPConfig)
    log_settings: LogSettings = Field(default_factory=LogSettings)
    schema_version: int = CURRENT_SCHEMA_VERSION
