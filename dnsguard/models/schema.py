"""
YAML schema of the persisted configuration

The key order below is the on-disk order. It is independent of how the
models are declared: the serializer consults these tuples, and
sub-sections that live inline in their parent (logging settings at the
top level, filtering options in dns, certificate fields in tls) are
spliced in and split back out explicitly.
"""

from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..core.exceptions import ConfigParseError
from ..core.logging import get_logger
from .config import Configuration, LogSettings


logger = get_logger(__name__)


LOG_KEYS = ("log_file", "verbose")

FILTERING_KEYS = (
    "protection_enabled",
    "filtering_enabled",
    "blocked_response_ttl",
    "querylog_enabled",
    "ratelimit",
    "refuse_any",
    "bootstrap_dns",
    "ratelimit_whitelist",
    "parental_sensitivity",
    "parental_enabled",
    "safesearch_enabled",
    "safebrowsing_enabled",
)

DNS_KEYS = ("bind_host", "port") + FILTERING_KEYS + ("upstream_dns",)

CERTIFICATE_KEYS = ("certificate_chain", "private_key", "certificate_path", "private_key_path")

TLS_KEYS = ("enabled", "server_name", "force_https", "port_https", "port_dns_over_tls") + CERTIFICATE_KEYS

FILTER_KEYS = ("id", "enabled", "url", "name")

# schema_version stays last so that users are less tempted to change it
CONFIG_KEYS = (
    "bind_host",
    "bind_port",
    "auth_name",
    "auth_pass",
    "language",
    "dns",
    "tls",
    "filters",
    "user_rules",
    "dhcp",
) + LOG_KEYS + ("schema_version",)

# keys written by older releases, mapped to their current names
LEGACY_TLS_KEYS = {"enaled": "enabled"}


def _ordered(values: Mapping[str, Any], order) -> Dict[str, Any]:
    return {key: values[key] for key in order if key in values}


def _split(values: Mapping[str, Any], keys) -> Dict[str, Any]:
    """Pop the given keys out of a mutable mapping into a new dict"""
    return {key: values.pop(key) for key in keys if key in values}


def to_document(config: Configuration) -> Dict[str, Any]:
    """Build the ordered mapping that is written to disk.

    TLS status and the runtime-only filter fields are not part of it.
    """
    dns = config.dns.model_dump(exclude={"filtering"})
    dns.update(config.dns.filtering.model_dump())

    tls = config.tls.settings.model_dump(exclude={"certificate"})
    tls.update(config.tls.settings.certificate.model_dump())

    doc = config.model_dump(include={
        "bind_host", "bind_port", "auth_name", "auth_pass", "language",
        "user_rules", "schema_version",
    })
    doc["dns"] = _ordered(dns, DNS_KEYS)
    doc["tls"] = _ordered(tls, TLS_KEYS)
    doc["filters"] = [_ordered(f.model_dump(), FILTER_KEYS) for f in config.filters]
    doc["dhcp"] = config.dhcp.model_dump()
    doc.update(config.log_settings.model_dump())

    return _ordered(doc, CONFIG_KEYS)


def from_document(doc: Mapping[str, Any]) -> Configuration:
    """Build a Configuration from a mapping laid out like the file.

    Unknown keys are ignored. Raises pydantic's ValidationError on type
    mismatches.
    """
    data = {key: doc[key] for key in CONFIG_KEYS if key in doc}
    data["log_settings"] = _split(data, LOG_KEYS)

    dns = data.get("dns")
    if isinstance(dns, Mapping):
        dns = dict(dns)
        dns["filtering"] = _split(dns, FILTERING_KEYS)
        data["dns"] = dns

    tls = data.get("tls")
    if isinstance(tls, Mapping):
        tls = dict(tls)
        tls.pop("certificate", None)
        tls["certificate"] = _split(tls, CERTIFICATE_KEYS)
        data["tls"] = {"settings": tls}

    return Configuration.model_validate(data)


def upgrade_legacy_keys(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Rename keys that older releases wrote under a different name"""
    tls = doc.get("tls")
    if isinstance(tls, dict):
        for old, new in LEGACY_TLS_KEYS.items():
            if old in tls:
                value = tls.pop(old)
                tls.setdefault(new, value)
    return doc


def merge_documents(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Overlay file values onto a base document.

    Nested mappings merge key by key, sequences and scalars replace the
    base value, null values leave the base value alone.
    """
    merged = dict(base)
    for key, value in overlay.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = value
    return merged


def load_document(data: bytes) -> Dict[str, Any]:
    """Parse YAML bytes into a top-level mapping.

    An empty document is an empty mapping. Anything that is not valid YAML
    or not a mapping raises ConfigParseError.
    """
    try:
        doc = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"invalid YAML: {e}") from e

    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise ConfigParseError(
            f"expected a mapping at the top level, got {type(doc).__name__}"
        )
    return upgrade_legacy_keys(doc)


def parse_config_document(data: bytes, base: Configuration) -> Configuration:
    """Return a new Configuration: base with the file's fields overlaid"""
    doc = load_document(data)
    merged = merge_documents(to_document(base), doc)
    try:
        return from_document(merged)
    except ValidationError as e:
        raise ConfigParseError(f"invalid configuration: {e}") from e


def parse_log_settings(data: Optional[bytes]) -> LogSettings:
    """Extract only the logging settings from raw config bytes.

    Never raises: unreadable input is logged and yields defaults, because
    logging has to come up regardless.
    """
    if data is None:
        return LogSettings()
    try:
        doc = load_document(data)
        # null values keep the default, as in the full parse
        values = {k: v for k, v in _ordered(doc, LOG_KEYS).items() if v is not None}
        return LogSettings.model_validate(values)
    except (ConfigParseError, ValidationError) as e:
        logger.warning(f"Couldn't get logging settings from the configuration: {e}")
        return LogSettings()


def dump_config(config: Configuration) -> bytes:
    """Serialize the persisted fields of config to YAML"""
    text = yaml.safe_dump(
        to_document(config),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    return text.encode("utf-8")
