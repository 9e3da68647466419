"""
Admin API router for dnsguard
Reads the live configuration and applies changes through the config store
"""

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..core.dependencies import get_config_service, get_filter_service, require_auth
from ..models.config import Filter
from ..models.control import (
    ControlStatus,
    FilterAdd,
    FilterEnable,
    FilterRemove,
    FilteringStatus,
    LanguageChange,
    TLSStatus,
)
from ..services.config_service import ConfigService
from ..services.filter_service import FilterService


router = APIRouter(prefix="/control", tags=["control"], dependencies=[Depends(require_auth)])


@router.get("/status", response_model=ControlStatus)
def get_status(config_service: ConfigService = Depends(get_config_service)):
    """Current DNS and web interface settings"""
    with config_service.read() as config:
        return ControlStatus(
            dns_address=config.dns.bind_host,
            dns_port=config.dns.port,
            bind_host=config.bind_host,
            bind_port=config.bind_port,
            protection_enabled=config.dns.filtering.protection_enabled,
            querylog_enabled=config.dns.filtering.querylog_enabled,
            upstream_dns=list(config.dns.upstream_dns),
            language=config.language,
            version=__version__,
        )


@router.get("/filtering/status", response_model=FilteringStatus)
def filtering_status(config_service: ConfigService = Depends(get_config_service)):
    with config_service.read() as config:
        return FilteringStatus(
            enabled=config.dns.filtering.filtering_enabled,
            filters=[f.model_copy() for f in config.filters],
            user_rules=list(config.user_rules),
        )


@router.post("/filtering/add_url", response_model=Filter)
def add_filter(
    data: FilterAdd,
    filter_service: FilterService = Depends(get_filter_service)
):
    """Subscribe to a filter list"""
    return filter_service.add_filter(data.url, data.name, data.enabled)


@router.post("/filtering/remove_url", response_model=Filter)
def remove_filter(
    data: FilterRemove,
    filter_service: FilterService = Depends(get_filter_service)
):
    """Unsubscribe from a filter list"""
    return filter_service.remove_filter(data.url)


@router.post("/filtering/enable_url", response_model=Filter)
def enable_filter(
    data: FilterEnable,
    filter_service: FilterService = Depends(get_filter_service)
):
    return filter_service.set_filter_enabled(data.url, data.enabled)


@router.post("/filtering/set_rules")
async def set_rules(
    request: Request,
    filter_service: FilterService = Depends(get_filter_service)
):
    """Replace the user rules with the plain text request body, one rule per line"""
    body = await request.body()
    saved = await run_in_threadpool(filter_service.set_user_rules, body.decode("utf-8"))
    return {"rules_count": len(saved)}


@router.get("/tls/status", response_model=TLSStatus)
def tls_status(config_service: ConfigService = Depends(get_config_service)):
    with config_service.read() as config:
        return TLSStatus(
            settings=config.tls.settings.model_copy(deep=True),
            status=config.tls.status.model_copy(deep=True),
        )


@router.post("/i18n/change_language")
def change_language(
    data: LanguageChange,
    config_service: ConfigService = Depends(get_config_service)
):
    with config_service.update() as config:
        config.language = data.language.strip()
    return {"language": data.language.strip()}
