"""
Filter list management for dnsguard
Normalization of loaded filter lists and filter subscription changes
"""

from typing import List, Optional

from ..core.exceptions import ConflictError, NotFoundError
from ..core.logging import get_logger
from ..models.config import Filter


logger = get_logger(__name__)


def deduplicate_filters(filters: List[Filter]) -> List[Filter]:
    """Drop filters whose URL was already seen, keeping the first occurrence.

    Filters are considered duplicates when their source URLs are equal.
    """
    out: List[Filter] = []
    seen = set()
    for f in filters:
        if f.url in seen:
            logger.info(f"Removing duplicate filter {f.name!r} ({f.url})")
            continue
        seen.add(f.url)
        out.append(f)
    return out


def update_unique_filter_ids(filters: List[Filter]) -> None:
    """Give an id to every filter that lacks a valid one.

    The first filter holding a positive id keeps it, so cached filter files
    stay with their lists. Missing, non-positive and repeated ids get the
    next free value in list order.
    """
    taken = set()
    needs_id = []
    for f in filters:
        if f.id > 0 and f.id not in taken:
            taken.add(f.id)
        else:
            needs_id.append(f)

    next_id = max(taken, default=0) + 1
    for f in needs_id:
        logger.debug(f"Filter {f.url} gets id {next_id} (was {f.id})")
        f.id = next_id
        next_id += 1


def normalize_filters(filters: List[Filter]) -> List[Filter]:
    """Deduplicate a filter list and fix up its ids in place.

    Returns the same list object for convenience. Running it again on its
    own output changes nothing.
    """
    filters[:] = deduplicate_filters(filters)
    update_unique_filter_ids(filters)
    return filters


def next_filter_id(filters: List[Filter]) -> int:
    """Smallest id greater than every id in use"""
    return max((f.id for f in filters), default=0) + 1


def find_filter(filters: List[Filter], url: str) -> Optional[Filter]:
    for f in filters:
        if f.url == url:
            return f
    return None


class FilterService:
    """Filter subscription changes, applied through the config store"""

    def __init__(self, config_service):
        self.config_service = config_service

    def add_filter(self, url: str, name: str = "", enabled: bool = True) -> Filter:
        """Subscribe to a new filter list and persist"""
        url = url.strip()
        with self.config_service.update() as config:
            if find_filter(config.filters, url) is not None:
                raise ConflictError(f"Filter URL already added: {url}")
            new_filter = Filter(
                id=next_filter_id(config.filters),
                enabled=enabled,
                url=url,
                name=name or url,
            )
            config.filters.append(new_filter)
            result = new_filter.model_copy()

        logger.info(f"Added filter {result.id}: {url}")
        return result

    def remove_filter(self, url: str) -> Filter:
        """Unsubscribe from a filter list, deleting its cached contents"""
        filter_dir = self.config_service.settings.filter_dir
        with self.config_service.update() as config:
            existing = find_filter(config.filters, url)
            if existing is None:
                raise NotFoundError(f"Filter not found: {url}")
            config.filters.remove(existing)
            existing.path(filter_dir).unlink(missing_ok=True)

        logger.info(f"Removed filter {existing.id}: {url}")
        return existing

    def set_filter_enabled(self, url: str, enabled: bool) -> Filter:
        with self.config_service.update() as config:
            existing = find_filter(config.filters, url)
            if existing is None:
                raise NotFoundError(f"Filter not found: {url}")
            existing.enabled = enabled
            result = existing.model_copy()

        logger.info(f"Filter {url} {'enabled' if enabled else 'disabled'}")
        return result

    def set_user_rules(self, text: str) -> List[str]:
        """Replace the user rules with the lines of text"""
        rules = text.splitlines()
        with self.config_service.update() as config:
            config.user_rules = rules

        logger.info(f"User rules updated ({len(rules)} lines)")
        return list(rules)
