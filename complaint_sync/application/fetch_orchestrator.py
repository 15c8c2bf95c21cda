"""
Fetch Orchestrator
Loads the data a screen needs, fetching only the domains whose cache is stale.

A load pass:
    1. asks each requested domain's store whether it is stale
    2. issues every stale (or forced) request concurrently
    3. normalizes each response and writes it to its store as soon as that
       request settles
    4. moves to READY, even if some requests failed

A failed request, or a response that cannot be normalized, is logged and
reported; its siblings are unaffected and the store keeps its previous value
(and stays stale, so the next pass retries).

Overlapping requests for the same domain are not sequenced by default: the
store holds whichever response was written last. With
`discard_superseded=True` a completion older than the latest request issued
for its domain is dropped instead.

Keyed domains (complaint detail, per-complaint comments, per-range reports)
are loaded one key at a time through their own entry points.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from ..cache import CacheDomain, CacheService, KEYED_DOMAINS, complaint_key, report_key
from ..core.logging_framework import LogCategory
from ..domain.entities import Comment, Complaint, ComplaintStatus
from ..domain.models import ComplaintFilters, ComplaintReport, DashboardStats, UserSettings
from ..domain.ports import ComplaintApiPort
from ..services.response_normalizer import ResponseNormalizer

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    """Loading indicator state exposed to the UI"""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class Screen(str, Enum):
    """Portal screens with a known set of data dependencies"""
    ADMIN_DASHBOARD = "admin_dashboard"
    PROVIDER_DASHBOARD = "provider_dashboard"
    SEARCH = "search"
    USER_MANAGEMENT = "user_management"
    NOTIFICATIONS = "notifications"
    COMPLAINT_FORM = "complaint_form"
    ASSIGNMENTS = "assignments"
    SETTINGS = "settings"


SCREEN_DOMAINS: Dict[Screen, tuple] = {
    Screen.ADMIN_DASHBOARD: (
        CacheDomain.DASHBOARD_STATS,
        CacheDomain.STATUSES,
        CacheDomain.TYPES,
        CacheDomain.USERS,
        CacheDomain.COMPLAINTS,
    ),
    Screen.PROVIDER_DASHBOARD: (
        CacheDomain.DASHBOARD_STATS,
        CacheDomain.STATUSES,
        CacheDomain.TYPES,
        CacheDomain.COMPLAINTS,
    ),
    Screen.SEARCH: (
        CacheDomain.STATUSES,
        CacheDomain.TYPES,
        CacheDomain.PRIORITIES,
        CacheDomain.SORT_OPTIONS,
    ),
    Screen.USER_MANAGEMENT: (
        CacheDomain.USERS,
        CacheDomain.ROLES,
    ),
    Screen.NOTIFICATIONS: (
        CacheDomain.NOTIFICATIONS,
    ),
    Screen.COMPLAINT_FORM: (
        CacheDomain.WORKERS,
        CacheDomain.CLIENTS,
        CacheDomain.STATUSES,
        CacheDomain.TYPES,
        CacheDomain.PRIORITIES,
    ),
    Screen.ASSIGNMENTS: (
        CacheDomain.COMPLAINTS,
        CacheDomain.ASSIGNED_COMPLAINTS,
        CacheDomain.PROVIDERS,
    ),
    Screen.SETTINGS: (
        CacheDomain.SETTINGS,
    ),
}

STATUS_LIST_DOMAINS: Dict[ComplaintStatus, CacheDomain] = {
    ComplaintStatus.OPEN: CacheDomain.OPEN_COMPLAINTS,
    ComplaintStatus.IN_PROGRESS: CacheDomain.PENDING_COMPLAINTS,
    ComplaintStatus.CLOSED: CacheDomain.RESOLVED_COMPLAINTS,
    ComplaintStatus.REFUSED: CacheDomain.REFUSED_COMPLAINTS,
}


@dataclass
class DomainSource:
    """How to fetch and normalize one domain"""
    fetch: Callable[[], Awaitable[Any]]
    normalize: Callable[[Any], Any]
    empty: Callable[[], Any] = tuple


@dataclass
class FetchReport:
    """Outcome of one orchestrator pass"""
    fetched: List[CacheDomain] = field(default_factory=list)
    skipped: List[CacheDomain] = field(default_factory=list)
    failed: Dict[CacheDomain, Exception] = field(default_factory=dict)
    discarded: List[CacheDomain] = field(default_factory=list)
    values: Dict[CacheDomain, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failed

    def __getitem__(self, domain: CacheDomain) -> Any:
        return self.values[domain]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fetched": [d.value for d in self.fetched],
            "skipped": [d.value for d in self.skipped],
            "failed": {d.value: str(e) for d, e in self.failed.items()},
            "discarded": [d.value for d in self.discarded],
            "duration_ms": round(self.duration_ms, 2),
        }


StateListener = Callable[[LoadState], None]
ErrorListener = Callable[[CacheDomain, Exception], None]


class FetchOrchestrator:
    """
    Staleness-aware loader over a CacheService.

    Example:
        orchestrator = FetchOrchestrator(api, cache, normalizer)
        report = await orchestrator.load_screen(Screen.ADMIN_DASHBOARD)
        stats = report[CacheDomain.DASHBOARD_STATS]

    Cached values are immutable (tuples and frozen entities), so every reader
    can share the stored object.
    """

    def __init__(
        self,
        api: ComplaintApiPort,
        cache: CacheService,
        normalizer: Optional[ResponseNormalizer] = None,
        discard_superseded: bool = False
    ):
        self.api = api
        self.cache = cache
        self.normalizer = normalizer or ResponseNormalizer(cache.clock)
        self.discard_superseded = discard_superseded

        self.state = LoadState.IDLE
        self.last_search_filters = ComplaintFilters()
        self.last_complaint_filters = ComplaintFilters()
        self._state_listeners: List[StateListener] = []
        self._error_listeners: List[ErrorListener] = []
        self._issued: Dict[str, int] = {}

        self._sources = self._build_sources()

    def _build_sources(self) -> Dict[CacheDomain, DomainSource]:
        n = self.normalizer
        options = n.normalize_reference_options
        sources = {
            CacheDomain.DASHBOARD_STATS: DomainSource(
                self.api.get_dashboard_stats, n.normalize_stats, DashboardStats
            ),
            CacheDomain.COMPLAINTS: DomainSource(self._fetch_complaint_list, n.normalize_complaints),
            CacheDomain.SEARCH_RESULTS: DomainSource(
                lambda: self.api.search_complaints(self.last_search_filters), n.normalize_complaints
            ),
            CacheDomain.ASSIGNED_COMPLAINTS: DomainSource(
                self.api.list_assigned_complaints, n.normalize_assigned_complaints
            ),
            CacheDomain.SETTINGS: DomainSource(self.api.get_settings, n.normalize_settings, UserSettings),
            CacheDomain.USERS: DomainSource(self.api.list_users, n.normalize_users),
            CacheDomain.NOTIFICATIONS: DomainSource(self.api.list_notifications, n.normalize_notifications),
            CacheDomain.WORKERS: DomainSource(self.api.list_workers, partial(options, named_fields=("workers", "dsws"))),
            CacheDomain.CLIENTS: DomainSource(self.api.list_clients, partial(options, named_fields=("clients",))),
            CacheDomain.PROVIDERS: DomainSource(self.api.list_providers, partial(options, named_fields=("providers",))),
            CacheDomain.STATUSES: DomainSource(self.api.list_statuses, partial(options, named_fields=("statuses",))),
            CacheDomain.TYPES: DomainSource(self.api.list_types, partial(options, named_fields=("types",))),
            CacheDomain.PRIORITIES: DomainSource(
                self.api.list_priorities, partial(options, named_fields=("priorities",))
            ),
            CacheDomain.SORT_OPTIONS: DomainSource(
                self.api.list_sort_options, partial(options, named_fields=("sort_by", "options"))
            ),
            CacheDomain.ROLES: DomainSource(self.api.list_roles, partial(options, named_fields=("roles",))),
        }
        for status, domain in STATUS_LIST_DOMAINS.items():
            sources[domain] = DomainSource(
                partial(self.api.list_complaints_by_status, status), n.normalize_complaints
            )
        return sources

    def _fetch_complaint_list(self) -> Awaitable[Any]:
        """The complaint list honours the filters of the last filter-driven refetch"""
        if self.last_complaint_filters.is_empty():
            return self.api.list_complaints()
        return self.api.search_complaints(self.last_complaint_filters)

    # ==================== Observers ====================

    def add_state_listener(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        if listener in self._state_listeners:
            self._state_listeners.remove(listener)

    def add_error_listener(self, listener: ErrorListener) -> None:
        """Called once per failed domain fetch, e.g. to show a non-blocking notice"""
        self._error_listeners.append(listener)

    def _set_state(self, state: LoadState) -> None:
        if state == self.state:
            return
        self.state = state
        for listener in list(self._state_listeners):
            listener(state)

    def _notify_error(self, domain: CacheDomain, error: Exception) -> None:
        for listener in list(self._error_listeners):
            listener(domain, error)

    def _record_failure(
        self,
        domain: CacheDomain,
        error: Exception,
        report: Optional[FetchReport] = None,
        key: Optional[str] = None
    ) -> None:
        """A failed fetch or an unusable response: log, report, notify"""
        label = f"{domain.value}[{key}]" if key else domain.value
        if report is not None:
            report.failed[domain] = error
        logger.warning(
            f"Fetch failed for {label}: {type(error).__name__}: {error}",
            extra={"category": LogCategory.FETCH, "extra_data": {"domain": domain.value, "key": key}}
        )
        self._notify_error(domain, error)

    # ==================== Sequencing ====================

    def _issue(self, key: str) -> int:
        seq = self._issued.get(key, 0) + 1
        self._issued[key] = seq
        return seq

    def _is_superseded(self, key: str, seq: int) -> bool:
        return self.discard_superseded and seq < self._issued.get(key, 0)

    # ==================== Screen loads ====================

    def current_value(self, domain: CacheDomain) -> Any:
        """Store value, or the domain's empty default when nothing was ever cached"""
        value = self.cache.get(domain)
        if value is None:
            return self._sources[domain].empty()
        return value

    async def load(self, domains: Iterable[CacheDomain], force: bool = False) -> FetchReport:
        """
        Fetch every stale (or, with `force`, every) requested domain.

        Args:
            domains: Domains the caller needs
            force: Ignore freshness and refetch all of them

        Returns:
            FetchReport with the value now visible for every requested domain
        """
        start = time.time()
        report = FetchReport()

        requested = []
        for domain in domains:
            if domain in KEYED_DOMAINS or domain not in self._sources:
                raise ValueError(
                    f"{domain.value} cannot be loaded as a whole; "
                    f"use load_complaint_detail, load_comments or load_report"
                )
            if domain not in requested:
                requested.append(domain)

        batch = []
        for domain in requested:
            if force or self.cache.is_stale(domain):
                batch.append(domain)
            else:
                report.skipped.append(domain)

        try:
            if batch:
                self._set_state(LoadState.LOADING)
                await asyncio.gather(*(self._fetch_domain(domain, report) for domain in batch))

            for domain in requested:
                report.values[domain] = self.current_value(domain)
        finally:
            report.duration_ms = (time.time() - start) * 1000
            self._set_state(LoadState.READY)

        logger.info(
            f"Load pass: {len(report.fetched)} fetched, {len(report.skipped)} fresh, "
            f"{len(report.failed)} failed",
            extra={"category": LogCategory.FETCH, "extra_data": report.to_dict()}
        )
        return report

    async def load_screen(self, screen: Screen, force: bool = False) -> FetchReport:
        return await self.load(SCREEN_DOMAINS[screen], force=force)

    async def load_status_list(self, status: ComplaintStatus, force: bool = False) -> FetchReport:
        """Complaints in one status bucket (open, pending, resolved, refused)"""
        return await self.load([STATUS_LIST_DOMAINS[status]], force=force)

    async def _fetch_domain(self, domain: CacheDomain, report: FetchReport) -> None:
        """Fetch, normalize and store one domain. Never raises."""
        source = self._sources[domain]
        seq = self._issue(domain.value)

        try:
            value = source.normalize(await source.fetch())
        except Exception as e:
            self._record_failure(domain, e, report)
            return

        if self._is_superseded(domain.value, seq):
            report.discarded.append(domain)
            logger.debug(
                f"Discarding superseded response for {domain.value} (#{seq})",
                extra={"category": LogCategory.FETCH}
            )
            return

        self.cache.store(domain).set(value)
        report.fetched.append(domain)

    # ==================== Filter-driven refetches ====================

    async def refetch_complaints(self, filters: Optional[ComplaintFilters] = None) -> FetchReport:
        """
        Reload the complaint list for a filter change.

        Always hits the network and never shows the loading indicator. Empty
        filters use the plain list endpoint; anything else goes through search.
        The filters are kept, so later loads of the list stay filtered.
        """
        self.last_complaint_filters = filters or ComplaintFilters()
        return await self._refetch(CacheDomain.COMPLAINTS)

    async def search(self, filters: ComplaintFilters) -> FetchReport:
        """Run an advanced search and replace the search results"""
        self.last_search_filters = filters
        return await self._refetch(CacheDomain.SEARCH_RESULTS)

    async def _refetch(self, domain: CacheDomain) -> FetchReport:
        start = time.time()
        report = FetchReport()

        await self._fetch_domain(domain, report)

        report.values[domain] = self.current_value(domain)
        report.duration_ms = (time.time() - start) * 1000
        return report

    # ==================== Keyed loads ====================

    async def _load_keyed(
        self,
        domain: CacheDomain,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        normalize: Callable[[Any], Any],
        force: bool
    ) -> Any:
        """
        One entry of a keyed domain, served from cache while fresh.

        Returns the cached entry when the fetch fails or yields nothing.
        """
        store = self.cache.keyed(domain)

        if not force and not store.is_stale(key):
            return store.get(key)

        request_key = f"{domain.value}:{key}"
        seq = self._issue(request_key)
        try:
            value = normalize(await fetch())
        except Exception as e:
            self._record_failure(domain, e, key=key)
            return store.get(key)

        if value is None:
            logger.info(
                f"{domain.value}[{key}] not found",
                extra={"category": LogCategory.FETCH}
            )
            return store.get(key)

        if self._is_superseded(request_key, seq):
            logger.debug(
                f"Discarding superseded response for {domain.value}[{key}] (#{seq})",
                extra={"category": LogCategory.FETCH}
            )
        else:
            store.set(key, value)
        return store.get(key)

    async def load_complaint_detail(self, complaint_id: str, force: bool = False) -> Optional[Complaint]:
        """
        Complaint by id (numeric or "CMP-<n>"), served from cache while fresh.

        Returns the cached value when the fetch fails, and None when the
        complaint does not exist and was never cached.
        """
        key = complaint_key(complaint_id)
        return await self._load_keyed(
            CacheDomain.COMPLAINT_DETAIL,
            key,
            partial(self.api.get_complaint, key),
            self.normalizer.normalize_complaint,
            force,
        )

    async def load_comments(self, complaint_id: str, force: bool = False) -> Tuple[Comment, ...]:
        """Comments on one complaint; empty when none were ever loaded"""
        key = complaint_key(complaint_id)
        comments = await self._load_keyed(
            CacheDomain.COMMENTS,
            key,
            self.api.list_comments,
            partial(self.normalizer.normalize_comments, complaint_id=key),
            force,
        )
        return comments if comments is not None else ()

    async def load_report(
        self,
        start_date: str,
        end_date: str,
        force: bool = False
    ) -> Optional[ComplaintReport]:
        """
        Report for an inclusive YYYY-MM-DD range.

        None when the fetch fails and the range was never loaded.
        """
        return await self._load_keyed(
            CacheDomain.REPORTS,
            report_key(start_date, end_date),
            partial(self.api.get_report, start_date, end_date),
            partial(self.normalizer.normalize_report, start_date=start_date, end_date=end_date),
            force,
        )
