from __future__ import annotations

import logging
import threading
import time
from datetime import datetime
from typing import Dict, Optional, Tuple

import requests

from core.aggregations import build_people
from core.config import Settings, load_settings
from core.drilldown import drill_down
from core.filters import DashboardFilters, apply_filters, filter_options, normalize_filters
from core.parsing import parse_records
from core.records import DevelopmentRecord


logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """Raised when the sheet export cannot be fetched."""


def cache_busting_params() -> Dict[str, str]:
    return {"t": str(int(time.time() * 1000))}


def fetch_sheet_csv(settings: Optional[Settings] = None) -> str:
    settings = settings or load_settings()
    url = settings.require_sheet_url()
    logger.info("fetching sheet export")
    try:
        response = requests.get(url, params=cache_busting_params(), timeout=settings.fetch_timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Failed to fetch data from source: {exc}") from exc
    # Sheets exports are UTF-8 but often come without a charset.
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = "utf-8"
    text = response.text
    logger.info("fetched %d bytes", len(text))
    return text


class SheetStore:
    """Current record set plus a refresh that replaces it wholesale.

    Only one refresh runs at a time; a second request while one is in flight
    is rejected rather than queued. A failed refresh keeps the previous data.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._busy = threading.Lock()
        self._records: Tuple[DevelopmentRecord, ...] = ()
        self._last_updated: Optional[datetime] = None

    @property
    def settings(self) -> Settings:
        return self._settings or load_settings()

    @property
    def records(self) -> Tuple[DevelopmentRecord, ...]:
        return self._records

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._last_updated

    @property
    def loaded(self) -> bool:
        return self._last_updated is not None

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    def refresh(self) -> bool:
        if not self._busy.acquire(blocking=False):
            logger.info("refresh already in progress; ignoring")
            return False
        try:
            records = parse_records(fetch_sheet_csv(self.settings))
            self._records = records
            self._last_updated = datetime.now()
            logger.info("loaded %d records", len(records))
            return True
        finally:
            self._busy.release()

    def wait(self) -> None:
        """Block until an in-flight refresh, if any, has finished."""
        with self._busy:
            pass

    def snapshot(self) -> Dict[str, object]:
        records = self._records
        return {
            "records": records,
            "options": filter_options(records),
            "last_updated": self._last_updated,
        }


_store: Optional[SheetStore] = None


def get_store() -> SheetStore:
    global _store
    if _store is None:
        _store = SheetStore()
    return _store


def set_store(store: Optional[SheetStore]) -> None:
    global _store
    _store = store


def load_dashboard_data(*, force: bool = False) -> Dict[str, object]:
    store = get_store()
    if force or not store.loaded:
        if not store.refresh() and not store.loaded:
            # Another caller is running the first load; use its result.
            store.wait()
            if not store.loaded:
                store.refresh()
    return store.snapshot()


def prepare_context(
    filters: dict | DashboardFilters,
    data_ctx: Dict[str, object],
    *,
    selected_topic: Optional[str] = None,
) -> Dict[str, object]:
    filt = filters if isinstance(filters, DashboardFilters) else normalize_filters(filters)
    records: Tuple[DevelopmentRecord, ...] = tuple(data_ctx.get("records") or ())

    filtered_records = apply_filters(records, filt)
    people = build_people(filtered_records)
    displayed_people = drill_down(people, selected_topic)

    return {
        "filters": filt,
        "records": records,
        "options": data_ctx.get("options") or filter_options(records),
        "last_updated": data_ctx.get("last_updated"),
        "filtered_records": filtered_records,
        "people": people,
        "selected_topic": selected_topic or None,
        "displayed_people": displayed_people,
    }
