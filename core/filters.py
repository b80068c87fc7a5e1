from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from core.records import DevelopmentRecord


@dataclass(frozen=True)
class Selection:
    """Checkbox filter state: either unrestricted or restricted to a set of values.

    An empty checkbox list in the UI means "everything"; ``normalize_filters``
    decodes that once so nothing downstream has to treat emptiness as a sentinel.
    """

    values: Optional[FrozenSet[str]] = None

    @classmethod
    def unrestricted(cls) -> "Selection":
        return cls(None)

    @classmethod
    def restricted_to(cls, values: Iterable[str]) -> "Selection":
        return cls(frozenset(values))

    @property
    def is_unrestricted(self) -> bool:
        return self.values is None

    def matches(self, value: str) -> bool:
        return self.values is None or value in self.values

    def as_list(self) -> List[str]:
        return [] if self.values is None else sorted(self.values)


# filter field -> record attribute
SELECTION_FIELDS: Dict[str, str] = {
    "selected_groups": "group",
    "selected_positions": "position",
    "selected_start_months": "start_month",
    "selected_dev_types": "dev_type",
    "selected_topics": "topic",
}


@dataclass(frozen=True)
class DashboardFilters:
    search_name: str = ""
    selected_groups: Selection = field(default_factory=Selection.unrestricted)
    selected_positions: Selection = field(default_factory=Selection.unrestricted)
    selected_start_months: Selection = field(default_factory=Selection.unrestricted)
    selected_dev_types: Selection = field(default_factory=Selection.unrestricted)
    selected_topics: Selection = field(default_factory=Selection.unrestricted)

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {"search_name": self.search_name}
        for name in SELECTION_FIELDS:
            out[name] = getattr(self, name).as_list()
        return out


def _as_selection(values: Optional[Iterable[object]]) -> Selection:
    if isinstance(values, Selection):
        return values
    if not values:
        return Selection.unrestricted()
    cleaned = [str(v) for v in values if v is not None]
    if not cleaned:
        return Selection.unrestricted()
    return Selection.restricted_to(cleaned)


def normalize_filters(raw: Optional[dict]) -> DashboardFilters:
    raw = raw or {}
    return DashboardFilters(
        search_name=str(raw.get("search_name") or ""),
        **{name: _as_selection(raw.get(name)) for name in SELECTION_FIELDS},
    )


def record_matches(record: DevelopmentRecord, filters: DashboardFilters) -> bool:
    if filters.search_name and filters.search_name.lower() not in record.name.lower():
        return False
    return all(getattr(filters, name).matches(getattr(record, attr)) for name, attr in SELECTION_FIELDS.items())


def apply_filters(records: Sequence[DevelopmentRecord], filters: DashboardFilters) -> Tuple[DevelopmentRecord, ...]:
    return tuple(r for r in records if record_matches(r, filters))


def filter_options(records: Sequence[DevelopmentRecord]) -> Dict[str, List[str]]:
    """Distinct non-empty values per filter field, first-seen order."""
    options: Dict[str, List[str]] = {}
    for name, attr in SELECTION_FIELDS.items():
        seen = dict.fromkeys(getattr(r, attr) for r in records if getattr(r, attr))
        options[name] = list(seen)
    return options


def toggle_value(values: Sequence[str], value: str) -> List[str]:
    if value in values:
        return [v for v in values if v != value]
    return [*values, value]
