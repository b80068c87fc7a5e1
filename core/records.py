from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Dict, List, Sequence, Tuple

import pandas as pd


# Source sheet column index -> record attribute. Columns 1 and >18 are unused.
COLUMN_MAP: Dict[str, int] = {
    "year": 0,
    "department": 2,
    "group": 3,
    "name": 4,
    "position": 5,
    "evaluator": 6,
    "dev_type": 7,
    "topic": 8,
    "target": 9,
    "actual": 10,
    "gap": 11,
    "method70": 12,
    "method20": 13,
    "method10": 14,
    "start_month": 15,
    "end_month": 16,
    "budget": 17,
    "kpi": 18,
}

MIN_FIELDS = 6

MONTHS_ORDER: List[str] = [
    "มกราคม",
    "กุมภาพันธ์",
    "มีนาคม",
    "เมษายน",
    "พฤษภาคม",
    "มิถุนายน",
    "กรกฎาคม",
    "สิงหาคม",
    "กันยายน",
    "ตุลาคม",
    "พฤศจิกายน",
    "ธันวาคม",
]

UNSPECIFIED_DEV_TYPE = "ไม่ระบุ"

# (key, substring looked up inside dev_type)
CATEGORY_MARKERS: List[Tuple[str, str]] = [
    ("knowledge", "ความรู้"),
    ("skill", "ทักษะ"),
    ("competency", "สมรรถนะ"),
]

GAP_BUCKET_LABELS: Dict[str, str] = {
    "low": "Gap น้อย (0-1)",
    "medium": "Gap ปานกลาง (2-3)",
    "high": "Gap สูง (>3)",
}


@dataclass(frozen=True)
class DevelopmentRecord:
    """One planned development activity for one person."""

    id: int
    year: str = ""
    department: str = ""
    group: str = ""
    name: str = ""
    position: str = ""
    evaluator: str = ""
    dev_type: str = ""
    topic: str = ""
    target: str = ""
    actual: str = ""
    gap: str = ""
    method70: str = ""
    method20: str = ""
    method10: str = ""
    start_month: str = ""
    end_month: str = ""
    budget: str = ""
    kpi: str = ""


RECORD_COLUMNS: List[str] = [f.name for f in fields(DevelopmentRecord)]


@dataclass(frozen=True)
class Person:
    name: str
    position: str = ""
    group: str = ""
    department: str = ""
    evaluator: str = ""
    courses: Tuple[DevelopmentRecord, ...] = ()

    @property
    def topics(self) -> List[str]:
        return [c.topic for c in self.courses]


def records_frame(records: Sequence[DevelopmentRecord]) -> pd.DataFrame:
    """DataFrame view of records; keeps the full column set when empty."""
    return pd.DataFrame([asdict(r) for r in records], columns=RECORD_COLUMNS)


def to_number(value: object) -> float:
    """Numeric value of a text field; anything non-numeric counts as 0."""
    if value is None:
        return 0.0
    out = pd.to_numeric(value, errors="coerce")
    if pd.isna(out):
        return 0.0
    return float(out)


def format_budget(value: object, suffix: str = "บาท") -> str:
    amount = to_number(value)
    if amount <= 0:
        return "-"
    return f"{amount:,.0f} {suffix}".strip()
