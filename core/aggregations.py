"""Derived views over a filtered record sequence.

Every function here is pure: it reads the records and returns a fresh
structure, so views can be recomputed on each filter change.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Sequence

import pandas as pd

from core.records import (
    CATEGORY_MARKERS,
    GAP_BUCKET_LABELS,
    MONTHS_ORDER,
    UNSPECIFIED_DEV_TYPE,
    DevelopmentRecord,
    Person,
    records_frame,
)


TopicStats = Dict[str, Dict[str, FrozenSet[str]]]


def build_people(records: Sequence[DevelopmentRecord]) -> List[Person]:
    """Group records by exact name; person attributes come from the first record seen."""
    first: Dict[str, DevelopmentRecord] = {}
    courses: Dict[str, List[DevelopmentRecord]] = {}
    for rec in records:
        if rec.name not in first:
            first[rec.name] = rec
            courses[rec.name] = []
        courses[rec.name].append(rec)
    return [
        Person(
            name=name,
            position=rec.position,
            group=rec.group,
            department=rec.department,
            evaluator=rec.evaluator,
            courses=tuple(courses[name]),
        )
        for name, rec in first.items()
    ]


def dev_type_distribution(records: Sequence[DevelopmentRecord]) -> List[Dict[str, object]]:
    df = records_frame(records)
    if df.empty:
        return []
    dev_type = df["dev_type"].replace("", UNSPECIFIED_DEV_TYPE)
    counts = dev_type.groupby(dev_type, sort=False).size()
    return [{"name": str(name), "value": int(value)} for name, value in counts.items()]


def gap_values(records: Sequence[DevelopmentRecord]) -> pd.Series:
    df = records_frame(records)
    return pd.to_numeric(df["gap"], errors="coerce").fillna(0)


def gap_buckets(records: Sequence[DevelopmentRecord]) -> List[Dict[str, object]]:
    gap = gap_values(records)
    counts = {
        "low": int((gap <= 1).sum()),
        "medium": int(((gap > 1) & (gap <= 3)).sum()),
        "high": int((gap > 3).sum()),
    }
    return [{"bucket": key, "name": GAP_BUCKET_LABELS[key], "value": counts[key]} for key in GAP_BUCKET_LABELS]


def monthly_activity(records: Sequence[DevelopmentRecord]) -> List[Dict[str, object]]:
    df = records_frame(records)
    counts = df["start_month"].value_counts().reindex(MONTHS_ORDER, fill_value=0)
    return [{"month": month, "value": int(counts[month])} for month in MONTHS_ORDER]


def topic_stats(records: Sequence[DevelopmentRecord]) -> TopicStats:
    raw: Dict[str, Dict[str, set]] = {}
    for rec in records:
        raw.setdefault(rec.dev_type, {}).setdefault(rec.topic, set()).add(rec.name)
    return {
        dev_type: {topic: frozenset(raw[dev_type][topic]) for topic in sorted(raw[dev_type])}
        for dev_type in sorted(raw)
    }


def category_tallies(records: Sequence[DevelopmentRecord]) -> Dict[str, int]:
    # Independent substring tests: a record may count toward more than one category.
    df = records_frame(records)
    dev_type = df["dev_type"].astype(str)
    return {key: int(dev_type.str.contains(marker, regex=False).sum()) for key, marker in CATEGORY_MARKERS}


def summary_stats(records: Sequence[DevelopmentRecord], people: Sequence[Person]) -> Dict[str, int]:
    tallies = category_tallies(records)
    return {
        "total_people": len(people),
        "total_records": len(records),
        "total_knowledge": tallies["knowledge"],
        "total_skill": tallies["skill"],
        "total_competency": tallies["competency"],
    }
