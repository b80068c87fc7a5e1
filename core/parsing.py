"""Sheet CSV text -> DevelopmentRecord tuple.

The parser deliberately handles only the subset of CSV the published sheet
produces: commas inside double-quoted fields are kept, surrounding quotes are
stripped, and escaped quotes (``""``) are left as-is.
"""

from __future__ import annotations

import logging
import re
from typing import List, Sequence, Tuple

from core.records import COLUMN_MAP, MIN_FIELDS, DevelopmentRecord


logger = logging.getLogger(__name__)

# A comma followed by an even number of quotes up to end of line is outside any quoted field.
FIELD_SEPARATOR = re.compile(r',(?=(?:(?:[^"]*"){2})*[^"]*$)')
EDGE_QUOTES = re.compile(r'^"|"$')


def split_line(line: str) -> List[str]:
    return [EDGE_QUOTES.sub("", cell).strip() for cell in FIELD_SEPARATOR.split(line)]


def parse_csv(text: str) -> List[List[str]]:
    """Split text into rows of fields, dropping the header line."""
    lines = (text or "").split("\n")
    rows = [split_line(line.rstrip("\r")) for line in lines]
    return rows[1:]


def _field(row: Sequence[str], idx: int) -> str:
    return row[idx] if idx < len(row) else ""


def normalize_rows(rows: Sequence[Sequence[str]]) -> Tuple[DevelopmentRecord, ...]:
    kept = [row for row in rows if len(row) >= MIN_FIELDS]
    dropped = len(rows) - len(kept)
    if dropped:
        logger.debug("dropped %d short rows", dropped)
    return tuple(
        DevelopmentRecord(id=idx, **{attr: _field(row, col) for attr, col in COLUMN_MAP.items()})
        for idx, row in enumerate(kept)
    )


def parse_records(text: str) -> Tuple[DevelopmentRecord, ...]:
    return normalize_rows(parse_csv(text))
