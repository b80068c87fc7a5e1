from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from core.filters import DashboardFilters
from core.records import records_frame, to_number

LIST_COLUMNS = ["name", "position", "topic", "target", "actual", "gap", "start_month"]

EXPORT_HEADERS = {
    "year": "ปีงบประมาณ",
    "department": "สังกัด",
    "group": "กลุ่มงาน",
    "name": "ชื่อ-สกุล",
    "position": "ตำแหน่ง",
    "evaluator": "ผู้ประเมิน",
    "dev_type": "ประเภทการพัฒนา",
    "topic": "หัวข้อการพัฒนา",
    "target": "Target",
    "actual": "Actual",
    "gap": "Gap",
    "method70": "70% การปฏิบัติ",
    "method20": "20% พี่เลี้ยง",
    "method10": "10% การอบรม",
    "start_month": "เดือนเริ่มต้น",
    "end_month": "เดือนสิ้นสุด",
    "budget": "งบประมาณ",
    "kpi": "KPI",
}


def gap_display(gap: object) -> str:
    """Outstanding gap as ``-N``, or ``OK`` when nothing is left to close."""
    return f"-{gap}" if to_number(gap) > 0 else "OK"


def compute_records_list(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    df = records_frame(ctx.get("filtered_records", ()))
    df["gap_display"] = df["gap"].map(gap_display)
    return {
        "filters": filters.to_dict(),
        "count": int(len(df)),
        "columns": LIST_COLUMNS,
        "rows": df[["id", *LIST_COLUMNS, "gap_display"]].to_dict(orient="records"),
    }


def export_frame(ctx: Dict[str, Any]) -> pd.DataFrame:
    df = records_frame(ctx.get("filtered_records", ()))
    return df[list(EXPORT_HEADERS)].rename(columns=EXPORT_HEADERS)
