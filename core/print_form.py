"""Printable individual development plan (A4 HTML document)."""

from __future__ import annotations

from datetime import date
from html import escape
from typing import List, Optional

from core.records import MONTHS_ORDER, DevelopmentRecord, Person, format_budget


PRINT_CSS = """
@import url('https://fonts.googleapis.com/css2?family=Sarabun:wght@400;500;600;700&display=swap');
@media print {
  @page { size: A4; margin: 0; }
  body { -webkit-print-color-adjust: exact; }
  .print-container { padding: 20mm; page-break-after: always; }
}
body { font-family: 'Sarabun', sans-serif; color: #000; }
.print-container { max-width: 210mm; margin: 0 auto; padding: 20mm; }
h1 { font-size: 20px; text-align: center; margin-bottom: 4px; }
h2 { font-size: 16px; text-align: center; font-weight: 500; margin-top: 0; }
h3 { font-size: 16px; margin-bottom: 8px; }
table { width: 100%; border-collapse: collapse; margin-bottom: 1rem; font-size: 14px; }
th, td { border: 1px solid #000; padding: 8px; vertical-align: top; }
th { background-color: #f0f0f0; font-weight: bold; text-align: center; }
.no-border td { border: none; padding: 4px 0; }
.muted { font-size: 12px; margin-top: 4px; }
.center { text-align: center; }
.right { text-align: right; }
.signatures { display: flex; justify-content: space-between; margin-top: 48px; }
.signature { width: 45%; text-align: center; }
"""


def format_thai_date(value: date) -> str:
    """Long Thai date with the Buddhist-era year, e.g. ``5 มีนาคม 2568``."""
    return f"{value.day} {MONTHS_ORDER[value.month - 1]} {value.year + 543}"


def _e(value: object) -> str:
    return escape(str(value or ""))


def _method_cell(course: DevelopmentRecord) -> str:
    parts = []
    for label, text in (("70%", course.method70), ("20%", course.method20), ("10%", course.method10)):
        if text:
            parts.append(f"<div><b>{label}:</b> {_e(text)}</div>")
    return "".join(parts) or "-"


def _course_row(idx: int, course: DevelopmentRecord) -> str:
    target = f"<div class='muted'>เป้าหมาย: {_e(course.target)}</div>" if course.target else ""
    return (
        "<tr>"
        f"<td class='center'>{idx}</td>"
        f"<td><div><b>{_e(course.topic)}</b></div><div class='muted'>({_e(course.dev_type)})</div>{target}</td>"
        f"<td>{_method_cell(course)}</td>"
        f"<td class='center'>{_e(course.start_month)} - {_e(course.end_month)}</td>"
        f"<td class='right'>{_e(format_budget(course.budget))}</td>"
        "</tr>"
    )


def render_plan_html(person: Person, printed_on: Optional[date] = None) -> str:
    printed_on = printed_on or date.today()
    rows: List[str] = [_course_row(idx, c) for idx, c in enumerate(person.courses, start=1)]
    if not rows:
        rows.append("<tr><td colspan='5' class='center'>-</td></tr>")
    body_rows = "".join(rows)
    kpis = ", ".join(c.kpi for c in person.courses if c.kpi) or "-"
    year = next((c.year for c in person.courses if c.year), "")
    printed = format_thai_date(printed_on)

    return f"""<!DOCTYPE html>
<html lang="th">
<head>
<meta charset="utf-8">
<title>แผนพัฒนารายบุคคล - {_e(person.name)}</title>
<style>{PRINT_CSS}</style>
</head>
<body>
<div class="print-container">
  <h1>แผนพัฒนาบุคลากรรายบุคคล (Individual Development Plan: IDP)</h1>
  <h2>ประจำปีงบประมาณ {_e(year)}</h2>

  <table class="no-border">
    <tbody>
      <tr><td width="15%"><b>ชื่อ-สกุล:</b></td><td width="35%">{_e(person.name)}</td>
          <td width="15%"><b>ตำแหน่ง:</b></td><td width="35%">{_e(person.position)}</td></tr>
      <tr><td><b>สังกัด:</b></td><td>{_e(person.department)}</td>
          <td><b>กลุ่มงาน:</b></td><td>{_e(person.group)}</td></tr>
      <tr><td><b>ผู้ประเมิน:</b></td><td colspan="3">{_e(person.evaluator)}</td></tr>
    </tbody>
  </table>

  <h3>รายละเอียดแผนพัฒนา</h3>
  <table>
    <thead>
      <tr>
        <th width="5%">ลำดับ</th>
        <th width="25%">หัวข้อ/สมรรถนะที่พัฒนา</th>
        <th width="40%">วิธีการพัฒนา (70:20:10)</th>
        <th width="15%">ช่วงเวลา</th>
        <th width="15%">งบประมาณ</th>
      </tr>
    </thead>
    <tbody>
      {body_rows}
    </tbody>
  </table>

  <h3>ตัวชี้วัดความสำเร็จ (KPIs)</h3>
  <p>{_e(kpis)}</p>

  <div class="signatures">
    <div class="signature">
      <p>ลงชื่อ ........................................ ผู้จัดทำแผน</p>
      <p>( {_e(person.name)} )</p>
      <p>วันที่ {printed}</p>
    </div>
    <div class="signature">
      <p>ลงชื่อ ........................................ ผู้บังคับบัญชา</p>
      <p>( ........................................ )</p>
    </div>
  </div>
</div>
</body>
</html>
"""
