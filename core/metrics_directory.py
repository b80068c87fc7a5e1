from __future__ import annotations

from dataclasses import asdict
from html import escape
from typing import Any, Dict, List, Tuple

from core.filters import DashboardFilters
from core.records import CATEGORY_MARKERS, DevelopmentRecord, Person, format_budget, to_number

CATEGORY_TITLES = {
    "knowledge": "ความรู้ (Knowledge)",
    "skill": "ทักษะ (Skills)",
    "competency": "สมรรถนะ (Competency)",
}
OTHER_TITLE = "อื่นๆ (Others)"

CourseGroup = Tuple[str, str, List[Tuple[str, DevelopmentRecord]]]


def group_courses(person: Person) -> List[CourseGroup]:
    """Split a person's courses into numbered category sections.

    Knowledge, skill and competency sections are numbered ``1.x``, ``2.x`` and
    ``3.x``; a course whose dev type carries several markers shows up in each
    of them. Courses matching no marker go to a trailing "others" section
    numbered ``1..n``. Empty sections are omitted.
    """
    groups: List[CourseGroup] = []
    for section, (key, marker) in enumerate(CATEGORY_MARKERS, start=1):
        matched = [c for c in person.courses if marker in c.dev_type]
        if matched:
            title = f"{section}. {CATEGORY_TITLES[key]}"
            groups.append((key, title, [(f"{section}.{idx}", c) for idx, c in enumerate(matched, start=1)]))

    others = [c for c in person.courses if not any(marker in c.dev_type for _, marker in CATEGORY_MARKERS)]
    if others:
        groups.append(("other", OTHER_TITLE, [(str(idx), c) for idx, c in enumerate(others, start=1)]))
    return groups


def method_html(label: str, text: str, background: str) -> str:
    """Coloured 70/20/10 method block for the directory cards (text escaped)."""
    body = escape(text) if text else "-"
    return f"<div class='method' style='background:{background}'><b>{escape(label)}</b><br>{body}</div>"


def _course_payload(course: DevelopmentRecord, number: Any) -> Dict[str, Any]:
    row = asdict(course)
    row["number"] = number
    row["budget_display"] = format_budget(course.budget, "บ.")
    return row


def person_payload(person: Person) -> Dict[str, Any]:
    return {
        "name": person.name,
        "position": person.position,
        "group": person.group,
        "department": person.department,
        "evaluator": person.evaluator,
        "course_count": len(person.courses),
        "total_budget": sum(to_number(c.budget) for c in person.courses),
        "kpis": [c.kpi for c in person.courses if c.kpi],
        "courses": [_course_payload(c, idx) for idx, c in enumerate(person.courses, start=1)],
        "course_groups": [
            {"key": key, "title": title, "courses": [_course_payload(c, number) for number, c in items]}
            for key, title, items in group_courses(person)
        ],
    }


def compute_directory(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    people: List[Person] = ctx.get("people", [])
    displayed: List[Person] = ctx.get("displayed_people", people)
    return {
        "filters": filters.to_dict(),
        "selected_topic": ctx.get("selected_topic"),
        "total_people": len(people),
        "people": [person_payload(p) for p in displayed],
    }
