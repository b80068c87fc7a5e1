import json

from core.data import prepare_context
from core.metrics_directory import compute_directory, group_courses, method_html
from core.metrics_list import EXPORT_HEADERS, compute_records_list, export_frame, gap_display
from core.metrics_overview import compute_overview
from core.records import DevelopmentRecord, Person


def _ctx(records, raw=None, topic=None):
    return prepare_context(raw or {}, {"records": records}, selected_topic=topic)


def test_overview_payload(records):
    ctx = _ctx(records, topic="Excel")
    payload = compute_overview(ctx["filters"], ctx)
    assert payload["kpis"]["total_people"] == 3
    assert [b["value"] for b in payload["gap_buckets"]] == [2, 1, 1]
    assert len(payload["monthly_activity"]) == 12
    assert payload["selected_topic"] == "Excel"
    skill = next(t for t in payload["topic_stats"] if t["dev_type"] == "ด้านทักษะ (Skill)")
    assert skill["topic_count"] == 1
    assert skill["topics"][0] == {"topic": "Excel", "person_count": 1, "people": ["สมชาย ใจดี"], "active": True}
    assert {"gap", "monthly_activity", "dev_type"} <= set(payload["charts"])
    json.dumps(payload, default=str)


def test_overview_on_empty_filter_result(records):
    ctx = _ctx(records, {"search_name": "nobody"})
    payload = compute_overview(ctx["filters"], ctx)
    assert payload["kpis"]["total_people"] == 0
    assert payload["dev_type_distribution"] == []
    assert "dev_type" not in payload["charts"]
    assert all(m["value"] == 0 for m in payload["monthly_activity"])
    assert payload["filters"]["search_name"] == "nobody"


def test_directory_applies_drill_down(records):
    ctx = _ctx(records, topic="ภาวะผู้นำ")
    payload = compute_directory(ctx["filters"], ctx)
    assert payload["total_people"] == 3
    assert [p["name"] for p in payload["people"]] == ["สมหญิง รักงาน"]


def test_directory_person_payload(records):
    ctx = _ctx(records)
    somchai = compute_directory(ctx["filters"], ctx)["people"][0]
    assert somchai["course_count"] == 2
    # "1,500" is not numeric, so only the 500 counts.
    assert somchai["total_budget"] == 500.0
    assert somchai["kpis"] == ["ผ่านการทดสอบ", "รายงานทันเวลา"]
    assert [c["number"] for c in somchai["courses"]] == [1, 2]
    assert somchai["courses"][1]["budget_display"] == "500 บ."


def test_records_list_and_export(records):
    ctx = _ctx(records, {"selected_dev_types": ["ด้านทักษะ (Skill)"]})
    payload = compute_records_list(ctx["filters"], ctx)
    assert payload["count"] == 1
    assert payload["rows"][0]["topic"] == "Excel"
    export = export_frame(ctx)
    assert list(export.columns) == list(EXPORT_HEADERS.values())
    assert len(export) == 1


def test_directory_groups_courses_by_category(records):
    ctx = _ctx(records)
    people = {p["name"]: p for p in compute_directory(ctx["filters"], ctx)["people"]}

    somchai = people["สมชาย ใจดี"]["course_groups"]
    assert [g["key"] for g in somchai] == ["knowledge", "skill"]
    assert somchai[0]["title"] == "1. ความรู้ (Knowledge)"
    assert [(c["number"], c["topic"]) for c in somchai[1]["courses"]] == [("2.1", "Excel")]

    wichai = people["วิชัย มานะ"]["course_groups"]
    assert [(g["key"], [c["number"] for c in g["courses"]]) for g in wichai] == [("other", ["1"])]


def test_course_in_several_categories_is_listed_in_each():
    person = Person(
        name="A",
        courses=(
            DevelopmentRecord(id=0, name="A", dev_type="ความรู้และทักษะ", topic="T1"),
            DevelopmentRecord(id=1, name="A", dev_type="ด้านทักษะ (Skill)", topic="T2"),
            DevelopmentRecord(id=2, name="A", dev_type="อื่น", topic="T3"),
        ),
    )
    groups = {key: [(n, c.topic) for n, c in items] for key, _, items in group_courses(person)}
    assert groups == {
        "knowledge": [("1.1", "T1")],
        "skill": [("2.1", "T1"), ("2.2", "T2")],
        "other": [("1", "T3")],
    }


def test_gap_display_marks_open_gaps():
    assert gap_display("2") == "-2"
    assert gap_display("1.5") == "-1.5"
    assert gap_display("0") == "OK"
    assert gap_display("") == "OK"
    assert gap_display("abc") == "OK"


def test_records_list_rows_carry_gap_display(records):
    ctx = _ctx(records)
    rows = compute_records_list(ctx["filters"], ctx)["rows"]
    assert [r["gap_display"] for r in rows] == ["-2", "OK", "-4", "OK"]


def test_method_html_escapes_sheet_text():
    html = method_html("70%", "<img src=x onerror=alert(1)> & co", "#eff6ff")
    assert "<img" not in html
    assert "&lt;img src=x onerror=alert(1)&gt; &amp; co" in html
    assert method_html("20%", "", "#fff7ed").endswith("<br>-</div>")
