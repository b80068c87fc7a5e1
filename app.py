import altair as alt
import streamlit as st
from contextlib import contextmanager
from datetime import datetime
from html import escape
from typing import Dict, List, Optional

from core.aggregations import dev_type_distribution, gap_buckets, monthly_activity, summary_stats, topic_stats
from core.charts import dev_type_donut, gap_bar, monthly_line
from core.config import ConfigError
from core.data import FetchError, get_store, load_dashboard_data, prepare_context
from core.drilldown import toggle_topic
from core.filters import SELECTION_FIELDS, toggle_value
from core.metrics_directory import group_courses, method_html
from core.metrics_list import LIST_COLUMNS, export_frame, gap_display
from core.print_form import render_plan_html
from core.records import Person, format_budget, records_frame

alt.data_transformers.disable_max_rows()

FILTER_TITLES = {
    "selected_groups": "กลุ่มงาน",
    "selected_positions": "ตำแหน่ง",
    "selected_start_months": "เดือนเริ่มต้น",
    "selected_dev_types": "ประเภทการพัฒนา",
    "selected_topics": "หัวข้อการพัฒนา",
}

LIST_HEADERS = {
    "name": "ชื่อ-สกุล",
    "position": "ตำแหน่ง",
    "topic": "หัวข้อการพัฒนา",
    "target": "Target",
    "actual": "Actual",
    "gap": "Gap",
    "start_month": "เดือนเริ่มต้น",
}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .card-actions {font-size: 0.9rem;color: #4f46e5;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #eef2ff;border: 1px solid #e0e7ff;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #4338ca;}
        .method {border-radius: 8px;padding: 8px;font-size: 0.85rem;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{escape(title)}</div>
            <div class="card-actions">{escape(actions or "")}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(filters: Dict[str, object]) -> str:
    chips = []
    if filters.get("search_name"):
        chips.append(f"ค้นหา: {filters['search_name']}")
    for field, title in FILTER_TITLES.items():
        values = filters.get(field) or []
        chips.append(f"{title}: {', '.join(values)}" if values else f"{title}: ทั้งหมด")
    return "".join([f"<span class='chip'>{escape(txt)}</span>" for txt in chips])


def render_page_header(title: str, breadcrumb: str, last_updated: Optional[datetime]):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        busy = st.session_state.get("_refreshing", False) or get_store().busy
        if st.button("รีเฟรชข้อมูล", disabled=busy) and refresh_data():
            st.rerun()
        st.caption(f"อัปเดต: {last_updated:%H:%M:%S}" if last_updated else "กำลังเชื่อมต่อ...")


def refresh_data() -> bool:
    st.session_state["_refreshing"] = True
    try:
        load_dashboard_data(force=True)
        return True
    except ConfigError as exc:
        st.error(f"ตั้งค่าระบบไม่ครบ: {exc}")
    except FetchError:
        st.error("ไม่สามารถดึงข้อมูลจาก Google Sheet ได้ กรุณาตรวจสอบลิงก์หรืออินเทอร์เน็ต")
    finally:
        st.session_state["_refreshing"] = False
    return False


# ---------- UI setup ----------
st.set_page_config(page_title="IDP Dashboard", layout="wide")
inject_base_styles()

if "filters" not in st.session_state:
    st.session_state["filters"] = {"search_name": "", **{name: [] for name in SELECTION_FIELDS}}
if "clicked_topic" not in st.session_state:
    st.session_state["clicked_topic"] = None

try:
    data_ctx = load_dashboard_data()
except ConfigError as exc:
    st.error(f"ตั้งค่าระบบไม่ครบ: {exc}")
    st.stop()
except FetchError:
    st.error("ไม่สามารถดึงข้อมูลจาก Google Sheet ได้ กรุณาตรวจสอบลิงก์หรืออินเทอร์เน็ต")
    data_ctx = get_store().snapshot()

options: Dict[str, List[str]] = data_ctx.get("options", {})
filters = st.session_state["filters"]

# ----- Sidebar: navigation + filters -----
with st.sidebar:
    st.markdown("### IDP Dashboard")
    st.caption("Connected to Google Sheets")
    nav_choice = st.radio("เมนู", ["ภาพรวม", "ทำเนียบบุคลากร", "รายการทั้งหมด"], index=0)

    st.markdown("---")
    st.markdown("### ตัวกรอง")
    filters["search_name"] = st.text_input("ค้นหาชื่อ", filters.get("search_name", ""))
    for field, title in FILTER_TITLES.items():
        with st.expander(title, expanded=False):
            values = options.get(field, [])
            if not values:
                st.caption("ไม่มีข้อมูล")
            for idx, value in enumerate(values):
                checked = value in filters[field]
                if st.checkbox(value, value=checked, key=f"{field}-{idx}") != checked:
                    filters[field] = toggle_value(filters[field], value)
    if st.button("ล้างตัวกรอง"):
        st.session_state["filters"] = {"search_name": "", **{name: [] for name in SELECTION_FIELDS}}
        st.rerun()

ctx = prepare_context(filters, data_ctx, selected_topic=st.session_state["clicked_topic"])
filtered_records = ctx["filtered_records"]
people: List[Person] = ctx["people"]
displayed_people: List[Person] = ctx["displayed_people"]


def render_kpis():
    stats = summary_stats(filtered_records, people)
    cols = st.columns(4)
    cols[0].metric("บุคลากรทั้งหมด", f"{stats['total_people']:,}")
    cols[1].metric("ด้านความรู้", f"{stats['total_knowledge']:,}")
    cols[2].metric("ด้านทักษะ", f"{stats['total_skill']:,}")
    cols[3].metric("ด้านสมรรถนะ", f"{stats['total_competency']:,}")


def render_charts():
    c1, c2 = st.columns(2)
    with c1:
        with card("สัดส่วนประเภทการพัฒนา"):
            distribution = dev_type_distribution(filtered_records)
            if distribution:
                st.altair_chart(dev_type_donut(distribution), use_container_width=True)
            else:
                st.info("ไม่มีข้อมูลตามตัวกรอง")
    with c2:
        with card("ระดับ Gap"):
            st.altair_chart(gap_bar(gap_buckets(filtered_records)), use_container_width=True)
    with card("จำนวนกิจกรรมตามเดือนเริ่มต้น"):
        st.altair_chart(monthly_line(monthly_activity(filtered_records)), use_container_width=True)


def render_topic_stats():
    clicked = st.session_state["clicked_topic"]
    actions = f"กรองตามหัวข้อ: {clicked}" if clicked else "คลิกเพื่อกรองรายชื่อ"
    with card("สรุปหัวข้อการพัฒนาตามประเภท", actions):
        if clicked and st.button(f"ล้างตัวกรอง ({clicked})"):
            st.session_state["clicked_topic"] = None
            st.rerun()
        stats = topic_stats(filtered_records)
        cols = st.columns(3)
        for idx, (dev_type, topics) in enumerate(stats.items()):
            with cols[idx % 3]:
                st.markdown(f"**{dev_type or '-'}** ({len(topics)} หัวข้อ)")
                for t_idx, (topic, names) in enumerate(topics.items()):
                    label = f"{topic} · {len(names)} คน"
                    kind = "primary" if topic == clicked else "secondary"
                    if st.button(label, key=f"topic-{idx}-{t_idx}", type=kind):
                        st.session_state["clicked_topic"] = toggle_topic(clicked, topic)
                        st.rerun()


def render_course(course, number: str):
    st.markdown(f"**{number}. {course.topic}**  \n`{course.dev_type}` · Gap {course.gap or '-'} · Actual {course.actual or '-'}")
    m70, m20, m10 = st.columns(3)
    m70.markdown(method_html("70% การปฏิบัติ", course.method70, "#eff6ff"), unsafe_allow_html=True)
    m20.markdown(method_html("20% พี่เลี้ยง", course.method20, "#fff7ed"), unsafe_allow_html=True)
    m10.markdown(method_html("10% การอบรม", course.method10, "#ecfdf5"), unsafe_allow_html=True)
    st.caption(
        f"ช่วงเวลา: {course.start_month} - {course.end_month} | งบประมาณ: {format_budget(course.budget, 'บ.')} | KPI: {course.kpi or '-'}"
    )


def render_directory():
    clicked = st.session_state["clicked_topic"]
    title = f"ทำเนียบบุคลากร ({len(displayed_people)} คน)"
    with card(title, f"กรองตามหัวข้อ: \"{clicked}\"" if clicked else None):
        if not displayed_people:
            st.info("ไม่พบบุคลากรตามตัวกรอง")
        for p_idx, person in enumerate(displayed_people):
            with st.expander(f"{person.name} · {person.position} · {len(person.courses)} หัวข้อ"):
                st.caption(f"{person.department} / {person.group} · ผู้ประเมิน: {person.evaluator or '-'}")
                for _, title, items in group_courses(person):
                    st.markdown(f"#### {title} ({len(items)} รายการ)")
                    for number, course in items:
                        render_course(course, number)
                st.download_button(
                    "พิมพ์แผนพัฒนา (IDP)",
                    data=render_plan_html(person).encode("utf-8"),
                    file_name=f"IDP_{person.name}.html",
                    mime="text/html",
                    key=f"plan-{p_idx}",
                )


def gap_style(value: str) -> str:
    color = "#ef4444" if value != "OK" else "#10b981"
    return f"color: {color}; font-weight: 700"


def render_list():
    with card(f"รายชื่อบุคลากรและแผนพัฒนา ({len(filtered_records)} รายการ)"):
        table = records_frame(filtered_records)[LIST_COLUMNS].copy()
        table["gap"] = table["gap"].map(gap_display)
        table = table.rename(columns=LIST_HEADERS)
        styled = table.style.map(gap_style, subset=[LIST_HEADERS["gap"]])
        st.dataframe(styled, hide_index=True, use_container_width=True)
        st.download_button(
            "Export Report",
            data=export_frame(ctx).to_csv(index=False).encode("utf-8-sig"),
            file_name="idp_records.csv",
            mime="text/csv",
        )


render_page_header(nav_choice, "IDP Dashboard", data_ctx.get("last_updated"))
st.markdown(f"<div class='chip-row'>{format_filter_summary(filters)}</div>", unsafe_allow_html=True)

if nav_choice == "ภาพรวม":
    render_kpis()
    render_charts()
    render_topic_stats()
    render_directory()
elif nav_choice == "ทำเนียบบุคลากร":
    render_directory()
else:
    render_list()
