from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.aggregations import (
    dev_type_distribution,
    gap_buckets,
    monthly_activity,
    summary_stats,
    topic_stats,
)
from core.charts import dev_type_donut, gap_bar, monthly_line, to_vega_spec
from core.filters import DashboardFilters


def _topic_stats_payload(stats, selected_topic: Optional[str]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for dev_type, topics in stats.items():
        out.append(
            {
                "dev_type": dev_type,
                "topic_count": len(topics),
                "topics": [
                    {
                        "topic": topic,
                        "person_count": len(names),
                        "people": sorted(names),
                        "active": topic == selected_topic,
                    }
                    for topic, names in topics.items()
                ],
            }
        )
    return out


def compute_overview(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    records = ctx.get("filtered_records", ())
    people = ctx.get("people", [])
    selected_topic = ctx.get("selected_topic")

    distribution = dev_type_distribution(records)
    buckets = gap_buckets(records)
    activity = monthly_activity(records)

    charts: Dict[str, Any] = {"gap": to_vega_spec(gap_bar(buckets)), "monthly_activity": to_vega_spec(monthly_line(activity))}
    if distribution:
        charts["dev_type"] = to_vega_spec(dev_type_donut(distribution))

    last_updated = ctx.get("last_updated")
    return {
        "filters": filters.to_dict(),
        "last_updated": last_updated.isoformat() if last_updated is not None else None,
        "kpis": summary_stats(records, people),
        "dev_type_distribution": distribution,
        "gap_buckets": buckets,
        "monthly_activity": activity,
        "selected_topic": selected_topic,
        "topic_stats": _topic_stats_payload(topic_stats(records), selected_topic),
        "charts": charts,
    }
