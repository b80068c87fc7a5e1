from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response

from api.schemas import DashboardFiltersModel, MetaOptionsResponse, RefreshResponse
from core.config import load_settings
from core.data import fetch_sheet_csv, get_store, load_dashboard_data, prepare_context
from core.filters import DashboardFilters, normalize_filters
from core.metrics_directory import compute_directory
from core.metrics_list import compute_records_list, export_frame
from core.metrics_overview import compute_overview
from core.print_form import render_plan_html


app = FastAPI(title="IDP Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=load_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: DashboardFiltersModel) -> DashboardFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


@app.get("/people")
def people_csv():
    """Raw sheet export, fetched fresh on every call."""
    try:
        text = fetch_sheet_csv(load_settings())
        return Response(content=text, media_type="text/csv; charset=utf-8")
    except Exception as exc:
        logger.exception("people_csv failed")
        return _error(exc)


@app.get("/meta/options")
def meta_options():
    try:
        data_ctx = load_dashboard_data()
        payload = MetaOptionsResponse(
            options=data_ctx.get("options") or {},
            last_updated=_isoformat(data_ctx.get("last_updated")),
        )
        return _json(payload.model_dump())
    except Exception as exc:
        logger.exception("meta_options failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: DashboardFiltersModel, topic: Optional[str] = Query(default=None)):
    try:
        data_ctx = load_dashboard_data()
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx, selected_topic=topic)
        return _json(compute_overview(f, ctx))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc)


@app.post("/directory")
def directory(filters: DashboardFiltersModel, topic: Optional[str] = Query(default=None)):
    try:
        data_ctx = load_dashboard_data()
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx, selected_topic=topic)
        return _json(compute_directory(f, ctx))
    except Exception as exc:
        logger.exception("directory failed")
        return _error(exc)


@app.post("/records")
def records(filters: DashboardFiltersModel):
    try:
        data_ctx = load_dashboard_data()
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx)
        return _json(compute_records_list(f, ctx))
    except Exception as exc:
        logger.exception("records failed")
        return _error(exc)


@app.post("/plan")
def plan(filters: DashboardFiltersModel, name: str = Query(...)):
    try:
        data_ctx = load_dashboard_data()
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx)
        person = next((p for p in ctx["people"] if p.name == name), None)
        if person is None:
            return JSONResponse(status_code=404, content={"error": f"No plan for {name!r}", "type": "NotFound"})
        return HTMLResponse(render_plan_html(person))
    except Exception as exc:
        logger.exception("plan failed")
        return _error(exc)


@app.post("/refresh")
def refresh():
    try:
        store = get_store()
        refreshed = store.refresh()
        payload = RefreshResponse(
            refreshed=refreshed,
            busy=not refreshed,
            record_count=len(store.records),
            last_updated=_isoformat(store.last_updated),
        )
        return _json(payload.model_dump())
    except Exception as exc:
        logger.exception("refresh failed")
        return _error(exc)


@app.post("/export/records")
def export_records(filters: DashboardFiltersModel):
    data_ctx = load_dashboard_data()
    f = _filters_from_model(filters)
    ctx = prepare_context(f, data_ctx)
    # utf-8-sig so Excel opens the Thai headers correctly
    csv_bytes = export_frame(ctx).to_csv(index=False).encode("utf-8-sig")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=idp_records.csv"},
    )
