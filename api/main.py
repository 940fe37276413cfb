from __future__ import annotations

from dataclasses import asdict
from functools import lru_cache
import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from fastapi.encoders import jsonable_encoder

from api.schemas import DashboardFiltersModel, MetaColumnsResponse, MetaOptionsResponse
from core.dashboard import compute_company_details, compute_filter_options
from core.data import COLUMNS
from core.filters import DashboardFilters, filter_rows, normalize_filters
from core.graph import derive_graph
from core.session import DashboardSession, SessionNotReady


EXPORT_KINDS = ("rows", "graph")

app = FastAPI(title="Company Relationship Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_session() -> DashboardSession:
    session = DashboardSession()
    session.load()
    return session


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
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _not_ready(exc: SessionNotReady) -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": str(exc), "status": get_session().status.value})


def _failed(name: str, exc: Exception) -> JSONResponse:
    logger.exception("%s failed", name)
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/columns", response_model=MetaColumnsResponse)
def meta_columns():
    return MetaColumnsResponse(columns=list(COLUMNS))


@app.get("/meta/status")
def meta_status():
    session = get_session()
    return {"status": session.status.value, "error": session.error, "location": session.location}


@app.get("/meta/options")
def meta_options():
    try:
        rows = get_session().require_rows()
        return _json(MetaOptionsResponse(**compute_filter_options(rows)))
    except SessionNotReady as exc:
        return _not_ready(exc)
    except Exception as exc:
        return _failed("meta_options", exc)


@app.post("/dashboard")
def dashboard(filters: DashboardFiltersModel, dedupe_links: bool = Query(default=False)):
    try:
        return _json(get_session().view(_filters_from_model(filters), dedupe_links=dedupe_links))
    except SessionNotReady as exc:
        return _not_ready(exc)
    except Exception as exc:
        return _failed("dashboard", exc)


@app.post("/graph")
def graph(filters: DashboardFiltersModel, dedupe_links: bool = Query(default=False)):
    try:
        rows = get_session().require_rows()
        nodes, links = derive_graph(filter_rows(rows, _filters_from_model(filters)), dedupe=dedupe_links)
        return _json({"nodes": [asdict(n) for n in nodes], "links": [asdict(link) for link in links]})
    except SessionNotReady as exc:
        return _not_ready(exc)
    except Exception as exc:
        return _failed("graph", exc)


@app.get("/companies/{name}")
def company(name: str):
    try:
        details = compute_company_details(get_session().require_rows(), name)
    except SessionNotReady as exc:
        return _not_ready(exc)
    except Exception as exc:
        return _failed("company", exc)
    if details is None:
        return JSONResponse(status_code=404, content={"error": f"Unknown company: {name}"})
    return _json(details)


@app.post("/export/{kind}")
def export(kind: str, filters: DashboardFiltersModel, dedupe_links: bool = Query(default=False)):
    try:
        rows = get_session().require_rows()
    except SessionNotReady as exc:
        return _not_ready(exc)
    if kind not in EXPORT_KINDS:
        return JSONResponse(status_code=404, content={"error": f"Unknown export: {kind}"})
    filtered = filter_rows(rows, _filters_from_model(filters))

    if kind == "graph":
        nodes, links = derive_graph(filtered, dedupe=dedupe_links)
        payload = {"nodes": [asdict(n) for n in nodes], "links": [asdict(link) for link in links]}
        return JSONResponse(content=payload, headers={"Content-Disposition": "attachment; filename=graph.json"})

    csv_bytes = filtered.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": "attachment; filename=companies.csv"})
