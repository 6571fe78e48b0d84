from __future__ import annotations

import logging
import math
from typing import List, Optional

import numpy as np
import pandas as pd
from fastapi import Depends, FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from resource_api.schemas import MetaColumnsResponse, MetaTagsResponse, ResourceQueryModel, ResourcesResponse
from resource_db.charts import tag_frequency, tag_frequency_chart, to_vega_spec
from resource_db.config import configure_logging, get_settings
from resource_db.engine import ResourceQueryEngine
from resource_db.errors import ResourceError, SourceUnavailable
from resource_db.filters import ResourceQuery, normalize_query
from resource_db.render import render_error, render_resources

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Resource Directory API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_engine() -> ResourceQueryEngine:
    return ResourceQueryEngine.from_settings(get_settings())


def _query_from_params(kw: str, tags: List[str]) -> ResourceQuery:
    return normalize_query({"kw": kw, "tags": tags})


def _json(data: object, status_code: int = 200) -> JSONResponse:
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
        status_code=status_code,
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
        ),
    )


def _error(exc: Exception) -> JSONResponse:
    status = 503 if isinstance(exc, SourceUnavailable) else 500
    return JSONResponse(status_code=status, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/resources", response_model=ResourcesResponse)
def resources(
    kw: str = Query(default=""),
    tags: List[str] = Query(default=[]),
    pg: Optional[str] = Query(default=None),
    page_size: Optional[int] = Query(default=None, ge=1, le=500),
    engine: ResourceQueryEngine = Depends(get_engine),
):
    try:
        query = _query_from_params(kw, tags)
        result = engine.run(query, page_number=pg or 1, page_size=page_size)
        payload = result.to_dict()
        payload["query"] = ResourceQueryModel(kw=query.search_text, tags=list(query.selected_tags)).model_dump()
        return _json(payload)
    except ResourceError as exc:
        logger.warning("resources failed: %s", exc)
        return _error(exc)
    except Exception as exc:
        logger.exception("resources failed")
        return _error(exc)


@app.get("/resources/html", response_class=HTMLResponse)
def resources_html(
    kw: str = Query(default=""),
    tags: List[str] = Query(default=[]),
    pg: Optional[str] = Query(default=None),
    engine: ResourceQueryEngine = Depends(get_engine),
):
    query = _query_from_params(kw, tags)
    try:
        result = engine.run(query, page_number=pg or 1)
    except ResourceError as exc:
        logger.warning("resources_html failed: %s", exc)
        status = 503 if isinstance(exc, SourceUnavailable) else 500
        return HTMLResponse(render_error(exc), status_code=status)
    return HTMLResponse(render_resources(result, query, base_url="/resources/html", radius=settings.PAGE_WINDOW))


@app.get("/meta/tags", response_model=MetaTagsResponse)
def meta_tags(top_n: int = Query(default=20, ge=1, le=200), engine: ResourceQueryEngine = Depends(get_engine)):
    try:
        records = engine.records()
        freq = tag_frequency(records, engine.tag_column)
        chart = to_vega_spec(tag_frequency_chart(freq, top_n=top_n)) if not freq.empty else None
        return _json(
            {
                "tags": sorted(freq["tag"].astype(str).tolist()) if not freq.empty else [],
                "counts": freq.to_dict(orient="records"),
                "chart": chart,
            }
        )
    except ResourceError as exc:
        logger.warning("meta_tags failed: %s", exc)
        return _error(exc)
    except Exception as exc:
        logger.exception("meta_tags failed")
        return _error(exc)


@app.get("/meta/columns", response_model=MetaColumnsResponse)
def meta_columns(engine: ResourceQueryEngine = Depends(get_engine)):
    try:
        return _json({"columns": engine.columns()})
    except ResourceError as exc:
        logger.warning("meta_columns failed: %s", exc)
        return _error(exc)
    except Exception as exc:
        logger.exception("meta_columns failed")
        return _error(exc)
