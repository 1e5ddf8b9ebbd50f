import logging
import os
from typing import List, Union

from fastapi import FastAPI, HTTPException, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field

from .observability import (
    CONTENT_TYPE_LATEST,
    configure_logging,
    correlation_id_ctx,
    generate_metrics,
    inc_http_400,
)
from .search import binary_search
from .sorted_array import Order, SortedArray


def _flag(name: str, default: str) -> bool:
    value = os.getenv(name, default)
    if value not in {"0", "1"}:
        raise ValueError(f"{name} must be '0' or '1', got {value!r}")
    return value == "1"


ENABLE_METRICS = _flag("ENABLE_METRICS", "1")
SEARCH_MAX_ITEMS = int(os.getenv("SEARCH_MAX_ITEMS", "100000"))

configure_logging()
logger = logging.getLogger("sortedsearch.api")

app = FastAPI(title="Sorted Search")

Value = Union[int, float, str]


class SearchRequest(BaseModel):
    # NaN and infinities have no total order and would corrupt the sort.
    model_config = ConfigDict(allow_inf_nan=False)

    data: List[Value] = Field(default_factory=list)
    query: Value
    order: str = "ascending"


class SearchResponse(BaseModel):
    indices: List[int]
    sorted: List[Value]
    order: str
    count: int


def _bad_request(detail: str) -> HTTPException:
    inc_http_400()
    logger.info("rejected search request", extra={"detail": detail})
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _kind(value: Value) -> str:
    return "text" if isinstance(value, str) else "number"


@app.middleware("http")
async def bind_correlation_id(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID", "")
    token = correlation_id_ctx.set(correlation_id)
    try:
        response = await call_next(request)
    finally:
        correlation_id_ctx.reset(token)
    if correlation_id:
        response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.get("/health")
def health():
    return {"status": "alive"}


@app.post("/search", response_model=SearchResponse)
def search(req: SearchRequest):
    if len(req.data) > SEARCH_MAX_ITEMS:
        raise _bad_request(f"At most {SEARCH_MAX_ITEMS} values are allowed")
    kinds = {_kind(value) for value in req.data}
    if len(kinds) > 1:
        raise _bad_request("Values must be all numbers or all strings")
    if kinds and _kind(req.query) not in kinds:
        raise _bad_request("Query must be of the same kind as the values")
    try:
        order = Order.parse(req.order)
    except ValueError as exc:
        raise _bad_request(str(exc)) from exc

    arr = SortedArray(req.data, order)
    indices = binary_search(req.query, arr)
    logger.info(
        "search served",
        extra={"order": order.value, "size": len(arr), "matches": len(indices)},
    )
    return SearchResponse(
        indices=indices,
        sorted=list(arr.as_view()),
        order=order.value,
        count=len(indices),
    )


if ENABLE_METRICS:

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_metrics(), media_type=CONTENT_TYPE_LATEST)
