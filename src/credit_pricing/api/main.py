from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict, List, Optional

from credit_pricing import __version__
from credit_pricing.data.build_schedule import build_price_schedule
from credit_pricing.engine.errors import FeatureNotPricedError, InvalidParametersError
from credit_pricing.api import state

app = FastAPI(
    title="Credit Pricing API",
    description="Unit pricing, savings and quantity lookups for credit purchases",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class QuoteRequest(BaseModel):
    feature_slug: str
    held_quantity: int = 0
    purchase_quantity: int
    dynamic_price_cents: Optional[float] = None


class TraceStepResponse(BaseModel):
    step: str
    description: str
    value: Optional[str] = None


class QuoteResponse(BaseModel):
    feature_slug: str
    version: int
    held_quantity: int
    purchase_quantity: int
    unit_price_cents: int
    total_price_cents: int
    dynamic_price_cents: Optional[float] = None
    discount_percent: Optional[int] = None
    total_savings_cents: Optional[int] = None
    trace: List[TraceStepResponse] = []


class DefinitionResponse(BaseModel):
    feature_slug: str
    target: str
    version: int
    valid_from: str
    first_discount_price_cents: int
    discount_rate: float
    discount_threshold: int
    discount_threshold_price_cents: int


@app.exception_handler(FeatureNotPricedError)
async def feature_not_priced_handler(request: Request, exc: FeatureNotPricedError):
    return JSONResponse(status_code=404, content={"detail": str(exc), "feature_slug": exc.feature_slug})


@app.exception_handler(InvalidParametersError)
async def invalid_parameters_handler(request: Request, exc: InvalidParametersError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/")
async def root():
    return {"status": "online", "message": "Credit Pricing API Active", "target": state.engine.target.describe()}


@app.get("/features")
async def list_features():
    return {"features": state.engine.selector.features()}


@app.get("/features/{feature_slug}/definition", response_model=DefinitionResponse)
async def get_definition(feature_slug: str):
    definition = state.engine.resolve(feature_slug)
    if definition is None:
        raise FeatureNotPricedError(feature_slug)
    return DefinitionResponse(
        feature_slug=feature_slug,
        target=state.engine.target.describe(),
        **definition.to_dict()
    )


@app.post("/quote", response_model=QuoteResponse)
async def create_quote(req: QuoteRequest):
    quote = state.engine.quote(
        req.feature_slug,
        req.held_quantity,
        req.purchase_quantity,
        req.dynamic_price_cents,
    )
    return QuoteResponse(
        feature_slug=quote.feature_slug,
        version=quote.version,
        held_quantity=quote.held_quantity,
        purchase_quantity=quote.purchase_quantity,
        unit_price_cents=quote.unit_price_cents,
        total_price_cents=quote.total_price_cents,
        dynamic_price_cents=quote.dynamic_price_cents,
        discount_percent=quote.discount_percent,
        total_savings_cents=quote.total_savings_cents,
        trace=[TraceStepResponse(step=t.step, description=t.description, value=t.value) for t in quote.trace],
    )


@app.get("/features/{feature_slug}/range")
async def get_quantity_range(feature_slug: str, unit_price_cents: int):
    quantity_range = state.engine.quantity_range_for_unit_price(feature_slug, unit_price_cents)
    return {"feature_slug": feature_slug, "unit_price_cents": unit_price_cents, **quantity_range.to_dict()}


@app.get("/features/{feature_slug}/schedule")
async def get_schedule(
    feature_slug: str,
    quantities: List[int] = Query(...),
    held_quantity: int = 0,
    dynamic_price_cents: Optional[float] = None,
):
    schedule, skipped = build_price_schedule(
        state.engine,
        feature_slug,
        quantities,
        held=held_quantity,
        dynamic_price_cents=dynamic_price_cents,
    )
    rows: List[Dict] = schedule.to_dict(orient="records")
    return {"feature_slug": feature_slug, "rows": rows, "skipped": skipped}
