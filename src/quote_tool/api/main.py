from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field
from typing import List
import logging
import sys
from pathlib import Path

# Add src to path for internal imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from quote_tool.config.settings import get_settings
from quote_tool.engine import DiscountType, LogoType
from quote_tool.invoice import generate_invoice_text, whatsapp_share_link, invoice_image_bytes
from quote_tool.logging_setup import configure_logging
from quote_tool.services.quote_session import QuoteSession, InvalidExtraFee
from quote_tool.api.state import engine, advisor

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Quote Tool API",
    description="Pricing and invoice generator for agency service quotes",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ExtraFeeInput(BaseModel):
    label: str
    amount: float = Field(allow_inf_nan=False)


class QuoteInput(BaseModel):
    upload_count: int = 0
    photo_count: int = 0
    banner_count: int = 0
    video_count: int = 0
    logo_type: LogoType = LogoType.NONE
    extra_fees: List[ExtraFeeInput] = Field(default_factory=list)
    discount_type: DiscountType = DiscountType.NONE
    discount_value: float = Field(0, allow_inf_nan=False)
    client_name: str = ""
    shop_name: str = ""


def _session_from(req: QuoteInput) -> QuoteSession:
    """Replay the request through the same form rules the UI uses."""
    session = QuoteSession(client_name=req.client_name, shop_name=req.shop_name)
    session.set_count('upload', req.upload_count)
    session.set_count('photo', req.photo_count)
    session.set_count('banner', req.banner_count)
    session.set_count('video', req.video_count)
    session.set_logo(req.logo_type)
    for fee in req.extra_fees:
        session.add_extra_fee(fee.label, fee.amount)
    session.set_discount_type(req.discount_type)
    session.set_discount_value(req.discount_value)
    return session


def _build(req: QuoteInput):
    try:
        session = _session_from(req)
    except InvalidExtraFee as e:
        raise HTTPException(status_code=422, detail=str(e))
    try:
        return session, session.breakdown(engine)
    except Exception as e:
        logger.exception("Breakdown computation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/")
async def root():
    return {"status": "online", "message": "Quote Tool API Active"}


@app.post("/calculate")
async def calculate_quote(req: QuoteInput):
    _, breakdown = _build(req)
    return breakdown.to_dict()


@app.post("/invoice/text")
async def invoice_text(req: QuoteInput):
    session, breakdown = _build(req)
    text = generate_invoice_text(breakdown, session.client_name, session.shop_name)
    return {"text": text, "share_link": whatsapp_share_link(text)}


@app.post("/invoice/image")
async def invoice_image(req: QuoteInput):
    session, breakdown = _build(req)
    try:
        png = invoice_image_bytes(breakdown, session.client_name, session.shop_name)
    except Exception as e:
        logger.exception("Invoice image rendering failed")
        raise HTTPException(status_code=500, detail=str(e))
    return Response(content=png, media_type="image/png")


@app.get("/rate-card")
async def get_rate_card():
    return {
        "source": engine.rate_card_source,
        "rates": engine.rate_card.to_records(),
    }


@app.post("/pitch")
async def pitch(req: QuoteInput):
    session, breakdown = _build(req)
    # The GenAI call blocks; keep it off the event loop.
    text = await run_in_threadpool(advisor.generate, breakdown, session.client_name)
    return {"pitch": text}
