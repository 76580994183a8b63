"""
Pricing Engine - turns service counts and discount settings into a quote breakdown.

Resolution order:
1. Unit rate for tiered services (upload, photo) from the tier tables
2. Flat-rate totals for banners and videos
3. Logo price from the selected logo option
4. Extra fees summed in insertion order
5. Subtotal, discount, then grand total floored at zero

Every step is recorded in the breakdown trace.
"""
import logging
from decimal import Decimal
from typing import Optional, Sequence

from ..config.settings import get_settings, Settings
from .models import (
    DiscountConfig,
    LogoLine,
    PricingTier,
    QuoteBreakdown,
    ServiceLine,
    ServiceState,
    TraceStep,
)
from .rate_card import RateCard

logger = logging.getLogger(__name__)


def resolve_tier_rate(count: int, tiers: Sequence[PricingTier]) -> Decimal:
    """
    Unit rate for a quantity.

    Tiers are scanned in the given (descending-min) order and the first tier
    with count >= min wins. When nothing matches, the last tier is used.
    """
    if not tiers:
        raise ValueError("Tier table is empty")

    for tier in tiers:
        if count >= tier.min:
            return tier.rate
    return tiers[-1].rate


def compute_breakdown(
    state: ServiceState,
    discount: Optional[DiscountConfig] = None,
    rate_card: Optional[RateCard] = None,
) -> QuoteBreakdown:
    """
    Compute the full quote breakdown.

    Args:
        state: Service counts, logo choice and extra fees (already clamped)
        discount: Discount mode and value, defaults to no discount
        rate_card: Prices to use, defaults to the built-in rate card

    Returns:
        QuoteBreakdown snapshot with a trace of every step
    """
    discount = discount or DiscountConfig()
    card = rate_card or RateCard.default()
    trace = []

    upload_rate = resolve_tier_rate(state.upload_count, card.upload_tiers)
    photo_rate = resolve_tier_rate(state.photo_count, card.photo_tiers)
    trace.append(TraceStep("Tier Rate", f"Upload rate for {state.upload_count} pcs", str(upload_rate)))
    trace.append(TraceStep("Tier Rate", f"Photo rate for {state.photo_count} sets", str(photo_rate)))

    upload = ServiceLine(state.upload_count, upload_rate, state.upload_count * upload_rate)
    photo = ServiceLine(state.photo_count, photo_rate, state.photo_count * photo_rate)
    banner = ServiceLine(state.banner_count, card.banner_price, state.banner_count * card.banner_price)
    video = ServiceLine(state.video_count, card.video_price, state.video_count * card.video_price)
    trace.append(TraceStep("Flat Rate", f"Banner {state.banner_count} × {card.banner_price}", str(banner.total)))
    trace.append(TraceStep("Flat Rate", f"Video {state.video_count} × {card.video_price}", str(video.total)))

    logo = LogoLine(state.logo_type, state.logo_type.label, card.logo_price(state.logo_type))
    trace.append(TraceStep("Logo", logo.label, str(logo.total)))

    extra_fees_total = sum((fee.amount for fee in state.extra_fees), Decimal("0"))
    trace.append(TraceStep("Extra Fees", f"{len(state.extra_fees)} extra fee(s)", str(extra_fees_total)))

    subtotal = upload.total + photo.total + banner.total + video.total + logo.total + extra_fees_total
    trace.append(TraceStep("Subtotal", "Sum of all lines", str(subtotal)))

    discount_amount = discount.resolve(subtotal)
    trace.append(TraceStep("Discount", f"{discount.type.value} ({discount.value})", str(discount_amount)))

    grand_total = max(Decimal("0"), subtotal - discount_amount)
    if discount_amount > subtotal:
        trace.append(TraceStep("Grand Total", "Discount exceeds subtotal, floored at zero", str(grand_total)))
    else:
        trace.append(TraceStep("Grand Total", "Subtotal minus discount", str(grand_total)))

    return QuoteBreakdown(
        upload=upload,
        photo=photo,
        banner=banner,
        video=video,
        logo=logo,
        extra_fees=tuple(state.extra_fees),
        extra_fees_total=extra_fees_total,
        subtotal=subtotal,
        discount=discount_amount,
        grand_total=grand_total,
        trace=tuple(trace),
    )


class PricingEngine:
    """
    Pricing engine bound to the active rate card.

    The engine holds no per-quote state; `calculate` can be called on every
    input change.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize engine with the rate card from settings."""
        self.settings = settings or get_settings()

        rate_card_path = self.settings.rate_card_csv
        if rate_card_path and rate_card_path.exists():
            self.rate_card = RateCard.from_csv(rate_card_path)
            self.rate_card_source = str(rate_card_path)
        else:
            self.rate_card = RateCard.default()
            self.rate_card_source = "built-in"

    def reload_data(self):
        """Reload the rate card from disk."""
        self.__init__(self.settings)

    def calculate(self, state: ServiceState, discount: Optional[DiscountConfig] = None) -> QuoteBreakdown:
        """Calculate a breakdown for clamped inputs."""
        breakdown = compute_breakdown(state.clamped(), discount, self.rate_card)
        logger.debug("Computed breakdown: subtotal=%s grand_total=%s", breakdown.subtotal, breakdown.grand_total)
        return breakdown
