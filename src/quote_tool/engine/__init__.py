"""Engine subpackage - tiered pricing and quote breakdown."""
from .pricing_engine import PricingEngine, compute_breakdown, resolve_tier_rate
from .models import (
    DiscountConfig,
    DiscountType,
    ExtraFee,
    LogoType,
    PricingTier,
    QuoteBreakdown,
    ServiceState,
)
from .rate_card import RateCard, UPLOAD_TIERS, PHOTO_TIERS

__all__ = [
    'PricingEngine', 'compute_breakdown', 'resolve_tier_rate',
    'DiscountConfig', 'DiscountType', 'ExtraFee', 'LogoType', 'PricingTier',
    'QuoteBreakdown', 'ServiceState', 'RateCard', 'UPLOAD_TIERS', 'PHOTO_TIERS',
]
