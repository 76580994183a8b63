"""
Quote Session - in-memory form state for a single quote.

Handles clamping of numeric entry, the extra-fee list and discount mode
switching. The session never computes prices itself; it hands its current
state to the pricing engine.
"""
import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..engine.models import (
    DiscountConfig,
    DiscountType,
    ExtraFee,
    LogoType,
    Number,
    QuoteBreakdown,
    ServiceState,
    to_decimal,
)
from ..engine.pricing_engine import PricingEngine

SERVICE_FIELDS = {
    'upload': 'upload_count',
    'photo': 'photo_count',
    'banner': 'banner_count',
    'video': 'video_count',
}


class InvalidExtraFee(ValueError):
    """Raised when an extra fee cannot be added from the form input."""


def parse_amount(raw: Optional[Number]) -> Decimal:
    """Parse a fee amount from form input. Must be a finite number >= 0."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidExtraFee("Extra fee amount is required")
    try:
        amount = to_decimal(raw.strip() if isinstance(raw, str) else raw)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidExtraFee(f"Extra fee amount is not a number: {raw!r}")
    if not amount.is_finite():
        raise InvalidExtraFee(f"Extra fee amount is not a number: {raw!r}")
    if amount < 0:
        raise InvalidExtraFee("Extra fee amount cannot be negative")
    return amount


@dataclass
class QuoteSession:
    """Current inputs for one quote being prepared."""
    client_name: str = ""
    shop_name: str = ""
    state: ServiceState = field(default_factory=ServiceState)
    discount: DiscountConfig = field(default_factory=DiscountConfig)

    def set_count(self, service: str, value: Number):
        """Set a service quantity, clamping negatives to zero."""
        attr = SERVICE_FIELDS.get(service)
        if attr is None:
            raise ValueError(f"Unknown service '{service}'")
        count = max(0, int(to_decimal(value)))
        self.state = replace(self.state, **{attr: count})

    def set_logo(self, logo_type: LogoType):
        self.state = replace(self.state, logo_type=LogoType(logo_type))

    def add_extra_fee(self, label: str, amount: Number) -> ExtraFee:
        """Append an extra fee. Label must be non-empty, amount >= 0."""
        label = (label or "").strip()
        if not label:
            raise InvalidExtraFee("Extra fee label is required")
        fee = ExtraFee(id=str(uuid.uuid4()), label=label, amount=parse_amount(amount))
        self.state = replace(self.state, extra_fees=self.state.extra_fees + (fee,))
        return fee

    def remove_extra_fee(self, fee_id: str) -> bool:
        """Remove an extra fee by id. Returns False if no fee had that id."""
        remaining = tuple(f for f in self.state.extra_fees if f.id != fee_id)
        if len(remaining) == len(self.state.extra_fees):
            return False
        self.state = replace(self.state, extra_fees=remaining)
        return True

    def set_discount_type(self, discount_type: DiscountType):
        """Switch discount mode; the value resets to zero."""
        self.discount = self.discount.switch_to(discount_type)

    def set_discount_value(self, value: Number):
        self.discount = self.discount.with_value(value)

    def reset(self):
        """Clear every input back to an empty quote."""
        self.client_name = ""
        self.shop_name = ""
        self.state = ServiceState()
        self.discount = DiscountConfig()

    def breakdown(self, engine: PricingEngine) -> QuoteBreakdown:
        return engine.calculate(self.state, self.discount)
