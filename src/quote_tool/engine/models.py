"""
Data models for the pricing engine.

Uses frozen dataclasses and closed enums so a computed breakdown is a
read-only snapshot of the inputs it was built from.
"""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Convert a user-facing number to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _plain_number(value: Decimal) -> Union[int, float]:
    """Whole amounts as int, anything else as float (JSON friendly)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


class LogoType(str, Enum):
    """Logo branding option selected for the quote."""
    NONE = "none"
    CLIENT = "client"
    FULL = "full"

    @property
    def label(self) -> str:
        if self is LogoType.NONE:
            return "Tanpa Logo"
        if self is LogoType.CLIENT:
            return "Logo (Konsep Klien)"
        if self is LogoType.FULL:
            return "Logo + Konsep (Pro)"
        raise ValueError(f"Unhandled logo type: {self!r}")


class DiscountType(str, Enum):
    """How the discount value is interpreted."""
    NONE = "none"
    NOMINAL = "nominal"
    PERCENT = "percent"


@dataclass(frozen=True)
class PricingTier:
    """A (minimum quantity, unit rate) pair. Applies when count >= min."""
    min: int
    rate: Decimal


@dataclass(frozen=True)
class DiscountConfig:
    """Discount mode plus its numeric value (amount or percentage)."""
    type: DiscountType = DiscountType.NONE
    value: Decimal = Decimal("0")

    def switch_to(self, discount_type: DiscountType) -> "DiscountConfig":
        """Change mode. The value never carries over between modes."""
        return DiscountConfig(type=DiscountType(discount_type), value=Decimal("0"))

    def with_value(self, value: Number) -> "DiscountConfig":
        """Set the value, clamping negatives to zero."""
        return replace(self, value=max(Decimal("0"), to_decimal(value)))

    def resolve(self, subtotal: Decimal) -> Decimal:
        """Discount amount for a subtotal. Not clamped to the subtotal."""
        if self.type is DiscountType.NONE:
            return Decimal("0")
        if self.type is DiscountType.NOMINAL:
            return self.value
        if self.type is DiscountType.PERCENT:
            return subtotal * self.value / Decimal("100")
        raise ValueError(f"Unhandled discount type: {self.type!r}")


@dataclass(frozen=True)
class ExtraFee:
    """An ad hoc line item outside the fixed service catalog."""
    id: str
    label: str
    amount: Decimal


@dataclass(frozen=True)
class ServiceState:
    """Service quantities, logo choice and extra fees entered by the user."""
    upload_count: int = 0
    photo_count: int = 0
    banner_count: int = 0
    video_count: int = 0
    logo_type: LogoType = LogoType.NONE
    extra_fees: tuple[ExtraFee, ...] = ()

    def clamped(self) -> "ServiceState":
        """Copy with every negative count set to zero."""
        return replace(
            self,
            upload_count=max(0, int(self.upload_count)),
            photo_count=max(0, int(self.photo_count)),
            banner_count=max(0, int(self.banner_count)),
            video_count=max(0, int(self.video_count)),
        )


@dataclass(frozen=True)
class TraceStep:
    """A single step in the breakdown computation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class ServiceLine:
    """Priced line for a counted service."""
    count: int
    rate: Decimal
    total: Decimal


@dataclass(frozen=True)
class LogoLine:
    """Priced logo branding line."""
    type: LogoType
    label: str
    total: Decimal


@dataclass(frozen=True)
class QuoteBreakdown:
    """Complete, read-only result of a breakdown computation."""
    upload: ServiceLine
    photo: ServiceLine
    banner: ServiceLine
    video: ServiceLine
    logo: LogoLine
    extra_fees: tuple[ExtraFee, ...]
    extra_fees_total: Decimal
    subtotal: Decimal
    discount: Decimal
    grand_total: Decimal
    trace: tuple[TraceStep, ...] = field(default=(), compare=False)

    @property
    def is_empty(self) -> bool:
        return self.subtotal == 0

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict for APIs and exports."""
        def line(service_line: ServiceLine) -> dict:
            return {
                "count": service_line.count,
                "rate": _plain_number(service_line.rate),
                "total": _plain_number(service_line.total),
            }

        return {
            "upload": line(self.upload),
            "photo": line(self.photo),
            "banner": line(self.banner),
            "video": line(self.video),
            "logo": {
                "type": self.logo.type.value,
                "label": self.logo.label,
                "total": _plain_number(self.logo.total),
            },
            "extra_fees": [
                {"id": fee.id, "label": fee.label, "amount": _plain_number(fee.amount)}
                for fee in self.extra_fees
            ],
            "extra_fees_total": _plain_number(self.extra_fees_total),
            "subtotal": _plain_number(self.subtotal),
            "discount": _plain_number(self.discount),
            "grand_total": _plain_number(self.grand_total),
        }
