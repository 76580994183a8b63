"""
Rate card - tier tables and flat prices for every service.

The built-in tables are the agency's current price list. A CSV with
`service,min,rate` rows can override them without touching code.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

from .models import LogoType, PricingTier, _plain_number

logger = logging.getLogger(__name__)


UPLOAD_TIERS: tuple[PricingTier, ...] = (
    PricingTier(min=101, rate=Decimal("2500")),
    PricingTier(min=76, rate=Decimal("3500")),
    PricingTier(min=51, rate=Decimal("4000")),
    PricingTier(min=31, rate=Decimal("4500")),
    PricingTier(min=0, rate=Decimal("5000")),
)

# No min=0 row: counts below 31 resolve through the last-tier fallback.
PHOTO_TIERS: tuple[PricingTier, ...] = (
    PricingTier(min=101, rate=Decimal("7500")),
    PricingTier(min=76, rate=Decimal("8500")),
    PricingTier(min=51, rate=Decimal("9000")),
    PricingTier(min=31, rate=Decimal("10000")),
)

BANNER_PRICE = Decimal("30000")
VIDEO_PRICE = Decimal("10000")
LOGO_CLIENT_PRICE = Decimal("150000")
LOGO_FULL_PRICE = Decimal("200000")

TIERED_SERVICES = ('upload', 'photo')
FLAT_SERVICES = ('banner', 'video', 'logo_client', 'logo_full')


@dataclass(frozen=True)
class RateCard:
    """All prices the engine needs for one computation."""
    upload_tiers: tuple[PricingTier, ...]
    photo_tiers: tuple[PricingTier, ...]
    banner_price: Decimal
    video_price: Decimal
    logo_client_price: Decimal
    logo_full_price: Decimal

    def __post_init__(self):
        if not self.upload_tiers:
            raise ValueError("Rate card has no upload tiers")
        if not self.photo_tiers:
            raise ValueError("Rate card has no photo tiers")

    @classmethod
    def default(cls) -> 'RateCard':
        return cls(
            upload_tiers=UPLOAD_TIERS,
            photo_tiers=PHOTO_TIERS,
            banner_price=BANNER_PRICE,
            video_price=VIDEO_PRICE,
            logo_client_price=LOGO_CLIENT_PRICE,
            logo_full_price=LOGO_FULL_PRICE,
        )

    def logo_price(self, logo_type: LogoType) -> Decimal:
        if logo_type is LogoType.NONE:
            return Decimal("0")
        if logo_type is LogoType.CLIENT:
            return self.logo_client_price
        if logo_type is LogoType.FULL:
            return self.logo_full_price
        raise ValueError(f"Unhandled logo type: {logo_type!r}")

    @classmethod
    def from_csv(cls, path: Path) -> 'RateCard':
        """
        Load a rate card override.

        Tiered services may have several rows; flat services use one row with
        min=0. Services missing from the file keep their built-in prices.
        """
        df = pd.read_csv(path, dtype=str)
        missing = {'service', 'min', 'rate'} - set(df.columns)
        if missing:
            raise ValueError(f"Rate card {path} is missing columns: {', '.join(sorted(missing))}")

        for col in df.columns:
            df[col] = df[col].astype(str).str.strip()
        df['service'] = df['service'].str.lower()

        unknown = set(df['service']) - set(TIERED_SERVICES) - set(FLAT_SERVICES)
        if unknown:
            raise ValueError(f"Rate card {path} has unknown services: {', '.join(sorted(unknown))}")

        mins, rates = [], []
        for idx, row in df.iterrows():
            where = f"Rate card {path} row {idx + 1} ({row['service']})"
            try:
                tier_min = int(row['min'])
            except ValueError:
                raise ValueError(f"{where}: min must be a whole number, got {row['min']!r}") from None
            try:
                rate = Decimal(row['rate'])
            except InvalidOperation:
                raise ValueError(f"{where}: rate must be a number, got {row['rate']!r}") from None
            if tier_min < 0:
                raise ValueError(f"{where}: min must be >= 0, got {tier_min}")
            if not rate.is_finite() or rate <= 0:
                raise ValueError(f"{where}: rate must be a positive number, got {row['rate']!r}")
            mins.append(tier_min)
            rates.append(rate)
        df['min'] = mins
        df['rate'] = rates

        def tiers_for(service: str, fallback: tuple[PricingTier, ...]) -> tuple[PricingTier, ...]:
            rows = df[df['service'] == service].sort_values('min', ascending=False)
            if rows.empty:
                return fallback
            return tuple(
                PricingTier(min=int(row['min']), rate=row['rate'])
                for _, row in rows.iterrows()
            )

        def flat_for(service: str, fallback: Decimal) -> Decimal:
            rows = df[df['service'] == service]
            if rows.empty:
                return fallback
            return rows.iloc[0]['rate']

        card = cls(
            upload_tiers=tiers_for('upload', UPLOAD_TIERS),
            photo_tiers=tiers_for('photo', PHOTO_TIERS),
            banner_price=flat_for('banner', BANNER_PRICE),
            video_price=flat_for('video', VIDEO_PRICE),
            logo_client_price=flat_for('logo_client', LOGO_CLIENT_PRICE),
            logo_full_price=flat_for('logo_full', LOGO_FULL_PRICE),
        )
        logger.info("Loaded rate card override from %s (%d rows)", path, len(df))
        return card

    def to_records(self) -> list[dict]:
        """Flatten into `service,min,rate` rows (same shape as the CSV)."""
        records = []
        for service, tiers in (('upload', self.upload_tiers), ('photo', self.photo_tiers)):
            for tier in tiers:
                records.append({'service': service, 'min': tier.min, 'rate': _plain_number(tier.rate)})
        for service, price in (
            ('banner', self.banner_price),
            ('video', self.video_price),
            ('logo_client', self.logo_client_price),
            ('logo_full', self.logo_full_price),
        ):
            records.append({'service': service, 'min': 0, 'rate': _plain_number(price)})
        return records
