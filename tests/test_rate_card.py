"""
Rate card override loading.
"""
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add src to path for internal imports
project_root = Path(__file__).resolve().parent.parent
if str(project_root / 'src') not in sys.path:
    sys.path.insert(0, str(project_root / 'src'))

from quote_tool.config.settings import Settings
from quote_tool.engine import PricingEngine, RateCard, ServiceState, compute_breakdown
from quote_tool.engine.models import LogoType, PricingTier


def write_csv(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    return path


def test_example_rate_card_matches_built_in():
    card = RateCard.from_csv(project_root / 'rate_card.example.csv')
    assert card == RateCard.default()


def test_partial_override_keeps_other_defaults(tmp_path):
    path = write_csv(tmp_path / "rates.csv", "service,min,rate\nbanner,0,35000\nupload,0,6000\nupload,50,5500\n")
    card = RateCard.from_csv(path)

    assert card.banner_price == Decimal("35000")
    assert card.upload_tiers == (
        PricingTier(min=50, rate=Decimal("5500")),
        PricingTier(min=0, rate=Decimal("6000")),
    ), "Tiered rows are sorted by descending min"
    assert card.photo_tiers == RateCard.default().photo_tiers
    assert card.logo_price(LogoType.FULL) == Decimal("200000")


def test_unknown_service_is_rejected(tmp_path):
    path = write_csv(tmp_path / "rates.csv", "service,min,rate\nposter,0,1000\n")
    with pytest.raises(ValueError, match="poster"):
        RateCard.from_csv(path)


def test_missing_column_is_rejected(tmp_path):
    path = write_csv(tmp_path / "rates.csv", "service,rate\nbanner,1000\n")
    with pytest.raises(ValueError, match="min"):
        RateCard.from_csv(path)


def test_empty_tier_table_is_a_configuration_error():
    default = RateCard.default()
    with pytest.raises(ValueError):
        RateCard(
            upload_tiers=(),
            photo_tiers=default.photo_tiers,
            banner_price=default.banner_price,
            video_price=default.video_price,
            logo_client_price=default.logo_client_price,
            logo_full_price=default.logo_full_price,
        )


def test_engine_picks_up_override_from_settings(tmp_path):
    path = write_csv(tmp_path / "rate_card.csv", "service,min,rate\nvideo,0,12000\n")
    engine = PricingEngine(Settings(project_root=tmp_path, rate_card_csv=path))

    assert engine.rate_card_source == str(path)
    breakdown = engine.calculate(ServiceState(video_count=2))
    assert breakdown.video.total == 24000


def test_engine_reload_reads_changes(tmp_path):
    path = write_csv(tmp_path / "rate_card.csv", "service,min,rate\nvideo,0,12000\n")
    engine = PricingEngine(Settings(project_root=tmp_path, rate_card_csv=path))

    write_csv(path, "service,min,rate\nvideo,0,15000\n")
    engine.reload_data()
    assert engine.rate_card.video_price == Decimal("15000")


def test_to_records_round_trips_through_csv(tmp_path):
    import pandas as pd

    path = tmp_path / "dump.csv"
    pd.DataFrame(RateCard.default().to_records()).to_csv(path, index=False)
    card = RateCard.from_csv(path)
    assert compute_breakdown(ServiceState(upload_count=80), rate_card=card).upload.rate == 3500


@pytest.mark.parametrize("row,message", [
    ("banner,0,", "rate must be"),
    ("video,0,-10000", "rate must be a positive number"),
    ("upload,0,0", "rate must be a positive number"),
    ("photo,0,inf", "rate must be a positive number"),
    ("upload,-5,5000", "min must be >= 0"),
    ("upload,,5000", "min must be a whole number"),
    ("upload,0,abc", "rate must be a number"),
])
def test_invalid_rows_are_rejected(tmp_path, row, message):
    path = write_csv(tmp_path / "rates.csv", f"service,min,rate\nupload,31,4500\n{row}\n")
    with pytest.raises(ValueError, match=message) as exc:
        RateCard.from_csv(path)
    assert "row 2" in str(exc.value)


def test_engine_fails_loudly_on_bad_override(tmp_path):
    write_csv(tmp_path / "rate_card.csv", "service,min,rate\nbanner,0,\n")
    with pytest.raises(ValueError, match="banner"):
        PricingEngine(Settings(project_root=tmp_path, rate_card_csv=tmp_path / "rate_card.csv"))


def test_fractional_rates_survive_to_records(tmp_path):
    path = write_csv(tmp_path / "rates.csv", "service,min,rate\nupload,0,2500.75\nbanner,0,30000.5\n")
    records = RateCard.from_csv(path).to_records()

    assert {'service': 'upload', 'min': 0, 'rate': 2500.75} in records
    assert {'service': 'banner', 'min': 0, 'rate': 30000.5} in records
    assert {'service': 'video', 'min': 0, 'rate': 10000} in records
