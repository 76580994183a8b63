"""
Form-state rules: clamping, extra-fee lifecycle and discount mode switching.
"""
import pytest
import sys
import os
from decimal import Decimal

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from quote_tool.config.settings import Settings
from quote_tool.engine import PricingEngine, DiscountType, LogoType
from quote_tool.services.quote_session import QuoteSession, InvalidExtraFee


@pytest.fixture(scope="module")
def engine(tmp_path_factory):
    return PricingEngine(Settings(project_root=tmp_path_factory.mktemp("session")))


@pytest.fixture
def session():
    return QuoteSession()


def test_counts_are_clamped_to_zero(session):
    session.set_count('upload', -10)
    session.set_count('video', 3)
    assert session.state.upload_count == 0
    assert session.state.video_count == 3


def test_unknown_service_is_rejected(session):
    with pytest.raises(ValueError):
        session.set_count('poster', 1)


def test_add_extra_fee_keeps_insertion_order(session):
    first = session.add_extra_fee("Express", 25000)
    second = session.add_extra_fee("  Aset Berbayar ", "12500")

    assert [f.label for f in session.state.extra_fees] == ["Express", "Aset Berbayar"]
    assert second.amount == Decimal("12500")
    assert first.id != second.id


def test_zero_amount_fee_is_allowed(session):
    session.add_extra_fee("Gratis Konsultasi", "0")
    assert session.state.extra_fees[0].amount == 0


@pytest.mark.parametrize("label,amount", [
    ("", 1000),
    ("   ", 1000),
    ("Express", ""),
    ("Express", None),
    ("Express", "abc"),
    ("Express", "-500"),
    ("Express", "nan"),
])
def test_invalid_extra_fee_is_rejected(session, label, amount):
    with pytest.raises(InvalidExtraFee):
        session.add_extra_fee(label, amount)
    assert session.state.extra_fees == ()


def test_remove_extra_fee_by_id(session):
    keep = session.add_extra_fee("Express", 25000)
    drop = session.add_extra_fee("Aset", 12500)

    assert session.remove_extra_fee(drop.id) is True
    assert session.state.extra_fees == (keep,)
    assert session.remove_extra_fee(drop.id) is False


def test_switching_discount_type_resets_value(session, engine):
    session.set_count('upload', 40)
    session.set_discount_type(DiscountType.NOMINAL)
    session.set_discount_value(50000)
    assert session.breakdown(engine).discount == 50000

    session.set_discount_type(DiscountType.PERCENT)
    assert session.discount.value == 0
    assert session.breakdown(engine).discount == 0


def test_negative_discount_value_is_clamped(session):
    session.set_discount_type(DiscountType.PERCENT)
    session.set_discount_value(-20)
    assert session.discount.value == 0


def test_reset_clears_everything(session, engine):
    session.client_name = "Andi"
    session.shop_name = "Mandiri Jaya Shop"
    session.set_count('photo', 5)
    session.set_logo(LogoType.FULL)
    session.add_extra_fee("Express", 25000)
    session.set_discount_type(DiscountType.NOMINAL)
    session.set_discount_value(1000)

    session.reset()

    assert session.client_name == ""
    assert session.shop_name == ""
    assert session.discount.type is DiscountType.NONE
    assert session.breakdown(engine).grand_total == 0


def test_session_breakdown_matches_engine(session, engine):
    session.set_count('upload', 40)
    session.set_count('banner', 2)
    session.set_count('video', 1)
    breakdown = session.breakdown(engine)
    assert breakdown.subtotal == 250000
    assert breakdown.grand_total == 250000
