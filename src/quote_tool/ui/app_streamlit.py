"""
Streamlit UI for the agency quote tool.

Features:
- Client identity and service quantities
- Logo option, extra fees and client discount
- Live invoice preview with rate details
- WhatsApp share link, copy-ready text, PNG and CSV export
- AI pitch generator
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from quote_tool.advisor.pitch import PitchAdvisor
from quote_tool.config.settings import get_settings
from quote_tool.engine import PricingEngine, DiscountType, LogoType
from quote_tool.invoice import (
    format_idr,
    generate_invoice_text,
    invoice_image_bytes,
    whatsapp_share_link,
)
from quote_tool.logging_setup import configure_logging
from quote_tool.services.quote_session import QuoteSession, InvalidExtraFee


st.set_page_config(
    page_title="Quote Tool",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine()


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return settings


@st.cache_resource
def get_advisor():
    return PitchAdvisor(get_settings_cached())


try:
    settings = get_settings_cached()
    engine = get_engine()
    advisor = get_advisor()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


LOGO_OPTIONS = {
    LogoType.NONE: "Lewati (Tanpa Logo)",
    LogoType.CLIENT: "Konsep Klien (Edit Saja)",
    LogoType.FULL: "Konsep Baru (Profesional)",
}
DISCOUNT_OPTIONS = {
    DiscountType.NONE: "No Discount",
    DiscountType.NOMINAL: "Nominal",
    DiscountType.PERCENT: "Persen",
}
COUNT_WIDGETS = {
    'upload': ("Upload Produk (Pcs)", "upload_input"),
    'photo': ("Desain Foto Produk (Set)", "photo_input"),
    'banner': ("Banner Toko", "banner_input"),
    'video': ("Video Produk", "video_input"),
}


# ============================================================================
# SESSION STATE
# ============================================================================
if 'quote' not in st.session_state:
    st.session_state.quote = QuoteSession()
if 'pitch' not in st.session_state:
    st.session_state.pitch = None

quote: QuoteSession = st.session_state.quote


def _on_discount_type_change():
    quote.set_discount_type(st.session_state.discount_type_input)
    st.session_state.discount_value_input = 0.0


def _reset_all():
    quote.reset()
    st.session_state.pitch = None
    for _, key in COUNT_WIDGETS.values():
        st.session_state[key] = 0
    st.session_state.client_input = ""
    st.session_state.shop_input = ""
    st.session_state.logo_input = LogoType.NONE
    st.session_state.discount_type_input = DiscountType.NONE
    st.session_state.discount_value_input = 0.0


# ============================================================================
# SIDEBAR: Client Identity
# ============================================================================
with st.sidebar:
    st.header("👤 Identitas Klien")

    with st.container(border=True):
        quote.client_name = st.text_input("Nama Klien", placeholder="Misal: Andi Wijaya", key="client_input")
        quote.shop_name = st.text_input("Nama Toko", placeholder="Mandiri Jaya Shop", key="shop_input")

    st.divider()
    st.caption(f"Rate card: {engine.rate_card_source}")
    st.button("🔄 Reset", on_click=_reset_all, use_container_width=True)


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title(f"{settings.agency_name} Toolkit")
st.caption(f"Penentuan harga, invoice, dan strategi branding | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2 = st.tabs(["⚡ Quote Builder", "📚 Rate Card"])


# ============================================================================
# TAB 1: QUOTE BUILDER
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.8, 1.2], gap="large")

    with col1:
        st.subheader("Pilihan Layanan")

        with st.container(border=True):
            c1, c2 = st.columns(2)
            for idx, (service, (label, key)) in enumerate(COUNT_WIDGETS.items()):
                with (c1 if idx % 2 == 0 else c2):
                    value = st.number_input(label, min_value=0, step=1, key=key)
                    quote.set_count(service, value)

            logo_choice = st.radio(
                "Branding Logo",
                options=list(LOGO_OPTIONS),
                format_func=lambda t: f"{LOGO_OPTIONS[t]} · "
                                      f"{format_idr(engine.rate_card.logo_price(t)) if t is not LogoType.NONE else 'Gratis'}",
                horizontal=True,
                key="logo_input",
            )
            quote.set_logo(logo_choice)

        # Extra fees
        with st.expander("🏷️ Biaya Tambahan", expanded=bool(quote.state.extra_fees)):
            with st.form("extra_fee_form", clear_on_submit=True):
                f1, f2 = st.columns([2, 1])
                with f1:
                    fee_label = st.text_input("Keterangan Biaya", placeholder="Misal: Aset Berbayar / Express")
                with f2:
                    fee_amount = st.text_input("Nominal", placeholder="0")
                if st.form_submit_button("➕ Tambah"):
                    try:
                        quote.add_extra_fee(fee_label, fee_amount)
                    except InvalidExtraFee as e:
                        st.warning(str(e))

            for fee in quote.state.extra_fees:
                r1, r2 = st.columns([4, 1])
                r1.markdown(f"**{fee.label}** · {format_idr(fee.amount)}")
                if r2.button("🗑️", key=f"remove_{fee.id}"):
                    quote.remove_extra_fee(fee.id)
                    st.rerun()

        # Discount
        with st.container(border=True):
            st.markdown("##### ➖ Diskon Khusus Klien")
            d1, d2 = st.columns([1.4, 1])
            with d1:
                st.radio(
                    "Jenis Diskon",
                    options=list(DISCOUNT_OPTIONS),
                    format_func=lambda t: DISCOUNT_OPTIONS[t],
                    horizontal=True,
                    key="discount_type_input",
                    on_change=_on_discount_type_change,
                    label_visibility="collapsed",
                )
            with d2:
                if quote.discount.type is not DiscountType.NONE:
                    suffix = "%" if quote.discount.type is DiscountType.PERCENT else "IDR"
                    discount_value = st.number_input(
                        f"Nilai ({suffix})", min_value=0.0, step=1.0, key="discount_value_input"
                    )
                    quote.set_discount_value(discount_value)

        breakdown = quote.breakdown(engine)

        # AI pitch
        with st.container(border=True):
            st.markdown("##### ✨ AI Pitching Generator")
            st.caption("Buat kalimat persuasif agar klien segera setuju dengan penawaran Anda.")
            if st.button("Dapatkan Pitch", disabled=breakdown.grand_total == 0):
                with st.spinner("Menganalisis..."):
                    st.session_state.pitch = advisor.generate(breakdown, quote.client_name)
            if st.session_state.pitch:
                st.info(st.session_state.pitch)

    with col2:
        st.subheader("Invoice Preview")

        with st.container(border=True):
            if quote.client_name or quote.shop_name:
                st.caption("PENERIMA")
                st.markdown(f"**{quote.client_name or '-'}** · {quote.shop_name or '-'}")

            rows = []
            for label, line in (
                ("Upload Produk", breakdown.upload),
                ("Desain Foto", breakdown.photo),
                ("Banner Toko", breakdown.banner),
                ("Video Produk", breakdown.video),
            ):
                if line.count > 0:
                    rows.append({'Item': label, 'Qty': line.count,
                                 'Rate': format_idr(line.rate), 'Total': format_idr(line.total)})
            if breakdown.logo.type is not LogoType.NONE:
                rows.append({'Item': breakdown.logo.label, 'Qty': 1,
                             'Rate': format_idr(breakdown.logo.total), 'Total': format_idr(breakdown.logo.total)})
            for fee in breakdown.extra_fees:
                rows.append({'Item': fee.label, 'Qty': 1,
                             'Rate': format_idr(fee.amount), 'Total': format_idr(fee.amount)})

            if rows:
                st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
            else:
                st.info("💳 Kosong")

            if not breakdown.is_empty:
                st.caption(f"SUBTOTAL: {format_idr(breakdown.subtotal)}")
                if breakdown.discount > 0:
                    st.markdown(f":red[DISKON: - {format_idr(breakdown.discount)}]")

            st.metric("Total Bayar", format_idr(breakdown.grand_total))

            st.divider()

            invoice_text = generate_invoice_text(breakdown, quote.client_name, quote.shop_name, settings=settings)
            st.link_button("📤 Kirim Invoice (WA)", whatsapp_share_link(invoice_text),
                           type="primary", use_container_width=True)

            btn_col1, btn_col2 = st.columns(2)
            with btn_col1:
                st.download_button(
                    "🖼️ PNG",
                    data=invoice_image_bytes(breakdown, quote.client_name, quote.shop_name, settings=settings),
                    file_name=f"invoice_{quote.shop_name or 'quote'}.png",
                    mime="image/png",
                    use_container_width=True
                )
            with btn_col2:
                export_df = pd.DataFrame(rows + [
                    {'Item': 'Subtotal', 'Qty': '', 'Rate': '', 'Total': format_idr(breakdown.subtotal)},
                    {'Item': 'Diskon', 'Qty': '', 'Rate': '', 'Total': format_idr(breakdown.discount)},
                    {'Item': 'Total Bayar', 'Qty': '', 'Rate': '', 'Total': format_idr(breakdown.grand_total)},
                ])
                st.download_button(
                    "📥 CSV",
                    data=export_df.to_csv(index=False),
                    file_name=f"quote_{quote.shop_name or 'quote'}.csv",
                    mime="text/csv",
                    use_container_width=True
                )

        with st.expander("📋 Salin Rincian"):
            st.code(invoice_text, language=None)

        with st.expander("🔍 Calculation Details"):
            st.text(breakdown.get_trace_text())


# ============================================================================
# TAB 2: RATE CARD
# ============================================================================
with tab2:
    st.subheader("📚 Rate Card")
    rate_df = pd.DataFrame(engine.rate_card.to_records())
    rate_df['rate'] = rate_df['rate'].map(format_idr)
    st.dataframe(rate_df, use_container_width=True, hide_index=True)
    st.caption("Tier dipilih dari min tertinggi yang terpenuhi; jika tidak ada, tier terakhir dipakai.")

    if st.button("🔨 Reload Rate Card", type="secondary"):
        engine.reload_data()
        st.toast("Rate card reloaded")
        st.rerun()
