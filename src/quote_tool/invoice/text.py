"""
Plain-text invoice in WhatsApp markdown, plus the share link that carries it.
"""
from datetime import date
from typing import Optional
from urllib.parse import quote

from ..config.settings import get_settings, Settings
from ..engine.models import LogoType, QuoteBreakdown
from .formatting import format_idr, format_invoice_date

WHATSAPP_SHARE_URL = "https://wa.me/?text="
SEPARATOR = "──────────────────"
EMPTY_ORDER_LINE = "• (Belum ada layanan dipilih)"


def invoice_lines(breakdown: QuoteBreakdown) -> list[str]:
    """Order lines for every service or fee that is actually on the quote."""
    lines = []
    if breakdown.upload.count > 0:
        lines.append(f"• Upload Produk ({breakdown.upload.count}x): {format_idr(breakdown.upload.total)}")
    if breakdown.photo.count > 0:
        lines.append(f"• Desain Foto ({breakdown.photo.count}x): {format_idr(breakdown.photo.total)}")
    if breakdown.banner.count > 0:
        lines.append(f"• Banner Toko ({breakdown.banner.count}x): {format_idr(breakdown.banner.total)}")
    if breakdown.video.count > 0:
        lines.append(f"• Video Produk ({breakdown.video.count}x): {format_idr(breakdown.video.total)}")
    if breakdown.logo.type is not LogoType.NONE:
        lines.append(f"• Branding Logo: {format_idr(breakdown.logo.total)}")
    for fee in breakdown.extra_fees:
        lines.append(f"• {fee.label}: {format_idr(fee.amount)}")
    return lines


def generate_invoice_text(
    breakdown: QuoteBreakdown,
    client_name: str = "",
    shop_name: str = "",
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> str:
    """Render the shareable invoice message."""
    settings = settings or get_settings()
    agency = settings.agency_name
    today = today or date.today()
    services = "\n".join(invoice_lines(breakdown)) or EMPTY_ORDER_LINE

    text = f"""
*RINCIAN PENAWARAN JASA*
*by {agency}*
{SEPARATOR}
📅 Tgl: {format_invoice_date(today)}
👤 Klien: {client_name.strip() or '-'}
🏪 Toko: {shop_name.strip() or '-'}

*Daftar Pesanan:*
{services}

💰 Subtotal: {format_idr(breakdown.subtotal)}
📉 Diskon: -{format_idr(breakdown.discount)}
{SEPARATOR}
*TOTAL BAYAR: {format_idr(breakdown.grand_total)}*
{SEPARATOR}

*Ketentuan Layanan {agency}:*
• Sistem bayar: Setelah toko jadi/selesai.
• Revisi: Berlaku untuk revisi minor saja.
• Estimasi: Segera setelah konfirmasi.

Apakah rincian dan nominal di atas sudah sesuai? Jika ya, akan segera kami eksekusi. Mohon konfirmasinya ya!
"""
    return text.strip()


def whatsapp_share_link(text: str) -> str:
    """Link that opens WhatsApp with the invoice text prefilled."""
    return WHATSAPP_SHARE_URL + quote(text, safe="")
