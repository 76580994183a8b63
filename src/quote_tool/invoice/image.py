"""
Invoice image - renders a breakdown as a PNG for sharing in chat apps.

Fonts are looked up from the configured path, then common system fonts,
then Pillow's bundled default.
"""
import io
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from ..config.settings import get_settings, Settings
from ..engine.models import LogoType, QuoteBreakdown
from .formatting import format_idr, format_invoice_date

logger = logging.getLogger(__name__)

WIDTH = 720
PADDING = 48
HEADER_HEIGHT = 150
ROW_HEIGHT = 56
RECIPIENT_HEIGHT = 90
TOTALS_HEIGHT = 170

EMPTY_ROW = ("Kosong", "Belum ada layanan dipilih", format_idr(0))

INDIGO = (79, 70, 229)
INDIGO_DARK = (67, 56, 202)
SLATE_900 = (15, 23, 42)
SLATE_400 = (148, 163, 184)
SLATE_100 = (241, 245, 249)
ROSE = (244, 63, 94)
WHITE = (255, 255, 255)

DEFAULT_BOLD_PATHS: Sequence[str] = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    r"C:\Windows\Fonts\arialbd.ttf",
)
DEFAULT_REGULAR_PATHS: Sequence[str] = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    r"C:\Windows\Fonts\arial.ttf",
)

_font_cache: dict = {}


def _load_font(size: int, bold: bool, font_path: Optional[Path] = None):
    key = (size, bold, str(font_path) if font_path else None)
    if key in _font_cache:
        return _font_cache[key]

    candidates = [str(font_path)] if font_path else []
    candidates.extend(DEFAULT_BOLD_PATHS if bold else DEFAULT_REGULAR_PATHS)

    font = None
    for candidate in candidates:
        if not Path(candidate).exists():
            continue
        try:
            font = ImageFont.truetype(candidate, size)
            break
        except OSError:
            logger.warning("Could not load font %s", candidate)

    if font is None:
        logger.debug("No TrueType font found, using Pillow default at size %d", size)
        font = ImageFont.load_default(size=size)

    _font_cache[key] = font
    return font


def invoice_rows(breakdown: QuoteBreakdown) -> list[tuple[str, str, str]]:
    """(label, detail, amount) rows for every line present on the quote, or the placeholder row."""
    rows = []
    if breakdown.upload.count > 0:
        rows.append(("Upload Produk", f"{breakdown.upload.count} UNIT × {format_idr(breakdown.upload.rate)}",
                     format_idr(breakdown.upload.total)))
    if breakdown.photo.count > 0:
        rows.append(("Desain Foto", f"{breakdown.photo.count} UNIT × {format_idr(breakdown.photo.rate)}",
                     format_idr(breakdown.photo.total)))
    if breakdown.banner.count > 0:
        rows.append(("Banner Toko", f"{breakdown.banner.count} UNIT", format_idr(breakdown.banner.total)))
    if breakdown.video.count > 0:
        rows.append(("Video Produk", f"{breakdown.video.count} UNIT", format_idr(breakdown.video.total)))
    if breakdown.logo.type is not LogoType.NONE:
        rows.append(("Layanan Logo", breakdown.logo.label.upper(), format_idr(breakdown.logo.total)))
    for fee in breakdown.extra_fees:
        rows.append((fee.label, "", format_idr(fee.amount)))
    return rows or [EMPTY_ROW]


def render_invoice_image(
    breakdown: QuoteBreakdown,
    client_name: str = "",
    shop_name: str = "",
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> Image.Image:
    """Draw the invoice preview onto a new RGB image."""
    settings = settings or get_settings()
    today = today or date.today()
    rows = invoice_rows(breakdown)

    height = HEADER_HEIGHT + RECIPIENT_HEIGHT + ROW_HEIGHT * len(rows) + TOTALS_HEIGHT + PADDING
    image = Image.new("RGB", (WIDTH, height), WHITE)
    draw = ImageDraw.Draw(image)

    title_font = _load_font(34, True, settings.font_path)
    label_font = _load_font(20, True, settings.font_path)
    small_font = _load_font(14, False, settings.font_path)
    total_font = _load_font(40, True, settings.font_path)

    def right(text: str, y: int, font, fill):
        draw.text((WIDTH - PADDING - draw.textlength(text, font=font), y), text, font=font, fill=fill)

    # Header band
    draw.rectangle((0, 0, WIDTH, HEADER_HEIGHT), fill=INDIGO)
    draw.text((PADDING, 40), "Invoice", font=title_font, fill=WHITE)
    draw.text((PADDING, 92), f"{settings.agency_name.upper()} BILLING", font=small_font, fill=SLATE_100)
    right(format_invoice_date(today), 96, small_font, SLATE_100)

    # Recipient
    y = HEADER_HEIGHT + 20
    draw.text((PADDING, y), "PENERIMA", font=small_font, fill=SLATE_400)
    draw.text((PADDING, y + 20), client_name.strip() or "-", font=label_font, fill=SLATE_900)
    right(shop_name.strip() or "-", y + 22, label_font, INDIGO_DARK)

    # Line items
    y = HEADER_HEIGHT + RECIPIENT_HEIGHT
    for label, detail, amount in rows:
        draw.text((PADDING, y), label, font=label_font, fill=SLATE_900)
        if detail:
            draw.text((PADDING, y + 26), detail, font=small_font, fill=SLATE_400)
        right(amount, y, label_font, SLATE_900)
        y += ROW_HEIGHT

    # Totals
    draw.line((PADDING, y, WIDTH - PADDING, y), fill=SLATE_100, width=2)
    y += 16
    draw.text((PADDING, y), "SUBTOTAL", font=small_font, fill=SLATE_400)
    right(format_idr(breakdown.subtotal), y, small_font, SLATE_400)
    if breakdown.discount > 0:
        y += 24
        draw.text((PADDING, y), "DISKON", font=small_font, fill=ROSE)
        right(f"- {format_idr(breakdown.discount)}", y, small_font, ROSE)
    y += 44
    draw.text((PADDING, y), "TOTAL BAYAR", font=small_font, fill=SLATE_400)
    draw.text((PADDING, y + 22), format_idr(breakdown.grand_total), font=total_font, fill=INDIGO)

    return image


def invoice_image_bytes(
    breakdown: QuoteBreakdown,
    client_name: str = "",
    shop_name: str = "",
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> bytes:
    """PNG-encoded invoice image, ready for download buttons and HTTP responses."""
    image = render_invoice_image(breakdown, client_name, shop_name, settings=settings, today=today)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
