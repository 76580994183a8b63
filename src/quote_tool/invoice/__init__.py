"""Invoice subpackage - text and image renderings of a quote breakdown."""
from .formatting import format_idr, format_invoice_date
from .text import generate_invoice_text, whatsapp_share_link
from .image import render_invoice_image, invoice_image_bytes

__all__ = [
    'format_idr', 'format_invoice_date',
    'generate_invoice_text', 'whatsapp_share_link',
    'render_invoice_image', 'invoice_image_bytes',
]
