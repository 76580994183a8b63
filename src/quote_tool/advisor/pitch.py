"""
Pitch advisor - asks Gemini for short sales copy about a finished quote.

Only summary numbers leave the process. Any failure degrades to a fixed
fallback message so the caller can always show something.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

from google import genai
from google.genai import types

from ..config.settings import get_settings, Settings
from ..engine.models import QuoteBreakdown
from ..invoice.formatting import format_idr

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Gagal memuat strategi pitching. Silakan coba lagi."


def build_pitch_prompt(breakdown: QuoteBreakdown, client_name: str, settings: Settings) -> str:
    """Prompt built from the quote summary (counts, logo option, fee labels, total)."""
    extra_labels = ", ".join(fee.label for fee in breakdown.extra_fees)
    return (
        f'Saya agensi "{settings.agency_name}" sedang melayani klien "{client_name.strip()}". '
        f"Total: {format_idr(breakdown.grand_total)}.\n"
        f"Jasa: Upload {breakdown.upload.count}, Desain {breakdown.photo.count}, "
        f"Banner {breakdown.banner.count}, Video {breakdown.video.count}, Logo {breakdown.logo.type.value}.\n"
        f"Extra: {extra_labels}.\n"
        "Berikan 3 poin pitching profesional yang meyakinkan klien bahwa biaya ini adalah investasi tepat "
        f"bersama {settings.agency_name}. Bahasa Indonesia akrab & profesional."
    )


class PitchAdvisor:
    """Generates pitch copy for a quote through the Google GenAI SDK."""

    def __init__(self, settings: Optional[Settings] = None, client: Any = None):
        self.settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> Optional[Any]:
        if self._client is not None:
            return self._client
        if not self.settings.genai_api_key:
            return None
        self._client = genai.Client(
            api_key=self.settings.genai_api_key,
            http_options=types.HttpOptions(
                client_args={"timeout": self.settings.genai_timeout},
            ),
        )
        return self._client

    def generate(self, breakdown: QuoteBreakdown, client_name: str = "") -> Optional[str]:
        """
        Pitch text for the quote.

        Returns None without calling the model when the grand total is zero,
        and FALLBACK_MESSAGE when the request cannot be completed.
        """
        if breakdown.grand_total == 0:
            return None

        try:
            client = self._get_client()
        except Exception as exc:
            logger.warning("GenAI client could not be created: %s", exc)
            return FALLBACK_MESSAGE
        if client is None:
            logger.warning("GenAI API key not configured; returning fallback pitch")
            return FALLBACK_MESSAGE

        prompt = build_pitch_prompt(breakdown, client_name, self.settings)
        try:
            t0 = time.monotonic()
            res = client.models.generate_content(
                model=self.settings.genai_model,
                contents=prompt,
            )
            logger.info("pitch advisor: genai_ms=%s", int((time.monotonic() - t0) * 1000))
            text = (getattr(res, "text", None) or "").strip()
        except Exception as exc:
            logger.warning("Pitch generation failed: %s", exc)
            return FALLBACK_MESSAGE

        if not text:
            logger.warning("Pitch generation returned an empty response")
            return FALLBACK_MESSAGE
        return text
