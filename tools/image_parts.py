"""Convert stored image payloads into Gemini inline-data parts."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Dict, Tuple

DEFAULT_MIME_TYPE = "image/png"
_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(;[^,]*)?,(?P<data>.*)$", re.DOTALL)


def split_data_url(image: str) -> Tuple[str, str]:
    """Return ``(mime_type, base64_payload)`` for a data URL or bare base64 string."""

    match = _DATA_URL.match(image.strip())
    if match:
        return match.group("mime") or DEFAULT_MIME_TYPE, match.group("data")
    return DEFAULT_MIME_TYPE, image.strip()


def image_part(image: str) -> Dict[str, object]:
    """Build an inline image part accepted by ``GenerativeModel.generate_content``."""

    mime_type, payload = split_data_url(image)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image payload is not valid base64") from exc
    if not data:
        raise ValueError("Image payload is empty")
    return {"mime_type": mime_type, "data": data}


__all__ = ["image_part", "split_data_url", "DEFAULT_MIME_TYPE"]
