"""
Screenshot Encoding
Turns JPEG bytes produced by the host app into the screenshotBase64 field.
"""
import base64
from typing import Optional


def encode_screenshot(jpeg_bytes: Optional[bytes]) -> Optional[str]:
    """Return base64 text for the screenshot, or None when there is none."""
    if not jpeg_bytes:
        return None
    return base64.b64encode(jpeg_bytes).decode("ascii")
