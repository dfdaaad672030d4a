from dataclasses import dataclass
from io import BytesIO
from urllib.parse import urlparse
import base64

import qrcode
from qrcode.constants import ERROR_CORRECT_M

# Byte-mode capacity of the largest QR version.
QR_MAX_LENGTH = 2953


@dataclass
class QRCodeOptions:
    width: int = 400
    margin: int = 2
    dark: str = '#1a5f2a'
    light: str = '#ffffff'


class QRCodeError(Exception):
    pass


def _make_image(url, options):
    if not url or not isinstance(url, str):
        raise QRCodeError('URL is required and must be a string')
    options = options or QRCodeOptions()
    try:
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=options.margin)
        qr.add_data(url)
        qr.make(fit=True)
        # Pick the box size that gets closest to the requested pixel width.
        modules = qr.modules_count + 2 * options.margin
        qr.box_size = max(1, options.width // modules)
        return qr.make_image(fill_color=options.dark, back_color=options.light)
    except Exception as e:
        raise QRCodeError(f"Failed to generate QR code: {e}") from e


def generate_qr_code_buffer(url, options=None):
    """PNG bytes of a QR code encoding `url`."""
    img = _make_image(url, options)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_qr_code(url, options=None):
    """QR code as a base64 PNG data URL."""
    png = generate_qr_code_buffer(url, options)
    return f"data:image/png;base64,{base64.b64encode(png).decode()}"


def validate_qr_code_url(url):
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url)
    if parsed.scheme and parsed.netloc:
        return True
    # Relative links and plain strings are fine as long as they fit in a QR code.
    return 0 < len(url) <= QR_MAX_LENGTH
