"""
QR Code Generation

Renders a string (a short URL) as a PNG QR code and returns it as a
base64 data URL that a browser can put straight into an <img> tag.
"""

import base64
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_H

DATA_URL_PREFIX = "data:image/png;base64,"


def generate_qr_png(data: str) -> bytes:
    # High error correction keeps the code scannable with up to 30% damage
    qr = qrcode.QRCode(
        version=None, box_size=10, border=1,
        error_correction=ERROR_CORRECT_H
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_qr_data_url(data: str) -> str:
    return DATA_URL_PREFIX + base64.b64encode(generate_qr_png(data)).decode()
