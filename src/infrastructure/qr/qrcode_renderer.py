"""QR code rendering backed by the qrcode library."""

import io

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q

_ERROR_CORRECTION = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


class QRCodeRenderer:
    """Encodes a text payload as a PNG QR code."""

    def __init__(self, box_size: int = 8, border: int = 4) -> None:
        self._box_size = box_size
        self._border = border

    def render_png(self, payload: str, error_correction: str = "M") -> bytes:
        """
        Render ``payload`` as a PNG image.

        Raises:
            ValueError: If ``error_correction`` is not one of L, M, Q, H
        """
        level = _ERROR_CORRECTION.get(error_correction.upper())
        if level is None:
            raise ValueError(f"Unknown error correction level: {error_correction}")

        qr = qrcode.QRCode(
            version=None,
            error_correction=level,
            box_size=self._box_size,
            border=self._border,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        image.save(buf, format="PNG")
        return buf.getvalue()
