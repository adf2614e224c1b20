"""
Pyzbar QR Detector Implementation.

Alternative backend for terminals where zxing-cpp wheels are not
available. Needs the system zbar shared library.
"""

import logging
from typing import Optional

import numpy as np

from core.interfaces.qr_detector_interface import (
    IQrDetector,
    QrDetectionResult,
    toGrayscale
)


class PyzbarQrDetector(IQrDetector):
    """Reads the first QR symbol with ZBar and decodes it as UTF-8."""

    BACKEND_NAME = "pyzbar"

    def __init__(self, logger: Optional[logging.Logger] = None):
        from pyzbar.pyzbar import decode, ZBarSymbol

        self._decode = decode
        self._symbols = [ZBarSymbol.QRCODE]
        self._logger = logger or logging.getLogger(__name__)

        self._logger.info("PyzbarQrDetector ready")

    def detect(self, image: np.ndarray) -> Optional[QrDetectionResult]:
        try:
            found = self._decode(toGrayscale(image), symbols=self._symbols)
        except Exception as e:
            self._logger.error(f"ZBar failed on frame {image.shape}: {e}")
            return None

        if not found:
            self._logger.debug("No QR symbol in frame")
            return None

        symbol = found[0]
        try:
            text = symbol.data.decode("utf-8")
        except UnicodeDecodeError as e:
            self._logger.warning(f"QR symbol is not UTF-8 text: {e}")
            return None

        self._logger.debug(f"QR symbol read ({len(text)} chars)")

        box = symbol.rect
        return QrDetectionResult(
            text=text,
            polygon=[(point.x, point.y) for point in symbol.polygon],
            rect=(box.left, box.top, box.width, box.height),
            confidence=symbol.quality / 100.0 if symbol.quality else 1.0,
            backend=self.BACKEND_NAME
        )
