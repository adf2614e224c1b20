"""
ZXing QR Code Detector Implementation.

Default decoder for the reception terminal. zxing-cpp copes well with
passes shown on phone screens (glare, moire) as well as printed ones.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from core.interfaces.qr_detector_interface import (
    IQrDetector,
    QrDetectionResult,
    toGrayscale
)


class ZxingQrDetector(IQrDetector):
    """Reads the first valid QR symbol in a frame with zxing-cpp."""

    BACKEND_NAME = "zxing"

    def __init__(
        self,
        tryRotate: bool = True,
        tryDownscale: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            tryRotate: Also scan the frame rotated by 90/270 degrees
            tryDownscale: Also scan downscaled copies of large frames
            logger: Logger instance for debug output
        """
        # Imported here so the factory can report a missing wheel cleanly
        import zxingcpp

        self._zxing = zxingcpp
        self._readOptions = {
            "formats": zxingcpp.BarcodeFormat.QRCode,
            "try_rotate": tryRotate,
            "try_downscale": tryDownscale,
        }
        self._logger = logger or logging.getLogger(__name__)

        self._logger.info(
            f"ZxingQrDetector ready (tryRotate={tryRotate}, tryDownscale={tryDownscale})"
        )

    def detect(self, image: np.ndarray) -> Optional[QrDetectionResult]:
        try:
            symbols = self._zxing.read_barcodes(toGrayscale(image), **self._readOptions)
        except Exception as e:
            self._logger.error(f"zxing-cpp failed on frame {image.shape}: {e}")
            return None

        readable = [s for s in symbols if s.valid and s.text]
        if not readable:
            self._logger.debug(f"No readable QR symbol ({len(symbols)} candidates)")
            return None

        return self._toResult(readable[0])

    def _toResult(self, symbol) -> QrDetectionResult:
        pos = symbol.position
        corners: List[Tuple[int, int]] = [
            (corner.x, corner.y)
            for corner in (pos.top_left, pos.top_right, pos.bottom_right, pos.bottom_left)
        ]
        left = min(x for x, _ in corners)
        top = min(y for _, y in corners)
        right = max(x for x, _ in corners)
        bottom = max(y for _, y in corners)

        self._logger.debug(f"QR symbol read ({len(symbol.text)} chars) at ({left}, {top})")

        # zxing-cpp reports no quality score
        return QrDetectionResult(
            text=symbol.text,
            polygon=corners,
            rect=(left, top, right - left, bottom - top),
            confidence=1.0,
            backend=self.BACKEND_NAME
        )
