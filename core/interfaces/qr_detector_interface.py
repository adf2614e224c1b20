"""
QR decoder contract.

Decoders locate and read the symbol only. The decoded text goes to the
appointment pass codec untouched.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Tuple

import cv2
import numpy as np


@dataclass
class QrDetectionResult:
    """
    One decoded QR symbol.

    Attributes:
        text: Raw symbol content (the appointment pass string)
        polygon: Corner points, clockwise from top-left
        rect: Axis-aligned box (left, top, width, height)
        confidence: Backend quality score scaled to 0-1
        backend: Decoder that produced the result
    """
    text: str
    polygon: List[Tuple[int, int]]
    rect: Tuple[int, int, int, int]
    confidence: float
    backend: str = ""


def toGrayscale(image: np.ndarray) -> np.ndarray:
    """Both backends read single-channel frames; BGR input is converted."""
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image


class IQrDetector(ABC):
    """A decoder returns the first readable QR symbol, or None."""

    @abstractmethod
    def detect(self, image: np.ndarray) -> Optional[QrDetectionResult]:
        """
        Decode the first QR symbol in an image.

        Args:
            image: BGR or grayscale frame

        Returns:
            QrDetectionResult, or None when nothing readable was found.
            Decoder errors are logged and reported as None.
        """
        pass
