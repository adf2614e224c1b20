"""
QR Scan Service Interface Module.

Defines the interface for turning a scan source into raw QR text
(Step 2 of check-in). A scan source is either the live camera or an
image file uploaded by the operator.

Follows:
- SRP: Only handles QR scanning
- ISP: Single decode operation over both source kinds
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

from services.interfaces.camera_service_interface import ICameraService


class ScanFailure:
    """Reasons a scan source produced no QR text."""
    NO_QR_FOUND = "no_qr_found"
    CAMERA_UNAVAILABLE = "camera_unavailable"
    INVALID_IMAGE = "invalid_image"


@dataclass
class CameraSource:
    """
    Scan the current frame of an open camera.

    Attributes:
        cameraService: Camera service delivering the frame.
    """
    cameraService: ICameraService


@dataclass
class UploadedImageSource:
    """
    Scan an image uploaded by the operator.

    Attributes:
        data: Encoded image bytes (PNG, JPEG, ...).
        fileName: Original file name, used in logs only.
    """
    data: bytes
    fileName: str = ""


ScanSource = Union[CameraSource, UploadedImageSource]


@dataclass
class ScanOutcome:
    """
    Result of scanning one source.

    Attributes:
        success: True if QR text was decoded.
        rawText: Decoded QR text (None on failure).
        failure: One of ScanFailure values when success is False.
        frameId: Identifier of the frame or upload.
        processingTimeMs: Time taken to decode.
    """
    success: bool
    rawText: Optional[str] = None
    failure: Optional[str] = None
    frameId: str = ""
    processingTimeMs: float = 0.0


class IScanService(ABC):
    """
    Interface for QR scanning (Step 2).

    Never raises for bad input: every failure is a ScanOutcome with a
    ScanFailure reason.
    """

    @abstractmethod
    def decode(self, source: ScanSource) -> ScanOutcome:
        """
        Decode QR text from a scan source.

        Args:
            source: CameraSource or UploadedImageSource.

        Returns:
            ScanOutcome with raw text or failure reason.
        """
        pass
