"""
Services Interfaces Package.

Exports all service interfaces for the check-in terminal.
"""

from services.interfaces.base_service_interface import (
    IBaseService,
    BaseService
)

from services.interfaces.config_service_interface import IConfigService

from services.interfaces.camera_service_interface import (
    CameraFrame,
    ICameraService
)

from services.interfaces.scan_service_interface import (
    ScanFailure,
    CameraSource,
    UploadedImageSource,
    ScanSource,
    ScanOutcome,
    IScanService
)

from services.interfaces.verification_service_interface import IVerificationService


__all__ = [
    # Base
    "IBaseService",
    "BaseService",
    # Config
    "IConfigService",
    # Step 1: Camera
    "CameraFrame",
    "ICameraService",
    # Step 2: QR Scan
    "ScanFailure",
    "CameraSource",
    "UploadedImageSource",
    "ScanSource",
    "ScanOutcome",
    "IScanService",
    # Step 3: Verification
    "IVerificationService",
]
