"""
Services Implementation Package.

Exports all service implementations for the check-in terminal.
"""

from services.impl.config_service import ConfigService
from services.impl.s1_camera_service import S1CameraService
from services.impl.s2_qr_scan_service import S2QrScanService
from services.impl.s3_verification_service import S3VerificationService


__all__ = [
    "ConfigService",
    "S1CameraService",
    "S2QrScanService",
    "S3VerificationService",
]
