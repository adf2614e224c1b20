# Core module for the appointment check-in terminal
# Contains interfaces and implementations for camera, QR decoding,
# appointment rules, lookup and audit writing

from core.interfaces.camera_interface import ICameraCapture, CameraInfo
from core.interfaces.qr_detector_interface import IQrDetector, QrDetectionResult
from core.interfaces.payload_codec_interface import IPayloadCodec, AppointmentPass
from core.interfaces.appointment_lookup_interface import (
    IAppointmentLookup,
    AppointmentRecord,
    AppointmentStatus,
    AppointmentLookupError,
    LookupResponse,
)
from core.interfaces.validation_interface import ValidationResult, ReasonCode, TimeStatus
from core.interfaces.audit_sink_interface import IAuditSink

__all__ = [
    "ICameraCapture",
    "CameraInfo",
    "IQrDetector",
    "QrDetectionResult",
    "IPayloadCodec",
    "AppointmentPass",
    "IAppointmentLookup",
    "AppointmentRecord",
    "AppointmentStatus",
    "AppointmentLookupError",
    "LookupResponse",
    "ValidationResult",
    "ReasonCode",
    "TimeStatus",
    "IAuditSink",
]
