# Services module for the check-in terminal
# Contains the step services wrapping core components

# Step services are in services/impl/
# Import them directly from there:
# from services.impl.s1_camera_service import S1CameraService
# from services.impl.s3_verification_service import S3VerificationService

__all__ = []
