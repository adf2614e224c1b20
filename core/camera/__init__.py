"""Camera capture module."""

from core.camera.opencv_camera import OpenCVCamera

__all__ = ['OpenCVCamera']
