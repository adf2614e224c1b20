from services.impl.s1_camera_service import S1CameraService
from tests.conftest import FakeCamera


def test_capture_requires_open_camera():
    service = S1CameraService(cameraCapture=FakeCamera())

    frame = service.captureFrame()

    assert not frame.success
    assert not frame.cameraAvailable
    assert frame.image is None


def test_capture_frames():
    service = S1CameraService(cameraCapture=FakeCamera(frameCount=2))
    assert service.openCamera(1)

    first = service.captureFrame()
    second = service.captureFrame()

    assert first.success and second.success
    assert first.image.shape == (48, 64, 3)
    assert service.getCurrentCameraIndex() == 1


def test_open_failure():
    service = S1CameraService(cameraCapture=FakeCamera(canOpen=False))

    assert not service.openCamera(0)
    assert not service.isOpened()
    assert service.getCurrentCameraIndex() is None


def test_close_camera():
    camera = FakeCamera()
    service = S1CameraService(cameraCapture=camera)
    service.openCamera(0)

    service.closeCamera()

    assert not camera.opened
    assert not service.isOpened()


def test_lists_cameras():
    cameras = S1CameraService(cameraCapture=FakeCamera()).getAvailableCameras()
    assert [camera.index for camera in cameras] == [0]
