from conftest import FakeCamera, FakeDevice

from writing_practice.services.session.capture import (
    DENIED_ADVISORY,
    CaptureHandle,
    CaptureMediator,
    CaptureTrack,
    OpenCVCaptureSource,
)


def test_acquire_returns_handle_without_advisory():
    camera = FakeCamera()
    handle, advisory = CaptureMediator(camera).acquire()
    assert isinstance(handle, CaptureHandle)
    assert advisory is None
    assert camera.requests == [{'video': True, 'audio': False}]


def test_denied_request_becomes_advisory():
    handle, advisory = CaptureMediator(FakeCamera(deny=True)).acquire()
    assert handle is None
    assert advisory == DENIED_ADVISORY


def test_missing_capability_becomes_advisory():
    handle, advisory = CaptureMediator(None).acquire()
    assert handle is None
    assert advisory == DENIED_ADVISORY


def test_release_stops_every_track_once():
    devices = [FakeDevice(), FakeDevice()]
    handle = CaptureHandle([CaptureTrack(d) for d in devices])
    mediator = CaptureMediator(FakeCamera())
    mediator.release(handle)
    mediator.release(handle)
    assert [d.release_calls for d in devices] == [1, 1]
    assert all(t.stopped for t in handle.tracks())


def test_release_accepts_none():
    CaptureMediator(FakeCamera()).release(None)


def test_opencv_source_refuses_audio_only_requests():
    mediator = CaptureMediator(OpenCVCaptureSource(0))
    mediator.constraints = {'video': False, 'audio': True}
    handle, advisory = mediator.acquire()
    assert handle is None
    assert advisory == DENIED_ADVISORY
