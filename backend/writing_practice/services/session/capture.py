"""Webcam capture mediation.

The session only needs to hold the camera open while practising and to let
it go on every exit path. Acquisition failures of any kind (permission,
missing device, device busy, no backend) become an advisory string instead
of an exception.
"""

import logging
from typing import List, Optional, Tuple

import cv2

DENIED_ADVISORY = "Webcam permission denied. You can continue without webcam."


class CaptureUnavailable(Exception):
    pass


class CaptureTrack:
    """One open device stream. ``stop`` releases it and is safe to repeat."""

    def __init__(self, capture, label: str = 'video'):
        self._capture = capture
        self.label = label
        self.stopped = False

    def stop(self) -> None:
        if self.stopped:
            return
        self.stopped = True
        self._capture.release()


class CaptureHandle:
    def __init__(self, tracks: List[CaptureTrack]):
        self._tracks = list(tracks)

    def tracks(self) -> List[CaptureTrack]:
        return list(self._tracks)


class OpenCVCaptureSource:
    """Opens a local camera through OpenCV.

    ``constraints`` mirrors a browser media request: only ``video`` is
    honoured; audio is never captured.
    """

    def __init__(self, device_index: int = 0):
        self.device_index = device_index

    def request(self, constraints: dict) -> CaptureHandle:
        if not constraints.get('video'):
            raise CaptureUnavailable('no video requested')
        cap = cv2.VideoCapture(self.device_index)
        if not cap.isOpened():
            cap.release()
            raise CaptureUnavailable(f'camera {self.device_index} could not be opened')
        return CaptureHandle([CaptureTrack(cap, label=f'camera:{self.device_index}')])


class CaptureMediator:
    """Acquire/release boundary between the session and a capture source."""

    constraints = {'video': True, 'audio': False}

    def __init__(self, source=None, logger: Optional[logging.Logger] = None):
        # source=None means this environment has no capture capability
        self.source = source
        self.logger = logger or logging.getLogger(__name__)

    def acquire(self) -> Tuple[Optional[CaptureHandle], Optional[str]]:
        if self.source is None:
            self.logger.info("[capture-denied] capture not supported in this environment")
            return None, DENIED_ADVISORY
        try:
            handle = self.source.request(dict(self.constraints))
        except Exception as exc:
            self.logger.info(f"[capture-denied] {exc}")
            return None, DENIED_ADVISORY
        if handle is None:
            return None, DENIED_ADVISORY
        return handle, None

    def release(self, handle: Optional[CaptureHandle]) -> None:
        if handle is None:
            return
        for track in handle.tracks():
            try:
                track.stop()
            except Exception as exc:
                self.logger.warning(f"[capture-release-failed] track={getattr(track, 'label', '?')} error={exc}")
        self.logger.info("[capture-released]")
