from typing import Optional

import cv2
import numpy as np

from app.scanner.exceptions import CameraPermissionError


class OpenCVCamera:
    def __init__(self, index: int = 0):
        self.index = index
        self._capture: Optional[cv2.VideoCapture] = None

    def open(self) -> None:
        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            raise CameraPermissionError(f'Camera {self.index} could not be opened')
        self._capture = capture

    def read(self) -> Optional[np.ndarray]:
        if self._capture is None:
            return None
        ok, frame = self._capture.read()
        return frame if ok else None

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None


_detector = cv2.QRCodeDetector()


def decode_qr(frame: np.ndarray) -> Optional[str]:
    try:
        text, _, _ = _detector.detectAndDecode(frame)
    except cv2.error:
        return None
    return text or None
