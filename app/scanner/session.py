"""
Camera scanning session.

A session owns the camera between ``start()`` and the moment a QR code is
decoded, ``stop()`` is called, or the session is torn down. The camera is
released on every one of those paths before anything is sent to the server.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from app.core.logger import logger
from app.core.qr import InvalidCheckInPayload, parse_check_in_payload
from app.scanner.client import CheckInClient
from app.scanner.exceptions import (
    CameraPermissionError,
    ScanError,
    ScanValidationError,
)

IDLE_MESSAGE = 'Point your camera at an event QR code to check in'
SCANNING_MESSAGE = 'Scanning... Hold the QR code steady'
INVALID_FORMAT_MESSAGE = (
    'Invalid QR code format. Please scan a valid UMS event QR code.'
)
CAMERA_DENIED_MESSAGE = (
    'Camera access denied. Please enable camera permissions to scan QR codes.'
)


class ScanStatus(str, Enum):
    IDLE = 'idle'
    SCANNING = 'scanning'
    SUCCESS = 'success'
    ERROR = 'error'
    CAMERA_DENIED = 'camera_denied'


@dataclass
class ScanResult:
    status: ScanStatus
    message: str
    data: Optional[dict] = None
    error: Optional[ScanError] = None


class Camera(Protocol):
    def open(self) -> None: ...

    def read(self) -> Optional[Any]: ...

    def release(self) -> None: ...


Decoder = Callable[[Any], Optional[str]]


class ScannerSession:
    def __init__(
        self,
        camera: Camera,
        decoder: Decoder,
        client: CheckInClient,
        *,
        interval: float = 0.2,
    ):
        self.camera = camera
        self.decoder = decoder
        self.client = client
        self.interval = interval
        self.result = ScanResult(ScanStatus.IDLE, IDLE_MESSAGE)
        self._stop_event = threading.Event()

    @property
    def camera_denied(self) -> bool:
        return self.result.status == ScanStatus.CAMERA_DENIED

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        self.camera.release()

    def start(self) -> ScanResult:
        # Once denied, only an explicit retry() touches the camera again
        if self.camera_denied:
            return self.result

        self._stop_event.clear()
        try:
            self.camera.open()
        except CameraPermissionError as e:
            logger.error('Camera unavailable: %s', e)
            self.result = ScanResult(
                ScanStatus.CAMERA_DENIED, CAMERA_DENIED_MESSAGE, error=e
            )
            return self.result

        self.result = ScanResult(ScanStatus.SCANNING, SCANNING_MESSAGE)
        try:
            text = self._sample()
        finally:
            self.camera.release()

        if text is None:
            logger.info('Scanning stopped before a code was read')
            self.result = ScanResult(ScanStatus.IDLE, IDLE_MESSAGE)
            return self.result
        return self.handle_decoded(text)

    def stop(self) -> None:
        self._stop_event.set()

    def retry(self) -> ScanResult:
        self.result = ScanResult(ScanStatus.IDLE, IDLE_MESSAGE)
        return self.start()

    def _sample(self) -> Optional[str]:
        while not self._stop_event.is_set():
            frame = self.camera.read()
            if frame is not None:
                text = self.decoder(frame)
                if text:
                    return text
            # Yield between attempts; stop() wakes this up early
            self._stop_event.wait(self.interval)
        return None

    def handle_decoded(self, text: str) -> ScanResult:
        try:
            parse_check_in_payload(text)
        except InvalidCheckInPayload:
            logger.warning('Ignoring malformed QR payload %r', text)
            self.result = ScanResult(
                ScanStatus.ERROR,
                INVALID_FORMAT_MESSAGE,
                error=ScanValidationError(INVALID_FORMAT_MESSAGE),
            )
            return self.result

        try:
            data = self.client.check_in(text)
        except ScanError as e:
            self.result = ScanResult(ScanStatus.ERROR, e.message, error=e)
            return self.result

        logger.info(
            'Check-in accepted for registration %s', data.get('registration_id')
        )
        self.result = ScanResult(
            ScanStatus.SUCCESS,
            data.get('message', 'Check-in successful'),
            data=data,
        )
        return self.result
