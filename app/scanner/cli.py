import sys

from app.core.config import settings
from app.core.logger import logger
from app.scanner.camera import OpenCVCamera, decode_qr
from app.scanner.client import CheckInClient
from app.scanner.session import ScannerSession, ScanStatus


def main():
    if not settings.SCANNER_ACCESS_TOKEN:
        logger.error('SCANNER_ACCESS_TOKEN is not set')
        sys.exit(1)

    client = CheckInClient(settings.SCANNER_API_URL, settings.SCANNER_ACCESS_TOKEN)
    camera = OpenCVCamera(settings.SCANNER_CAMERA_INDEX)

    with ScannerSession(
        camera,
        decode_qr,
        client,
        interval=settings.SCANNER_INTERVAL_SECONDS,
    ) as session:
        logger.info('Scanner ready on camera %s', settings.SCANNER_CAMERA_INDEX)
        try:
            while True:
                result = session.start()
                if result.status == ScanStatus.CAMERA_DENIED:
                    logger.error(result.message)
                    sys.exit(1)
                if result.status == ScanStatus.SUCCESS:
                    logger.info(
                        '%s (registration %s)',
                        result.message,
                        result.data.get('registration_id'),
                    )
                else:
                    logger.warning(result.message)
        except KeyboardInterrupt:
            logger.info('Scanner stopped')


if __name__ == '__main__':
    main()
