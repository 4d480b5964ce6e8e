"""
Check-in QR payloads.

A payload is a URI-like string ``<scheme>://checkin/<identifier>`` where the
identifier is the registration's check-in token. Issuer and validator must
agree on the scheme, so it is read from settings in both places.
"""

import re
from io import BytesIO

import qrcode

from app.core.config import settings

CHECK_IN_PATH = 'checkin'


class InvalidCheckInPayload(ValueError):
    pass


def _payload_pattern(scheme: str) -> re.Pattern:
    return re.compile(rf'^{re.escape(scheme)}://{CHECK_IN_PATH}/([A-Za-z0-9_\-]+)$')


def issue_check_in_payload(identifier: str) -> str:
    if not identifier:
        raise InvalidCheckInPayload('Identifier is required')
    return f'{settings.CHECK_IN_SCHEME}://{CHECK_IN_PATH}/{identifier}'


def parse_check_in_payload(payload: str) -> str:
    match = _payload_pattern(settings.CHECK_IN_SCHEME).match((payload or '').strip())
    if not match:
        raise InvalidCheckInPayload(f'Invalid check-in payload: {payload!r}')
    return match.group(1)


def render_qr_png(payload: str) -> bytes:
    """Render ``payload`` as a PNG image and return the raw bytes."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color='black', back_color='white')

    buffered = BytesIO()
    img.save(buffered, format='PNG')
    return buffered.getvalue()
