from typing import Optional
from urllib.parse import urljoin

import requests

from app.core.logger import logger
from app.scanner.exceptions import (
    ConflictError,
    NotFoundError,
    ScanValidationError,
    ServerError,
    UnauthorizedError,
)

CHECK_IN_PATH = '/attendance/check-in'


def _error_detail(response: requests.Response) -> str:
    try:
        detail = response.json().get('detail')
    except ValueError:
        detail = None
    if isinstance(detail, str) and detail:
        return detail
    return f'Check-in failed with status {response.status_code}'


class CheckInClient:
    """Sends scanned payloads to the check-in endpoint on behalf of a staff user."""

    def __init__(
        self,
        base_url: str,
        access_token: str,
        *,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.url = urljoin(base_url, CHECK_IN_PATH)
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def check_in(self, payload: str) -> dict:
        headers = {
            'Accept': 'application/json',
            'Authorization': f'Bearer {self.access_token}',
        }
        try:
            response = self.session.post(
                self.url,
                json={'token': payload},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error('Check-in request failed: %s', e)
            raise ServerError('Could not reach the check-in server') from e

        if response.status_code == 200:
            return response.json()

        detail = _error_detail(response)
        logger.error('Check-in rejected (%s): %s', response.status_code, detail)
        if response.status_code == 404:
            raise NotFoundError(detail)
        if response.status_code in (400, 409):
            raise ConflictError(detail)
        if response.status_code in (401, 403):
            raise UnauthorizedError(detail)
        if response.status_code == 422:
            raise ScanValidationError(detail)
        raise ServerError(detail)
