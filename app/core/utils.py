import secrets
from datetime import datetime, timezone


def current_time() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def create_check_in_token() -> str:
    return secrets.token_urlsafe(16)
