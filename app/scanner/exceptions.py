class ScanError(Exception):
    """Base class for everything the scanner reports to the operator."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ScanValidationError(ScanError):
    pass


class NotFoundError(ScanError):
    pass


class ConflictError(ScanError):
    pass


class UnauthorizedError(ScanError):
    pass


class ServerError(ScanError):
    pass


class CameraPermissionError(ScanError):
    pass
