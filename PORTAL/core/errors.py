# file: PORTAL/core/errors.py


class PortalError(Exception):
    """Base for every failure the core reports to the HTTP boundary."""
    status_code = 500
    message = "Internal error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class OriginRejected(PortalError):
    """Missing or mismatched Origin on a guarded path."""
    status_code = 403


class InvalidInput(PortalError):
    """Empty upload or a content type that is not image/*."""
    status_code = 400
    message = "Only image files are allowed"


class InvalidImage(PortalError):
    """Payload could not be decoded as a raster image."""
    status_code = 400
    message = "Invalid image file"


class StorageError(PortalError):
    """Persistence backend failure. Never shown to the caller in detail."""
    status_code = 500
    message = "Storage backend failure"
