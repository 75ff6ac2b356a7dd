"""Errors raised by the news backend."""


class NewsError(Exception):
    """Base error. Carries the HTTP status the API reports it with."""

    status_code: int = 500
    default_message: str = 'Internal server error'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(NewsError):
    """Missing or invalid required input."""

    status_code = 400
    default_message = 'Fill in all required fields'


class UploadError(NewsError):
    """Uploaded file has a wrong media type or is too large."""

    status_code = 400
    default_message = 'Invalid upload'


class NotFoundError(NewsError):
    """No news item with the requested id."""

    status_code = 404
    default_message = 'News item not found'


class StorageError(NewsError):
    """Store file or asset directory could not be read or written."""

    status_code = 500
    default_message = 'Storage failure'


class RecordFormatError(StorageError):
    """Store file content does not follow the canonical layout."""

    default_message = 'News store is corrupt'
