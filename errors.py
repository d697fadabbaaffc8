class CafeProxyError(Exception):
    """Base error for the cafe proxy. ``status_code`` is the HTTP status."""

    status_code = 500


class ValidationError(CafeProxyError):
    """Raised when the inbound request is missing required data."""

    status_code = 400


class MissingAuthorizationError(ValidationError):
    status_code = 401


class TooManyImagesError(ValidationError):
    """Raised when more images are supplied than the API accepts."""


class InvalidUrlError(CafeProxyError):
    """Raised when an image URL is not a plain http(s) URL."""


class DownloadError(CafeProxyError):
    """Raised when an image could not be downloaded."""


class EncodingError(CafeProxyError):
    """Raised when text has no representation in the legacy charset."""


class UpstreamError(CafeProxyError):
    """Raised when the cafe API could not be reached."""
