"""Lofi Radio exceptions for error handling."""


class LofiRadioError(Exception):
    """Base exception for Lofi Radio operations."""

    pass


class InvalidStreamLocatorError(LofiRadioError):
    """Raised when a track's stream URL cannot be played at all."""

    def __init__(self, stream_url: str):
        self.stream_url = stream_url
        super().__init__(f"Invalid URL: {stream_url!r}")


class RendererError(LofiRadioError):
    """Raised when the audio renderer fails to load or control a stream."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class CatalogFetchError(LofiRadioError):
    """Raised when the catalog API request fails or returns a bad payload."""

    pass


class NoSessionError(LofiRadioError):
    """Raised when an account operation needs a signed-in user and there is none."""

    pass
