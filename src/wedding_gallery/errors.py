"""Error types raised by gallery services."""


class GalleryError(Exception):
    """Base error carrying the HTTP status the API reports it with."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AssetUnavailableError(GalleryError):
    """A frame asset is missing or cannot be decoded."""

    status_code = 404


class PhotoUnavailableError(GalleryError):
    """A base photo is missing or cannot be decoded."""

    status_code = 404


class UnknownFrameError(GalleryError):
    """A frame id outside the catalog was requested."""

    status_code = 404


class UploadValidationError(GalleryError):
    """An upload request is malformed."""

    status_code = 400


class UnauthorizedError(GalleryError):
    """The shared-secret API key is missing or wrong."""

    status_code = 401


class CompositingError(GalleryError):
    """Server-side compositing failed after the raw upload was stored."""

    status_code = 500


class ShareChannelUnavailableError(GalleryError):
    """A sharing capability is absent or refused the payload."""

    status_code = 409
