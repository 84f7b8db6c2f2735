"""Errors raised across the studio."""


class StudioError(Exception):
    """Base error for the studio."""

    pass


class ConfigurationError(StudioError):
    """Raised when a required setting (e.g. the Gemini key) is missing."""

    pass


class MissingProductError(StudioError):
    """Raised when a generation is attempted without a product image."""

    def __init__(self, message: str = "Please upload a product image."):
        super().__init__(message)


class UploadValidationError(StudioError):
    """Raised when an uploaded file or form field is rejected."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ImageTooLargeError(StudioError):
    """Raised when an image has more pixels than Pillow will decode."""

    pass


class UpstreamError(StudioError):
    """Raised when the call to the generative model fails."""

    pass


class NoImageReturnedError(StudioError):
    """Raised when the model answers without any image part."""

    def __init__(
        self,
        message: str = "The model did not return an image. Please try adjusting your prompt or images.",
    ):
        super().__init__(message)


class TransportError(StudioError):
    """Raised when the upload request fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DownloadPreparationError(StudioError):
    """Raised when the result image cannot be re-encoded for download."""

    pass


class IllegalTransition(StudioError):
    """Raised when the UI state machine is asked for a forbidden move."""

    pass
