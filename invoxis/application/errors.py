class InvoxisError(Exception):
    """Base class for errors raised by the application layer."""


class ExportError(InvoxisError):
    user_message = "Error generating PDF. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)
        if message:
            self.user_message = message


class PreviewSurfaceMissingError(ExportError):
    user_message = "Invoice preview not found. Please switch to the Preview tab first."


class ExportInProgressError(ExportError):
    user_message = "A PDF is already being generated. Please wait."


class RenderFailedError(ExportError):
    user_message = "Error generating PDF. Please try again."
