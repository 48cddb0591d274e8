"""
Exception types raised by the conversion pipeline.

Every failure a run can hit is surfaced as a ConversionError subclass whose
``phase`` names the stage the user sees: loading the PDF or converting it.
"""


class ConversionError(Exception):
    """Base class for all run-level failures."""

    phase = "convert"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LoadFailure(ConversionError):
    """Raised when the source PDF cannot be opened or parsed."""

    phase = "load"


class RasterizationFailure(ConversionError):
    """Raised when a page cannot be rendered or its text layer read."""


class RecognitionFailure(ConversionError):
    """Raised when the OCR engine cannot be started or fails on a page."""


class AssemblyFailure(ConversionError):
    """Raised when the slide deck cannot be built or serialized."""
