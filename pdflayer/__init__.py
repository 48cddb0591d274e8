"""
PDF Layer Editor

Converts PDF pages into slides that keep the page image as background and
rebuild the text as editable text boxes, from the PDF text layer or OCR.
"""

__version__ = "1.0.0"
__author__ = "PDF Layer Editor"
__description__ = "Convert PDF pages into editable PPTX slides"

from .converter import convert_document, pdf_to_pptx, validate_pdf, get_pdf_info
from .document import Document, Page, PageSource, load_document
from .exceptions import (
    ConversionError, LoadFailure, RasterizationFailure,
    RecognitionFailure, AssemblyFailure
)
from .models import (
    ConversionConfig, LayerMode, OcrLine, PositionedTextBox,
    SlideConfig, TextFragment, Viewport
)

__all__ = [
    'convert_document',
    'pdf_to_pptx',
    'validate_pdf',
    'get_pdf_info',
    'load_document',
    'Document',
    'Page',
    'PageSource',
    'ConversionError',
    'LoadFailure',
    'RasterizationFailure',
    'RecognitionFailure',
    'AssemblyFailure',
    'ConversionConfig',
    'LayerMode',
    'OcrLine',
    'PositionedTextBox',
    'SlideConfig',
    'TextFragment',
    'Viewport',
]
