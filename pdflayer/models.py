"""
Data models and type definitions for the PDF layer editor.
"""

from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from .config import (
    SLIDE_WIDTH, SLIDE_HEIGHT, OCR_LANGUAGES
)

# Constants
PPTX_EMU_PER_INCH = 914400

Transform = Tuple[float, float, float, float, float, float]
"""2D affine matrix (a, b, c, d, e, f) in PDF point space"""

BoundingBox = Tuple[float, float, float, float]
"""Axis-aligned box (x0, y0, x1, y1) in bitmap pixel space"""


class Viewport(NamedTuple):
    """Page geometry at a given render scale."""
    width: float
    height: float


class TextFragment(NamedTuple):
    """A run of digital text as the PDF draws it (bottom-left origin)."""
    text: str
    transform: Transform
    width: float


class OcrLine(NamedTuple):
    """A recognized line of text with its confidence (0-100)."""
    text: str
    confidence: float
    bbox: BoundingBox


class PositionedTextBox(NamedTuple):
    """
    An editable text box placed on a slide.

    Positions and sizes are in slide inches measured from the top-left
    corner; ``h`` is None when the height should follow the font size.
    """
    text: str
    x: float
    y: float
    w: float
    h: Optional[float]
    font_size: float
    color: str
    font_face: str
    transparent: bool = True


class ConversionConfig(NamedTuple):
    """Options snapshotted once at the start of a conversion run."""
    use_ocr: bool = True
    ocr_languages: str = OCR_LANGUAGES


class LayerMode(Enum):
    """How a page's text layer was reconstructed."""
    DIGITAL = "digital"
    OCR = "ocr"
    EMPTY = "empty"


class PageLayer(NamedTuple):
    """Everything needed to build one slide."""
    page_index: int
    mode: LayerMode
    background: bytes
    boxes: List[PositionedTextBox]


class SlideConfig:
    """Configuration for slide dimensions."""

    def __init__(self, width_in: float = SLIDE_WIDTH, height_in: float = SLIDE_HEIGHT):
        self.width_in = width_in
        self.height_in = height_in

    @property
    def width_emu(self) -> int:
        """Slide width in EMU."""
        return inches_to_emu(self.width_in)

    @property
    def height_emu(self) -> int:
        """Slide height in EMU."""
        return inches_to_emu(self.height_in)


def inches_to_emu(inches: float) -> int:
    """
    Convert slide inches to PowerPoint EMU units.

    Args:
        inches: Value in inches

    Returns:
        Value in EMU units
    """
    return int(round(inches * PPTX_EMU_PER_INCH))


def is_blank(text: Optional[str]) -> bool:
    """True if the text carries no visible characters."""
    return not text or not text.strip()
