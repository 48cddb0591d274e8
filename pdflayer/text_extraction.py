"""
Digital text layer extraction using PyMuPDF.

PyMuPDF reports spans in a top-left origin frame; the layer engine works
with PDF-style fragments (bottom-left origin, affine transform per run), so
each span is converted on the way out.
"""

import logging
from typing import List

import fitz  # PyMuPDF

from .exceptions import RasterizationFailure
from .models import TextFragment, Transform

logger = logging.getLogger(__name__)


def extract_text_fragments(page: fitz.Page) -> List[TextFragment]:
    """
    Extract the text fragments of a PDF page in content-stream order.

    Whitespace-only spans are kept; callers decide what to do with them.

    Args:
        page: PyMuPDF page object

    Returns:
        List of text fragments in page-native point space

    Raises:
        RasterizationFailure: If the text layer cannot be read
    """
    try:
        text_dict = page.get_text("dict")
        page_height = page.rect.height
        fragments = []

        for block in text_dict["blocks"]:
            # Skip image blocks
            if "lines" not in block:
                continue

            for line in block["lines"]:
                direction = line.get("dir", (1.0, 0.0))
                for span in line["spans"]:
                    fragments.append(_span_to_fragment(span, direction, page_height))

        logger.debug(f"Extracted {len(fragments)} text fragments using PyMuPDF")
        return fragments

    except Exception as e:
        logger.error(f"PyMuPDF text extraction failed: {str(e)}")
        raise RasterizationFailure(f"Text extraction failed: {str(e)}") from e


def _span_to_fragment(span: dict, direction, page_height: float) -> TextFragment:
    """
    Convert a PyMuPDF span into a PDF-style text fragment.

    Args:
        span: Span dictionary from ``page.get_text("dict")``
        direction: Writing direction (cos, sin) of the span's line, y down
        page_height: Page height in points, used to flip the y axis

    Returns:
        Text fragment whose transform origin is the span's baseline start
    """
    size = float(span.get("size", 0.0))
    cos, sin = direction
    origin_x, origin_y = span["origin"]
    x0, y0, x1, y1 = span["bbox"]

    # The y axis flips, so does the sign of the rotation's sine
    a = size * cos
    b = -size * sin
    transform: Transform = (a, b, -b, a, origin_x, page_height - origin_y)

    width = abs((x1 - x0) * cos) + abs((y1 - y0) * sin)
    return TextFragment(span.get("text", ""), transform, width)


def has_digital_text(page: fitz.Page) -> bool:
    """
    Check whether a page carries any digital text fragments.

    Args:
        page: PyMuPDF page object

    Returns:
        True if the page would be converted in digital mode
    """
    return len(extract_text_fragments(page)) > 0
