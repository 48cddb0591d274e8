"""
Utility functions for coordinate conversions, page selections and file naming.
"""

import io
import os
from typing import Iterable, List, Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image

from .config import OUTPUT_SUFFIX


def scale_to_slide(value: float, source_extent: float, slide_extent: float) -> float:
    """
    Linearly map a coordinate or length from a source frame onto the slide.

    Args:
        value: Coordinate or length in source units
        source_extent: Full width or height of the source frame
        slide_extent: Matching slide width or height

    Returns:
        The value in slide units

    Raises:
        ValueError: If the source extent is not positive
    """
    if source_extent <= 0:
        raise ValueError(f"Source extent must be positive, got {source_extent}")
    return (value / source_extent) * slide_extent


def normalize_coordinates(x0: float, y0: float, x1: float, y1: float) -> Tuple[float, float, float, float]:
    """
    Ensure coordinates are in correct order (top-left to bottom-right).

    Args:
        x0, y0, x1, y1: Coordinates that may be in any order

    Returns:
        Normalized coordinates (min_x, min_y, max_x, max_y)
    """
    return min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1)


def calculate_aspect_ratio(width: float, height: float) -> float:
    """
    Calculate aspect ratio (width/height).

    Args:
        width: Width dimension
        height: Height dimension

    Returns:
        Aspect ratio, 1.0 for a degenerate height
    """
    if height == 0:
        return 1.0
    return width / height


def pixmap_to_png(pix: fitz.Pixmap) -> bytes:
    """Encode a PyMuPDF pixmap as PNG bytes."""
    return pix.tobytes("png")


def png_to_image(png_bytes: bytes) -> Image.Image:
    """Decode PNG bytes into an RGB PIL image."""
    return Image.open(io.BytesIO(png_bytes)).convert("RGB")


def parse_page_selection(selection: Optional[str], page_count: int) -> List[int]:
    """
    Parse a page selection such as ``"1,3-5"`` into sorted 1-based indices.

    An empty or missing selection means every page. Duplicates collapse.

    Args:
        selection: Comma-separated page numbers and inclusive ranges
        page_count: Number of pages in the document

    Returns:
        Sorted list of unique page indices

    Raises:
        ValueError: If a part is malformed or out of range
    """
    if selection is None or not selection.strip():
        return list(range(1, page_count + 1))

    pages = set()
    for part in selection.split(','):
        part = part.strip()
        if not part:
            continue

        if '-' in part:
            start_text, _, end_text = part.partition('-')
            try:
                start, end = int(start_text), int(end_text)
            except ValueError:
                raise ValueError(f"Invalid page range: '{part}'")
            if start > end:
                raise ValueError(f"Invalid page range: '{part}'")
            requested: Iterable[int] = range(start, end + 1)
        else:
            try:
                requested = [int(part)]
            except ValueError:
                raise ValueError(f"Invalid page number: '{part}'")

        for page in requested:
            if page < 1 or page > page_count:
                raise ValueError(f"Page {page} is out of range (1-{page_count})")
            pages.add(page)

    return sorted(pages)


def editable_filename(source_name: Optional[str]) -> str:
    """
    Build the output file name for a converted document.

    ``slides.PDF`` becomes ``slides_Editable.pptx``.

    Args:
        source_name: Original file name, may include a directory

    Returns:
        Output file name
    """
    base = os.path.basename(source_name or "") or "document"
    if base.lower().endswith('.pdf'):
        base = base[:-4]
    return f"{base or 'document'}{OUTPUT_SUFFIX}"
