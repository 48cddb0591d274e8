"""
Loaded PDF documents and the page capability used by the layer engine.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image

from .config import PREVIEW_SCALE
from .exceptions import LoadFailure, RasterizationFailure
from .models import TextFragment, Viewport
from .text_extraction import extract_text_fragments
from .utils import pixmap_to_png, png_to_image

logger = logging.getLogger(__name__)


class PageSource(ABC):
    """What the layer engine needs from a source page."""

    @abstractmethod
    def render(self, scale: float) -> Tuple[Image.Image, Viewport]:
        """
        Rasterize the page.

        Args:
            scale: Render scale, 1.0 == PDF points

        Returns:
            Tuple of (bitmap, viewport at that scale)
        """

    @abstractmethod
    def viewport(self, scale: float = 1.0) -> Viewport:
        """Page geometry at ``scale`` without rasterizing."""

    @abstractmethod
    def get_text_fragments(self) -> List[TextFragment]:
        """Return the digital text fragments at scale 1.0, in drawing order."""


class FitzPageSource(PageSource):
    """PageSource backed by a PyMuPDF page."""

    def __init__(self, page: fitz.Page):
        self._page = page

    def viewport(self, scale: float = 1.0) -> Viewport:
        rect = self._page.rect
        return Viewport(rect.width * scale, rect.height * scale)

    def render_png(self, scale: float) -> Tuple[bytes, int, int]:
        """Render the page straight to PNG bytes with its pixel size."""
        try:
            pix = self._page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            return pixmap_to_png(pix), pix.width, pix.height
        except Exception as e:
            logger.error(f"Rendering page {self._page.number + 1} failed: {str(e)}")
            raise RasterizationFailure(
                f"Failed to render page {self._page.number + 1}: {str(e)}"
            ) from e

    def render(self, scale: float) -> Tuple[Image.Image, Viewport]:
        png_bytes, _, _ = self.render_png(scale)
        # TODO: hand the pixmap samples to PIL directly instead of a PNG round trip
        return png_to_image(png_bytes), self.viewport(scale)

    def get_text_fragments(self) -> List[TextFragment]:
        return extract_text_fragments(self._page)


class Page:
    """One source page with its cached preview."""

    def __init__(self, index: int, preview: bytes, width: int, height: int,
                 source: PageSource):
        self.index = index
        self.preview = preview
        self.width = width
        self.height = height
        self.source = source

    def __repr__(self) -> str:
        return f"Page(index={self.index}, width={self.width}, height={self.height})"


class Document:
    """A loaded PDF and its pages; owns the PyMuPDF handle."""

    def __init__(self, name: str, pages: List[Page], handle: Optional[fitz.Document] = None):
        self.name = name
        self.pages = pages
        self._handle = handle

    def __len__(self) -> int:
        return len(self.pages)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def page(self, index: int) -> Page:
        """
        Look up a page by its 1-based index.

        Raises:
            ValueError: If no page has that index
        """
        for page in self.pages:
            if page.index == index:
                return page
        raise ValueError(f"Page {index} does not exist (document has {len(self.pages)} pages)")

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


def load_document(pdf_bytes: bytes, name: str = "document.pdf",
                  preview_scale: float = PREVIEW_SCALE) -> Document:
    """
    Open a PDF and render a preview of every page.

    Args:
        pdf_bytes: PDF file content as bytes
        name: Original file name, used to name the output
        preview_scale: Scale of the cached previews used as slide backgrounds

    Returns:
        Loaded document; close it when done

    Raises:
        LoadFailure: If the PDF cannot be opened, is empty or cannot be rendered
    """
    try:
        handle = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        logger.error(f"Failed to open PDF '{name}': {str(e)}")
        raise LoadFailure(f"Invalid PDF file: {str(e)}") from e

    try:
        if len(handle) == 0:
            raise LoadFailure("Invalid PDF file: document has no pages")

        pages = []
        for page_num in range(len(handle)):
            source = FitzPageSource(handle[page_num])
            preview, width, height = source.render_png(preview_scale)
            pages.append(Page(page_num + 1, preview, width, height, source))
            logger.debug(f"Scanned page {page_num + 1}/{len(handle)}")

    except LoadFailure:
        handle.close()
        raise
    except Exception as e:
        handle.close()
        logger.error(f"Failed to load PDF '{name}': {str(e)}")
        raise LoadFailure(f"Failed to load PDF: {str(e)}") from e

    logger.info(f"Loaded '{name}': {len(pages)} pages")
    return Document(name, pages, handle)
