"""
Main PDF to editable PPTX conversion pipeline.
"""

import logging
from typing import Callable, Iterable, List, Optional

import fitz  # PyMuPDF

from .config import OCR_LANGUAGES
from .document import Document, load_document
from .exceptions import ConversionError
from .layout import build_page_layer
from .models import ConversionConfig, SlideConfig
from .ocr import create_recognizer
from .pptx_generator import DeckAssembler
from .text_extraction import has_digital_text
from .utils import calculate_aspect_ratio, parse_page_selection

logger = logging.getLogger(__name__)


def convert_document(document: Document,
                     selected_pages: Iterable[int],
                     config: ConversionConfig,
                     recognizer_factory: Callable = create_recognizer,
                     assembler_factory: Callable = DeckAssembler,
                     slide_config: Optional[SlideConfig] = None) -> Optional[bytes]:
    """
    Convert the selected pages of a loaded document into an editable deck.

    Pages are processed one at a time in ascending order. When OCR is on,
    a single recognizer serves the whole run and is terminated exactly once,
    whether the run succeeds or not. A failure on any page aborts the run
    and the partially built deck is dropped.

    Args:
        document: Loaded source document
        selected_pages: 1-based page indices to convert
        config: Run options, read once
        recognizer_factory: Builds the OCR engine from a language string
        assembler_factory: Builds the deck assembler from a SlideConfig
        slide_config: Target slide size, widescreen by default

    Returns:
        PPTX file content as bytes, or None if no page was selected

    Raises:
        ValueError: If a selected page does not exist
        ConversionError: If any page or the deck cannot be produced
    """
    pages = [document.page(index) for index in sorted(set(selected_pages))]
    if not pages:
        logger.info("No pages selected, nothing to convert")
        return None

    slide_config = slide_config or SlideConfig()
    logger.info(f"Converting {len(pages)} pages of '{document.name}' (OCR {'on' if config.use_ocr else 'off'})")

    recognizer = None
    try:
        if config.use_ocr:
            recognizer = recognizer_factory(config.ocr_languages)

        assembler = assembler_factory(slide_config)
        for position, page in enumerate(pages, 1):
            logger.info(f"Processing page {page.index} ({position}/{len(pages)})")
            layer = build_page_layer(page, config, recognizer, slide_config)
            assembler.add_page_layer(layer)

        pptx_bytes = assembler.to_bytes()

    except ConversionError:
        raise
    except Exception as e:
        logger.error(f"PDF to PPTX conversion failed: {str(e)}")
        raise ConversionError(f"Conversion failed: {str(e)}") from e
    finally:
        if recognizer is not None:
            recognizer.terminate()

    logger.info(f"Conversion completed: {len(pptx_bytes)} bytes")
    return pptx_bytes


def pdf_to_pptx(pdf_bytes: bytes,
                use_ocr: bool = True,
                pages: Optional[str] = None,
                ocr_langs: str = OCR_LANGUAGES,
                filename: str = "document.pdf") -> Optional[bytes]:
    """
    Convert PDF bytes to editable PPTX bytes.

    Args:
        pdf_bytes: PDF file content as bytes
        use_ocr: Recognize text on pages without a digital text layer
        pages: Page selection such as "1,3-5"; all pages if omitted
        ocr_langs: Tesseract language codes for OCR
        filename: Original file name, for logging

    Returns:
        PPTX file content as bytes, or None if the selection is empty

    Raises:
        LoadFailure: If the PDF cannot be loaded
        ValueError: If the page selection is invalid
        ConversionError: If conversion fails
    """
    config = ConversionConfig(use_ocr=use_ocr, ocr_languages=ocr_langs)

    with load_document(pdf_bytes, name=filename) as document:
        selected = parse_page_selection(pages, len(document))
        return convert_document(document, selected, config)


def validate_pdf(pdf_bytes: bytes) -> bool:
    """
    Validate that the input is a valid PDF.

    Args:
        pdf_bytes: PDF file content as bytes

    Returns:
        True if valid PDF, False otherwise
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        is_valid = len(doc) > 0
        doc.close()
        return is_valid
    except Exception as e:
        logger.error(f"PDF validation failed: {str(e)}")
        return False


def get_pdf_info(pdf_bytes: bytes) -> dict:
    """
    Extract basic information from a PDF.

    Args:
        pdf_bytes: PDF file content as bytes

    Returns:
        Dictionary with document metadata and one entry per page

    Raises:
        ValueError: If the PDF cannot be opened
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        logger.error(f"Failed to get PDF info: {str(e)}")
        raise ValueError(f"Failed to process PDF: {str(e)}")

    try:
        metadata = doc.metadata or {}
        info = {
            'page_count': len(doc),
            'title': metadata.get('title', ''),
            'author': metadata.get('author', ''),
            'subject': metadata.get('subject', ''),
            'creator': metadata.get('creator', ''),
            'producer': metadata.get('producer', ''),
            'creation_date': metadata.get('creationDate', ''),
            'modification_date': metadata.get('modDate', ''),
            'pages': _describe_pages(doc),
        }
    finally:
        doc.close()

    return info


def _describe_pages(doc: fitz.Document) -> List[dict]:
    pages = []
    for page_num in range(len(doc)):
        page = doc[page_num]
        pages.append({
            'index': page_num + 1,
            'width': page.rect.width,
            'height': page.rect.height,
            'aspect_ratio': calculate_aspect_ratio(page.rect.width, page.rect.height),
            'has_digital_text': has_digital_text(page),
        })
    return pages
