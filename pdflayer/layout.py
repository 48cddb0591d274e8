"""
Text layer reconstruction: maps digital text fragments or OCR lines onto
slide coordinates and infers a font size for each box.

Digital fragments live in PDF point space with the origin at the bottom-left
corner; OCR lines live in the pixel space of the bitmap they were recognized
on. Both end up in slide inches measured from the top-left corner.
"""

import logging
import math
from typing import List, Optional

from .config import (
    NATIVE_SCALE, OCR_RENDER_SCALE, POINTS_PER_INCH, DEFAULT_FONT_FACE,
    DIGITAL_NOMINAL_LINE_HEIGHT, DIGITAL_FONT_SHRINK, DIGITAL_WIDTH_GROWTH,
    DIGITAL_MIN_WIDTH, DIGITAL_TEXT_COLOR,
    OCR_CONFIDENCE_THRESHOLD, OCR_WIDTH_GROWTH, OCR_MIN_WIDTH,
    OCR_FONT_FACTOR, OCR_TEXT_COLOR,
)
from .document import Page
from .models import (
    ConversionConfig, LayerMode, OcrLine, PageLayer, PositionedTextBox,
    SlideConfig, TextFragment, Viewport, is_blank,
)
from .utils import scale_to_slide

logger = logging.getLogger(__name__)


def map_fragment(fragment: TextFragment, viewport: Viewport,
                 slide_config: Optional[SlideConfig] = None) -> Optional[PositionedTextBox]:
    """
    Place a digital text fragment on the slide.

    Args:
        fragment: Fragment in PDF point space (scale 1.0)
        viewport: Page viewport at scale 1.0
        slide_config: Target slide size, widescreen by default

    Returns:
        Text box, or None if the fragment has no visible text
    """
    if is_blank(fragment.text):
        return None

    slide = slide_config or SlideConfig()
    a, b, _, _, e, f = fragment.transform

    # Baseline sits at f; step up one line height to reach the box top
    line_height = a or DIGITAL_NOMINAL_LINE_HEIGHT
    x = scale_to_slide(e, viewport.width, slide.width_in)
    y = scale_to_slide(viewport.height - f - line_height, viewport.height, slide.height_in)

    font_size = math.sqrt(a ** 2 + b ** 2) * DIGITAL_FONT_SHRINK
    box_width = scale_to_slide(fragment.width, viewport.width, slide.width_in)

    return PositionedTextBox(
        text=fragment.text.strip(),
        x=x,
        y=y,
        w=max(box_width * DIGITAL_WIDTH_GROWTH, DIGITAL_MIN_WIDTH),
        h=None,
        font_size=font_size,
        color=DIGITAL_TEXT_COLOR,
        font_face=DEFAULT_FONT_FACE,
        transparent=True,
    )


def map_ocr_line(line: OcrLine, bitmap_width: float, bitmap_height: float,
                 slide_config: Optional[SlideConfig] = None) -> Optional[PositionedTextBox]:
    """
    Place a recognized OCR line on the slide.

    Args:
        line: Recognized line, bbox in bitmap pixels
        bitmap_width: Width of the recognized bitmap in pixels
        bitmap_height: Height of the recognized bitmap in pixels
        slide_config: Target slide size, widescreen by default

    Returns:
        Text box, or None if the line is below the confidence threshold
        or has no visible text
    """
    if line.confidence < OCR_CONFIDENCE_THRESHOLD or is_blank(line.text):
        return None

    slide = slide_config or SlideConfig()
    x0, y0, x1, y1 = line.bbox

    x = scale_to_slide(x0, bitmap_width, slide.width_in)
    y = scale_to_slide(y0, bitmap_height, slide.height_in)
    w = scale_to_slide(x1 - x0, bitmap_width, slide.width_in)
    h = scale_to_slide(y1 - y0, bitmap_height, slide.height_in)

    return PositionedTextBox(
        text=line.text.strip(),
        x=x,
        y=y,
        w=max(w * OCR_WIDTH_GROWTH, OCR_MIN_WIDTH),
        h=h,
        font_size=h * POINTS_PER_INCH * OCR_FONT_FACTOR,
        color=OCR_TEXT_COLOR,
        font_face=DEFAULT_FONT_FACE,
        transparent=True,
    )


def select_mode(fragments: List[TextFragment], config: ConversionConfig,
                recognizer=None) -> LayerMode:
    """
    Decide how a page's text layer is rebuilt.

    Any digital fragment at all wins over OCR, even a whitespace-only one.

    Args:
        fragments: The page's digital fragments
        config: Run options
        recognizer: The run's OCR engine, if one was started

    Returns:
        The layer mode for the page
    """
    if fragments:
        return LayerMode.DIGITAL
    if config.use_ocr and recognizer is not None:
        return LayerMode.OCR
    return LayerMode.EMPTY


def build_page_layer(page: Page, config: ConversionConfig, recognizer=None,
                     slide_config: Optional[SlideConfig] = None) -> PageLayer:
    """
    Rebuild the text layer of one page.

    Args:
        page: Source page with its cached preview
        config: Run options
        recognizer: The run's OCR engine, or None
        slide_config: Target slide size

    Returns:
        Background and text boxes for the page, boxes in source order

    Raises:
        RasterizationFailure: If the page cannot be rendered or read
        RecognitionFailure: If OCR fails on the page
    """
    fragments = page.source.get_text_fragments()
    mode = select_mode(fragments, config, recognizer)
    logger.debug(f"Page {page.index}: {mode.value} mode ({len(fragments)} fragments)")

    boxes = []
    if mode is LayerMode.DIGITAL:
        viewport = page.source.viewport(NATIVE_SCALE)
        for fragment in fragments:
            box = map_fragment(fragment, viewport, slide_config)
            if box is not None:
                boxes.append(box)

    elif mode is LayerMode.OCR:
        bitmap, _ = page.source.render(OCR_RENDER_SCALE)
        lines = recognizer.recognize(bitmap)
        for line in lines:
            box = map_ocr_line(line, bitmap.width, bitmap.height, slide_config)
            if box is not None:
                boxes.append(box)

    logger.info(f"Page {page.index}: {len(boxes)} text boxes ({mode.value})")
    return PageLayer(page.index, mode, page.preview, boxes)
