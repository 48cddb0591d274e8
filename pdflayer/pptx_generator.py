"""
PPTX generation module: slides with a full-bleed page image and editable,
transparent text boxes on top.
"""

import io
import logging
from typing import Optional

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_AUTO_SIZE, PP_ALIGN
from pptx.util import Emu, Inches, Pt

from .config import LINE_HEIGHT_FACTOR, POINTS_PER_INCH
from .exceptions import AssemblyFailure
from .models import PageLayer, PositionedTextBox, SlideConfig

logger = logging.getLogger(__name__)

BLANK_LAYOUT_INDEX = 6


class SlideHandle:
    """One slide being built by a DeckAssembler."""

    def __init__(self, slide, slide_config: SlideConfig):
        self._slide = slide
        self._config = slide_config

    @property
    def shapes(self):
        return self._slide.shapes

    def add_image(self, data: bytes, full_bleed: bool = True) -> None:
        """
        Add an image to the slide.

        Args:
            data: Encoded image (PNG or JPEG)
            full_bleed: Stretch the image over the whole slide; otherwise
                place it at the top-left corner at its native size
        """
        stream = io.BytesIO(data)
        if full_bleed:
            self._slide.shapes.add_picture(
                stream, Emu(0), Emu(0),
                self._config.width_emu, self._config.height_emu
            )
        else:
            self._slide.shapes.add_picture(stream, Emu(0), Emu(0))

    def add_text_box(self, box: PositionedTextBox) -> None:
        """
        Add an editable text box.

        Boxes without a height get one line's worth at their font size.

        Args:
            box: Box in slide inches
        """
        height = box.h if box.h is not None else _line_height(box.font_size)

        textbox = self._slide.shapes.add_textbox(
            Inches(box.x), Inches(box.y), Inches(box.w), Inches(height)
        )

        text_frame = textbox.text_frame
        text_frame.word_wrap = True
        text_frame.auto_size = MSO_AUTO_SIZE.NONE

        p = text_frame.paragraphs[0]
        p.alignment = PP_ALIGN.LEFT
        run = p.add_run()
        run.text = box.text
        run.font.name = box.font_face
        run.font.size = Pt(max(box.font_size, 1.0))
        run.font.color.rgb = RGBColor.from_string(box.color)

        if box.transparent:
            textbox.fill.background()
            textbox.line.fill.background()


class DeckAssembler:
    """
    Accumulates the slides of one conversion run.

    Nothing touches disk until ``save`` or ``to_bytes`` is called, so an
    abandoned assembler leaves no output behind.
    """

    def __init__(self, slide_config: Optional[SlideConfig] = None):
        self.slide_config = slide_config or SlideConfig()
        try:
            self.prs = Presentation()
            self.prs.slide_width = self.slide_config.width_emu
            self.prs.slide_height = self.slide_config.height_emu
        except Exception as e:
            logger.error(f"Failed to create presentation: {str(e)}")
            raise AssemblyFailure(f"Failed to create presentation: {str(e)}") from e

    @property
    def slide_count(self) -> int:
        return len(self.prs.slides)

    def add_slide(self) -> SlideHandle:
        """Append a blank slide."""
        layouts = self.prs.slide_layouts
        layout = layouts[BLANK_LAYOUT_INDEX] if len(layouts) > BLANK_LAYOUT_INDEX else layouts[-1]
        return SlideHandle(self.prs.slides.add_slide(layout), self.slide_config)

    def add_page_layer(self, layer: PageLayer) -> SlideHandle:
        """
        Append a slide built from a reconstructed page layer.

        Raises:
            AssemblyFailure: If the slide cannot be built
        """
        try:
            slide = self.add_slide()
            slide.add_image(layer.background, full_bleed=True)
            for box in layer.boxes:
                slide.add_text_box(box)
        except Exception as e:
            logger.error(f"Failed to build slide for page {layer.page_index}: {str(e)}")
            raise AssemblyFailure(
                f"Failed to build slide for page {layer.page_index}: {str(e)}"
            ) from e

        logger.debug(f"Added slide for page {layer.page_index} with {len(layer.boxes)} text boxes")
        return slide

    def to_bytes(self) -> bytes:
        """
        Serialize the deck.

        Raises:
            AssemblyFailure: If serialization fails
        """
        try:
            pptx_bytes = io.BytesIO()
            self.prs.save(pptx_bytes)
            return pptx_bytes.getvalue()
        except Exception as e:
            logger.error(f"PowerPoint generation failed: {str(e)}")
            raise AssemblyFailure(f"PowerPoint generation failed: {str(e)}") from e

    def save(self, output_path) -> None:
        """
        Write the deck to a file.

        Raises:
            AssemblyFailure: If the file cannot be written
        """
        data = self.to_bytes()
        try:
            with open(output_path, 'wb') as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Failed to save presentation: {str(e)}")
            raise AssemblyFailure(f"Failed to save presentation: {str(e)}") from e
        logger.info(f"Presentation saved to: {output_path}")


def _line_height(font_size: float) -> float:
    """Height in inches of a single line at the given point size."""
    return font_size * LINE_HEIGHT_FACTOR / POINTS_PER_INCH
