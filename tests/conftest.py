"""
Shared fakes and fixtures.
"""

import io

import fitz  # PyMuPDF
import pytest
from PIL import Image

from pdflayer.document import Document, Page, PageSource
from pdflayer.exceptions import RasterizationFailure, RecognitionFailure
from pdflayer.models import Viewport


class FakePageSource(PageSource):
    """Page source returning scripted fragments and blank bitmaps."""

    def __init__(self, fragments=(), viewport=Viewport(600.0, 450.0),
                 ocr_bitmap_size=(2400, 1800), fail_render=False):
        self.fragments = list(fragments)
        self._viewport = viewport
        self.ocr_bitmap_size = ocr_bitmap_size
        self.fail_render = fail_render
        self.render_calls = []

    def viewport(self, scale=1.0):
        return Viewport(self._viewport.width * scale, self._viewport.height * scale)

    def render(self, scale):
        self.render_calls.append(scale)
        if self.fail_render:
            raise RasterizationFailure("render failed")
        return Image.new("L", self.ocr_bitmap_size, color=255), self.viewport(scale)

    def get_text_fragments(self):
        return list(self.fragments)


class FakeRecognizer:
    """Recognizer returning the same lines for every page."""

    def __init__(self, lines=(), fail_on_call=None):
        self.lines = list(lines)
        self.fail_on_call = fail_on_call
        self.calls = 0
        self.terminate_count = 0
        self.bitmap_sizes = []

    def recognize(self, image):
        self.calls += 1
        self.bitmap_sizes.append(image.size)
        if self.fail_on_call == self.calls:
            raise RecognitionFailure("recognition failed")
        return list(self.lines)

    def terminate(self):
        self.terminate_count += 1


class FakeAssembler:
    """Assembler that records page layers instead of building slides."""

    instances = []

    def __init__(self, slide_config=None):
        self.slide_config = slide_config
        self.layers = []
        self.serialized = False
        FakeAssembler.instances.append(self)

    def add_page_layer(self, layer):
        self.layers.append(layer)

    def to_bytes(self):
        self.serialized = True
        return b"fake-pptx"


def make_page(index, source=None):
    return Page(index, f"preview-{index}".encode(), 720, 540, source or FakePageSource())


def make_document(sources):
    pages = [make_page(i, source) for i, source in enumerate(sources, 1)]
    return Document("deck.pdf", pages)


def make_pdf(texts, width=600, height=450):
    """Build a PDF with one page per entry; None leaves the page without text."""
    doc = fitz.open()
    for text in texts:
        page = doc.new_page(width=width, height=height)
        if text:
            page.insert_text((100, 250), text, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


def make_png(size=(120, 90)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color="white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def reset_fake_assemblers():
    FakeAssembler.instances.clear()
    yield
    FakeAssembler.instances.clear()


@pytest.fixture
def digital_pdf():
    return make_pdf(["Hello slides", "Second page"])


@pytest.fixture
def mixed_pdf():
    return make_pdf(["Hello slides", None])
