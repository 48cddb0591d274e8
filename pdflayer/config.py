"""
Default settings and constants for the PDF layer editor.

Deployment-tunable values can be overridden with ``PDFLAYER_*`` environment
variables; everything else is fixed by the slide geometry.
"""

import os

# Slide geometry (16:9 widescreen, inches)
SLIDE_WIDTH = 13.33
SLIDE_HEIGHT = 7.5
POINTS_PER_INCH = 72.0

# Rendering scales (1.0 == PDF points)
PREVIEW_SCALE = float(os.environ.get("PDFLAYER_PREVIEW_SCALE", "1.2"))
NATIVE_SCALE = 1.0
OCR_RENDER_SCALE = 2.0

# Digital text layer mapping
DIGITAL_NOMINAL_LINE_HEIGHT = 12.0
DIGITAL_FONT_SHRINK = 0.9
DIGITAL_WIDTH_GROWTH = 1.1
DIGITAL_MIN_WIDTH = 0.5
DIGITAL_TEXT_COLOR = "363636"

# OCR text layer mapping
OCR_CONFIDENCE_THRESHOLD = 30
OCR_WIDTH_GROWTH = 1.05
OCR_MIN_WIDTH = 1.0
OCR_FONT_FACTOR = 0.7
OCR_TEXT_COLOR = "000000"
OCR_LANGUAGES = os.environ.get("PDFLAYER_OCR_LANGUAGES", "kor+eng")
OCR_PSM = 6  # Uniform block of text

# Text boxes
DEFAULT_FONT_FACE = "Arial"
LINE_HEIGHT_FACTOR = 1.2  # Box height for digital text, relative to font size

# Output
OUTPUT_SUFFIX = "_Editable.pptx"
PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

# Logging
LOG_LEVEL = os.environ.get("PDFLAYER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
