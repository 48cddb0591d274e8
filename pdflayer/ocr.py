"""
OCR engine built on Tesseract, used for pages without a digital text layer.
"""

import logging
from typing import Dict, List, Optional, Tuple

import pytesseract
from PIL import Image

from .config import OCR_LANGUAGES, OCR_PSM
from .exceptions import RecognitionFailure
from .models import OcrLine
from .utils import normalize_coordinates

logger = logging.getLogger(__name__)

LineKey = Tuple[int, int, int]


class TesseractRecognizer:
    """
    Line-level recognizer for one conversion run.

    Create it with ``create_recognizer`` and release it with ``terminate``;
    a terminated recognizer refuses further work.
    """

    def __init__(self, langs: str = OCR_LANGUAGES, psm: int = OCR_PSM):
        self.langs = langs
        self.psm = psm
        self._terminated = False

    @property
    def terminated(self) -> bool:
        return self._terminated

    def recognize(self, image: Image.Image) -> List[OcrLine]:
        """
        Recognize the text lines of a bitmap.

        Args:
            image: Page bitmap

        Returns:
            Recognized lines in reading order, bounding boxes in the
            bitmap's pixel space

        Raises:
            RecognitionFailure: If Tesseract fails or the recognizer was terminated
        """
        if self._terminated:
            raise RecognitionFailure("OCR engine has already been terminated")

        try:
            ocr_data = pytesseract.image_to_data(
                image,
                lang=self.langs,
                output_type=pytesseract.Output.DICT,
                config=f'--psm {self.psm}'
            )
        except Exception as e:
            logger.error(f"OCR processing failed: {str(e)}")
            raise RecognitionFailure(f"OCR processing failed: {str(e)}") from e

        lines = group_words_into_lines(ocr_data)
        logger.info(f"OCR recognized {len(lines)} lines")
        return lines

    def terminate(self) -> None:
        """Release the engine. Safe to call more than once."""
        if not self._terminated:
            self._terminated = True
            logger.info("OCR engine terminated")


def create_recognizer(langs: str = OCR_LANGUAGES) -> TesseractRecognizer:
    """
    Start an OCR engine for the given languages.

    Args:
        langs: Tesseract language codes joined by '+', e.g. 'kor+eng'

    Returns:
        Ready recognizer

    Raises:
        RecognitionFailure: If Tesseract or a requested language is unavailable
    """
    logger.info(f"Initializing OCR engine ({langs})")
    try:
        available = set(pytesseract.get_languages(config=''))
    except Exception as e:
        logger.error(f"OCR engine initialization failed: {str(e)}")
        raise RecognitionFailure(f"OCR engine initialization failed: {str(e)}") from e

    missing = [lang for lang in langs.split('+') if lang and lang not in available]
    if missing:
        raise RecognitionFailure(f"OCR languages not installed: {', '.join(missing)}")

    return TesseractRecognizer(langs)


def group_words_into_lines(ocr_data: Dict[str, list]) -> List[OcrLine]:
    """
    Group Tesseract word entries into lines.

    Words are keyed by (block, paragraph, line) so that lines from different
    blocks never merge. A line's confidence is the mean of its words'.

    Args:
        ocr_data: Output of ``pytesseract.image_to_data`` as a dict

    Returns:
        Lines in the order Tesseract first reports them
    """
    lines: Dict[LineKey, dict] = {}

    for i, text in enumerate(ocr_data['text']):
        conf = float(ocr_data['conf'][i])
        # conf -1 marks page/block/paragraph/line rows
        if conf < 0 or not text or not text.strip():
            continue

        key = (ocr_data['block_num'][i], ocr_data['par_num'][i], ocr_data['line_num'][i])
        if key not in lines:
            lines[key] = {'words': [], 'confs': [],
                          'bbox': [float('inf'), float('inf'), float('-inf'), float('-inf')]}

        x = ocr_data['left'][i]
        y = ocr_data['top'][i]
        w = ocr_data['width'][i]
        h = ocr_data['height'][i]

        bbox = lines[key]['bbox']
        bbox[0] = min(bbox[0], x)
        bbox[1] = min(bbox[1], y)
        bbox[2] = max(bbox[2], x + w)
        bbox[3] = max(bbox[3], y + h)

        lines[key]['words'].append(text.strip())
        lines[key]['confs'].append(conf)

    result = []
    for line in lines.values():
        confidence = sum(line['confs']) / len(line['confs'])
        bbox = normalize_coordinates(*line['bbox'])
        result.append(OcrLine(' '.join(line['words']), confidence, bbox))

    return result


def check_tesseract_installation() -> bool:
    """
    Test if Tesseract is properly installed and accessible.

    Returns:
        True if Tesseract is working, False otherwise
    """
    try:
        test_image = Image.new('RGB', (100, 50), color='white')
        pytesseract.image_to_string(test_image)
        return True
    except Exception as e:
        logger.error(f"Tesseract test failed: {str(e)}")
        return False


def get_tesseract_version() -> Optional[str]:
    """
    Get the version of the installed Tesseract.

    Returns:
        Version string if available, None otherwise
    """
    try:
        return str(pytesseract.get_tesseract_version())
    except Exception as e:
        logger.error(f"Failed to get Tesseract version: {str(e)}")
        return None
