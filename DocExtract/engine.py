"""
engine.py

Text recognition backends for rendered PDF pages.

Two interchangeable recognizers share one method,
``recognize(image, languages) -> str``:

1. TesseractRecognizer: pytesseract with a uniform-block page layout
   and inter-word space preservation (default; honours the language hint)
2. SuryaRecognizer: Surya detection + recognition, models loaded lazily
   on first use and cached for reuse

The backend is selected by ``config.OCR_BACKEND`` and kept as a
module-level singleton.
"""

import logging
import threading
from typing import Optional

import pytesseract
from PIL import Image

from DocExtract import config

logger = logging.getLogger(__name__)


class TesseractRecognizer:
    """pytesseract wrapper; stateless apart from its engine flags."""

    name = "tesseract"

    def __init__(self, tesseract_config: Optional[str] = None):
        self.tesseract_config = tesseract_config or config.TESSERACT_CONFIG

    def recognize(self, image: Image.Image, languages: str) -> str:
        text = pytesseract.image_to_string(
            image, lang=languages, config=self.tesseract_config
        )
        logger.debug("Tesseract recognized %d characters", len(text))
        return text

    def reset(self) -> None:
        pass


class SuryaRecognizer:
    """
    Wrapper around Surya's detection and recognition predictors.

    Surya is multilingual, so the language hint is accepted but unused.
    """

    name = "surya"

    def __init__(self):
        self._det_predictor = None
        self._rec_predictor = None
        self._models_loaded = False
        self._load_lock = threading.Lock()

    def _load_models(self) -> None:
        if self._models_loaded:
            return

        with self._load_lock:
            if not self._models_loaded:
                self._import_and_load()

    def _import_and_load(self) -> None:
        """Import Surya and build both predictors; runs under the load lock."""
        try:
            from surya.detection import DetectionPredictor
            from surya.recognition import RecognitionPredictor
        except ImportError as e:
            raise ImportError(
                "surya-ocr is required. Install it with: pip install surya-ocr"
            ) from e

        logger.info("Loading Surya models...")
        self._det_predictor = DetectionPredictor()
        self._rec_predictor = RecognitionPredictor()
        self._models_loaded = True
        logger.info("Surya models loaded successfully")

    def recognize(self, image: Image.Image, languages: str) -> str:
        self._load_models()

        image = image.convert("RGB")
        det_results = self._det_predictor([image])
        bboxes = [[box.bbox for box in result.bboxes] for result in det_results]
        if not bboxes or not bboxes[0]:
            logger.warning("Surya detected no text lines on page")
            return ""

        rec_results = self._rec_predictor([image], bboxes=bboxes)
        lines = [line.text.strip() for line in rec_results[0].text_lines]
        return "\n".join(line for line in lines if line)

    def reset(self) -> None:
        """Release models and free memory."""
        with self._load_lock:
            self._det_predictor = None
            self._rec_predictor = None
            self._models_loaded = False
        logger.info("Surya models released")


RECOGNIZERS = {
    TesseractRecognizer.name: TesseractRecognizer,
    SuryaRecognizer.name: SuryaRecognizer,
}

# Module-level singleton recognizer, shared by page worker threads
_recognizer = None
_recognizer_lock = threading.Lock()


def get_recognizer(backend: Optional[str] = None):
    """Get or create the singleton recognizer for ``backend`` (default: config)."""
    global _recognizer
    backend = backend or config.OCR_BACKEND

    if backend not in RECOGNIZERS:
        raise ValueError(
            f"Unknown OCR backend '{backend}'. Available: {sorted(RECOGNIZERS)}"
        )

    with _recognizer_lock:
        # A replaced instance is dropped without reset(); in-flight
        # acquisitions keep using their own reference
        if _recognizer is None or _recognizer.name != backend:
            _recognizer = RECOGNIZERS[backend]()
            logger.info("Using %s recognizer", backend)
        return _recognizer


def reset_recognizer() -> None:
    """Reset the singleton recognizer (useful for testing)."""
    global _recognizer
    with _recognizer_lock:
        if _recognizer is not None:
            _recognizer.reset()
        _recognizer = None
