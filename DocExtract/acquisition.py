"""
acquisition.py

Hybrid text acquisition from PDF buffers.

Pipeline:
1. Validate the buffer
2. Read the embedded text layer (pypdf); failure degrades to empty
3. Render every page (pdf2image) into a per-call session directory,
   prepare it and run text recognition in page order
4. Choose the text layer, the recognition output, or a merge of both
5. Log a quality report of the final text

The text layer is often complete but unordered (table cells, glued words);
recognition output keeps the reading order but loses table data. The merge
keeps the recognition output and splices back vehicle attributes that only
the text layer carries.
"""

import io
import logging
import re
import tempfile
import uuid
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Union

from pdf2image import convert_from_bytes
from PIL import Image
from pypdf import PdfReader

from DocExtract import config
from DocExtract.engine import get_recognizer
from DocExtract.preprocessor import prepare_page
from DocExtract.utils import AcquisitionError, validate_buffer

logger = logging.getLogger(__name__)

TextLayerReader = Callable[[bytes], str]
PageRenderer = Callable[[bytes, Path, int], List[Path]]

VEHICLE_KEYWORDS = ("مرسيدس", "هونداي", "تويوتا", "كيا", "ميكروباص")

# "the vehicle with number ... vehicles directorate ... <id>" block
_VEHICLE_ANCHOR = re.compile(r"السيارة ذات الرقم.*?المركبات[\s\S]{0,100}?\d{6,9}")
_PLATE = re.compile(r"\d{6,9}")

_MAKE_PATTERNS = (
    re.compile(r"مرسيدس\s*ميكرو"),
    re.compile(r"مرسيدسميكرو"),
    re.compile(r"هونداي\s*ميكروباص"),
    re.compile(r"تويوتا"),
    re.compile(r"كيا"),
    re.compile(r"هونداي"),
    re.compile(r"مرسيدس"),
    re.compile(r"ميكروباص"),
)
_COLOR = re.compile(r"ابيض|اسود|ازرق|احمر|اخضر|رمادي|فضي")
_GOVERNORATE = re.compile(r"محافظة\s*:?\s*([أ-ي]{3,15})")


# -----------------------------
# Default collaborators
# -----------------------------
def read_text_layer(buffer: bytes) -> str:
    """Concatenate the embedded text of every page (pypdf)."""
    reader = PdfReader(io.BytesIO(buffer))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def render_pages(buffer: bytes, output_dir: Path, dpi: int) -> List[Path]:
    """Render every page to a PNG in ``output_dir``, returned in page order."""
    paths = convert_from_bytes(
        buffer,
        dpi=dpi,
        output_folder=str(output_dir),
        fmt="png",
        paths_only=True,
    )
    return [Path(p) for p in paths]


# -----------------------------
# Merge
# -----------------------------
def has_vehicle_data(text: str) -> bool:
    return any(keyword in text for keyword in VEHICLE_KEYWORDS)


def extract_vehicle_data(text_layer: str) -> dict:
    """Make, model, color and governorate as found in the text layer."""
    data = {}

    for pattern in _MAKE_PATTERNS:
        match = pattern.search(text_layer)
        if match:
            data["make"] = re.sub(r"(مرسيدس|هونداي)(?=\S)", r"\1 ", match.group(0))
            break

    if "كونتي" in text_layer:
        data["model"] = "كونتي"

    match = _COLOR.search(text_layer)
    if match:
        data["color"] = match.group(0)

    match = _GOVERNORATE.search(text_layer)
    if match:
        data["location"] = match.group(1)

    return data


def _make_model(vehicle: dict) -> str:
    return " ".join(filter(None, (vehicle.get("make"), vehicle.get("model"))))


def _attribute_lines(vehicle: dict) -> List[str]:
    lines = []
    if vehicle.get("color"):
        lines.append(f"اللون: {vehicle['color']}")
    if vehicle.get("location"):
        lines.append(f"محافظة: {vehicle['location']}")
    return lines


def _vehicle_block(anchor: str, vehicle: dict) -> str:
    """Rebuild the anchor block with make/model after the id, then color and governorate."""
    make_model = _make_model(vehicle)
    block = anchor
    if make_model:
        block = _PLATE.sub(lambda m: f"{m.group(0)}\n{make_model}", block, count=1)
    return "\n".join([block] + _attribute_lines(vehicle))


def merge_text_sources(text_layer: str, ocr_text: str) -> str:
    """
    Merge the two sources with the recognition output as the base.

    Only vehicle attributes are reconciled: when the text layer mentions a
    vehicle make/model keyword and the recognition output does not, the
    attributes are spliced in right after the vehicle block, or appended
    when the recognition output has no such block.
    """
    if not has_vehicle_data(text_layer):
        if not has_vehicle_data(ocr_text):
            logger.debug("No vehicle data in either source")
        return ocr_text

    if has_vehicle_data(ocr_text):
        logger.info("Both sources have vehicle data; using recognition output")
        return ocr_text

    vehicle = extract_vehicle_data(text_layer)
    logger.info("Vehicle data found only in text layer; merging %s", sorted(vehicle))

    anchor = _VEHICLE_ANCHOR.search(ocr_text)
    if anchor is None:
        logger.warning("Vehicle block not found in recognition output; appending details")
        lines = [ocr_text.rstrip(), _make_model(vehicle)] + _attribute_lines(vehicle)
        return "\n".join(line for line in lines if line)

    return (
        ocr_text[: anchor.start()]
        + _vehicle_block(anchor.group(0), vehicle)
        + ocr_text[anchor.end():]
    )


def select_text(text_layer: str, ocr_text: str) -> str:
    """Pick the usable source, or merge when both are usable."""
    if len(text_layer.strip()) < config.MIN_SOURCE_CHARS:
        logger.info("Using recognition output only (no usable text layer)")
        return ocr_text

    if len(ocr_text.strip()) < config.MIN_SOURCE_CHARS:
        logger.info("Using text layer only (recognition output unusable)")
        return text_layer

    logger.info("Merging text layer and recognition output")
    return merge_text_sources(text_layer, ocr_text)


def log_text_quality(text: str) -> None:
    """Log character/word counts, Arabic ratio and keyword presence."""
    total_chars = len(text)
    total_words = len(text.split())
    arabic_chars = len(re.findall(r"[\u0600-\u06ff]", text))
    arabic_ratio = arabic_chars / max(total_chars, 1)
    has_vehicle = bool(re.search(r"مرسيدس|تويوتا|هونداي|مركبة|سيارة|ميكروباص", text))
    has_table = bool(re.search(r"ماركة|طراز|لونها", text))
    has_contract = bool(re.search(r"الفريق|البائع|المشتري|بمبلغ", text))

    logger.info(
        "Text quality: %d chars, %d words, arabic ratio %.1f%%, "
        "vehicle keywords=%s, table keywords=%s, contract keywords=%s",
        total_chars, total_words, arabic_ratio * 100,
        has_vehicle, has_table, has_contract,
    )

    if total_words < config.SHORT_OUTPUT_WORDS:
        logger.warning("Very short text output - possible recognition failure")
    if has_table and not has_vehicle:
        logger.warning("Table headers found but no vehicle data")
    if not has_contract:
        logger.debug("No contract keywords found")


# -----------------------------
# Acquirer
# -----------------------------
class TextAcquirer:
    """
    Acquire document text from a PDF buffer.

    Every call owns a uniquely named session directory inside ``work_dir``;
    it is removed when the call returns or raises.
    The recognizer is resolved once per call, before any page worker starts.
    """

    def __init__(
        self,
        work_dir: Union[str, Path],
        text_layer_reader: TextLayerReader = read_text_layer,
        page_renderer: PageRenderer = render_pages,
        recognizer=None,
        languages: Optional[str] = None,
        dpi: Optional[int] = None,
        page_workers: Optional[int] = None,
        preprocess: bool = True,
    ):
        self.work_dir = Path(work_dir)
        self.text_layer_reader = text_layer_reader
        self.page_renderer = page_renderer
        self.recognizer = recognizer
        self.languages = languages or config.OCR_LANGUAGES
        self.dpi = dpi or config.RENDER_DPI
        self.page_workers = page_workers or config.OCR_PAGE_WORKERS
        self.preprocess = preprocess

    def acquire(self, buffer: bytes) -> str:
        """
        Return the best available text for ``buffer``.

        Raises:
            InvalidDocumentError: If the buffer is not a processable PDF.
            AcquisitionError: If rendering/recognition fails or neither
                source yields text.
        """
        validate_buffer(buffer)
        logger.info("Starting hybrid text acquisition (%d bytes)", len(buffer))

        text_layer = self._read_text_layer(buffer)
        recognizer = self.recognizer or get_recognizer()

        self.work_dir.mkdir(parents=True, exist_ok=True)
        session_id = uuid.uuid4().hex
        with tempfile.TemporaryDirectory(prefix=f"{session_id}-", dir=self.work_dir) as session_dir:
            ocr_text = self._recognize_document(buffer, Path(session_dir), recognizer)

        final_text = select_text(text_layer, ocr_text)
        if not final_text.strip():
            raise AcquisitionError("No usable text from text layer or recognition")

        log_text_quality(final_text)
        return final_text

    def _read_text_layer(self, buffer: bytes) -> str:
        try:
            text = self.text_layer_reader(buffer) or ""
        except Exception as e:
            logger.warning("Could not extract text layer: %s", e)
            return ""
        logger.info("Text layer: %d characters", len(text))
        return text

    def _recognize_document(self, buffer: bytes, session_dir: Path, recognizer) -> str:
        try:
            pages = self.page_renderer(buffer, session_dir, self.dpi)
        except Exception as e:
            logger.error("Page rendering failed: %s", e)
            raise AcquisitionError(f"Page rendering failed: {e}") from e

        logger.info("Rendered %d page(s) at %d dpi", len(pages), self.dpi)

        if self.page_workers > 1 and len(pages) > 1:
            with ThreadPoolExecutor(max_workers=self.page_workers) as executor:
                recognize_page = partial(self._recognize_page, recognizer=recognizer)
                texts = list(executor.map(recognize_page, pages))
        else:
            texts = [self._recognize_page(page, recognizer) for page in pages]

        ocr_text = "\n\n".join(text.strip() for text in texts if text.strip())
        logger.info("Recognition extracted %d characters", len(ocr_text))
        return ocr_text

    def _recognize_page(self, page_path: Path, recognizer) -> str:
        try:
            with Image.open(page_path) as image:
                image.load()
                prepared = prepare_page(image) if self.preprocess else image.copy()
            text = recognizer.recognize(prepared, self.languages)
        except Exception as e:
            logger.error("Recognition failed for %s: %s", page_path.name, e)
            raise AcquisitionError(f"Recognition failed for {page_path.name}: {e}") from e

        logger.debug("Extracted %d characters from %s", len(text or ""), page_path.name)
        return text or ""


def acquire_text(buffer: bytes, work_dir: Union[str, Path, None] = None) -> str:
    """Acquire text with the default collaborators."""
    return TextAcquirer(work_dir or config.WORK_DIR).acquire(buffer)
