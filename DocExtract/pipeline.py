"""
pipeline.py

Main orchestrator for the extraction module.

Coordinates the full pipeline: buffer -> acquired text -> category ->
extractor -> scored record. Supports synchronous calls and
fire-and-forget background jobs that report through callbacks.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Optional, Union

from DocExtract import config
from DocExtract.acquisition import TextAcquirer
from DocExtract.classifier import classify
from DocExtract.contract_extractor import extract_contract
from DocExtract.court_extractor import extract_court_decision
from DocExtract.schemas import (
    BaseRecord,
    ContractRecord,
    CourtDecisionRecord,
    ExtractionQuality,
)

logger = logging.getLogger(__name__)

ExtractedRecord = Union[CourtDecisionRecord, ContractRecord, BaseRecord]

_background_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def extract_from_text(text: str) -> ExtractedRecord:
    """
    Classify acquired text and run the matching extractor.

    Text matching no category yields a bare ``other`` record with a
    zero score and no field extraction.
    """
    category = classify(text)

    if category == "court_decision":
        return extract_court_decision(text)

    if category == "contract":
        return extract_contract(text)

    return BaseRecord(
        document_category="other",
        raw_text=text or "",
        confidence="low",
        extraction_quality=ExtractionQuality(
            score=0, issues=["Document type could not be determined"]
        ),
    )


def extract_document(
    buffer: bytes, acquirer: Optional[TextAcquirer] = None
) -> ExtractedRecord:
    """
    Run the full pipeline on a PDF buffer.

    Args:
        buffer: Uploaded PDF bytes.
        acquirer: Text acquirer to use. Defaults to one working in
            config.WORK_DIR with the default collaborators.

    Returns:
        CourtDecisionRecord, ContractRecord, or a bare BaseRecord.

    Raises:
        InvalidDocumentError: If the buffer is not a processable PDF.
        AcquisitionError: If no usable text could be acquired.
    """
    acquirer = acquirer or TextAcquirer(config.WORK_DIR)
    text = acquirer.acquire(buffer)
    record = extract_from_text(text)

    logger.info(
        "Document extracted: category=%s, score=%d, confidence=%s",
        record.document_category,
        record.extraction_quality.score,
        record.confidence,
    )
    return record


def _get_background_executor() -> ThreadPoolExecutor:
    global _background_executor
    with _executor_lock:
        if _background_executor is None:
            _background_executor = ThreadPoolExecutor(
                max_workers=2, thread_name_prefix="docextract"
            )
    return _background_executor


def submit_extraction(
    buffer: bytes,
    on_success: Callable[[ExtractedRecord], None],
    on_failure: Callable[[Exception], None],
    executor: Optional[Executor] = None,
    acquirer: Optional[TextAcquirer] = None,
) -> Future:
    """
    Run ``extract_document`` in the background.

    Exactly one callback is invoked: ``on_success(record)`` or
    ``on_failure(error)``. There is no retry and no cancellation; the
    returned future is only useful for waiting (e.g. in tests).

    An exception raised by ``on_success`` is logged and left on the
    returned future; ``on_failure`` is not called for it.
    """
    executor = executor or _get_background_executor()

    def _job() -> Optional[ExtractedRecord]:
        try:
            record = extract_document(buffer, acquirer)
        except Exception as e:
            logger.error("Background extraction failed: %s", e)
            on_failure(e)
            return None

        try:
            on_success(record)
        except Exception:
            logger.exception("Success callback failed for background extraction")
            raise
        return record

    return executor.submit(_job)


def validate_extracted_record(record: ExtractedRecord) -> bool:
    """
    Minimal sanity check before a record is stored.

    Requires at least 10 characters of raw text, and either a high/medium
    confidence or one key field (case number, court, or document type).
    """
    if not record.raw_text or len(record.raw_text.strip()) < 10:
        return False

    if record.confidence in ("high", "medium"):
        return True

    return bool(
        getattr(record, "case_number", None)
        or getattr(record, "court", None)
        or record.document_type
    )
