"""
Legal document extraction module

Turns uploaded PDFs of Arabic legal documents (court decisions and
contracts) into structured records with a completeness score.

Text is acquired from both the embedded text layer (pypdf) and
recognition over rendered pages (pdf2image + Tesseract or Surya),
normalized, classified, and run through field-specific pattern chains.

Public API:
    extract_document          - Full pipeline on a PDF buffer
    extract_from_text         - Classify and extract already-acquired text
    submit_extraction         - Background extraction with callbacks
    validate_extracted_record - Minimal sanity check before storage
    acquire_text / TextAcquirer - Hybrid text acquisition
    classify                  - Document category
    extract_court_decision    - Court decision extractor
    extract_contract          - Contract extractor
    needs_manual_review       - Court decision review flag
    get_extraction_summary    - One-line court decision summary
    normalize_digits          - Arabic-Indic digit normalization
"""

from DocExtract.acquisition import TextAcquirer, acquire_text
from DocExtract.classifier import classify
from DocExtract.contract_extractor import extract_contract
from DocExtract.court_extractor import (
    extract_court_decision,
    get_extraction_summary,
    needs_manual_review,
)
from DocExtract.normalizer import normalize_digits
from DocExtract.pipeline import (
    extract_document,
    extract_from_text,
    submit_extraction,
    validate_extracted_record,
)
from DocExtract.schemas import (
    BaseRecord,
    ContractRecord,
    CourtDecisionRecord,
    ExtractionQuality,
)
from DocExtract.utils import (
    AcquisitionError,
    DocExtractError,
    InvalidDocumentError,
)

__all__ = [
    "extract_document",
    "extract_from_text",
    "submit_extraction",
    "validate_extracted_record",
    "acquire_text",
    "TextAcquirer",
    "classify",
    "extract_court_decision",
    "extract_contract",
    "needs_manual_review",
    "get_extraction_summary",
    "normalize_digits",
    "BaseRecord",
    "CourtDecisionRecord",
    "ContractRecord",
    "ExtractionQuality",
    "DocExtractError",
    "InvalidDocumentError",
    "AcquisitionError",
]
