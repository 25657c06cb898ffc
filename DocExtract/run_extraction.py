"""
Run the extraction pipeline on a PDF file and print the result.

Usage:
    python -m DocExtract.run_extraction path/to/document.pdf
    python -m DocExtract.run_extraction path/to/document.pdf --json
"""

import argparse
import logging
import sys

from DocExtract import config
from DocExtract.acquisition import TextAcquirer
from DocExtract.court_extractor import get_extraction_summary, needs_manual_review
from DocExtract.pipeline import extract_document
from DocExtract.utils import DocExtractError, load_pdf_bytes


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Extract a structured record from an Arabic legal PDF."
    )
    parser.add_argument("pdf_path", help="Path to the PDF document")
    parser.add_argument("--json", action="store_true", help="Print the full record as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Processing: {args.pdf_path}")
    print(f"OCR backend: {config.OCR_BACKEND} ({config.OCR_LANGUAGES})")

    try:
        buffer = load_pdf_bytes(args.pdf_path)
        record = extract_document(buffer, TextAcquirer(config.WORK_DIR))
    except DocExtractError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nCategory: {record.document_category}")
    print(f"Type: {record.document_type or '-'}")
    print(f"Score: {record.extraction_quality.score}% ({record.confidence})")

    if record.document_category == "court_decision":
        print(get_extraction_summary(record))
        if needs_manual_review(record):
            print("Manual review recommended")

    issues = record.extraction_quality.issues
    if issues:
        print(f"Issues: {len(issues)}")
        for issue in issues[:5]:
            print(f"  - {issue}")
        if len(issues) > 5:
            print(f"  ... and {len(issues) - 5} more")

    if args.json:
        print("=" * 50)
        print(record.model_dump_json(by_alias=True, indent=2))
        print("=" * 50)

    return 0


if __name__ == "__main__":
    sys.exit(main())
