"""
Tests for buffer validation and safe file loading.
"""

import pytest

from DocExtract import config
from DocExtract.utils import (
    DocExtractSecurityError,
    InvalidDocumentError,
    load_pdf_bytes,
    sanitize_path,
    validate_buffer,
)

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n%%EOF"


class TestValidateBuffer:
    def test_valid_pdf(self):
        validate_buffer(PDF_BYTES)

    def test_signature_after_leading_junk(self):
        validate_buffer(b"\x00\x00" + PDF_BYTES)

    def test_empty(self):
        with pytest.raises(InvalidDocumentError):
            validate_buffer(b"")

    def test_not_bytes(self):
        with pytest.raises(InvalidDocumentError):
            validate_buffer("%PDF-1.4")

    def test_not_a_pdf(self):
        with pytest.raises(InvalidDocumentError):
            validate_buffer(b"\x89PNG\r\n\x1a\n")

    def test_too_large(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_FILE_SIZE_MB", 0.00001)
        with pytest.raises(InvalidDocumentError, match="too large"):
            validate_buffer(PDF_BYTES)


class TestLoadPdfBytes:
    def test_loads_valid_file(self, tmp_path):
        path = tmp_path / "decision.pdf"
        path.write_bytes(PDF_BYTES)
        assert load_pdf_bytes(path) == PDF_BYTES

    def test_uppercase_extension(self, tmp_path):
        path = tmp_path / "contract.PDF"
        path.write_bytes(PDF_BYTES)
        assert load_pdf_bytes(str(path)) == PDF_BYTES

    def test_path_traversal(self, tmp_path):
        with pytest.raises(DocExtractSecurityError):
            load_pdf_bytes(str(tmp_path / ".." / "decision.pdf"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidDocumentError):
            load_pdf_bytes(tmp_path / "missing.pdf")

    def test_directory_rejected(self, tmp_path):
        with pytest.raises(InvalidDocumentError):
            sanitize_path(tmp_path)

    def test_bad_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(PDF_BYTES)
        with pytest.raises(InvalidDocumentError, match="Unsupported file extension"):
            load_pdf_bytes(path)

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "fake.pdf"
        path.write_bytes(b"plain text")
        with pytest.raises(InvalidDocumentError):
            load_pdf_bytes(path)

    def test_symlink_rejected(self, tmp_path):
        target = tmp_path / "real.pdf"
        target.write_bytes(PDF_BYTES)
        link = tmp_path / "link.pdf"
        link.symlink_to(target)
        with pytest.raises(DocExtractSecurityError):
            load_pdf_bytes(link)
