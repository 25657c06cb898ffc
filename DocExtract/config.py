"""
config.py

Configuration module for the document extraction pipeline.

Purpose:
--------
Contains all constants and settings used across the module: text
acquisition (OCR backend, rendering resolution, preprocessing toggles),
source selection limits, scoring thresholds, and security limits.

Design Principle:
-----------------
Configuration is isolated from business logic.
Changing thresholds or swapping the recognition backend should
not require editing extraction code. Values can be overridden
through environment variables (or a local .env file).
"""

import os
import tempfile

from dotenv import load_dotenv

load_dotenv()

# -----------------------------
# Recognition engine
# -----------------------------
OCR_BACKEND: str = os.getenv("DOCEXTRACT_OCR_BACKEND", "tesseract")  # tesseract | surya
OCR_LANGUAGES: str = os.getenv("DOCEXTRACT_OCR_LANGUAGES", "ara+eng")
TESSERACT_CONFIG = "--psm 6 -c preserve_interword_spaces=1"
OCR_PAGE_WORKERS: int = int(os.getenv("DOCEXTRACT_OCR_PAGE_WORKERS", "1"))

# -----------------------------
# Rendering
# -----------------------------
# 3x the 72 dpi PDF user unit
RENDER_DPI: int = int(os.getenv("DOCEXTRACT_RENDER_DPI", "216"))

# -----------------------------
# Preprocessing
# -----------------------------
ENABLE_DESKEW = True
ENABLE_CONTRAST_ENHANCEMENT = True
MAX_DESKEW_ANGLE = 15.0

# -----------------------------
# Source selection
# -----------------------------
MIN_SOURCE_CHARS = 100  # Shorter text layer / OCR output counts as unusable
SHORT_OUTPUT_WORDS = 50

# -----------------------------
# Scoring
# -----------------------------
COURT_HIGH_THRESHOLD = 75
COURT_MEDIUM_THRESHOLD = 50
COURT_TOTAL_FIELDS = 15
MANUAL_REVIEW_THRESHOLD = 60

CONTRACT_HIGH_THRESHOLD = 70
CONTRACT_MEDIUM_THRESHOLD = 40
CONTRACT_TOTAL_FIELDS = 15
SALE_CONTRACT_TOTAL_FIELDS = 13

# -----------------------------
# Locale
# -----------------------------
LOCALITY_MARKER = os.getenv("DOCEXTRACT_LOCALITY_MARKER", "حلب")
LOCAL_CURRENCY = "SYP"
LOCAL_CURRENCY_LABEL = "ليرة سورية"
FOREIGN_CURRENCY = "USD"

# -----------------------------
# Security
# -----------------------------
MAX_FILE_SIZE_MB = 10
ALLOWED_EXTENSIONS = [".pdf"]

# -----------------------------
# Paths
# -----------------------------
WORK_DIR = os.getenv(
    "DOCEXTRACT_WORK_DIR", os.path.join(tempfile.gettempdir(), "ocr-processing")
)
