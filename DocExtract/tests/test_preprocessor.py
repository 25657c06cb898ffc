"""
Tests for page preparation: grayscale conversion, skew estimation, contrast.
"""

import numpy as np
from PIL import Image, ImageDraw

from DocExtract.preprocessor import (
    deskew,
    enhance_contrast,
    estimate_skew,
    prepare_page,
)


def _text_like_page(width=200, height=100):
    """White page with horizontal black bars standing in for text lines."""
    image = Image.new("L", (width, height), 255)
    draw = ImageDraw.Draw(image)
    for top in range(20, height - 20, 20):
        draw.rectangle([20, top, width - 20, top + 4], fill=0)
    return image


class TestPreparePage:
    def test_converts_to_grayscale(self):
        page = Image.new("RGB", (100, 50), "white")
        result = prepare_page(page, enable_deskew=False, enable_contrast_enhancement=False)
        assert result.mode == "L"
        assert result.size == (100, 50)

    def test_all_steps_keep_aligned_page_size(self):
        page = _text_like_page().convert("RGB")
        result = prepare_page(page, enable_deskew=True, enable_contrast_enhancement=True)
        assert result.mode == "L"
        assert result.size == (200, 100)


class TestSkew:
    def test_blank_page_has_no_skew(self):
        assert estimate_skew(np.full((50, 50), 255, dtype=np.uint8)) == 0.0

    def test_aligned_page_near_zero(self):
        assert abs(estimate_skew(np.array(_text_like_page()))) < 1.0

    def test_aligned_page_not_rotated(self):
        page = _text_like_page()
        assert deskew(page) is page


class TestEnhanceContrast:
    def test_returns_grayscale_of_same_size(self):
        page = _text_like_page()
        result = enhance_contrast(page)
        assert result.mode == "L"
        assert result.size == page.size
