"""Tests for raw input normalization."""

import pytest

from recipe_intake.exceptions import InvalidInputError
from recipe_intake.recipe_import.models import InputKind
from recipe_intake.recipe_import.normalizer import (
    IMAGE_SEPARATOR,
    normalize_content,
    parse_input_kind,
    split_images,
    to_data_url,
)

PAGE_1 = "data:image/jpeg;base64,AAAA"
PAGE_2 = "data:image/png;base64,BBBB"
PAGE_3 = "data:image/jpeg;base64,CCCC"


class TestParseInputKind:
    """Tests for input kind resolution."""

    def test_known_kinds(self):
        assert parse_input_kind("photo") == InputKind.PHOTO
        assert parse_input_kind("text") == InputKind.TEXT
        assert parse_input_kind("url") == InputKind.URL
        assert parse_input_kind(" TEXT ") == InputKind.TEXT

    def test_camera_is_photo(self):
        assert parse_input_kind("camera") == InputKind.PHOTO

    def test_enum_passes_through(self):
        assert parse_input_kind(InputKind.URL) == InputKind.URL

    def test_unknown_kind(self):
        with pytest.raises(InvalidInputError):
            parse_input_kind("fax")


class TestSplitImages:
    """Tests for multi-page photo payloads."""

    def test_preserves_order(self):
        raw = IMAGE_SEPARATOR.join([PAGE_1, PAGE_2, PAGE_3])
        assert split_images(raw) == [PAGE_1, PAGE_2, PAGE_3]

    def test_drops_empty_segments(self):
        raw = f"{IMAGE_SEPARATOR}{PAGE_1}{IMAGE_SEPARATOR}  {IMAGE_SEPARATOR}{PAGE_2}{IMAGE_SEPARATOR}"
        assert split_images(raw) == [PAGE_1, PAGE_2]

    def test_trims_segments(self):
        assert split_images(f"  {PAGE_1}\n") == [PAGE_1]


class TestToDataUrl:
    def test_bare_base64_is_wrapped(self):
        assert to_data_url("QUJD") == "data:image/jpeg;base64,QUJD"

    def test_data_and_http_urls_pass_through(self):
        assert to_data_url(PAGE_2) == PAGE_2
        assert to_data_url("https://example.com/a.jpg") == "https://example.com/a.jpg"


class TestNormalizeContent:
    """Tests for content part construction."""

    def test_photo_produces_image_parts_in_order(self):
        parts = normalize_content("photo", IMAGE_SEPARATOR.join([PAGE_1, PAGE_2]))
        assert [p.type for p in parts] == ["image_url", "image_url"]
        assert [p.image_url for p in parts] == [PAGE_1, PAGE_2]

    def test_text_is_single_part(self):
        parts = normalize_content("text", "  Pancakes\n2 cups flour  ")
        assert len(parts) == 1
        assert parts[0].type == "text"
        assert parts[0].text == "Pancakes\n2 cups flour"

    def test_url_text_is_single_part(self):
        parts = normalize_content(InputKind.URL, "Resolved page text")
        assert len(parts) == 1
        assert parts[0].text == "Resolved page text"

    def test_separator_in_text_is_not_split(self):
        parts = normalize_content("text", f"a{IMAGE_SEPARATOR}b")
        assert len(parts) == 1

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_content_rejected(self, raw):
        with pytest.raises(InvalidInputError):
            normalize_content("text", raw)

    def test_photo_with_only_separators_rejected(self):
        with pytest.raises(InvalidInputError):
            normalize_content("photo", IMAGE_SEPARATOR * 3)

    def test_openai_rendering(self):
        image, = normalize_content("photo", PAGE_1)
        text, = normalize_content("text", "hello")
        assert image.to_openai() == {"type": "image_url", "image_url": {"url": PAGE_1}}
        assert text.to_openai() == {"type": "text", "text": "hello"}
