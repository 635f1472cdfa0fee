"""Tests for byte-prefix classification."""

from __future__ import annotations

import pytest

from filewarden.detection import LengthError, TypeClassifier, category, classify
from filewarden.detection.signatures import JP2_SIGNATURE_BOX


def _pad(data: bytes, fill: bytes = b"\x00") -> bytes:
    return data.ljust(24, fill)


def test_short_prefix_raises_length_error() -> None:
    with pytest.raises(LengthError) as excinfo:
        classify(b"\x89PNG\r\n\x1a\n\x00\x00")

    assert excinfo.value.actual == 10
    assert excinfo.value.required == 24
    assert isinstance(excinfo.value, ValueError)


def test_longer_prefix_uses_leading_window() -> None:
    data = b"\x89PNG\r\n\x1a\n" + b"\x00" * 200

    result = classify(data)

    assert result.type_id == "png"
    assert result.category == "image"


def test_unrecognised_bytes_are_unknown() -> None:
    result = classify(b"\x00" * 24)

    assert result.type_id is None
    assert result.category is None
    assert result.is_unknown


def test_plain_text_is_unknown() -> None:
    assert classify(b"hello world, plain text!").is_unknown


def test_classification_is_deterministic() -> None:
    prefix = _pad(b"%PDF-1.7\n")

    assert classify(prefix) == classify(prefix)
    assert category(prefix) == "document"


@pytest.mark.parametrize(
    ("subtype", "expected"),
    [
        (b"WAVE", ("wav", "audio")),
        (b"AVI ", ("avi", "video")),
        (b"WEBP", ("webp", "image")),
    ],
)
def test_riff_subtypes(subtype: bytes, expected: tuple[str, str]) -> None:
    result = classify(_pad(b"RIFF\x24\x00\x00\x00" + subtype + b"fmt "))

    assert (result.type_id, result.category) == expected


def test_unknown_riff_subtype_is_unknown() -> None:
    assert classify(_pad(b"RIFF\x24\x00\x00\x00CDDAfmt ")).is_unknown


@pytest.mark.parametrize(
    ("brand", "expected"),
    [
        (b"jp2 ", ("jp2", "image")),
        (b"jpx ", ("jpf", "image")),
        (b"isom", ("mp4", "video")),
        (b"mp42", ("mp4", "video")),
        (b"qt  ", ("mov", "video")),
        (b"heic", ("heif", "image")),
        (b"avif", ("avif", "image")),
        (b"M4A ", ("m4a", "audio")),
        (b"zzzz", ("j2k", "image")),
    ],
)
def test_iso_media_brands(brand: bytes, expected: tuple[str, str]) -> None:
    result = classify(_pad(b"\x00\x00\x00\x18ftyp" + brand + b"\x00\x00\x02\x00"))

    assert (result.type_id, result.category) == expected


@pytest.mark.parametrize("offset", [4, 5, 6, 7])
def test_ftyp_anywhere_in_leading_box_window(offset: int) -> None:
    result = classify(_pad(b"\x00" * offset + b"ftypabcd"))

    assert (result.type_id, result.category) == ("j2k", "image")


def test_ftyp_in_window_keeps_known_brand() -> None:
    assert classify(_pad(b"\x00" * 6 + b"ftypjpx ")).type_id == "jpf"


def test_box_size_colliding_with_icon_magic_is_media() -> None:
    result = classify(_pad(b"\x00\x00\x01\x00ftypisom"))

    assert (result.type_id, result.category) == ("mp4", "video")


def test_box_size_colliding_with_mpeg_magic_is_media() -> None:
    assert classify(_pad(b"\x00\x00\x01\xbaftypmp42")).type_id == "mp4"


def test_jp2_signature_box_layout() -> None:
    prefix = JP2_SIGNATURE_BOX + b"\x00\x00\x00\x14ftypjp2 "

    assert len(prefix) == 24
    assert classify(prefix).type_id == "jp2"


def test_jp2_signature_box_with_other_brand_is_j2k() -> None:
    prefix = JP2_SIGNATURE_BOX + b"\x00\x00\x00\x14ftypabcd"

    result = classify(prefix)

    assert result.type_id == "j2k"
    assert result.category == "image"


def test_jp2_signature_box_without_ftyp_is_unknown() -> None:
    assert classify(_pad(JP2_SIGNATURE_BOX)).is_unknown


def test_jpeg_with_exif_marker_is_jpg() -> None:
    result = classify(_pad(b"\xff\xd8\xff\xe1\x00\x18Exif"))

    assert result.type_id == "jpg"
    assert result.category == "image"


def test_jpeg_with_jfif_marker_is_jpeg() -> None:
    result = classify(_pad(b"\xff\xd8\xff\xe0\x00\x10JFIF"))

    assert result.type_id == "jpeg"
    assert result.category == "image"


def test_ooxml_flags_distinguish_office_packages() -> None:
    ooxml = classify(_pad(b"PK\x03\x04\x14\x00\x06\x00\x08\x00"))
    plain = classify(_pad(b"PK\x03\x04\x14\x00\x00\x00\x08\x00"))

    assert (ooxml.type_id, ooxml.category) == ("ooxml", "document")
    assert (plain.type_id, plain.category) == ("zip", "archive")


@pytest.mark.parametrize(
    "text",
    [
        b'{"name": "filewarden"}',
        b"[1, 2, 3]",
        b'{"items": [1, 2, 3, 4, 5, 6, 7, 8]}',
        b'{"description": "a long sentence that keeps going"}',
        b'\xef\xbb\xbf{"bom": true}',
    ],
)
def test_json_text_is_detected(text: bytes) -> None:
    result = classify(_pad(text[:24]))

    assert result.type_id == "json"
    assert result.category == "data"


def test_json_with_truncated_multibyte_character() -> None:
    text = '{"city": "København æøå æøå"}'.encode("utf-8")

    assert classify(text[:24]).type_id == "json"


def test_braced_non_json_is_unknown() -> None:
    assert classify(b"{not json at all, really}"[:24]).is_unknown


def test_json_sniffing_can_be_disabled() -> None:
    classifier = TypeClassifier(sniff_text=False)

    assert classifier.classify(_pad(b'{"a": 1}')).is_unknown
