"""Static registry of file signatures.

Entries are scanned in order and the first match wins, so more specific
signatures must precede the generic ones that share their leading bytes
(the OOXML discriminator before plain ZIP, the dedicated WebP entry before
the RIFF family, ISO base media boxes before the four-byte icon and MPEG
magics their size word can collide with).
"""

from __future__ import annotations

from typing import Iterable, Tuple

from .models import SignatureEntry

PREFIX_LENGTH = 24

JP2_SIGNATURE_BOX = b"\x00\x00\x00\x0cjP  \r\n\x87\n"


def _entry(
    type_id: str,
    category: str,
    *patterns: bytes,
    offset: int = 0,
    slack: int = 0,
    requires: Tuple[Tuple[int, bytes], ...] = (),
    family: str | None = None,
) -> SignatureEntry:
    return SignatureEntry(
        type_id=type_id,
        category=category,  # type: ignore[arg-type]
        patterns=tuple(patterns),
        offset=offset,
        slack=slack,
        requires=requires,
        family=family,
    )


def _validate(entries: Iterable[SignatureEntry]) -> Tuple[SignatureEntry, ...]:
    table = tuple(entries)
    for entry in table:
        if not entry.patterns:
            raise ValueError(f"Signature '{entry.type_id}' has no patterns.")
        if entry.span > PREFIX_LENGTH:
            raise ValueError(
                f"Signature '{entry.type_id}' inspects {entry.span} bytes; "
                f"the window is {PREFIX_LENGTH}."
            )
    return table


SIGNATURE_TABLE: Tuple[SignatureEntry, ...] = _validate(
    [
        # Documents
        _entry("pdf", "document", b"%PDF-"),
        _entry("ps", "document", b"%!PS"),
        _entry("rtf", "document", b"{\\rtf"),
        # ZIP containers: OOXML writers set general-purpose flags 0x0006.
        _entry("ooxml", "document", b"PK\x03\x04\x14\x00\x06\x00"),
        _entry("zip", "archive", b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08"),
        # Archives
        _entry("rar", "archive", b"Rar!\x1a\x07\x00", b"Rar!\x1a\x07\x01\x00"),
        _entry("7z", "archive", b"7z\xbc\xaf\x27\x1c"),
        _entry("gz", "archive", b"\x1f\x8b"),
        _entry("bz2", "archive", b"BZh"),
        _entry("xz", "archive", b"\xfd7zXZ\x00"),
        _entry("sqlite", "database", b"SQLite format 3\x00"),
        # Images
        _entry("png", "image", b"\x89PNG\r\n\x1a\n"),
        _entry("gif", "image", b"GIF87a", b"GIF89a"),
        _entry("jpeg", "image", b"\xff\xd8\xff", family="jpeg"),
        _entry("webp", "image", b"RIFF", requires=((8, b"WEBP"),)),
        _entry("jp2", "image", JP2_SIGNATURE_BOX, family="isobmff"),
        # ISO base media boxes: a size word then the box type, ahead of short magics.
        _entry("mp4", "video", b"ftyp", offset=4, slack=3, family="isobmff"),
        _entry("mov", "video", b"moov", b"mdat", b"wide", offset=4),
        _entry("tiff", "image", b"II*\x00", b"MM\x00*"),
        _entry("jxr", "image", b"II\xbc"),
        _entry("bmp", "image", b"BM"),
        _entry("psd", "image", b"8BPS"),
        _entry("ico", "image", b"\x00\x00\x01\x00"),
        # Audio and video
        _entry("wav", "audio", b"RIFF", family="riff"),
        _entry("aiff", "audio", b"FORM", requires=((8, b"AIF"),)),
        _entry("flac", "audio", b"fLaC"),
        _entry("mp3", "audio", b"ID3", b"\xff\xfb", b"\xff\xf3", b"\xff\xf2"),
        _entry("aac", "audio", b"\xff\xf1", b"\xff\xf9"),
        _entry("ogg", "audio", b"OggS"),
        _entry("mid", "audio", b"MThd"),
        _entry("flv", "video", b"FLV\x01"),
        _entry("wmv", "video", b"\x30\x26\xb2\x75\x8e\x66\xcf\x11"),
        _entry("mkv", "video", b"\x1a\x45\xdf\xa3"),
        _entry("mpeg1", "video", b"\x00\x00\x01\xba"),
        _entry("mpeg2", "video", b"\x00\x00\x01\xb3"),
        # Fonts
        _entry("woff", "font", b"wOFF"),
        _entry("woff2", "font", b"wOF2"),
        _entry("ttf", "font", b"\x00\x01\x00\x00\x00"),
        _entry("otf", "font", b"OTTO"),
        _entry("ttc", "font", b"ttcf"),
        # Executables
        _entry("elf", "executable", b"\x7fELF"),
        _entry("dylib", "executable", b"\xce\xfa\xed\xfe", b"\xcf\xfa\xed\xfe"),
        _entry("exe", "executable", b"MZ"),
        _entry("wasm", "executable", b"\x00asm"),
        # Text formats
        _entry("sh", "script", b"#!"),
        _entry("xml", "data", b"<?xml"),
    ]
)


def find_entry(prefix: bytes) -> SignatureEntry | None:
    """Return the first registered entry matching the prefix, if any."""
    for entry in SIGNATURE_TABLE:
        if entry.matches(prefix):
            return entry
    return None


__all__ = ["PREFIX_LENGTH", "JP2_SIGNATURE_BOX", "SIGNATURE_TABLE", "find_entry"]
