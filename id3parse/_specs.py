# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import codecs
from enum import IntEnum
from typing import TYPE_CHECKING, Final, override

if TYPE_CHECKING:
    from ._frames import Frame

from ._util import ID3CorruptFrameError, checked_sub, read_full


class PictureType(IntEnum):
    """Enumeration of image types defined by the ID3 standard for the APIC
    frame.

    Decoded pictures keep the raw byte, this is only used for display.
    """

    OTHER = 0
    """Other"""

    FILE_ICON = 1
    """32x32 pixels 'file icon' (PNG only)"""

    OTHER_FILE_ICON = 2
    """Other file icon"""

    COVER_FRONT = 3
    """Cover (front)"""

    COVER_BACK = 4
    """Cover (back)"""

    LEAFLET_PAGE = 5
    """Leaflet page"""

    MEDIA = 6
    """Media (e.g. label side of CD)"""

    LEAD_ARTIST = 7
    """Lead artist/lead performer/soloist"""

    ARTIST = 8
    """Artist/performer"""

    CONDUCTOR = 9
    """Conductor"""

    BAND = 10
    """Band/Orchestra"""

    COMPOSER = 11
    """Composer"""

    LYRICIST = 12
    """Lyricist/text writer"""

    RECORDING_LOCATION = 13
    """Recording Location"""

    DURING_RECORDING = 14
    """During recording"""

    DURING_PERFORMANCE = 15
    """During performance"""

    SCREEN_CAPTURE = 16
    """Movie/video screen capture"""

    FISH = 17
    """A bright coloured fish"""

    ILLUSTRATION = 18
    """Illustration"""

    BAND_LOGOTYPE = 19
    """Band/artist logotype"""

    PUBLISHER_LOGOTYPE = 20
    """Publisher/Studio logotype"""

    def _pprint(self) -> str:
        return self.name.lower().replace("_", " ")


class Encoding(IntEnum):
    """Text Encoding"""

    LATIN1 = 0
    """ISO-8859-1"""

    UTF16 = 1
    """UTF-16 with BOM"""

    UTF16BE = 2
    """UTF-16BE without BOM"""

    UTF8 = 3
    """UTF-8"""


_encodings: Final = {
    Encoding.LATIN1: ('latin1', b'\x00'),
    Encoding.UTF16: ('utf-16-le', b'\x00\x00'),
    Encoding.UTF16BE: ('utf-16-be', b'\x00\x00'),
    Encoding.UTF8: ('utf-8', b'\x00'),
}


def _split_single(max_bytes: int, data: bytes,
                  offset: int) -> tuple[bytes, int]:
    index = data.find(b'\x00', offset, offset + max_bytes)
    if index != -1:
        return data[offset:index], index - offset + 1
    # no terminator inside the budget, take all of it
    return read_full(data, offset, max_bytes, "string"), max_bytes


def _split_double(max_bytes: int, data: bytes,
                  offset: int) -> tuple[bytes, int]:
    pos = 0
    while max_bytes - pos >= 2:
        pair = read_full(data, offset + pos, 2, "string")
        if pair == b'\x00\x00':
            return data[offset:offset + pos], pos + 2
        pos += 2
    # budget exhausted, a trailing odd byte is consumed but not decoded
    read_full(data, offset + pos, max_bytes - pos, "string")
    return data[offset:offset + pos], max_bytes


def _decode(encoding: Encoding, raw: bytes) -> str:
    codec = _encodings[encoding][0]
    if encoding == Encoding.UTF16:
        if raw.startswith(codecs.BOM_UTF16_BE):
            codec, raw = 'utf-16-be', raw[2:]
        elif raw.startswith(codecs.BOM_UTF16_LE):
            raw = raw[2:]
        # utf-16 without BOM is usually utf-16-le
    try:
        return raw.decode(codec)
    except UnicodeDecodeError as e:
        raise ID3CorruptFrameError(f"invalid {codec} text: {e}") from e


def _read_string(encoding: Encoding | int, max_bytes: int, data: bytes,
                 offset: int) -> tuple[str, int]:
    if max_bytes < 0:
        raise ID3CorruptFrameError(f"string: negative budget {max_bytes}")

    try:
        encoding = Encoding(encoding)
    except ValueError:
        raise ID3CorruptFrameError(
            f'Invalid Encoding: {encoding!r}') from None

    if _encodings[encoding][1] == b'\x00':
        raw, consumed = _split_single(max_bytes, data, offset)
    else:
        raw, consumed = _split_double(max_bytes, data, offset)

    return _decode(encoding, raw), consumed


def decode_string(encoding: Encoding | int, max_bytes: int,
                  data: bytes) -> tuple[str, int, bytes]:
    """Decodes one terminated string from the start of `data`, looking at
    no more than `max_bytes` bytes.

    Returns:
        (text, consumed, rest) where `consumed` includes the terminator,
        or equals `max_bytes` if no terminator was found in the budget.
    Raises:
        ID3CorruptFrameError
    """

    text, consumed = _read_string(encoding, max_bytes, data, 0)
    return text, consumed, data[consumed:]


def decode_string_sequence(encoding: Encoding | int, max_bytes: int,
                           data: bytes) -> tuple[list[str], bytes]:
    """Decodes consecutive terminated strings until `max_bytes` bytes
    are used up.
    """

    values: list[str] = []
    offset = 0
    while max_bytes > 0:
        value, consumed = _read_string(encoding, max_bytes, data, offset)
        values.append(value)
        offset += consumed
        max_bytes -= consumed
    return values, data[offset:]


class Spec[T]:

    name: str
    default: T

    def __init__(self, name: str, default: T):
        self.name = name
        self.default = default

    @override
    def __hash__(self) -> int:
        raise TypeError("Spec objects are unhashable")

    def read(self, frame: Frame, data: bytes,
             budget: int) -> tuple[T, int, bytes]:
        """
        Returns:
            (value: object, consumed: int, left_data: bytes)
        Raises:
            ID3CorruptFrameError
        """

        raise NotImplementedError


class ByteSpec(Spec[int]):

    def __init__(self, name: str, default: int = 0):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes, budget: int):
        checked_sub(budget, 1, self.name)
        value = read_full(data, 0, 1, self.name)[0]
        return value, 1, data[1:]


class EncodingSpec(ByteSpec):

    def __init__(self, name: str, default: Encoding = Encoding.LATIN1):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes, budget: int):
        enc, consumed, data = super().read(frame, data, budget)
        if enc not in (Encoding.LATIN1, Encoding.UTF16, Encoding.UTF16BE,
                       Encoding.UTF8):
            raise ID3CorruptFrameError(f'Invalid Encoding: {enc!r}')
        return Encoding(enc), consumed, data


class StringSpec(Spec[bytes]):
    """A fixed size payload, kept as is."""

    len: int

    def __init__(self, name: str, length: int, default: bytes | None = None):
        if default is None:
            default = b"\x00" * length
        super().__init__(name, default)
        self.len = length

    @override
    def read(self, frame: Frame, data: bytes, budget: int):
        checked_sub(budget, self.len, self.name)
        chunk = read_full(data, 0, self.len, self.name)
        return chunk, self.len, data[self.len:]


class Latin1TextSpec(Spec[str]):

    def __init__(self, name: str, default: str = ""):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes, budget: int):
        return decode_string(Encoding.LATIN1, budget, data)


class EncodedTextSpec(Spec[str]):

    def __init__(self, name: str, default: str = ""):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes, budget: int):
        return decode_string(frame.encoding, budget, data)


class EncodedTextListSpec(Spec[list[str]]):
    """All strings left in the frame, in the frame's encoding."""

    def __init__(self, name: str, default: list[str] | None = None):
        if default is None:
            default = []
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes, budget: int):
        values, data = decode_string_sequence(frame.encoding, budget, data)
        return values, budget, data


class BinaryDataSpec(Spec[bytes]):

    def __init__(self, name: str, default: bytes = b""):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes, budget: int):
        value = read_full(data, 0, budget, self.name)
        return value, budget, data[budget:]
