# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Sequence
from typing import Any, Final, NamedTuple, override

from ._specs import (
    BinaryDataSpec,
    ByteSpec,
    EncodedTextListSpec,
    EncodedTextSpec,
    Encoding,
    EncodingSpec,
    Latin1TextSpec,
    PictureType,
    Spec,
    StringSpec,
)
from ._util import ID3CorruptFrameError, checked_sub, read_full

logger = logging.getLogger(__name__)


class Frame:
    """Fundamental unit of ID3 data.

    ID3 tags are split into frames. Each frame has a potentially
    different structure, described by its list of specs.
    """

    _frame_id: str = "XXXX"
    _framespec: Sequence[Spec[Any]] = []

    def __init__(self, *args: object, **kwargs: object):
        for checker, val in zip(self._framespec, args, strict=False):
            setattr(self, checker.name, val)
        for checker in self._framespec[len(args):]:
            if checker.name in kwargs:
                setattr(self, checker.name, kwargs[checker.name])
            else:
                setattr(self, checker.name, copy.copy(checker.default))

    @property
    def FrameID(self) -> str:
        """ID3v2 four character frame ID"""

        return self._frame_id

    @override
    def __eq__(self, other: object):
        if type(other) is not type(self):
            return NotImplemented
        assert isinstance(other, Frame)
        if self.FrameID != other.FrameID:
            return False
        return all(getattr(self, s.name) == getattr(other, s.name)
                   for s in self._framespec)

    __hash__ = None  # type: ignore[assignment]

    @override
    def __repr__(self) -> str:
        """Python representation of a frame.

        The string returned is a valid Python expression to construct
        a copy of this frame.
        """
        kw: list[str] = []
        for attr in self._framespec:
            # so repr works during __init__
            if hasattr(self, attr.name):
                kw.append(f'{attr.name}={getattr(self, attr.name)!r}')
        return '{}({})'.format(type(self).__name__, ', '.join(kw))

    def _readData(self, size: int, data: bytes) -> bytes:
        """Fills the frame from `size` bytes of `data`.

        Every spec gets what is left of the frame as its budget. Bytes
        nobody consumed are skipped so the frame always uses `size`.

        Raises ID3CorruptFrameError; Returns leftover data
        """

        budget = size
        for reader in self._framespec:
            value, consumed, data = reader.read(self, data, budget)
            budget = checked_sub(budget, consumed, reader.name)
            setattr(self, reader.name, value)

        if budget:
            logger.debug("%s: skipping %d trailing bytes",
                         self.FrameID, budget)
            read_full(data, 0, budget, "frame data")
            data = data[budget:]
        return data

    def pprint(self) -> str:
        """Return a human-readable representation of the frame."""
        return f"{self.FrameID}={self._pprint()}"

    def _pprint(self) -> str:
        return "[unrepresentable data]"


class TextList(Frame):
    """Text strings of any T??? frame.

    Text frames have a 'text' attribute which is the list of strings,
    and an 'encoding' attribute; 0 for ISO-8859 1, 1 UTF-16, 2 for
    UTF-16BE, and 3 for UTF-8.
    """

    encoding: Encoding
    text: list[str]

    _framespec = [
        EncodingSpec('encoding'),
        EncodedTextListSpec('text'),
    ]

    def __init__(self, frame_id: str, *args: object, **kwargs: object):
        self._frame_id = frame_id
        super().__init__(*args, **kwargs)

    @override
    def __repr__(self) -> str:
        kw = [f'{s.name}={getattr(self, s.name)!r}' for s in self._framespec]
        return '{}({!r}, {})'.format(
            type(self).__name__, self._frame_id, ', '.join(kw))

    @override
    def __str__(self):
        return '\u0000'.join(self.text)

    def __getitem__(self, item: int) -> str:
        return self.text[item]

    def __iter__(self):
        return iter(self.text)

    def __len__(self) -> int:
        return len(self.text)

    @override
    def _pprint(self):
        return " / ".join(self.text)


class UserText(Frame):
    """User-defined text data (TXXX).

    Description and value share the frame's encoding.
    """

    _frame_id = "TXXX"

    encoding: Encoding
    desc: str
    text: str

    _framespec = [
        EncodingSpec('encoding'),
        EncodedTextSpec('desc'),
        EncodedTextSpec('text'),
    ]

    @override
    def _pprint(self):
        return f"{self.desc}={self.text}"


class Comment(Frame):
    """User comment (COMM).

    Like TXXX, plus the three letter language code in 'lang', kept as
    the raw bytes found in the file.
    """

    _frame_id = "COMM"

    encoding: Encoding
    lang: bytes
    desc: str
    text: str

    _framespec = [
        EncodingSpec('encoding'),
        StringSpec('lang', length=3, default=b"XXX"),
        EncodedTextSpec('desc'),
        EncodedTextSpec('text'),
    ]

    @override
    def _pprint(self):
        lang = self.lang.decode("latin1")
        return f"{self.desc}={lang}={self.text}"


class Picture(Frame):
    """Attached Picture (APIC).

    Attributes:

    * encoding -- text encoding for the description
    * mime -- a MIME type (e.g. image/jpeg), always Latin-1
    * type -- the raw picture type byte (3 is the album front cover)
    * desc -- a text description of the image
    * data -- raw image data, as a byte string
    """

    _frame_id = "APIC"

    encoding: Encoding
    mime: str
    type: int
    desc: str
    data: bytes

    _framespec = [
        EncodingSpec('encoding'),
        Latin1TextSpec('mime'),
        ByteSpec('type', default=PictureType.COVER_FRONT),
        EncodedTextSpec('desc'),
        BinaryDataSpec('data'),
    ]

    @override
    def _pprint(self):
        try:
            type_desc = PictureType(self.type)._pprint()
        except ValueError:
            type_desc = str(self.type)
        if self.desc:
            type_desc += f" ({self.desc})"

        return f"{type_desc}, {self.mime}, {len(self.data)} bytes"


Frames: Final[dict[str, type[Frame]]] = {
    "TXXX": UserText,
    "COMM": Comment,
    "APIC": Picture,
}
"""All frames with their own layout, by frame ID"""

KNOWN_FRAMES: Final = frozenset([
    # ID3v2.4
    "AENC", "ASPI", "COMR", "ENCR", "EQU2", "ETCO", "GEOB", "GRID",
    "LINK", "MCDI", "MLLT", "OWNE", "PCNT", "POPM", "POSS", "PRIV",
    "RBUF", "RVA2", "RVRB", "SEEK", "SIGN", "SYLT", "SYTC", "UFID",
    "USER", "USLT", "WCOM", "WCOP", "WOAF", "WOAR", "WOAS", "WORS",
    "WPAY", "WPUB", "WXXX",
    # ID3v2.3 only
    "EQUA", "IPLS", "RVAD",
    # chapter addendum
    "CHAP", "CTOC",
    # iTunes
    "GRP1", "MVIN", "MVNM", "PCST", "WFED",
])
"""Frame IDs which are recognised but not decoded; parsing skips them.

T??? frames, TXXX, COMM and APIC are decoded and not part of this set.
"""

_TEXT_FRAME_ID: Final = re.compile(r"T[0-9A-Z]+")


class Decoded(NamedTuple):
    frame: Frame
    rest: bytes


class SkipKnown(NamedTuple):
    rest: bytes


class Halt(NamedTuple):
    rest: bytes


type FrameOutcome = Decoded | SkipKnown | Halt


def decode_frame(frame_id: str, size: int, data: bytes,
                 known_frames: frozenset[str] | set[str] = KNOWN_FRAMES,
                 ) -> FrameOutcome:
    """Decodes the body of one frame.

    Only the `size` bytes of the body are handed to the frame's specs,
    whatever follows them in `data` is never scanned.

    Args:
        frame_id: the four character frame ID
        size: the body size declared in the frame header
        data: the buffer (bytes or memoryview), starting at the frame body
        known_frames: IDs to skip instead of halting on
    Returns:
        `Decoded` with the frame, `SkipKnown` if the frame was skipped
        or `Halt` (with `data` untouched) if the ID is not known at all.
        A TXXX, COMM, APIC or text frame with size 0 has no room for its
        encoding byte; it is dropped and reported as `SkipKnown`.
    Raises:
        ID3CorruptFrameError
    """

    if frame_id in Frames:
        frame = Frames[frame_id]()
    elif _TEXT_FRAME_ID.fullmatch(frame_id):
        frame = TextList(frame_id)
    elif frame_id in known_frames:
        read_full(data, 0, size, frame_id)
        logger.debug("skipping %s frame (%d bytes)", frame_id, size)
        return SkipKnown(data[size:])
    else:
        logger.debug("unknown frame %r, stopping", frame_id)
        return Halt(data)

    try:
        body = bytes(read_full(data, 0, size, "frame"))
        if size == 0:
            # drop empty frames
            logger.debug("dropping empty %s frame", frame_id)
            return SkipKnown(data)
        frame._readData(size, body)
    except ID3CorruptFrameError as e:
        raise ID3CorruptFrameError(f"{frame_id}: {e}") from e

    return Decoded(frame, data[size:])
