# Copyright 2005 Michael Urman
# Copyright 2016 Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable, Iterator, Mapping
from typing import Final, override

from ._frames import KNOWN_FRAMES, Decoded, Frame, Halt, decode_frame
from ._util import (
    ID3BadExtendedHeaderError,
    ID3NoHeaderError,
    ID3UnsupportedVersionError,
    cdata,
    decode_plain_u32,
    decode_synchsafe,
    is_valid_frame_id,
)

logger = logging.getLogger(__name__)

# flag bits that have to be zero for a frame header to be accepted
_FRAME_FLAGS_ZERO: Final = 0x8F60


class ID3Header:
    """The 10 byte ID3v2 tag header, plus the size of the extended header
    once it has been skipped.

    Raises:
        ID3NoHeaderError: if `data` doesn't start with an ID3v2 header
        ID3UnsupportedVersionError: for anything but ID3v2.3 and ID3v2.4
    """

    _V24: Final = (2, 4, 0)
    _V23: Final = (2, 3, 0)

    version: tuple[int, int, int]
    size: int
    """Tag size declared in the header, the header itself excluded"""

    ext_size: int = 0
    """Bytes used by the extended header"""

    _flags: int

    def __init__(self, data: bytes):
        if len(data) < 10:
            raise ID3NoHeaderError("too short for an ID3 header")

        id3, vmaj, vrev, flags, size = struct.unpack('>3sBBB4s', data[:10])
        if id3 != b'ID3':
            raise ID3NoHeaderError("doesn't start with an ID3 tag")
        if flags & 0x0f:
            raise ID3NoHeaderError(f"invalid header flags {flags:#04x}")
        if vmaj not in (3, 4):
            raise ID3UnsupportedVersionError(f"ID3v2.{vmaj} not supported")

        self._flags = flags
        self.size = decode_synchsafe(size)
        self.version = (2, vmaj, vrev)

    @property
    def major_version(self) -> int:
        return self.version[1]

    f_unsynch = property(lambda s: bool(s._flags & 0x80))
    f_extended = property(lambda s: bool(s._flags & 0x40))
    f_experimental = property(lambda s: bool(s._flags & 0x20))
    f_footer = property(lambda s: bool(s._flags & 0x10))

    def skip_extended(self, data: bytes) -> bytes:
        """Skips the extended header at the start of `data` if the header
        says there is one. Sets `ext_size`; returns the data after it.

        Raises:
            ID3BadExtendedHeaderError
        """

        if not self.f_extended:
            return data

        frame_id = bytes(data[:4]).decode("ascii", "replace")
        if is_valid_frame_id(frame_id):
            # Some tagger sets the extended header flag but
            # doesn't write an extended header; in this case, the
            # ID3 data follows immediately.
            logger.debug("extended header flag set but %r follows",
                         frame_id)
            return data

        if self.version >= self._V24:
            # "Where the 'Extended header size' is the size of the whole
            # extended header, stored as a 32 bit synchsafe integer."
            # size, number of flag bytes (always 1), flags
            fixed = 6
            if len(data) < fixed:
                raise ID3BadExtendedHeaderError("extended header truncated")
            ext_size = decode_synchsafe(data[:4])
            if data[4] != 1:
                raise ID3BadExtendedHeaderError(
                    f"invalid flag byte count {data[4]}")
            total = ext_size
        else:
            # "Where the 'Extended header size', currently 6 or 10 bytes,
            # excludes itself."
            # size, flags, padding size
            fixed = 10
            if len(data) < fixed:
                raise ID3BadExtendedHeaderError("extended header truncated")
            ext_size = cdata.uint_be(data[:4])
            total = ext_size + 4

        skip = ext_size - 6
        if skip < 0:
            raise ID3BadExtendedHeaderError(
                f"extended header size {ext_size} too small")
        if len(data) < fixed + skip:
            raise ID3BadExtendedHeaderError("extended header truncated")

        logger.debug("skipping %d byte extended header", total)
        self.ext_size = total
        return data[fixed + skip:]


class ID3Tags(Mapping[str, Frame]):
    """The frames of one ID3v2 tag, keyed by frame ID.

    Read only. If a frame ID appears more than once the last frame wins.

    Attributes:
        major_version (int): 3 or 4, 0 if there was no tag
        version (tuple[int]): ID3 tag version as a tuple, `None` if there
            was no tag
        halted (str): ID of the unknown frame parsing stopped at, or `None`
    """

    _header: ID3Header | None
    halted: str | None

    def __init__(self, frames: Iterable[Frame] = (),
                 header: ID3Header | None = None, halted: str | None = None):
        self._frames: dict[str, Frame] = {}
        for frame in frames:
            self._frames[frame.FrameID] = frame
        self._header = header
        self.halted = halted

    @property
    def major_version(self) -> int:
        if self._header is not None:
            return self._header.major_version
        return 0

    @property
    def version(self) -> tuple[int, int, int] | None:
        if self._header is not None:
            return self._header.version
        return None

    @property
    def size(self) -> int:
        """The total size of the ID3 tag, including the header"""

        if self._header is not None:
            return self._header.size + 10
        return 0

    @override
    def __getitem__(self, key: str) -> Frame:
        return self._frames[key]

    @override
    def __iter__(self) -> Iterator[str]:
        return iter(self._frames)

    @override
    def __len__(self) -> int:
        return len(self._frames)

    @override
    def __repr__(self) -> str:
        return f"<{type(self).__name__} v{self.major_version} " \
            f"{list(self._frames.values())!r}>"

    def pprint(self) -> str:
        """
        Returns:
            text: tags in a human-readable format.

        "Human-readable" is used loosely here. The format is intended
        to mirror that used for Vorbis or APEv2 output, e.g.

            ``TIT2=My Title``

        However, ID3 frames can have multiple keys:

            ``TXXX=Key=value``
        """

        frames = sorted(frame.pprint() for frame in self.values())
        return "\n".join(frames)


def read_frames(header: ID3Header, data: bytes,
                known_frames: frozenset[str] | set[str] = KNOWN_FRAMES,
                ) -> tuple[list[Frame], str | None, bytes]:
    """Reads frames until the tag size is used up, padding or an invalid
    frame header is reached or an unknown frame ID shows up.

    Args:
        header: the tag header, with the extended header already skipped
        data: the buffer (bytes or memoryview), starting at the first
            frame header
        known_frames: frame IDs to skip instead of halting on
    Returns:
        (frames, halted, rest): frames in file order, the ID of the frame
        that stopped parsing (or `None`) and the data after the last
        frame read. On halt `rest` starts at that frame's header.
    Raises:
        ID3CorruptFrameError
    """

    frames: list[Frame] = []
    remaining = header.size - header.ext_size
    v24 = header.version >= header._V24
    # advancing a view doesn't copy what follows the tag
    buf = memoryview(data)

    while remaining > 0:
        if len(buf) < 10:
            break
        name, size_data, flags = struct.unpack('>4s4sH', buf[:10])
        if name.startswith(b'\x00'):
            logger.debug("padding reached")
            break
        if flags & _FRAME_FLAGS_ZERO:
            logger.debug("invalid frame header %r", bytes(buf[:10]))
            break
        frame_id = name.decode("latin1")

        if v24:
            size = decode_synchsafe(size_data)
        else:
            size = decode_plain_u32(size_data)

        outcome = decode_frame(frame_id, size, buf[10:], known_frames)
        if isinstance(outcome, Halt):
            return frames, frame_id, bytes(data[len(data) - len(buf):])
        elif isinstance(outcome, Decoded):
            frames.append(outcome.frame)

        buf = outcome.rest
        remaining -= size + 10

    return frames, None, bytes(data[len(data) - len(buf):])


def parse_tag(data: bytes,
              known_frames: frozenset[str] | set[str] = KNOWN_FRAMES,
              ) -> tuple[ID3Tags, bytes]:
    """Decodes the ID3v2 tag at the start of `data`.

    Args:
        data: bytes-like, the start of a file
        known_frames: frame IDs to skip; any other ID that isn't a text
            frame, TXXX, COMM or APIC stops parsing
    Returns:
        (tags, rest): `rest` starts after the tag (padding included), or
        at the frame header where parsing stopped. If `data` doesn't
        start with an ID3 tag, `tags` is empty and `rest` is all of `data`.
    Raises:
        ID3UnsupportedVersionError: for ID3v2.2 and unknown versions
        ID3BadExtendedHeaderError: if the extended header is malformed
        ID3CorruptFrameError: if a frame doesn't fit into the data
    """

    data = bytes(data)

    try:
        header = ID3Header(data)
    except ID3NoHeaderError as e:
        logger.debug("no ID3 tag: %s", e)
        return ID3Tags(), data

    body = header.skip_extended(memoryview(data)[10:])
    frames, halted, rest = read_frames(header, body, known_frames)
    tags = ID3Tags(frames, header, halted)
    consumed = len(data) - len(rest)

    if halted is not None:
        return tags, rest

    end = max(tags.size, consumed)
    if end > len(data):
        logger.debug("tag ends %d bytes past the data", end - len(data))
    return tags, data[end:]
