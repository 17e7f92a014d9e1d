# Copyright (C) 2005  Michael Urman
#               2013  Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Utility classes for id3parse.

You should not rely on the interfaces here being stable. They are
intended for internal use in id3parse only.
"""

from __future__ import annotations

import struct
from typing import Self


class error(Exception):
    pass


class ID3NoHeaderError(error, ValueError):
    pass


class ID3UnsupportedVersionError(error, NotImplementedError):
    pass


class ID3CorruptFrameError(error, ValueError):
    pass


class ID3BadExtendedHeaderError(error, ValueError):
    pass


class cdata:
    """C character buffer to Python numeric type conversions."""

    from struct import error
    error = error

    uint_be = staticmethod(lambda data: struct.unpack('>I', data)[0])


class BitPaddedInt(int):
    """An integer stored with only the lower `bits` bits of every byte
    in use (synchsafe integers use 7).
    """

    bits: int
    bigendian: bool

    def __new__(cls, value: bytes, bits: int = 7,
                bigendian: bool = True) -> Self:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BitPaddedInt needs a bytes-like value")

        mask = (1 << bits) - 1
        numeric_value = 0
        shift = 0

        data = bytes(value)
        if bigendian:
            data = data[::-1]
        for byte in data:
            numeric_value += (byte & mask) << shift
            shift += bits

        self = int.__new__(cls, numeric_value)
        self.bits = bits
        self.bigendian = bigendian
        return self

    @staticmethod
    def has_valid_padding(value: bytes, bits: int = 7) -> bool:
        """Whether the padding bits are all zero"""

        assert bits <= 8

        mask = (((1 << (8 - bits)) - 1) << bits)
        return not any(byte & mask for byte in bytes(value))


def decode_synchsafe(data: bytes) -> int:
    """Decodes a big endian synchsafe integer (7 bits per byte).

    The top bit of each byte is masked off, not validated. A single byte
    decodes to itself.
    """

    return int(BitPaddedInt(data))


def decode_plain_u32(data: bytes) -> int:
    """Decodes a plain big endian 32 bit unsigned integer."""

    try:
        return cdata.uint_be(bytes(data))
    except cdata.error as e:
        raise ID3CorruptFrameError(
            f"expected 4 bytes for an integer, got {len(data)}") from e


def is_valid_frame_id(frame_id: str) -> bool:
    return len(frame_id) == 4 and frame_id.isascii() and \
        frame_id.isalnum() and frame_id.upper() == frame_id


def checked_sub(value: int, amount: int, what: str) -> int:
    """Returns value - amount, raises ID3CorruptFrameError if that
    would be negative.
    """

    result = value - amount
    if result < 0:
        raise ID3CorruptFrameError(
            f"{what}: needs {amount} bytes but only {value} left")
    return result


def read_full(data: bytes, offset: int, size: int, what: str) -> bytes:
    """Returns `size` bytes of `data` starting at `offset`"""

    if size < 0 or offset < 0:
        raise ID3CorruptFrameError(f"{what}: invalid size {size}")
    if len(data) < offset + size:
        raise ID3CorruptFrameError(
            f"{what}: needs {size} bytes but buffer has "
            f"{max(len(data) - offset, 0)}")
    return data[offset:offset + size]
