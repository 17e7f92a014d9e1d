# Copyright (C) 2005  Michael Urman
#               2006  Lukas Lalinsky
#               2013  Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""ID3v2 reading from in-memory data.

This is based off of the following references:

* http://id3.org/id3v2.4.0-structure
* http://id3.org/id3v2.4.0-frames
* http://id3.org/id3v2.3.0

Only ID3v2.3 and ID3v2.4 tags are read. Text frames (T???), TXXX, COMM
and APIC are decoded; other known frames are skipped and parsing stops at
the first frame ID it doesn't know.

::

    tags, audio = id3parse.parse_tag(data)
    print(tags["TIT2"].text)

Since this file's documentation is a little unwieldy, you are probably
interested in :func:`parse_tag` to start with.
"""

version = (1, 0, 0)
"""Version tuple."""

version_string = ".".join(map(str, version))
"""Version string."""

from ._util import error as error, \
    ID3NoHeaderError as ID3NoHeaderError, \
    ID3UnsupportedVersionError as ID3UnsupportedVersionError, \
    ID3CorruptFrameError as ID3CorruptFrameError, \
    ID3BadExtendedHeaderError as ID3BadExtendedHeaderError, \
    decode_synchsafe as decode_synchsafe, \
    decode_plain_u32 as decode_plain_u32
from ._specs import Encoding as Encoding, PictureType as PictureType, \
    decode_string as decode_string, \
    decode_string_sequence as decode_string_sequence
from ._frames import Frame as Frame, Frames as Frames, \
    TextList as TextList, UserText as UserText, Comment as Comment, \
    Picture as Picture, KNOWN_FRAMES as KNOWN_FRAMES, \
    Decoded as Decoded, SkipKnown as SkipKnown, Halt as Halt, \
    decode_frame as decode_frame
from ._tags import ID3Header as ID3Header, ID3Tags as ID3Tags, \
    read_frames as read_frames, parse_tag as parse_tag


__all__ = ['parse_tag', 'ID3Tags', 'Frames', 'KNOWN_FRAMES', 'error']
