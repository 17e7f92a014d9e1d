# Copyright 2005 Joe Wreschnig
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Full ID3v2 frame list for any given file."""

from __future__ import annotations

import argparse
import logging
import sys

from ._util import SignalHandler

_sig = SignalHandler()


class Arguments(argparse.Namespace):
    files: list[str] = []
    debug: bool = False


def main(argv: list[str]) -> int:
    from id3parse import error, parse_tag

    parser = argparse.ArgumentParser(usage="%(prog)s [options] FILE [FILE...]")
    parser.add_argument("--debug", action="store_true",
                        help="Log what the parser skips and why it stops")
    parser.add_argument("files", nargs="+", metavar="FILE",
                        help="Files to inspect")

    args = parser.parse_args(argv[1:], namespace=Arguments())

    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s: %(message)s")

    status = 0
    for filename in args.files:
        print("--", filename)
        _sig.current = filename
        try:
            with open(filename, "rb") as h:
                data = h.read()
            tags, rest = parse_tag(data)
        except (OSError, error) as err:
            print(str(err))
            status = 1
        else:
            if tags.version is None:
                print("- No ID3v2 tag")
            else:
                print("- ID3v2.%d.%d (%d bytes)" % (
                    tags.version[1:] + (tags.size,)))
                if len(tags):
                    print(tags.pprint())
                if tags.halted is not None:
                    print("- Stopped at unknown frame %s" % tags.halted)
            print("- %d bytes of audio data" % len(rest))
        print("")

    _sig.current = None
    return status


def entry_point() -> None:
    _sig.init()
    raise SystemExit(main(sys.argv))
