# Copyright 2015 Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import os
import signal
from types import FrameType


class SignalHandler:
    """Turns SIGINT/SIGTERM (and SIGHUP) into SystemExit, naming the file
    that was being read when it happened.
    """

    current: str | None

    def __init__(self):
        self.current = None

    def init(self) -> None:
        _ = signal.signal(signal.SIGINT, self._handler)
        _ = signal.signal(signal.SIGTERM, self._handler)
        if os.name != "nt":
            _ = signal.signal(signal.SIGHUP, self._handler)

    def _handler(self, signum: int, frame: FrameType | None) -> None:
        if self.current is None:
            raise SystemExit("Aborted...")
        raise SystemExit(f"Aborted while reading {self.current}")
