import os
import sys

import afl
from fuzztools import run_all


SMOKE = b"ID3\x04\x00\x00\x00\x00\x00\x0cTIT2\x00\x00\x00\x02\x00\x00\x00a"


def main():
    run_all(SMOKE)

    buffer = sys.stdin.buffer
    while afl.loop(1000):
        run_all(buffer.read())
        buffer.seek(0)


if __name__ == '__main__':
    main()
    os._exit(0)
