import glob
import os
import sys
import textwrap
import traceback

from id3parse import error, parse_tag


KNOWN_FRAME_SETS = [None, frozenset(), frozenset(["PRIV", "XYZ1"])]


def run(data, known_frames):
    try:
        if known_frames is None:
            tags, rest = parse_tag(data)
        else:
            tags, rest = parse_tag(data, known_frames)
    except error:
        return

    raw = bytes(data)
    assert raw.endswith(rest)
    if tags.version is None:
        assert rest == raw
    tags.pprint()
    repr(tags)


def run_all(data):
    for known_frames in KNOWN_FRAME_SETS:
        run(data, known_frames)
        run(memoryview(data), known_frames)


def group_crashes(result_path):
    """Re-checks all errors, and groups them by stack trace
    and error type.
    """

    crash_paths = []
    pattern = os.path.join(result_path, '**', 'crashes', '*')
    for path in glob.glob(pattern, recursive=True):
        if os.path.splitext(path)[-1] == ".txt":
            continue
        crash_paths.append(path)

    if not crash_paths:
        print("No crashes found")
        return

    def norm_exc():
        lines = traceback.format_exc().splitlines()
        if ":" in lines[-1]:
            lines[-1], message = lines[-1].split(":", 1)
        else:
            message = ""
        return "\n".join(lines), message.strip()

    traces = {}
    messages = {}
    for path in crash_paths:
        with open(path, "rb") as h:
            data = h.read()
        try:
            run_all(data)
        except Exception:
            trace, message = norm_exc()
            messages.setdefault(trace, set()).add(message)
            traces.setdefault(trace, []).append(path)

    for trace, paths in traces.items():
        print('-' * 80)
        print("\n".join(paths))
        print()
        print(textwrap.indent(trace, '    '))
        print(messages[trace])

    print("%d crashes with %d traces" % (len(crash_paths), len(traces)))


if __name__ == '__main__':
    group_crashes(sys.argv[1])
