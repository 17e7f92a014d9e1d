from tests import TestCase

from id3parse import Frames, KNOWN_FRAMES, TextList, UserText, Comment, \
    Picture, Frame, Encoding, Decoded, SkipKnown, Halt, decode_frame, \
    ID3CorruptFrameError
from id3parse._util import is_valid_frame_id


class TTXXX(TestCase):

    def test_utf8(self):
        data = b"\x03key\x00value\x00"
        self.assertEqual(len(data), 10)
        res = decode_frame("TXXX", 10, data + b"rest")
        self.assertTrue(isinstance(res, Decoded))
        self.assertEqual(res.frame, UserText(encoding=3, desc="key",
                                             text="value"))
        self.assertEqual(res.rest, b"rest")

    def test_value_not_terminated(self):
        res = decode_frame("TXXX", 8, b"\x00key\x00valXX")
        self.assertEqual(res.frame.desc, "key")
        self.assertEqual(res.frame.text, "val")
        self.assertEqual(res.rest, b"XX")

    def test_trailing_data_skipped(self):
        res = decode_frame("TXXX", 7, b"\x00a\x00b\x00XXnext")
        self.assertEqual(res.frame.desc, "a")
        self.assertEqual(res.frame.text, "b")
        self.assertEqual(res.rest, b"next")

    def test_utf16(self):
        data = b"\x01\xff\xfek\x00\x00\x00\xff\xfev\x00\x00\x00"
        res = decode_frame("TXXX", len(data), data)
        self.assertEqual(res.frame.encoding, Encoding.UTF16)
        self.assertEqual(res.frame.desc, "k")
        self.assertEqual(res.frame.text, "v")
        self.assertEqual(res.rest, b"")

    def test_desc_longer_than_frame(self):
        res = decode_frame("TXXX", 3, b"\x00abcdef\x00")
        self.assertEqual(res.frame.desc, "ab")
        self.assertEqual(res.frame.text, "")
        self.assertEqual(res.rest, b"cdef\x00")

    def test_invalid_encoding(self):
        self.assertRaises(ID3CorruptFrameError,
                          decode_frame, "TXXX", 4, b"\x05a\x00b")

    def test_pprint(self):
        frame = UserText(encoding=3, desc="key", text="value")
        self.assertEqual(frame.pprint(), "TXXX=key=value")
        self.assertEqual(frame.FrameID, "TXXX")


class TCOMM(TestCase):

    def test_read(self):
        data = b"\x00eng" + b"desc\x00" + b"text"
        res = decode_frame("COMM", len(data), data + b"\x00\x00")
        self.assertEqual(res.frame, Comment(
            encoding=0, lang=b"eng", desc="desc", text="text"))
        self.assertEqual(res.rest, b"\x00\x00")

    def test_lang_kept_raw(self):
        data = b"\x03\xff\x00\x01\x00x"
        res = decode_frame("COMM", len(data), data)
        self.assertEqual(res.frame.lang, b"\xff\x00\x01")
        self.assertEqual(res.frame.desc, "")
        self.assertEqual(res.frame.text, "x")

    def test_too_small_for_lang(self):
        try:
            decode_frame("COMM", 3, b"\x00eng\x00\x00")
        except ID3CorruptFrameError as e:
            self.assertTrue(str(e).startswith("COMM:"))
        else:
            self.fail("no error")

    def test_pprint(self):
        frame = Comment(encoding=0, lang=b"eng", desc="d", text="t")
        self.assertEqual(frame.pprint(), "COMM=d=eng=t")


class TAPIC(TestCase):

    def test_read(self):
        data = b"\x00image/png\x00\x03cover\x00PNGDATA"
        self.assertEqual(len(data), 25)
        res = decode_frame("APIC", 25, data + b"TIT2")
        self.assertEqual(res.frame, Picture(
            encoding=0, mime="image/png", type=3, desc="cover",
            data=b"PNGDATA"))
        self.assertEqual(res.rest, b"TIT2")

    def test_mime_always_latin1(self):
        data = (b"\x01image/jpeg\x00\x00" + b"\xff\xfea\x00\x00\x00" +
                b"\xff\xd8")
        res = decode_frame("APIC", len(data), data)
        self.assertEqual(res.frame.mime, "image/jpeg")
        self.assertEqual(res.frame.type, 0)
        self.assertEqual(res.frame.desc, "a")
        self.assertEqual(res.frame.data, b"\xff\xd8")

    def test_picture_type_raw(self):
        data = b"\x00\x00\x63\x00"
        res = decode_frame("APIC", len(data), data)
        self.assertEqual(res.frame.type, 0x63)
        self.assertEqual(res.frame.data, b"")

    def test_data_is_bytes(self):
        data = bytearray(b"\x00\x00\x03\x00abc")
        res = decode_frame("APIC", len(data), bytes(data))
        data[4:] = b"xyz"
        self.assertEqual(res.frame.data, b"abc")
        self.assertTrue(isinstance(res.frame.data, bytes))

    def test_no_room_for_type(self):
        self.assertRaises(ID3CorruptFrameError,
                          decode_frame, "APIC", 2, b"\x00image/png\x00\x03")

    def test_pprint(self):
        frame = Picture(encoding=0, mime="image/png", type=3, desc="",
                        data=b"abc")
        self.assertEqual(frame.pprint(), "APIC=cover front, image/png, 3 bytes")
        frame = Picture(encoding=0, mime="image/png", type=99, desc="x",
                        data=b"")
        self.assertEqual(frame.pprint(), "APIC=99 (x), image/png, 0 bytes")


class TTextList(TestCase):

    def test_single(self):
        res = decode_frame("TIT2", 6, b"\x00Song\x00")
        self.assertEqual(res, Decoded(TextList("TIT2", 0, ["Song"]), b""))

    def test_multiple(self):
        res = decode_frame("TPE1", 4, b"\x03a\x00b\x00")
        self.assertEqual(res.frame.text, ["a", "b"])
        self.assertEqual(res.rest, b"\x00")

    def test_unknown_text_frame_id(self):
        res = decode_frame("TZZ9", 2, b"\x00a")
        self.assertEqual(res.frame.FrameID, "TZZ9")
        self.assertEqual(res.frame.text, ["a"])

    def test_only_encoding(self):
        res = decode_frame("TALB", 1, b"\x00rest")
        self.assertEqual(res.frame.text, [])
        self.assertEqual(res.rest, b"rest")

    def test_empty_frame_dropped(self):
        self.assertEqual(decode_frame("TIT2", 0, b"next"), SkipKnown(b"next"))

    def test_frame_larger_than_data(self):
        self.assertRaises(ID3CorruptFrameError,
                          decode_frame, "TIT2", 20, b"\x00Song\x00")

    def test_list_interface(self):
        frame = TextList("TIT2", Encoding.UTF8, ["a", "b"])
        self.assertEqual(list(frame), ["a", "b"])
        self.assertEqual(len(frame), 2)
        self.assertEqual(frame[1], "b")
        self.assertEqual(str(frame), "a\x00b")
        self.assertEqual(frame.pprint(), "TIT2=a / b")

    def test_repr(self):
        self.assertEqual(repr(TextList("TIT2", 0, ["a"])),
                         "TextList('TIT2', encoding=0, text=['a'])")

    def test_eq(self):
        self.assertReallyEqual(TextList("TIT2", 0, ["a"]),
                               TextList("TIT2", 0, ["a"]))
        self.assertReallyNotEqual(TextList("TIT2", 0, ["a"]),
                                  TextList("TIT3", 0, ["a"]))
        self.assertReallyNotEqual(TextList("TIT2", 0, ["a"]),
                                  TextList("TIT2", 3, ["a"]))
        self.assertReallyNotEqual(TextList("TXXX", 0, ["a"]),
                                  UserText(encoding=0, desc="", text="a"))


class TSkipHalt(TestCase):

    def test_known_skipped(self):
        self.assertEqual(decode_frame("PRIV", 5, b"abcdeREST"),
                         SkipKnown(b"REST"))

    def test_known_too_large(self):
        self.assertRaises(ID3CorruptFrameError,
                          decode_frame, "PRIV", 10, b"abc")

    def test_unknown_halts(self):
        data = b"\x00\x01\x02"
        res = decode_frame("XYZ1", 3, data)
        self.assertEqual(res, Halt(data))
        self.assertTrue(isinstance(res, Halt))

    def test_lowercase_text_id_halts(self):
        self.assertTrue(isinstance(decode_frame("Tabc", 1, b"\x00"), Halt))

    def test_custom_known_frames(self):
        self.assertEqual(
            decode_frame("XYZ1", 2, b"abcd", known_frames={"XYZ1"}),
            SkipKnown(b"cd"))

    def test_empty_known_frames(self):
        self.assertTrue(isinstance(
            decode_frame("PRIV", 2, b"ab", known_frames=frozenset()), Halt))
        # decoded frames don't depend on the set
        self.assertTrue(isinstance(
            decode_frame("TIT2", 2, b"\x00a", known_frames=frozenset()),
            Decoded))


class TFrames(TestCase):

    def test_frames(self):
        self.assertEqual(set(Frames), {"TXXX", "COMM", "APIC"})
        for frame_id, cls in Frames.items():
            self.assertEqual(cls().FrameID, frame_id)

    def test_known_frames(self):
        for frame_id in KNOWN_FRAMES:
            self.assertTrue(is_valid_frame_id(frame_id))
            self.assertFalse(frame_id.startswith("T"))
            self.assertFalse(frame_id in Frames)
        for frame_id in ["PRIV", "UFID", "USLT", "WXXX", "POPM", "GEOB"]:
            self.assertTrue(frame_id in KNOWN_FRAMES)


class TFrame(TestCase):

    def test_defaults(self):
        frame = UserText()
        self.assertEqual(frame.encoding, Encoding.LATIN1)
        self.assertEqual(frame.desc, "")
        self.assertEqual(frame.text, "")

    def test_repr(self):
        self.assertEqual(repr(UserText(encoding=3, desc="a", text="b")),
                         "UserText(encoding=3, desc='a', text='b')")

    def test_no_hash(self):
        self.assertRaises(TypeError, hash, UserText())

    def test_default_not_shared(self):
        frame = TextList("TIT2")
        frame.text.append("a")
        self.assertEqual(TextList("TIT3").text, [])
        self.assertEqual(TextList("TIT2").text, [])
        self.assertEqual(frame.text, ["a"])

    def test_given_value_kept(self):
        text = ["a"]
        self.assertTrue(TextList("TIT2", text=text).text is text)

    def test_base_pprint(self):
        self.assertEqual(Frame().pprint(), "XXXX=[unrepresentable data]")


class _SliceCounter(bytes):
    """bytes which keeps count of how many bytes slicing handed out"""

    sliced = 0

    def __getitem__(self, key):
        value = super().__getitem__(key)
        if isinstance(key, slice):
            type(self).sliced += len(value)
        return value


class TFrameBody(TestCase):

    def setUp(self):
        _SliceCounter.sliced = 0

    def test_tail_not_rescanned(self):
        body = b"\x00" + b"\x00" * 2000
        tail = b"\xff" * 100000
        data = _SliceCounter(body + tail)
        res = decode_frame("TIT2", len(body), data)
        self.assertEqual(res.frame.text, [""] * 2000)
        self.assertEqual(res.rest, tail)
        # the body once, the rest once
        self.assertTrue(_SliceCounter.sliced <= len(data) + len(body))

    def test_memoryview(self):
        data = b"\x03key\x00value\x00next"
        res = decode_frame("TXXX", 10, memoryview(data))
        self.assertEqual(res.frame.desc, "key")
        self.assertEqual(res.frame.text, "value")
        self.assertTrue(isinstance(res.frame.text, str))
        self.assertEqual(bytes(res.rest), b"next")

    def test_apic_data_copied_from_memoryview(self):
        buf = bytearray(b"\x00\x00\x03\x00abc")
        res = decode_frame("APIC", len(buf), memoryview(buf))
        buf[4:] = b"xyz"
        self.assertEqual(res.frame.data, b"abc")
        self.assertTrue(isinstance(res.frame.data, bytes))
