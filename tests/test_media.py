import struct

import pytest

from ordinals.media import Media, check_mp4_codec, content_type_for_path


def box(kind, payload=b""):
    return struct.pack(">I4s", 8 + len(payload), kind) + payload


def mp4(codec):
    hdlr = box(b"hdlr", b"\x00" * 8 + b"vide" + b"\x00" * 12)
    stsd = box(b"stsd", b"\x00" * 4 + struct.pack(">I", 1) + box(codec, b"\x00" * 8))
    trak = box(b"trak", box(b"mdia", hdlr + box(b"minf", box(b"stbl", stsd))))
    return box(b"ftyp", b"isom\x00\x00\x00\x00") + box(b"moov", trak)


def test_for_extension():
    assert content_type_for_path("pepe.jpg") == "image/jpeg"
    assert content_type_for_path("pepe.jpeg") == "image/jpeg"
    assert content_type_for_path("pepe.JPG") == "image/jpeg"
    with pytest.raises(ValueError, match=r"unsupported file extension `\.foo`, supported extensions: apng "):
        content_type_for_path("pepe.foo")


def test_no_extension():
    with pytest.raises(ValueError, match="file must have extension"):
        content_type_for_path("pepe")


def test_parse_media():
    assert Media.parse("image/svg+xml") is Media.IFRAME
    assert Media.parse("video/mp4") is Media.VIDEO
    with pytest.raises(ValueError, match="unknown content type"):
        Media.parse("foo/bar")


def test_h264_in_mp4_is_allowed(tmp_path):
    path = tmp_path / "h264.mp4"
    path.write_bytes(mp4(b"avc1"))
    check_mp4_codec(path)
    assert content_type_for_path(path) == "video/mp4"


def test_av1_in_mp4_is_rejected(tmp_path):
    path = tmp_path / "av1.mp4"
    path.write_bytes(mp4(b"av01"))
    with pytest.raises(ValueError, match="av01"):
        check_mp4_codec(path)


def test_missing_moov(tmp_path):
    path = tmp_path / "empty.mp4"
    path.write_bytes(box(b"ftyp", b"isom"))
    with pytest.raises(ValueError, match="moov"):
        check_mp4_codec(path)