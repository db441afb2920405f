"""Content types, their media kinds and the extensions that map to them."""

from __future__ import annotations

import enum
import struct
from pathlib import Path


class Media(enum.Enum):
    AUDIO = "audio"
    IFRAME = "iframe"
    IMAGE = "image"
    PDF = "pdf"
    TEXT = "text"
    UNKNOWN = "unknown"
    VIDEO = "video"

    @classmethod
    def parse(cls, content_type: str) -> Media:
        for entry_type, media, _ in TABLE:
            if entry_type == content_type:
                return media
        raise ValueError(f"unknown content type: {content_type}")


TABLE: tuple[tuple[str, Media, tuple[str, ...]], ...] = (
    ("application/json", Media.TEXT, ("json",)),
    ("application/pdf", Media.PDF, ("pdf",)),
    ("application/pgp-signature", Media.TEXT, ("asc",)),
    ("application/yaml", Media.TEXT, ("yaml", "yml")),
    ("audio/flac", Media.AUDIO, ("flac",)),
    ("audio/mpeg", Media.AUDIO, ("mp3",)),
    ("audio/wav", Media.AUDIO, ("wav",)),
    ("image/apng", Media.IMAGE, ("apng",)),
    ("image/avif", Media.IMAGE, ()),
    ("image/gif", Media.IMAGE, ("gif",)),
    ("image/jpeg", Media.IMAGE, ("jpg", "jpeg")),
    ("image/png", Media.IMAGE, ("png",)),
    ("image/svg+xml", Media.IFRAME, ("svg",)),
    ("image/webp", Media.IMAGE, ("webp",)),
    ("model/gltf-binary", Media.UNKNOWN, ("glb",)),
    ("model/stl", Media.UNKNOWN, ("stl",)),
    ("text/css", Media.TEXT, ("css",)),
    ("text/html;charset=utf-8", Media.IFRAME, ("html",)),
    ("text/javascript", Media.TEXT, ("js",)),
    ("text/plain;charset=utf-8", Media.TEXT, ("txt",)),
    ("text/markdown;charset=utf-8", Media.TEXT, ("md",)),
    ("video/mp4", Media.VIDEO, ("mp4",)),
    ("video/webm", Media.VIDEO, ("webm",)),
)


def _extension(path: Path) -> str | None:
    name = path.name
    if name == "..":
        return None
    dot = name.rfind(".")
    if dot <= 0:
        return None
    return name[dot + 1:]


def content_type_for_path(path) -> str:
    """The content type for a file, chosen by its extension."""
    path = Path(path)
    extension = _extension(path)
    if extension is None:
        raise ValueError("file must have extension")
    extension = extension.lower()
    if extension == "mp4":
        check_mp4_codec(path)
    for content_type, _, extensions in TABLE:
        if extension in extensions:
            return content_type
    supported = sorted(extensions[0] for _, _, extensions in TABLE if extensions)
    raise ValueError(
        f"unsupported file extension `.{extension}`, supported extensions: {' '.join(supported)}"
    )


def _boxes(data: bytes, start: int = 0, end: int | None = None):
    end = len(data) if end is None else end
    pos = start
    while pos + 8 <= end:
        size, kind = struct.unpack_from(">I4s", data, pos)
        header = 8
        if size == 1:
            if pos + 16 > end:
                raise ValueError("truncated mp4 box")
            (size,) = struct.unpack_from(">Q", data, pos + 8)
            header = 16
        elif size == 0:
            size = end - pos
        if size < header or pos + size > end:
            raise ValueError("invalid mp4 box size")
        yield kind, pos + header, pos + size
        pos += size


def _child(data: bytes, start: int, end: int, kind: bytes):
    for box_kind, box_start, box_end in _boxes(data, start, end):
        if box_kind == kind:
            return box_start, box_end
    raise ValueError(f"{kind.decode()} box not found")


def _video_codecs(data: bytes):
    moov = next(((s, e) for k, s, e in _boxes(data) if k == b"moov"), None)
    if moov is None:
        raise ValueError("moov box not found")
    for kind, start, end in _boxes(data, *moov):
        if kind != b"trak":
            continue
        mdia = _child(data, start, end, b"mdia")
        hdlr_start, hdlr_end = _child(data, *mdia, b"hdlr")
        if hdlr_end - hdlr_start < 12:
            raise ValueError("truncated hdlr box")
        if data[hdlr_start + 8:hdlr_start + 12] != b"vide":
            continue
        minf = _child(data, *mdia, b"minf")
        stbl = _child(data, *minf, b"stbl")
        stsd_start, stsd_end = _child(data, *stbl, b"stsd")
        entry = next(iter(_boxes(data, stsd_start + 8, stsd_end)), None)
        if entry is None:
            raise ValueError("stsd box has no entries")
        yield entry[0].decode("latin-1")


def check_mp4_codec(path) -> None:
    """Reject MP4 files with video tracks not encoded as H.264."""
    data = Path(path).read_bytes()
    for codec in _video_codecs(data):
        if codec != "avc1":
            raise ValueError(
                f"Unsupported video codec, only H.264 is supported in MP4: {codec}"
            )