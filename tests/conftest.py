"""Shared fixtures: synthetic JPEG/EXIF byte streams."""

import struct
import zlib
from io import BytesIO
from typing import List, Optional, Sequence, Tuple

import pytest
from PIL import Image

EXIF_IFD_POINTER = 0x8769
GPS_IFD_POINTER = 0x8825

# (tag, kind, value); kind is one of ascii/short/long/byte/rationals/raw.
# For "raw", value is (type, count, payload bytes).
Entry = Tuple[int, str, object]


class TiffBuilder:
    """Lays out a TIFF block: header, IFD0, optional EXIF and GPS IFDs, data."""

    def __init__(self, little_endian: bool = True):
        self.little_endian = little_endian
        self.e = "<" if little_endian else ">"

    def _encode(self, kind: str, value) -> Tuple[int, int, bytes]:
        e = self.e
        if kind == "ascii":
            data = value.encode("latin-1") + b"\x00"
            return 2, len(data), data
        if kind == "short":
            return 3, 1, struct.pack(e + "H", value)
        if kind == "long":
            return 4, 1, struct.pack(e + "I", value)
        if kind == "byte":
            return 1, 1, bytes([value])
        if kind == "rationals":
            data = b"".join(struct.pack(e + "II", num, den) for num, den in value)
            return 5, len(value), data
        if kind == "raw":
            return value
        raise ValueError(kind)

    def build(
        self,
        ifd0: Sequence[Entry] = (),
        exif: Optional[Sequence[Entry]] = None,
        gps: Optional[Sequence[Entry]] = None,
    ) -> bytes:
        e = self.e
        ifd0 = list(ifd0)
        if exif is not None:
            ifd0.append((EXIF_IFD_POINTER, "pointer", "exif"))
        if gps is not None:
            ifd0.append((GPS_IFD_POINTER, "pointer", "gps"))

        ifds: List[Tuple[str, List[Entry]]] = [("ifd0", ifd0)]
        if exif is not None:
            ifds.append(("exif", list(exif)))
        if gps is not None:
            ifds.append(("gps", list(gps)))

        offsets = {}
        cursor = 8
        for name, entries in ifds:
            offsets[name] = cursor
            cursor += 2 + 12 * len(entries) + 4

        data_area = b""
        data_start = cursor
        body = b""
        for name, entries in ifds:
            body += struct.pack(e + "H", len(entries))
            for tag, kind, value in entries:
                if kind == "pointer":
                    field_type, count, payload = 4, 1, struct.pack(e + "I", offsets[value])
                else:
                    field_type, count, payload = self._encode(kind, value)
                if len(payload) <= 4:
                    value_field = payload.ljust(4, b"\x00")
                else:
                    value_field = struct.pack(e + "I", data_start + len(data_area))
                    data_area += payload
                    if len(data_area) % 2:
                        data_area += b"\x00"
                body += struct.pack(e + "HHI", tag, field_type, count) + value_field
            body += struct.pack(e + "I", 0)

        header = (b"II" if self.little_endian else b"MM") + struct.pack(e + "HI", 0x2A, 8)
        return header + body + data_area


def wrap_jpeg(tiff: bytes, before: bytes = b"") -> bytes:
    """Wrap a TIFF block in SOI, optional segments, an Exif APP1 segment and EOI."""
    payload = b"Exif\x00\x00" + tiff
    app1 = b"\xFF\xE1" + struct.pack(">H", len(payload) + 2) + payload
    return b"\xFF\xD8" + before + app1 + b"\xFF\xD9"


def app0_segment() -> bytes:
    payload = b"JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
    return b"\xFF\xE0" + struct.pack(">H", len(payload) + 2) + payload


@pytest.fixture
def tiff_builder():
    """Return the TiffBuilder class."""
    return TiffBuilder


@pytest.fixture
def make_jpeg():
    """Return a function that wraps a TIFF block into a JPEG byte stream."""
    return wrap_jpeg


@pytest.fixture
def app0():
    return app0_segment()


@pytest.fixture
def amsterdam_jpeg():
    """JPEG with a GPS IFD only: 52deg 22' N, 4deg 54' E."""
    tiff = TiffBuilder(little_endian=True).build(
        gps=[
            (0x0001, "ascii", "N"),
            (0x0002, "rationals", [(52, 1), (22, 1), (0, 1)]),
            (0x0003, "ascii", "E"),
            (0x0004, "rationals", [(4, 1), (54, 1), (0, 1)]),
        ]
    )
    return wrap_jpeg(tiff)


@pytest.fixture
def full_jpeg():
    """JPEG with camera, date, orientation and GPS data."""
    tiff = TiffBuilder(little_endian=False).build(
        ifd0=[
            (0x010F, "ascii", "Canon"),
            (0x0110, "ascii", "Canon EOS R5"),
            (0x0112, "short", 6),
            (0x0132, "ascii", "2024:03:16 08:00:00"),
        ],
        exif=[
            (0x9003, "ascii", "2024:03:15 10:30:00"),
        ],
        gps=[
            (0x0001, "ascii", "S"),
            (0x0002, "rationals", [(10, 1), (30, 1), (0, 1)]),
            (0x0003, "ascii", "W"),
            (0x0004, "rationals", [(20, 1), (15, 1), (0, 1)]),
            (0x0005, "byte", 0),
            (0x0006, "rationals", [(125, 10)]),
        ],
    )
    return wrap_jpeg(tiff)


def encode_image(
    size: Tuple[int, int] = (40, 20),
    fmt: str = "JPEG",
    exif: Optional[Image.Exif] = None,
    color: str = "navy",
) -> bytes:
    """Encode a solid-color image with Pillow."""
    output = BytesIO()
    img = Image.new("RGB", size, color)
    if exif is not None:
        img.save(output, format=fmt, exif=exif)
    else:
        img.save(output, format=fmt)
    return output.getvalue()


@pytest.fixture
def pillow_image():
    """Return a function that encodes a real image with Pillow."""
    return encode_image


def png_chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


@pytest.fixture
def bomb_png():
    """A tiny PNG whose header claims 30000x30000 pixels."""
    header = struct.pack(">IIBBBBB", 30000, 30000, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + png_chunk(b"IHDR", header)
        + png_chunk(b"IDAT", zlib.compress(b""))
        + png_chunk(b"IEND", b"")
    )
