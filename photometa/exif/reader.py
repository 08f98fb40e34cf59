"""Bounds-checked random-access reader over a TIFF block."""

import struct
from typing import List

from photometa.exceptions import OutOfBoundsError


class TiffReader:
    """Reads integers, rationals and ASCII strings from a TIFF block.

    All offsets are relative to the start of the block (the byte-order mark),
    which is how EXIF stores every pointer. Each read checks its range first
    and raises ``OutOfBoundsError`` instead of reading past the block.
    """

    def __init__(self, block: memoryview, little_endian: bool) -> None:
        self._block = block
        self._prefix = "<" if little_endian else ">"

    def in_range(self, offset: int, size: int) -> bool:
        """Whether ``size`` bytes starting at ``offset`` lie inside the block."""
        return offset >= 0 and size >= 0 and offset + size <= len(self._block)

    def _check(self, offset: int, size: int) -> None:
        if not self.in_range(offset, size):
            raise OutOfBoundsError(offset, size, len(self._block))

    def _unpack(self, fmt: str, offset: int, size: int) -> int:
        self._check(offset, size)
        return struct.unpack_from(self._prefix + fmt, self._block, offset)[0]

    def u8(self, offset: int) -> int:
        self._check(offset, 1)
        return self._block[offset]

    def u16(self, offset: int) -> int:
        return self._unpack("H", offset, 2)

    def u32(self, offset: int) -> int:
        return self._unpack("I", offset, 4)

    def rational(self, offset: int) -> float:
        """Read one unsigned rational; a zero denominator decodes to 0."""
        self._check(offset, 8)
        numerator = self.u32(offset)
        denominator = self.u32(offset + 4)
        if denominator == 0:
            return 0.0
        return numerator / denominator

    def rationals(self, offset: int, count: int) -> List[float]:
        """Read ``count`` consecutive rationals (8 bytes each)."""
        self._check(offset, count * 8)
        return [self.rational(offset + i * 8) for i in range(count)]

    def ascii(self, offset: int, count: int) -> str:
        """Read an EXIF ASCII value of ``count`` bytes (including the NUL).

        Bytes are taken as Latin-1, reading stops at the first NUL, and
        surrounding whitespace is stripped.
        """
        self._check(offset, count)
        raw = bytes(self._block[offset:offset + max(count - 1, 0)])
        return raw.split(b"\x00", 1)[0].decode("latin-1").strip()
