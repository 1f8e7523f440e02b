"""MotoRun pixel stream: one image blob inside a MotoLogo archive.

A blob is ``"MotoRun\\0"``, width and height as big-endian u16, then tokens.
Each token starts with two bytes ``mode << 12 | length`` (mode 0 = raw,
mode 8 = repeat, length 1..0xFFF) followed by pixels in B, G, R order:
``length`` pixels for a raw token, one pixel for a repeat token.

Pixels are addressed as one flat row-major sequence, so a token may run
from the end of one row into the next.
"""
import logging
import struct
from typing import Iterator, NamedTuple, Tuple

import numpy as np

from .errors import BadMagic, DimensionOverflow, TokenOverrun, TruncatedStream, UnknownTokenMode

logger = logging.getLogger(__name__)

MAGIC = b'MotoRun\x00'
HEADER_SIZE = 0x0C
MAX_DIMENSION = 0xFFFF

RAW = 0x0
REPEAT = 0x8
MAX_RUN = 0xFFF


class PixelGrid:
    """Row-major RGB image, stored as a ``(width * height, 3)`` uint8 array."""
    __slots__ = ('width', 'height', 'pixels')

    def __init__(self, width: int, height: int, pixels):
        pixels = np.ascontiguousarray(np.asarray(pixels, dtype=np.uint8).reshape(-1, 3))
        if len(pixels) != width * height:
            raise ValueError(f"{width}x{height} grid needs {width * height} pixels, got {len(pixels)}")
        self.width = width
        self.height = height
        self.pixels = pixels

    @classmethod
    def blank(cls, width: int, height: int, color=(0, 0, 0)) -> 'PixelGrid':
        pixels = np.empty((width * height, 3), dtype=np.uint8)
        pixels[:] = color
        return cls(width, height, pixels)

    def pixel_at(self, x: int, y: int) -> Tuple[int, int, int]:
        r, g, b = self.pixels[y * self.width + x]
        return int(r), int(g), int(b)

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height) and np.array_equal(self.pixels, other.pixels)

    __hash__ = None

    def __repr__(self):
        return f"PixelGrid({self.width}x{self.height})"


class Token(NamedTuple):
    mode: int
    length: int
    data: bytes

    def header(self) -> bytes:
        if not 1 <= self.length <= MAX_RUN:
            raise ValueError(f"token length {self.length} outside 1..{MAX_RUN}")
        return bytes(((self.mode << 4) | (self.length >> 8), self.length & 0xFF))


def plan_tokens(grid: PixelGrid) -> Iterator[Token]:
    """Greedy token split of ``grid``.

    Two equal pixels start a repeat run covering every following copy. Anything
    else starts a raw run that continues while each pixel differs from the one
    before it. Runs longer than 0xFFF pixels are split into several tokens.
    """
    total = grid.width * grid.height
    bgr = np.ascontiguousarray(grid.pixels[:, ::-1])
    same = np.all(grid.pixels[1:] == grid.pixels[:-1], axis=1)
    # k in repeats: pixel k + 1 equals pixel k; k in changes: it differs
    repeats = np.flatnonzero(same)
    changes = np.flatnonzero(~same)

    i = 0
    while i < total:
        k = int(np.searchsorted(repeats, i))
        if k < len(repeats) and repeats[k] == i:
            c = int(np.searchsorted(changes, i))
            end = int(changes[c]) + 1 if c < len(changes) else total
            color = bgr[i].tobytes()
            n = end - i
            while n > MAX_RUN:
                yield Token(REPEAT, MAX_RUN, color)
                n -= MAX_RUN
            yield Token(REPEAT, n, color)
        else:
            end = int(repeats[k]) + 1 if k < len(repeats) else total
            end = min(end, i + MAX_RUN)
            yield Token(RAW, end - i, bgr[i:end].tobytes())
        i = end


def encode_image(grid: PixelGrid) -> bytes:
    if not (0 <= grid.width <= MAX_DIMENSION and 0 <= grid.height <= MAX_DIMENSION):
        raise DimensionOverflow(f"{grid.width}x{grid.height} does not fit in 16-bit dimensions")

    out = bytearray(MAGIC)
    out += struct.pack('>HH', grid.width, grid.height)
    tokens = 0
    for token in plan_tokens(grid):
        out += token.header()
        out += token.data
        tokens += 1
    logger.debug("encoded %dx%d in %d tokens, %d bytes", grid.width, grid.height, tokens, len(out))
    return bytes(out)


def read_header(blob: bytes) -> Tuple[int, int]:
    if bytes(blob[:8]) != MAGIC:
        raise BadMagic(f"expected {MAGIC!r}, found {bytes(blob[:8])!r}")
    if len(blob) < HEADER_SIZE:
        raise TruncatedStream(f"image header needs {HEADER_SIZE} bytes, blob has {len(blob)}")
    return struct.unpack_from('>HH', blob, 8)


def iter_tokens(blob: bytes) -> Iterator[Token]:
    """Parse tokens until the image's pixel count is covered."""
    width, height = read_header(blob)
    total = width * height
    pos, index = HEADER_SIZE, 0

    while index < total:
        if pos + 2 > len(blob):
            raise TruncatedStream(f"token header at 0x{pos:X} is past the end of the blob (pixel {index}/{total})")
        b0, b1 = blob[pos], blob[pos + 1]
        mode, length = b0 >> 4, ((b0 & 0xF) << 8) | b1
        if mode == RAW:
            size = length * 3
        elif mode == REPEAT:
            size = 3
        else:
            raise UnknownTokenMode(f"token 0x{b0:02X}{b1:02X} at 0x{pos:X} has mode 0x{mode:X}")
        if index + length > total:
            raise TokenOverrun(f"token at 0x{pos:X} covers pixels {index}..{index + length}, image has {total}")
        pos += 2
        if pos + size > len(blob):
            raise TruncatedStream(f"token at 0x{pos - 2:X} needs {size} pixel bytes, {len(blob) - pos} left")
        yield Token(mode, length, bytes(blob[pos:pos + size]))
        pos += size
        index += length

    if pos != len(blob):
        logger.debug("%d trailing bytes after the last token", len(blob) - pos)


def decode_image(blob: bytes) -> PixelGrid:
    width, height = read_header(blob)
    out = bytearray(width * height * 3)
    index = 0
    for token in iter_tokens(blob):
        start = index * 3
        if token.mode == RAW:
            out[start:start + len(token.data)] = token.data
        else:
            out[start:start + token.length * 3] = token.data * token.length
        index += token.length

    bgr = np.frombuffer(bytes(out), dtype=np.uint8).reshape(-1, 3)
    return PixelGrid(width, height, bgr[:, ::-1])
