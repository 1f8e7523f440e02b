"""MotoLogo container: header, directory table and 256-byte aligned blobs.

Layout::

    0x00  8   "MotoLogo"
    0x08  4   (count * 0x20 + 0x0D) << 8, little-endian
    0x0C  1   reserved, 0
    0x0D  ..  count * 0x20 directory entries (name[0x18], offset i32, size i32)
    ..        blobs, each starting on a 0x100 boundary, zero padded
"""
import logging
import struct
from typing import List, NamedTuple, Sequence, Tuple

from .errors import BadDirectory, BadMagic, BadName, DirectoryOverflow, NameTooLong, TruncatedArchive

logger = logging.getLogger(__name__)

MAGIC = b'MotoLogo'
HEADER_SIZE = 0x0D
ENTRY_SIZE = 0x20
NAME_SIZE = 0x18
ALIGNMENT = 0x100

# The directory size lives in the upper three bytes of a 32-bit field.
MAX_DIRECTORY_SIZE = 0xFFFFFF
INT32_MAX = 0x7FFFFFFF

ENTRY_STRUCT = struct.Struct(f'<{NAME_SIZE}sii')


def align_up(value: int, alignment: int = ALIGNMENT) -> int:
    if alignment <= 0 or alignment & (alignment - 1):
        raise ValueError(f"alignment must be a power of two, got {alignment}")
    return (value + alignment - 1) & ~(alignment - 1)


def directory_size(count: int) -> int:
    return count * ENTRY_SIZE + HEADER_SIZE


def encode_name(name: str) -> bytes:
    """Return the NUL-padded 24-byte name slot for ``name``."""
    try:
        raw = name.encode('ascii')
    except UnicodeEncodeError:
        raise BadName(f"name is not ASCII: {name!r}") from None
    if b'\x00' in raw:
        raise BadName(f"name contains NUL: {name!r}")
    if len(raw) + 1 > NAME_SIZE:
        raise NameTooLong(f"name {name!r} is {len(raw)} bytes, at most {NAME_SIZE - 1} fit")
    return raw.ljust(NAME_SIZE, b'\x00')


class DirectoryEntry(NamedTuple):
    name: str
    offset: int
    size: int

    def pack(self) -> bytes:
        return ENTRY_STRUCT.pack(encode_name(self.name), self.offset, self.size)

    @classmethod
    def unpack(cls, data: bytes, position: int) -> 'DirectoryEntry':
        raw, offset, size = ENTRY_STRUCT.unpack_from(data, position)
        name = raw.split(b'\x00')[0].decode('ascii', errors='replace')
        return cls(name, offset, size)


def layout(sizes: Sequence[int]) -> List[int]:
    """Blob start offsets for blobs of the given sizes, in order."""
    offsets = []
    offset = align_up(directory_size(len(sizes)))
    for size in sizes:
        offsets.append(offset)
        offset = align_up(offset + size)
    return offsets


def encode_archive(entries: Sequence[Tuple[str, bytes]]) -> bytes:
    count = len(entries)
    table_size = directory_size(count)
    if table_size > MAX_DIRECTORY_SIZE:
        raise DirectoryOverflow(f"{count} entries do not fit the directory size field")

    offsets = layout([len(blob) for _, blob in entries])

    header = bytearray(HEADER_SIZE)
    header[:8] = MAGIC
    struct.pack_into('<I', header, 0x08, table_size << 8)
    logger.debug("directory: %d entries, 0x%X bytes", count, table_size)

    data = bytearray(header)
    for (name, blob), offset in zip(entries, offsets):
        if offset + len(blob) > INT32_MAX:
            raise DirectoryOverflow(f"blob '{name}' at 0x{offset:X} is past the int32 offset range")
        data += DirectoryEntry(name, offset, len(blob)).pack()
        logger.debug("entry '%s': offset 0x%X, size 0x%X", name, offset, len(blob))

    for (name, blob), offset in zip(entries, offsets):
        data += bytes(offset - len(data))
        data += blob
    data += bytes(align_up(len(data)) - len(data))

    return bytes(data)


def read_directory(data: bytes) -> List[DirectoryEntry]:
    if data[:8] != MAGIC:
        raise BadMagic(f"expected {MAGIC!r}, found {bytes(data[:8])!r}")
    if len(data) < HEADER_SIZE:
        raise TruncatedArchive(f"header needs 0x{HEADER_SIZE:X} bytes, archive has 0x{len(data):X}")

    field, reserved = struct.unpack_from('<IB', data, 0x08)
    if field & 0xFF or reserved:
        logger.debug("reserved header bytes are not zero: 0x%02X 0x%02X", field & 0xFF, reserved)

    table_size = field >> 8
    if table_size < HEADER_SIZE or (table_size - HEADER_SIZE) % ENTRY_SIZE:
        raise BadDirectory(f"directory size 0x{table_size:X} is not 0x0D + n * 0x20")
    count = (table_size - HEADER_SIZE) // ENTRY_SIZE
    if table_size > len(data):
        raise TruncatedArchive(f"directory of {count} entries ends at 0x{table_size:X}, archive has 0x{len(data):X}")

    return [DirectoryEntry.unpack(data, HEADER_SIZE + ENTRY_SIZE * i) for i in range(count)]


def decode_archive(data: bytes) -> List[Tuple[str, bytes]]:
    """Split an archive into ``(name, blob)`` pairs in directory order.

    Blob contents are not inspected here.
    """
    entries = []
    for entry in read_directory(data):
        end = entry.offset + entry.size
        if entry.offset < 0 or entry.size < 0 or end > len(data):
            raise TruncatedArchive(
                f"entry '{entry.name}' spans 0x{entry.offset:X}..0x{end:X}, archive has 0x{len(data):X}")
        entries.append((entry.name, data[entry.offset:end]))
    return entries
