import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .container import DirectoryEntry, decode_archive, encode_archive, read_directory
from .errors import BadName, MotoError
from .images import load_image_file, save_image_file
from .runlength import PixelGrid, decode_image, encode_image, read_header

logger = logging.getLogger(__name__)

IMAGE_SUFFIX = '.png'


def image_file_name(name: str) -> str:
    """File name for entry `name`, which must stay directly inside the output folder."""
    if name in ('', '.', '..') or Path(name).name != name or '\\' in name:
        raise BadName(f"entry name {name!r} is not a plain file name")
    return f"{name}{IMAGE_SUFFIX}"


def pack_images(entries: Sequence[Tuple[str, PixelGrid]]) -> bytes:
    return encode_archive([(name, encode_image(grid)) for name, grid in entries])


def unpack_images(data: bytes) -> List[Tuple[str, PixelGrid]]:
    return [(name, decode_image(blob)) for name, blob in decode_archive(data)]


def describe(data: bytes) -> List[Tuple[DirectoryEntry, Optional[Tuple[int, int]]]]:
    """Directory entries with the image size of each blob, ``None`` when unreadable."""
    rows = []
    for entry in read_directory(data):
        size = None
        if entry.offset >= 0 and entry.size >= 0:
            try:
                size = read_header(data[entry.offset:entry.offset + entry.size])
            except MotoError as e:
                logger.debug("'%s': %s", entry.name, e)
        rows.append((entry, size))
    return rows


class LogoExtractor:
    def __init__(self, logo_path):
        self.logo_path = Path(logo_path)

    def extract_all(self, output_dir, strict: bool = False) -> Tuple[int, int]:
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        entries = decode_archive(self.logo_path.read_bytes())
        ok, fail = 0, 0

        for i, (name, blob) in enumerate(entries, 1):
            try:
                file_name = image_file_name(name)
                grid = decode_image(blob)
                save_image_file(output_path / file_name, grid)
                logger.info("[%d/%d] %s ... ✓ %dx%d", i, len(entries), name, grid.width, grid.height)
                ok += 1
            except (MotoError, OSError) as e:
                logger.warning("[%d/%d] %s ... ✗ %s", i, len(entries), name, e)
                if strict:
                    raise
                fail += 1

        logger.info("done: %d ok, %d failed", ok, fail)
        return ok, fail


class LogoPacker:
    def __init__(self, images_dir):
        self.images_dir = Path(images_dir)

    def collect(self) -> List[Path]:
        files = [p for p in self.images_dir.iterdir() if p.is_file() and p.suffix.lower() == IMAGE_SUFFIX]
        return sorted(files, key=lambda p: p.name)

    def pack(self, output_path) -> int:
        files = self.collect()
        entries = []
        for i, path in enumerate(files, 1):
            grid = load_image_file(path)
            logger.info("[%d/%d] %s ... %dx%d", i, len(files), path.stem, grid.width, grid.height)
            entries.append((path.stem, grid))

        data = pack_images(entries)
        Path(output_path).write_bytes(data)
        logger.info("wrote %s: %d images, %d bytes", output_path, len(entries), len(data))
        return len(entries)
