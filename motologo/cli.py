import argparse
import logging
import sys
from pathlib import Path

from .errors import MotoError
from .logo import LogoExtractor, LogoPacker, describe

logger = logging.getLogger(__name__)


def cmd_decode(args) -> int:
    logger.info("unpacking '%s' into '%s'", args.file_in, args.images_out)
    ok, fail = LogoExtractor(args.file_in).extract_all(args.images_out, strict=args.strict)
    return 1 if fail else 0


def cmd_encode(args) -> int:
    logger.info("packing '%s' into '%s'", args.images_in, args.file_out)
    LogoPacker(args.images_in).pack(args.file_out)
    return 0


def cmd_list(args) -> int:
    rows = describe(Path(args.file_in).read_bytes())
    print(f"{'#':>4}  {'name':<23}  {'offset':>10}  {'size':>10}  dimensions")
    for i, (entry, size) in enumerate(rows):
        dims = f"{size[0]}x{size[1]}" if size else "?"
        print(f"{i:>4}  {entry.name:<23}  0x{entry.offset:08X}  0x{entry.size:08X}  {dims}")
    print(f"{len(rows)} entries")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='motologo', description="Convert MotoLogo archives to and from PNG folders.")
    parser.add_argument('-v', '--verbose', action='store_true', help="show debug output")
    parser.add_argument('-q', '--quiet', action='store_true', help="only show warnings and errors")
    subparsers = parser.add_subparsers(dest='command', required=True)

    decode_parser = subparsers.add_parser('decode', help="extract every image of an archive as PNG")
    decode_parser.add_argument('images_out', help="output folder")
    decode_parser.add_argument('file_in', help="archive to read")
    decode_parser.add_argument('--strict', action='store_true', help="stop at the first entry that fails to decode")
    decode_parser.set_defaults(func=cmd_decode)

    encode_parser = subparsers.add_parser('encode', help="pack a folder of PNG files into an archive")
    encode_parser.add_argument('images_in', help="folder holding <name>.png files")
    encode_parser.add_argument('file_out', help="archive to write")
    encode_parser.set_defaults(func=cmd_encode)

    list_parser = subparsers.add_parser('list', help="print the archive directory")
    list_parser.add_argument('file_in', help="archive to read")
    list_parser.set_defaults(func=cmd_list)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format='%(message)s')

    try:
        return args.func(args)
    except (MotoError, OSError) as e:
        logger.error("error: %s", e)
        return 1


if __name__ == '__main__':
    sys.exit(main())
