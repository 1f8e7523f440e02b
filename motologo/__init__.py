"""Read and write MotoLogo image archives."""
from .container import DirectoryEntry, decode_archive, encode_archive
from .errors import (BadDirectory, BadMagic, BadName, DimensionOverflow, DirectoryOverflow, MotoError,
                     NameTooLong, TokenOverrun, TruncatedArchive, TruncatedStream, UnknownTokenMode)
from .logo import LogoExtractor, LogoPacker, pack_images, unpack_images
from .runlength import PixelGrid, Token, decode_image, encode_image

__version__ = '0.1.0'
