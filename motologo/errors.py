class MotoError(Exception):
    """Base class for every archive and pixel stream failure."""


class BadMagic(MotoError):
    pass


class BadDirectory(MotoError):
    pass


class TruncatedArchive(MotoError):
    pass


class BadName(MotoError, ValueError):
    pass


class NameTooLong(BadName):
    pass


class DirectoryOverflow(MotoError, ValueError):
    pass


class DimensionOverflow(MotoError, ValueError):
    pass


class UnknownTokenMode(MotoError):
    pass


class TokenOverrun(MotoError):
    pass


class TruncatedStream(MotoError):
    pass
