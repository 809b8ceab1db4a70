"""
toolchain manifest support

The manifest lists RPM filenames that are part of the prebuilt toolchain, one
per line.
"""

__all__ = ("ManifestError", "read_toolchain_manifest", "is_toolchain_package")

import os

from snakeoil.fileutils import readlines_ascii

from .exceptions import RpmfetchUserException
from .log import logger


class ManifestError(RpmfetchUserException):

    def __init__(self, path, reason):
        super().__init__(f'unable to read toolchain manifest file {path!r}: {reason}')
        self.path = path
        self.reason = reason


def read_toolchain_manifest(path):
    """Return the frozenset of RPM filenames listed in the manifest at ``path``.

    Blank lines and lines starting with ``#`` are skipped.
    """
    try:
        rpms = frozenset(
            x for x in readlines_ascii(path, True)
            if x and not x.startswith('#'))
    except OSError as e:
        raise ManifestError(path, e.strerror) from e
    except UnicodeDecodeError as e:
        raise ManifestError(path, f'non-ascii content: {e}') from e
    logger.debug('read %d toolchain packages from %r', len(rpms), path)
    return rpms


def is_toolchain_package(path, toolchain_rpms):
    return os.path.basename(path) in toolchain_rpms
