"""
RPM naming helpers and competing package arbitration
"""

__all__ = ("RPM_EXT", "RpmError", "rpm_path", "rpm_package", "resolve_competing_packages")

import os
import re
import shutil
import tempfile

from snakeoil.osutils import pjoin
from snakeoil.process import CommandNotFound, find_binary
from snakeoil.process.spawn import spawn_get_output

from .exceptions import RpmfetchException
from .log import logger

RPM_EXT = '.rpm'

_obsoleted_re = re.compile(r'^\s*(?:package\s+)?(\S+) is obsoleted by (\S+)')
_conflict_re = re.compile(r'\bconflicts with\b')


class RpmError(RpmfetchException):
    """Running rpm failed."""


def rpm_path(package, out_dir):
    """Return the path a cloned ``package`` lands at inside ``out_dir``."""
    return pjoin(out_dir, f'{package}{RPM_EXT}')


def rpm_package(path):
    """Inverse of :func:`rpm_path`, the package identifier for an RPM path."""
    name = os.path.basename(path)
    if name.endswith(RPM_EXT):
        name = name[:-len(RPM_EXT)]
    return name


def _rejected(lines, packages):
    """Return the packages a test transaction refused to install together.

    Obsoleted packages are dropped. For a conflict between candidates, every
    candidate but the first listed one is dropped; a candidate conflicting
    with something outside the set is dropped outright.
    """
    rejected = set()
    for line in lines:
        m = _obsoleted_re.match(line)
        if m is not None:
            rejected.update(p for p in packages if p == m.group(1))
            continue
        if _conflict_re.search(line):
            mentioned = [p for p in packages if p in line]
            if len(mentioned) > 1:
                rejected.update(mentioned[1:])
            else:
                rejected.update(mentioned)
    return rejected


def resolve_competing_packages(tmp_dir, rpm_paths):
    """Determine which of ``rpm_paths`` can be installed together.

    A test transaction is run against an empty root under ``tmp_dir``.

    :return: the installable subset of ``rpm_paths``, in the given order
    :raise RpmError: if rpm couldn't be run or failed for an unknown reason
    """
    try:
        rpm = find_binary('rpm')
    except CommandNotFound as e:
        raise RpmError(f'missing rpm: {e}') from e

    root = tempfile.mkdtemp(prefix='rpmfetch-rpm-', dir=tmp_dir)
    try:
        cmd = [rpm, '-Uvh', '--replacefiles', '--nodeps', '--test', '--root', root]
        ret, out = spawn_get_output(cmd + list(rpm_paths), collect_fds=(1, 2))
    finally:
        shutil.rmtree(root, ignore_errors=True)

    packages = [rpm_package(x) for x in rpm_paths]
    rejected = _rejected(out, packages)
    if ret != 0 and not rejected:
        raise RpmError(
            f"rpm test transaction failed with status {ret}: {''.join(out).strip()}")
    if rejected:
        logger.debug('rpm rejected competing packages: %s', ', '.join(sorted(rejected)))
    return [path for path, pkg in zip(rpm_paths, packages) if pkg not in rejected]
