"""
cache snapshots

A snapshot lists every package a cloner pulled in, enough to repopulate the
cache later without querying providers again.
"""

__all__ = ("save_snapshot", "load_snapshot", "restore_snapshot")

import json
import os

from snakeoil.fileutils import AtomicWriteFile

from ..log import logger
from . import errors


def save_snapshot(cloner, path):
    """Write the packages cloned by ``cloner`` to ``path``.

    :raise SnapshotSaveError: on failure
    """
    repo = []
    for pkg in cloner.cloned_packages():
        repo.append({
            'Name': pkg.name,
            'Prebuilt': pkg.prebuilt,
            'Path': os.path.basename(pkg.path),
        })
    outfile = None
    try:
        try:
            outfile = AtomicWriteFile(path, binary=False)
            json.dump({'Repo': repo}, outfile, indent=2, sort_keys=True)
            outfile.write('\n')
            outfile.close()
        except OSError as e:
            raise errors.SnapshotSaveError(path, e.strerror) from e
    finally:
        if outfile is not None:
            outfile.discard()
    logger.info('saved %d cloned packages to %r', len(repo), path)


def load_snapshot(path):
    """Return the package names recorded in the snapshot at ``path``.

    :raise SnapshotRestoreError: if the file is unreadable or malformed
    """
    try:
        with open(path, 'r', encoding='utf8') as f:
            data = json.load(f)
    except OSError as e:
        raise errors.SnapshotRestoreError(path, e.strerror) from e
    except ValueError as e:
        raise errors.SnapshotRestoreError(path, f'invalid json: {e}') from e

    try:
        return [entry['Name'] for entry in data['Repo']]
    except (KeyError, TypeError) as e:
        raise errors.SnapshotRestoreError(path, f'malformed snapshot: {e!r}') from e


def restore_snapshot(cloner, path):
    """Repopulate ``cloner``'s cache with every package listed at ``path``.

    Dependencies aren't resolved again, the snapshot already lists them.

    :raise SnapshotRestoreError: on failure
    """
    packages = load_snapshot(path)
    logger.info('restoring %d packages from %r', len(packages), path)
    for package in packages:
        try:
            cloner.clone(package, clone_deps=False)
        except errors.CloneError as e:
            raise errors.SnapshotRestoreError(path, str(e)) from e
