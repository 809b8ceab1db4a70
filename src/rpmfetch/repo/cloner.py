"""
prototype repo cloner class, all cloners should derive from this
"""

__all__ = ("cloner", "cloned_package")

from collections import namedtuple

from ..log import logger

cloned_package = namedtuple("cloned_package", ("name", "prebuilt", "path"))


class cloner:
    """Clones packages out of configured repos into a local cache directory.

    A cloner is a single shared resource for the duration of a run: it isn't
    reentrant, callers running concurrently must serialize access to it.
    It's usable as a context manager, :meth:`close` is called on exit.
    """

    def __init__(self):
        self.out_dir = None
        self._cloned = {}

    def initialize(self, out_dir, tmp_dir, worker_tar=None, existing_rpm_dir=None,
                   use_preview_repo=False, repo_files=()):
        """Prepare the cloner to download into ``out_dir``.

        :raise ClonerInitError: on failure
        """
        self.out_dir = out_dir

    def add_network_files(self, tls_cert=None, tls_key=None):
        """Enable upstream network repos, optionally with TLS client auth.

        :raise ClonerInitError: on failure
        """
        raise NotImplementedError(self, 'add_network_files')

    def whatprovides(self, pkg):
        """Return the ordered, unique package identifiers satisfying ``pkg``.

        :param pkg: :obj:`rpmfetch.graph.VersionedPkg` instance
        :raise ProviderQueryError: if the query couldn't be run
        """
        raise NotImplementedError(self, 'whatprovides')

    def _clone(self, package, clone_deps):
        """Fetch ``package`` into the cache.

        :return: sequence of :obj:`cloned_package` for every package the
            clone added to the cache, ``package`` itself first
        """
        raise NotImplementedError(self, '_clone')

    def clone(self, package, clone_deps=True):
        """Clone ``package`` (and its dependencies if ``clone_deps``).

        :return: True if the package's origin was prebuilt
        :raise CloneError: on failure
        """
        cloned = list(self._clone(package, clone_deps))
        for pkg in cloned:
            self._cloned[pkg.name] = pkg
        prebuilt = cloned[0].prebuilt
        logger.debug(
            'cloned %r (prebuilt: %s), %d package(s) added', package, prebuilt, len(cloned))
        return prebuilt

    def cloned_packages(self):
        """Return every package cloned by this instance, dependencies included,
        in clone order."""
        return list(self._cloned.values())

    def convert_downloaded_packages_into_repo(self):
        """Generate repo metadata so the cache is consumable as a repo.

        :raise RepositoryMaterializationError: on failure
        """
        raise NotImplementedError(self, 'convert_downloaded_packages_into_repo')

    def close(self):
        """Release any resources held by the cloner."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
