"""
resolving a single graph node to a cached RPM
"""

__all__ = ("ResolutionContext", "NodeResolver")

import os
import threading

from ..graph import NodeType, State
from ..log import logger
from ..manifest import is_toolchain_package
from ..repo.errors import CloneError, ProviderQueryError
from ..rpm import resolve_competing_packages, rpm_package
from .errors import CloneFailed, ProviderNotFound
from .select import select_rpm_path


class ResolutionContext:
    """State shared between every node resolved during one run.

    :ivar fetched: package -> whether it was already cloned this run
    :ivar prebuilt: package -> whether its clone came from a prebuilt source
    :ivar lock: guards both mappings and the cloner when resolving in parallel
    """

    __slots__ = ('fetched', 'prebuilt', 'lock')

    def __init__(self):
        self.fetched = {}
        self.prebuilt = {}
        self.lock = threading.Lock()


class NodeResolver:
    """Resolve unresolved nodes one at a time, mutating them in place.

    Clones are memoized through the shared :obj:`ResolutionContext` so a
    package requested by many nodes is only cloned once per run.
    """

    clone_deps = True

    def __init__(self, cloner, context, toolchain_rpms, out_dir, tmp_dir,
                 solver=resolve_competing_packages):
        self.cloner = cloner
        self.context = context
        self.toolchain_rpms = toolchain_rpms
        self.out_dir = out_dir
        self.tmp_dir = tmp_dir
        self.solver = solver

    def _provider_not_found(self, node, reason=None):
        err = ProviderNotFound(node, reason)
        # implicit nodes may still be provided later on in the build, if not
        # the scheduler reports them at the end
        if node.implicit:
            logger.debug(str(err))
        else:
            logger.error(str(err))
        return err

    def _fetch(self, node):
        """Clone every provider of ``node`` not already cloned this run.

        Must be called with the context lock held.
        """
        pkg = node.versioned_pkg
        logger.debug('searching for a package which supplies: %s', pkg.name)
        try:
            packages = self.cloner.whatprovides(pkg)
        except ProviderQueryError as e:
            raise self._provider_not_found(node, e.reason) from e
        if not packages:
            raise self._provider_not_found(node)

        fetched, prebuilt = self.context.fetched, self.context.prebuilt
        for package in packages:
            if fetched.get(package):
                continue
            try:
                prebuilt[package] = self.cloner.clone(package, clone_deps=self.clone_deps)
            except CloneError as e:
                logger.error("failed to clone '%s' from RPM repo: %s", package, e.reason)
                raise CloneFailed(node, package, e.reason) from e
            fetched[package] = True
            logger.debug(
                "fetched '%s' as potential candidate (is pre-built: %s)",
                package, prebuilt[package])
        return packages

    def resolve(self, node):
        """Resolve ``node`` to an RPM in the output dir.

        :raise NodeResolveError: on failure; the node is left untouched
        """
        logger.debug('adding node %s to the cache', node.friendly_name())
        with self.context.lock:
            packages = self._fetch(node)

        path = select_rpm_path(node, packages, self.out_dir, self.tmp_dir, solver=self.solver)
        with self.context.lock:
            prebuilt = self.context.prebuilt.get(rpm_package(path), False)

        # a prebuilt toolchain package can be used as is by the scheduler,
        # notably for capabilities only discovered during the build
        if prebuilt and is_toolchain_package(path, self.toolchain_rpms):
            logger.debug('using a prebuilt toolchain package to resolve this dependency')
            node.state = State.UpToDate
            node.node_type = NodeType.PreBuilt
        else:
            node.state = State.Cached
            node.node_type = NodeType.Normal
        node.rpm_path = path

        logger.info(
            "choosing '%s' to provide '%s'", os.path.basename(path), node.versioned_pkg.name)
        return node

    __call__ = resolve
