"""
resolution runs over a whole dependency graph

A run loads the graph, resolves every unresolved run-time node (or restores
the cache from a snapshot instead), turns the cache into a local repo and
writes the graph back out. Per-node failures never stop a scan; they're
collected and, if configured, fail the run once the scan is over.
"""

__all__ = (
    "ScanResult", "scan_graph", "scan_graph_parallel", "resolve_graph_nodes",
    "initialize_cloner", "resolve_packages",
)

import logging
from functools import partial

from ..graph import read_dot_graph, write_dot_graph
from ..log import logger
from ..manifest import read_toolchain_manifest
from ..repo import DnfCloner, restore_snapshot, save_snapshot
from ..repo.errors import SnapshotRestoreError
from ..rpm import resolve_competing_packages
from ..util.thread_pool import map_async
from .errors import CachingFailed, NodeResolveError, ProviderNotFound
from .node import NodeResolver, ResolutionContext


class ScanResult:
    """Outcome of a scan.

    :ivar resolved: nodes resolved this run
    :ivar failures: ``(node, error)`` pairs for nodes that failed
    :ivar deferred: ``(node, error)`` pairs for implicit nodes nothing
        provides yet; these don't count as failures
    :ivar restore_error: snapshot restore failure, if any
    """

    __slots__ = ('resolved', 'failures', 'deferred', 'restore_error')

    def __init__(self):
        self.resolved = []
        self.failures = []
        self.deferred = []
        self.restore_error = None

    @property
    def succeeded(self):
        return not self.failures and self.restore_error is None


def _resolve_one(resolver, node):
    try:
        resolver.resolve(node)
    except NodeResolveError as e:
        return node, e
    return node, None


def _is_deferred(node, error):
    return node.implicit and isinstance(error, ProviderNotFound)


def _report_failure(graph, node, error, deferred):
    lines = [
        f"failed to resolve all nodes in the graph while resolving '{node}': {error}",
        'nodes which have this as a dependency:',
    ]
    lines.extend(f"\t'{x}' depends on '{node}'" for x in graph.dependents(node))
    logger.log(logging.DEBUG if deferred else logging.WARNING, '\n'.join(lines))


def _collect(graph, outcomes):
    result = ScanResult()
    for node, error in outcomes:
        if error is None:
            result.resolved.append(node)
            continue
        deferred = _is_deferred(node, error)
        _report_failure(graph, node, error, deferred)
        if deferred:
            result.deferred.append((node, error))
        else:
            result.failures.append((node, error))
    return result


def scan_graph(graph, resolver):
    """Resolve every unresolved run-time node of ``graph`` in turn."""
    return _collect(graph, (_resolve_one(resolver, n) for n in graph.unresolved_nodes()))


def scan_graph_parallel(graph, resolver, jobs):
    """Resolve every unresolved run-time node using ``jobs`` worker threads.

    Each worker owns the node it's resolving; the resolver's context lock
    serializes cloner access. Failures are reported once all nodes are done.
    """
    outcomes = map_async(graph.unresolved_nodes(), partial(_resolve_one, resolver), threads=jobs)
    return _collect(graph, sorted(outcomes, key=lambda x: x[0].node_id))


def resolve_graph_nodes(graph, cloner, toolchain_rpms, config, solver=resolve_competing_packages):
    """Populate the cache for ``graph`` and convert it into a repo.

    :return: :obj:`ScanResult` for the run
    :raise CachingFailed: if ``config.stop_on_failure`` is set and anything
        failed; raised before the repo is generated
    """
    if config.input_summary_file is None:
        resolver = NodeResolver(
            cloner, ResolutionContext(), toolchain_rpms,
            config.out_dir, config.tmp_dir, solver=solver)
        if config.jobs > 1:
            result = scan_graph_parallel(graph, resolver, config.jobs)
        else:
            result = scan_graph(graph, resolver)
    else:
        # a snapshot replaces resolving nodes entirely
        result = ScanResult()
        try:
            restore_snapshot(cloner, config.input_summary_file)
        except SnapshotRestoreError as e:
            logger.error(str(e))
            result.restore_error = e

    if config.stop_on_failure and not result.succeeded:
        if result.restore_error is not None:
            raise CachingFailed(reason=str(result.restore_error))
        raise CachingFailed(result.failures)

    logger.info('configuring downloaded RPMs as a local repository')
    cloner.convert_downloaded_packages_into_repo()

    if config.output_summary_file is not None:
        save_snapshot(cloner, config.output_summary_file)

    return result


def initialize_cloner(cloner, config):
    """Set up ``cloner`` according to ``config``."""
    cloner.initialize(
        config.out_dir, config.tmp_dir,
        worker_tar=config.worker_tar,
        existing_rpm_dir=config.existing_rpm_dir,
        use_preview_repo=config.use_preview_repo,
        repo_files=config.repo_files)
    if not config.disable_upstream_repos:
        cloner.add_network_files(config.tls_client_cert, config.tls_client_key)
    return cloner


def resolve_packages(config, cloner=None, solver=resolve_competing_packages):
    """Run a full resolution pass as described by ``config``.

    The graph is written to ``config.output_graph`` once resolution has
    started, even when the run fails afterwards, so leftover unresolved
    nodes stay visible to later tooling.

    :param cloner: uninitialized cloner, defaults to a :obj:`DnfCloner`
    :return: :obj:`ScanResult` for the run
    """
    graph = read_dot_graph(config.input_graph)

    toolchain_rpms = frozenset()
    if config.toolchain_manifest is not None:
        toolchain_rpms = read_toolchain_manifest(config.toolchain_manifest)

    if cloner is None:
        cloner = DnfCloner()
    with cloner:
        initialize_cloner(cloner, config)
        try:
            if graph.has_unresolved_nodes() or config.input_summary_file is not None:
                return resolve_graph_nodes(graph, cloner, toolchain_rpms, config, solver=solver)
            logger.info('no unresolved packages to cache')
            return ScanResult()
        finally:
            write_dot_graph(graph, config.output_graph)
