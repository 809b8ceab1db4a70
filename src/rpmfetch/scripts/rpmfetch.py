"""resolve unresolved graph nodes into cached RPMs

rpmfetch scans a package dependency graph for nodes nothing has been found
for yet, clones an RPM satisfying each of them into an output directory,
turns that directory into a local repo and writes the updated graph back out
for the build scheduler.
"""

import logging

from snakeoil.cli import arghparse
from snakeoil.strings import pluralism

from ..config import Config
from ..log import logger
from ..resolver import resolve_packages

argparser = arghparse.ArgumentParser(description=__doc__, script=(__file__, __name__))

graph_opts = argparser.add_argument_group('graph options')
graph_opts.add_argument(
    '--input', dest='input_graph', required=True, type=arghparse.existent_path,
    help='input graph file')
graph_opts.add_argument(
    '--output', dest='output_graph', required=True,
    help='output graph file')
graph_opts.add_argument(
    '--toolchain-manifest', type=arghparse.existent_path,
    help='file listing RPMs that are part of the prebuilt toolchain')

cache_opts = argparser.add_argument_group('cache options')
cache_opts.add_argument(
    '--out-dir', required=True,
    help='directory to download packages into')
cache_opts.add_argument(
    '--tmp-dir', required=True,
    help='scratch directory')
cache_opts.add_argument(
    '--input-summary-file', type=arghparse.existent_path,
    help='restore the cache from this snapshot instead of resolving nodes',
    docs="""
        Restore the package cache from a snapshot previously saved with
        --output-summary-file. Nodes aren't resolved individually, the
        snapshot already lists everything needed.
    """)
cache_opts.add_argument(
    '--output-summary-file',
    help='save a snapshot of the cache contents to this file')
cache_opts.add_argument(
    '--stop-on-failure', action='store_true',
    help='fail if any node could not be cached',
    docs="""
        Exit with an error if any unresolved node couldn't be cached. Every
        node is still attempted before failing and already cloned packages
        are kept, but the local repo isn't generated.
    """)
cache_opts.add_argument(
    '-j', '--jobs', type=arghparse.positive_int, default=1,
    help='number of nodes to resolve concurrently')

repo_opts = argparser.add_argument_group('repo options')
repo_opts.add_argument(
    '--worker-tar', type=arghparse.existent_path,
    help='archive of the environment package queries run in')
repo_opts.add_argument(
    '--rpm-dir', dest='existing_rpm_dir', type=arghparse.existent_path,
    help='directory of already built RPMs')
repo_opts.add_argument(
    '--repo-file', dest='repo_files', action='append', default=[],
    type=arghparse.existent_path,
    help='upstream repo definition file (may be given multiple times)')
repo_opts.add_argument(
    '--tls-cert', dest='tls_client_cert',
    help='TLS client certificate used to access upstream repos')
repo_opts.add_argument(
    '--tls-key', dest='tls_client_key',
    help='TLS client key used to access upstream repos')
repo_opts.add_argument(
    '--disable-upstream-repos', action='store_true',
    help='only use local repos')
repo_opts.add_argument(
    '--use-preview-repo', action='store_true',
    help='enable preview repos')


@argparser.bind_final_check
def _setup_logging(parser, namespace):
    if namespace.debug or namespace.verbosity > 0:
        logger.setLevel(logging.DEBUG)
    elif namespace.verbosity < 0:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.INFO)


@argparser.bind_main_func
def main(options, out, err):
    result = resolve_packages(Config.from_options(options))
    if result.failures:
        count = len(result.failures)
        out.write(f'{count} node{pluralism(count)} left unresolved')
    if result.deferred:
        count = len(result.deferred)
        out.write(f'{count} implicit node{pluralism(count)} not provided yet')
    return 0
