"""
run configuration

:obj:`Config` bundles every setting a resolution run needs. The command line
tool builds one from its parsed options, library users construct it directly.
"""

__all__ = ("Config",)


class Config:
    """Settings for a single resolution run.

    :ivar input_graph: DOT graph to resolve
    :ivar output_graph: where the updated graph is written
    :ivar out_dir: directory cloned RPMs and repo metadata land in
    :ivar tmp_dir: scratch directory
    :ivar input_summary_file: cache snapshot to restore instead of resolving
    :ivar output_summary_file: where to save a snapshot of the cache
    :ivar toolchain_manifest: file listing prebuilt toolchain RPMs
    :ivar worker_tar: archive of the environment package queries run in
    :ivar existing_rpm_dir: directory of already built RPMs
    :ivar repo_files: upstream repo definition files
    :ivar tls_client_cert: TLS client certificate for upstream repos
    :ivar tls_client_key: TLS client key for upstream repos
    :ivar disable_upstream_repos: only use local repos
    :ivar use_preview_repo: enable preview repos
    :ivar stop_on_failure: fail the run if any node couldn't be cached
    :ivar jobs: number of nodes resolved concurrently
    """

    __slots__ = (
        'input_graph', 'output_graph', 'out_dir', 'tmp_dir',
        'input_summary_file', 'output_summary_file', 'toolchain_manifest',
        'worker_tar', 'existing_rpm_dir', 'repo_files',
        'tls_client_cert', 'tls_client_key',
        'disable_upstream_repos', 'use_preview_repo', 'stop_on_failure', 'jobs',
    )

    def __init__(self, input_graph, output_graph, out_dir, tmp_dir,
                 input_summary_file=None, output_summary_file=None,
                 toolchain_manifest=None, worker_tar=None, existing_rpm_dir=None,
                 repo_files=(), tls_client_cert=None, tls_client_key=None,
                 disable_upstream_repos=False, use_preview_repo=False,
                 stop_on_failure=False, jobs=1):
        if jobs < 1:
            raise ValueError(f'jobs must be positive, got {jobs}')
        self.input_graph = input_graph
        self.output_graph = output_graph
        self.out_dir = out_dir
        self.tmp_dir = tmp_dir
        self.input_summary_file = _strip(input_summary_file)
        self.output_summary_file = _strip(output_summary_file)
        self.toolchain_manifest = _strip(toolchain_manifest)
        self.worker_tar = _strip(worker_tar)
        self.existing_rpm_dir = _strip(existing_rpm_dir)
        self.repo_files = tuple(repo_files)
        self.tls_client_cert = _strip(tls_client_cert)
        self.tls_client_key = _strip(tls_client_key)
        self.disable_upstream_repos = disable_upstream_repos
        self.use_preview_repo = use_preview_repo
        self.stop_on_failure = stop_on_failure
        self.jobs = jobs

    @classmethod
    def from_options(cls, options):
        """Create a config from a parsed commandline namespace."""
        return cls(**{k: getattr(options, k) for k in cls.__slots__ if hasattr(options, k)})

    def __repr__(self):
        attrs = ', '.join(f'{k}={getattr(self, k)!r}' for k in self.__slots__)
        return f'{self.__class__.__name__}({attrs})'


def _strip(value):
    """Map unset and whitespace only paths to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
