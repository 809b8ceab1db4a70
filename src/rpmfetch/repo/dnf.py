"""
dnf backed repo cloner

Packages are pulled with ``dnf download`` out of the configured upstream
repos plus a local repo wrapping the directory of already built RPMs. A
package counts as prebuilt when its RPM is available in that directory.
Every RPM a download adds to the cache is recorded, dependencies included,
so snapshots list the whole cache.
"""

__all__ = ("DnfCloner",)

import os
import shutil
import tarfile
import tempfile

from snakeoil.osutils import ensure_dirs, pjoin
from snakeoil.process import CommandNotFound, find_binary
from snakeoil.process.spawn import spawn_get_output
from snakeoil.sequences import stable_unique

from ..log import logger
from ..rpm import RPM_EXT, rpm_package, rpm_path
from . import errors
from .cloner import cloned_package, cloner

QUERY_FORMAT = '%{name}-%{version}-%{release}.%{arch}'


class DnfCloner(cloner):

    prebuilt_repo_id = 'rpmfetch-prebuilt'
    preview_repo_glob = '*preview*'

    def __init__(self):
        super().__init__()
        self.tmp_dir = None
        self._dnf = None
        self._work_dir = None
        self._installroot = None
        self._existing_rpm_dir = None
        self._prebuilt_rpms = frozenset()
        self._repo_files = ()
        self._use_preview_repo = False
        self._extra_opts = []

    def initialize(self, out_dir, tmp_dir, worker_tar=None, existing_rpm_dir=None,
                   use_preview_repo=False, repo_files=()):
        super().initialize(out_dir, tmp_dir, worker_tar=worker_tar,
                           existing_rpm_dir=existing_rpm_dir,
                           use_preview_repo=use_preview_repo, repo_files=repo_files)
        try:
            self._dnf = find_binary('dnf')
        except CommandNotFound as e:
            raise errors.ClonerInitError(f'missing dnf: {e}') from e

        for d in (out_dir, tmp_dir):
            if not ensure_dirs(d, mode=0o755):
                raise errors.ClonerInitError(f'failed creating directory: {d!r}')
        missing = [x for x in repo_files if not os.path.isfile(x)]
        if missing:
            raise errors.ClonerInitError(f"nonexistent repo file(s): {', '.join(missing)}")

        self.tmp_dir = tmp_dir
        self._repo_files = tuple(repo_files)
        self._use_preview_repo = use_preview_repo
        self._work_dir = tempfile.mkdtemp(prefix='rpmfetch-cloner-', dir=tmp_dir)
        os.mkdir(self._reposdir)

        if worker_tar:
            self._installroot = pjoin(self._work_dir, 'root')
            self._extract_worker(worker_tar)

        if existing_rpm_dir:
            if not os.path.isdir(existing_rpm_dir):
                raise errors.ClonerInitError(
                    f'nonexistent prebuilt RPM dir: {existing_rpm_dir!r}')
            self._existing_rpm_dir = existing_rpm_dir
            self._prebuilt_rpms = frozenset(
                f for _, _, files in os.walk(existing_rpm_dir)
                for f in files if f.endswith(RPM_EXT))
            logger.debug(
                'found %d prebuilt RPMs in %r', len(self._prebuilt_rpms), existing_rpm_dir)

    def _extract_worker(self, worker_tar):
        # newer pythons warn unless an extraction filter is chosen
        kwargs = {'filter': 'tar'} if hasattr(tarfile, 'tar_filter') else {}
        try:
            with tarfile.open(worker_tar) as tar:
                tar.extractall(self._installroot, **kwargs)
        except (OSError, tarfile.TarError) as e:
            raise errors.ClonerInitError(
                f'failed extracting worker archive {worker_tar!r}: {e}') from e

    @property
    def _reposdir(self):
        return pjoin(self._work_dir, 'repos.d')

    def add_network_files(self, tls_cert=None, tls_key=None):
        for repo_file in self._repo_files:
            try:
                shutil.copy(repo_file, self._reposdir)
            except OSError as e:
                raise errors.ClonerInitError(
                    f'failed adding repo file {repo_file!r}: {e}') from e
        if tls_cert:
            self._extra_opts.append(f'--setopt=sslclientcert={tls_cert}')
        if tls_key:
            self._extra_opts.append(f'--setopt=sslclientkey={tls_key}')

    def _base_cmd(self):
        cmd = [
            self._dnf, '--assumeyes', '--quiet',
            f'--setopt=reposdir={self._reposdir}',
            f"--setopt=cachedir={pjoin(self._work_dir, 'cache')}",
        ]
        if self._installroot is not None:
            cmd.append(f'--installroot={self._installroot}')
        if self._existing_rpm_dir is not None:
            cmd.extend((
                f'--repofrompath={self.prebuilt_repo_id},{self._existing_rpm_dir}',
                f'--setopt={self.prebuilt_repo_id}.priority=1',
                f'--setopt={self.prebuilt_repo_id}.gpgcheck=0',
            ))
        if self._use_preview_repo:
            cmd.append(f'--enablerepo={self.preview_repo_glob}')
        cmd.extend(self._extra_opts)
        return cmd

    def _query(self, term):
        cmd = self._base_cmd() + [
            'repoquery', '--latest-limit=1', f'--queryformat={QUERY_FORMAT}\\n',
            '--whatprovides', term]
        ret, out = spawn_get_output(cmd, collect_fds=(1,))
        if ret != 0:
            raise errors.ProviderQueryError(term, f'dnf exited with status {ret}')
        return [x.strip() for x in out if x.strip()]

    def whatprovides(self, pkg):
        results = None
        for term in pkg.terms():
            found = self._query(term)
            if results is None:
                results = found
            else:
                results = [x for x in results if x in found]
        return list(stable_unique(results))

    def _cached_rpms(self):
        try:
            return frozenset(x for x in os.listdir(self.out_dir) if x.endswith(RPM_EXT))
        except OSError as e:
            raise errors.CloneError(self.out_dir, f'failed listing cache: {e.strerror}') from e

    def _cloned_package(self, filename):
        return cloned_package(
            rpm_package(filename), filename in self._prebuilt_rpms, pjoin(self.out_dir, filename))

    def _clone(self, package, clone_deps):
        before = self._cached_rpms()
        cmd = self._base_cmd() + ['download', f'--destdir={self.out_dir}']
        if clone_deps:
            cmd.extend(('--resolve', '--alldeps'))
        cmd.append(package)
        ret, out = spawn_get_output(cmd, collect_fds=(1, 2))
        if ret != 0:
            reason = ''.join(out).strip() or f'dnf exited with status {ret}'
            raise errors.CloneError(package, reason)
        # dependencies pulled in alongside the package land next to it
        filename = os.path.basename(rpm_path(package, self.out_dir))
        added = sorted(self._cached_rpms() - before - {filename})
        return [self._cloned_package(x) for x in [filename] + added]

    def convert_downloaded_packages_into_repo(self):
        try:
            createrepo = find_binary('createrepo_c')
        except CommandNotFound as e:
            raise errors.RepositoryMaterializationError(
                self.out_dir, f'missing createrepo_c: {e}') from e
        ret, out = spawn_get_output(
            [createrepo, '--compatibility', '--update', self.out_dir], collect_fds=(1, 2))
        if ret != 0:
            raise errors.RepositoryMaterializationError(
                self.out_dir, ''.join(out).strip() or f'createrepo_c exited with status {ret}')

    def close(self):
        if self._work_dir is not None:
            shutil.rmtree(self._work_dir, ignore_errors=True)
            self._work_dir = None
