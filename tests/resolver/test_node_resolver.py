import logging

import pytest

from rpmfetch.graph import NodeType, State
from rpmfetch.resolver.errors import CloneFailed, NoInstallableCandidate, ProviderNotFound
from rpmfetch.resolver.node import NodeResolver, ResolutionContext
from rpmfetch.test.misc import FakeCloner, FakeSolver, mk_node


class TestNodeResolver:

    toolchain = frozenset(['gcc-12.2-1.x86_64.rpm'])

    def mk_resolver(self, tmp_path, solver=None, **kwargs):
        self.cloner = FakeCloner(**kwargs)
        self.cloner.initialize(str(tmp_path / 'out'), str(tmp_path / 'tmp'))
        self.context = ResolutionContext()
        self.out_dir = str(tmp_path / 'out')
        return NodeResolver(
            self.cloner, self.context, self.toolchain, self.out_dir,
            str(tmp_path / 'tmp'), solver=solver or FakeSolver())

    def test_cached(self, tmp_path):
        resolver = self.mk_resolver(tmp_path, providers={'bash': ['bash-5.1-1.x86_64']})
        node = mk_node(1, 'bash')
        assert resolver.resolve(node) is node
        assert node.state == State.Cached
        assert node.node_type == NodeType.Normal
        assert node.rpm_path == f'{self.out_dir}/bash-5.1-1.x86_64.rpm'
        assert self.cloner.clone_calls == [('bash-5.1-1.x86_64', True)]
        assert self.context.fetched == {'bash-5.1-1.x86_64': True}
        assert self.context.prebuilt == {'bash-5.1-1.x86_64': False}

    def test_prebuilt_toolchain(self, tmp_path):
        resolver = self.mk_resolver(
            tmp_path, providers={'gcc': ['gcc-12.2-1.x86_64']}, prebuilt=['gcc-12.2-1.x86_64'])
        node = mk_node(1, 'gcc')
        resolver(node)
        assert node.state == State.UpToDate
        assert node.node_type == NodeType.PreBuilt

    def test_prebuilt_outside_toolchain(self, tmp_path):
        resolver = self.mk_resolver(
            tmp_path, providers={'make': ['make-4.3-1.x86_64']}, prebuilt=['make-4.3-1.x86_64'])
        node = mk_node(1, 'make')
        resolver(node)
        assert node.state == State.Cached
        assert node.node_type == NodeType.Normal

    def test_toolchain_not_prebuilt(self, tmp_path):
        resolver = self.mk_resolver(tmp_path, providers={'gcc': ['gcc-12.2-1.x86_64']})
        node = mk_node(1, 'gcc')
        resolver(node)
        assert node.state == State.Cached

    def test_promotion_uses_chosen_provider(self, tmp_path):
        # the last cloned provider is prebuilt but the first one is chosen
        resolver = self.mk_resolver(
            tmp_path, providers={'cc': ['gcc-12.2-1.x86_64', 'clang-15-1.x86_64']},
            prebuilt=['clang-15-1.x86_64'])
        node = mk_node(1, 'cc')
        resolver(node)
        assert node.rpm_path.endswith('/gcc-12.2-1.x86_64.rpm')
        assert node.state == State.Cached

    def test_memoized_clones(self, tmp_path):
        resolver = self.mk_resolver(tmp_path, providers={
            'sh': ['bash-5.1-1.x86_64'], 'bash': ['bash-5.1-1.x86_64']})
        first, second = mk_node(1, 'sh'), mk_node(2, 'bash')
        resolver(first)
        resolver(second)
        assert self.cloner.clone_calls == [('bash-5.1-1.x86_64', True)]
        assert first.rpm_path == second.rpm_path

    def test_not_found(self, tmp_path, caplog):
        resolver = self.mk_resolver(tmp_path)
        node = mk_node(1, 'nonexistent')
        with pytest.raises(ProviderNotFound):
            resolver(node)
        assert node.state == State.Unresolved
        assert node.rpm_path == ''
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    def test_implicit_not_found(self, tmp_path, debug_logs):
        resolver = self.mk_resolver(tmp_path)
        node = mk_node(1, '/usr/bin/python3', implicit=True)
        with pytest.raises(ProviderNotFound):
            resolver(node)
        assert not [r for r in debug_logs.records if r.levelno >= logging.WARNING]
        assert "failed to find any packages providing '/usr/bin/python3'" in debug_logs.text

    def test_query_failure(self, tmp_path):
        resolver = self.mk_resolver(tmp_path, fail_query=['bash'])
        with pytest.raises(ProviderNotFound) as excinfo:
            resolver(mk_node(1, 'bash'))
        assert excinfo.value.reason == 'repo metadata unavailable'

    def test_clone_failure(self, tmp_path):
        resolver = self.mk_resolver(
            tmp_path, providers={'bash': ['bash-5.1-1.x86_64']}, fail_clone=['bash-5.1-1.x86_64'])
        node = mk_node(1, 'bash')
        with pytest.raises(CloneFailed) as excinfo:
            resolver(node)
        assert excinfo.value.package == 'bash-5.1-1.x86_64'
        assert node.state == State.Unresolved
        assert 'bash-5.1-1.x86_64' not in self.context.fetched

    def test_no_installable_candidate(self, tmp_path):
        resolver = self.mk_resolver(
            tmp_path, solver=FakeSolver(installable=[]),
            providers={'sh': ['bash-5.1-1.x86_64', 'dash-0.5-1.x86_64']})
        node = mk_node(1, 'sh')
        with pytest.raises(NoInstallableCandidate):
            resolver(node)
        assert node.state == State.Unresolved
        # candidates stay cloned for later nodes
        assert len(self.cloner.clone_calls) == 2
