import pytest

from rpmfetch.graph import NodeType, PkgNode, State, VersionedPkg


class TestVersionedPkg:

    def test_unversioned(self):
        pkg = VersionedPkg('bash')
        assert pkg.terms() == ('bash',)
        assert str(pkg) == 'bash'

    def test_single_bound(self):
        pkg = VersionedPkg('bash', '>=', '5.0')
        assert pkg.terms() == ('bash >= 5.0',)

    def test_interval(self):
        pkg = VersionedPkg('glibc', '>=', '2.35', '<', '2.36')
        assert pkg.terms() == ('glibc >= 2.35', 'glibc < 2.36')
        assert str(pkg) == 'glibc >= 2.35,glibc < 2.36'

    @pytest.mark.parametrize("args", (
        pytest.param(('',), id="empty name"),
        pytest.param(('bash', '>='), id="condition without version"),
        pytest.param(('bash', None, '5.0'), id="version without condition"),
        pytest.param(('bash', '~>', '5.0'), id="unknown condition"),
        pytest.param(('bash', None, None, '<', '6'), id="upper bound only"),
    ))
    def test_invalid(self, args):
        with pytest.raises(ValueError):
            VersionedPkg(*args)

    def test_eq_hash(self):
        assert VersionedPkg('bash', '=', '5') == VersionedPkg('bash', '=', '5')
        assert VersionedPkg('bash', '=', '5') != VersionedPkg('bash', '=', '6')
        assert VersionedPkg('bash') != VersionedPkg('zsh')
        assert len({VersionedPkg('bash'), VersionedPkg('bash')}) == 1


class TestPkgNode:

    def test_defaults(self):
        node = PkgNode(3, VersionedPkg('bash'))
        assert node.state == State.Unresolved
        assert node.node_type == NodeType.Normal
        assert node.rpm_path == ''
        assert not node.implicit
        assert node.unresolved
        assert node.is_run_node
        assert node.attrs == {}

    def test_build_nodes_arent_run_nodes(self):
        assert not PkgNode(1, VersionedPkg('bash'), node_type=NodeType.Build).is_run_node
        assert not PkgNode(1, VersionedPkg('bash'), node_type=NodeType.Goal).is_run_node

    def test_invalid_state(self):
        with pytest.raises(ValueError):
            PkgNode(1, VersionedPkg('bash'), state='Bogus')
        with pytest.raises(ValueError):
            PkgNode(1, VersionedPkg('bash'), node_type='Bogus')

    def test_str(self):
        node = PkgNode(7, VersionedPkg('bash', '>=', '5.0'))
        assert str(node) == '7:bash >= 5.0-Unresolved'
